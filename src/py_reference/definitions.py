"""Public API policies.

A policy decides, element by element, what belongs to the documented
public API. Policies are pure predicates over wrappers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from py_reference.exceptions import InvalidConfigurationError
from py_reference.reflect.class_wrapper import ClassWrapper
from py_reference.reflect.elements import ClassElementWrapper, MethodWrapper
from py_reference.reflect.function_wrapper import FunctionWrapper
from py_reference.reflect.wrapper import ReflectionWrapper


class PublicApiDefinition(ABC):
    """Policy deciding which elements are part of the public API."""

    @abstractmethod
    def is_part_of_public_api(self, wrapper: ReflectionWrapper) -> bool: ...


class BaseDefinition(PublicApiDefinition, ABC):
    """Shared exclusion rules. The internal tag always wins."""

    def base_exclusion(self, wrapper: ReflectionWrapper) -> bool:
        """Return True when the element is excluded whatever the policy says."""
        if wrapper.has_internal_tag:
            return True
        if isinstance(wrapper, (ClassWrapper, MethodWrapper, FunctionWrapper)):
            if not wrapper.is_user_defined():
                return True
        if isinstance(wrapper, ClassElementWrapper) and wrapper.class_wrapper.has_internal_tag:
            return True
        return False


class HasTagApi(BaseDefinition):
    """Only ``@api``-tagged elements are public.

    A class without the tag still counts as public when one of its locally
    declared public constants, properties or methods carries it.
    """

    def is_part_of_public_api(self, wrapper: ReflectionWrapper) -> bool:
        if self.base_exclusion(wrapper):
            return False
        if isinstance(wrapper, ClassElementWrapper):
            return wrapper.is_public() and wrapper.has_api_tag
        if isinstance(wrapper, ClassWrapper) and not wrapper.has_api_tag:
            return self._has_api_member(wrapper)
        return wrapper.has_api_tag

    def _has_api_member(self, class_wrapper: ClassWrapper) -> bool:
        local_public = (
            class_wrapper.get_all_constants(protected=False, private=False, non_local=False),
            class_wrapper.get_all_properties(protected=False, private=False, non_local=False),
            class_wrapper.get_all_user_defined_methods(
                protected=False, private=False, non_local=False
            ),
        )
        return any(
            self.is_part_of_public_api(member)
            for members in local_public
            for member in members.values()
        )


class IsPubliclyAccessible(BaseDefinition):
    """Everything reachable without a leading underscore is public."""

    def is_part_of_public_api(self, wrapper: ReflectionWrapper) -> bool:
        if self.base_exclusion(wrapper):
            return False
        if isinstance(wrapper, ClassElementWrapper):
            return wrapper.is_public()
        return True


API_DEFINITIONS: dict[str, type[PublicApiDefinition]] = {
    "hastagapi": HasTagApi,
    "has_tag_api": HasTagApi,
    "ispubliclyaccessible": IsPubliclyAccessible,
    "is_publicly_accessible": IsPubliclyAccessible,
}


def get_api_definition(name: str) -> PublicApiDefinition:
    """Instantiate a policy by name (case-insensitive).

    Args:
        name: "HasTagApi" or "IsPubliclyAccessible" (snake_case accepted).

    Raises:
        InvalidConfigurationError: If the name is unknown.
    """
    definition = API_DEFINITIONS.get(name.strip().lower())
    if definition is None:
        raise InvalidConfigurationError(
            f"Unknown API definition: {name}. Choose from: HasTagApi, IsPubliclyAccessible"
        )
    return definition()
