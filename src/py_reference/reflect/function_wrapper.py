"""Module-level functions."""

from __future__ import annotations

import inspect
from functools import cached_property
from typing import TYPE_CHECKING, Any

from py_reference.docblock import DocBlock, DocTag
from py_reference.reflect import structure
from py_reference.reflect.capabilities import HasSignature, Writable
from py_reference.reflect.parameter import ParameterWrapper
from py_reference.reflect.wrapper import ReflectionWrapper
from py_reference.util import qualified_name

if TYPE_CHECKING:
    from py_reference.code_index import CodeIndex
    from py_reference.reflect.namespace import NamespaceWrapper


class FunctionWrapper(Writable, HasSignature, ReflectionWrapper):
    """Function defined at module level; documented on its own page."""

    KIND = "function"
    skips_first_parameter = False

    def __init__(self, reflection: Any, code_index: CodeIndex | None = None):
        super().__init__(reflection, qualified_name(reflection), code_index)

    @property
    def function(self) -> Any:
        return structure.unwrap_callable(self.reflection)

    def _read_docblock(self) -> DocBlock | None:
        return DocBlock.from_object(self.function)

    @property
    def module_name(self) -> str:
        return self.reflection.__module__

    @property
    def declaring_namespace(self) -> NamespaceWrapper | None:
        return self.code_index.namespaces.get(self.module_name)

    @cached_property
    def will_be_in_public_api(self) -> bool:
        return self.code_index.api_definition.is_part_of_public_api(self)

    def is_user_defined(self) -> bool:
        return inspect.isfunction(self.function)

    def is_async(self) -> bool:
        return structure.is_async(self)

    def get_modifier_names(self) -> list[str]:
        return ["async"] if self.is_async() else []

    def get_parameters(self) -> list[ParameterWrapper]:
        return structure.get_parameters(self)

    def get_return_type(self) -> str:
        return structure.get_return_type(self)

    def has_return_type(self) -> bool:
        return structure.has_return_type(self)

    def get_return_description(self) -> str | None:
        return structure.get_return_description(self)

    def get_throws(self) -> list[DocTag]:
        return structure.get_throws(self)

    def get_signature(self, with_module_name: bool = False) -> str:
        name = self.name if with_module_name else self.short_name
        return structure.callable_signature(self, name, self.get_modifier_names())

    def get_page_directory(self) -> str:
        return "/ref/" + self.module_name.replace(".", "/")

    def get_page_path(self) -> str:
        return f"{self.get_page_directory()}/function_{self.short_name}.md"
