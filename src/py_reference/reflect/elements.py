"""Class members: methods, properties and constants."""

from __future__ import annotations

import functools
import inspect
import weakref
from abc import abstractmethod
from typing import TYPE_CHECKING, Any

from py_reference.docblock import DocBlock
from py_reference.reflect import structure
from py_reference.reflect.capabilities import HasParent, HasSignature, Writable
from py_reference.reflect.parameter import ParameterWrapper
from py_reference.reflect.wrapper import ReflectionWrapper
from py_reference.util import (
    PRIVATE,
    PROTECTED,
    PUBLIC,
    attribute_docstrings,
    format_annotation,
    format_value,
    visibility_of,
)

if TYPE_CHECKING:
    from py_reference.code_index import CodeIndex
    from py_reference.docblock import DocTag
    from py_reference.reflect.class_wrapper import ClassWrapper
    from py_reference.reflect.namespace import NamespaceWrapper

# Marks an attribute that is declared (annotated) but has no class-level value
NO_VALUE = object()


class ClassElementWrapper(HasParent, HasSignature, ReflectionWrapper):
    """Member of a class, possibly inherited.

    Attributes:
        declaring_class_name: Qualified name of the class whose body defines
            the member. Resolved through the code index on demand.
        declaring_module: Module of the declaring class, used as name
            resolution context.
        visibility: ``public``, ``protected`` or ``private``.
    """

    def __init__(
        self,
        reflection: Any,
        name: str,
        class_wrapper: ClassWrapper,
        declaring_class: type,
    ):
        self._class_ref = weakref.ref(class_wrapper)
        self._declaring_type = declaring_class
        self.declaring_class_name = f"{declaring_class.__module__}.{declaring_class.__qualname__}"
        self.declaring_module = declaring_class.__module__
        self.visibility = visibility_of(name)
        super().__init__(reflection, name)

    # -------------------------------------------------------------------------
    # Relations
    # -------------------------------------------------------------------------

    @property
    def class_wrapper(self) -> ClassWrapper:
        class_wrapper = self._class_ref()
        if class_wrapper is None:
            raise ReferenceError(f"Class of member {self.name} is no longer alive")
        return class_wrapper

    @property
    def parent_wrapper(self) -> ClassWrapper:
        return self.class_wrapper

    @property
    def code_index(self) -> CodeIndex:
        return self.class_wrapper.code_index

    @property
    def declaring_class(self) -> ClassWrapper | None:
        """Declaring class wrapper, None when it lies outside the index."""
        return self.code_index.get_class_wrapper(self.declaring_class_name)

    @property
    def in_doc_parent_wrapper(self) -> ClassWrapper:
        """Class whose page directory hosts this member's documentation."""
        declaring = self.declaring_class
        if declaring is not None and declaring.will_be_in_public_api:
            return declaring
        return self.class_wrapper

    @property
    def declaring_namespace(self) -> NamespaceWrapper | None:
        return self.in_doc_parent_wrapper.declaring_namespace

    def is_local_to(self, class_wrapper: ClassWrapper) -> bool:
        return self.declaring_class_name == class_wrapper.name

    # -------------------------------------------------------------------------
    # Flags
    # -------------------------------------------------------------------------

    def is_public(self) -> bool:
        return self.visibility == PUBLIC

    def is_protected(self) -> bool:
        return self.visibility == PROTECTED

    def is_private(self) -> bool:
        return self.visibility == PRIVATE

    @abstractmethod
    def is_static(self) -> bool: ...

    @property
    def will_be_in_public_api(self) -> bool:
        class_wrapper = self.class_wrapper
        if not class_wrapper.will_be_in_public_api:
            return False
        return self.code_index.api_definition.is_part_of_public_api(self)

    def _source_object(self) -> Any:
        return self._declaring_type

    def _display_name(self, with_class_name: bool) -> str:
        if with_class_name:
            return f"{self.in_doc_parent_wrapper.short_name}.{self.name}"
        return self.name


class MethodWrapper(Writable, ClassElementWrapper):
    """Function, staticmethod or classmethod declared in a class body."""

    KIND = "method"

    @property
    def function(self) -> Any:
        return structure.unwrap_callable(self.reflection)

    @property
    def skips_first_parameter(self) -> bool:
        return not isinstance(self.reflection, staticmethod)

    def _read_docblock(self) -> DocBlock | None:
        return DocBlock.from_object(self.function)

    def _source_object(self) -> Any:
        return self.function

    def is_user_defined(self) -> bool:
        return inspect.isfunction(self.function)

    def is_static(self) -> bool:
        return isinstance(self.reflection, (staticmethod, classmethod))

    def is_class_method(self) -> bool:
        return isinstance(self.reflection, classmethod)

    def is_abstract(self) -> bool:
        return bool(getattr(self.reflection, "__isabstractmethod__", False))

    def is_async(self) -> bool:
        return structure.is_async(self)

    def get_modifier_names(self) -> list[str]:
        modifiers = []
        if self.is_abstract():
            modifiers.append("abstract")
        if isinstance(self.reflection, staticmethod):
            modifiers.append("static")
        elif self.is_class_method():
            modifiers.append("classmethod")
        if self.is_async():
            modifiers.append("async")
        return modifiers

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

    def get_signature(self, with_class_name: bool = False) -> str:
        return structure.callable_signature(
            self, self._display_name(with_class_name), self.get_modifier_names()
        )

    def get_page_directory(self) -> str:
        return self.in_doc_parent_wrapper.get_page_directory()

    def get_page_path(self) -> str:
        return f"{self.get_page_directory()}/method_{self.name}.md"


class _AttributeWrapper(ClassElementWrapper):
    """Shared behaviour of properties and constants backed by class attributes."""

    def __init__(
        self,
        reflection: Any,
        name: str,
        class_wrapper: ClassWrapper,
        declaring_class: type,
        annotation: Any = None,
    ):
        self.annotation = annotation
        super().__init__(reflection, name, class_wrapper, declaring_class)

    def _read_docblock(self) -> DocBlock | None:
        doc = attribute_docstrings(self._declaring_type).get(self.name)
        return DocBlock(doc) if doc and doc.strip() else None

    def has_default(self) -> bool:
        return self.reflection is not NO_VALUE

    @property
    def default_value(self) -> str | None:
        return format_value(self.reflection) if self.has_default() else None

    @property
    def type(self) -> str:
        if self.annotation is not None:
            return _strip_class_var(format_annotation(self.annotation))
        tags = self.get_docblock_tags("var")
        if tags and tags[0].reference:
            return tags[0].reference
        if self.has_default() and self.reflection is not None:
            return type(self.reflection).__name__
        return ""


class PropertyWrapper(Writable, _AttributeWrapper):
    """Property object, annotated attribute or plain class attribute.

    ``property``/``cached_property`` objects and instance annotations are
    non-static. ``ClassVar`` annotations and plain class attributes are static.
    """

    KIND = "property"

    def __init__(
        self,
        reflection: Any,
        name: str,
        class_wrapper: ClassWrapper,
        declaring_class: type,
        annotation: Any = None,
        static: bool = False,
    ):
        self._static = static
        super().__init__(reflection, name, class_wrapper, declaring_class, annotation)

    def is_virtual(self) -> bool:
        """Computed on access (``property``/``cached_property``)."""
        return isinstance(self.reflection, (property, functools.cached_property))

    def _read_docblock(self) -> DocBlock | None:
        if self.is_virtual():
            return DocBlock.from_object(self.reflection)
        return super()._read_docblock()

    def _getter(self) -> Any:
        if isinstance(self.reflection, property):
            return self.reflection.fget
        return getattr(self.reflection, "func", None)

    def _source_object(self) -> Any:
        if self.is_virtual() and self._getter() is not None:
            return self._getter()
        return super()._source_object()

    def is_static(self) -> bool:
        return self._static

    def is_read_only(self) -> bool:
        return isinstance(self.reflection, property) and self.reflection.fset is None

    def has_default(self) -> bool:
        return not self.is_virtual() and super().has_default()

    @property
    def type(self) -> str:
        if self.is_virtual() and self._getter() is not None:
            try:
                annotation = inspect.signature(self._getter()).return_annotation
            except (ValueError, TypeError):
                annotation = inspect.Signature.empty
            text = format_annotation(annotation)
            if text:
                return text
            tags = self.get_docblock_tags("return")
            return (tags[0].reference or "") if tags else ""
        return super().type

    def get_modifier_names(self) -> list[str]:
        modifiers = []
        if self.is_static():
            modifiers.append("static")
        if self.is_read_only():
            modifiers.append("readonly")
        return modifiers

    def get_signature(self, with_class_name: bool = False) -> str:
        signature = " ".join([*self.get_modifier_names(), self._display_name(with_class_name)])
        if self.type:
            signature += f": {self.type}"
        if self.has_default():
            signature += f" = {self.default_value}"
        return signature

    def get_page_directory(self) -> str:
        return self.in_doc_parent_wrapper.get_page_directory()

    def get_page_path(self) -> str:
        prefix = "static_" if self.is_static() else ""
        return f"{self.get_page_directory()}/{prefix}property_{self.name}.md"


class ClassConstantWrapper(_AttributeWrapper):
    """UPPER_CASE class attribute. Documented on its class page only."""

    KIND = "constant"

    def is_static(self) -> bool:
        return True

    def get_modifier_names(self) -> list[str]:
        return []

    def get_signature(self, with_class_name: bool = False) -> str:
        signature = self._display_name(with_class_name)
        if self.annotation is not None and self.type:
            signature += f": {self.type}"
        return f"{signature} = {self.default_value}"


class EnumCaseWrapper(_AttributeWrapper):
    """One member of an enum."""

    KIND = "case"

    def is_static(self) -> bool:
        return True

    @property
    def value(self) -> Any:
        return self.reflection.value

    def get_modifier_names(self) -> list[str]:
        return []

    def get_signature(self, with_class_name: bool = False) -> str:
        return f"{self._display_name(with_class_name)} = {format_value(self.value)}"


def _strip_class_var(text: str) -> str:
    """``ClassVar[int]`` -> ``int``."""
    for prefix in ("typing.ClassVar[", "ClassVar["):
        if text.startswith(prefix) and text.endswith("]"):
            return text[len(prefix):-1]
    return text
