"""Function and method parameters."""

from __future__ import annotations

import inspect
import weakref
from typing import TYPE_CHECKING, Any

from py_reference.docblock import DocBlock
from py_reference.reflect.capabilities import HasParent, HasSignature
from py_reference.reflect.wrapper import ReflectionWrapper
from py_reference.url_linker import UrlLinker
from py_reference.util import format_annotation, format_value

if TYPE_CHECKING:
    from py_reference.resolver import ReferenceResolver


class ParameterWrapper(HasParent, HasSignature, ReflectionWrapper):
    """One parameter of a function or method.

    Holds a weak reference to the callable wrapper it belongs to.
    """

    KIND = "parameter"

    def __init__(self, parameter: inspect.Parameter, position: int, function_wrapper: Any):
        self._parent_ref = weakref.ref(function_wrapper)
        self.position = position
        super().__init__(parameter, parameter.name)

    def _read_docblock(self) -> DocBlock | None:
        return None

    @property
    def parent_wrapper(self) -> Any:
        parent = self._parent_ref()
        if parent is None:
            raise ReferenceError(f"Owner of parameter {self.name} is no longer alive")
        return parent

    @property
    def will_be_in_public_api(self) -> bool:
        return self.parent_wrapper.will_be_in_public_api

    @property
    def kind(self) -> inspect._ParameterKind:
        return self.reflection.kind

    @property
    def type(self) -> str:
        """Annotation text, falling back to the type named in the docstring."""
        annotation = format_annotation(self.reflection.annotation)
        if annotation:
            return annotation
        tags = self.parent_wrapper.get_docblock_tags("param", self.name)
        return (tags[0].reference or "") if tags else ""

    def has_default(self) -> bool:
        return self.reflection.default is not inspect.Parameter.empty

    @property
    def default_value(self) -> str | None:
        return format_value(self.reflection.default) if self.has_default() else None

    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY

    def is_positional_only(self) -> bool:
        return self.kind is inspect.Parameter.POSITIONAL_ONLY

    def is_passed_by_reference(self) -> bool:
        return False

    def get_description(self) -> str:
        return self.parent_wrapper.get_docblock_tag_description("param", self.name) or ""

    def get_signature(self) -> str:
        prefix = {
            inspect.Parameter.VAR_POSITIONAL: "*",
            inspect.Parameter.VAR_KEYWORD: "**",
        }.get(self.kind, "")
        signature = prefix + self.name
        if self.type:
            signature += f": {self.type}"
        if self.has_default():
            signature += f" = {self.default_value}" if self.type else f"={self.default_value}"
        return signature

    def get_type_md(self, url_linker: UrlLinker, resolver: ReferenceResolver) -> str:
        if not self.type:
            return ""
        return resolver.type_to_markdown(self.parent_wrapper, self.type, url_linker)
