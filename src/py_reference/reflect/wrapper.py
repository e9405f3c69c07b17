"""Base wrapper around one reflected element."""

from __future__ import annotations

import inspect
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from py_reference.docblock import DocBlock, DocTag
from py_reference.exceptions import UnsupportedOperationError
from py_reference.url_linker import UrlLinker
from py_reference.util import single_line

if TYPE_CHECKING:
    from py_reference.code_index import CodeIndex
    from py_reference.reflect.namespace import NamespaceWrapper
    from py_reference.resolver import ReferenceResolver, ResolvedTag


class ReflectionWrapper(ABC):
    """Reflected element plus its parsed documentation.

    Attributes:
        reflection: Raw Python object (class, function, property, value ...).
        name: Qualified name for classes/functions, short name for members.
        docblock: Parsed docstring, None when the element has none.
        has_api_tag: Docstring carries ``@api``.
        has_internal_tag: Docstring carries ``@internal``.
    """

    KIND = "element"

    def __init__(self, reflection: Any, name: str, code_index: CodeIndex | None = None):
        self.reflection = reflection
        self.name = name
        self._code_index_ref = weakref.ref(code_index) if code_index is not None else None
        self.docblock = self._read_docblock()
        self.has_api_tag = bool(self.docblock and self.docblock.has_tag("api"))
        self.has_internal_tag = bool(self.docblock and self.docblock.has_tag("internal"))

    def _read_docblock(self) -> DocBlock | None:
        return DocBlock.from_object(self.reflection)

    @property
    def code_index(self) -> CodeIndex:
        index = self._code_index_ref() if self._code_index_ref is not None else None
        if index is None:
            raise ReferenceError(f"{self.name} is not attached to a live code index")
        return index

    @property
    def short_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def declaring_namespace(self) -> NamespaceWrapper | None:
        return None

    @property
    @abstractmethod
    def will_be_in_public_api(self) -> bool: ...

    # -------------------------------------------------------------------------
    # Documentation
    # -------------------------------------------------------------------------

    def get_summary(self) -> str:
        return self.docblock.summary if self.docblock else ""

    def get_description(self) -> str:
        if self.docblock is None:
            return ""
        parts = [p for p in (self.docblock.summary, self.docblock.description) if p]
        return "\n\n".join(parts)

    def get_docblock_tags(self, tag: str, variable_name: str | None = None) -> list[DocTag]:
        if self.docblock is None:
            return []
        return self.docblock.get_tags(tag, variable_name)

    def get_see_tags(self) -> list[DocTag]:
        return self.get_docblock_tags("see")

    def get_docblock_tag_description(
        self, tag: str, variable_name: str | None = None
    ) -> str | None:
        tags = self.get_docblock_tags(tag, variable_name)
        return tags[0].description if tags else None

    def get_short_description_for_table(self) -> str:
        return single_line(self.get_summary())

    def get_resolved_see_tags(self, resolver: ReferenceResolver) -> list[ResolvedTag]:
        return resolver.resolve_see_tags(self)

    def get_manual_tags(self) -> list[DocTag]:
        """``@book`` then ``@manual`` tags; both name a constant holding a URL."""
        return self.get_docblock_tags("book") + self.get_docblock_tags("manual")

    def get_resolved_manual_tags(self, resolver: ReferenceResolver) -> list[str] | None:
        return resolver.resolve_manual_tags(self)

    # -------------------------------------------------------------------------
    # Source location
    # -------------------------------------------------------------------------

    def _source_object(self) -> Any:
        return self.reflection

    def get_source_file(self) -> str | None:
        try:
            return inspect.getsourcefile(inspect.unwrap(self._source_object()))
        except (TypeError, ValueError):
            return None

    def get_start_line(self) -> int | None:
        try:
            return inspect.getsourcelines(inspect.unwrap(self._source_object()))[1]
        except (OSError, TypeError, ValueError):
            return None

    def get_source_link(self, source_url_base: str | None) -> str | None:
        """Link to the element's source, e.g. ``<base>/pkg/mod.py#L12``.

        The path is taken from the last ``/src/`` segment of the source file
        when there is one, otherwise from the top-level package directory.
        """
        source_file = self.get_source_file()
        if not source_url_base or not source_file:
            return None

        path = source_file.replace("\\", "/")
        if "/src/" in path:
            path = path[path.rindex("/src/") + len("/src/"):]
        else:
            top_package = self.name.split(".", 1)[0]
            marker = f"/{top_package}/"
            if marker in path:
                path = path[path.rindex(marker) + 1:]
            else:
                path = path.rsplit("/", 1)[-1]

        link = f"{source_url_base.rstrip('/')}/{path}"
        line = self.get_start_line()
        return f"{link}#L{line}" if line else link

    # -------------------------------------------------------------------------
    # Kind-dependent operations
    # -------------------------------------------------------------------------

    def get_url_linker(self) -> UrlLinker:
        raise UnsupportedOperationError("get_url_linker", type(self).__name__)

    def get_modifier_names(self) -> list[str]:
        raise UnsupportedOperationError("get_modifier_names", type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
