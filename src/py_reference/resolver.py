"""Cross-reference resolution for ``@see``/``@throws`` tags and type hints.

Every textual reference ends in one of three states:

- found in the index: linked to the element page;
- dangling (looks like it belongs to the indexed namespace but is not in
  the index): rendered as plain code and reported once as a WARNING;
- external (stdlib, third party): rendered as plain code, no diagnostic.

Resolution never raises.
"""

from __future__ import annotations

import builtins
import enum
import inspect
import re
import sys
from dataclasses import dataclass
from typing import Any

from py_reference.code_index import CodeIndex
from py_reference.docblock import DocTag
from py_reference.exceptions import UnresolvableReferenceError
from py_reference.reflect import structure
from py_reference.reflect.capabilities import Writable
from py_reference.reflect.class_wrapper import ClassWrapper
from py_reference.reflect.elements import ClassElementWrapper, MethodWrapper
from py_reference.reflect.function_wrapper import FunctionWrapper
from py_reference.reflect.namespace import NamespaceWrapper
from py_reference.reflect.parameter import ParameterWrapper
from py_reference.url_linker import UrlLinker
from py_reference.util import import_dotted, module_imports, qualified_name

# Regex: scheme://... (any URL scheme)
URL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
# Names that never need resolving in a type expression
LITERAL_TYPES = frozenset({"None", "...", "Ellipsis"})


@dataclass
class ResolvedTag:
    """Outcome of resolving one reference.

    Attributes:
        reference: Text as written in the docstring or annotation.
        destination: Wrapper, URL string, or None when unresolved.
        tag: Originating doc tag, if any.
        is_external: Unresolved and outside the indexed namespace.
        is_dangling: Unresolved but inside the indexed namespace.
    """

    reference: str
    destination: Any = None
    tag: DocTag | None = None
    is_external: bool = False
    is_dangling: bool = False

    @property
    def is_url(self) -> bool:
        return isinstance(self.destination, str)

    @property
    def description(self) -> str:
        return self.tag.description if self.tag else ""


def split_type_expression(text: str) -> tuple[list[str], list[str]]:
    """Split ``A | B[C | D] & E`` on top-level ``|``/``&``.

    Returns:
        (parts, separators); parts keep their surrounding whitespace.
    """
    parts: list[str] = []
    separators: list[str] = []
    depth = 0
    start = 0
    for i, char in enumerate(text):
        if char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
        elif char in "|&" and depth == 0:
            parts.append(text[start:i])
            separators.append(char)
            start = i + 1
    parts.append(text[start:])
    return parts, separators


def _split_arguments(text: str) -> list[str]:
    arguments: list[str] = []
    depth = 0
    start = 0
    for i, char in enumerate(text):
        if char in "[(":
            depth += 1
        elif char in "])":
            depth -= 1
        elif char == "," and depth == 0:
            arguments.append(text[start:i])
            start = i + 1
    arguments.append(text[start:])
    return [a.strip() for a in arguments if a.strip()]


class ReferenceResolver:
    """Turn references into index elements and Markdown.

    Args:
        code_index: Index to resolve against. Its error collector receives the
            dangling reference warnings.
    """

    def __init__(self, code_index: CodeIndex):
        self.code_index = code_index

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def resolve_tags(self, wrapper: Any, tags: list[DocTag]) -> list[ResolvedTag]:
        resolved = []
        for tag in tags:
            if not tag.reference:
                continue
            result = self.resolve_reference(wrapper, tag.reference)
            result.tag = tag
            resolved.append(result)
        return resolved

    def resolve_see_tags(self, wrapper: Any) -> list[ResolvedTag]:
        """Resolved ``@see`` tags, without references back to the element itself."""
        return [
            resolved
            for resolved in self.resolve_tags(wrapper, wrapper.get_see_tags())
            if resolved.destination is not wrapper
        ]

    def resolve_throws(self, wrapper: Any) -> list[ResolvedTag]:
        return self.resolve_tags(wrapper, structure.get_throws(wrapper))

    def resolve_manual_tags(self, wrapper: Any) -> list[str] | None:
        """External documentation URLs named by ``@book`` / ``@manual`` tags.

        Each tag names a constant (module attribute, class attribute or enum
        member) holding the URL. One invalid tag voids the whole list and is
        reported as a WARNING.

        Returns:
            URLs in tag order, or None when there are no tags or one is invalid.
        """
        tags = wrapper.get_manual_tags()
        if not tags:
            return None

        resolved = []
        for tag in tags:
            try:
                value = import_dotted(tag.description.split(" ", 1)[0])
                if isinstance(value, enum.Enum):
                    value = value.value
                if not isinstance(value, str):
                    raise TypeError(f"'{tag.description}' does not hold a string")
            # Importing the named module runs its code, which may raise anything
            except Exception as e:
                self.code_index.error_collector.add_warning(
                    f"Invalid @manual or @book tag: {e}",
                    context=f"Element: {wrapper.name}",
                    element=wrapper,
                )
                return None
            resolved.append(value)
        return resolved

    def resolve_reference(self, wrapper: Any, reference: str) -> ResolvedTag:
        """Resolve a ``@see``-style reference.

        Accepts URLs, ``Class``, ``Class.member``, ``Class.method()``,
        ``function()`` and ``member()`` relative to the current class.
        """
        text = reference.strip().strip("`").lstrip("~")
        if URL_PATTERN.match(text):
            return ResolvedTag(reference, destination=text)
        destination, candidate = self._lookup(wrapper, text, allow_members=True)
        if destination is not None:
            return ResolvedTag(reference, destination=destination)
        return self._unresolved(wrapper, reference, candidate)

    def resolve_type(self, wrapper: Any, type_name: str) -> ResolvedTag:
        """Resolve one type name (no union, no generic arguments)."""
        text = type_name.strip().strip("'\"")
        destination, candidate = self._lookup(wrapper, text, allow_members=False)
        if destination is not None:
            return ResolvedTag(type_name, destination=destination)
        return self._unresolved(wrapper, type_name, candidate)

    # -------------------------------------------------------------------------
    # Markdown
    # -------------------------------------------------------------------------

    def type_to_markdown(self, wrapper: Any, type_text: str, url_linker: UrlLinker) -> str:
        """Render a type expression, linking every indexed type.

        Union and intersection members are rendered one by one and joined
        back with their original separator and spacing.
        """
        parts, separators = split_type_expression(type_text)
        rendered = []
        for i, part in enumerate(parts):
            stripped = part.strip()
            leading = part[: len(part) - len(part.lstrip())]
            trailing = part[len(part.rstrip()):]
            segment = self._type_segment_to_markdown(wrapper, stripped, url_linker)
            rendered.append(leading + segment + trailing)
            if i < len(separators):
                rendered.append(separators[i])
        return "".join(rendered)

    def _type_segment_to_markdown(self, wrapper: Any, segment: str, url_linker: UrlLinker) -> str:
        if not segment:
            return ""
        if segment in LITERAL_TYPES:
            return f"`{segment}`"
        if "[" in segment and segment.endswith("]"):
            base, _, inner = segment[:-1].partition("[")
            arguments = ", ".join(
                self.type_to_markdown(wrapper, argument, url_linker)
                for argument in _split_arguments(inner)
            )
            return f"{self._type_segment_to_markdown(wrapper, base, url_linker)}\\[{arguments}\\]"

        resolved = self.resolve_type(wrapper, segment)
        if resolved.destination is None:
            plain = segment.strip("'\"")
            return f"`{plain}`"
        return self.link(resolved.destination, url_linker, self._short_text(resolved.destination))

    def render(self, resolved: ResolvedTag, url_linker: UrlLinker) -> str:
        if resolved.is_url:
            return f"[{resolved.destination}]({resolved.destination})"
        if resolved.destination is None:
            return f"`{resolved.reference.strip().strip('`')}`"
        return self.link(resolved.destination, url_linker)

    def link(self, destination: Any, url_linker: UrlLinker, text: str | None = None) -> str:
        """Markdown link to an element; constants link to their class page."""
        page = destination
        if not isinstance(destination, Writable):
            page = destination.in_doc_parent_wrapper
        return f"[`{text or self.link_text(destination)}`]({url_linker.to(page)})"

    @staticmethod
    def link_text(destination: Any) -> str:
        if isinstance(destination, ClassElementWrapper):
            suffix = "()" if isinstance(destination, MethodWrapper) else ""
            return f"{destination.in_doc_parent_wrapper.short_name}.{destination.name}{suffix}"
        if isinstance(destination, FunctionWrapper):
            return f"{destination.short_name}()"
        if isinstance(destination, NamespaceWrapper):
            return destination.namespace
        return destination.short_name

    @staticmethod
    def _short_text(destination: Any) -> str:
        if isinstance(destination, ClassElementWrapper):
            return destination.name
        return destination.short_name

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _lookup(self, wrapper: Any, text: str, allow_members: bool) -> tuple[Any, str | None]:
        """Find the element a reference designates.

        Returns:
            (destination or None, qualified candidate or None for builtins).
        """
        body = text.removesuffix("()").lstrip(".").replace("$", "")
        if not body:
            return None, None
        head, _, rest = body.partition(".")

        class_context = self._class_context(wrapper)
        if allow_members and not rest and class_context is not None:
            element = class_context.get_element_by_name(head)
            if element is not None:
                return element, f"{class_context.name}.{head}"

        qualified = self._qualify(wrapper, head, dotted=bool(rest))
        if qualified is None:
            return None, None
        candidate = f"{qualified}.{rest}" if rest else qualified
        return self._find(candidate, allow_members), candidate

    def _find(self, candidate: str, allow_members: bool) -> Any:
        found = self.code_index.get_class_wrapper(candidate) or self.code_index.get_function_wrapper(
            candidate
        )
        if found is not None:
            return found
        if not allow_members:
            return None
        if candidate in self.code_index.namespaces:
            return self.code_index.namespaces[candidate]
        try:
            return self.code_index.get_element(candidate)
        except UnresolvableReferenceError:
            return None

    def _qualify(self, wrapper: Any, head: str, dotted: bool = False) -> str | None:
        """Dotted name a head identifier stands for in the element's module.

        Import statements (including ``TYPE_CHECKING`` ones) win, then module
        globals, then loaded top-level modules. Builtins give None. An unknown
        head is prefixed with the element's module only when it stands alone;
        the head of a dotted reference is kept as written.
        """
        modules = self._context_modules(wrapper)
        for module_name in modules:
            imports = module_imports(module_name)
            if head in imports:
                return imports[head]
            module = sys.modules.get(module_name)
            obj = vars(module).get(head) if module is not None else None
            if obj is None:
                continue
            if inspect.ismodule(obj):
                return obj.__name__
            if inspect.isclass(obj) or inspect.isroutine(obj):
                return qualified_name(obj)
            return f"{module_name}.{head}"

        if head in sys.modules or head == self.code_index.namespace.split(".", 1)[0]:
            return head
        if hasattr(builtins, head):
            return None
        if dotted or not modules:
            return head
        return f"{modules[0]}.{head}"

    def _context_modules(self, wrapper: Any) -> list[str]:
        if isinstance(wrapper, ParameterWrapper):
            return self._context_modules(wrapper.parent_wrapper)
        if isinstance(wrapper, ClassElementWrapper):
            modules = [wrapper.declaring_module, wrapper.class_wrapper.module_name]
            return list(dict.fromkeys(modules))
        if isinstance(wrapper, (ClassWrapper, FunctionWrapper)):
            return [wrapper.module_name]
        if isinstance(wrapper, NamespaceWrapper):
            return [wrapper.namespace]
        return []

    def _class_context(self, wrapper: Any) -> ClassWrapper | None:
        if isinstance(wrapper, ParameterWrapper):
            return self._class_context(wrapper.parent_wrapper)
        if isinstance(wrapper, ClassElementWrapper):
            return wrapper.class_wrapper
        if isinstance(wrapper, ClassWrapper):
            return wrapper
        return None

    def _unresolved(self, wrapper: Any, reference: str, candidate: str | None) -> ResolvedTag:
        root = self.code_index.namespace
        if candidate and (candidate == root or candidate.startswith(root + ".")):
            self.code_index.error_collector.add_warning(
                f"Failed to resolve reference '{reference}' ({candidate})",
                context=f"Element: {wrapper.name}",
                element=wrapper,
            )
            return ResolvedTag(reference, is_dangling=True)
        return ResolvedTag(reference, is_external=True)
