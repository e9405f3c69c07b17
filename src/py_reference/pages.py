"""Page inputs: everything a template needs to render one page."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from py_reference.code_index import CodeIndex
from py_reference.formatters import PublicApiClassFormatter
from py_reference.navigation import get_breadcrumb
from py_reference.reflect import structure
from py_reference.reflect.capabilities import Writable
from py_reference.reflect.class_wrapper import ClassWrapper
from py_reference.reflect.function_wrapper import FunctionWrapper
from py_reference.reflect.namespace import NamespaceWrapper
from py_reference.resolver import ReferenceResolver
from py_reference.url_linker import UrlLinker


class PageInput:
    """Base page input: where the page lives and how it links elsewhere.

    Attributes:
        template: Name of the template the renderer should use.
    """

    template = "page"

    def __init__(self, page: Writable):
        self.page = page

    @property
    def page_path(self) -> str:
        return self.page.get_page_path()

    @property
    def page_directory(self) -> str:
        return self.page.get_page_directory()

    @cached_property
    def url_linker(self) -> UrlLinker:
        return self.page.get_url_linker()


class ElementPageInput(PageInput):
    """Page of one wrapped element (class, member or function)."""

    def __init__(self, element: Any, resolver: ReferenceResolver, source_url_base: str | None = None):
        super().__init__(element)
        self.element = element
        self.resolver = resolver
        self.source_url_base = source_url_base

    @cached_property
    def breadcrumb(self) -> str:
        return get_breadcrumb(self.element)

    @cached_property
    def see_also(self) -> list[str]:
        """Rendered ``@see`` entries, description appended when present."""
        rendered = []
        for resolved in self.resolver.resolve_see_tags(self.element):
            text = self.resolver.render(resolved, self.url_linker)
            if resolved.description:
                text += f": {resolved.description}"
            rendered.append(text)
        return rendered

    @cached_property
    def manual_links(self) -> list[str]:
        """URLs from ``@book`` / ``@manual`` tags; empty when absent or invalid."""
        return self.element.get_resolved_manual_tags(self.resolver) or []

    @property
    def source_link(self) -> str | None:
        return self.element.get_source_link(self.source_url_base)

    def type_md(self, type_text: str) -> str:
        if not type_text:
            return ""
        return self.resolver.type_to_markdown(self.element, type_text, self.url_linker)


class ClassPageInput(ElementPageInput):
    template = "class"

    def __init__(self, element: ClassWrapper, resolver: ReferenceResolver, source_url_base: str | None = None):
        super().__init__(element, resolver, source_url_base)
        self.formatter = PublicApiClassFormatter(element, resolver)

    @property
    def class_type(self) -> str:
        return self.element.type_label

    @property
    def signature(self) -> str:
        return self.element.get_signature(only_api=True)

    @cached_property
    def parents(self) -> list[str]:
        return [self.type_md(name) for name in self.element.parent_names]

    @cached_property
    def interfaces(self) -> list[str]:
        return [self.type_md(name) for name in self.element.interface_names]


class _CallablePageInput(ElementPageInput):
    """Shared fields of method and function pages."""

    @property
    def signature(self) -> str:
        return self.element.get_signature(True)

    @cached_property
    def parameters(self) -> list[dict[str, Any]]:
        return [
            {
                "name": param.name,
                "signature": param.get_signature(),
                "type": param.get_type_md(self.url_linker, self.resolver),
                "default_value": param.default_value,
                "description": param.get_description(),
            }
            for param in self.element.get_parameters()
        ]

    @cached_property
    def return_type(self) -> str:
        return self.type_md(structure.get_type_text(self.element))

    @property
    def return_description(self) -> str | None:
        return self.element.get_return_description()

    @cached_property
    def throws(self) -> list[str]:
        rendered = []
        for resolved in self.resolver.resolve_throws(self.element):
            text = self.resolver.render(resolved, self.url_linker)
            if resolved.description:
                text += f": {resolved.description}"
            rendered.append(text)
        return rendered


class MethodPageInput(_CallablePageInput):
    template = "method"


class FunctionPageInput(_CallablePageInput):
    template = "function"


class PropertyPageInput(ElementPageInput):
    template = "property"

    @property
    def signature(self) -> str:
        return self.element.get_signature(True)

    @cached_property
    def type(self) -> str:
        return self.type_md(structure.get_type_text(self.element))

    @property
    def default_value(self) -> str | None:
        return self.element.default_value


class NamespacePageInput(PageInput):
    """Index page of one namespace, API classes grouped by kind."""

    template = "namespace"

    def __init__(self, namespace: NamespaceWrapper):
        super().__init__(namespace)
        self.namespace = namespace

    @cached_property
    def breadcrumb(self) -> str:
        return get_breadcrumb(self.namespace)

    @cached_property
    def classes_by_kind(self) -> dict[str, list[ClassWrapper]]:
        grouped: dict[str, list[ClassWrapper]] = defaultdict(list)
        for class_wrapper in self.namespace.api_classes.values():
            grouped[class_wrapper.type_label].append(class_wrapper)
        return {
            kind: sorted(classes, key=lambda c: c.short_name.lower())
            for kind, classes in sorted(grouped.items())
        }

    @property
    def functions(self) -> list[FunctionWrapper]:
        return sorted(self.namespace.api_functions.values(), key=lambda f: f.short_name.lower())


@dataclass
class ApiSummaryPage(Writable):
    """Top-level page listing the whole public API."""

    page_path: str = "/readme.md"

    def get_page_path(self) -> str:
        return "/" + self.page_path.lstrip("/")

    def get_page_directory(self) -> str:
        directory = self.get_page_path().rsplit("/", 1)[0]
        return directory or "/"


class ApiSummaryInput(PageInput):
    """Namespaces that contain public API, with their API classes and functions."""

    template = "api_summary"

    def __init__(self, code_index: CodeIndex, page: ApiSummaryPage | None = None):
        super().__init__(page or ApiSummaryPage())
        self.code_index = code_index

    @cached_property
    def namespaces(self) -> list[NamespaceWrapper]:
        return [ns for ns in self.code_index.namespaces.values() if ns.will_be_in_public_api]

    @property
    def main_classes(self) -> list[ClassWrapper]:
        return self.code_index.get_api_classes()
