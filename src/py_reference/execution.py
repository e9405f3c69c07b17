"""One documentation run: turn the index into rendered pages."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from py_reference.code_index import CodeIndex
from py_reference.config import Config
from py_reference.exceptions import DiscoveryError
from py_reference.pages import (
    ApiSummaryInput,
    ApiSummaryPage,
    ClassPageInput,
    FunctionPageInput,
    MethodPageInput,
    NamespacePageInput,
    PageInput,
    PropertyPageInput,
)
from py_reference.reflect.class_wrapper import ClassWrapper
from py_reference.reflect.wrapper import ReflectionWrapper
from py_reference.resolver import ReferenceResolver

logger = logging.getLogger(__name__)


class PageRenderer(ABC):
    """Turns a page input into Markdown (templating lives outside this package)."""

    @abstractmethod
    def render(self, page_input: PageInput) -> str: ...


class PageWriter(ABC):
    """Persists rendered pages (filesystem backend lives outside this package)."""

    @abstractmethod
    def write(self, page_path: str, content: str) -> None: ...


class Execution:
    """Drive rendering and writing of every page of one index.

    Args:
        code_index: Built index of the documented namespace.
        renderer: Renders page inputs.
        writer: Receives page paths and rendered content.
        config: Run settings (source links, summary page path).
    """

    def __init__(
        self,
        code_index: CodeIndex,
        renderer: PageRenderer,
        writer: PageWriter,
        config: Config | None = None,
    ):
        self.code_index = code_index
        self.renderer = renderer
        self.writer = writer
        self.config = config or Config({"namespace": code_index.namespace})
        self.resolver = ReferenceResolver(code_index)
        self.written_pages: list[str] = []

    @property
    def main_nodes(self) -> list[ClassWrapper]:
        return self.code_index.get_api_classes()

    def _write(self, page_input: PageInput) -> bool:
        """Render and write a page once; repeated page paths are skipped."""
        page_path = page_input.page_path
        if page_path in self.written_pages:
            return False
        self.writer.write(page_path, self.renderer.render(page_input))
        self.written_pages.append(page_path)
        logger.debug("Wrote %s", page_path)
        return True

    def build_index(self) -> None:
        """Top-level API summary page."""
        page = ApiSummaryPage(self.config.summary_page_path)
        self._write(ApiSummaryInput(self.code_index, page))

    def build_namespace_pages(self) -> None:
        for namespace in self.code_index.namespaces.values():
            if namespace.will_be_in_public_api:
                self._write(NamespacePageInput(namespace))

    def build_pages(
        self, after_element_callback: Callable[[ReflectionWrapper], None] | None = None
    ) -> None:
        """Class pages with their API method and property pages, then function pages.

        Args:
            after_element_callback: Called with each element once its page
                is written (progress reporting).
        """
        source_url_base = self.config.source_url_base

        for class_wrapper in self.main_nodes:
            self._write(ClassPageInput(class_wrapper, self.resolver, source_url_base))
            self._notify(after_element_callback, class_wrapper)

            for method in class_wrapper.get_all_api_methods().values():
                if self._write(MethodPageInput(method, self.resolver, source_url_base)):
                    self._notify(after_element_callback, method)

            for prop in class_wrapper.get_all_api_properties().values():
                if self._write(PropertyPageInput(prop, self.resolver, source_url_base)):
                    self._notify(after_element_callback, prop)

        for function in self.code_index.api_functions_list.values():
            self._write(FunctionPageInput(function, self.resolver, source_url_base))
            self._notify(after_element_callback, function)

    @staticmethod
    def _notify(
        callback: Callable[[ReflectionWrapper], None] | None, element: ReflectionWrapper
    ) -> None:
        if callback is not None:
            callback(element)

    def run(
        self, after_element_callback: Callable[[ReflectionWrapper], None] | None = None
    ) -> list[str]:
        """Write every page.

        Returns:
            Page paths in write order.

        Raises:
            DiscoveryError: If the namespace has no public API class.
        """
        if not self.main_nodes:
            raise DiscoveryError(self.code_index.namespace, "no public API class found")
        self.build_pages(after_element_callback)
        self.build_namespace_pages()
        self.build_index()
        logger.info(
            "Generated %d pages for %s, diagnostics: %s",
            len(self.written_pages),
            self.code_index.namespace,
            self.code_index.error_collector.get_summary(),
        )
        return list(self.written_pages)
