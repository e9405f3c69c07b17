"""Namespace (module) wrappers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from py_reference.reflect.capabilities import Writable

if TYPE_CHECKING:
    from py_reference.reflect.class_wrapper import ClassWrapper
    from py_reference.reflect.function_wrapper import FunctionWrapper

HierarchyEntry = Union["NamespaceWrapper", str]


class NamespaceWrapper(Writable):
    """One module of the indexed namespace.

    Attributes:
        namespace: Dotted module path.
        classes: Classes defined directly in the module, by qualified name.
        functions: Functions defined directly in the module, by qualified name.
        hierarchy: Ancestor modules, outermost first. Indexed ancestors are
            wrappers, the others plain dotted strings.
    """

    def __init__(self, namespace: str, index_file_name: str = "readme"):
        self.namespace = namespace
        self.index_file_name = index_file_name
        self.classes: dict[str, ClassWrapper] = {}
        self.functions: dict[str, FunctionWrapper] = {}
        self._hierarchy: list[HierarchyEntry] | None = None

    @property
    def name(self) -> str:
        return self.namespace

    @property
    def short_name(self) -> str:
        return self.namespace.rsplit(".", 1)[-1]

    @property
    def hierarchy(self) -> list[HierarchyEntry]:
        return list(self._hierarchy or [])

    def set_hierarchy(self, hierarchy: list[HierarchyEntry]) -> None:
        """Attach the ancestor chain. Only allowed once."""
        if self._hierarchy is not None:
            raise RuntimeError(f"Hierarchy of {self.namespace} is already set")
        self._hierarchy = list(hierarchy)

    @property
    def elements(self) -> dict[str, ClassWrapper | FunctionWrapper]:
        return {**self.classes, **self.functions}

    @property
    def api_classes(self) -> dict[str, ClassWrapper]:
        return {name: c for name, c in self.classes.items() if c.will_be_in_public_api}

    @property
    def api_functions(self) -> dict[str, FunctionWrapper]:
        return {name: f for name, f in self.functions.items() if f.will_be_in_public_api}

    @property
    def api_elements(self) -> dict[str, ClassWrapper | FunctionWrapper]:
        return {**self.api_classes, **self.api_functions}

    @property
    def will_be_in_public_api(self) -> bool:
        return bool(self.api_elements)

    def get_page_directory(self) -> str:
        return "/ref/" + self.namespace.replace(".", "/")

    def get_page_path(self) -> str:
        return f"{self.get_page_directory()}/{self.index_file_name}.md"

    def __repr__(self) -> str:
        return f"NamespaceWrapper({self.namespace!r})"
