"""Index of every class and function under one namespace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from py_reference.definitions import HasTagApi, PublicApiDefinition
from py_reference.diagnostics import ErrorCollector
from py_reference.discovery import discover
from py_reference.exceptions import UnresolvableReferenceError
from py_reference.reflect.class_wrapper import ClassWrapper, wrap_class
from py_reference.reflect.elements import ClassElementWrapper
from py_reference.reflect.function_wrapper import FunctionWrapper
from py_reference.reflect.namespace import HierarchyEntry, NamespaceWrapper
from py_reference.util import qualified_name

if TYPE_CHECKING:
    from py_reference.config import Config

logger = logging.getLogger(__name__)


class CodeIndex:
    """Root aggregate of one documentation run.

    Built once on construction. Owns every class and function wrapper; the
    wrappers only hold weak references back to the index.

    Attributes:
        namespace: Dotted name of the indexed root package.
        api_definition: Active public API policy.
        error_collector: Receives non-fatal diagnostics.
    """

    def __init__(
        self,
        namespace: str,
        api_definition: PublicApiDefinition | None = None,
        error_collector: ErrorCollector | None = None,
        index_file_name: str = "readme",
    ):
        self.namespace = namespace.strip(".")
        self.api_definition = api_definition or HasTagApi()
        self.error_collector = error_collector if error_collector is not None else ErrorCollector()
        self.index_file_name = index_file_name
        self._classes: dict[str, ClassWrapper] = {}
        self._functions: dict[str, FunctionWrapper] = {}
        self._namespaces: dict[str, NamespaceWrapper] = {}
        self.build()

    @classmethod
    def from_config(cls, config: Config, error_collector: ErrorCollector | None = None) -> CodeIndex:
        return cls(
            config.namespace,
            api_definition=config.get_api_definition(),
            error_collector=error_collector,
            index_file_name=config.index_file_name,
        )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def build(self) -> None:
        """Discover the namespace and wrap every class and function once."""
        result = discover(self.namespace, self.error_collector)
        for cls in result.classes:
            self.add_class(cls)
        for function in result.functions:
            self.add_function(function)
        self._build_namespaces()
        logger.info(
            "Indexed %s: %d classes, %d functions, %d namespaces",
            self.namespace,
            len(self._classes),
            len(self._functions),
            len(self._namespaces),
        )

    def add_class(self, cls: type) -> ClassWrapper:
        """Wrap a class; a class path already indexed keeps its first wrapper."""
        name = qualified_name(cls)
        if name not in self._classes:
            self._classes[name] = wrap_class(cls, self)
        return self._classes[name]

    def add_function(self, function: Any) -> FunctionWrapper:
        name = qualified_name(function)
        if name not in self._functions:
            self._functions[name] = FunctionWrapper(function, self)
        return self._functions[name]

    def _build_namespaces(self) -> None:
        namespaces: dict[str, NamespaceWrapper] = {}

        def get(module_name: str) -> NamespaceWrapper:
            if module_name not in namespaces:
                namespaces[module_name] = NamespaceWrapper(module_name, self.index_file_name)
            return namespaces[module_name]

        for name, class_wrapper in self._classes.items():
            get(class_wrapper.module_name).classes[name] = class_wrapper
        for name, function_wrapper in self._functions.items():
            get(function_wrapper.module_name).functions[name] = function_wrapper

        self._namespaces = {name: namespaces[name] for name in sorted(namespaces)}
        for namespace in self._namespaces.values():
            namespace.set_hierarchy(self._hierarchy_of(namespace.namespace))

    def _hierarchy_of(self, namespace: str) -> list[HierarchyEntry]:
        parts = namespace.split(".")
        ancestors = [".".join(parts[:i]) for i in range(1, len(parts))]
        return [self._namespaces.get(ancestor, ancestor) for ancestor in ancestors]

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @property
    def namespaces(self) -> dict[str, NamespaceWrapper]:
        return self._namespaces

    @property
    def classes_list(self) -> dict[str, ClassWrapper]:
        return self._classes

    @property
    def functions_list(self) -> dict[str, FunctionWrapper]:
        return self._functions

    @property
    def elements_list(self) -> dict[str, ClassWrapper | FunctionWrapper]:
        return {**self._classes, **self._functions}

    @property
    def api_classes_list(self) -> dict[str, ClassWrapper]:
        return {name: c for name, c in self._classes.items() if c.will_be_in_public_api}

    @property
    def api_functions_list(self) -> dict[str, FunctionWrapper]:
        return {name: f for name, f in self._functions.items() if f.will_be_in_public_api}

    @property
    def api_elements_list(self) -> dict[str, ClassWrapper | FunctionWrapper]:
        return {**self.api_classes_list, **self.api_functions_list}

    def get_public_classes(self) -> list[ClassWrapper]:
        return list(self.api_classes_list.values())

    def get_api_classes(self) -> list[ClassWrapper]:
        return self.get_public_classes()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_class_wrapper(self, name: str) -> ClassWrapper | None:
        """Class by qualified name; None when it is not in this index.

        Wrappers only hold a weak reference to their index: keep the index
        alive while the wrapper is in use, otherwise index-backed properties
        such as ``will_be_in_public_api`` raise ``ReferenceError``.
        """
        return self._classes.get(name.strip().lstrip("."))

    def get_function_wrapper(self, name: str) -> FunctionWrapper | None:
        return self._functions.get(name.strip().lstrip(".").removesuffix("()"))

    def get_element(self, path: str) -> ClassElementWrapper:
        """Resolve ``pkg.mod.Class.member`` (``member()`` accepted for methods).

        Raises:
            UnresolvableReferenceError: If the path has no member separator,
                the class is not indexed, or the class has no such member.
        """
        reference = path.strip().lstrip(".")
        class_name, separator, member = reference.rpartition(".")
        if not separator or not class_name or not member:
            raise UnresolvableReferenceError(
                path, f"Malformed element path '{path}', expected 'module.Class.member'"
            )

        class_wrapper = self.get_class_wrapper(class_name)
        if class_wrapper is None:
            raise UnresolvableReferenceError(path, f"Class not found in index: {class_name}")

        member = member.removesuffix("()").lstrip("$")
        element = class_wrapper.get_element_by_name(member)
        if element is None:
            raise UnresolvableReferenceError(
                path, f"Element '{member}' not found in class {class_name}"
            )
        return element

    def __contains__(self, name: str) -> bool:
        return name in self._classes or name in self._functions
