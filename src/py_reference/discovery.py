"""Find the classes and functions of a namespace by importing it."""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from dataclasses import dataclass, field
from types import FunctionType, ModuleType

from py_reference.diagnostics import ErrorCollector, ErrorLevel
from py_reference.exceptions import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    """Everything found under one namespace, in discovery order."""

    namespace: str
    modules: list[str] = field(default_factory=list)
    classes: list[type] = field(default_factory=list)
    functions: list[FunctionType] = field(default_factory=list)


def iter_modules(namespace: str, error_collector: ErrorCollector | None = None) -> list[ModuleType]:
    """Import the namespace root and every submodule below it.

    A submodule that fails to import is recorded as an ERROR diagnostic and
    skipped; the rest of the namespace is still documented.

    Raises:
        DiscoveryError: If the root module itself cannot be imported.
    """
    try:
        root = importlib.import_module(namespace)
    except (ImportError, SyntaxError) as e:
        raise DiscoveryError(namespace, f"cannot import namespace: {e}") from e

    modules = [root]
    pkg_path = getattr(root, "__path__", None)
    if pkg_path is None:
        return modules

    def on_error(name: str) -> None:
        _record_failure(name, None, error_collector)

    for _, submod_name, _ in pkgutil.walk_packages(
        pkg_path, prefix=namespace + ".", onerror=on_error
    ):
        try:
            modules.append(importlib.import_module(submod_name))
        except Exception as e:
            _record_failure(submod_name, e, error_collector)
    return modules


def _record_failure(
    module_name: str, exception: Exception | None, error_collector: ErrorCollector | None
) -> None:
    message = f"Could not import {module_name}"
    if error_collector is not None:
        error_collector.add_error(
            message,
            ErrorLevel.ERROR,
            context=f"Module: {module_name}",
            element=module_name,
            exception=exception,
        )
    else:
        logger.error("%s: %s", message, exception)


def _defined_here(obj: object, module: ModuleType) -> bool:
    """Defined at the top level of this module (not imported, nested or local)."""
    return (
        getattr(obj, "__module__", None) == module.__name__
        and getattr(obj, "__qualname__", None) == getattr(obj, "__name__", None)
    )


def discover(namespace: str, error_collector: ErrorCollector | None = None) -> DiscoveryResult:
    """Collect classes and module-level functions of a namespace.

    Classes and functions are attributed to the module that defines them,
    so re-exports are not counted twice. Lambdas are skipped.

    Args:
        namespace: Dotted name of the root package or module.
        error_collector: Receives diagnostics for modules that fail to import.

    Returns:
        DiscoveryResult with modules, classes and functions in discovery order.
    """
    result = DiscoveryResult(namespace)
    seen: set[int] = set()
    for module in iter_modules(namespace, error_collector):
        result.modules.append(module.__name__)
        for obj in list(vars(module).values()):
            if id(obj) in seen or not _defined_here(obj, module):
                continue
            if inspect.isclass(obj):
                seen.add(id(obj))
                result.classes.append(obj)
            elif inspect.isfunction(obj) and obj.__name__ != "<lambda>":
                seen.add(id(obj))
                result.functions.append(obj)

    logger.debug(
        "Discovered %d classes and %d functions in %d modules of %s",
        len(result.classes),
        len(result.functions),
        len(result.modules),
        namespace,
    )
    return result
