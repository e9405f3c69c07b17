"""Markdown API reference generation for Python packages."""

from py_reference.code_index import CodeIndex
from py_reference.config import Config, load_config
from py_reference.definitions import (
    HasTagApi,
    IsPubliclyAccessible,
    PublicApiDefinition,
    get_api_definition,
)
from py_reference.diagnostics import CollectedError, ErrorCollector, ErrorLevel
from py_reference.exceptions import (
    DiscoveryError,
    InvalidConfigurationError,
    PyReferenceError,
    UnresolvableReferenceError,
    UnsupportedOperationError,
)
from py_reference.execution import Execution, PageRenderer, PageWriter
from py_reference.navigation import get_breadcrumb
from py_reference.resolver import ReferenceResolver, ResolvedTag
from py_reference.url_linker import UrlLinker

__version__ = "0.1.0"

__all__ = [
    "CodeIndex",
    "CollectedError",
    "Config",
    "DiscoveryError",
    "ErrorCollector",
    "ErrorLevel",
    "Execution",
    "HasTagApi",
    "InvalidConfigurationError",
    "IsPubliclyAccessible",
    "PageRenderer",
    "PageWriter",
    "PublicApiDefinition",
    "PyReferenceError",
    "ReferenceResolver",
    "ResolvedTag",
    "UnresolvableReferenceError",
    "UnsupportedOperationError",
    "UrlLinker",
    "get_api_definition",
    "get_breadcrumb",
    "load_config",
]
