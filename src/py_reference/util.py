"""Small helpers shared by the wrapper model."""

from __future__ import annotations

import ast
import enum
import importlib
import inspect
import logging
import re
import sys
import textwrap
from functools import lru_cache
from typing import Any

logger = logging.getLogger(__name__)

PUBLIC = "public"
PROTECTED = "protected"
PRIVATE = "private"
VISIBILITY_ORDER = (PUBLIC, PROTECTED, PRIVATE)

# Regex: UPPER_CASE identifier, optionally underscore-prefixed
CONSTANT_NAME_PATTERN = re.compile(r"^_*[A-Z][A-Z0-9_]*$")


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def is_sunder(name: str) -> bool:
    return (
        len(name) > 2
        and name[0] == name[-1] == "_"
        and name[1] != "_"
        and name[-2] != "_"
    )


def visibility_of(name: str) -> str:
    """Map a (demangled) member name to its visibility.

    ``name`` and ``__dunder__`` are public, ``_name`` is protected and
    ``__name`` is private.
    """
    if is_dunder(name) or not name.startswith("_"):
        return PUBLIC
    if name.startswith("__"):
        return PRIVATE
    return PROTECTED


def demangle(name: str, owner: type) -> str:
    """Turn ``_Owner__secret`` back into ``__secret``."""
    prefix = f"_{owner.__name__.lstrip('_')}__"
    if name.startswith(prefix) and not name.endswith("__"):
        return "__" + name[len(prefix):]
    return name


def mangle(name: str, owner: type) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{owner.__name__.lstrip('_')}{name}"
    return name


def qualified_name(obj: Any) -> str:
    """Dotted name of a class or function; builtins keep their bare name."""
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", repr(obj))
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def import_dotted(path: str) -> Any:
    """Object a dotted path designates, e.g. ``pkg.links.Manual.LOADING``.

    The longest importable module prefix is imported, the remaining segments
    are read as attributes.

    Raises:
        ImportError: If no prefix of the path is an importable module.
        AttributeError: If a remaining segment does not exist.
    """
    parts = path.strip().split(".")
    for end in range(len(parts), 0, -1):
        module_name = ".".join(parts[:end])
        if not all(part.isidentifier() for part in parts[:end]):
            continue
        try:
            obj = importlib.import_module(module_name)
        except ImportError:
            continue
        for attribute in parts[end:]:
            obj = getattr(obj, attribute)
        return obj
    raise ImportError(f"No importable module in '{path}'")


def is_stdlib_module(module_name: str | None) -> bool:
    if not module_name:
        return True
    return module_name.split(".", 1)[0] in sys.stdlib_module_names


def format_value(value: Any) -> str:
    """Render a default or constant value the way it would be written in source."""
    if isinstance(value, enum.Enum):
        return f"{type(value).__name__}.{value.name}"
    if inspect.isclass(value) or inspect.isroutine(value):
        return getattr(value, "__qualname__", repr(value))
    text = repr(value)
    # Object reprs like "<Foo object at 0x...>" are not stable
    if text.startswith("<") and " at 0x" in text:
        return f"{type(value).__name__}(...)"
    return text


def format_annotation(annotation: Any) -> str:
    """Annotation text; string annotations (postponed evaluation) pass through."""
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return ""
    if isinstance(annotation, str):
        return annotation
    if annotation is type(None):
        return "None"
    return inspect.formatannotation(annotation)


def single_line(text: str, max_length: int = 200) -> str:
    """Collapse text to one table-safe line."""
    text = " ".join(text.split())
    text = text.replace("|", "").replace("`", "")
    if len(text) > max_length:
        text = text[: max_length - 3].rstrip() + "..."
    return text


@lru_cache(maxsize=None)
def attribute_docstrings(cls: type) -> dict[str, str]:
    """Collect attribute docstrings (string literal right after an assignment).

    Args:
        cls: Class whose own body is scanned.

    Returns:
        Mapping of attribute name to raw docstring.
    """
    try:
        source = textwrap.dedent(inspect.getsource(cls))
        tree = ast.parse(source)
    except (OSError, TypeError, SyntaxError) as e:
        logger.debug("No source for %s: %s", qualified_name(cls), e)
        return {}

    class_def = next((n for n in tree.body if isinstance(n, ast.ClassDef)), None)
    if class_def is None:
        return {}

    docs: dict[str, str] = {}
    body = class_def.body
    for node, following in zip(body, body[1:]):
        if not (
            isinstance(following, ast.Expr)
            and isinstance(following.value, ast.Constant)
            and isinstance(following.value.value, str)
        ):
            continue
        if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            docs[node.target.id] = following.value.value
        elif isinstance(node, ast.Assign):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    docs[target.id] = following.value.value
    return docs


@lru_cache(maxsize=None)
def module_imports(module_name: str) -> dict[str, str]:
    """Map local names bound by import statements to their dotted targets.

    Imports guarded by ``if TYPE_CHECKING:`` are included, which is why the
    module source is read instead of its globals.
    """
    module = sys.modules.get(module_name)
    if module is None:
        return {}
    try:
        tree = ast.parse(inspect.getsource(module))
    except (OSError, TypeError, SyntaxError) as e:
        logger.debug("No source for module %s: %s", module_name, e)
        return {}

    package = module_name if hasattr(module, "__path__") else module_name.rpartition(".")[0]
    imports: dict[str, str] = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    imports[alias.asname] = alias.name
                else:
                    head = alias.name.split(".", 1)[0]
                    imports[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = node.module or ""
            if node.level:
                parts = package.split(".")
                anchor = parts[: len(parts) - node.level + 1]
                base = ".".join(anchor + ([base] if base else []))
            for alias in node.names:
                if alias.name == "*":
                    continue
                imports[alias.asname or alias.name] = f"{base}.{alias.name}" if base else alias.name
    return imports
