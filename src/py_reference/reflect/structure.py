"""Callable behaviour shared by methods and module-level functions.

Free functions over any wrapper exposing ``function`` (the plain function
object), ``skips_first_parameter`` and the docstring accessors.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from py_reference.docblock import DocTag
from py_reference.reflect.parameter import ParameterWrapper
from py_reference.util import format_annotation

logger = logging.getLogger(__name__)


def unwrap_callable(raw: Any) -> Any:
    """Plain function behind staticmethod/classmethod/decorators."""
    if isinstance(raw, (staticmethod, classmethod)):
        raw = raw.__func__
    try:
        return inspect.unwrap(raw)
    except ValueError:
        return raw


def get_signature(wrapper: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(wrapper.function)
    except (ValueError, TypeError) as e:
        logger.debug("No signature for %s: %s", wrapper.name, e)
        return None


def get_parameters(wrapper: Any) -> list[ParameterWrapper]:
    """Parameter wrappers in declaration order, without ``self``/``cls``."""
    signature = get_signature(wrapper)
    if signature is None:
        return []
    params = list(signature.parameters.values())
    if wrapper.skips_first_parameter and params:
        params = params[1:]
    return [ParameterWrapper(param, position, wrapper) for position, param in enumerate(params)]


def format_parameters(parameters: list[ParameterWrapper]) -> str:
    """Parameter list with ``/`` and ``*`` markers where Python needs them."""
    parts: list[str] = []
    seen_positional_only = False
    seen_star = False
    for param in parameters:
        if param.is_positional_only():
            seen_positional_only = True
        elif seen_positional_only:
            parts.append("/")
            seen_positional_only = False
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            seen_star = True
        if param.is_keyword_only() and not seen_star:
            parts.append("*")
            seen_star = True
        parts.append(param.get_signature())
    if seen_positional_only:
        parts.append("/")
    return ", ".join(parts)


def get_return_type(wrapper: Any) -> str:
    signature = get_signature(wrapper)
    if signature is not None:
        annotation = format_annotation(signature.return_annotation)
        if annotation:
            return annotation
    tags = wrapper.get_docblock_tags("return")
    return (tags[0].reference or "") if tags else ""


def has_return_type(wrapper: Any) -> bool:
    return bool(get_return_type(wrapper))


def get_type_text(wrapper: Any) -> str:
    """Declared type of any typed element as text.

    Callables give their return type; properties, constants and parameters
    their annotation. Empty string when nothing is declared.
    """
    if hasattr(wrapper, "function"):
        return get_return_type(wrapper)
    return getattr(wrapper, "type", None) or ""


def get_return_description(wrapper: Any) -> str | None:
    return wrapper.get_docblock_tag_description("return")


def get_throws(wrapper: Any) -> list[DocTag]:
    return [tag for tag in wrapper.get_docblock_tags("throws") if tag.reference]


def is_async(wrapper: Any) -> bool:
    return inspect.iscoroutinefunction(wrapper.function) or inspect.isasyncgenfunction(
        wrapper.function
    )


def callable_signature(wrapper: Any, display_name: str, modifiers: list[str]) -> str:
    """Render ``[modifiers ]def name(params)[ -> ret]``."""
    head = " ".join([*modifiers, "def", display_name])
    signature = f"{head}({format_parameters(get_parameters(wrapper))})"
    return_type = get_return_type(wrapper)
    if return_type:
        signature += f" -> {return_type}"
    return signature
