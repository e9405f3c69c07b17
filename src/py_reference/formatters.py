"""Template-facing views of a class and the diagnostics report."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from py_reference.diagnostics import ErrorCollector, ErrorLevel
from py_reference.reflect.class_wrapper import ClassWrapper
from py_reference.reflect.elements import ClassElementWrapper, MethodWrapper
from py_reference.resolver import ReferenceResolver


@dataclass
class FormattedEntry:
    """One row of a member index table."""

    name: str
    element: ClassElementWrapper
    type: str = ""
    default_value: str | None = None
    return_type: str = ""
    summary: str = ""
    link: str | None = None


class ClassFormatter:
    """Member indexes of a class, for templates.

    Types are rendered as Markdown with links relative to the class page when
    a resolver is given, as plain text otherwise.
    """

    only_api = False

    def __init__(self, class_wrapper: ClassWrapper, resolver: ReferenceResolver | None = None):
        self.class_wrapper = class_wrapper
        self.resolver = resolver
        self.url_linker = class_wrapper.get_url_linker()

    def _members(self, kind: str, **flags: Any) -> dict[str, ClassElementWrapper]:
        cw = self.class_wrapper
        if self.only_api:
            getter = {
                "constants": cw.get_all_api_constants,
                "properties": cw.get_all_api_properties,
                "methods": cw.get_all_api_methods,
            }[kind]
        else:
            getter = {
                "constants": cw.get_all_constants,
                "properties": cw.get_all_properties,
                "methods": cw.get_all_user_defined_methods,
            }[kind]
        return getter(**flags)

    def _type_md(self, element: ClassElementWrapper, type_text: str) -> str:
        if not type_text:
            return ""
        if self.resolver is None:
            return type_text
        return self.resolver.type_to_markdown(element, type_text, self.url_linker)

    def _entry(self, element: ClassElementWrapper) -> FormattedEntry:
        entry = FormattedEntry(
            name=element.name,
            element=element,
            summary=element.get_short_description_for_table(),
        )
        if isinstance(element, MethodWrapper):
            entry.return_type = self._type_md(element, element.get_return_type())
            entry.link = self.url_linker.to(element)
        else:
            entry.type = self._type_md(element, element.type)
            entry.default_value = element.default_value
            if element.KIND == "property":
                entry.link = self.url_linker.to(element)
        return entry

    def _index(self, kind: str, **flags: Any) -> dict[str, FormattedEntry]:
        return {name: self._entry(m) for name, m in self._members(kind, **flags).items()}

    @cached_property
    def constants(self) -> dict[str, FormattedEntry]:
        return self._index("constants")

    @cached_property
    def static_properties(self) -> dict[str, FormattedEntry]:
        return self._index("properties", non_static=False)

    @cached_property
    def properties(self) -> dict[str, FormattedEntry]:
        return self._index("properties", static=False)

    @cached_property
    def static_methods(self) -> dict[str, FormattedEntry]:
        return self._index("methods", non_static=False)

    @cached_property
    def methods(self) -> dict[str, FormattedEntry]:
        return self._index("methods", static=False)

    @property
    def index(self) -> dict[str, dict[str, FormattedEntry]]:
        """Every non-empty index, in page order."""
        sections = {
            "constants": self.constants,
            "static_properties": self.static_properties,
            "static_methods": self.static_methods,
            "properties": self.properties,
            "methods": self.methods,
        }
        return {title: entries for title, entries in sections.items() if entries}


class PublicApiClassFormatter(ClassFormatter):
    """Same indexes restricted to public API members."""

    only_api = True


def format_error_report(collector: ErrorCollector) -> str:
    """Format collected diagnostics as text, most severe first."""
    lines = ["=" * 60, "DOCUMENTATION DIAGNOSTICS", "=" * 60]
    if not collector.has_errors():
        lines.append("No issues found.")
        return "\n".join(lines)

    summary = collector.get_summary()
    lines.append(
        ", ".join(f"{count} {level}(s)" for level, count in summary.items() if count)
    )
    lines.append("")

    grouped: dict[ErrorLevel, list] = defaultdict(list)
    for entry in collector.get_errors():
        grouped[entry.level].append(entry)

    for level in (ErrorLevel.ERROR, ErrorLevel.WARNING, ErrorLevel.NOTICE):
        entries = grouped.get(level)
        if not entries:
            continue
        lines.append(f"{level.emoji} {level.label} ({len(entries)}):")
        for entry in entries:
            element = f" [{entry.element_name}]" if entry.element_name else ""
            lines.append(f"  - [{entry.timestamp:%H:%M:%S}]{element} {entry.message}")
            if entry.context:
                lines.append(f"      Context: {entry.context}")
            if entry.exception is not None:
                lines.append(f"      Exception: {entry.exception}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
