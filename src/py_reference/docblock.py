"""Docstring parsing.

Extracts summary, description and tags from a docstring. Two tag syntaxes
are understood and merged into the same tag list:

- inline tags at the start of a line: ``@api``, ``@internal``,
  ``@see pkg.Other.method()``, ``@throws pkg.Error when ...``
- Google style sections: ``Args:``, ``Returns:``, ``Raises:``, ``See Also:``
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import Any


@dataclass
class DocTag:
    """One tag payload.

    Attributes:
        name: Canonical tag name (``see``, ``throws``, ``param``, ``return`` ...).
        reference: Target or type text (``@see``/``@throws`` target, ``Args`` type).
        variable_name: Parameter name for ``param`` tags.
        description: Free text following the reference.
    """

    name: str
    reference: str | None = None
    variable_name: str | None = None
    description: str = ""


class DocBlock:
    """Parsed docstring.

    Attributes:
        summary: First paragraph, joined onto one line.
        description: Remaining free text.
        tags: Tags in source order.
    """

    # Regex: @tag with optional payload at line start
    TAG_PATTERN = re.compile(r"^@(?P<name>[A-Za-z][\w-]*)(?:\s+(?P<payload>.*))?$")
    # Regex: Google style section header ("Args:", "See Also:")
    SECTION_PATTERN = re.compile(r"^(?P<title>[A-Z][A-Za-z ]*):\s*$")
    # Regex: "name (type): text" / "*args: text" / "pkg.Error: text"
    ENTRY_PATTERN = re.compile(
        r"^(?P<name>\*{0,2}[\w.]+(?:\(\))?)\s*(?:\((?P<type>[^)]*)\))?\s*:\s*(?P<text>.*)$"
    )

    TAG_ALIASES = {
        "raise": "throws",
        "raises": "throws",
        "throw": "throws",
        "exception": "throws",
        "returns": "return",
        "seealso": "see",
        "arg": "param",
    }
    SECTION_TAGS = {
        "args": "param",
        "arguments": "param",
        "parameters": "param",
        "returns": "return",
        "return": "return",
        "raises": "throws",
        "see also": "see",
    }
    # Tags whose first payload token is a reference
    REFERENCE_TAGS = frozenset({"see", "throws", "var"})

    def __init__(self, text: str):
        self.text = inspect.cleandoc(text)
        self.summary = ""
        self.description = ""
        self.tags: list[DocTag] = []
        self._parse()

    @classmethod
    def from_object(cls, obj: Any) -> DocBlock | None:
        """Parse the docstring an object declares itself.

        Inherited docstrings are ignored: an override without docstring must
        not pick up the tags of the method it replaces.
        """
        doc = getattr(obj, "__doc__", None)
        if not isinstance(doc, str) or not doc.strip():
            return None
        return cls(doc)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_tags(self, name: str, variable_name: str | None = None) -> list[DocTag]:
        name = self.TAG_ALIASES.get(name, name)
        return [
            tag
            for tag in self.tags
            if tag.name == name
            and (variable_name is None or tag.variable_name == variable_name)
        ]

    def has_tag(self, name: str) -> bool:
        return bool(self.get_tags(name))

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse(self) -> None:
        free_lines: list[str] = []
        lines = self.text.splitlines()
        i = 0
        while i < len(lines):
            line = lines[i]
            tag_match = self.TAG_PATTERN.match(line)
            if tag_match:
                payload = tag_match.group("payload") or ""
                i += 1
                # Indented lines continue the tag payload
                while i < len(lines) and lines[i][:1].isspace() and lines[i].strip():
                    payload += " " + lines[i].strip()
                    i += 1
                self.tags.append(self._build_tag(tag_match.group("name"), payload))
                continue

            section_match = self.SECTION_PATTERN.match(line)
            section = section_match.group("title").lower() if section_match else None
            if section in self.SECTION_TAGS:
                i += 1
                body: list[str] = []
                while i < len(lines) and (not lines[i].strip() or lines[i][:1].isspace()):
                    body.append(lines[i])
                    i += 1
                self._parse_section(self.SECTION_TAGS[section], body)
                continue

            free_lines.append(line)
            i += 1

        paragraphs = "\n".join(free_lines).strip().split("\n\n", 1)
        self.summary = " ".join(p.strip() for p in paragraphs[0].splitlines()).strip()
        self.description = paragraphs[1].strip() if len(paragraphs) > 1 else ""

    def _build_tag(self, raw_name: str, payload: str) -> DocTag:
        name = self.TAG_ALIASES.get(raw_name.lower(), raw_name.lower())
        payload = payload.strip()
        if name in self.REFERENCE_TAGS:
            reference, _, rest = payload.partition(" ")
            return DocTag(name, reference=reference or None, description=rest.strip())
        if name == "param":
            variable, _, rest = payload.partition(" ")
            return DocTag(
                name,
                variable_name=variable.rstrip(":").lstrip("$") or None,
                description=rest.strip(),
            )
        return DocTag(name, description=payload)

    def _parse_section(self, tag_name: str, body: list[str]) -> None:
        entries = self._split_entries(body)
        if tag_name == "return":
            text = " ".join(" ".join(e) for e in entries).strip()
            if text:
                self.tags.append(DocTag("return", description=text))
            return

        for entry in entries:
            head, rest = entry[0], " ".join(entry[1:])
            match = self.ENTRY_PATTERN.match(head)
            if match:
                name, type_, text = match.group("name", "type", "text")
            else:
                name, type_, text = head.split(" ", 1)[0], None, head.partition(" ")[2]
            text = f"{text} {rest}".strip()

            if tag_name == "param":
                self.tags.append(
                    DocTag("param", reference=type_, variable_name=name.lstrip("*"), description=text)
                )
            else:
                self.tags.append(DocTag(tag_name, reference=name, description=text))

    @staticmethod
    def _split_entries(body: list[str]) -> list[list[str]]:
        """Group indented section lines into entries by their indentation."""
        non_blank = [line for line in body if line.strip()]
        if not non_blank:
            return []
        base_indent = min(len(line) - len(line.lstrip()) for line in non_blank)
        entries: list[list[str]] = []
        for line in non_blank:
            indent = len(line) - len(line.lstrip())
            if indent == base_indent or not entries:
                entries.append([line.strip()])
            else:
                entries[-1].append(line.strip())
        return entries
