"""Relative links between generated pages."""

from __future__ import annotations

from typing import Any


def relative_path(source_directory: str, destination_path: str) -> str:
    """Compute the link from a page directory to another page.

    Pure string arithmetic over slash-separated paths, no filesystem access.

    Args:
        source_directory: Directory of the linking page (e.g. "/ref/pkg/Foo").
        destination_path: Page path of the target (e.g. "/ref/pkg/Bar/class_Bar.md").

    Returns:
        Relative link, e.g. "../Bar/class_Bar.md".
    """
    source_parts = [p for p in source_directory.split("/") if p]
    destination_parts = [p for p in destination_path.split("/") if p]
    if not source_parts:
        return "/".join(destination_parts)

    destination_dirs = destination_parts[:-1]
    common = 0
    while (
        common < len(source_parts)
        and common < len(destination_dirs)
        and source_parts[common] == destination_dirs[common]
    ):
        common += 1

    return "../" * (len(source_parts) - common) + "/".join(destination_parts[common:])


class UrlLinker:
    """Links from one page directory to any other page."""

    def __init__(self, source_directory: str):
        self.source_directory = source_directory

    def to(self, destination: Any) -> str:
        """Link to a page path or to anything exposing ``get_page_path()``."""
        if not isinstance(destination, str):
            destination = destination.get_page_path()
        return relative_path(self.source_directory, destination)

    def __repr__(self) -> str:
        return f"UrlLinker({self.source_directory!r})"
