"""Breadcrumb trails through the namespace hierarchy."""

from __future__ import annotations

from typing import Any

from py_reference.reflect.elements import ClassElementWrapper
from py_reference.reflect.namespace import HierarchyEntry, NamespaceWrapper
from py_reference.url_linker import UrlLinker

SEPARATOR = " . "


def _hierarchy_crumbs(hierarchy: list[HierarchyEntry], url_linker: UrlLinker) -> list[str]:
    crumbs = []
    for entry in hierarchy:
        if isinstance(entry, NamespaceWrapper):
            crumbs.append(f"[{entry.short_name}]({url_linker.to(entry)})")
        else:
            crumbs.append(entry.rsplit(".", 1)[-1])
    return crumbs


def _namespace_crumbs(namespace: NamespaceWrapper | None, url_linker: UrlLinker) -> list[str]:
    """Ancestors of a namespace, then the namespace itself as a link."""
    if namespace is None:
        return []
    crumbs = _hierarchy_crumbs(namespace.hierarchy, url_linker)
    crumbs.append(f"[{namespace.short_name}]({url_linker.to(namespace)})")
    return crumbs


def get_breadcrumb(element: Any) -> str:
    """Breadcrumb for the page of an element.

    The last segment is never a link to the page itself: classes, functions
    and namespaces end with their name in bold, class members end with a link
    to the class page that documents them.

    Args:
        element: Class, function, class member or namespace wrapper.

    Returns:
        Markdown breadcrumb, segments joined by " . ".
    """
    url_linker = element.get_url_linker()

    if isinstance(element, ClassElementWrapper):
        parent = element.in_doc_parent_wrapper
        crumbs = _namespace_crumbs(parent.declaring_namespace, url_linker)
        crumbs.append(f"[{parent.short_name}]({url_linker.to(parent)})")
        return SEPARATOR.join(crumbs)

    if isinstance(element, NamespaceWrapper):
        crumbs = _hierarchy_crumbs(element.hierarchy, url_linker)
    else:
        crumbs = _namespace_crumbs(element.declaring_namespace, url_linker)
    crumbs.append(f"**{element.short_name}**")
    return SEPARATOR.join(crumbs)
