"""Capability interfaces shared by unrelated wrapper kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from py_reference.url_linker import UrlLinker


class Writable(ABC):
    """Element that gets its own documentation page."""

    @abstractmethod
    def get_page_directory(self) -> str: ...

    @abstractmethod
    def get_page_path(self) -> str: ...

    def get_url_linker(self) -> UrlLinker:
        return UrlLinker(self.get_page_directory())


class HasSignature(ABC):
    """Element that renders a declaration-style signature."""

    @abstractmethod
    def get_signature(self, *args: Any, **kwargs: Any) -> str: ...


class HasParent(ABC):
    """Element attached to a parent wrapper through a non-owning reference."""

    @property
    @abstractmethod
    def parent_wrapper(self) -> Any: ...
