"""Pytest fixtures for py_reference tests."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

from py_reference.code_index import CodeIndex
from py_reference.definitions import HasTagApi, IsPubliclyAccessible
from py_reference.diagnostics import ErrorCollector
from py_reference.resolver import ReferenceResolver

FIXTURE_NAMESPACE = "acme_fixtures"

FIXTURE_MODULES: dict[str, str] = {
    "acme_fixtures/__init__.py": '''
"""Acme fixture package."""


def version() -> str:
    """Package version.

    @api
    """
    return "1.0"
''',
    "acme_fixtures/errors.py": '''
"""Acme errors."""


class AcmeError(Exception):
    """Base error of the package.

    @api
    """
''',
    "acme_fixtures/base.py": '''
"""Base classes."""

from __future__ import annotations

GUIDE_URL = "https://docs.example.com/guide"


class Base:
    """Root of the model hierarchy.

    @api
    """

    LIMIT = 10
    """Maximum number of items.

    @api
    """

    def inherited(self) -> int:
        """Inherited as is.

        @api
        """
        return 1

    def overridden(self) -> str:
        """Overridden in children.

        @api
        """
        return "base"
''',
    "acme_fixtures/models.py": '''
"""Models."""

from __future__ import annotations

import enum
from functools import cached_property
from typing import ClassVar, Protocol, final

from acme_fixtures.base import Base


class RoundTrip:
    """Visibility round trip."""

    def api_method(self) -> None:
        """Part of the API.

        @api
        """

    def internal_method(self) -> None:
        """Internal helper.

        @internal
        """

    def __private_method(self) -> None:
        pass


class Child(Base):
    """A child model.

    @api
    """

    def overridden(self) -> str:
        """Child version.

        @api
        """
        return "child"

    def own(self, count: int, *items: str, strict: bool = False, **options: int) -> list[str]:
        """Child only.

        @api
        @see Base.inherited()
        @see own()

        Args:
            count: How many items.
            strict: Fail on unknown items.
        """
        return []

    @staticmethod
    def build() -> Child:
        """Factory.

        @api
        """
        return Child()

    def _protected(self) -> None:
        """Protected helper."""


class Hidden:
    """Internal class.

    @internal
    """

    def exposed(self) -> None:
        """Tagged but hidden by its class.

        @api
        """


class Plain:
    """No tags anywhere."""

    def run(self) -> None:
        """Run."""


class Status(enum.Enum):
    """Status values.

    @api
    """

    ACTIVE = "active"
    """Open for business."""
    CLOSED = "closed"

    def label(self) -> str:
        """Display label.

        @api
        """
        return self.value.title()


class Priority(int, enum.Enum):
    LOW = 1
    HIGH = 2


class Drawable(Protocol):
    """Something drawable.

    @api
    """

    def draw(self) -> str:
        """Draw it.

        @api
        """
        ...


class SerializerMixin:
    """Serialization helpers.

    @api
    """

    def to_json(self) -> str:
        """Serialize.

        @api
        """
        return "{}"


class Account(SerializerMixin, Base):
    """Bank account.

    @api
    """

    currency: ClassVar[str] = "EUR"
    """Default currency.

    @api
    """

    owner: str
    """Account owner.

    @api
    """

    _token: str = ""

    def __init__(self, owner: str) -> None:
        self.owner = owner

    @property
    def balance(self) -> float:
        """Current balance.

        @api
        """
        return 0.0

    @cached_property
    def history(self) -> list[str]:
        """Past operations."""
        return []


@final
class Square(Base, Drawable):
    """Square shape.

    @api
    """

    def draw(self) -> str:
        """Draw a square.

        @api
        """
        return "[]"


class Guide(str, enum.Enum):
    FACTORIES = "https://docs.example.com/factories"


class Factory:
    """Builds products.

    @manual acme_fixtures.models.Guide.FACTORIES
    @book acme_fixtures.base.GUIDE_URL
    """

    @staticmethod
    def make() -> int:
        """Make one.

        @manual acme_fixtures.models.Nowhere
        """
        return 1


class Product(Factory):
    def run(self) -> None:
        pass
''',
    "acme_fixtures/references.py": '''
"""Cross references."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from acme_fixtures.errors import AcmeError
from acme_fixtures.models import Child

if TYPE_CHECKING:
    from acme_fixtures.base import Base


class Loader(json.JSONDecoder):
    """Decode payloads.

    @api
    @see https://example.com/loader
    """

    def load(self, raw: str) -> Child | None:
        """Load one payload.

        @api
        @see Child.own()
        @see load()
        @throws json.JSONDecodeError when the payload is invalid.
        """
        return None

    def fetch(self, key: str) -> Base:
        """Fetch by key.

        @api
        @throws MissingError when the key is unknown.
        """
        raise KeyError(key)

    def check(self) -> bool:
        """Validate.

        @api

        Raises:
            AcmeError: On invalid state.
            ValueError: On bad input.
        """
        return True

    def stale(self) -> None:
        """Points at things that are gone.

        @api
        @see acme_fixtures.models.Removed
        @see acme_fixtures.models.Child.nothing()
        """


def build_loader(strict: bool = False) -> Loader:
    """Build a loader.

    @api
    @see Loader
    """
    return Loader()
''',
    "acme_fixtures/broken.py": '''
"""Fails on import."""

raise RuntimeError("boom")
''',
    "acme_fixtures/sub/__init__.py": '''
"""Intermediate package without classes."""
''',
    "acme_fixtures/sub/deep.py": '''
"""Deeply nested module."""


class Deep:
    """Nested class.

    @api
    """

    def dive(self) -> None:
        """Dive.

        @api
        """
''',
}


@pytest.fixture(scope="session")
def fixture_package(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Write the fixture package and make it importable."""
    root = tmp_path_factory.mktemp("fixtures")
    for relative, source in FIXTURE_MODULES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)

    sys.path.insert(0, str(root))
    importlib.invalidate_caches()
    yield root
    sys.path.remove(str(root))


@pytest.fixture
def error_collector() -> ErrorCollector:
    return ErrorCollector()


@pytest.fixture
def code_index(fixture_package: Path, error_collector: ErrorCollector) -> CodeIndex:
    """Index of the fixture package under the HasTagApi policy."""
    return CodeIndex(FIXTURE_NAMESPACE, HasTagApi(), error_collector)


@pytest.fixture
def accessible_index(fixture_package: Path) -> CodeIndex:
    """Index of the fixture package under the IsPubliclyAccessible policy."""
    return CodeIndex(FIXTURE_NAMESPACE, IsPubliclyAccessible(), ErrorCollector())


@pytest.fixture
def resolver(code_index: CodeIndex) -> ReferenceResolver:
    return ReferenceResolver(code_index)
