"""Non-fatal diagnostics collected during one documentation run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorLevel(Enum):
    """Severity of a collected diagnostic."""

    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"

    @property
    def label(self) -> str:
        return self.value.upper()

    @property
    def emoji(self) -> str:
        return {
            ErrorLevel.NOTICE: "ℹ️",
            ErrorLevel.WARNING: "⚠️",
            ErrorLevel.ERROR: "❌",
        }[self]

    @property
    def logging_level(self) -> int:
        return {
            ErrorLevel.NOTICE: logging.INFO,
            ErrorLevel.WARNING: logging.WARNING,
            ErrorLevel.ERROR: logging.ERROR,
        }[self]


@dataclass(frozen=True)
class CollectedError:
    """One diagnostic entry."""

    message: str
    level: ErrorLevel = ErrorLevel.WARNING
    context: str | None = None
    element_name: str | None = None
    exception: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "level": self.level.value,
            "context": self.context,
            "element_name": self.element_name,
            "exception": str(self.exception) if self.exception else None,
            "timestamp": self.timestamp.isoformat(),
        }


class ErrorCollector:
    """Append-only log of diagnostics for one documentation run.

    Entries are mirrored to the module logger so that they also show up in
    regular log output. Injected explicitly into the components that need it.
    """

    def __init__(self) -> None:
        self._errors: list[CollectedError] = []

    def add_error(
        self,
        message: str,
        level: ErrorLevel = ErrorLevel.WARNING,
        context: str | None = None,
        element: Any = None,
        exception: BaseException | None = None,
    ) -> CollectedError:
        """Record a diagnostic.

        Args:
            message: Human readable description.
            level: Severity.
            context: Optional free text locating the problem.
            element: Optional originating wrapper (anything with a ``name``)
                or plain element name.
            exception: Optional source exception.

        Returns:
            The stored entry.
        """
        if element is None or isinstance(element, str):
            element_name = element
        else:
            element_name = getattr(element, "name", str(element))

        entry = CollectedError(
            message=message,
            level=level,
            context=context,
            element_name=element_name,
            exception=exception,
        )
        self._errors.append(entry)
        logger.log(
            level.logging_level,
            "%s%s",
            message,
            f" [{element_name}]" if element_name else "",
        )
        return entry

    def add_warning(
        self,
        message: str,
        context: str | None = None,
        element: Any = None,
        exception: BaseException | None = None,
    ) -> CollectedError:
        return self.add_error(message, ErrorLevel.WARNING, context, element, exception)

    def add_notice(
        self,
        message: str,
        context: str | None = None,
        element: Any = None,
        exception: BaseException | None = None,
    ) -> CollectedError:
        return self.add_error(message, ErrorLevel.NOTICE, context, element, exception)

    def get_errors(self, level: ErrorLevel | None = None) -> list[CollectedError]:
        if level is None:
            return list(self._errors)
        return [e for e in self._errors if e.level is level]

    def has_errors(self, level: ErrorLevel | None = None) -> bool:
        return bool(self.get_errors(level))

    def get_error_count(self, level: ErrorLevel | None = None) -> int:
        return len(self.get_errors(level))

    def get_summary(self) -> dict[str, int]:
        """Count entries per level value, every level present."""
        summary = {level.value: 0 for level in ErrorLevel}
        for entry in self._errors:
            summary[entry.level.value] += 1
        return summary

    def clear(self) -> None:
        self._errors.clear()

    def __len__(self) -> int:
        return len(self._errors)
