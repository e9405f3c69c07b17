"""Exception types raised by py_reference."""

from __future__ import annotations


class PyReferenceError(Exception):
    """Base for every error raised by py_reference."""


class InvalidConfigurationError(PyReferenceError):
    """Configuration value is unknown or malformed. Fails the run early."""


class UnresolvableReferenceError(PyReferenceError):
    """Raised when an explicit lookup cannot find the element it was asked for.

    Attributes:
        reference: The reference string that failed to resolve.
    """

    def __init__(self, reference: str, message: str | None = None):
        self.reference = reference
        super().__init__(message or f"Unable to resolve reference: {reference}")


class UnsupportedOperationError(PyReferenceError):
    """Operation called on a wrapper kind that cannot support it."""

    def __init__(self, operation: str, wrapper_type: str):
        self.operation = operation
        self.wrapper_type = wrapper_type
        super().__init__(
            f"Operation '{operation}' is not supported on {wrapper_type}"
        )


class DiscoveryError(PyReferenceError):
    """Namespace cannot be documented at all (not importable, nothing public)."""

    def __init__(self, namespace: str, message: str):
        self.namespace = namespace
        super().__init__(f"{namespace}: {message}")
