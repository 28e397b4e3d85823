"""Domain-level exceptions.

All expected failures are subclasses of DomainException so the CLI layer
can catch them uniformly and display user-friendly messages.  Each class
carries a stable machine-readable ``code``.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class UnauthenticatedError(DomainException):
    """No actor identity was supplied."""

    code = "AUTHENTICATION_REQUIRED"


class PermissionDeniedError(DomainException):
    """The actor lacks the capability or scope for the operation."""

    code = "PERMISSION_DENIED"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "VALIDATION_ERROR"


class ConflictError(DomainException):
    """The operation collides with existing state."""

    code = "CONFLICT"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "RESOURCE_NOT_FOUND"


class InsufficientStockError(DomainException):
    """Not enough stock to satisfy a debit."""

    code = "INSUFFICIENT_STOCK"


class InternalError(DomainException):
    """Unexpected persistence or infrastructure failure."""

    code = "INTERNAL_ERROR"
