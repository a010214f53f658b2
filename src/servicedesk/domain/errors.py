"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity does not exist in the current company."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class RemoteError(DomainError):
    """The storage backend rejected a request.

    The message is the backend's own text (constraint violation, policy
    rejection, connection failure).
    """


class AuthenticationError(DomainError):
    """Missing, invalid or expired credentials."""


def not_found(entity: str, entity_id: int) -> str:
    """Return message for a missing row."""
    return f"{entity} {entity_id} not found"


def required_field(field: str) -> str:
    """Return message for a missing required field."""
    return f"{field} is required"


def reference_outside_company(table: str, column: str, value: int) -> str:
    """Return the policy rejection message for a cross-company reference."""
    return (
        f'new row for table "{table}" violates row-level security policy: '
        f"{column}={value} is not visible to this company"
    )


def line_index_out_of_range(index: int, size: int) -> str:
    """Return message for a bad line position."""
    return f"Line {index} does not exist (ticket has {size} line{'s' if size != 1 else ''})"
