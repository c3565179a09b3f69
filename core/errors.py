"""
Domain error taxonomy.

Every failure raised by validators and services is a single ``DomainError``
tagged with an ``ErrorKind``. The HTTP layer translates kinds to status codes
through ``HTTP_STATUS_BY_KIND``; anything that is not a ``DomainError`` is
treated as an internal fault.
"""

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Iterable, Optional


class ErrorKind(str, PyEnum):
    """Kinds of domain failure."""

    VALIDATION = "validation"  # caller input is malformed
    NOT_FOUND = "not_found"  # referenced entity does not exist
    BUSINESS_LOGIC = "business_logic"  # well-formed input breaks a domain rule
    CONFLICT = "conflict"  # blocked by dependent state
    INTERNAL = "internal"  # storage fault or unexpected repository result


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BUSINESS_LOGIC: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class FieldError:
    """A single invalid field and why."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Error raised by the business layer, tagged with its kind."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: Optional[Iterable[FieldError]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors: list[FieldError] = list(errors or [])

    def __repr__(self) -> str:
        return f"DomainError(kind={self.kind.value!r}, message={self.message!r})"

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    @classmethod
    def validation(
        cls, message: str, errors: Optional[Iterable[FieldError]] = None
    ) -> "DomainError":
        return cls(ErrorKind.VALIDATION, message, errors)

    @classmethod
    def from_field_errors(cls, errors: Iterable[FieldError]) -> "DomainError":
        """Build a validation error whose message joins every field message."""
        errors = list(errors)
        message = ", ".join(e.message for e in errors) or "Validation failed"
        return cls(ErrorKind.VALIDATION, message, errors)

    @classmethod
    def not_found(cls, message: str) -> "DomainError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def business_logic(cls, message: str) -> "DomainError":
        return cls(ErrorKind.BUSINESS_LOGIC, message)

    @classmethod
    def conflict(cls, message: str) -> "DomainError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def internal(cls, message: str) -> "DomainError":
        return cls(ErrorKind.INTERNAL, message)
