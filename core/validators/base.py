"""Validation result shared by the domain validators."""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from core.errors import DomainError, FieldError

T = TypeVar("T")


@dataclass
class ValidationResult(Generic[T]):
    """
    Outcome of a validator.

    Either ``value`` carries the normalised input, or ``errors`` lists every
    problem found. Validators return this instead of raising for bad input.
    """

    value: Optional[T] = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[str]:
        """First error message, for validators that stop at the first failure."""
        return self.errors[0].message if self.errors else None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "ValidationResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, field_name: str, message: str) -> "ValidationResult[T]":
        return cls(errors=[FieldError(field_name, message)])

    def raise_for_errors(self) -> T:
        """Return the value, or raise a validation ``DomainError`` carrying every error."""
        if self.errors:
            raise DomainError.from_field_errors(self.errors)
        return self.value


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_positive_id(value: Any, field_name: str, label: str) -> ValidationResult[int]:
    """
    Check that an identifier is a positive integer.

    Args:
        value: Candidate identifier
        field_name: Field name reported in the error
        label: Human label used in the message, e.g. "job role ID"
    """
    if not is_positive_int(value):
        return ValidationResult.fail(field_name, f"Valid {label} is required")
    return ValidationResult.ok(value)
