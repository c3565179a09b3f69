"""
Job role validation.

``validate_create_job_role`` stops at the first failing rule, in the order
required fields, status, open positions, closing date.
``validate_update_job_role`` applies the same per-field rules to whichever
fields were sent.
"""

from datetime import datetime
from typing import Any, NamedTuple, Optional

from api.schemas.jobs import JobRoleCreate, JobRoleUpdate
from core.utils.datetime import ensure_utc, parse_datetime, to_iso_instant
from core.validators.base import ValidationResult
from database.models.jobs import JobRoleStatus
from database.repositories.job_roles import JobRoleChanges, NewJobRole

REQUIRED_FIELDS = (
    "name",
    "location",
    "capability",
    "band",
    "closing_date",
    "summary",
    "key_responsibilities",
)

TEXT_FIELDS = (
    "name",
    "location",
    "capability",
    "band",
    "summary",
    "key_responsibilities",
)

DEFAULT_OPEN_POSITIONS = 1


class ClosingDate(NamedTuple):
    instant: datetime
    iso: str  # e.g. 2030-01-31T00:00:00.000Z


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_required_fields(payload: JobRoleCreate) -> ValidationResult[None]:
    missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(payload, name))]
    if missing:
        return ValidationResult.fail(
            missing[0],
            "Missing required fields. Required: " + ", ".join(REQUIRED_FIELDS),
        )
    return ValidationResult.ok()


def validate_status(status: Optional[str]) -> ValidationResult[JobRoleStatus]:
    """Absent status defaults to open."""
    if status is None or status == "":
        return ValidationResult.ok(JobRoleStatus.OPEN)

    try:
        return ValidationResult.ok(JobRoleStatus(status))
    except ValueError:
        return ValidationResult.fail("status", "Invalid status. Must be 'open' or 'closed'")


def validate_number_of_open_positions(positions: Any) -> ValidationResult[int]:
    """Absent positions default to 1; otherwise a non-negative whole number."""
    if positions is None:
        return ValidationResult.ok(DEFAULT_OPEN_POSITIONS)

    message = "number_of_open_positions must be a non-negative number"

    if isinstance(positions, bool) or not isinstance(positions, (int, float)):
        return ValidationResult.fail("number_of_open_positions", message)
    if positions < 0:
        return ValidationResult.fail("number_of_open_positions", message)
    if isinstance(positions, float) and not positions.is_integer():
        return ValidationResult.fail(
            "number_of_open_positions",
            "number_of_open_positions must be a whole number",
        )

    return ValidationResult.ok(int(positions))


def validate_closing_date(closing_date: Any) -> ValidationResult[ClosingDate]:
    """Parse the closing date and normalise it to a UTC instant."""
    if isinstance(closing_date, datetime):
        instant = ensure_utc(closing_date)
    else:
        instant = parse_datetime(closing_date)

    if instant is None:
        return ValidationResult.fail(
            "closing_date", "Invalid closing_date. Must be a valid date string"
        )

    return ValidationResult.ok(ClosingDate(instant=instant, iso=to_iso_instant(instant)))


def validate_optional_string_field(value: Any, field_name: str) -> ValidationResult[str]:
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.fail(field_name, f"{field_name} must be a non-empty string")
    return ValidationResult.ok(value)


def validate_create_job_role(payload: JobRoleCreate) -> ValidationResult[NewJobRole]:
    required = validate_required_fields(payload)
    if not required.is_valid:
        return ValidationResult(errors=required.errors)

    status = validate_status(payload.status)
    if not status.is_valid:
        return ValidationResult(errors=status.errors)

    positions = validate_number_of_open_positions(payload.number_of_open_positions)
    if not positions.is_valid:
        return ValidationResult(errors=positions.errors)

    closing_date = validate_closing_date(payload.closing_date)
    if not closing_date.is_valid:
        return ValidationResult(errors=closing_date.errors)

    return ValidationResult.ok(
        NewJobRole(
            name=payload.name,
            location=payload.location,
            capability=payload.capability,
            band=payload.band,
            closing_date=closing_date.value.instant,
            summary=payload.summary,
            key_responsibilities=payload.key_responsibilities,
            status=status.value,
            number_of_open_positions=positions.value,
        )
    )


def validate_update_job_role(payload: JobRoleUpdate) -> ValidationResult[JobRoleChanges]:
    present = payload.model_fields_set
    if not present:
        return ValidationResult.fail(
            "body", "At least one field must be provided for update"
        )

    changes: dict[str, Any] = {}

    for name in TEXT_FIELDS:
        if name in present:
            result = validate_optional_string_field(getattr(payload, name), name)
            if not result.is_valid:
                return ValidationResult(errors=result.errors)
            changes[name] = result.value

    if "status" in present:
        if payload.status is None:
            return ValidationResult.fail("status", "Invalid status. Must be 'open' or 'closed'")
        status = validate_status(payload.status)
        if not status.is_valid:
            return ValidationResult(errors=status.errors)
        changes["status"] = status.value

    if "number_of_open_positions" in present:
        if payload.number_of_open_positions is None:
            return ValidationResult.fail(
                "number_of_open_positions",
                "number_of_open_positions must be a non-negative number",
            )
        positions = validate_number_of_open_positions(payload.number_of_open_positions)
        if not positions.is_valid:
            return ValidationResult(errors=positions.errors)
        changes["number_of_open_positions"] = positions.value

    if "closing_date" in present:
        closing_date = validate_closing_date(payload.closing_date)
        if not closing_date.is_valid:
            return ValidationResult(errors=closing_date.errors)
        changes["closing_date"] = closing_date.value.instant

    return ValidationResult.ok(JobRoleChanges(**changes))
