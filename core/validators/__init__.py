"""
Domain validators.

Pure functions and classes with no I/O. They return ``ValidationResult``
values and never raise for expected invalid input.
"""

from core.validators.base import ValidationResult, validate_positive_id
from core.validators.applications import (
    ApplicationValidator,
    validate_application_id,
    validate_cv_text,
    validate_job_role_id,
    validate_status_transition,
    validate_user_id,
)
from core.validators.job_roles import (
    validate_closing_date,
    validate_create_job_role,
    validate_number_of_open_positions,
    validate_required_fields,
    validate_status,
    validate_update_job_role,
)

__all__ = [
    "ValidationResult",
    "validate_positive_id",
    # Applications
    "ApplicationValidator",
    "validate_application_id",
    "validate_cv_text",
    "validate_job_role_id",
    "validate_status_transition",
    "validate_user_id",
    # Job roles
    "validate_closing_date",
    "validate_create_job_role",
    "validate_number_of_open_positions",
    "validate_required_fields",
    "validate_status",
    "validate_update_job_role",
]
