"""
Application validation.

Checks identifiers, CV payloads (text or uploaded file) and hiring status
transitions. Every check collects all of its violations rather than stopping
at the first.
"""

from pathlib import Path
from typing import Any, Optional

from core.config import CVUploadPolicy
from core.errors import FieldError
from core.storage.local import CVUpload
from core.validators.base import ValidationResult, validate_positive_id
from database.models.applications import ApplicationStatus

CV_TEXT_MIN_LENGTH = 50
CV_TEXT_MAX_LENGTH = 10_000
MAX_FILENAME_LENGTH = 255

TERMINAL_TARGETS = (ApplicationStatus.HIRED, ApplicationStatus.REJECTED)


def validate_job_role_id(job_role_id: Any) -> ValidationResult[int]:
    return validate_positive_id(job_role_id, "job_role_id", "job role ID")


def validate_user_id(user_id: Any) -> ValidationResult[int]:
    return validate_positive_id(user_id, "user_id", "user ID")


def validate_application_id(application_id: Any) -> ValidationResult[int]:
    return validate_positive_id(application_id, "application_id", "application ID")


def validate_cv_text(cv_text: Any) -> ValidationResult[str]:
    """CV text must have at least 50 non-blank-padded characters and at most 10,000."""
    if not isinstance(cv_text, str) or not cv_text:
        return ValidationResult.fail("cv_text", "CV text is required")

    errors = []
    if len(cv_text.strip()) < CV_TEXT_MIN_LENGTH:
        errors.append(
            FieldError(
                "cv_text",
                f"CV text must be at least {CV_TEXT_MIN_LENGTH} characters long",
            )
        )
    if len(cv_text) > CV_TEXT_MAX_LENGTH:
        errors.append(
            FieldError(
                "cv_text",
                f"CV text must not exceed {CV_TEXT_MAX_LENGTH} characters",
            )
        )

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult.ok(cv_text.strip())


def validate_status_transition(current: Any, target: Any) -> ValidationResult[ApplicationStatus]:
    """
    Only ``in progress -> hired`` and ``in progress -> rejected`` are legal.

    The source status and the target status are checked independently so
    both problems are reported when both are wrong.
    """
    current_value = getattr(current, "value", current)
    target_value = getattr(target, "value", target)
    errors = []

    if current_value != ApplicationStatus.IN_PROGRESS.value:
        errors.append(
            FieldError(
                "status",
                f'Cannot change status from "{current_value}" to "{target_value}". '
                f'Only applications with status "in progress" can be hired or rejected.',
            )
        )

    if target_value not in [s.value for s in TERMINAL_TARGETS]:
        errors.append(
            FieldError(
                "status",
                f'Invalid status "{target_value}". Must be "hired" or "rejected".',
            )
        )

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult.ok(ApplicationStatus(target_value))


class ApplicationValidator:
    """Validates application payloads against the configured CV upload policy."""

    def __init__(self, policy: CVUploadPolicy):
        self.policy = policy

    def validate_cv_file(self, upload: Optional[CVUpload]) -> ValidationResult[CVUpload]:
        if upload is None:
            return ValidationResult.fail("cv_file", "CV file is required")

        policy = self.policy
        errors = []

        if upload.size > policy.max_file_size:
            errors.append(
                FieldError(
                    "cv_file",
                    f"File size ({upload.size / (1024 * 1024):.2f}MB) exceeds maximum "
                    f"allowed size ({policy.max_file_size / (1024 * 1024):g}MB)",
                )
            )

        if upload.content_type not in policy.allowed_mime_types:
            errors.append(
                FieldError(
                    "cv_file",
                    f"Invalid file type ({upload.content_type}). "
                    f"Allowed types: {', '.join(policy.allowed_mime_types)}",
                )
            )

        filename = upload.filename or ""
        extension = Path(filename).suffix.lower()
        if extension not in policy.allowed_extensions:
            errors.append(
                FieldError(
                    "cv_file",
                    f"Invalid file extension ({extension or 'none'}). "
                    f"Allowed extensions: {', '.join(policy.allowed_extensions)}",
                )
            )

        if not filename.strip():
            errors.append(FieldError("cv_file", "File must have a valid filename"))
        elif len(filename) > MAX_FILENAME_LENGTH:
            errors.append(
                FieldError(
                    "cv_file",
                    f"Filename is too long (maximum {MAX_FILENAME_LENGTH} characters)",
                )
            )

        if errors:
            return ValidationResult(errors=errors)
        return ValidationResult.ok(upload)

    def validate_application(
        self,
        user_id: Any,
        job_role_id: Any,
        cv_text: Optional[str] = None,
        cv_file: Optional[CVUpload] = None,
    ) -> ValidationResult[None]:
        """Validate a whole submission, aggregating every field error."""
        errors = []
        errors.extend(validate_user_id(user_id).errors)
        errors.extend(validate_job_role_id(job_role_id).errors)

        if cv_text is not None and cv_file is not None:
            errors.append(
                FieldError("cv", "Provide either CV text or a CV file, not both")
            )
        elif cv_file is not None:
            errors.extend(self.validate_cv_file(cv_file).errors)
        else:
            errors.extend(validate_cv_text(cv_text).errors)

        return ValidationResult(errors=errors)
