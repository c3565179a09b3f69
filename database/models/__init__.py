"""Database models."""

from database.models.jobs import JobRole, JobRoleStatus
from database.models.applications import Application, ApplicationStatus

__all__ = [
    "JobRole",
    "JobRoleStatus",
    "Application",
    "ApplicationStatus",
]
