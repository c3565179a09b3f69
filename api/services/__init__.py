"""
API Services Layer.

Business rules for job roles and applications, on top of the repositories.
"""

from api.services.applications import ApplicationService, CVFile
from api.services.jobs import JobRoleService

__all__ = [
    "ApplicationService",
    "CVFile",
    "JobRoleService",
]
