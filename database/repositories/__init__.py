"""
Repository layer.

Abstract persistence for job roles and applications over the async engine.
"""

from database.repositories.applications import (
    ApplicationRepository,
    ApplicationWithJobRole,
    NewApplication,
)
from database.repositories.job_roles import (
    CascadeDeleteResult,
    JobRoleChanges,
    JobRoleFilters,
    JobRoleRepository,
    NewJobRole,
)

__all__ = [
    "ApplicationRepository",
    "ApplicationWithJobRole",
    "NewApplication",
    "CascadeDeleteResult",
    "JobRoleChanges",
    "JobRoleFilters",
    "JobRoleRepository",
    "NewJobRole",
]
