"""Job role service functions."""

from typing import Any, Dict, List, Optional
import logging

from api.schemas.jobs import (
    DeleteJobRoleResult,
    JobRoleCreate,
    JobRoleRead,
    JobRoleSummary,
    JobRoleUpdate,
)
from core.errors import DomainError
from core.storage.local import BlobStore
from core.validators.job_roles import (
    validate_create_job_role,
    validate_update_job_role,
)
from database.engine import Database
from database.models.jobs import JobRoleStatus
from database.repositories.applications import ApplicationRepository
from database.repositories.job_roles import JobRoleFilters, JobRoleRepository

logger = logging.getLogger(__name__)


class JobRoleService:
    """
    Job role CRUD with the active-application guard.

    A role cannot be closed or deleted while any of its applications is still
    ``in progress``, unless a delete is forced. The check and the write share
    one transaction.
    """

    def __init__(
        self,
        db: Database,
        job_roles: JobRoleRepository,
        applications: ApplicationRepository,
        storage: BlobStore,
    ):
        self.db = db
        self.job_roles = job_roles
        self.applications = applications
        self.storage = storage

    async def get_all_job_roles(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        filters: Optional[JobRoleFilters] = None,
    ) -> Dict[str, Any]:
        """
        List job roles.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            search: Case-insensitive substring matched against the name
            filters: Exact location/capability/band filters

        Returns:
            ``{"jobs": [...], "total": n}`` where ``total`` counts every
            matching role, not just this page
        """
        async with self.db.session() as session:
            jobs = await self.job_roles.find_all(
                limit=limit, offset=offset, search=search, filters=filters, session=session
            )
            total = await self.job_roles.count(search=search, filters=filters, session=session)

        return {
            "jobs": [JobRoleRead.model_validate(job) for job in jobs],
            "total": total,
        }

    async def get_job_role_by_id(self, job_role_id: int) -> Optional[JobRoleRead]:
        job = await self.job_roles.find_by_id(job_role_id)
        if job is None:
            return None
        return JobRoleRead.model_validate(job)

    async def get_job_roles_by_status(self, status: str) -> List[JobRoleRead]:
        try:
            status_value = JobRoleStatus(status)
        except ValueError:
            raise DomainError.validation("Invalid status. Must be 'open' or 'closed'") from None

        jobs = await self.job_roles.find_by_status(status_value)
        return [JobRoleRead.model_validate(job) for job in jobs]

    async def create_job_role(self, payload: JobRoleCreate) -> JobRoleRead:
        fields = validate_create_job_role(payload).raise_for_errors()

        job = await self.job_roles.create(fields)
        if job is None:
            raise DomainError.internal("Failed to create job role")

        return JobRoleRead.model_validate(job)

    async def update_job_role(self, job_role_id: int, payload: JobRoleUpdate) -> JobRoleRead:
        """
        Apply a partial update.

        Closing an open role is refused with a conflict while it still has
        active applications. Reopening a closed role is always allowed.
        """
        async with self.db.transaction() as session:
            existing = await self.job_roles.find_by_id(job_role_id, session=session)
            if existing is None:
                raise DomainError.not_found(f"Job role with ID {job_role_id} not found")

            if not payload.model_fields_set:
                return JobRoleRead.model_validate(existing)

            changes = validate_update_job_role(payload).raise_for_errors()

            if changes.status is JobRoleStatus.CLOSED and existing.status is JobRoleStatus.OPEN:
                active = await self.applications.count_active_by_job_role_id(
                    job_role_id, session=session
                )
                if active > 0:
                    logger.warning(
                        f"Refused to close job role {job_role_id}: {active} active application(s)"
                    )
                    raise DomainError.conflict(
                        f"Cannot close job role with {active} active application(s). "
                        f"Please process all applications before closing the position."
                    )

            updated = await self.job_roles.update(job_role_id, changes, session=session)
            if updated is None:
                raise DomainError.internal("Failed to update job role")

        logger.info(f"Updated job role {job_role_id}: {sorted(changes.as_values())}")
        return JobRoleRead.model_validate(updated)

    async def delete_job_role(
        self, job_role_id: int, force_delete: bool = False
    ) -> DeleteJobRoleResult:
        """
        Delete a job role together with its applications.

        Args:
            job_role_id: Role to delete
            force_delete: Skip the active-application check

        Returns:
            The deleted role's id and name and how many applications went with it
        """
        async with self.db.transaction() as session:
            existing = await self.job_roles.find_by_id(job_role_id, session=session)
            if existing is None:
                raise DomainError.not_found(f"Job role with ID {job_role_id} not found")

            if not force_delete:
                active = await self.applications.count_active_by_job_role_id(
                    job_role_id, session=session
                )
                if active > 0:
                    logger.warning(
                        f"Refused to delete job role {job_role_id}: {active} active application(s)"
                    )
                    raise DomainError.conflict(
                        f"Cannot delete job role with {active} active application(s). "
                        f"Please process all applications before deletion or use force delete."
                    )

            result = await self.job_roles.delete_with_applications(job_role_id, session=session)
            if result.job is None:
                raise DomainError.internal(
                    "Failed to delete job role - job not found during deletion"
                )

        for path in result.cv_file_paths:
            self._discard_cv_file(path)

        if force_delete:
            logger.info(
                f"Force-deleted job role {job_role_id} "
                f"({result.deleted_applications_count} application(s))"
            )

        return DeleteJobRoleResult(
            success=True,
            job=JobRoleSummary(id=result.job.id, name=result.job.name),
            deleted_applications_count=result.deleted_applications_count,
        )

    def _discard_cv_file(self, path: str) -> None:
        try:
            self.storage.delete(path)
        except Exception as e:
            logger.error(f"Failed to delete CV file {path}: {e}")
