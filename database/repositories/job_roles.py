"""Job role persistence."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional
import logging

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.applications import Application
from database.models.jobs import JobRole, JobRoleStatus
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewJobRole:
    """Fully validated fields for a job role insert."""

    name: str
    location: str
    capability: str
    band: str
    closing_date: datetime
    summary: str
    key_responsibilities: str
    status: JobRoleStatus
    number_of_open_positions: int


@dataclass(frozen=True)
class JobRoleChanges:
    """Fields to apply in a partial update. ``None`` means "leave unchanged"."""

    name: Optional[str] = None
    location: Optional[str] = None
    capability: Optional[str] = None
    band: Optional[str] = None
    closing_date: Optional[datetime] = None
    summary: Optional[str] = None
    key_responsibilities: Optional[str] = None
    status: Optional[JobRoleStatus] = None
    number_of_open_positions: Optional[int] = None

    def as_values(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class JobRoleFilters:
    """Exact-match filters for job role listings."""

    location: Optional[str] = None
    capability: Optional[str] = None
    band: Optional[str] = None


@dataclass
class CascadeDeleteResult:
    """Outcome of deleting a job role together with its applications."""

    job: Optional[JobRole]
    deleted_applications_count: int = 0
    cv_file_paths: list[str] = field(default_factory=list)


class JobRoleRepository(BaseRepository):
    """Reads and writes ``JobRole`` rows."""

    @staticmethod
    def _where(search: Optional[str], filters: Optional[JobRoleFilters]) -> list:
        conditions = []

        if search and search.strip():
            conditions.append(JobRole.name.icontains(search.strip(), autoescape=True))

        if filters:
            if filters.location and filters.location.strip():
                conditions.append(JobRole.location == filters.location)
            if filters.capability and filters.capability.strip():
                conditions.append(JobRole.capability == filters.capability)
            if filters.band and filters.band.strip():
                conditions.append(JobRole.band == filters.band)

        return conditions

    async def find_all(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        filters: Optional[JobRoleFilters] = None,
        session: Optional[AsyncSession] = None,
    ) -> list[JobRole]:
        query = select(JobRole)

        conditions = self._where(search, filters)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(JobRole.id)

        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)

        async with self._session(session) as s:
            result = await s.execute(query)
            return list(result.scalars().all())

    async def count(
        self,
        search: Optional[str] = None,
        filters: Optional[JobRoleFilters] = None,
        session: Optional[AsyncSession] = None,
    ) -> int:
        query = select(func.count()).select_from(JobRole)

        conditions = self._where(search, filters)
        if conditions:
            query = query.where(and_(*conditions))

        async with self._session(session) as s:
            result = await s.execute(query)
            return result.scalar() or 0

    async def find_by_id(
        self, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[JobRole]:
        async with self._session(session) as s:
            result = await s.execute(select(JobRole).where(JobRole.id == job_role_id))
            return result.scalar_one_or_none()

    async def find_by_status(
        self, status: JobRoleStatus, session: Optional[AsyncSession] = None
    ) -> list[JobRole]:
        async with self._session(session) as s:
            result = await s.execute(
                select(JobRole).where(JobRole.status == status).order_by(JobRole.id)
            )
            return list(result.scalars().all())

    async def create(
        self, fields: NewJobRole, session: Optional[AsyncSession] = None
    ) -> JobRole:
        job = JobRole(**asdict(fields))
        async with self._session(session) as s:
            s.add(job)
            await s.flush()
        logger.info(f"Created job role {job.id}: {job.name}")
        return job

    async def update(
        self,
        job_role_id: int,
        changes: JobRoleChanges,
        session: Optional[AsyncSession] = None,
    ) -> Optional[JobRole]:
        values = changes.as_values()
        async with self._session(session) as s:
            if not values:
                return await self.find_by_id(job_role_id, session=s)

            result = await s.execute(
                update(JobRole)
                .where(JobRole.id == job_role_id)
                .values(**values)
                .returning(JobRole)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def decrement_open_positions(
        self, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[JobRole]:
        """
        Take one open position in a single statement.

        The ``> 0`` guard makes this a compare-and-decrement: concurrent
        hires cannot both consume the last position, and the count never
        goes negative. Returns ``None`` if the role is unknown or has no
        positions left.
        """
        async with self._session(session) as s:
            result = await s.execute(
                update(JobRole)
                .where(
                    JobRole.id == job_role_id,
                    JobRole.number_of_open_positions > 0,
                )
                .values(number_of_open_positions=JobRole.number_of_open_positions - 1)
                .returning(JobRole)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def delete_with_applications(
        self, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> CascadeDeleteResult:
        """
        Delete a job role and every application against it, all-or-nothing.

        An unknown id yields ``CascadeDeleteResult(job=None)`` and touches
        nothing.
        """
        async with self._session(session) as s:
            job = await self.find_by_id(job_role_id, session=s)
            if job is None:
                return CascadeDeleteResult(job=None)

            count_result = await s.execute(
                select(func.count())
                .select_from(Application)
                .where(Application.job_role_id == job_role_id)
            )
            application_count = count_result.scalar() or 0

            paths_result = await s.execute(
                select(Application.cv_file_path).where(
                    Application.job_role_id == job_role_id,
                    Application.cv_file_path.is_not(None),
                )
            )
            cv_file_paths = list(paths_result.scalars().all())

            await s.execute(
                delete(Application)
                .where(Application.job_role_id == job_role_id)
                .execution_options(synchronize_session=False)
            )
            await s.execute(
                delete(JobRole)
                .where(JobRole.id == job_role_id)
                .execution_options(synchronize_session=False)
            )

        logger.info(
            f"Deleted job role {job_role_id} with {application_count} application(s)"
        )
        return CascadeDeleteResult(
            job=job,
            deleted_applications_count=application_count,
            cv_file_paths=cv_file_paths,
        )
