"""Application persistence."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.applications import Application, ApplicationStatus
from database.models.jobs import JobRole
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewApplication:
    """Fields for an application insert."""

    job_role_id: int
    user_id: int
    status: ApplicationStatus
    created_at: datetime
    cv_text: Optional[str] = None
    cv_file_name: Optional[str] = None
    cv_file_path: Optional[str] = None
    cv_mime_type: Optional[str] = None
    cv_file_size: Optional[int] = None


@dataclass(frozen=True)
class ApplicationWithJobRole:
    application: Application
    job_role: JobRole


class ApplicationRepository(BaseRepository):
    """Reads and writes ``Application`` rows."""

    async def create(
        self, fields: NewApplication, session: Optional[AsyncSession] = None
    ) -> Application:
        application = Application(**asdict(fields))
        async with self._session(session) as s:
            s.add(application)
            await s.flush()
        return application

    async def find_by_id(
        self, application_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[Application]:
        async with self._session(session) as s:
            result = await s.execute(
                select(Application).where(Application.id == application_id)
            )
            return result.scalar_one_or_none()

    async def find_by_id_with_job_role(
        self, application_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[ApplicationWithJobRole]:
        """Fetch an application and its job role in one joined read."""
        async with self._session(session) as s:
            result = await s.execute(
                select(Application, JobRole)
                .join(JobRole, Application.job_role_id == JobRole.id)
                .where(Application.id == application_id)
            )
            row = result.first()
            if row is None:
                return None
            return ApplicationWithJobRole(application=row[0], job_role=row[1])

    async def find_by_job_role_id(
        self, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> list[Application]:
        """Applications for a job role, newest first."""
        async with self._session(session) as s:
            result = await s.execute(
                select(Application)
                .where(Application.job_role_id == job_role_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            )
            return list(result.scalars().all())

    async def find_by_user_id(
        self, user_id: int, session: Optional[AsyncSession] = None
    ) -> list[Application]:
        """Applications submitted by a user, newest first."""
        async with self._session(session) as s:
            result = await s.execute(
                select(Application)
                .where(Application.user_id == user_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            )
            return list(result.scalars().all())

    async def find_by_user_and_job_role(
        self, user_id: int, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[Application]:
        async with self._session(session) as s:
            result = await s.execute(
                select(Application).where(
                    Application.user_id == user_id,
                    Application.job_role_id == job_role_id,
                )
            )
            return result.scalar_one_or_none()

    async def count_active_by_job_role_id(
        self, job_role_id: int, session: Optional[AsyncSession] = None
    ) -> int:
        """Number of ``in progress`` applications for a job role."""
        async with self._session(session) as s:
            result = await s.execute(
                select(func.count())
                .select_from(Application)
                .where(
                    Application.job_role_id == job_role_id,
                    Application.status == ApplicationStatus.IN_PROGRESS,
                )
            )
            return result.scalar() or 0

    async def update_status(
        self,
        application_id: int,
        status: ApplicationStatus,
        expected_status: Optional[ApplicationStatus] = None,
        session: Optional[AsyncSession] = None,
    ) -> Optional[Application]:
        """
        Set an application's status in a single statement.

        With ``expected_status`` the update only applies while the row still
        has that status, so two racing transitions cannot both win. Returns
        ``None`` when no row matched.
        """
        query = update(Application).where(Application.id == application_id)
        if expected_status is not None:
            query = query.where(Application.status == expected_status)

        async with self._session(session) as s:
            result = await s.execute(
                query.values(status=status)
                .returning(Application)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def delete(
        self, application_id: int, session: Optional[AsyncSession] = None
    ) -> Optional[Application]:
        async with self._session(session) as s:
            application = await self.find_by_id(application_id, session=s)
            if application is None:
                return None
            await s.execute(
                delete(Application)
                .where(Application.id == application_id)
                .execution_options(synchronize_session=False)
            )
        logger.info(f"Deleted application {application_id}")
        return application
