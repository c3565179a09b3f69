"""
Application context.

Every collaborator the HTTP layer needs is built once at startup by
``build_context`` and kept on ``app.state``. Tests build their own context
against a throwaway database and storage directory.
"""

from dataclasses import dataclass

from api.services.applications import ApplicationService
from api.services.jobs import JobRoleService
from core.config import Settings
from core.storage.local import LocalCVStorage
from core.utils.datetime import Clock, now
from core.validators.applications import ApplicationValidator
from database.engine import Database
from database.repositories import ApplicationRepository, JobRoleRepository


@dataclass
class AppContext:
    db: Database
    job_roles: JobRoleRepository
    applications: ApplicationRepository
    storage: LocalCVStorage
    validator: ApplicationValidator
    job_role_service: JobRoleService
    application_service: ApplicationService

    async def close(self) -> None:
        await self.db.dispose()


def build_context(settings: Settings, clock: Clock = now) -> AppContext:
    """Wire repositories, storage, validator and services from settings."""
    db = Database(settings.database_url, echo=settings.database_echo)
    job_roles = JobRoleRepository(db)
    applications = ApplicationRepository(db)
    storage = LocalCVStorage(settings.cv_upload_dir, clock=clock)
    validator = ApplicationValidator(settings.cv_upload_policy)

    return AppContext(
        db=db,
        job_roles=job_roles,
        applications=applications,
        storage=storage,
        validator=validator,
        job_role_service=JobRoleService(db, job_roles, applications, storage),
        application_service=ApplicationService(
            db, applications, job_roles, validator, storage, clock=clock
        ),
    )
