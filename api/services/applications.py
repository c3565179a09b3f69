"""
Application service functions.

Creation with eligibility checks, and the hire/reject state machine:

    in progress --hire (positions > 0)--> hired      (terminal)
    in progress --reject----------------> rejected   (terminal)
"""

from dataclasses import dataclass, replace
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError

from api.schemas.applications import (
    ApplicationCreate,
    ApplicationRead,
    CVFileInfo,
    HireResult,
)
from api.schemas.jobs import JobRoleRead
from core.errors import DomainError, ErrorKind
from core.storage.local import BlobStore, StoredFile
from core.utils.datetime import Clock, now
from core.validators.applications import (
    ApplicationValidator,
    validate_application_id,
    validate_job_role_id,
    validate_status_transition,
    validate_user_id,
)
from database.engine import Database
from database.models.applications import Application, ApplicationStatus
from database.models.jobs import JobRoleStatus
from database.repositories.applications import ApplicationRepository, NewApplication
from database.repositories.job_roles import JobRoleRepository

logger = logging.getLogger(__name__)

NO_OPEN_POSITIONS = "There are no open positions for this job role"


@dataclass(frozen=True)
class CVFile:
    """A stored CV ready to be streamed back to a caller."""

    filename: str
    mime_type: str
    data: bytes


class ApplicationService:
    """Application lifecycle over the repositories and the CV blob store."""

    def __init__(
        self,
        db: Database,
        applications: ApplicationRepository,
        job_roles: JobRoleRepository,
        validator: ApplicationValidator,
        storage: BlobStore,
        clock: Clock = now,
    ):
        self.db = db
        self.applications = applications
        self.job_roles = job_roles
        self.validator = validator
        self.storage = storage
        self.clock = clock

    async def create_application(self, payload: ApplicationCreate) -> ApplicationRead:
        """
        Submit an application.

        The role must exist, be open and have at least one open position, and
        the user must not already have applied to it. A CV file is only
        written to the blob store once every check has passed; if the insert
        then fails the file is removed again before the error propagates.
        """
        self.validator.validate_application(
            user_id=payload.user_id,
            job_role_id=payload.job_role_id,
            cv_text=payload.cv_text,
            cv_file=payload.cv_file,
        ).raise_for_errors()

        stored: Optional[StoredFile] = None
        try:
            async with self.db.transaction() as session:
                duplicate = await self.applications.find_by_user_and_job_role(
                    payload.user_id, payload.job_role_id, session=session
                )
                if duplicate is not None:
                    raise DomainError.business_logic(
                        "You have already applied for this job role"
                    )

                job_role = await self.job_roles.find_by_id(payload.job_role_id, session=session)
                if job_role is None:
                    raise DomainError.not_found("Job role not found")

                if job_role.status is not JobRoleStatus.OPEN:
                    raise DomainError.business_logic(
                        "This job role is not currently accepting applications"
                    )

                if job_role.number_of_open_positions <= 0:
                    raise DomainError.business_logic(NO_OPEN_POSITIONS)

                fields = NewApplication(
                    job_role_id=payload.job_role_id,
                    user_id=payload.user_id,
                    status=ApplicationStatus.IN_PROGRESS,
                    created_at=self.clock(),
                )

                if payload.cv_file is not None:
                    stored = self.storage.save(payload.cv_file)
                    fields = replace(
                        fields,
                        cv_file_name=payload.cv_file.filename,
                        cv_file_path=stored.path,
                        cv_mime_type=stored.mime_type,
                        cv_file_size=stored.size,
                    )
                else:
                    fields = replace(fields, cv_text=payload.cv_text.strip())

                try:
                    application = await self.applications.create(fields, session=session)
                except IntegrityError as e:
                    # A concurrent submission won the unique (user, job role) slot
                    logger.warning(
                        f"Duplicate application by user {payload.user_id} "
                        f"for job role {payload.job_role_id}: {e.orig}"
                    )
                    raise DomainError.business_logic(
                        "You have already applied for this job role"
                    ) from e
        except Exception:
            if stored is not None:
                logger.warning(f"Removing orphaned CV file {stored.path} after failed insert")
                self._discard_cv_file(stored.path)
            raise

        logger.info(
            f"Created application {application.id} for job role {application.job_role_id} "
            f"by user {application.user_id}"
        )
        return ApplicationRead.model_validate(application)

    async def get_application_by_id(self, application_id: int) -> Optional[ApplicationRead]:
        validate_application_id(application_id).raise_for_errors()

        application = await self.applications.find_by_id(application_id)
        if application is None:
            return None
        return ApplicationRead.model_validate(application)

    async def get_applications_by_job_role(self, job_role_id: int) -> List[ApplicationRead]:
        """Applications for a role, newest first. Empty when there are none."""
        validate_job_role_id(job_role_id).raise_for_errors()

        applications = await self.applications.find_by_job_role_id(job_role_id)
        return [ApplicationRead.model_validate(a) for a in applications]

    async def get_applications_by_user_id(self, user_id: int) -> List[ApplicationRead]:
        """Applications submitted by a user, newest first. Empty when there are none."""
        validate_user_id(user_id).raise_for_errors()

        applications = await self.applications.find_by_user_id(user_id)
        return [ApplicationRead.model_validate(a) for a in applications]

    async def hire_applicant(self, application_id: int) -> HireResult:
        """
        Hire an applicant and take one open position from the role.

        The status change and the decrement run in one transaction. Both are
        conditional single-statement updates, so of two concurrent hires for
        the last position exactly one commits; the other rolls back with
        "no open positions".
        """
        validate_application_id(application_id).raise_for_errors()

        found = await self.applications.find_by_id_with_job_role(application_id)
        if found is None:
            raise DomainError.not_found(f"Application with ID {application_id} not found")

        self._check_transition(found.application, ApplicationStatus.HIRED)

        job_role = found.job_role
        if job_role.status is JobRoleStatus.CLOSED:
            raise DomainError.business_logic(
                "Cannot hire for a job role that is closed"
            )
        if job_role.number_of_open_positions <= 0:
            raise DomainError.business_logic(NO_OPEN_POSITIONS)

        async with self.db.transaction() as session:
            hired = await self.applications.update_status(
                application_id,
                ApplicationStatus.HIRED,
                expected_status=ApplicationStatus.IN_PROGRESS,
                session=session,
            )
            if hired is None:
                raise DomainError.business_logic(
                    f'Application {application_id} is no longer "in progress"'
                )

            updated_job_role = await self.job_roles.decrement_open_positions(
                job_role.id, session=session
            )
            if updated_job_role is None:
                raise DomainError.business_logic(NO_OPEN_POSITIONS)

        logger.info(
            f"Hired application {application_id} for job role {job_role.id}; "
            f"{updated_job_role.number_of_open_positions} position(s) left"
        )
        return HireResult(
            application=ApplicationRead.model_validate(hired),
            job_role=JobRoleRead.model_validate(updated_job_role),
        )

    async def reject_applicant(self, application_id: int) -> ApplicationRead:
        validate_application_id(application_id).raise_for_errors()

        application = await self.applications.find_by_id(application_id)
        if application is None:
            raise DomainError.not_found(f"Application with ID {application_id} not found")

        self._check_transition(application, ApplicationStatus.REJECTED)

        rejected = await self.applications.update_status(
            application_id,
            ApplicationStatus.REJECTED,
            expected_status=ApplicationStatus.IN_PROGRESS,
        )
        if rejected is None:
            raise DomainError.business_logic(
                f'Application {application_id} is no longer "in progress"'
            )

        logger.info(f"Rejected application {application_id}")
        return ApplicationRead.model_validate(rejected)

    async def delete_application(self, application_id: int) -> ApplicationRead:
        """
        Delete an application and, best-effort, its CV file.

        A failure to remove the file is logged and does not fail the call.
        """
        validate_application_id(application_id).raise_for_errors()

        deleted = await self.applications.delete(application_id)
        if deleted is None:
            raise DomainError.not_found(f"Application with ID {application_id} not found")

        if deleted.cv_file_path:
            self._discard_cv_file(deleted.cv_file_path)

        return ApplicationRead.model_validate(deleted)

    async def get_cv_file(self, application_id: int) -> CVFile:
        """Load the stored CV file of an application."""
        validate_application_id(application_id).raise_for_errors()

        application = await self.applications.find_by_id(application_id)
        if application is None:
            raise DomainError.not_found(f"Application with ID {application_id} not found")

        if not application.cv_file_path or not self.storage.exists(application.cv_file_path):
            raise DomainError.not_found("CV file not found")

        return CVFile(
            filename=application.cv_file_name or "cv",
            mime_type=application.cv_mime_type or "application/octet-stream",
            data=self.storage.read(application.cv_file_path),
        )

    async def get_cv_file_info(self, application_id: int) -> CVFileInfo:
        validate_application_id(application_id).raise_for_errors()

        application = await self.applications.find_by_id(application_id)
        if application is None:
            raise DomainError.not_found(f"Application with ID {application_id} not found")

        if not application.cv_file_path:
            raise DomainError.not_found("CV file not found")

        exists = self.storage.exists(application.cv_file_path)
        actual_size = self.storage.size(application.cv_file_path) if exists else None
        return CVFileInfo(
            application_id=application.id,
            file_name=application.cv_file_name,
            mime_type=application.cv_mime_type,
            file_size=application.cv_file_size,
            exists=exists,
            actual_size=actual_size,
            is_consistent=actual_size == application.cv_file_size,
        )

    def _check_transition(self, application: Application, target: ApplicationStatus) -> None:
        transition = validate_status_transition(application.status, target)
        if not transition.is_valid:
            logger.warning(
                f"Refused {application.status.value} -> {target.value} "
                f"for application {application.id}"
            )
            raise DomainError(
                ErrorKind.BUSINESS_LOGIC,
                " ".join(e.message for e in transition.errors),
                transition.errors,
            )

    def _discard_cv_file(self, path: str) -> None:
        try:
            self.storage.delete(path)
        except Exception as e:
            logger.error(f"Failed to delete CV file {path}: {e}")
