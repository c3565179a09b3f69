"""Application request and response schemas."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from core.storage.local import CVUpload
from core.utils.datetime import to_iso_instant
from database.models.applications import ApplicationStatus
from api.schemas.jobs import JobRoleRead


@dataclass(frozen=True)
class ApplicationCreate:
    """
    Submission payload.

    ``user_id`` comes from the authenticated caller, never from the request
    body. Exactly one of ``cv_text`` and ``cv_file`` is expected; a file has
    already been received by the transport layer but not yet stored.
    """

    user_id: int
    job_role_id: int
    cv_text: Optional[str] = None
    cv_file: Optional[CVUpload] = None


class ApplicationTextBody(BaseModel):
    """JSON body for a text-CV submission."""

    job_role_id: int
    cv_text: str


class ApplicationRead(BaseModel):
    """Application as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    job_role_id: int
    user_id: int
    cv_text: Optional[str] = None
    cv_file_name: Optional[str] = None
    cv_mime_type: Optional[str] = None
    cv_file_size: Optional[int] = None
    status: ApplicationStatus
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso_instant(value)


class CVFileInfo(BaseModel):
    """Recorded CV file metadata checked against what is actually stored."""

    application_id: int
    file_name: str
    mime_type: str
    file_size: int
    exists: bool
    actual_size: Optional[int] = None
    is_consistent: bool


class HireResult(BaseModel):
    application: ApplicationRead
    job_role: JobRoleRead


class ApplicationList(BaseModel):
    applications: list[ApplicationRead]
    count: int = Field(ge=0)
