"""Job role request and response schemas."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from core.utils.datetime import to_iso_instant
from database.models.jobs import JobRoleStatus


class JobRoleCreate(BaseModel):
    """
    Job role creation payload.

    Fields are deliberately loose here; business validation happens in
    ``core.validators.job_roles`` so that every problem is reported with a
    domain message instead of a schema error.
    """

    name: Optional[str] = None
    location: Optional[str] = None
    capability: Optional[str] = None
    band: Optional[str] = None
    closing_date: Optional[Union[str, datetime]] = None
    summary: Optional[str] = None
    key_responsibilities: Optional[str] = None
    status: Optional[str] = None
    number_of_open_positions: Optional[Union[int, float]] = None


class JobRoleUpdate(JobRoleCreate):
    """
    Partial update payload.

    Only the fields the caller actually sent (``model_fields_set``) are
    considered present.
    """


class JobRoleRead(BaseModel):
    """Job role as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str
    capability: str
    band: str
    closing_date: datetime
    summary: str
    key_responsibilities: str
    status: JobRoleStatus
    number_of_open_positions: int = Field(ge=0)

    @field_serializer("closing_date")
    def serialize_closing_date(self, value: datetime) -> str:
        return to_iso_instant(value)


class JobRoleSummary(BaseModel):
    id: int
    name: str


class JobRoleList(BaseModel):
    jobs: list[JobRoleRead]
    total: int = Field(ge=0)


class DeleteJobRoleResult(BaseModel):
    success: bool
    job: JobRoleSummary
    deleted_applications_count: int = Field(ge=0)
