"""
Application Models

A candidate's submission against a job role. The CV is either raw text or a
reference to a file held by the blob store.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    Index,
    UniqueConstraint,
)
from database.engine import Base
from database.types import UTCDateTime, value_enum
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.jobs import JobRole


# ==================== Application Enums ===================== #
class ApplicationStatus(str, PyEnum):
    """Hiring status. Hired and rejected are terminal."""

    IN_PROGRESS = "in progress"
    HIRED = "hired"
    REJECTED = "rejected"


# ==================== Application Model ===================== #
class Application(Base):
    """Job application submitted by an authenticated user."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    job_role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("job_roles.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # CV payload: text or stored file
    cv_text: Mapped[str | None] = mapped_column(Text)
    cv_file_name: Mapped[str | None] = mapped_column(String(255))
    cv_file_path: Mapped[str | None] = mapped_column(String(1024))
    cv_mime_type: Mapped[str | None] = mapped_column(String(255))
    cv_file_size: Mapped[int | None] = mapped_column(Integer)

    status: Mapped[ApplicationStatus] = mapped_column(
        value_enum(ApplicationStatus),
        nullable=False,
        default=ApplicationStatus.IN_PROGRESS,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Read-only navigation; job roles do not own a collection of applications
    job_role: Mapped["JobRole"] = relationship(lazy="raise", viewonly=True)

    __table_args__ = (
        UniqueConstraint("user_id", "job_role_id", name="uq_application_user_job_role"),
        CheckConstraint(
            "cv_text IS NOT NULL OR cv_file_path IS NOT NULL",
            name="ck_applications_has_cv",
        ),
        Index("idx_applications_job_role_status", "job_role_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Application id={self.id} job_role_id={self.job_role_id} "
            f"status={self.status.value}>"
        )
