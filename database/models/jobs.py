"""
Jobs Module

Job roles posted by recruiters, with an open/closed lifecycle and a
headcount of remaining open positions.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    CheckConstraint,
    Integer,
    String,
    Text,
    Index,
)
from database.engine import Base
from database.types import UTCDateTime, value_enum
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Job Enums ===================== #
class JobRoleStatus(str, PyEnum):
    """Job role posting status."""

    OPEN = "open"
    CLOSED = "closed"


# ==================== Job Role Model ===================== #
class JobRole(Base):
    """
    A posted position.

    ``number_of_open_positions`` only ever goes down through hires and is
    never negative; the check constraint backs the compare-and-decrement
    done by the repository.
    """

    __tablename__ = "job_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Classification
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    capability: Mapped[str] = mapped_column(String(255), nullable=False)
    band: Mapped[str] = mapped_column(String(100), nullable=False)

    closing_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Description
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    key_responsibilities: Mapped[str] = mapped_column(Text, nullable=False)

    # Lifecycle
    status: Mapped[JobRoleStatus] = mapped_column(
        value_enum(JobRoleStatus),
        nullable=False,
        default=JobRoleStatus.OPEN,
        index=True,
    )
    number_of_open_positions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )

    __table_args__ = (
        CheckConstraint(
            "number_of_open_positions >= 0", name="ck_job_roles_positions_non_negative"
        ),
        Index("idx_job_roles_filters", "location", "capability", "band"),
    )

    def __repr__(self) -> str:
        return f"<JobRole id={self.id} name={self.name!r} status={self.status.value}>"
