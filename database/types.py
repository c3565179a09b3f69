"""Column types shared by the models."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional, Type

from sqlalchemy import DateTime, Enum as SQLEnum
from sqlalchemy.types import TypeDecorator

from core.utils.datetime import ensure_utc


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime column.

    SQLite hands back naive values even for ``DateTime(timezone=True)``;
    values are normalised to UTC in both directions so callers always
    see aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)


def value_enum(enum_cls: Type[PyEnum], length: int = 50) -> SQLEnum:
    """Non-native enum column that stores the member values, not names."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [m.value for m in members],
    )
