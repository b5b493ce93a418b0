"""UsageRecord ORM — persists the free-generation counter per identity email.

Invariants:
    - email is the primary key, stored exactly as submitted (no normalization)
    - count only ever increases (committed generations)
    - in_flight counts reservations taken by the quota gate and not yet
      committed or released; count + in_flight never exceeds the limit
      at reservation time

Design Decisions:
    - Separate in_flight column over decrementing count on failure: count stays
      monotonic while concurrent requests still see each other's reservations
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from concept_studio.db.base import Base


class UsageRecord(Base):
    """Per-identity quota state."""
    __tablename__ = "usage_records"
    __table_args__ = (
        CheckConstraint("count >= 0", name="ck_usage_records_count_non_negative"),
        CheckConstraint("in_flight >= 0", name="ck_usage_records_in_flight_non_negative"),
    )

    email: Mapped[str] = mapped_column(String(320), primary_key=True)
    count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    in_flight: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
