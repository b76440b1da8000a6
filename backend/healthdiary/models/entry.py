"""
Health Diary Backend — Diary Entry SQLAlchemy Model
====================================================

What:  ORM model for the `diary_entries` table.
Why:   One row per recorded observation: a user may log several entries on
       the same calendar date; created_at decides which one is "latest".
How:   entry_date is a DATE column, so time-of-day and timezone never leak
       into date comparisons. Metrics are nullable; the form may omit any.

Index on (user_id, entry_date):
    The only hot query is "all entries of one user, newest date first".
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from healthdiary.database import Base


class DiaryEntry(Base):
    """
    A single diary record for one user on one calendar date.

    Lifecycle:
        1. Created from the entry form (no id yet)
        2. May be updated in place (same entry_id, same user_id)
        3. May be deleted by its owner; deleted with the owning user
    """

    __tablename__ = "diary_entries"

    entry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )

    entry_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Sad, Tired, Neutral, Satisfied, Happy
    mood: Mapped[Optional[str]] = mapped_column(String(25), nullable=True)

    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True, comment="kg")
    sleep_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_diary_entries_user_date", "user_id", "entry_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<DiaryEntry(entry_id={self.entry_id}, user_id={self.user_id}, "
            f"entry_date='{self.entry_date}')>"
        )
