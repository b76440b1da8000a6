"""
Health Diary Client — Typed Payloads
=====================================

What:  pydantic models for the data that moves between the API, the entry
       cache and the components (DiaryEntry, User, MonthChange, DayEntries).
How:   entry_date is always normalized to "YYYY-MM-DD" on the way in so
       components can compare dates as plain strings.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from healthdiary_client.utils.date_utils import to_iso_date


class Mood(str, Enum):
    SAD = "Sad"
    TIRED = "Tired"
    NEUTRAL = "Neutral"
    SATISFIED = "Satisfied"
    HAPPY = "Happy"


# Numeric scale used by the chart and the form's 1-5 slider
MOOD_SCALE = {
    Mood.SAD.value: 1,
    Mood.TIRED.value: 2,
    Mood.NEUTRAL.value: 3,
    Mood.SATISFIED.value: 4,
    Mood.HAPPY.value: 5,
}

DEFAULT_MOOD_LEVEL = 3


def mood_from_level(level: Any) -> str:
    """Slider value (1-5) → mood name; anything else → Neutral."""
    try:
        level = int(level)
    except (TypeError, ValueError):
        level = DEFAULT_MOOD_LEVEL
    for name, value in MOOD_SCALE.items():
        if value == level:
            return name
    return Mood.NEUTRAL.value


def level_from_mood(mood: Optional[str]) -> int:
    return MOOD_SCALE.get(mood or "", DEFAULT_MOOD_LEVEL)


class DiaryEntry(BaseModel):
    entry_id: int
    user_id: Optional[int] = None
    entry_date: str
    mood: Optional[str] = None
    weight: Optional[float] = None
    sleep_hours: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("entry_date", mode="before")
    @classmethod
    def normalize_entry_date(cls, v: Any) -> str:
        return to_iso_date(v)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # SQLite drops the offset; treat naive server timestamps as UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class User(BaseModel):
    user_id: int
    username: str
    email: Optional[str] = None
    user_level: str = "regular"

    model_config = {"extra": "ignore"}


class MonthChange(BaseModel):
    """Payload of calendar:month-changed."""
    year: int
    month: int = Field(ge=1, le=12)
    entries: List[DiaryEntry] = Field(default_factory=list)


class DayEntries(BaseModel):
    """Payload of entries:list: the entries of one calendar day."""
    date: str
    entries: List[DiaryEntry] = Field(default_factory=list)
