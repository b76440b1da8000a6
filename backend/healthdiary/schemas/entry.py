"""
Health Diary Backend — Diary Entry Schemas
===========================================

What:  Request/response contracts for /api/entries.
How:   entry_date accepts either "YYYY-MM-DD" or a full ISO datetime; the
       time component is discarded before parsing so "2025-03-01T23:30:00Z"
       is stored as 2025-03-01 regardless of server timezone.

Field rules:
    mood:        one of Sad, Tired, Neutral, Satisfied, Happy
    weight:      2-200 (kg)
    sleep_hours: 0-24
    notes:       trimmed free text
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Mood(str, Enum):
    SAD = "Sad"
    TIRED = "Tired"
    NEUTRAL = "Neutral"
    SATISFIED = "Satisfied"
    HAPPY = "Happy"


def _strip_time(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T")[0]
    return value


class EntryFields(BaseModel):
    """Fields shared by create and update; everything optional here."""
    entry_date: Optional[date] = Field(default=None, description="Calendar date (YYYY-MM-DD)")
    mood: Optional[Mood] = None
    weight: Optional[float] = Field(default=None, ge=2, le=200)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    notes: Optional[str] = None

    # mood is stored and serialized as its plain string value
    model_config = {"use_enum_values": True}

    @field_validator("entry_date", mode="before")
    @classmethod
    def normalize_entry_date(cls, v: Any) -> Any:
        return _strip_time(v)

    @field_validator("notes")
    @classmethod
    def trim_notes(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class EntryCreate(EntryFields):
    """Body of POST /api/entries. Only the date is mandatory."""
    entry_date: date


class EntryUpdate(EntryFields):
    """Body of PUT /api/entries/{id}. Partial: only sent fields are applied."""
    pass


class EntryResponse(BaseModel):
    entry_id: int
    user_id: int
    entry_date: date
    mood: Optional[str] = None
    weight: Optional[float] = None
    sleep_hours: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EntryCreatedResponse(BaseModel):
    message: str = Field(default="Entry created successfully")
    entry_id: int
