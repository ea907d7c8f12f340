"""
Data entity model definitions
Event, Entity and Setting records as stored in the local database
"""

from typing import Any, Literal, Optional

from pydantic import Field

from .base import BaseModel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"

EventMode = Literal["online", "presence"]
Recurrence = Literal["none", "daily", "weekly", "monthly", "yearly"]
SettingKey = Literal["theme", "language", "notifications"]

DEFAULT_ENTITY_COLOR = "#1976D2"


class Entity(BaseModel):
    """Named category events are tagged with"""

    id: Optional[int] = None
    name: str
    color: str = DEFAULT_ENTITY_COLOR


class Event(BaseModel):
    """Scheduled occurrence

    duration is derived (endTime - startTime in minutes) and may be zero or
    negative when endTime is not later than startTime. recurrence is a stored
    tag only; no occurrences are generated from it.
    """

    id: Optional[int] = None
    title: str
    date: str = Field(pattern=DATE_PATTERN)  # YYYY-MM-DD, compares lexicographically
    start_time: str = Field(pattern=TIME_PATTERN)  # HH:MM
    end_time: str = Field(pattern=TIME_PATTERN)
    duration: int = 0
    mode: EventMode = "online"
    location: Optional[str] = ""
    meeting_url: Optional[str] = ""
    entity_id: Optional[int] = None  # Not enforced as a foreign key
    materials: Optional[str] = ""
    notes: Optional[str] = ""
    recurrence: Recurrence = "none"
    created_at: int = 0  # epoch milliseconds
    updated_at: int = 0


class Setting(BaseModel):
    """Single key/value preference"""

    key: SettingKey
    value: Any
