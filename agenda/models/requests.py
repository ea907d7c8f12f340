"""
Request models for API handlers
"""

from datetime import date as date_cls
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from .base import BaseModel
from .entities import DATE_PATTERN, TIME_PATTERN, EventMode, Recurrence, SettingKey

ViewMode = Literal["month", "week", "day"]
Language = Literal["en", "it"]

# Record fields an edit draft carries back but a form never sets
STORED_ONLY_FIELDS = frozenset(
    {"id", "duration", "createdAt", "updatedAt", "created_at", "updated_at"}
)


def _today_iso() -> str:
    return date_cls.today().isoformat()


# ============================================================================
# Event Request Models
# ============================================================================


class EventForm(BaseModel):
    """Event editing form.

    Title and entityId are checked by EventService (empty title or unset
    entity is rejected without persisting anything).

    @property title - Event title.
    @property date - Calendar date (YYYY-MM-DD), defaults to today.
    @property startTime - Start time (HH:MM).
    @property endTime - End time (HH:MM), same calendar day.
    @property mode - "online" or "presence".
    @property location - Required when mode is "presence".
    @property meetingUrl - Optional meeting link for online events.
    @property entityId - Entity the event is tagged with.
    @property materials - Free text.
    @property notes - Free text.
    @property recurrence - Stored tag only.
    """

    title: str = ""
    date: str = Field(default_factory=_today_iso, pattern=DATE_PATTERN)
    start_time: str = Field(default="09:00", pattern=TIME_PATTERN)
    end_time: str = Field(default="10:00", pattern=TIME_PATTERN)
    mode: EventMode = "online"
    location: str = ""
    meeting_url: str = ""
    entity_id: Optional[int] = None
    materials: str = ""
    notes: str = ""
    recurrence: Recurrence = "none"

    @model_validator(mode="before")
    @classmethod
    def _drop_stored_fields(cls, data: Any) -> Any:
        # An edit draft is the stored record; id, duration and timestamps
        # are re-derived on save
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if key not in STORED_ONLY_FIELDS}
        return data

    @field_validator("entity_id", mode="before")
    @classmethod
    def _blank_entity_is_unset(cls, value: Any) -> Any:
        # An unselected entity <select> posts an empty string
        if value == "":
            return None
        return value


class UpdateEventRequest(EventForm):
    """Request parameters for updating an event.

    @property eventId - The event ID to update.
    """

    event_id: int


class GetEventByIdRequest(BaseModel):
    """Request parameters for getting event by ID.

    @property eventId - The event ID.
    """

    event_id: int


class DeleteEventRequest(BaseModel):
    """Request parameters for deleting an event.

    @property eventId - The event ID to delete.
    """

    event_id: int


class SearchEventsRequest(BaseModel):
    """Request parameters for filtering events.

    @property entityIds - Entity filter, empty means all entities.
    @property search - Case-insensitive text matched against title and notes.
    """

    entity_ids: List[int] = Field(default_factory=list)
    search: str = ""


# ============================================================================
# Entity Request Models
# ============================================================================


class CreateEntityRequest(BaseModel):
    """Request parameters for creating an entity.

    @property name - Unique entity name.
    @property color - Display color (hex string).
    """

    name: str
    color: Optional[str] = None


class UpdateEntityRequest(BaseModel):
    """Request parameters for renaming or recoloring an entity.

    @property entityId - The entity ID.
    @property name - New name (no uniqueness check on rename).
    @property color - New color.
    """

    entity_id: int
    name: Optional[str] = None
    color: Optional[str] = None


class DeleteEntityRequest(BaseModel):
    """Request parameters for deleting an entity.

    Events referencing the entity are left unchanged.

    @property entityId - The entity ID to delete.
    """

    entity_id: int


# ============================================================================
# Calendar Request Models
# ============================================================================


class GetCalendarViewRequest(BaseModel):
    """Request parameters for laying out a calendar view.

    @property view - "month", "week" or "day".
    @property date - Reference date (YYYY-MM-DD), defaults to today.
    @property entityIds - Entity filter, empty means all entities.
    @property search - Search text.
    @property language - Label language, defaults to the language setting.
    """

    view: ViewMode = "month"
    date: str = Field(default_factory=_today_iso, pattern=DATE_PATTERN)
    entity_ids: List[int] = Field(default_factory=list)
    search: str = ""
    language: Optional[Language] = None


class NavigateRequest(BaseModel):
    """Request parameters for moving the reference date.

    @property view - Current view; the step is one month, week or day.
    @property date - Current reference date.
    @property step - -1 for previous, 1 for next, 0 for today.
    """

    view: ViewMode = "month"
    date: str = Field(default_factory=_today_iso, pattern=DATE_PATTERN)
    step: int = Field(default=0, ge=-1, le=1)


class SlotClickRequest(BaseModel):
    """Request parameters for creating an event draft from an empty slot.

    @property date - Slot date.
    @property time - Slot time (HH:MM).
    """

    date: str = Field(pattern=DATE_PATTERN)
    time: str = Field(default="09:00", pattern=TIME_PATTERN)


# ============================================================================
# Settings Request Models
# ============================================================================


class UpdateSettingRequest(BaseModel):
    """Request parameters for overwriting a setting.

    @property key - "theme", "language" or "notifications".
    @property value - New value.
    """

    key: SettingKey
    value: Any


class GetTranslationsRequest(BaseModel):
    """Request parameters for fetching the string table.

    @property language - "en" or "it", defaults to the language setting.
    """

    language: Optional[Language] = None
