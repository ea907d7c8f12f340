"""
Data models for the calendar API
"""

from .base import BaseModel
from .entities import DEFAULT_ENTITY_COLOR, Entity, Event, Setting
from .requests import (
    CreateEntityRequest,
    DeleteEntityRequest,
    DeleteEventRequest,
    EventForm,
    GetCalendarViewRequest,
    GetEventByIdRequest,
    GetTranslationsRequest,
    NavigateRequest,
    SearchEventsRequest,
    SlotClickRequest,
    UpdateEntityRequest,
    UpdateEventRequest,
    UpdateSettingRequest,
)

__all__ = [
    # Base
    "BaseModel",
    # Records
    "DEFAULT_ENTITY_COLOR",
    "Entity",
    "Event",
    "Setting",
    # Events
    "EventForm",
    "UpdateEventRequest",
    "GetEventByIdRequest",
    "DeleteEventRequest",
    "SearchEventsRequest",
    # Entities
    "CreateEntityRequest",
    "UpdateEntityRequest",
    "DeleteEntityRequest",
    # Calendar
    "GetCalendarViewRequest",
    "NavigateRequest",
    "SlotClickRequest",
    # Settings
    "UpdateSettingRequest",
    "GetTranslationsRequest",
]
