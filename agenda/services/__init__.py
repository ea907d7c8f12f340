"""
Service layer: event editing and entity management
"""

from .entity_service import FALLBACK_ENTITY_COLOR, EntityService, lookup_entity
from .event_service import (
    EventService,
    compute_duration,
    filter_events,
    now_ms,
    to_minutes,
)

__all__ = [
    "EventService",
    "EntityService",
    "filter_events",
    "lookup_entity",
    "compute_duration",
    "to_minutes",
    "now_ms",
    "FALLBACK_ENTITY_COLOR",
]
