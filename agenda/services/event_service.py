"""
Event service layer
Handles the event editing operation (create or update), deletion and the
entity/search filtering predicate used by the calendar and dashboard.

Duration is always derived from the time range on a common reference day:
an end time earlier than the start time yields a negative duration, which is
stored as-is and tolerated by every consumer.
"""

import time
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from agenda.core.db import EVENTS, DatabaseManager, get_db
from agenda.core.errors import NotFoundError, ValidationError
from agenda.core.logger import get_logger
from agenda.models.entities import Event
from agenda.models.requests import EventForm

logger = get_logger(__name__)


def now_ms() -> int:
    """Current time as epoch milliseconds"""
    return int(time.time() * 1000)


def to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight of the reference day"""
    hours, minutes = str(value).split(":", 1)
    return int(hours) * 60 + int(minutes)


def compute_duration(start_time: str, end_time: str) -> int:
    """Minutes between start and end, negative when end precedes start"""
    return to_minutes(end_time) - to_minutes(start_time)


def filter_events(
    events: Iterable[Dict[str, Any]],
    entity_filter: Optional[Iterable[int]] = None,
    search_text: str = "",
) -> List[Dict[str, Any]]:
    """
    Keep events matching both the entity filter and the search text

    Args:
        events: Event records (camelCase fields), order is preserved
        entity_filter: Entity ids to keep, empty or None keeps every entity
        search_text: Case-insensitive substring of title or notes, empty keeps all

    Returns:
        Matching events
    """
    allowed = set(entity_filter or [])
    needle = (search_text or "").lower()

    matched = []
    for event in events:
        if allowed and event.get("entityId") not in allowed:
            continue
        if needle:
            title = (event.get("title") or "").lower()
            notes = (event.get("notes") or "").lower()
            if needle not in title and needle not in notes:
                continue
        matched.append(event)
    return matched


class EventService:
    """Event service class"""

    def __init__(self, db: Optional[DatabaseManager] = None):
        self.db = db or get_db()

    def _coerce_form(self, data: Any) -> EventForm:
        if isinstance(data, EventForm):
            return data
        try:
            return EventForm.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "event"
            raise ValidationError(field, f"Invalid {field}: {first.get('msg')}") from e

    def _validate(self, form: EventForm) -> None:
        if not form.title.strip():
            raise ValidationError("title", "Title is required")
        if form.entity_id is None:
            raise ValidationError("entityId", "Entity is required")
        if form.mode == "presence" and not form.location.strip():
            raise ValidationError("location", "Location is required for in-presence events")

    def save_event(self, data: Any, event_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Create a new event, or update event_id when given

        Args:
            data: EventForm or a mapping with camelCase/snake_case fields
            event_id: Existing event to update, None to create

        Returns:
            The stored event record

        Raises:
            ValidationError: Title empty, entity unset, or presence without location
            NotFoundError: event_id does not exist
        """
        form = self._coerce_form(data)
        self._validate(form)

        fields = form.model_dump(by_alias=False, exclude={"event_id"})
        fields["duration"] = compute_duration(form.start_time, form.end_time)
        if fields["duration"] <= 0:
            logger.warning(
                f"Event '{form.title}' ends at or before its start "
                f"({form.start_time}-{form.end_time}), duration {fields['duration']}"
            )

        timestamp = now_ms()
        fields["updated_at"] = timestamp

        if event_id is None:
            fields["created_at"] = timestamp
            stored = self.db.add(EVENTS, fields)
            logger.info(f"✅ Event created: {stored.get('id')}, title: {form.title}")
            return self._to_event(stored)

        stored = self.db.update(EVENTS, event_id, fields)
        logger.info(f"✅ Event updated: {event_id}, title: {form.title}")
        return self._to_event(stored)

    def delete_event(self, event_id: int) -> None:
        """Delete an event, raising NotFoundError when absent"""
        self.db.remove(EVENTS, event_id)
        logger.info(f"Event deleted: {event_id}")

    def get_event(self, event_id: int) -> Dict[str, Any]:
        """Get an event by id, raising NotFoundError when absent"""
        event = self.db.get(EVENTS, event_id)
        if event is None:
            raise NotFoundError(EVENTS, event_id)
        return event

    def list_events(
        self,
        entity_filter: Optional[Iterable[int]] = None,
        search_text: str = "",
    ) -> List[Dict[str, Any]]:
        return filter_events(self.db.get_all(EVENTS), entity_filter, search_text)

    @staticmethod
    def _to_event(record: Dict[str, Any]) -> Dict[str, Any]:
        # Round-trip through the model so responses carry every field
        return Event.model_validate(record).model_dump()
