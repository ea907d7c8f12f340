"""
Event module command handlers
Create, update, delete and query calendar events
"""

from typing import Any, Dict

from agenda.core.logger import get_logger
from agenda.models.requests import (
    DeleteEventRequest,
    EventForm,
    GetEventByIdRequest,
    SearchEventsRequest,
    UpdateEventRequest,
)
from agenda.services.event_service import EventService

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/events/list",
    tags=["events"],
    summary="List events",
    description="Get every stored event",
)
async def get_events() -> Dict[str, Any]:
    """List events

    @returns All events with camelCase fields
    """
    try:
        events = EventService().list_events()
        return ok_response({"events": events, "count": len(events)})
    except Exception as e:
        return error_response("Failed to list events", e)


@api_handler(
    body=SearchEventsRequest,
    method="POST",
    path="/events/search",
    tags=["events"],
    summary="Filter events",
    description="Filter events by entity and by text in title or notes",
)
async def search_events(body: SearchEventsRequest) -> Dict[str, Any]:
    """Filter events by entity ids and search text"""
    try:
        events = EventService().list_events(body.entity_ids, body.search)
        return ok_response({"events": events, "count": len(events)})
    except Exception as e:
        return error_response("Failed to search events", e)


@api_handler(
    body=GetEventByIdRequest,
    method="POST",
    path="/events/get",
    tags=["events"],
    summary="Get event details",
)
async def get_event_by_id(body: GetEventByIdRequest) -> Dict[str, Any]:
    """Get event details by ID

    @param body - Request parameters including event ID
    @returns Event details
    """
    try:
        return ok_response(EventService().get_event(body.event_id))
    except Exception as e:
        return error_response("Failed to get event", e)


@api_handler(
    body=EventForm,
    method="POST",
    path="/events/create",
    tags=["events"],
    summary="Create event",
    description="Validate and store a new event; duration is derived from the time range",
)
async def create_event(body: EventForm) -> Dict[str, Any]:
    """Create event

    @param body - Event form
    @returns The stored event
    """
    try:
        event = EventService().save_event(body)
        return ok_response(event, message="Event created")
    except Exception as e:
        return error_response("Failed to create event", e)


@api_handler(
    body=UpdateEventRequest,
    method="POST",
    path="/events/update",
    tags=["events"],
    summary="Update event",
)
async def update_event(body: UpdateEventRequest) -> Dict[str, Any]:
    """Update event

    @param body - Event form including the event ID
    @returns The updated event
    """
    try:
        event = EventService().save_event(body, event_id=body.event_id)
        return ok_response(event, message="Event updated")
    except Exception as e:
        return error_response("Failed to update event", e)


@api_handler(
    body=DeleteEventRequest,
    method="POST",
    path="/events/delete",
    tags=["events"],
    summary="Delete event",
)
async def delete_event(body: DeleteEventRequest) -> Dict[str, Any]:
    """Delete event

    @param body - Request parameters including event ID
    """
    try:
        EventService().delete_event(body.event_id)
        return ok_response({"eventId": body.event_id}, message="Event deleted")
    except Exception as e:
        return error_response("Failed to delete event", e)
