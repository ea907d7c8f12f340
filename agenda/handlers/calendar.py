"""
Calendar module command handlers
Month/week/day layouts, navigation and slot drafts
"""

from datetime import date
from typing import Any, Dict

from agenda.config.loader import get_config
from agenda.core.calendar import layout_view, shift_reference, slot_click, view_title
from agenda.core.db import ENTITIES, get_db
from agenda.core.logger import get_logger
from agenda.core.settings import get_settings
from agenda.models.requests import GetCalendarViewRequest, NavigateRequest, SlotClickRequest
from agenda.services.event_service import EventService

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    body=GetCalendarViewRequest,
    method="POST",
    path="/calendar/view",
    tags=["calendar"],
    summary="Get calendar view",
    description="Lay out the filtered events as a month grid or a week/day timeline",
)
async def get_calendar_view(body: GetCalendarViewRequest) -> Dict[str, Any]:
    """Get calendar view

    @param body - View mode, reference date, entity filter and search text
    @returns Month grid cells or timeline day columns with positioned blocks
    """
    try:
        config = get_config()
        language = body.language or get_settings().get_language()
        events = EventService().list_events(body.entity_ids, body.search)
        view = layout_view(
            body.view,
            body.date,
            events,
            get_db().get_all(ENTITIES),
            cell_height=config.get("calendar.cell_height", 80),
            max_visible=config.get("calendar.max_visible_events", 4),
            language=language,
        )
        return ok_response(view.model_dump())
    except Exception as e:
        return error_response("Failed to get calendar view", e)


@api_handler(
    body=NavigateRequest,
    method="POST",
    path="/calendar/navigate",
    tags=["calendar"],
    summary="Move reference date",
    description="Previous (-1) or next (1) month, week or day; 0 jumps to today",
)
async def navigate_calendar(body: NavigateRequest) -> Dict[str, Any]:
    """Move the reference date by one view unit"""
    try:
        if body.step == 0:
            target = date.today()
        else:
            target = shift_reference(body.view, body.date, body.step)
        language = get_settings().get_language()
        return ok_response(
            {
                "view": body.view,
                "date": target.isoformat(),
                "title": view_title(body.view, target, language),
            }
        )
    except Exception as e:
        return error_response("Failed to navigate calendar", e)


@api_handler(
    body=SlotClickRequest,
    method="POST",
    path="/calendar/slot",
    tags=["calendar"],
    summary="Draft event from slot",
    description="Event draft for an empty slot: start at the slot time, end one hour later",
)
async def get_slot_draft(body: SlotClickRequest) -> Dict[str, Any]:
    """Draft event from an empty calendar slot"""
    try:
        return ok_response(slot_click(body.date, body.time))
    except Exception as e:
        return error_response("Failed to create slot draft", e)
