"""
Calendar session
Binds an AppState to a store: keeps live snapshots of events, entities and
settings through subscriptions, and turns user actions (slot click, event
click, form submit) into service calls. open() subscribes, close() tears the
subscriptions down.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from agenda.core.calendar import (
    DEFAULT_CELL_HEIGHT,
    MAX_VISIBLE_EVENTS,
    MonthView,
    TimelineView,
    event_click,
    layout_view,
    slot_click,
)
from agenda.core.dashboard.manager import Statistics, compute_statistics
from agenda.core.db import ENTITIES, EVENTS, SETTINGS, DatabaseManager
from agenda.core.events import Subscription
from agenda.core.logger import get_logger
from agenda.core.state import AppState
from agenda.services.event_service import EventService, filter_events

logger = get_logger(__name__)


class CalendarSession:
    """Interaction layer over one store and one AppState"""

    def __init__(
        self,
        db: DatabaseManager,
        state: AppState,
        cell_height: float = DEFAULT_CELL_HEIGHT,
        max_visible: int = MAX_VISIBLE_EVENTS,
    ):
        self.db = db
        self.state = state
        self.cell_height = cell_height
        self.max_visible = max_visible
        self.event_service = EventService(db)
        self.events: List[Dict[str, Any]] = []
        self.entities: List[Dict[str, Any]] = []
        self.settings: Dict[str, Any] = {}
        self._subscriptions: List[Subscription] = []

    @property
    def is_open(self) -> bool:
        return bool(self._subscriptions)

    def open(self) -> "CalendarSession":
        if self.is_open:
            return self
        self._subscriptions = [
            self.db.subscribe(EVENTS, self._on_events),
            self.db.subscribe(ENTITIES, self._on_entities),
            self.db.subscribe(SETTINGS, self._on_settings),
        ]
        logger.debug("Calendar session opened")
        return self

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        logger.debug("Calendar session closed")

    def __enter__(self) -> "CalendarSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ======================== Subscription callbacks ========================

    def _on_events(self, events: List[Dict[str, Any]]) -> None:
        self.events = events

    def _on_entities(self, entities: List[Dict[str, Any]]) -> None:
        self.entities = entities

    def _on_settings(self, settings: Dict[str, Any]) -> None:
        self.settings = settings
        if "theme" in settings:
            self.state.set_theme(settings["theme"])
        if "language" in settings:
            self.state.set_language(settings["language"])

    # ======================== Derived views ========================

    def filtered_events(self) -> List[Dict[str, Any]]:
        return filter_events(self.events, self.state.selected_entities, self.state.search)

    def view_model(self, today: Optional[date] = None) -> Union[MonthView, TimelineView]:
        return layout_view(
            self.state.view,
            self.state.reference_date,
            self.filtered_events(),
            self.entities,
            today=today,
            cell_height=self.cell_height,
            max_visible=self.max_visible,
            language=self.state.language,
        )

    def statistics(self, today: Optional[date] = None) -> Optional[Statistics]:
        # The dashboard always aggregates the whole collection, not the filtered view
        return compute_statistics(
            self.events, self.entities, today=today, language=self.state.language
        )

    # ======================== Actions ========================

    def open_slot(self, day: Any, time: str = "09:00") -> Dict[str, str]:
        draft = slot_click(day, time)
        self.state.open_modal("event", draft)
        return draft

    def open_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        editing = event_click(event)
        self.state.open_modal("event", editing)
        return editing

    def submit(self, form: Any) -> Dict[str, Any]:
        """
        Save the event being edited and close the modal

        The event id is taken from the editing draft: drafts opened from an
        existing event update it, slot drafts create a new one. On validation
        failure the modal stays open and nothing is persisted.
        """
        editing = self.state.editing or {}
        stored = self.event_service.save_event(form, event_id=editing.get("id"))
        self.state.close_modal()
        return stored

    def delete_editing(self) -> None:
        """Delete the event being edited"""
        editing = self.state.editing or {}
        if editing.get("id") is not None:
            self.event_service.delete_event(editing["id"])
        self.state.close_modal()

    def close_modal(self) -> None:
        self.state.close_modal()
