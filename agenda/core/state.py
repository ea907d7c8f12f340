"""
Application state
Ephemeral UI state (view, reference date, filters, open modal, editing draft,
theme/language mirrors) held in one explicit object. Components receive the
instance they work on; setters notify registered listeners with the name of
the field that changed.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional

from agenda.core.calendar import DateLike, ViewMode, parse_date, shift_reference
from agenda.core.logger import get_logger

logger = get_logger(__name__)

Modal = Literal["event", "entities", "settings", "statistics"]
Listener = Callable[[str, "AppState"], None]

VIEW_MODES = ("month", "week", "day")
MODALS = ("event", "entities", "settings", "statistics")


class AppState:
    """Mutable UI state with change listeners"""

    def __init__(
        self,
        view: ViewMode = "month",
        reference_date: Optional[DateLike] = None,
        theme: str = "light",
        language: str = "it",
    ):
        self.view: ViewMode = view
        self.reference_date: date = parse_date(reference_date or date.today())
        self.selected_entities: List[int] = []
        self.search: str = ""
        self.theme = theme
        self.language = language
        self.modal: Optional[Modal] = None
        self.editing: Optional[Dict[str, Any]] = None
        self._listeners: List[Listener] = []

    # ======================== Listeners ========================

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register listener, returns a function that removes it"""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _changed(self, field: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(field, self)
            except Exception:
                logger.error(f"State listener failed on {field}", exc_info=True)

    def _assign(self, field: str, value: Any) -> None:
        if getattr(self, field) == value:
            return
        setattr(self, field, value)
        self._changed(field)

    # ======================== Setters ========================

    def set_view(self, view: ViewMode) -> None:
        if view not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {view}")
        self._assign("view", view)

    def set_reference_date(self, value: DateLike) -> None:
        self._assign("reference_date", parse_date(value))

    def set_search(self, text: str) -> None:
        self._assign("search", text or "")

    def set_selected_entities(self, entity_ids: List[int]) -> None:
        self._assign("selected_entities", list(entity_ids))

    def toggle_entity_filter(self, entity_id: int) -> None:
        """Add entity_id to the filter, or remove it when already selected"""
        if entity_id in self.selected_entities:
            selected = [i for i in self.selected_entities if i != entity_id]
        else:
            selected = self.selected_entities + [entity_id]
        self._assign("selected_entities", selected)

    def set_theme(self, theme: str) -> None:
        self._assign("theme", theme)

    def set_language(self, language: str) -> None:
        self._assign("language", language)

    def open_modal(self, modal: Modal, editing: Optional[Dict[str, Any]] = None) -> None:
        if modal not in MODALS:
            raise ValueError(f"Unknown modal: {modal}")
        self._assign("editing", editing)
        self._assign("modal", modal)

    def close_modal(self) -> None:
        self._assign("modal", None)
        self._assign("editing", None)

    # ======================== Navigation ========================

    def go_previous(self) -> None:
        self.set_reference_date(shift_reference(self.view, self.reference_date, -1))

    def go_next(self) -> None:
        self.set_reference_date(shift_reference(self.view, self.reference_date, 1))

    def go_today(self, today: Optional[date] = None) -> None:
        self.set_reference_date(today or date.today())

    def snapshot(self) -> Dict[str, Any]:
        return {
            "view": self.view,
            "referenceDate": self.reference_date.isoformat(),
            "selectedEntities": list(self.selected_entities),
            "search": self.search,
            "theme": self.theme,
            "language": self.language,
            "modal": self.modal,
            "editing": self.editing,
        }
