"""
Calendar layout engine
Pure functions turning a view mode, a reference date and the event/entity
snapshots into view-ready structures: the month grid and the week/day
timeline. Nothing here performs I/O.

Known limitations kept on purpose:
- timeline blocks are not de-overlapped, simultaneous events stack by z-order
- an event whose end precedes its start gets a negative block height
"""

import calendar as _calendar
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple, Union

from agenda.core.i18n import get_translator
from agenda.models.base import BaseModel
from agenda.services.entity_service import lookup_entity
from agenda.services.event_service import compute_duration

ViewMode = Literal["month", "week", "day"]
DateLike = Union[date, datetime, str]

DEFAULT_CELL_HEIGHT = 80
MAX_VISIBLE_EVENTS = 4
HOURS_PER_DAY = 24
MONTH_SLOT_TIME = "09:00"


# ============================================================================
# View models
# ============================================================================


class MonthCell(BaseModel):
    """One day of the month grid"""

    date: str
    day: int
    in_month: bool
    is_today: bool
    events: List[Dict[str, Any]]
    visible_events: List[Dict[str, Any]]
    overflow: int = 0
    overflow_label: str = ""


class MonthView(BaseModel):
    view: Literal["month"] = "month"
    reference_date: str
    title: str
    weekdays: List[str]
    start: str
    end: str
    cells: List[MonthCell]

    @property
    def weeks(self) -> List[List[MonthCell]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]


class TimelineBlock(BaseModel):
    """Absolutely positioned event in a timeline day column"""

    event: Dict[str, Any]
    top: float
    height: float
    color: str
    entity_name: str


class TimelineDay(BaseModel):
    date: str
    day: int
    weekday: str
    is_today: bool
    blocks: List[TimelineBlock]


class TimelineView(BaseModel):
    view: Literal["week", "day"]
    reference_date: str
    title: str
    cell_height: float
    total_height: float
    hours: List[str]
    days: List[TimelineDay]


# ============================================================================
# Date helpers
# ============================================================================


def parse_date(value: DateLike) -> date:
    """Accept a date, datetime or 'YYYY-MM-DD' string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_time(value: str) -> Tuple[int, int]:
    hours, minutes = str(value).split(":", 1)
    return int(hours), int(minutes)


def month_grid_range(reference: DateLike) -> Tuple[date, date]:
    """Monday on/before the 1st through Sunday on/after the last day of the month"""
    reference = parse_date(reference)
    first = reference.replace(day=1)
    last = reference.replace(day=_calendar.monthrange(reference.year, reference.month)[1])
    start = first - timedelta(days=first.weekday())
    end = last + timedelta(days=6 - last.weekday())
    return start, end


def timeline_days(view_mode: ViewMode, reference: DateLike) -> List[date]:
    """The reference day alone, or the Monday-start week containing it"""
    reference = parse_date(reference)
    if view_mode == "day":
        return [reference]
    monday = reference - timedelta(days=reference.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def shift_reference(view_mode: ViewMode, reference: DateLike, step: int) -> date:
    """
    Move the reference date by step months, weeks or days

    Month steps keep the day of month, clamped to the target month's length
    (31 January + 1 month -> 28/29 February). step 0 returns the date unchanged.
    """
    reference = parse_date(reference)
    if view_mode == "month":
        month_index = reference.month - 1 + step
        year = reference.year + month_index // 12
        month = month_index % 12 + 1
        day = min(reference.day, _calendar.monthrange(year, month)[1])
        return date(year, month, day)
    if view_mode == "week":
        return reference + timedelta(weeks=step)
    return reference + timedelta(days=step)


def view_title(view_mode: ViewMode, reference: DateLike, language: str = "it") -> str:
    """'MMMM yyyy' for month and week views, 'd MMMM yyyy' for the day view"""
    reference = parse_date(reference)
    month = get_translator(language).month_name(reference.month)
    if view_mode == "day":
        return f"{reference.day} {month} {reference.year}"
    return f"{month} {reference.year}"


def hour_labels() -> List[str]:
    return [f"{hour:02d}:00" for hour in range(HOURS_PER_DAY)]


# ============================================================================
# Layout
# ============================================================================


def _events_by_date(events: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    # Input order is kept within each day
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for event in events:
        grouped.setdefault(event.get("date", ""), []).append(event)
    return grouped


def layout_month(
    reference: DateLike,
    events: Iterable[Dict[str, Any]],
    today: Optional[date] = None,
    max_visible: int = MAX_VISIBLE_EVENTS,
    language: str = "it",
) -> MonthView:
    reference = parse_date(reference)
    today = today or date.today()
    translator = get_translator(language)
    grouped = _events_by_date(events)
    start, end = month_grid_range(reference)

    cells = []
    current = start
    while current <= end:
        day_events = grouped.get(current.isoformat(), [])
        overflow = max(len(day_events) - max_visible, 0)
        cells.append(
            MonthCell(
                date=current.isoformat(),
                day=current.day,
                in_month=current.month == reference.month,
                is_today=current == today,
                events=day_events,
                visible_events=day_events[:max_visible],
                overflow=overflow,
                overflow_label=translator.t("more_events", count=overflow) if overflow else "",
            )
        )
        current += timedelta(days=1)

    return MonthView(
        reference_date=reference.isoformat(),
        title=view_title("month", reference, language),
        weekdays=translator.weekday_names(short=True),
        start=start.isoformat(),
        end=end.isoformat(),
        cells=cells,
    )


def event_block(
    event: Dict[str, Any],
    entities: Sequence[Dict[str, Any]] = (),
    cell_height: float = DEFAULT_CELL_HEIGHT,
    fallback_name: str = "",
) -> TimelineBlock:
    """Position an event: top from its start time, height from its duration"""
    start_hour, start_minute = parse_time(event["startTime"])
    duration = event.get("duration")
    if duration is None:
        duration = compute_duration(event["startTime"], event["endTime"])

    entity = lookup_entity(entities, event.get("entityId"), fallback_name)
    return TimelineBlock(
        event=event,
        top=start_hour * cell_height + start_minute / 60 * cell_height,
        height=duration / 60 * cell_height,
        color=entity["color"],
        entity_name=entity["name"],
    )


def layout_timeline(
    view_mode: ViewMode,
    reference: DateLike,
    events: Iterable[Dict[str, Any]],
    entities: Sequence[Dict[str, Any]] = (),
    today: Optional[date] = None,
    cell_height: float = DEFAULT_CELL_HEIGHT,
    language: str = "it",
) -> TimelineView:
    reference = parse_date(reference)
    today = today or date.today()
    translator = get_translator(language)
    weekday_names = translator.weekday_names(short=True)
    fallback_name = translator.t("no_entity")
    grouped = _events_by_date(events)

    days = []
    for day in timeline_days(view_mode, reference):
        blocks = [
            event_block(event, entities, cell_height, fallback_name)
            for event in grouped.get(day.isoformat(), [])
        ]
        days.append(
            TimelineDay(
                date=day.isoformat(),
                day=day.day,
                weekday=weekday_names[day.weekday()],
                is_today=day == today,
                blocks=blocks,
            )
        )

    return TimelineView(
        view="day" if view_mode == "day" else "week",
        reference_date=reference.isoformat(),
        title=view_title(view_mode, reference, language),
        cell_height=cell_height,
        total_height=HOURS_PER_DAY * cell_height,
        hours=hour_labels(),
        days=days,
    )


def layout_view(
    view_mode: ViewMode,
    reference: DateLike,
    events: Iterable[Dict[str, Any]],
    entities: Sequence[Dict[str, Any]] = (),
    today: Optional[date] = None,
    cell_height: float = DEFAULT_CELL_HEIGHT,
    max_visible: int = MAX_VISIBLE_EVENTS,
    language: str = "it",
) -> Union[MonthView, TimelineView]:
    """Lay out events for a month, week or day view"""
    if view_mode == "month":
        return layout_month(reference, events, today, max_visible, language)
    if view_mode in ("week", "day"):
        return layout_timeline(view_mode, reference, events, entities, today, cell_height, language)
    raise ValueError(f"Unknown view mode: {view_mode}")


# ============================================================================
# Click payloads
# ============================================================================


def slot_click(day: DateLike, time: str = MONTH_SLOT_TIME) -> Dict[str, str]:
    """
    Draft for a new event created from an empty slot

    The end time is one hour later with the same minutes. It is not wrapped
    at midnight: a 23:30 slot yields '24:30'.
    """
    hours, minutes = str(time).split(":", 1)
    return {
        "date": parse_date(day).isoformat(),
        "startTime": time,
        "endTime": f"{int(hours) + 1:02d}:{minutes}",
    }


def event_click(event: Dict[str, Any]) -> Dict[str, Any]:
    """Event selected for editing"""
    return dict(event)
