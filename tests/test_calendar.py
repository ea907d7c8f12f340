"""
Unit tests for agenda/core/calendar.py
"""

from datetime import date, timedelta

import pytest

from agenda.core.calendar import (
    MonthView,
    TimelineView,
    event_block,
    hour_labels,
    layout_view,
    month_grid_range,
    shift_reference,
    slot_click,
    event_click,
    timeline_days,
    view_title,
)
from agenda.services.entity_service import FALLBACK_ENTITY_COLOR

ENTITIES = [{"id": 1, "name": "Work", "color": "#111111"}]


def _event(event_id, day, start="09:00", end="10:00", entity_id=1, **extra):
    hours = (int(end[:2]) * 60 + int(end[3:])) - (int(start[:2]) * 60 + int(start[3:]))
    event = {
        "id": event_id,
        "title": f"Event {event_id}",
        "date": day,
        "startTime": start,
        "endTime": end,
        "duration": hours,
        "entityId": entity_id,
        "mode": "online",
    }
    event.update(extra)
    return event


@pytest.mark.unit
class TestMonthGrid:
    """Test the Monday-start month grid."""

    @pytest.mark.parametrize(
        "reference",
        ["2024-02-10", "2024-03-15", "2024-09-01", "2023-01-31", "2026-02-01", "2021-02-01"],
    )
    def test_grid_spans_whole_weeks(self, reference, today):
        """Test that the grid starts on Monday, has 7k cells and covers the month."""
        view = layout_view("month", reference, [], today=today)
        cells = view.cells
        first = date.fromisoformat(cells[0].date)
        last = date.fromisoformat(cells[-1].date)
        ref = date.fromisoformat(reference)

        assert len(cells) % 7 == 0
        assert first.weekday() == 0
        assert last.weekday() == 6
        month_days = [c for c in cells if c.in_month]
        assert month_days[0].day == 1
        assert all(date.fromisoformat(c.date).month == ref.month for c in month_days)
        assert len(month_days) == (
            (ref.replace(day=28) + timedelta(days=4)).replace(day=1) - timedelta(days=1)
        ).day

    def test_february_2021_is_exactly_four_weeks(self):
        """Test a month starting on Monday and ending on Sunday."""
        start, end = month_grid_range("2021-02-10")
        assert (start, end) == (date(2021, 2, 1), date(2021, 2, 28))

    def test_march_2024_range(self):
        start, end = month_grid_range(date(2024, 3, 15))
        assert start == date(2024, 2, 26)
        assert end == date(2024, 3, 31)

    def test_cells_are_contiguous(self, today):
        cells = layout_view("month", "2024-03-15", [], today=today).cells
        dates = [date.fromisoformat(c.date) for c in cells]
        assert all(b - a == timedelta(days=1) for a, b in zip(dates, dates[1:]))

    def test_today_flag(self, today):
        cells = layout_view("month", "2024-03-01", [], today=today).cells
        flagged = [c.date for c in cells if c.is_today]
        assert flagged == ["2024-03-15"]

    def test_events_placed_in_input_order(self, today):
        """Test that events land on their day, keeping input order."""
        events = [
            _event(2, "2024-03-05", "15:00", "16:00"),
            _event(1, "2024-03-05", "08:00", "09:00"),
            _event(3, "2024-03-06"),
        ]
        cells = {c.date: c for c in layout_view("month", "2024-03-15", events, today=today).cells}
        assert [e["id"] for e in cells["2024-03-05"].events] == [2, 1]
        assert [e["id"] for e in cells["2024-03-06"].events] == [3]
        assert cells["2024-03-07"].events == []

    def test_overflow_after_four_events(self, today):
        """Test that at most 4 events are visible and the rest are counted."""
        events = [_event(i, "2024-03-05") for i in range(1, 7)]
        cell = next(
            c for c in layout_view("month", "2024-03-15", events, today=today).cells
            if c.date == "2024-03-05"
        )
        assert len(cell.events) == 6
        assert [e["id"] for e in cell.visible_events] == [1, 2, 3, 4]
        assert cell.overflow == 2
        assert cell.overflow_label == "+2 altri"

    def test_overflow_label_english(self, today):
        events = [_event(i, "2024-03-05") for i in range(1, 6)]
        view = layout_view("month", "2024-03-15", events, today=today, language="en")
        cell = next(c for c in view.cells if c.date == "2024-03-05")
        assert cell.overflow_label == "+1 more"

    def test_no_overflow_label_when_all_fit(self, today):
        events = [_event(i, "2024-03-05") for i in range(1, 5)]
        cell = next(
            c for c in layout_view("month", "2024-03-15", events, today=today).cells
            if c.date == "2024-03-05"
        )
        assert cell.overflow == 0
        assert cell.overflow_label == ""

    def test_weekday_headers_start_monday(self, today):
        view = layout_view("month", "2024-03-15", [], today=today, language="en")
        assert isinstance(view, MonthView)
        assert view.weekdays[0] == "Mon"
        assert view.weekdays[-1] == "Sun"

    def test_weeks_groups_cells(self, today):
        view = layout_view("month", "2024-03-15", [], today=today)
        assert all(len(week) == 7 for week in view.weeks)

    def test_dump_uses_camel_case(self, today):
        data = layout_view("month", "2024-03-15", [], today=today).model_dump()
        assert "inMonth" in data["cells"][0]
        assert "visibleEvents" in data["cells"][0]


@pytest.mark.unit
class TestTimeline:
    """Test the week/day timeline."""

    def test_day_view_has_single_day(self, today):
        view = layout_view("day", "2024-03-13", [], today=today)
        assert isinstance(view, TimelineView)
        assert [d.date for d in view.days] == ["2024-03-13"]

    def test_week_view_spans_monday_to_sunday(self, today):
        view = layout_view("week", "2024-03-13", [], today=today)
        assert [d.date for d in view.days] == [
            "2024-03-11", "2024-03-12", "2024-03-13", "2024-03-14",
            "2024-03-15", "2024-03-16", "2024-03-17",
        ]
        assert [d.is_today for d in view.days].count(True) == 1

    def test_week_of_a_sunday(self):
        days = timeline_days("week", "2024-03-17")
        assert days[0] == date(2024, 3, 11)

    def test_total_height_is_24_cells(self, today):
        """Test that the grid is 24 rows of cell height."""
        view = layout_view("week", "2024-03-13", [], today=today, cell_height=80)
        assert view.total_height == 24 * 80
        assert view.hours == hour_labels()
        assert view.hours[0] == "00:00" and view.hours[-1] == "23:00"

    def test_block_position_nine_to_ten(self):
        """Test that 09:00 for 60 minutes sits at 9 cells with 1 cell height."""
        block = event_block(_event(1, "2024-03-13", "09:00", "10:00"), ENTITIES, 80)
        assert block.top == 9 * 80
        assert block.height == 80

    def test_block_position_with_minutes(self):
        block = event_block(_event(1, "2024-03-13", "13:30", "14:15"), ENTITIES, 60)
        assert block.top == 13 * 60 + 30
        assert block.height == 45

    def test_negative_duration_gives_negative_height(self):
        """Test that end-before-start events are positioned, not fixed."""
        block = event_block(_event(1, "2024-03-13", "23:00", "22:00"), ENTITIES, 80)
        assert block.height == -80

    def test_block_without_duration_computes_it(self):
        event = _event(1, "2024-03-13", "10:00", "10:30")
        del event["duration"]
        assert event_block(event, ENTITIES, 80).height == 40

    def test_block_uses_entity_color(self):
        block = event_block(_event(1, "2024-03-13"), ENTITIES)
        assert block.color == "#111111"
        assert block.entity_name == "Work"

    def test_missing_entity_falls_back(self, today):
        """Test that a dangling entityId gets the default color and label."""
        view = layout_view(
            "day", "2024-03-13", [_event(1, "2024-03-13", entity_id=99)], ENTITIES,
            today=today, language="en",
        )
        block = view.days[0].blocks[0]
        assert block.color == FALLBACK_ENTITY_COLOR
        assert block.entity_name == "No entity"

    def test_overlapping_events_are_not_rearranged(self, today):
        """Test that simultaneous events keep identical positions."""
        events = [_event(1, "2024-03-13"), _event(2, "2024-03-13")]
        blocks = layout_view("day", "2024-03-13", events, ENTITIES, today=today).days[0].blocks
        assert [(b.top, b.height) for b in blocks] == [(720.0, 80.0), (720.0, 80.0)]

    def test_events_outside_range_are_skipped(self, today):
        events = [_event(1, "2024-03-20")]
        view = layout_view("week", "2024-03-13", events, ENTITIES, today=today)
        assert all(d.blocks == [] for d in view.days)

    def test_unknown_view_mode(self):
        with pytest.raises(ValueError):
            layout_view("year", "2024-03-13", [])


@pytest.mark.unit
class TestNavigation:
    """Test reference date navigation and titles."""

    def test_month_steps(self):
        assert shift_reference("month", "2024-03-15", 1) == date(2024, 4, 15)
        assert shift_reference("month", "2024-03-15", -1) == date(2024, 2, 15)

    def test_month_step_clamps_day(self):
        """Test that 31 January plus one month is the end of February."""
        assert shift_reference("month", "2024-01-31", 1) == date(2024, 2, 29)
        assert shift_reference("month", "2023-01-31", 1) == date(2023, 2, 28)

    def test_month_step_across_year(self):
        assert shift_reference("month", "2024-12-10", 1) == date(2025, 1, 10)
        assert shift_reference("month", "2024-01-10", -1) == date(2023, 12, 10)

    def test_week_and_day_steps(self):
        assert shift_reference("week", "2024-03-15", 1) == date(2024, 3, 22)
        assert shift_reference("day", "2024-03-01", -1) == date(2024, 2, 29)

    def test_titles(self):
        assert view_title("month", "2024-03-15", "it") == "marzo 2024"
        assert view_title("week", "2024-03-15", "en") == "March 2024"
        assert view_title("day", "2024-03-05", "en") == "5 March 2024"


@pytest.mark.unit
class TestClicks:
    """Test slot and event click payloads."""

    def test_slot_click_draft(self):
        assert slot_click("2024-03-13", "14:00") == {
            "date": "2024-03-13",
            "startTime": "14:00",
            "endTime": "15:00",
        }

    def test_month_cell_click_defaults_to_nine(self):
        assert slot_click(date(2024, 3, 13))["startTime"] == "09:00"
        assert slot_click(date(2024, 3, 13))["endTime"] == "10:00"

    def test_slot_click_keeps_minutes(self):
        assert slot_click("2024-03-13", "08:30")["endTime"] == "09:30"

    def test_late_slot_is_not_wrapped(self):
        assert slot_click("2024-03-13", "23:00")["endTime"] == "24:00"

    def test_event_click_returns_copy(self):
        event = _event(1, "2024-03-13")
        clicked = event_click(event)
        assert clicked == event
        assert clicked is not event
