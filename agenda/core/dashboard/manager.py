"""
Dashboard Manager

Derives the statistics shown on the analytics dashboard from the event and
entity collections:
- event count and total hours per entity
- online / in-presence distribution and ratios
- daily event trend over the current month
"""

import calendar
import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from agenda.core.db import ENTITIES, EVENTS, DatabaseManager, get_db
from agenda.core.i18n import get_translator
from agenda.core.logger import get_logger
from agenda.models.base import BaseModel
from agenda.services.entity_service import FALLBACK_ENTITY_COLOR

logger = get_logger(__name__)


class EntityStat(BaseModel):
    """Per-entity aggregate"""

    entity_id: Optional[int] = None
    name: str
    color: str
    count: int
    hours: float


class ModeStat(BaseModel):
    mode: str
    name: str
    value: int


class TrendPoint(BaseModel):
    date: str  # YYYY-MM-DD
    label: str  # dd/MM
    count: int


class Statistics(BaseModel):
    """Dashboard statistics, only produced for a non-empty event collection"""

    total: int
    total_hours: float
    online_count: int
    presence_count: int
    online_ratio: int  # percent
    presence_ratio: int
    entity_data: List[EntityStat]
    mode_data: List[ModeStat]
    trend_data: List[TrendPoint]
    month_start: str
    month_end: str


def _percent(part: int, total: int) -> int:
    """Percentage rounded half up, 0 when total is 0"""
    if not total:
        return 0
    return int(math.floor(part * 100 / total + 0.5))


def _hours(events: Sequence[Dict[str, Any]]) -> float:
    return round(sum((event.get("duration") or 0) / 60 for event in events), 1)


def compute_statistics(
    events: Sequence[Dict[str, Any]],
    entities: Sequence[Dict[str, Any]],
    today: Optional[date] = None,
    language: str = "it",
) -> Optional[Statistics]:
    """
    Aggregate events into dashboard statistics

    Args:
        events: Event records (camelCase fields)
        entities: Entity records
        today: Day selecting the trend month, defaults to today
        language: Language of the mode and fallback labels

    Returns:
        Statistics, or None when there are no events (insufficient data)
    """
    if not events:
        return None

    translator = get_translator(language)
    today = today or date.today()
    total = len(events)

    # 1. Events per entity, in entities order, empty entities dropped
    entity_data: List[EntityStat] = []
    known_ids = set()
    for entity in entities:
        known_ids.add(entity.get("id"))
        entity_events = [e for e in events if e.get("entityId") == entity.get("id")]
        if entity_events:
            entity_data.append(
                EntityStat(
                    entity_id=entity.get("id"),
                    name=entity.get("name", ""),
                    color=entity.get("color") or FALLBACK_ENTITY_COLOR,
                    count=len(entity_events),
                    hours=_hours(entity_events),
                )
            )

    # Events whose entity was deleted (or never set) share one bucket
    orphans = [e for e in events if e.get("entityId") not in known_ids]
    if orphans:
        entity_data.append(
            EntityStat(
                entity_id=None,
                name=translator.t("no_entity"),
                color=FALLBACK_ENTITY_COLOR,
                count=len(orphans),
                hours=_hours(orphans),
            )
        )

    # 2. Online vs presence
    online_count = sum(1 for e in events if e.get("mode") == "online")
    presence_count = sum(1 for e in events if e.get("mode") == "presence")
    mode_data = [
        ModeStat(mode="online", name=translator.t("online"), value=online_count),
        ModeStat(mode="presence", name=translator.t("presence"), value=presence_count),
    ]

    # 3. Daily trend (current month)
    month_start = today.replace(day=1)
    month_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    counts: Dict[str, int] = {}
    for event in events:
        counts[event.get("date", "")] = counts.get(event.get("date", ""), 0) + 1

    trend_data = []
    day = month_start
    while day <= month_end:
        trend_data.append(
            TrendPoint(
                date=day.isoformat(),
                label=day.strftime("%d/%m"),
                count=counts.get(day.isoformat(), 0),
            )
        )
        day += timedelta(days=1)

    return Statistics(
        total=total,
        total_hours=round(sum(stat.hours for stat in entity_data), 1),
        online_count=online_count,
        presence_count=presence_count,
        online_ratio=_percent(online_count, total),
        presence_ratio=_percent(presence_count, total),
        entity_data=entity_data,
        mode_data=mode_data,
        trend_data=trend_data,
        month_start=month_start.isoformat(),
        month_end=month_end.isoformat(),
    )


class DashboardManager:
    """Dashboard manager

    Reads fresh event/entity snapshots from the store and aggregates them
    """

    def __init__(self, db: Optional[DatabaseManager] = None):
        self._db = db

    @property
    def db(self) -> DatabaseManager:
        # Follow switch_database() when no store was pinned
        return self._db or get_db()

    def get_statistics(
        self, today: Optional[date] = None, language: str = "it"
    ) -> Optional[Statistics]:
        """Get dashboard statistics

        Returns:
            Statistics, None when there is not enough data
        """
        events = self.db.get_all(EVENTS)
        entities = self.db.get_all(ENTITIES)
        stats = compute_statistics(events, entities, today=today, language=language)
        if stats is None:
            logger.debug("No events, statistics not available")
        return stats


# Global DashboardManager instance
_dashboard_manager: Optional[DashboardManager] = None


def get_dashboard_manager() -> DashboardManager:
    """Get global DashboardManager instance

    Returns:
        DashboardManager: Global dashboard manager instance
    """
    global _dashboard_manager

    if _dashboard_manager is None:
        _dashboard_manager = DashboardManager()

    return _dashboard_manager


def reset_dashboard_manager() -> None:
    global _dashboard_manager
    _dashboard_manager = None
