"""
Event reminder coordinator
Checks the event snapshot on a fixed period and fires a one-time notification
for every event starting in exactly lead_minutes (30) whole minutes.

The match is on the integer minute: with the 60-second period a delayed or
missed tick skips the reminder silently. The timer runs only while the
notifications setting is enabled.
"""

import asyncio
import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from agenda.core.db import ENTITIES, EVENTS, SETTINGS, DatabaseManager, get_db
from agenda.core.events import Subscription, emit_reminder
from agenda.core.logger import get_logger
from agenda.services.entity_service import lookup_entity

logger = get_logger(__name__)

# Global reminder coordinator instance
_reminder_coordinator: Optional["ReminderCoordinator"] = None

ReminderKey = Tuple[Any, str, str]


def event_start(event: Dict[str, Any]) -> Optional[datetime]:
    """Local start instant of an event, None when date/time do not parse"""
    try:
        return datetime.strptime(
            f"{event.get('date')} {event.get('startTime')}", "%Y-%m-%d %H:%M"
        )
    except (TypeError, ValueError):
        return None


def minutes_until(event: Dict[str, Any], now: datetime) -> Optional[int]:
    """Whole minutes from now to the event start, floored"""
    start = event_start(event)
    if start is None:
        return None
    return math.floor((start - now).total_seconds() / 60)


def reminder_body(event: Dict[str, Any], entities: Sequence[Dict[str, Any]]) -> str:
    entity = lookup_entity(entities, event.get("entityId"))
    return f"{event.get('startTime', '')} - {entity.get('name') or ''}"


class ReminderCoordinator:
    """Reminder coordinator"""

    def __init__(
        self,
        db: Optional[DatabaseManager] = None,
        check_interval: float = 60,
        lead_minutes: int = 30,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize coordinator

        Args:
            db: Store to watch, follows get_db() when omitted
            check_interval: Seconds between checks
            lead_minutes: Minutes before start at which a reminder fires
            clock: Returns the current local time (datetime.now by default)
        """
        self._db = db
        self.check_interval = check_interval
        self.lead_minutes = lead_minutes
        self.clock = clock or datetime.now

        self.enabled = False
        self.events: List[Dict[str, Any]] = []
        self.entities: List[Dict[str, Any]] = []
        self._subscriptions: List[Subscription] = []
        self._notified: Set[ReminderKey] = set()
        self.check_task: Optional[asyncio.Task] = None

        self.stats: Dict[str, Any] = {
            "start_time": None,
            "total_checks": 0,
            "total_reminders": 0,
            "last_check_time": None,
        }

    @property
    def db(self) -> DatabaseManager:
        return self._db or get_db()

    @property
    def is_attached(self) -> bool:
        return bool(self._subscriptions)

    @property
    def is_running(self) -> bool:
        return self.check_task is not None

    @property
    def mode(self) -> str:
        if self.is_running:
            return "running"
        if self.is_attached:
            return "disabled"
        return "stopped"

    # ======================== Lifecycle ========================

    async def start(self) -> None:
        """Attach to the store; the timer follows the notifications setting"""
        if self.is_attached:
            logger.warning("Reminder coordinator is already started")
            return

        db = self.db
        self._subscriptions = [
            db.subscribe(EVENTS, self._on_events),
            db.subscribe(ENTITIES, self._on_entities),
            db.subscribe(SETTINGS, self._on_settings),
        ]
        self.stats["start_time"] = datetime.now()
        logger.info(
            f"Reminder coordinator started, check interval: {self.check_interval} seconds, "
            f"notifications {'enabled' if self.enabled else 'disabled'}"
        )

    async def stop(self, *, quiet: bool = False) -> None:
        """Detach from the store and stop the timer

        Args:
            quiet: When True, only log debug messages
        """
        log = logger.debug if quiet else logger.info

        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

        task = self.check_task
        self._cancel_timer()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

        self.stats["start_time"] = None
        log("Reminder coordinator stopped")

    def _start_timer(self) -> None:
        if self.check_task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, reminder timer not started")
            return
        self.check_task = loop.create_task(self._check_loop())
        logger.debug("Reminder timer started")

    def _cancel_timer(self) -> None:
        if self.check_task is None:
            return
        if not self.check_task.done():
            self.check_task.cancel()
        self.check_task = None
        logger.debug("Reminder timer stopped")

    # ======================== Subscription callbacks ========================

    def _on_events(self, events: List[Dict[str, Any]]) -> None:
        self.events = events

    def _on_entities(self, entities: List[Dict[str, Any]]) -> None:
        self.entities = entities

    def _on_settings(self, settings: Dict[str, Any]) -> None:
        self.enabled = bool(settings.get("notifications", True))
        if self.enabled:
            self._start_timer()
        else:
            self._cancel_timer()

    # ======================== Checks ========================

    async def _check_loop(self) -> None:
        """Fixed-period check loop"""
        try:
            while True:
                await asyncio.sleep(self.check_interval)
                try:
                    self.check()
                except Exception as e:
                    logger.error(f"Reminder check failed: {e}", exc_info=True)
        except asyncio.CancelledError:
            logger.debug("Reminder loop cancelled")

    def _prune_notified(self, now: datetime) -> None:
        """Forget reminders of events that have already started"""
        for key in list(self._notified):
            start = event_start({"date": key[1], "startTime": key[2]})
            if start is None or start < now:
                self._notified.discard(key)

    def check(self, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Run one check against the current snapshot

        Args:
            now: Current time, defaults to the coordinator clock

        Returns:
            Events a reminder was fired for during this check
        """
        now = now or self.clock()
        if self.is_attached:
            events, entities = self.events, self.entities
        else:
            events, entities = self.db.get_all(EVENTS), self.db.get_all(ENTITIES)

        self._prune_notified(now)

        fired = []
        for event in events:
            if minutes_until(event, now) != self.lead_minutes:
                continue
            key = (event.get("id"), event.get("date", ""), event.get("startTime", ""))
            if key in self._notified:
                continue
            self._notified.add(key)
            emit_reminder(
                self.db.hub,
                event,
                reminder_body(event, entities),
                timestamp=now.isoformat(),
            )
            fired.append(event)

        self.stats["total_checks"] += 1
        self.stats["total_reminders"] += len(fired)
        self.stats["last_check_time"] = now
        return fired

    def get_stats(self) -> Dict[str, Any]:
        """Get coordinator statistics"""
        return {
            "is_running": self.is_running,
            "status": self.mode,
            "notifications_enabled": self.enabled,
            "check_interval": self.check_interval,
            "lead_minutes": self.lead_minutes,
            "start_time": self.stats["start_time"].isoformat()
            if self.stats["start_time"]
            else None,
            "total_checks": self.stats["total_checks"],
            "total_reminders": self.stats["total_reminders"],
            "last_check_time": self.stats["last_check_time"].isoformat()
            if self.stats["last_check_time"]
            else None,
        }


def get_reminder_coordinator() -> ReminderCoordinator:
    """Get global reminder coordinator singleton"""
    global _reminder_coordinator
    if _reminder_coordinator is None:
        from agenda.config.loader import get_config

        config = get_config()
        _reminder_coordinator = ReminderCoordinator(
            check_interval=config.get("notifications.check_interval", 60),
            lead_minutes=config.get("notifications.lead_minutes", 30),
        )
    return _reminder_coordinator


def reset_reminder_coordinator() -> None:
    global _reminder_coordinator
    _reminder_coordinator = None
