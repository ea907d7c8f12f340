"""
Change notification hub
Delivers collection snapshots to subscribers after each successful store mutation,
and reminder notifications fired by the reminder coordinator
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from agenda.core.logger import get_logger

logger = get_logger(__name__)

REMINDERS_CHANNEL = "reminders"

Callback = Callable[[Any], None]


class Subscription:
    """Handle returned by ChangeHub.subscribe(); call unsubscribe() on teardown"""

    def __init__(self, hub: "ChangeHub", channel: str, callback: Callback):
        self._hub = hub
        self.channel = channel
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._hub._remove(self)


class ChangeHub:
    """Per-store observer registry keyed by channel (collection name)"""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, channel: str, callback: Callback) -> Subscription:
        subscription = Subscription(self, channel, callback)
        self._subscribers.setdefault(channel, []).append(subscription)
        logger.debug(f"[events] Subscribed to {channel}")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.channel, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
            logger.debug(f"[events] Unsubscribed from {subscription.channel}")

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, []))

    def publish(self, channel: str, payload: Any) -> int:
        """Deliver payload to every subscriber of channel

        A failing callback is logged and skipped, it never aborts delivery to
        the others nor the mutation that triggered it.

        Returns:
            Number of callbacks that completed
        """
        delivered = 0
        # Copy: callbacks may unsubscribe while we iterate
        for subscription in list(self._subscribers.get(channel, [])):
            if not subscription.active:
                continue
            try:
                subscription.callback(payload)
                delivered += 1
            except Exception:
                logger.error(
                    f"❌ [events] Subscriber callback failed on channel: {channel}",
                    exc_info=True,
                )
        return delivered


def emit_reminder(
    hub: ChangeHub,
    event_data: Dict[str, Any],
    body: str,
    timestamp: Optional[str] = None,
) -> bool:
    """
    Publish an "event reminder" notification

    Args:
        hub: Hub of the store the event belongs to
        event_data: Event record (camelCase fields)
        body: Notification body, "<startTime> - <entity name>"
        timestamp: Firing timestamp

    Returns:
        True if at least one subscriber received it, False otherwise
    """
    resolved_timestamp = timestamp or datetime.now().isoformat()
    payload = {
        "type": "event_reminder",
        "title": event_data.get("title", ""),
        "body": body,
        "data": event_data,
        "timestamp": resolved_timestamp,
    }

    logger.info(f"🔔 Reminder: {payload['title']} ({body})")
    delivered = hub.publish(REMINDERS_CHANNEL, payload)
    if delivered:
        logger.debug(f"✅ Reminder delivered to {delivered} subscriber(s): {event_data.get('id')}")
    return delivered > 0
