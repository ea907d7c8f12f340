"""Runtime control utility

Provides startup, stop and status query logic shared by the CLI and the
FastAPI lifespan.
"""

from __future__ import annotations

import asyncio
import atexit
from typing import Optional

from agenda.config.loader import get_config
from agenda.core.db import get_db
from agenda.core.logger import get_logger
from agenda.core.reminders import ReminderCoordinator, get_reminder_coordinator
from agenda.core.settings import init_settings

logger = get_logger(__name__)

# Global flags, prevent repeated cleanup
_cleanup_done = False
_exit_handlers_registered = False


def _cleanup_on_exit():
    """Cleanup function on process exit (sync version for atexit)"""
    global _cleanup_done

    if _cleanup_done:
        return

    _cleanup_done = True
    coordinator = get_reminder_coordinator()
    if not coordinator.is_attached:
        logger.debug("Reminder coordinator not started, skipping cleanup")
        return

    try:
        asyncio.run(coordinator.stop(quiet=True))
        logger.debug("Exit cleanup completed")
    except RuntimeError as e:
        # Loop already closed or still running at interpreter exit
        logger.debug(f"Exit cleanup skipped: {e}")


def _register_exit_handlers():
    """Register exit handlers once"""
    global _exit_handlers_registered

    if _exit_handlers_registered:
        logger.debug("Exit handlers already registered, skipping")
        return

    atexit.register(_cleanup_on_exit)
    logger.debug("atexit cleanup function registered")
    _exit_handlers_registered = True


async def start_runtime(
    config_file: Optional[str] = None, *, register_exit: bool = True
) -> ReminderCoordinator:
    """Load configuration, open the store and start the reminder coordinator.

    Returns the coordinator directly if it is already started.
    """
    # Load configuration file (auto-create default config if it doesn't exist)
    config_loader = get_config(config_file)
    logger.info(f"✓ Configuration file: {config_loader.config_file}")

    # Open database (database.path in config.toml), seeding on first run
    db = get_db()
    if not db.available:
        logger.error(
            f"Database unavailable, running with empty collections: {db.last_error}"
        )

    init_settings(config_loader)
    logger.info("✓ Settings manager initialized")

    if register_exit:
        _register_exit_handlers()

    coordinator = get_reminder_coordinator()
    if coordinator.is_attached:
        logger.info("Reminder coordinator is already running, no need to start again")
        return coordinator

    await coordinator.start()
    logger.info(f"Reminder coordinator status: {coordinator.mode}")
    return coordinator


async def stop_runtime(*, quiet: bool = False) -> ReminderCoordinator:
    """Stop the reminder coordinator, returns directly if not started.

    Args:
        quiet: When True, only log debug messages
    """
    coordinator = get_reminder_coordinator()
    if not coordinator.is_attached:
        if not quiet:
            logger.info("Reminder coordinator is not running")
        return coordinator

    try:
        await asyncio.wait_for(coordinator.stop(quiet=quiet), timeout=5.0)
    except asyncio.TimeoutError:
        if not quiet:
            logger.warning("Stopping reminder coordinator timed out")

    return coordinator


async def get_runtime_stats() -> dict:
    """Get current reminder coordinator statistics"""
    return get_reminder_coordinator().get_stats()
