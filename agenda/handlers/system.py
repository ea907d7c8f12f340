"""
System module command handlers
Reminder coordinator status
"""

from typing import Any, Dict

from agenda.core.db import get_db
from agenda.core.logger import get_logger
from agenda.core.reminders import get_reminder_coordinator

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/system/status",
    tags=["system"],
    summary="Get system status",
    description="Database availability and reminder coordinator statistics",
)
async def get_system_status() -> Dict[str, Any]:
    """Get system status"""
    try:
        db = get_db()
        return ok_response(
            {
                "database": {
                    "path": db.db_path,
                    "available": db.available,
                    "lastError": db.last_error,
                },
                "reminders": get_reminder_coordinator().get_stats(),
            }
        )
    except Exception as e:
        return error_response("Failed to get system status", e)
