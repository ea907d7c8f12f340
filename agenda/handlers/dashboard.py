"""
Dashboard module command handlers
"""

from typing import Any, Dict

from agenda.core.dashboard.manager import get_dashboard_manager
from agenda.core.logger import get_logger
from agenda.core.settings import get_settings

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/dashboard/statistics",
    tags=["dashboard"],
    summary="Get event statistics",
    description="Per-entity counts and hours, online/presence distribution and the daily trend of the current month",
)
async def get_statistics() -> Dict[str, Any]:
    """Get event statistics

    @returns Statistics, or available=false when there are no events
    """
    try:
        language = get_settings().get_language()
        stats = get_dashboard_manager().get_statistics(language=language)
        if stats is None:
            return ok_response({"available": False, "statistics": None})
        return ok_response({"available": True, "statistics": stats.model_dump()})
    except Exception as e:
        return error_response("Failed to get statistics", e)
