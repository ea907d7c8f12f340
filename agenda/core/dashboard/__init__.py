from .manager import (
    DashboardManager,
    Statistics,
    compute_statistics,
    get_dashboard_manager,
)

__all__ = [
    "DashboardManager",
    "Statistics",
    "compute_statistics",
    "get_dashboard_manager",
]
