"""Read-only dashboard composition and pregnancy progress."""

from .aggregator import Dashboard, DashboardStats, compute_stats, get_dashboard
from .pregnancy import (
    Milestone,
    PregnancyProgress,
    Trimester,
    pregnancy_progress,
)

__all__ = [
    "Dashboard",
    "DashboardStats",
    "compute_stats",
    "get_dashboard",
    "Milestone",
    "PregnancyProgress",
    "Trimester",
    "pregnancy_progress",
]
