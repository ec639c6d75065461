"""Domain models for dashboard statistics."""

from dataclasses import dataclass
from enum import Enum


class DashboardTab(str, Enum):
    """Time windows offered on the dashboard."""

    TODAY = "Today"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


@dataclass(frozen=True)
class ChartBucket:
    """Rounded nutrition totals for one chart bar."""

    label: str
    calories: int
    protein: int
    carbs: int
    fat: int
