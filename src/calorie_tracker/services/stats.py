"""Windowed statistics over the food log."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from calorie_tracker.domain.errors import InvalidTransition
from calorie_tracker.domain.models import (
    DailyRequirements,
    FoodLog,
    NutritionalInfo,
    SessionState,
    round_half_up,
)
from calorie_tracker.domain.stats import ChartBucket, DashboardTab

WEEKLY_SPAN_DAYS = 7

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass
class DashboardView:
    """Everything the dashboard renders for one tab."""

    tab: DashboardTab
    requirements: DailyRequirements
    today: NutritionalInfo
    logs: list[FoodLog]
    chart: list[ChartBucket]


@dataclass
class _Totals:
    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0

    def add(self, nutrition: NutritionalInfo) -> None:
        self.calories += nutrition.calories
        self.protein += nutrition.protein
        self.carbohydrates += nutrition.carbohydrates
        self.fat += nutrition.fat


def window_start(window: DashboardTab, now: datetime) -> datetime:
    """Return the local midnight at which the window opens."""
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    today = now.date()
    if window is DashboardTab.TODAY:
        first_day = today
    elif window is DashboardTab.WEEKLY:
        first_day = today - timedelta(days=WEEKLY_SPAN_DAYS - 1)
    else:
        first_day = today.replace(day=1)
    return datetime.combine(first_day, time.min, tzinfo=now.tzinfo)


def select_window(
    logs: Iterable[FoodLog], window: DashboardTab, now: datetime
) -> list[FoodLog]:
    """Return logs at or after the window start, keeping their order."""
    start_ms = to_epoch_ms(window_start(window, now))
    return [log for log in logs if log.timestamp >= start_ms]


def aggregate_by_bucket(
    logs: Iterable[FoodLog], window: DashboardTab, tz: tzinfo
) -> list[ChartBucket]:
    """Sum nutrition per local calendar day, oldest day first."""
    if window is DashboardTab.TODAY:
        return []
    totals: dict[date, _Totals] = {}
    for log in logs:
        day = local_date(log.timestamp, tz)
        totals.setdefault(day, _Totals()).add(log.nutrition)
    return [
        ChartBucket(
            label=bucket_label(day, window),
            calories=round_half_up(entry.calories),
            protein=round_half_up(entry.protein),
            carbs=round_half_up(entry.carbohydrates),
            fat=round_half_up(entry.fat),
        )
        for day, entry in sorted(totals.items())
    ]


def sum_nutrition(logs: Iterable[FoodLog]) -> NutritionalInfo:
    """Return the unrounded totals for the given logs."""
    totals = _Totals()
    for log in logs:
        totals.add(log.nutrition)
    return NutritionalInfo(
        calories=totals.calories,
        protein=totals.protein,
        carbohydrates=totals.carbohydrates,
        fat=totals.fat,
        portion_size="",
    )


def build_dashboard(
    state: SessionState, tab: DashboardTab, now: datetime
) -> DashboardView:
    """Compose today's summary with the selected tab's list and chart."""
    if state.daily_requirements is None:
        raise InvalidTransition("Complete setup before opening the dashboard.")
    today_logs = select_window(state.food_logs, DashboardTab.TODAY, now)
    tab_logs = select_window(state.food_logs, tab, now)
    return DashboardView(
        tab=tab,
        requirements=state.daily_requirements,
        today=sum_nutrition(today_logs),
        logs=list(reversed(tab_logs)),
        chart=aggregate_by_bucket(tab_logs, tab, now.tzinfo),
    )


def bucket_label(day: date, window: DashboardTab) -> str:
    """Short chart label: weekday for weekly, month and day for monthly."""
    if window is DashboardTab.WEEKLY:
        return _WEEKDAYS[day.weekday()]
    return f"{_MONTHS[day.month - 1]} {day.day}"


def local_date(timestamp_ms: int, tz: tzinfo) -> date:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).date()


def to_epoch_ms(moment: datetime) -> int:
    return round(moment.timestamp() * 1000)
