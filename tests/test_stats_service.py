"""Tests for windowed food log statistics."""

from datetime import datetime, timedelta
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from calorie_tracker.domain.errors import InvalidTransition
from calorie_tracker.domain.models import (
    DailyRequirements,
    FoodLog,
    NutritionalInfo,
    SessionState,
)
from calorie_tracker.domain.stats import DashboardTab
from calorie_tracker.services.stats import (
    aggregate_by_bucket,
    build_dashboard,
    select_window,
    sum_nutrition,
    to_epoch_ms,
    window_start,
)

TZ = ZoneInfo("America/New_York")
# Thursday; US daylight saving time started four days earlier.
NOW = datetime(2024, 3, 14, 15, 30, tzinfo=TZ)
ONE_MS = timedelta(milliseconds=1)


def _log(when: datetime, calories: float = 100, name: str = "meal") -> FoodLog:
    return FoodLog(
        id=str(uuid4()),
        name=name,
        timestamp=to_epoch_ms(when),
        nutrition=NutritionalInfo(
            calories=calories,
            protein=10,
            carbohydrates=20,
            fat=5,
            portion_size="1 plate",
        ),
        image="data:image/jpeg;base64,AAAA",
    )


def _midnight(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=TZ)


def test_today_includes_midnight_and_excludes_one_ms_before() -> None:
    at_midnight = _log(_midnight(2024, 3, 14))
    before = _log(_midnight(2024, 3, 14) - ONE_MS)

    selected = select_window([before, at_midnight], DashboardTab.TODAY, NOW)

    assert selected == [at_midnight]


def test_weekly_spans_seven_calendar_days() -> None:
    first_day = _log(_midnight(2024, 3, 8))
    eighth_day_back = _log(_midnight(2024, 3, 7))
    just_before = _log(_midnight(2024, 3, 8) - ONE_MS)

    selected = select_window(
        [eighth_day_back, just_before, first_day], DashboardTab.WEEKLY, NOW
    )

    assert selected == [first_day]
    assert window_start(DashboardTab.WEEKLY, NOW) == _midnight(2024, 3, 8)


def test_monthly_starts_on_first_of_month() -> None:
    first = _log(_midnight(2024, 3, 1))
    last_february = _log(_midnight(2024, 3, 1) - ONE_MS)

    selected = select_window([last_february, first], DashboardTab.MONTHLY, NOW)

    assert selected == [first]


def test_future_dated_logs_are_included() -> None:
    future = _log(NOW + timedelta(days=3))

    assert select_window([future], DashboardTab.TODAY, NOW) == [future]


def test_select_window_requires_aware_now() -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        select_window([], DashboardTab.TODAY, datetime(2024, 3, 14, 12))


def test_weekly_buckets_are_chronological_and_rounded_after_summing() -> None:
    logs = [
        _log(_midnight(2024, 3, 14) + timedelta(hours=8), calories=100.4),
        _log(_midnight(2024, 3, 8) + timedelta(hours=12), calories=300),
        _log(_midnight(2024, 3, 14) + timedelta(hours=13), calories=100.4),
    ]

    buckets = aggregate_by_bucket(logs, DashboardTab.WEEKLY, TZ)

    assert [bucket.label for bucket in buckets] == ["Fri", "Thu"]
    assert buckets[0].calories == 300
    assert buckets[1].calories == 201
    assert buckets[1].protein == 20
    assert buckets[1].carbs == 40
    assert buckets[1].fat == 10


def test_monthly_bucket_labels() -> None:
    logs = [_log(_midnight(2024, 3, 2)), _log(_midnight(2024, 3, 14))]

    buckets = aggregate_by_bucket(logs, DashboardTab.MONTHLY, TZ)

    assert [bucket.label for bucket in buckets] == ["Mar 2", "Mar 14"]


def test_today_has_no_chart_buckets() -> None:
    assert aggregate_by_bucket([_log(NOW)], DashboardTab.TODAY, TZ) == []


def test_sum_nutrition_is_additive() -> None:
    totals = sum_nutrition([_log(NOW, calories=120.5), _log(NOW, calories=80.25)])

    assert totals.calories == pytest.approx(200.75)
    assert totals.protein == 20
    assert totals.carbohydrates == 40
    assert totals.fat == 10


def test_build_dashboard_uses_today_for_summary() -> None:
    older = _log(_midnight(2024, 3, 10), calories=400, name="older")
    today = _log(NOW - timedelta(hours=1), calories=250, name="today")
    state = SessionState(
        daily_requirements=DailyRequirements(
            calories=2000, protein=150, carbohydrates=200, fat=67
        ),
        food_logs=[older, today],
    )

    view = build_dashboard(state, DashboardTab.WEEKLY, NOW)

    assert view.today.calories == 250
    assert [log.name for log in view.logs] == ["today", "older"]
    assert [bucket.label for bucket in view.chart] == ["Sun", "Thu"]


def test_build_dashboard_requires_setup() -> None:
    with pytest.raises(InvalidTransition):
        build_dashboard(SessionState(), DashboardTab.TODAY, NOW)
