from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from skill_snapshots.aggregation import (
    AggregationWindow,
    InvalidAggregationWindowError,
    aggregate_by_window,
    normalize_window,
    select_best_snapshot,
    validate_aggregation_window,
    window_key,
)
from skill_snapshots.core import SkillEntry, Snapshot


def _at(day: int, hour: int, overall: int, id: str) -> Snapshot:
    return Snapshot(
        id=id,
        user_id="user-1",
        timestamp=datetime(2024, 3, day, hour, tzinfo=timezone.utc),
        skills=(SkillEntry(activity_type="OVERALL", experience=overall),),
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("weekly", AggregationWindow.WEEKLY),
        ("MONTHLY", AggregationWindow.MONTHLY),
        (AggregationWindow.WEEKLY, AggregationWindow.WEEKLY),
        ("hourly", AggregationWindow.DAILY),
        (None, AggregationWindow.DAILY),
    ],
)
def test_normalize_window(raw, expected):
    assert normalize_window(raw) is expected


def test_window_keys():
    ts = datetime(2024, 12, 30, tzinfo=timezone.utc)
    assert window_key(ts, AggregationWindow.DAILY) == "2024-12-30"
    assert window_key(ts, AggregationWindow.WEEKLY) == "2025-W01"
    assert window_key(ts, AggregationWindow.MONTHLY) == "2024-12"


def test_select_best_prefers_experience_then_later():
    a = _at(1, 1, 100, "a")
    b = _at(1, 2, 200, "b")
    c = _at(1, 3, 200, "c")
    assert select_best_snapshot([a, b, c]).id == "c"
    assert select_best_snapshot([c, b, a]).id == "c"
    assert select_best_snapshot([]) is None


def test_aggregate_daily_keeps_one_per_day():
    snapshots = [_at(2, 9, 300, "d2"), _at(1, 8, 100, "d1a"), _at(1, 20, 150, "d1b"), _at(3, 1, 300, "d3")]

    out = aggregate_by_window(snapshots, AggregationWindow.DAILY)

    assert [s.id for s in out] == ["d1b", "d2", "d3"]


def test_aggregate_monthly():
    snapshots = [_at(1, 8, 100, "a"), _at(20, 8, 400, "b")]
    assert [s.id for s in aggregate_by_window(snapshots, AggregationWindow.MONTHLY)] == ["b"]


def test_validate_window_limits():
    start = datetime(2020, 1, 1, tzinfo=timezone.utc)

    validate_aggregation_window(start, start + timedelta(days=366), AggregationWindow.DAILY)
    with pytest.raises(InvalidAggregationWindowError):
        validate_aggregation_window(start, start + timedelta(days=367), AggregationWindow.DAILY)

    validate_aggregation_window(start, start + timedelta(days=700), AggregationWindow.WEEKLY)
    with pytest.raises(InvalidAggregationWindowError):
        validate_aggregation_window(start, start + timedelta(days=800), AggregationWindow.WEEKLY)

    validate_aggregation_window(start, start + timedelta(days=5000), AggregationWindow.MONTHLY)
