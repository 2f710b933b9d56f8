from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from skill_snapshots.change_filter import overall_experience
from skill_snapshots.core import Snapshot
from skill_snapshots.taxonomy import OVERALL

DAILY_MAX_DURATION = timedelta(days=366)
WEEKLY_MAX_DURATION = timedelta(days=2 * 366)


class AggregationWindow(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class InvalidAggregationWindowError(ValueError):
    """Window is too fine-grained for the requested time range."""

    def __init__(self, window: AggregationWindow, reason: str) -> None:
        self.window = window
        self.reason = reason
        super().__init__(f"invalid aggregation window {window.value}: {reason}")


def normalize_window(window: Union[str, AggregationWindow, None]) -> AggregationWindow:
    """Unknown or missing windows fall back to DAILY."""
    if isinstance(window, AggregationWindow):
        return window
    if isinstance(window, str):
        try:
            return AggregationWindow(window.strip().upper())
        except ValueError:
            pass
    return AggregationWindow.DAILY


def validate_aggregation_window(
    start: datetime,
    end: datetime,
    window: AggregationWindow,
    *,
    daily_max: timedelta = DAILY_MAX_DURATION,
    weekly_max: timedelta = WEEKLY_MAX_DURATION,
) -> None:
    duration = end - start
    if window is AggregationWindow.DAILY and duration > daily_max:
        raise InvalidAggregationWindowError(window, f"daily aggregation requires time range <= {daily_max.days} days")
    if window is AggregationWindow.WEEKLY and duration > weekly_max:
        raise InvalidAggregationWindowError(window, f"weekly aggregation requires time range <= {weekly_max.days} days")
    # monthly is always valid


def window_key(timestamp: datetime, window: AggregationWindow) -> str:
    if window is AggregationWindow.WEEKLY:
        year, week, _ = timestamp.isocalendar()
        return f"{year}-W{week:02d}"
    if window is AggregationWindow.MONTHLY:
        return timestamp.strftime("%Y-%m")
    return timestamp.strftime("%Y-%m-%d")


def select_best_snapshot(snapshots: Iterable[Snapshot], activity_type: str = OVERALL) -> Optional[Snapshot]:
    """Highest overall experience wins; equal experience goes to the later snapshot."""
    best: Optional[Snapshot] = None
    best_xp = 0
    for s in snapshots:
        xp = overall_experience(s, activity_type) or 0
        if best is None or xp > best_xp or (xp == best_xp and s.timestamp > best.timestamp):
            best = s
            best_xp = xp
    return best


def aggregate_by_window(
    snapshots: Iterable[Snapshot],
    window: AggregationWindow,
    activity_type: str = OVERALL,
) -> List[Snapshot]:
    """One snapshot per calendar bucket, ordered by timestamp."""
    groups: Dict[str, List[Snapshot]] = {}
    for s in sorted(snapshots, key=lambda s: s.timestamp):
        groups.setdefault(window_key(s.timestamp, window), []).append(s)

    out: List[Snapshot] = []
    for group in groups.values():
        best = select_best_snapshot(group, activity_type)
        if best is not None:
            out.append(best)

    out.sort(key=lambda s: s.timestamp)
    return out
