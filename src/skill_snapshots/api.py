from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from skill_snapshots.aggregation import (
    AggregationWindow,
    aggregate_by_window,
    normalize_window,
    validate_aggregation_window,
)
from skill_snapshots.change_filter import (
    fetch_ordered,
    filter_changed_overall,
    overall_experience,
    select_changed,
    validate_interval,
)
from skill_snapshots.config import AppConfig, load_app_config
from skill_snapshots.core import IntervalSummary, Snapshot
from skill_snapshots.documents import as_utc, snapshot_to_document
from skill_snapshots.sources import SnapshotSource
from skill_snapshots.summary import summarize_interval
from skill_snapshots.validation import validate_snapshot

Logger = Callable[[str], None]


@dataclass(frozen=True)
class IntervalReport:
    user_id: str
    start: datetime
    end: datetime
    window: AggregationWindow
    snapshots: Tuple[Snapshot, ...]
    summary: IntervalSummary

    def as_json(self) -> dict:
        snapshots = []
        for s in self.snapshots:
            doc = snapshot_to_document(s)
            doc["timestamp"] = s.timestamp.isoformat()
            snapshots.append(doc)
        return {
            "userId": self.user_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "window": self.window.value,
            "snapshots": snapshots,
            "totalSnapshots": self.summary.total_snapshots,
            "snapshotsWithGains": self.summary.snapshots_with_gains,
            "totalOverallGain": self.summary.total_overall_gain,
        }


def _app_config(app_config: Optional[AppConfig], config_path: Optional[Path]) -> AppConfig:
    cfg = app_config or load_app_config(override_path=Path(config_path) if config_path else None)
    cfg.validate()
    return cfg


def _clamp_end(cfg: AppConfig, start: datetime, end: datetime, now: Optional[datetime]) -> datetime:
    # a range starting in the future is left alone
    if not cfg.clamp_end_to_now:
        return end
    now = as_utc(now or datetime.now(timezone.utc))
    if now < start:
        return end
    return min(end, now)


def _snapshot_check(cfg: AppConfig) -> Optional[Callable[[Snapshot], object]]:
    if not cfg.validate_snapshots:
        return None

    def check(snapshot: Snapshot) -> None:
        validate_snapshot(snapshot, require_complete=cfg.require_complete_snapshots, strict=True)

    return check


def changed_overall_snapshots(
    user_id: str,
    start: datetime,
    end: datetime,
    *,
    source: SnapshotSource,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Path] = None,
    logger: Optional[Logger] = None,
    cancelled: Optional[Callable[[], bool]] = None,
    now: Optional[datetime] = None,
) -> List[Snapshot]:
    cfg = _app_config(app_config, config_path)
    start, end = validate_interval(start, end)

    return filter_changed_overall(
        user_id,
        start,
        _clamp_end(cfg, start, end, now),
        source=source,
        activity_type=cfg.overall_activity_type,
        max_interval=cfg.max_interval,
        logger=logger,
        cancelled=cancelled,
        check=_snapshot_check(cfg),
    )


def snapshot_interval(
    user_id: str,
    start: datetime,
    end: datetime,
    *,
    source: SnapshotSource,
    window: Union[str, AggregationWindow, None] = None,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Path] = None,
    logger: Optional[Logger] = None,
    now: Optional[datetime] = None,
) -> IntervalReport:
    """
    Changed snapshots for the interval, reduced to one per window bucket,
    together with counts taken over every snapshot in the interval.
    """

    def log(msg: str) -> None:
        if logger:
            logger(msg)

    cfg = _app_config(app_config, config_path)
    start, end = validate_interval(start, end)
    start, end = validate_interval(start, _clamp_end(cfg, start, end, now), max_interval=cfg.max_interval)

    win = normalize_window(window if window is not None else cfg.aggregation_window)
    validate_aggregation_window(start, end, win, daily_max=cfg.daily_max, weekly_max=cfg.weekly_max)

    log(f"fetching snapshots for {user_id} ({start.isoformat()} .. {end.isoformat()})")
    ordered = fetch_ordered(source, user_id, start, end)
    check = _snapshot_check(cfg)
    if check is not None:
        for s in ordered:
            check(s)

    activity_type = cfg.overall_activity_type
    changed = select_changed(ordered, lambda s: overall_experience(s, activity_type))
    aggregated = aggregate_by_window(changed, win, activity_type)
    summary = summarize_interval(ordered, activity_type)
    log(f"{len(ordered)} snapshots, {len(changed)} changed, {len(aggregated)} {win.value.lower()} buckets")

    return IntervalReport(
        user_id=user_id,
        start=start,
        end=end,
        window=win,
        snapshots=tuple(aggregated),
        summary=summary,
    )
