from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from skill_snapshots.changes import select_changed
from skill_snapshots.core import Snapshot
from skill_snapshots.documents import as_utc
from skill_snapshots.sources import SnapshotFetchError, SnapshotSource
from skill_snapshots.taxonomy import OVERALL

__all__ = [
    "InvalidRangeError",
    "fetch_ordered",
    "filter_changed_overall",
    "overall_experience",
    "select_changed",
    "sort_by_timestamp",
    "validate_interval",
]


class InvalidRangeError(ValueError):
    """Requested interval cannot be served.

    Attributes
    ----------
    start, end:
        The interval bounds as received.
    reason:
        Short machine-friendly summary (e.g. "start after end").
    """

    def __init__(self, start: datetime, end: datetime, reason: str) -> None:
        self.start = start
        self.end = end
        self.reason = reason
        super().__init__(f"invalid range: {reason} ({start.isoformat()} .. {end.isoformat()})")


def validate_interval(
    start: datetime,
    end: datetime,
    *,
    max_interval: Optional[timedelta] = None,
) -> Tuple[datetime, datetime]:
    """Returns the bounds in UTC; naive bounds are taken as UTC."""
    start, end = as_utc(start), as_utc(end)
    if start > end:
        raise InvalidRangeError(start, end, "start after end")
    if max_interval is not None and end - start > max_interval:
        raise InvalidRangeError(start, end, "maximum time interval exceeded")
    return start, end


def overall_experience(snapshot: Snapshot, activity_type: str = OVERALL) -> Optional[int]:
    """Experience of the OVERALL skill line, or None when the snapshot has none."""
    skill = snapshot.get_skill(activity_type)
    return None if skill is None else skill.experience


def sort_by_timestamp(snapshots: Iterable[Snapshot]) -> List[Snapshot]:
    # sorted() is stable: equal timestamps keep source order
    return sorted(snapshots, key=lambda s: as_utc(s.timestamp))


def fetch_ordered(source: SnapshotSource, user_id: str, start: datetime, end: datetime) -> List[Snapshot]:
    try:
        fetched = source.fetch_by_user_and_range(user_id, start, end)
    except Exception as e:
        raise SnapshotFetchError(user_id, str(e)) from e
    return sort_by_timestamp(fetched)


def filter_changed_overall(
    user_id: str,
    start: datetime,
    end: datetime,
    *,
    source: SnapshotSource,
    activity_type: str = OVERALL,
    max_interval: Optional[timedelta] = None,
    logger: Optional[Callable[[str], None]] = None,
    cancelled: Optional[Callable[[], bool]] = None,
    check: Optional[Callable[[Snapshot], object]] = None,
) -> List[Snapshot]:
    """
    Snapshots of ``user_id`` in [start, end] where overall experience moved.

    ``check`` is called on every fetched snapshot before filtering and may
    raise to reject the batch.
    """

    def log(msg: str) -> None:
        if logger:
            logger(msg)

    start, end = validate_interval(start, end, max_interval=max_interval)

    log(f"fetching snapshots for {user_id} ({start.isoformat()} .. {end.isoformat()})")
    ordered = fetch_ordered(source, user_id, start, end)
    if not ordered:
        log("no snapshots in range")
        return []

    if check is not None:
        for s in ordered:
            check(s)

    changed = select_changed(
        ordered,
        lambda s: overall_experience(s, activity_type),
        cancelled=cancelled,
    )
    log(f"kept {len(changed)}/{len(ordered)} snapshots")
    return changed
