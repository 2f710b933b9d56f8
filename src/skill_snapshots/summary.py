from __future__ import annotations

from typing import Sequence

import numpy as np

from skill_snapshots.change_filter import overall_experience, sort_by_timestamp
from skill_snapshots.core import IntervalSummary, Snapshot
from skill_snapshots.taxonomy import OVERALL


def overall_experience_series(snapshots: Sequence[Snapshot], activity_type: str = OVERALL) -> np.ndarray:
    """Overall experience per snapshot as int64; snapshots without the line count as 0."""
    values = [overall_experience(s, activity_type) for s in snapshots]
    return np.array([0 if v is None else v for v in values], dtype=np.int64)


def overall_experience_changes(snapshots: Sequence[Snapshot], activity_type: str = OVERALL) -> np.ndarray:
    """
    Change versus the previous snapshot, same length as ``snapshots``.
    The first snapshot has nothing to compare with and gets 0.
    """
    series = overall_experience_series(snapshots, activity_type)
    if series.size == 0:
        return series
    return np.concatenate(([0], np.diff(series))).astype(np.int64)


def summarize_interval(snapshots: Sequence[Snapshot], activity_type: str = OVERALL) -> IntervalSummary:
    ordered = sort_by_timestamp(snapshots)
    if not ordered:
        return IntervalSummary(total_snapshots=0, snapshots_with_gains=0, total_overall_gain=0)

    changes = overall_experience_changes(ordered, activity_type)
    gains = changes[changes > 0]
    return IntervalSummary(
        total_snapshots=len(ordered),
        snapshots_with_gains=int(gains.size),
        total_overall_gain=int(gains.sum()),
        first=ordered[0].timestamp,
        last=ordered[-1].timestamp,
    )
