from skill_snapshots.change_filter import (  # noqa: F401
    InvalidRangeError,
    filter_changed_overall,
    overall_experience,
    select_changed,
)
from skill_snapshots.sources import InMemorySnapshotSource, SnapshotFetchError, SnapshotSource  # noqa: F401

__all__ = [
    "InMemorySnapshotSource",
    "InvalidRangeError",
    "SnapshotFetchError",
    "SnapshotSource",
    "filter_changed_overall",
    "overall_experience",
    "select_changed",
]
