from __future__ import annotations

from typing import Iterable, List

from skill_snapshots.core import Snapshot
from skill_snapshots.taxonomy import (
    ACTIVITY_ACTIVITY_TYPES,
    BOSS_ACTIVITY_TYPES,
    KIND_ACTIVITY,
    KIND_BOSS,
    KIND_SKILL,
    SKILL_ACTIVITY_TYPES,
    get_kind,
)


class SnapshotValidationError(ValueError):
    """Raised when a snapshot fails validation and the caller asked for strictness."""

    def __init__(self, issues: Iterable[str]) -> None:
        self.issues = tuple(issues)
        super().__init__("invalid snapshot:\n- " + "\n- ".join(self.issues))


def _check_kind(labels: Iterable[str], *, kind: str, article: str) -> List[str]:
    return [f"{label} is not {article} {kind} activity type" for label in labels if get_kind(label) != kind]


def _check_complete(labels: Iterable[str], *, expected: Iterable[str], kind: str) -> List[str]:
    missing = sorted(set(expected) - set(labels))
    if missing:
        return [f"snapshot must contain all {kind} types (missing: {', '.join(missing)})"]
    return []


def validate_snapshot(snapshot: Snapshot, *, require_complete: bool = False, strict: bool = False) -> List[str]:
    """
    Returns issues (strings); raises SnapshotValidationError instead when strict=True.

    Checks:
      - timestamp and user id are set
      - every entry sits in the list matching its kind
      - require_complete: every known skill/boss/activity type is present
    """
    issues: List[str] = []

    if snapshot.timestamp is None:
        issues.append("snapshot timestamp is missing")
    if not snapshot.user_id:
        issues.append("snapshot user id is empty")

    skill_labels = [s.activity_type for s in snapshot.skills]
    boss_labels = [b.activity_type for b in snapshot.bosses]
    activity_labels = [a.activity_type for a in snapshot.activities]

    issues += _check_kind(skill_labels, kind=KIND_SKILL, article="a")
    issues += _check_kind(boss_labels, kind=KIND_BOSS, article="a")
    issues += _check_kind(activity_labels, kind=KIND_ACTIVITY, article="an")

    if require_complete:
        issues += _check_complete(skill_labels, expected=SKILL_ACTIVITY_TYPES, kind=KIND_SKILL)
        issues += _check_complete(boss_labels, expected=BOSS_ACTIVITY_TYPES, kind=KIND_BOSS)
        issues += _check_complete(activity_labels, expected=ACTIVITY_ACTIVITY_TYPES, kind=KIND_ACTIVITY)

    if strict and issues:
        raise SnapshotValidationError(issues)
    return issues
