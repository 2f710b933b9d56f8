from __future__ import annotations

import pytest

from skill_snapshots.core import ActivityEntry, BossEntry, SkillEntry, Snapshot
from skill_snapshots.taxonomy import ACTIVITY_ACTIVITY_TYPES, BOSS_ACTIVITY_TYPES, SKILL_ACTIVITY_TYPES
from skill_snapshots.validation import SnapshotValidationError, validate_snapshot


def _complete(t) -> Snapshot:
    return Snapshot(
        user_id="user-1",
        timestamp=t(0),
        skills=tuple(SkillEntry(activity_type=a, experience=0) for a in SKILL_ACTIVITY_TYPES),
        bosses=tuple(BossEntry(activity_type=a, kill_count=0) for a in BOSS_ACTIVITY_TYPES),
        activities=tuple(ActivityEntry(activity_type=a, score=0) for a in ACTIVITY_ACTIVITY_TYPES),
    )


def test_complete_snapshot_has_no_issues(t):
    assert validate_snapshot(_complete(t), require_complete=True) == []


def test_partial_snapshot_ok_unless_completeness_required(snap):
    s = snap(100)
    assert validate_snapshot(s) == []
    issues = validate_snapshot(s, require_complete=True)
    assert any(i.startswith("snapshot must contain all skill types") for i in issues)
    assert any(i.startswith("snapshot must contain all boss types") for i in issues)


def test_wrong_kind_is_reported(t):
    s = Snapshot(
        user_id="user-1",
        timestamp=t(0),
        skills=(SkillEntry(activity_type="ZULRAH", experience=1),),
        bosses=(BossEntry(activity_type="ATTACK", kill_count=1),),
        activities=(ActivityEntry(activity_type="UNKNOWN", score=1),),
    )
    assert validate_snapshot(s) == [
        "ZULRAH is not a skill activity type",
        "ATTACK is not a boss activity type",
        "UNKNOWN is not an activity activity type",
    ]


def test_missing_user_and_timestamp():
    issues = validate_snapshot(Snapshot(user_id="", timestamp=None))
    assert issues == ["snapshot timestamp is missing", "snapshot user id is empty"]


def test_strict_raises(snap):
    with pytest.raises(SnapshotValidationError) as exc:
        validate_snapshot(snap(1, user_id=""), strict=True)
    assert exc.value.issues == ("snapshot user id is empty",)
