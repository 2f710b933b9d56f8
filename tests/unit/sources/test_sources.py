from __future__ import annotations

import pytest

from skill_snapshots.core import SkillEntry, Snapshot
from skill_snapshots.sources import InMemorySnapshotSource
from skill_snapshots.validation import SnapshotValidationError


def test_fetch_filters_user_and_closed_interval(snap, t):
    source = InMemorySnapshotSource(
        [
            snap(1, hours=0),
            snap(2, hours=1),
            snap(3, hours=2, user_id="user-2"),
            snap(4, hours=3),
        ]
    )

    got = source.fetch_by_user_and_range("user-1", t(1), t(3))

    assert [s.timestamp for s in got] == [t(1), t(3)]
    assert source.fetch_by_user_and_range("nobody", t(0), t(3)) == []
    assert source.users() == ["user-1", "user-2"]
    assert len(source) == 4


def test_add_rejects_invalid_snapshot(t):
    source = InMemorySnapshotSource()
    bad = Snapshot(user_id="", timestamp=t(0), skills=(SkillEntry(activity_type="ZULRAH", experience=1),))

    with pytest.raises(SnapshotValidationError) as exc:
        source.add(bad)

    assert "snapshot user id is empty" in exc.value.issues
    assert len(source) == 0


def test_validation_can_be_disabled(t):
    source = InMemorySnapshotSource(validate=False)
    source.add(Snapshot(user_id="u", timestamp=t(0), skills=(SkillEntry(activity_type="ZULRAH", experience=1),)))
    assert len(source) == 1


def test_require_complete_rejects_partial_snapshots(snap):
    source = InMemorySnapshotSource(require_complete=True)
    with pytest.raises(SnapshotValidationError):
        source.add(snap(100))


def test_latest_for_user_prefers_last_added_on_ties(snap):
    source = InMemorySnapshotSource([snap(1, hours=5, id="a"), snap(2, hours=9, id="b"), snap(3, hours=9, id="c")])
    assert source.latest_for_user("user-1").id == "c"
    assert source.latest_for_user("nobody") is None


def test_nearest_to(snap, t):
    source = InMemorySnapshotSource([snap(1, hours=0, id="a"), snap(2, hours=10, id="b")])
    assert source.nearest_to("user-1", t(3)).id == "a"
    assert source.nearest_to("user-1", t(7)).id == "b"
    assert source.nearest_to("nobody", t(7)) is None


def test_from_documents():
    source = InMemorySnapshotSource.from_documents(
        [
            {"userId": "u", "timestamp": "2024-01-01T00:00:00Z", "skills": [{"activityType": "OVERALL", "experience": 5}]},
        ]
    )
    assert source.all_for_user("u")[0].skills[0].experience == 5
