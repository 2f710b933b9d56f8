from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, TypeVar

from skill_snapshots.core import (
    ActivityDelta,
    BossDelta,
    SkillDelta,
    Snapshot,
    SnapshotDelta,
)
from skill_snapshots.taxonomy import UNKNOWN

E = TypeVar("E")


def _by_type(entries: Iterable[E]) -> Dict[str, E]:
    out: Dict[str, E] = {}
    for e in entries:
        label = e.activity_type  # type: ignore[attr-defined]
        if label and label != UNKNOWN:
            out[label] = e
    return out


def skill_deltas(previous: Sequence, current: Sequence) -> List[SkillDelta]:
    """
    Gains per skill type present on both sides.
    Negative experience means "unranked" and is skipped, as are lines with no gain.
    """
    prev = _by_type(previous)
    out: List[SkillDelta] = []
    for c in current:
        p = prev.get(c.activity_type)
        if p is None or c.activity_type == UNKNOWN:
            continue
        if c.experience < 0 or p.experience < 0:
            continue
        xp_gain = c.experience - p.experience
        level_gain = c.level - p.level
        if xp_gain > 0 or level_gain > 0:
            out.append(
                SkillDelta(
                    activity_type=c.activity_type,
                    name=c.name,
                    experience_gain=xp_gain,
                    level_gain=level_gain,
                )
            )
    return out


def boss_deltas(previous: Sequence, current: Sequence) -> List[BossDelta]:
    prev = _by_type(previous)
    out: List[BossDelta] = []
    for c in current:
        p = prev.get(c.activity_type)
        if p is None or c.activity_type == UNKNOWN:
            continue
        if c.kill_count < 0 or p.kill_count < 0:
            continue
        gain = c.kill_count - p.kill_count
        if gain > 0:
            out.append(BossDelta(activity_type=c.activity_type, name=c.name, kill_count_gain=gain))
    return out


def activity_deltas(previous: Sequence, current: Sequence) -> List[ActivityDelta]:
    prev = _by_type(previous)
    out: List[ActivityDelta] = []
    for c in current:
        p = prev.get(c.activity_type)
        if p is None or c.activity_type == UNKNOWN:
            continue
        if c.score < 0 or p.score < 0:
            continue
        gain = c.score - p.score
        if gain > 0:
            out.append(ActivityDelta(activity_type=c.activity_type, name=c.name, score_gain=gain))
    return out


def compute_delta(previous: Snapshot, current: Snapshot) -> SnapshotDelta:
    skills = skill_deltas(previous.skills, current.skills)
    total = sum(s.experience_gain for s in skills if s.experience_gain > 0)
    return SnapshotDelta(
        user_id=current.user_id,
        timestamp=current.timestamp,
        snapshot_id=current.id,
        previous_snapshot_id=previous.id,
        skills=tuple(skills),
        bosses=tuple(boss_deltas(previous.bosses, current.bosses)),
        activities=tuple(activity_deltas(previous.activities, current.activities)),
        total_experience_gain=total,
    )


def compute_deltas(snapshots: Iterable[Snapshot]) -> List[SnapshotDelta]:
    """Consecutive deltas in timestamp order; deltas with no gains are dropped."""
    ordered = sorted(snapshots, key=lambda s: s.timestamp)
    out: List[SnapshotDelta] = []
    for prev, cur in zip(ordered, ordered[1:]):
        d = compute_delta(prev, cur)
        if not d.empty:
            out.append(d)
    return out
