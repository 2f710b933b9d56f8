from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class SkillEntry:
    """Single skill line of a snapshot."""

    activity_type: str
    experience: int
    name: str = ""
    level: int = 0
    rank: int = 0


@dataclass(frozen=True)
class BossEntry:
    activity_type: str
    kill_count: int
    name: str = ""
    rank: int = 0


@dataclass(frozen=True)
class ActivityEntry:
    activity_type: str
    score: int
    name: str = ""
    rank: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Timestamped record of one user's skills (plus bosses/activities)."""

    user_id: str
    timestamp: datetime
    skills: Tuple[SkillEntry, ...] = ()
    bosses: Tuple[BossEntry, ...] = ()
    activities: Tuple[ActivityEntry, ...] = ()
    id: Optional[str] = None

    def get_skill(self, activity_type: str) -> Optional[SkillEntry]:
        for skill in self.skills:
            if skill.activity_type == activity_type:
                return skill
        return None


@dataclass(frozen=True)
class SkillDelta:
    activity_type: str
    name: str
    experience_gain: int
    level_gain: int


@dataclass(frozen=True)
class BossDelta:
    activity_type: str
    name: str
    kill_count_gain: int


@dataclass(frozen=True)
class ActivityDelta:
    activity_type: str
    name: str
    score_gain: int


@dataclass(frozen=True)
class SnapshotDelta:
    """Gains between two consecutive snapshots of the same user."""

    user_id: str
    timestamp: datetime
    snapshot_id: Optional[str]
    previous_snapshot_id: Optional[str]
    skills: Tuple[SkillDelta, ...] = ()
    bosses: Tuple[BossDelta, ...] = ()
    activities: Tuple[ActivityDelta, ...] = ()
    total_experience_gain: int = 0

    @property
    def empty(self) -> bool:
        return not (self.skills or self.bosses or self.activities)


@dataclass(frozen=True)
class IntervalSummary:
    """Counts over every snapshot in an interval (before filtering)."""

    total_snapshots: int
    snapshots_with_gains: int
    total_overall_gain: int
    first: Optional[datetime] = None
    last: Optional[datetime] = None
