from skill_snapshots.core.models import (  # noqa: F401
    ActivityDelta,
    ActivityEntry,
    BossDelta,
    BossEntry,
    IntervalSummary,
    SkillDelta,
    SkillEntry,
    Snapshot,
    SnapshotDelta,
)

__all__ = [
    "ActivityDelta",
    "ActivityEntry",
    "BossDelta",
    "BossEntry",
    "IntervalSummary",
    "SkillDelta",
    "SkillEntry",
    "Snapshot",
    "SnapshotDelta",
]
