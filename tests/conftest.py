import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from skill_snapshots.core import SkillEntry, Snapshot  # noqa: E402


T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def at(hours: float) -> datetime:
    return T0 + timedelta(hours=hours)


def make_snapshot(overall, *, hours: float = 0, user_id: str = "user-1", skills=(), id=None) -> Snapshot:
    """Snapshot with an OVERALL line of ``overall`` experience (no line when None)."""
    lines = list(skills)
    if overall is not None:
        lines.insert(0, SkillEntry(activity_type="OVERALL", name="Overall", experience=overall, level=32))
    return Snapshot(user_id=user_id, timestamp=at(hours), skills=tuple(lines), id=id)


@pytest.fixture(scope="session")
def project_root() -> Path:
    return ROOT


@pytest.fixture()
def snap():
    return make_snapshot


@pytest.fixture()
def t():
    return at
