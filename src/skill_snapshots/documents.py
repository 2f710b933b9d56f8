# documents.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from skill_snapshots.changes import select_changed
from skill_snapshots.core import ActivityEntry, BossEntry, SkillEntry, Snapshot
from skill_snapshots.taxonomy import OVERALL, activity_type_from_value

Document = Mapping[str, Any]


class DocumentError(ValueError):
    """Raised when a stored snapshot document cannot be mapped."""


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def parse_timestamp(value: Any) -> datetime:
    """
    Accepts datetime, ISO-8601 string or epoch milliseconds.
    Naive values are taken as UTC so everything compares cleanly.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, bool):
        raise DocumentError(f"invalid timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        ts = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(s)
        except ValueError as e:
            raise DocumentError(f"invalid timestamp: {value!r}") from e
    else:
        raise DocumentError(f"invalid timestamp: {value!r}")

    return as_utc(ts)


def _int(item: Mapping[str, Any], key: str, *, ctx: str) -> int:
    raw = item.get(key, 0)
    if isinstance(raw, bool):
        raise DocumentError(f"{ctx}: '{key}' must be an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise DocumentError(f"{ctx}: '{key}' must be an integer, got {raw!r}") from e


def _entries(doc: Document, key: str) -> List[Mapping[str, Any]]:
    raw = doc.get(key) or []
    if not isinstance(raw, list):
        raise DocumentError(f"'{key}' must be a list")
    for item in raw:
        if not isinstance(item, Mapping):
            raise DocumentError(f"'{key}' entries must be objects, got {item!r}")
    return raw


def _skill(item: Mapping[str, Any]) -> SkillEntry:
    return SkillEntry(
        activity_type=activity_type_from_value(item.get("activityType")),
        name=str(item.get("name", "")),
        level=_int(item, "level", ctx="skill"),
        experience=_int(item, "experience", ctx="skill"),
        rank=_int(item, "rank", ctx="skill"),
    )


def _boss(item: Mapping[str, Any]) -> BossEntry:
    return BossEntry(
        activity_type=activity_type_from_value(item.get("activityType")),
        name=str(item.get("name", "")),
        kill_count=_int(item, "killCount", ctx="boss"),
        rank=_int(item, "rank", ctx="boss"),
    )


def _activity(item: Mapping[str, Any]) -> ActivityEntry:
    return ActivityEntry(
        activity_type=activity_type_from_value(item.get("activityType")),
        name=str(item.get("name", "")),
        score=_int(item, "score", ctx="activity"),
        rank=_int(item, "rank", ctx="activity"),
    )


def snapshot_from_document(doc: Document) -> Snapshot:
    if not isinstance(doc, Mapping):
        raise DocumentError("snapshot document must be a mapping/object")
    if "timestamp" not in doc:
        raise DocumentError("snapshot document has no 'timestamp'")

    doc_id = doc.get("_id")
    return Snapshot(
        id=None if doc_id is None else str(doc_id),
        user_id=str(doc.get("userId") or ""),
        timestamp=parse_timestamp(doc["timestamp"]),
        skills=tuple(_skill(i) for i in _entries(doc, "skills")),
        bosses=tuple(_boss(i) for i in _entries(doc, "bosses")),
        activities=tuple(_activity(i) for i in _entries(doc, "activities")),
    )


def snapshots_from_documents(docs: Iterable[Document]) -> List[Snapshot]:
    return [snapshot_from_document(d) for d in docs]


def snapshot_to_document(snapshot: Snapshot) -> Dict[str, Any]:
    doc: Dict[str, Any] = {}
    if snapshot.id is not None:
        doc["_id"] = snapshot.id
    doc["userId"] = snapshot.user_id
    doc["timestamp"] = snapshot.timestamp
    doc["skills"] = [
        {
            "activityType": s.activity_type,
            "name": s.name,
            "level": s.level,
            "experience": s.experience,
            "rank": s.rank,
        }
        for s in snapshot.skills
    ]
    doc["bosses"] = [
        {"activityType": b.activity_type, "name": b.name, "killCount": b.kill_count, "rank": b.rank}
        for b in snapshot.bosses
    ]
    doc["activities"] = [
        {"activityType": a.activity_type, "name": a.name, "score": a.score, "rank": a.rank}
        for a in snapshot.activities
    ]
    return doc


def document_overall_experience(doc: Document, activity_type: str = OVERALL) -> Optional[int]:
    """
    First matching skill line's experience, None when there is no such line.
    Entries are read the same way ``snapshot_from_document`` reads them, so a
    line without ``experience`` counts as 0.
    """
    for item in _entries(doc, "skills"):
        if activity_type_from_value(item.get("activityType")) == activity_type:
            return _int(item, "experience", ctx="skill")
    return None


def select_changed_documents(
    docs: Iterable[Document],
    *,
    activity_type: str = OVERALL,
    cancelled: Optional[Callable[[], bool]] = None,
) -> List[Document]:
    """
    Document flavour of the change filter. The returned items are the input
    mappings themselves (no derived keys are written into them).
    """
    ordered = sorted(docs, key=lambda d: parse_timestamp(d.get("timestamp")))
    return select_changed(
        ordered,
        lambda d: document_overall_experience(d, activity_type),
        cancelled=cancelled,
    )
