from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from skill_snapshots.core import Snapshot
from skill_snapshots.documents import Document, as_utc, snapshots_from_documents
from skill_snapshots.validation import validate_snapshot


class SnapshotSource(Protocol):
    """Read-only provider of a user's snapshots."""

    def fetch_by_user_and_range(self, user_id: str, start: datetime, end: datetime) -> Sequence[Snapshot]:
        ...


class SnapshotFetchError(RuntimeError):
    """A snapshot source failed while serving a request."""

    def __init__(self, user_id: str, reason: str) -> None:
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"failed to fetch snapshots for {user_id}: {reason}")


class InMemorySnapshotSource:
    """
    Snapshot source backed by plain lists, one per user.

    Insertion order is kept, so snapshots sharing a timestamp come back in the
    order they were added.
    """

    def __init__(
        self,
        snapshots: Iterable[Snapshot] = (),
        *,
        validate: bool = True,
        require_complete: bool = False,
    ) -> None:
        self.validate = validate
        self.require_complete = require_complete
        self._by_user: Dict[str, List[Snapshot]] = {}
        self.extend(snapshots)

    @classmethod
    def from_documents(cls, docs: Iterable[Document], **kwargs) -> "InMemorySnapshotSource":
        return cls(snapshots_from_documents(docs), **kwargs)

    # ---- writes ----

    def add(self, snapshot: Snapshot) -> None:
        if self.validate:
            validate_snapshot(snapshot, require_complete=self.require_complete, strict=True)
        self._by_user.setdefault(snapshot.user_id, []).append(snapshot)

    def extend(self, snapshots: Iterable[Snapshot]) -> None:
        for s in snapshots:
            self.add(s)

    # ---- reads ----

    def users(self) -> List[str]:
        return sorted(self._by_user)

    def all_for_user(self, user_id: str) -> List[Snapshot]:
        return list(self._by_user.get(user_id, ()))

    def fetch_by_user_and_range(self, user_id: str, start: datetime, end: datetime) -> List[Snapshot]:
        start, end = as_utc(start), as_utc(end)
        return [s for s in self._by_user.get(user_id, ()) if start <= as_utc(s.timestamp) <= end]

    def latest_for_user(self, user_id: str) -> Optional[Snapshot]:
        snapshots = self._by_user.get(user_id)
        if not snapshots:
            return None
        # ties go to the most recently added snapshot
        best = snapshots[0]
        for s in snapshots[1:]:
            if s.timestamp >= best.timestamp:
                best = s
        return best

    def nearest_to(self, user_id: str, timestamp: datetime) -> Optional[Snapshot]:
        snapshots = self._by_user.get(user_id)
        if not snapshots:
            return None
        return min(snapshots, key=lambda s: abs((s.timestamp - timestamp).total_seconds()))

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_user.values())
