"""
Dashboard Snapshot Store

In-memory holder of the latest dashboard snapshot per dashboard, with:
- Request generation tokens per dashboard
- Stale response rejection
- Invalidation on failed fetch cycles

Only the response to the most recently issued request may replace a
snapshot. Nothing is persisted across process restarts.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SnapshotEntry:
    """Stored state of one dashboard"""
    generation: int
    snapshot: Optional[BaseModel] = None
    stale_reason: Optional[str] = None
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_stale(self) -> bool:
        return self.snapshot is None


class SnapshotStore:
    """
    Latest snapshot per dashboard key, guarded by generation tokens.

    Example:
        generation = store.issue("channels")
        ...
        store.apply("channels", generation, dashboard)
    """

    def __init__(self):
        self._issued: Dict[str, int] = defaultdict(int)
        self._entries: Dict[str, SnapshotEntry] = {}

    def issue(self, key: str) -> int:
        """Issue the next generation for a dashboard"""
        self._issued[key] += 1
        return self._issued[key]

    def latest_generation(self, key: str) -> int:
        """Most recently issued generation (0 if none)"""
        return self._issued[key]

    def is_current(self, key: str, generation: int) -> bool:
        return generation == self._issued[key]

    def apply(self, key: str, generation: int, snapshot: BaseModel) -> bool:
        """
        Store a snapshot if its generation is still the latest.

        Returns:
            True if stored, False if the response was superseded and dropped
        """
        if not self.is_current(key, generation):
            logger.info(
                "Dropping stale snapshot",
                dashboard=key,
                generation=generation,
                latest_generation=self._issued[key],
            )
            return False

        self._entries[key] = SnapshotEntry(generation=generation, snapshot=snapshot)
        logger.debug("Snapshot applied", dashboard=key, generation=generation)
        return True

    def invalidate(self, key: str, generation: int, reason: str) -> bool:
        """
        Clear a dashboard's snapshot after a failed fetch cycle.

        A failure from a superseded request leaves newer state untouched.

        Returns:
            True if the snapshot was cleared
        """
        if not self.is_current(key, generation):
            logger.info(
                "Ignoring failure of superseded fetch",
                dashboard=key,
                generation=generation,
                reason=reason,
            )
            return False

        self._entries[key] = SnapshotEntry(generation=generation, stale_reason=reason)
        logger.warning("Snapshot invalidated", dashboard=key, generation=generation, reason=reason)
        return True

    def get(self, key: str) -> Optional[SnapshotEntry]:
        """Stored entry for a dashboard, if any cycle has completed"""
        return self._entries.get(key)

    def snapshot(self, key: str) -> Optional[BaseModel]:
        """Current snapshot, or None when absent or stale"""
        entry = self._entries.get(key)
        return entry.snapshot if entry else None

    def clear(self) -> None:
        """Forget all snapshots and generations"""
        self._issued.clear()
        self._entries.clear()
