"""
Purpose: Owns the live collector roster (shared mutable state).
What it does:
- Holds the latest Collector snapshot per id
- Serializes every workload change (reserve / release) and status update
  behind one lock so concurrent broadcasts never lose an increment
- Hands out snapshots to the matching and routing layers

Rule: Roster owns state changes, dispatch owns ranking logic.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from .models import Collector

logger = logging.getLogger(__name__)


class RosterError(Exception):
    """Raised for unknown collectors or impossible workload changes."""
    pass


class CollectorRoster:

    def __init__(self, collectors: Optional[Iterable[Collector]] = None):
        self._collectors: Dict[str, Collector] = {}
        self._lock = threading.RLock()
        for collector in collectors or []:
            self._collectors[collector.id] = collector

    # --- Public API ---

    def add(self, collector: Collector) -> None:
        """
        Insert or replace a collector (presence updates land here).
        """
        with self._lock:
            self._collectors[collector.id] = collector

    def get(self, collector_id: str) -> Optional[Collector]:
        with self._lock:
            return self._collectors.get(collector_id)

    def all(self) -> List[Collector]:
        with self._lock:
            return list(self._collectors.values())

    def online(self) -> List[Collector]:
        with self._lock:
            return [c for c in self._collectors.values() if c.online]

    def __len__(self) -> int:
        with self._lock:
            return len(self._collectors)

    def update_status(self, collector_id: str, **changes) -> Collector:
        """
        Partial update, e.g. update_status("c-1", online=False).
        """
        with self._lock:
            collector = self._require(collector_id)
            updated = replace(collector, **changes)
            if not 0 <= updated.current_load <= updated.max_load:
                raise RosterError(
                    f"Collector {collector_id}: update would leave load at {updated.current_load}/{updated.max_load}"
                )
            self._collectors[collector_id] = updated
            return updated

    def increment_load(self, collector_id: str) -> Collector:
        """
        Reserve one workload slot after a broadcast. No rollback happens here:
        the lifecycle layer calls release_load() on rejection or timeout.
        The count is capped at max_load.
        """
        with self._lock:
            collector = self._require(collector_id)
            new_load = min(collector.current_load + 1, collector.max_load)
            updated = replace(collector, current_load=new_load)
            self._collectors[collector_id] = updated
            logger.debug("Collector %s load %d -> %d", collector_id, collector.current_load, new_load)
            return updated

    def release_load(self, collector_id: str) -> Collector:
        with self._lock:
            collector = self._require(collector_id)
            if collector.current_load <= 0:
                raise RosterError(f"Collector {collector_id} has no active assignment to release")
            updated = replace(collector, current_load=collector.current_load - 1)
            self._collectors[collector_id] = updated
            return updated

    # --- Internal helpers ---

    def _require(self, collector_id: str) -> Collector:
        collector = self._collectors.get(collector_id)
        if collector is None:
            raise RosterError(f"Collector {collector_id} does not exist")
        return collector
