"""
In-memory program cache.

Holds the last known server state per (endpoint id, program id). There is
no TTL and no size bound: entries are replaced, never evicted. All access
goes through one lock so list/fetch/save results recorded from worker
threads are safe to read from any other thread. The last writer wins.
"""

import logging
import threading
from typing import Dict, List, Optional

from apieditor.models import RemoteProgram

logger = logging.getLogger(__name__)


class ProgramCache:
    """Last-write-wins store of RemoteProgram records keyed by endpoint and program."""

    def __init__(self):
        self._lock = threading.RLock()
        # endpoint id -> program id -> program
        self._entries: Dict[str, Dict[str, RemoteProgram]] = {}

    def record_list(self, endpoint_id: str, programs: List[RemoteProgram]) -> None:
        """Replace every entry for ``endpoint_id`` with the listed programs.

        Other endpoints are untouched. Programs without an id cannot be looked
        up and are skipped.
        """
        entries = {p.id: p.copy() for p in programs if p.id is not None}
        with self._lock:
            self._entries[endpoint_id] = entries
        logger.debug("Cached %d programs for endpoint %s", len(entries), endpoint_id)

    def record_fetch(self, endpoint_id: str, program: RemoteProgram) -> None:
        self._upsert(endpoint_id, program)

    def record_save(self, endpoint_id: str, program: RemoteProgram) -> None:
        self._upsert(endpoint_id, program)

    def _upsert(self, endpoint_id: str, program: RemoteProgram) -> None:
        if program.id is None:
            raise ValueError("Cannot cache a program without an id")
        with self._lock:
            self._entries.setdefault(endpoint_id, {})[program.id] = program.copy()
        logger.debug("Cached program %s for endpoint %s", program.id, endpoint_id)

    def lookup(self, endpoint_id: str, program_id: str) -> Optional[RemoteProgram]:
        """Return a copy of the cached program, or None. Never touches the network."""
        with self._lock:
            program = self._entries.get(endpoint_id, {}).get(program_id)
            return program.copy() if program is not None else None

    def programs(self, endpoint_id: str) -> List[RemoteProgram]:
        with self._lock:
            return [p.copy() for p in self._entries.get(endpoint_id, {}).values()]

    def endpoint_ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def forget(self, endpoint_id: str) -> None:
        """Drop every entry for one endpoint."""
        with self._lock:
            self._entries.pop(endpoint_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._entries.values())
