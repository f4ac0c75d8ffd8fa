from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from memvec.domain.models import StoredEntry

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Thread-safe mapping of doc_id -> StoredEntry.

    One lock guards the whole map. Entries are immutable, so a snapshot is a
    shallow copy taken inside the critical section and can be read without the lock.
    """

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, StoredEntry] = {}
        self._lock = threading.Lock()

    def put_all(self, entries: Iterable[StoredEntry]) -> None:
        batch = list(entries)
        with self._lock:
            for entry in batch:
                # Overwrite moves the id to the end: a re-add is a new entry.
                self._entries.pop(entry.doc_id, None)
                self._entries[entry.doc_id] = entry
            size = len(self._entries)
        logger.debug("put %d entries (store size %d)", len(batch), size)

    def remove_all(self, ids: Iterable[str]) -> int:
        removed = 0
        with self._lock:
            for doc_id in ids:
                if self._entries.pop(doc_id, None) is not None:
                    removed += 1
        logger.debug("removed %d entries", removed)
        return removed

    def replace_all(self, entries: Iterable[StoredEntry]) -> None:
        fresh = {e.doc_id: e for e in entries}
        with self._lock:
            self._entries = fresh

    def snapshot(self) -> list[StoredEntry]:
        with self._lock:
            return list(self._entries.values())

    def get(self, doc_id: str) -> Optional[StoredEntry]:
        with self._lock:
            return self._entries.get(doc_id)

    def __contains__(self, doc_id: object) -> bool:
        with self._lock:
            return doc_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
