"""
Concurrent Key-Value Store Module

This module implements the shared in-memory store behind the HTTP API.

A single mapping and a request counter live behind one mutual-exclusion
lock. Every public operation runs as one critical section, so callers on
different threads never observe a half-applied batch or a counter that
disagrees with the mapping.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass(frozen=True)
class StoreStats:
    """A consistent (requests, data_size) pair read under the store lock."""

    requests: int
    data_size: int

    def to_dict(self) -> Dict[str, int]:
        return {"requests": self.requests, "data_size": self.data_size}


class ConcurrentStore:
    """
    Thread-safe in-memory key-value store with a request counter.

    Counted operations (each adds exactly 1 to the counter):
    - put_many: Upsert a batch of key-value pairs
    - get_all: Return a snapshot of the whole mapping
    - delete: Remove a key, whether or not it was present

    Uncounted reads:
    - stats: Counter and size as one consistent pair
    - size / requests: Individual values, for reporting and tests

    Internal Storage:
        Plain dict guarded by a threading.Lock (coarse-grained, not per key).
        The lock is never held across I/O and never acquired re-entrantly.
    """

    def __init__(self):
        """Initialize an empty store with a zeroed request counter."""
        self._lock = threading.Lock()
        self._data: Dict[str, str] = {}
        self._requests = 0

    def put_many(self, entries: Mapping[str, str]) -> None:
        """
        Insert or overwrite every entry of a batch.

        The batch is applied atomically with respect to every other store
        operation, and the counter is incremented once per call regardless
        of how many entries the batch holds (an empty batch still counts).

        Args:
            entries: Already-decoded mapping of string keys to string values
        """
        with self._lock:
            self._data.update(entries)
            self._requests += 1

    def get_all(self) -> Dict[str, str]:
        """
        Return an independent copy of the current mapping.

        Mutating the returned dict never affects the store, and later store
        mutations never show up in it.

        Returns:
            Snapshot of every key-value pair
        """
        with self._lock:
            snapshot = dict(self._data)
            self._requests += 1
        return snapshot

    def delete(self, key: str) -> bool:
        """
        Delete a key-value pair.

        The counter is incremented on both outcomes: a delete of a missing
        key is still a served request.

        Args:
            key: The key to delete

        Returns:
            True if key was deleted, False if key didn't exist
        """
        with self._lock:
            found = self._data.pop(key, None) is not None
            self._requests += 1
        return found

    def stats(self) -> StoreStats:
        """
        Read the request counter and the key count as one pair.

        Both values come from the same critical section. Does not count as a
        request.
        """
        with self._lock:
            return StoreStats(requests=self._requests, data_size=len(self._data))

    def size(self) -> int:
        """Get the current number of keys in the store."""
        with self._lock:
            return len(self._data)

    @property
    def requests(self) -> int:
        """Number of counted operations served so far."""
        with self._lock:
            return self._requests

    def __len__(self) -> int:
        return self.size()
