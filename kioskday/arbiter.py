"""
Last-write-wins result arbitration.

Refreshes can overlap (timer tick while a slow fetch is still running, auth
change in the middle of a refresh). Each refresh takes a sequence number
before it starts fetching and offers its result when done; a result older
than the one already accepted is discarded, never merged.
"""

from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultArbiter(Generic[T]):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_seq = 0
        self._accepted_seq = -1
        self._latest: Optional[T] = None

    def begin(self) -> int:
        """
        Return a new, strictly increasing sequence number.
        """
        with self._lock:
            seq = self._next_seq
            self._next_seq += 1
            return seq

    def offer(self, seq: int, result: T) -> bool:
        """
        Accept result if seq is newer than the accepted one.

        Returns True if the result replaced the previous one.
        """
        with self._lock:
            if seq <= self._accepted_seq:
                return False
            self._accepted_seq = seq
            self._latest = result
            return True

    @property
    def latest(self) -> Optional[T]:
        with self._lock:
            return self._latest

    @property
    def latest_seq(self) -> int:
        """
        Sequence number of the accepted result, -1 if none yet.
        """
        with self._lock:
            return self._accepted_seq
