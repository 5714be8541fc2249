"""
Match Request Sequencer

Latest-wins bookkeeping for callers that fire a match request on every
criteria change. Each change gets an increasing sequence number; only the
response carrying the latest issued number is applied, stale ones are dropped.
"""

import threading
from typing import Any, Optional


class MatchSequencer:

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._applied: Optional[int] = None
        self._result: Any = None

    def issue(self) -> int:
        """Reserve the next sequence number for a new request."""
        with self._lock:
            self._issued += 1
            return self._issued

    @property
    def latest_issued(self) -> int:
        with self._lock:
            return self._issued

    @property
    def latest_applied(self) -> Optional[int]:
        with self._lock:
            return self._applied

    @property
    def latest_result(self) -> Any:
        with self._lock:
            return self._result

    def is_current(self, sequence: int) -> bool:
        with self._lock:
            return sequence == self._issued

    def accept(self, sequence: int, result: Any) -> bool:
        """
        Apply ``result`` if ``sequence`` is the newest request issued.

        Returns True when applied, False when the response was stale.
        """
        with self._lock:
            if sequence != self._issued:
                return False
            self._applied = sequence
            self._result = result
            return True
