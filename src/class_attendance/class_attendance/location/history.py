from __future__ import annotations

import threading
from collections import deque
from typing import Hashable, Sequence

from ..core.constants import HISTORY_CAPACITY
from .model import AttendanceClaimAttempt


class AttemptHistoryStore:
    """Bounded, per-key record of claim attempts in arrival order.

    Each key keeps at most ``capacity`` attempts; the oldest is evicted first.
    One instance is owned by the verifier that writes to it. All access goes
    through a lock so concurrent requests for the same session stay ordered.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._lock = threading.Lock()
        self._attempts: dict[Hashable, deque[AttendanceClaimAttempt]] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, key: Hashable, attempt: AttendanceClaimAttempt) -> None:
        with self._lock:
            attempts = self._attempts.get(key)
            if attempts is None:
                attempts = deque(maxlen=self._capacity)
                self._attempts[key] = attempts
            attempts.append(attempt)

    def recent(self, key: Hashable, limit: int) -> Sequence[AttendanceClaimAttempt]:
        """Up to ``limit`` most recent attempts, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            attempts = self._attempts.get(key)
            if not attempts:
                return []
            return list(attempts)[-limit:]

    def all_for(self, key: Hashable) -> Sequence[AttendanceClaimAttempt]:
        with self._lock:
            return list(self._attempts.get(key, ()))

    def clear(self, key: Hashable | None = None) -> None:
        with self._lock:
            if key is None:
                self._attempts.clear()
            else:
                self._attempts.pop(key, None)
