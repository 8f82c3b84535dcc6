"""NumPy pre-allocated circular buffer for chain data points and scalar history.

push is O(1). Compaction only moves the count, the backing array is never
reallocated or copied.
"""

from __future__ import annotations

import numpy as np

# Structured dtype for ATM-centred data points
POINT_DTYPE = np.dtype([
    ("timestamp_ns", np.int64),
    ("spot_price", np.float64),
    ("volume", np.float64),
    ("atm_call_oi", np.float64),
    ("atm_put_oi", np.float64),
    ("atm_call_iv", np.float64),
    ("atm_put_iv", np.float64),
    ("atm_call_volume", np.float64),
    ("atm_put_volume", np.float64),
    ("total_call_oi", np.float64),
    ("total_put_oi", np.float64),
])


class RingBuffer:
    """Fixed-capacity circular buffer over a NumPy dtype.

    Works for structured records (``POINT_DTYPE``), plain scalars
    (``np.float64``) and object slots (``object``). All reads are O(n) on
    the requested window, never on capacity.
    """

    def __init__(self, capacity: int = 100, dtype: np.dtype | type = np.float64) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._dtype = np.dtype(dtype)
        self._buffer = np.zeros(capacity, dtype=self._dtype)
        self._head = 0       # next write position
        self._count = 0      # valid records (capped at capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def push(self, record) -> None:
        """Push a single record (tuple for structured dtypes, scalar otherwise)."""
        self._buffer[self._head] = record
        self._head = (self._head + 1) % self._capacity
        if self._count < self._capacity:
            self._count += 1

    def ordered(self) -> np.ndarray:
        """All valid records in chronological order (copy)."""
        if self._count == 0:
            return np.zeros(0, dtype=self._dtype)
        start = (self._head - self._count) % self._capacity
        if start + self._count <= self._capacity:
            return self._buffer[start:start + self._count].copy()
        return np.concatenate([
            self._buffer[start:],
            self._buffer[:self._head],
        ])

    def tail(self, n: int) -> np.ndarray:
        """The most recent ``n`` records in chronological order."""
        if n <= 0 or self._count == 0:
            return np.zeros(0, dtype=self._dtype)
        data = self.ordered()
        return data[-n:]

    def latest(self):
        """Most recently pushed record, or None if empty."""
        return self.at(-1)

    def at(self, offset: int):
        """Record at a negative offset from the newest (-1 = latest)."""
        if offset >= 0 or -offset > self._count:
            return None
        idx = (self._head + offset) % self._capacity
        return self._buffer[idx]

    def compact(self, keep: int) -> None:
        """Drop all but the newest ``keep`` records."""
        self._count = max(0, min(self._count, keep))

    def clear(self) -> None:
        """Reset buffer without reallocation."""
        self._head = 0
        self._count = 0
