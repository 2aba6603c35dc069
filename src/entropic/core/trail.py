from __future__ import annotations

from typing import Iterator, Optional, Sequence

import numpy as np

from entropic.core.state import State3


class TrailBuffer:
    """
    Fixed-capacity history of recent states, oldest first.

    Backed by a preallocated ``(capacity, 3)`` array and a write cursor, so a
    push never allocates; once full, each push overwrites the oldest entry.
    """

    def __init__(self, capacity: int):
        capacity = int(capacity)
        if capacity < 0:
            raise ValueError("trail capacity must be >= 0")
        self._capacity = capacity
        self._data = np.zeros((capacity, 3), dtype=np.float64)
        self._cursor = 0  # next slot to write
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def push(self, state: Sequence[float]) -> None:
        if self._capacity == 0:
            return
        self._data[self._cursor] = state
        self._cursor = (self._cursor + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1

    def clear(self) -> None:
        self._cursor = 0
        self._size = 0

    def _start(self) -> int:
        return (self._cursor - self._size) % self._capacity if self._capacity else 0

    def as_array(self) -> np.ndarray:
        """Chronological copy of the stored states, shape ``(len, 3)``."""
        if self._size == 0:
            return np.empty((0, 3), dtype=np.float64)
        idx = (self._start() + np.arange(self._size)) % self._capacity
        return self._data[idx].copy()

    def __iter__(self) -> Iterator[State3]:
        for row in self.as_array():
            yield State3(float(row[0]), float(row[1]), float(row[2]))

    def latest(self) -> Optional[State3]:
        if self._size == 0:
            return None
        row = self._data[(self._cursor - 1) % self._capacity]
        return State3(float(row[0]), float(row[1]), float(row[2]))

    def oldest(self) -> Optional[State3]:
        if self._size == 0:
            return None
        row = self._data[self._start()]
        return State3(float(row[0]), float(row[1]), float(row[2]))

    def __repr__(self) -> str:
        return f"TrailBuffer(len={self._size}, capacity={self._capacity})"
