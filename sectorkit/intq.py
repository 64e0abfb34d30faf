"""A bounded byte queue with blocking put and get, like a monitor."""

from __future__ import annotations

import threading
from collections import deque

INTQ_BUFSIZE = 64
"""Size of the circular buffer; one slot always stays empty."""


class InterruptQueue:
    """A FIFO of bytes holding at most INTQ_BUFSIZE - 1 of them.

    getc() waits while the queue is empty and putc() waits while it
    is full.
    """

    def __init__(self) -> None:
        self._buf: deque[int] = deque()
        self._cond = threading.Condition()

    @property
    def capacity(self) -> int:
        return INTQ_BUFSIZE - 1

    def is_empty(self) -> bool:
        with self._cond:
            return not self._buf

    def is_full(self) -> bool:
        with self._cond:
            return len(self._buf) >= self.capacity

    def getc(self) -> int:
        """Remove and return the oldest byte, waiting for one if needed."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._buf))
            byte = self._buf.popleft()
            self._cond.notify_all()
            return byte

    def putc(self, byte: int) -> None:
        """Append BYTE, waiting for room if the queue is full."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        with self._cond:
            self._cond.wait_for(lambda: len(self._buf) < self.capacity)
            self._buf.append(byte)
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._buf)