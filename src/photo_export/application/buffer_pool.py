import threading
from contextlib import contextmanager
from typing import Iterator


class BufferPool:
    def __init__(self, buffer_size: int = 32 * 1024, max_retained: int = 16):
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.buffer_size = buffer_size
        self.max_retained = max_retained
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    def acquire(self) -> bytearray:
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray(self.buffer_size)

    def release(self, buffer: bytearray) -> None:
        if len(buffer) != self.buffer_size:
            return
        with self._lock:
            if len(self._free) < self.max_retained:
                self._free.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)

    @property
    def available(self) -> int:
        with self._lock:
            return len(self._free)
