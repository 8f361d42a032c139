import threading


class PlayerCounter:
    """Number of connected clients, shared by the TCP server and the /ws namespace."""

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0

    def increment(self) -> int:
        with self._lock:
            self._count += 1
            return self._count

    def decrement(self) -> int:
        with self._lock:
            self._count = max(0, self._count - 1)
            return self._count

    @property
    def count(self) -> int:
        with self._lock:
            return self._count
