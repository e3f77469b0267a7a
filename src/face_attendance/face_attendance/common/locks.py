from __future__ import annotations

import threading

DEFAULT_STRIPES = 64


class StripedLocks:
    """Fixed pool of locks shared out by integer key.

    The same key always maps to the same lock, so work on one employee stays
    serialized, while memory does not grow with the number of keys seen.
    Unrelated keys may share a stripe and wait on each other.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        if stripes < 1:
            raise ValueError("stripes must be positive")
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def __len__(self) -> int:
        return len(self._locks)

    def for_key(self, key: int) -> threading.Lock:
        return self._locks[int(key) % len(self._locks)]
