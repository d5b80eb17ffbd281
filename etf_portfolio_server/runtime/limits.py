"""Single in-flight generation guard and stale-response tracking."""

from __future__ import annotations

import threading


class RequestInProgress(Exception):
    def __init__(self) -> None:
        super().__init__("A portfolio generation request is already in progress.")


class GenerationGuard:
    """Allows one generation at a time and numbers each one.

    A response is current only if no newer generation started after it;
    ``reset`` bumps the counter so an outstanding response is treated as stale.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._inflight = threading.Lock()
        self._generation = 0

    def acquire(self) -> int:
        if not self._inflight.acquire(blocking=False):
            raise RequestInProgress()
        with self._lock:
            self._generation += 1
            return self._generation

    def release(self) -> None:
        if self._inflight.locked():
            self._inflight.release()

    def reset(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    @property
    def busy(self) -> bool:
        return self._inflight.locked()
