"""Pausable wall-clock timer for a game session."""

from __future__ import annotations

import time


class SessionClock:
    """Tracks elapsed play time across pauses."""

    def __init__(self, running: bool = True) -> None:
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = running

    @property
    def running(self) -> bool:
        return self._running

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    def restart(self) -> None:
        self._elapsed_banked = 0.0
        self._start_time = time.time()
        self._running = True
