"""TurnClock — drives TurnEngine.tick() from a background thread.

Ticks once per ``interval_s`` while the game runs. When a new turn starts
the cadence restarts from the turn boundary, after a short cosmetic pause
(``advance_delay_s``) so the previous turn's feedback stays readable.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from shiritori.core.rules import Outcome
from shiritori.engine import TurnEngine

_POLL_S = 0.05


class TurnClock:
    """Background scheduler for one engine."""

    def __init__(
        self,
        engine: TurnEngine,
        interval_s: float = 1.0,
        advance_delay_s: float = 0.3,
        on_outcome: Callable[[Outcome], None] | None = None,
    ) -> None:
        self._engine = engine
        self._interval_s = interval_s
        self._advance_delay_s = advance_delay_s
        self._on_outcome = on_outcome
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name="shiritori-clock"
        )
        self._thread.start()

    def stop(self, timeout: float | None = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def __enter__(self) -> TurnClock:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    def _run(self) -> None:
        turn_id = self._engine.turn_id
        deadline = time.monotonic() + self._interval_s
        while not self._stop.is_set():
            current = self._engine.turn_id
            if current != turn_id:
                turn_id = current
                deadline = time.monotonic() + self._advance_delay_s + self._interval_s

            wait = deadline - time.monotonic()
            if wait > 0:
                self._stop.wait(min(wait, _POLL_S))
                continue

            deadline += self._interval_s
            outcome = self._engine.tick(turn_id=turn_id)
            if outcome is not None and self._on_outcome is not None:
                self._on_outcome(outcome)
