from __future__ import annotations

import threading
from collections.abc import Callable

from driver_schedule.domain.models import DriverTask, DriverTaskInput


class IdGenerator:
    """
    Monotonic task id source.

    `seed` is evaluated lazily on the first call to `next()` so a persistent
    backend can contribute its high-water mark without touching storage at
    construction time.
    """

    def __init__(self, start: int = 0, *, seed: Callable[[], int] | None = None) -> None:
        self._last = start
        self._seed = seed
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            if self._seed is not None:
                self._last = max(self._last, self._seed())
                self._seed = None
            self._last += 1
            return self._last


class DriverTaskFactory:
    def __init__(self, id_generator: IdGenerator) -> None:
        self._id_generator = id_generator

    def create(self, payload: DriverTaskInput, task_id: int) -> DriverTask:
        return DriverTask(
            id=task_id,
            driver_id=payload.driver_id,
            type=payload.type,
            start=payload.start,
            end=payload.end,
            day=payload.day,
            week=payload.week,
            location=payload.location,
        )

    def create_next(self, payload: DriverTaskInput) -> DriverTask:
        return self.create(payload, self._id_generator.next())
