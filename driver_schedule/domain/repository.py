from __future__ import annotations

from typing import Protocol

from driver_schedule.domain.models import DriverTask


class DriverTaskRepository(Protocol):
    """
    Storage port for driver tasks.

    Each call is atomic for a single record. Failures are raised as
    `StorageError`; the check-then-write sequence across records is the
    service's responsibility.
    """

    def find_by_id(self, task_id: int) -> DriverTask | None: ...

    def find_by_driver(self, driver_id: int) -> list[DriverTask]: ...

    def find_by_driver_and_week(self, driver_id: int, week: int) -> list[DriverTask]: ...

    def insert(self, task: DriverTask) -> None: ...

    def replace(self, task: DriverTask) -> None: ...

    def remove(self, task_id: int) -> None: ...
