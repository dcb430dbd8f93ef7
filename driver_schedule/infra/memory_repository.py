from __future__ import annotations

import threading

from driver_schedule.domain.errors import StorageError
from driver_schedule.domain.models import DriverTask, clone_task


class InMemoryDriverTaskRepository:
    """
    Process-memory task store.

    Records are copied on the way in and out so callers never hold a live
    reference to stored state. Iteration order is insertion order.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, DriverTask] = {}
        self._lock = threading.Lock()

    def find_by_id(self, task_id: int) -> DriverTask | None:
        with self._lock:
            task = self._tasks.get(task_id)
            return clone_task(task) if task is not None else None

    def find_by_driver(self, driver_id: int) -> list[DriverTask]:
        with self._lock:
            return [clone_task(task) for task in self._tasks.values() if task.driver_id == driver_id]

    def find_by_driver_and_week(self, driver_id: int, week: int) -> list[DriverTask]:
        with self._lock:
            return [
                clone_task(task)
                for task in self._tasks.values()
                if task.driver_id == driver_id and task.week == week
            ]

    def insert(self, task: DriverTask) -> None:
        with self._lock:
            if task.id in self._tasks:
                raise StorageError(f"driver task {task.id} already stored")
            self._tasks[task.id] = clone_task(task)

    def replace(self, task: DriverTask) -> None:
        with self._lock:
            if task.id not in self._tasks:
                raise StorageError(f"driver task {task.id} is not stored")
            self._tasks[task.id] = clone_task(task)

    def remove(self, task_id: int) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise StorageError(f"driver task {task_id} is not stored")
