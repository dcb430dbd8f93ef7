from __future__ import annotations

from enum import StrEnum
from typing import Any

from driver_schedule.domain.models import DriverTask, DriverTaskRead


class ErrorKind(StrEnum):
    VALIDATION = "VALIDATION"
    TASK_CONFLICT = "TASK_CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    AUTHORIZATION = "AUTHORIZATION"
    STORAGE = "STORAGE"


class DriverTaskError(Exception):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_detail(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


class ValidationError(DriverTaskError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def as_detail(self) -> dict[str, Any]:
        detail = super().as_detail()
        detail["field"] = self.field
        return detail


class TaskConflictError(DriverTaskError):
    kind = ErrorKind.TASK_CONFLICT

    def __init__(self, conflicting_tasks: list[DriverTask], message: str | None = None) -> None:
        self.conflicting_tasks = list(conflicting_tasks)
        if message is None:
            count = len(self.conflicting_tasks)
            message = f"task conflicts with {count} existing task{'s' if count != 1 else ''}"
        super().__init__(message)

    def as_detail(self) -> dict[str, Any]:
        detail = super().as_detail()
        detail["conflicting_tasks"] = [
            DriverTaskRead.model_validate(task).model_dump(mode="json") for task in self.conflicting_tasks
        ]
        return detail


class NotFoundError(DriverTaskError):
    kind = ErrorKind.NOT_FOUND


class AuthorizationError(DriverTaskError):
    kind = ErrorKind.AUTHORIZATION


class StorageError(DriverTaskError):
    kind = ErrorKind.STORAGE
