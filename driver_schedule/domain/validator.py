from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from driver_schedule.domain.models import DriverTask, DriverTaskInput, DriverTaskType
from driver_schedule.domain.schedule import (
    DAY_MAX,
    DAY_MIN,
    HOUR_MAX,
    HOUR_MIN,
    WEEK_MAX,
    WEEK_MIN,
    day_in_range,
    hour_in_range,
    overlaps,
    week_in_range,
)


class ValidationOutcome(StrEnum):
    VALID = "VALID"
    INVALID = "INVALID"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    outcome: ValidationOutcome
    failed_field: str | None = None
    message: str = ""
    conflicts: list[DriverTask] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome == ValidationOutcome.VALID

    @classmethod
    def valid(cls) -> ValidationResult:
        return cls(outcome=ValidationOutcome.VALID)

    @classmethod
    def invalid(cls, field_name: str, message: str) -> ValidationResult:
        return cls(outcome=ValidationOutcome.INVALID, failed_field=field_name, message=message)

    @classmethod
    def conflict(cls, tasks: list[DriverTask]) -> ValidationResult:
        return cls(outcome=ValidationOutcome.CONFLICT, conflicts=tasks)


class DriverTaskValidator:
    """
    Gatekeeper for every task that is about to be committed.

    Structural checks run first and stop at the first failing field; the
    overlap scan only happens for a structurally valid candidate, so the two
    failure modes never mix.
    """

    def structural_error(self, candidate: DriverTaskInput) -> ValidationResult | None:
        if candidate.type == DriverTaskType.NONE:
            return ValidationResult.invalid("type", "Please select a task type")
        if not hour_in_range(candidate.start):
            return ValidationResult.invalid("start", f"start must be between {HOUR_MIN} and {HOUR_MAX}")
        if not hour_in_range(candidate.end):
            return ValidationResult.invalid("end", f"end must be between {HOUR_MIN} and {HOUR_MAX}")
        if candidate.start >= candidate.end:
            return ValidationResult.invalid("end", "end must be later than start")
        if not day_in_range(candidate.day):
            return ValidationResult.invalid("day", f"day must be between {DAY_MIN} and {DAY_MAX}")
        if not week_in_range(candidate.week):
            return ValidationResult.invalid("week", f"week must be between {WEEK_MIN} and {WEEK_MAX}")
        if not candidate.location.strip():
            return ValidationResult.invalid("location", "Please enter a location")
        return None

    def find_conflicts(
        self,
        candidate: DriverTaskInput,
        existing: Iterable[DriverTask],
        *,
        task_id: int | None = None,
    ) -> list[DriverTask]:
        conflicts: list[DriverTask] = []
        for task in existing:
            if task_id is not None and task.id == task_id:
                continue
            if task.driver_id != candidate.driver_id or task.week != candidate.week:
                continue
            if task.day != candidate.day:
                continue
            if overlaps(candidate, task):
                conflicts.append(task)
        return conflicts

    def validate(
        self,
        candidate: DriverTaskInput,
        existing: Iterable[DriverTask],
        *,
        task_id: int | None = None,
    ) -> ValidationResult:
        error = self.structural_error(candidate)
        if error is not None:
            return error
        conflicts = self.find_conflicts(candidate, existing, task_id=task_id)
        if conflicts:
            return ValidationResult.conflict(conflicts)
        return ValidationResult.valid()
