from __future__ import annotations

import logging

from driver_schedule.domain.errors import (
    AuthorizationError,
    NotFoundError,
    TaskConflictError,
    ValidationError,
)
from driver_schedule.domain.factory import DriverTaskFactory, IdGenerator
from driver_schedule.domain.models import Caller, DriverTask, DriverTaskInput
from driver_schedule.domain.permissions import can_read_driver_tasks, can_write_driver_tasks
from driver_schedule.domain.repository import DriverTaskRepository
from driver_schedule.domain.schedule import WEEK_MAX, WEEK_MIN, week_in_range
from driver_schedule.domain.validator import DriverTaskValidator, ValidationOutcome, ValidationResult
from driver_schedule.infra.events import EventBus
from driver_schedule.infra.locks import KeyedLocks

logger = logging.getLogger(__name__)


class DriverTaskService:
    """
    Create, update, delete and list weekly driver tasks.

    Every write for a (driver, week) pair runs under that pair's lock, so the
    overlap scan and the commit that follows it see the same snapshot. Candidates
are checked structurally before any lock is taken, so only in-range
(driver, week) keys ever reach the lock registry.
    """

    def __init__(
        self,
        repository: DriverTaskRepository,
        *,
        validator: DriverTaskValidator | None = None,
        factory: DriverTaskFactory | None = None,
        locks: KeyedLocks | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._repository = repository
        self._validator = validator or DriverTaskValidator()
        self._factory = factory or DriverTaskFactory(IdGenerator())
        self._locks = locks if locks is not None else KeyedLocks()
        self._events = events or EventBus()

    def _ensure_can_read(self, caller: Caller, driver_id: int) -> None:
        if not can_read_driver_tasks(caller, driver_id):
            logger.warning("caller %s (%s) denied read of driver %s", caller.id, caller.role, driver_id)
            raise AuthorizationError(f"caller {caller.id} may not read tasks of driver {driver_id}")

    def _ensure_can_write(self, caller: Caller, driver_id: int) -> None:
        if not can_write_driver_tasks(caller, driver_id):
            logger.warning("caller %s (%s) denied write for driver %s", caller.id, caller.role, driver_id)
            raise AuthorizationError(f"caller {caller.id} may not modify tasks of driver {driver_id}")

    def _get_task(self, task_id: int) -> DriverTask:
        task = self._repository.find_by_id(task_id)
        if task is None:
            raise NotFoundError(f"driver task {task_id} not found")
        return task

    def _raise_for(self, result: ValidationResult, payload: DriverTaskInput) -> None:
        if result.outcome == ValidationOutcome.INVALID:
            logger.info(
                "driver task rejected: driver=%s week=%s field=%s",
                payload.driver_id,
                payload.week,
                result.failed_field,
            )
            raise ValidationError(result.failed_field or "", result.message)
        if result.outcome == ValidationOutcome.CONFLICT:
            logger.info(
                "driver task conflict: driver=%s week=%s day=%s slot=[%s,%s) conflicts=%s",
                payload.driver_id,
                payload.week,
                payload.day,
                payload.start,
                payload.end,
                [task.id for task in result.conflicts],
            )
            raise TaskConflictError(result.conflicts)

    def _check_structure(self, payload: DriverTaskInput) -> None:
        error = self._validator.structural_error(payload)
        if error is not None:
            self._raise_for(error, payload)

    def _publish(self, event_type: str, task: DriverTask, caller: Caller) -> None:
        self._events.publish_dict(
            event_type,
            {"task": task.model_dump(mode="json")},
            actor_id=caller.id,
        )

    def get_weekly_user_tasks(self, driver_id: int, week: int, caller: Caller) -> list[DriverTask]:
        self._ensure_can_read(caller, driver_id)
        if not week_in_range(week):
            raise ValidationError("week", f"week must be between {WEEK_MIN} and {WEEK_MAX}")
        return self._repository.find_by_driver_and_week(driver_id, week)

    def add_task(self, payload: DriverTaskInput, caller: Caller) -> DriverTask:
        self._ensure_can_write(caller, payload.driver_id)
        self._check_structure(payload)
        with self._locks.hold((payload.driver_id, payload.week)):
            existing = self._repository.find_by_driver_and_week(payload.driver_id, payload.week)
            self._raise_for(self._validator.validate(payload, existing), payload)
            task = self._factory.create_next(payload)
            self._repository.insert(task)

        logger.info("driver task %s created for driver %s week %s", task.id, task.driver_id, task.week)
        self._publish("driver_task.created", task, caller)
        return task

    def update_task(self, task_id: int, payload: DriverTaskInput, caller: Caller) -> DriverTask:
        current = self._get_task(task_id)
        self._ensure_can_write(caller, current.driver_id)
        if payload.driver_id != current.driver_id:
            raise ValidationError(
                "driver_id",
                "a task cannot be moved to another driver; delete it and create a new one",
            )
        self._check_structure(payload)

        with self._locks.hold((current.driver_id, current.week), (payload.driver_id, payload.week)):
            # Re-read under the lock; a concurrent delete may have won.
            current = self._get_task(task_id)
            existing = self._repository.find_by_driver_and_week(payload.driver_id, payload.week)
            self._raise_for(self._validator.validate(payload, existing, task_id=task_id), payload)
            task = self._factory.create(payload, current.id)
            self._repository.replace(task)

        logger.info("driver task %s updated for driver %s week %s", task.id, task.driver_id, task.week)
        self._publish("driver_task.updated", task, caller)
        return task

    def delete_task(self, task_id: int, caller: Caller) -> None:
        current = self._get_task(task_id)
        self._ensure_can_write(caller, current.driver_id)
        with self._locks.hold((current.driver_id, current.week)):
            current = self._get_task(task_id)
            self._repository.remove(task_id)

        logger.info("driver task %s deleted for driver %s week %s", task_id, current.driver_id, current.week)
        self._publish("driver_task.deleted", current, caller)
