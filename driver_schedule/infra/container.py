from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.engine import Engine

from driver_schedule.domain.factory import DriverTaskFactory, IdGenerator
from driver_schedule.domain.models import User
from driver_schedule.domain.repository import DriverTaskRepository
from driver_schedule.domain.validator import DriverTaskValidator
from driver_schedule.infra.db import get_engine
from driver_schedule.infra.events import EventBus
from driver_schedule.infra.locks import KeyedLocks
from driver_schedule.infra.memory_repository import InMemoryDriverTaskRepository
from driver_schedule.infra.sql_repository import SqlDriverTaskRepository
from driver_schedule.services.driver_task_service import DriverTaskService
from driver_schedule.services.export_service import DriverTaskExporter
from driver_schedule.services.identity_service import IdentityService, UserDirectory, default_users

StorageBackend = Literal["memory", "sql"]

STORAGE_BACKEND: StorageBackend = "sql" if os.getenv("STORAGE_BACKEND", "memory") == "sql" else "memory"


@dataclass(slots=True)
class Container:
    backend: StorageBackend
    repository: DriverTaskRepository
    events: EventBus
    task_service: DriverTaskService
    exporter: DriverTaskExporter
    identity: IdentityService
    engine: Engine | None = None


def build_container(
    backend: StorageBackend | None = None,
    *,
    engine: Engine | None = None,
    users: list[User] | None = None,
) -> Container:
    selected = backend or STORAGE_BACKEND
    if selected == "sql":
        if engine is None:
            engine = get_engine()
        sql_repository = SqlDriverTaskRepository(engine)
        repository: DriverTaskRepository = sql_repository
        id_generator = IdGenerator(seed=sql_repository.highest_task_id)
    else:
        repository = InMemoryDriverTaskRepository()
        id_generator = IdGenerator()

    events = EventBus()
    task_service = DriverTaskService(
        repository,
        validator=DriverTaskValidator(),
        factory=DriverTaskFactory(id_generator),
        locks=KeyedLocks(),
        events=events,
    )
    return Container(
        backend=selected,
        repository=repository,
        events=events,
        task_service=task_service,
        exporter=DriverTaskExporter(task_service),
        identity=IdentityService(UserDirectory(users or default_users())),
        engine=engine,
    )
