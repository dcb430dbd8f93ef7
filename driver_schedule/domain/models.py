from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy import Index
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    return datetime.now(UTC)


class DriverTaskType(StrEnum):
    PICKUP = "PICKUP"
    DELIVER = "DELIVER"
    OTHER = "OTHER"
    NONE = "NONE"


class UserRole(StrEnum):
    DISPATCHER = "DISPATCHER"
    DRIVER = "DRIVER"


class DriverTask(SQLModel, table=True):
    __tablename__ = "driver_tasks"
    __table_args__ = (Index("ix_driver_tasks_driver_week", "driver_id", "week"),)

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    driver_id: int = Field(index=True)
    type: DriverTaskType
    start: int
    end: int
    day: int
    week: int
    location: str


def clone_task(task: DriverTask) -> DriverTask:
    return DriverTask(**task.model_dump())


@dataclass(frozen=True, slots=True)
class Caller:
    id: int
    role: UserRole


@dataclass(frozen=True, slots=True)
class User:
    id: int
    role: UserRole
    name: str = ""


class EventEnvelope(BaseModel):
    event_id: str = PydanticField(default_factory=lambda: str(uuid4()))
    event_type: str
    ts: datetime = PydanticField(default_factory=now_utc)
    actor_id: int | None = None
    payload: dict[str, Any] = PydanticField(default_factory=dict)


class ORMReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DriverTaskInput(BaseModel):
    driver_id: int
    type: DriverTaskType = DriverTaskType.NONE
    start: int
    end: int
    day: int
    week: int
    location: str = ""


class DriverTaskRead(ORMReadModel):
    id: int
    driver_id: int
    type: DriverTaskType
    start: int
    end: int
    day: int
    week: int
    location: str


class DevLoginRequest(BaseModel):
    user_id: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    permissions: list[str]


class UserRead(ORMReadModel):
    id: int
    role: UserRole
    name: str


class WeekShiftRead(BaseModel):
    week: int
    offset: int
    result: int
