from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from driver_schedule.domain.errors import StorageError
from driver_schedule.domain.models import DriverTask


class SqlDriverTaskRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    def find_by_id(self, task_id: int) -> DriverTask | None:
        try:
            with self._session() as session:
                return session.get(DriverTask, task_id)
        except SQLAlchemyError as exc:
            raise StorageError("driver task lookup failed") from exc

    def find_by_driver(self, driver_id: int) -> list[DriverTask]:
        try:
            with self._session() as session:
                statement = select(DriverTask).where(DriverTask.driver_id == driver_id).order_by(DriverTask.id)
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise StorageError("driver task query failed") from exc

    def find_by_driver_and_week(self, driver_id: int, week: int) -> list[DriverTask]:
        try:
            with self._session() as session:
                statement = (
                    select(DriverTask)
                    .where(DriverTask.driver_id == driver_id)
                    .where(DriverTask.week == week)
                    .order_by(DriverTask.id)
                )
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise StorageError("driver task query failed") from exc

    def insert(self, task: DriverTask) -> None:
        with self._session() as session:
            session.add(DriverTask(**task.model_dump()))
            try:
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError(f"driver task {task.id} insert failed") from exc

    def replace(self, task: DriverTask) -> None:
        with self._session() as session:
            try:
                stored = session.get(DriverTask, task.id)
                if stored is None:
                    raise StorageError(f"driver task {task.id} is not stored")
                stored.type = task.type
                stored.start = task.start
                stored.end = task.end
                stored.day = task.day
                stored.week = task.week
                stored.location = task.location
                session.add(stored)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError(f"driver task {task.id} replace failed") from exc

    def remove(self, task_id: int) -> None:
        with self._session() as session:
            try:
                stored = session.get(DriverTask, task_id)
                if stored is None:
                    raise StorageError(f"driver task {task_id} is not stored")
                session.delete(stored)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StorageError(f"driver task {task_id} delete failed") from exc

    def highest_task_id(self) -> int:
        try:
            with self._session() as session:
                value = session.exec(select(func.max(DriverTask.id))).one()
        except SQLAlchemyError as exc:
            raise StorageError("driver task id scan failed") from exc
        return int(value or 0)
