from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from driver_schedule.api.deps import get_caller, get_container
from driver_schedule.domain.errors import (
    AuthorizationError,
    DriverTaskError,
    NotFoundError,
    StorageError,
    TaskConflictError,
    ValidationError,
)
from driver_schedule.domain.models import Caller, DriverTaskInput, DriverTaskRead, WeekShiftRead
from driver_schedule.domain.schedule import WEEK_MAX, WEEK_MIN, shift_week, week_in_range
from driver_schedule.infra.audit import set_audit_context
from driver_schedule.infra.container import Container
from driver_schedule.services.driver_task_service import DriverTaskService
from driver_schedule.services.export_service import DriverTaskExporter

router = APIRouter()


def get_driver_task_service(container: Annotated[Container, Depends(get_container)]) -> DriverTaskService:
    return container.task_service


def get_exporter(container: Annotated[Container, Depends(get_container)]) -> DriverTaskExporter:
    return container.exporter


CurrentCaller = Annotated[Caller, Depends(get_caller)]
Service = Annotated[DriverTaskService, Depends(get_driver_task_service)]
Exporter = Annotated[DriverTaskExporter, Depends(get_exporter)]

_STATUS_BY_ERROR: list[tuple[type[DriverTaskError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (TaskConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def _handle_task_error(exc: DriverTaskError) -> None:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            raise HTTPException(status_code=status_code, detail=exc.as_detail()) from exc
    raise exc


@router.get(
    "/drivers/{driver_id}/weeks/{week}",
    response_model=list[DriverTaskRead],
)
def get_weekly_user_tasks(driver_id: int, week: int, caller: CurrentCaller, service: Service) -> list[DriverTaskRead]:
    try:
        tasks = service.get_weekly_user_tasks(driver_id, week, caller)
        return [DriverTaskRead.model_validate(item) for item in tasks]
    except DriverTaskError as exc:
        _handle_task_error(exc)
        raise


@router.get("/drivers/{driver_id}/weeks/{week}/export")
def export_weekly_tasks(
    driver_id: int,
    week: int,
    request: Request,
    caller: CurrentCaller,
    exporter: Exporter,
) -> Response:
    set_audit_context(
        request,
        action="driver_task.export",
        detail={"driver_id": driver_id, "week": week},
    )
    try:
        content = exporter.export_week(driver_id, week, caller)
    except DriverTaskError as exc:
        _handle_task_error(exc)
        raise
    filename = exporter.filename(driver_id, week)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/weeks/{week}/shift", response_model=WeekShiftRead)
def shift_selected_week(week: int, offset: Annotated[int, Query()] = 1) -> WeekShiftRead:
    if not week_in_range(week):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ValidationError("week", f"week must be between {WEEK_MIN} and {WEEK_MAX}").as_detail(),
        )
    return WeekShiftRead(week=week, offset=offset, result=shift_week(week, offset))


@router.post(
    "",
    response_model=DriverTaskRead,
    status_code=status.HTTP_201_CREATED,
)
def add_task(payload: DriverTaskInput, request: Request, caller: CurrentCaller, service: Service) -> DriverTaskRead:
    set_audit_context(request, action="driver_task.create", detail={"driver_id": payload.driver_id})
    try:
        task = service.add_task(payload, caller)
        return DriverTaskRead.model_validate(task)
    except DriverTaskError as exc:
        _handle_task_error(exc)
        raise


@router.put("/{task_id}", response_model=DriverTaskRead)
def update_task(
    task_id: int,
    payload: DriverTaskInput,
    request: Request,
    caller: CurrentCaller,
    service: Service,
) -> DriverTaskRead:
    set_audit_context(request, action="driver_task.update", detail={"task_id": task_id})
    try:
        task = service.update_task(task_id, payload, caller)
        return DriverTaskRead.model_validate(task)
    except DriverTaskError as exc:
        _handle_task_error(exc)
        raise


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, request: Request, caller: CurrentCaller, service: Service) -> Response:
    set_audit_context(request, action="driver_task.delete", detail={"task_id": task_id})
    try:
        service.delete_task(task_id, caller)
    except DriverTaskError as exc:
        _handle_task_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
