from __future__ import annotations

import os

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from driver_schedule.api.routers import driver_task, identity
from driver_schedule.domain.errors import ValidationError
from driver_schedule.infra.audit import AuditMiddleware
from driver_schedule.infra.container import build_container
from driver_schedule.infra.db import check_db_ready
from driver_schedule.infra.logging_setup import setup_logging

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

setup_logging()

app = FastAPI(
    title="driver-schedule",
    description="Weekly driver task scheduling with slot conflict validation.",
    version="0.1.0",
)

app.state.container = build_container()

app.add_middleware(AuditMiddleware)

app.include_router(identity.router, prefix="/api/identity", tags=["identity"])
app.include_router(driver_task.router, prefix="/api/driver-tasks", tags=["driver-tasks"])


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first unparseable field in the same tagged shape as service errors.
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = first.get("loc") or ("body",)
    error = ValidationError(str(loc[-1]), first.get("msg", "invalid request"))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": error.as_detail()},
    )


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/readyz")
def readyz() -> dict[str, object]:
    container = app.state.container
    if container.backend != "sql":
        return {"status": "ready", "checks": {"db": "skipped"}}
    db_ok = check_db_ready(container.engine)
    checks = {"db": "ok" if db_ok else "fail"}
    if not db_ok:
        raise HTTPException(
            status_code=503,
            detail={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}


if __name__ == "__main__":
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
