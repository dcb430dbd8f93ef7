from __future__ import annotations

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import create_engine

from driver_schedule import main as app_main
from driver_schedule.infra.container import build_container


def test_healthz_ok() -> None:
    client = TestClient(app_main.app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_readyz_skips_db_for_memory_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_main.app.state, "container", build_container("memory"))
    client = TestClient(app_main.app)
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json()["checks"] == {"db": "skipped"}


def test_readyz_checks_sql_backend(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'ready.db'}")
    monkeypatch.setattr(app_main.app.state, "container", build_container("sql", engine=engine))
    client = TestClient(app_main.app)
    assert client.get("/readyz").json()["status"] == "ready"

    monkeypatch.setattr(app_main, "check_db_ready", lambda _engine: False)
    response = client.get("/readyz")
    assert response.status_code == 503


def test_importing_app_configures_logging() -> None:
    from driver_schedule.infra.logging_setup import _ThirdPartyNoiseFilter

    root = logging.getLogger()
    assert any(
        isinstance(log_filter, _ThirdPartyNoiseFilter) for handler in root.handlers for log_filter in handler.filters
    )
