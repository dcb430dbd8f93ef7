from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from driver_schedule import main as app_main
from driver_schedule.infra.container import build_container


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    monkeypatch.setattr(app_main.app.state, "container", build_container("memory"))
    test_client = TestClient(app_main.app)
    yield test_client
    test_client.close()


def _auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _login(client: TestClient, user_id: int) -> str:
    response = client.post("/api/identity/dev-login", json={"user_id": user_id})
    assert response.status_code == 200
    return response.json()["access_token"]


def _task_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "driver_id": 2,
        "type": "PICKUP",
        "start": 9,
        "end": 12,
        "day": 2,
        "week": 10,
        "location": "Toronto",
    }
    body.update(overrides)
    return body


def _create_task(client: TestClient, token: str, **overrides: Any) -> dict[str, Any]:
    response = client.post("/api/driver-tasks", json=_task_body(**overrides), headers=_auth_header(token))
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_token(client: TestClient) -> None:
    response = client.get("/api/driver-tasks/drivers/2/weeks/10")
    assert response.status_code == 401

    response = client.get(
        "/api/driver-tasks/drivers/2/weeks/10",
        headers=_auth_header("not-a-token"),
    )
    assert response.status_code == 401


def test_create_conflict_and_adjacent_flow(client: TestClient) -> None:
    token = _login(client, 1)
    existing = _create_task(client, token)
    assert existing["id"] > 0
    assert existing["type"] == "PICKUP"

    conflict = client.post(
        "/api/driver-tasks",
        json=_task_body(start=11, end=14),
        headers=_auth_header(token),
    )
    assert conflict.status_code == 409
    detail = conflict.json()["detail"]
    assert detail["kind"] == "TASK_CONFLICT"
    assert [item["id"] for item in detail["conflicting_tasks"]] == [existing["id"]]
    assert detail["conflicting_tasks"][0]["start"] == 9

    _create_task(client, token, start=12, end=14)
    _create_task(client, token, driver_id=3)

    listing = client.get("/api/driver-tasks/drivers/2/weeks/10", headers=_auth_header(token))
    assert listing.status_code == 200
    assert [(item["start"], item["end"]) for item in listing.json()] == [(9, 12), (12, 14)]


def test_validation_error_detail_names_field(client: TestClient) -> None:
    token = _login(client, 1)
    response = client.post(
        "/api/driver-tasks",
        json=_task_body(type="NONE"),
        headers=_auth_header(token),
    )
    assert response.status_code == 422
    assert response.json()["detail"] == {
        "kind": "VALIDATION",
        "message": "Please select a task type",
        "field": "type",
    }

    response = client.get("/api/driver-tasks/drivers/2/weeks/60", headers=_auth_header(token))
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "week"


def test_update_and_delete_flow(client: TestClient) -> None:
    token = _login(client, 1)
    task = _create_task(client, token)

    same_slot = client.put(
        f"/api/driver-tasks/{task['id']}",
        json=_task_body(location="Mississauga"),
        headers=_auth_header(token),
    )
    assert same_slot.status_code == 200
    assert same_slot.json()["location"] == "Mississauga"
    assert same_slot.json()["id"] == task["id"]

    missing = client.put("/api/driver-tasks/999", json=_task_body(), headers=_auth_header(token))
    assert missing.status_code == 404
    assert missing.json()["detail"]["kind"] == "NOT_FOUND"

    deleted = client.delete(f"/api/driver-tasks/{task['id']}", headers=_auth_header(token))
    assert deleted.status_code == 204

    again = client.delete(f"/api/driver-tasks/{task['id']}", headers=_auth_header(token))
    assert again.status_code == 404

    _create_task(client, token)


def test_driver_role_is_limited_to_own_tasks(client: TestClient) -> None:
    driver_token = _login(client, 2)
    own = _create_task(client, driver_token)

    forbidden = client.post(
        "/api/driver-tasks",
        json=_task_body(driver_id=3),
        headers=_auth_header(driver_token),
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["kind"] == "AUTHORIZATION"

    other_week = client.get("/api/driver-tasks/drivers/3/weeks/10", headers=_auth_header(driver_token))
    assert other_week.status_code == 403

    other_driver_token = _login(client, 3)
    delete_other = client.delete(f"/api/driver-tasks/{own['id']}", headers=_auth_header(other_driver_token))
    assert delete_other.status_code == 403

    own_week = client.get("/api/driver-tasks/drivers/2/weeks/10", headers=_auth_header(driver_token))
    assert [item["id"] for item in own_week.json()] == [own["id"]]


def test_weekly_export_is_sorted_csv(client: TestClient) -> None:
    token = _login(client, 1)
    _create_task(client, token, day=3, start=8, end=9, location="Ottawa")
    _create_task(client, token, day=2, start=13, end=15, type="DELIVER")
    _create_task(client, token, day=2, start=9, end=12)

    response = client.get("/api/driver-tasks/drivers/2/weeks/10/export", headers=_auth_header(token))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="driver-2-week-10.csv"' in response.headers["content-disposition"]

    lines = response.text.strip().split("\n")
    assert lines[0] == "id,driver_id,type,week,day,day_name,start,end,start_time,end_time,location"
    assert [line.split(",")[5:8] for line in lines[1:]] == [
        ["Monday", "9", "12"],
        ["Monday", "13", "15"],
        ["Tuesday", "8", "9"],
    ]

    driver_token = _login(client, 4)
    denied = client.get("/api/driver-tasks/drivers/2/weeks/10/export", headers=_auth_header(driver_token))
    assert denied.status_code == 403


def test_week_shift_wraps(client: TestClient) -> None:
    assert client.get("/api/driver-tasks/weeks/1/shift", params={"offset": -1}).json()["result"] == 52
    assert client.get("/api/driver-tasks/weeks/52/shift").json()["result"] == 1
    assert client.get("/api/driver-tasks/weeks/0/shift").status_code == 422


def test_mutations_are_audited(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    token = _login(client, 1)
    with caplog.at_level(logging.INFO, logger="driver_schedule.infra.audit"):
        _create_task(client, token)
        client.post("/api/driver-tasks", json=_task_body(), headers=_auth_header(token))

    records = [record for record in caplog.records if record.name == "driver_schedule.infra.audit"]
    outcomes = [(record.audit["action"], record.audit["outcome"]) for record in records]
    assert ("driver_task.create", "success") in outcomes
    assert ("driver_task.create", "rejected") in outcomes
    assert all(record.audit["actor_id"] == "1" for record in records if record.audit["action"] == "driver_task.create")


def test_unparseable_body_gets_tagged_validation_detail(client: TestClient) -> None:
    token = _login(client, 1)
    response = client.post(
        "/api/driver-tasks",
        json=_task_body(type="BOGUS"),
        headers=_auth_header(token),
    )
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["kind"] == "VALIDATION"
    assert detail["field"] == "type"
    assert detail["message"]

    body = _task_body()
    del body["day"]
    response = client.post("/api/driver-tasks", json=body, headers=_auth_header(token))
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "day"

    response = client.get("/api/driver-tasks/drivers/2/weeks/ten", headers=_auth_header(token))
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert (detail["kind"], detail["field"]) == ("VALIDATION", "week")
