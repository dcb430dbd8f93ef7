from __future__ import annotations

import logging

import pytest

from driver_schedule.domain.models import EventEnvelope
from driver_schedule.infra.events import EventBus


def test_event_bus_publish_and_subscribe() -> None:
    bus = EventBus()
    seen: list[str] = []
    wildcard: list[str] = []

    def handler(event: EventEnvelope) -> None:
        seen.append(event.event_id)

    bus.subscribe("driver_task.created", handler)
    bus.subscribe("*", lambda event: wildcard.append(event.event_type))

    event = bus.publish_dict("driver_task.created", {"task": {"id": 1}}, actor_id=1)
    bus.publish_dict("driver_task.deleted", {"task": {"id": 1}})

    assert seen == [event.event_id]
    assert wildcard == ["driver_task.created", "driver_task.deleted"]

    bus.unsubscribe("driver_task.created", handler)
    bus.publish_dict("driver_task.created", {"task": {"id": 2}})
    assert seen == [event.event_id]


def test_failing_handler_does_not_stop_other_handlers(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()
    seen: list[str] = []

    def broken(event: EventEnvelope) -> None:
        raise RuntimeError("subscriber down")

    bus.subscribe("driver_task.created", broken)
    bus.subscribe("*", lambda event: seen.append(event.event_type))

    with caplog.at_level(logging.ERROR, logger="driver_schedule.infra.events"):
        bus.publish_dict("driver_task.created", {"task": {"id": 1}})

    assert seen == ["driver_task.created"]
    assert any("event handler failed" in record.getMessage() for record in caplog.records)
