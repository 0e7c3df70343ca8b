"""Tests for EventBus."""

from datetime import datetime, timezone

import pytest

from orchestration.bus import ALL_EVENTS, InMemoryEventBus
from orchestration.events import Event, EventMetadata, EventType


def _event(event_type: EventType = EventType.STEP_STARTED, run_id: str = "run-123") -> Event:
    return Event(
        type=event_type,
        payload={"step": {"step_name": "Lint"}},
        metadata=EventMetadata(run_id=run_id, timestamp=datetime.now(timezone.utc)),
    )


@pytest.mark.asyncio
async def test_event_bus_subscribe_and_broadcast():
    """Test subscribing and broadcasting events."""
    bus = InMemoryEventBus()

    events_received: list[Event] = []

    async def handler(event: Event) -> None:
        events_received.append(event)

    bus.subscribe(EventType.STEP_STARTED, handler)

    await bus.broadcast(_event())

    assert len(events_received) == 1
    assert events_received[0].type is EventType.STEP_STARTED
    assert events_received[0].payload == {"step": {"step_name": "Lint"}}
    assert events_received[0].metadata.run_id == "run-123"


@pytest.mark.asyncio
async def test_event_bus_multiple_handlers():
    """Test multiple handlers for the same event."""
    bus = InMemoryEventBus()

    events_1: list[Event] = []
    events_2: list[Event] = []

    async def handler1(event: Event) -> None:
        events_1.append(event)

    async def handler2(event: Event) -> None:
        events_2.append(event)

    bus.subscribe("step_started", handler1)
    bus.subscribe(EventType.STEP_STARTED, handler2)

    await bus.broadcast(_event())

    assert len(events_1) == 1
    assert len(events_2) == 1


@pytest.mark.asyncio
async def test_event_bus_wildcard_receives_every_type():
    bus = InMemoryEventBus()
    seen: list[EventType] = []

    async def handler(event: Event) -> None:
        seen.append(event.type)

    bus.subscribe(ALL_EVENTS, handler)

    await bus.broadcast(_event(EventType.AUDIT_STARTED))
    await bus.broadcast(_event(EventType.ISSUE_DETECTED))

    assert seen == [EventType.AUDIT_STARTED, EventType.ISSUE_DETECTED]


@pytest.mark.asyncio
async def test_event_bus_no_handlers():
    """Broadcasting without listeners is a no-op."""
    bus = InMemoryEventBus()

    await bus.broadcast(_event())


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_delivery():
    bus = InMemoryEventBus()
    delivered: list[Event] = []

    async def broken(event: Event) -> None:
        raise ConnectionError("socket closed")

    async def healthy(event: Event) -> None:
        delivered.append(event)

    bus.subscribe(ALL_EVENTS, broken)
    bus.subscribe(ALL_EVENTS, healthy)

    await bus.broadcast(_event())

    assert len(delivered) == 1


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    bus = InMemoryEventBus()
    delivered: list[Event] = []

    async def handler(event: Event) -> None:
        delivered.append(event)

    bus.subscribe(EventType.STEP_STARTED, handler)
    bus.unsubscribe(EventType.STEP_STARTED, handler)

    await bus.broadcast(_event())

    assert delivered == []


def test_event_to_dict_shape():
    event = _event(EventType.STEP_COMPLETED)

    data = event.to_dict()

    assert data["type"] == "step_completed"
    assert data["run_id"] == "run-123"
    assert data["data"] == {"step": {"step_name": "Lint"}}
    assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None
