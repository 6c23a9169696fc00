"""Tests for shared value objects and the message bus."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import DomainEvent
from shared.domain.value_objects import GeoPoint, TimeWindow

NOON = datetime(2025, 6, 1, 12, tzinfo=timezone.utc)


def test_window_rejects_end_before_start():
    with pytest.raises(ValueError):
        TimeWindow(NOON, NOON - timedelta(minutes=1))


def test_zero_length_window_is_allowed():
    window = TimeWindow(NOON, NOON)

    assert window.duration_days == 1
    assert not window.overlaps_with(TimeWindow(NOON, NOON + timedelta(hours=1)))


def test_duration_counts_started_days():
    assert TimeWindow(NOON, NOON + timedelta(days=3)).duration_days == 3
    assert TimeWindow(NOON, NOON + timedelta(days=3, minutes=1)).duration_days == 4


def test_whole_day_windows():
    day = TimeWindow.for_day(date(2025, 6, 1), timezone.utc)
    two_days = TimeWindow.for_days(date(2025, 6, 1), date(2025, 6, 2), timezone.utc)

    assert day.start == datetime(2025, 6, 1, tzinfo=timezone.utc)
    assert day.end.date() == date(2025, 6, 1)
    assert two_days.end.date() == date(2025, 6, 2)
    assert not day.overlaps_with(TimeWindow.for_day(date(2025, 6, 2), timezone.utc))


def test_value_objects_compare_by_value():
    assert GeoPoint(10.3, 123.9) == GeoPoint(10.3, 123.9)
    assert str(GeoPoint(10.3, 123.9)) == "10.30000,123.90000"


@dataclass
class SomethingHappened(DomainEvent):
    name: str = ""


def test_bus_calls_every_handler_once():
    bus = MessageBus()
    seen = []

    def remember(event):
        seen.append(event.name)

    bus.register_event_handler(SomethingHappened, remember)
    bus.register_event_handler(SomethingHappened, remember)
    bus.publish_events([SomethingHappened(name="first")])

    assert seen == ["first"]


def test_failing_handler_does_not_stop_the_others():
    bus = MessageBus()
    seen = []

    def explode(event):
        raise RuntimeError("boom")

    bus.register_event_handler(SomethingHappened, explode)
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.name))
    bus.publish_events([SomethingHappened(name="second")])

    assert seen == ["second"]


def test_event_serialises_its_identity():
    event = SomethingHappened(name="third")

    data = event.to_dict()

    assert data["event_type"] == "SomethingHappened"
    assert data["event_id"] == str(event.event_id)


def test_event_payload_holds_only_subclass_fields():
    assert SomethingHappened(name="fourth").payload() == {"name": "fourth"}


def test_base_class_handlers_receive_every_event():
    bus = MessageBus()
    seen = []
    bus.register_event_handler(DomainEvent, lambda event: seen.append(event.event_name))

    bus.publish_events([SomethingHappened()])

    assert seen == ["SomethingHappened"]


def test_unregistered_handler_is_not_called():
    bus = MessageBus()
    seen = []

    def remember(event):
        seen.append(event)

    bus.register_event_handler(SomethingHappened, remember)
    bus.unregister_event_handler(SomethingHappened, remember)
    bus.publish_events([SomethingHappened()])

    assert seen == []


@pytest.mark.django_db
def test_unit_of_work_publishes_after_commit(django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.register_event_handler(SomethingHappened, lambda event: seen.append(event.name))

    with django_capture_on_commit_callbacks(execute=True):
        with DjangoUnitOfWork(bus=bus) as uow:
            uow.add_event(SomethingHappened(name="committed"))
            assert seen == []

    assert seen == ["committed"]


@pytest.mark.django_db
def test_unit_of_work_drops_events_on_error(django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.register_event_handler(SomethingHappened, seen.append)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with DjangoUnitOfWork(bus=bus) as uow:
                uow.add_event(SomethingHappened(name="lost"))
                raise RuntimeError("use case failed")

    assert callbacks == []
    assert seen == []
