"""Tests for the selection-change stream."""
from services.selection_events import SelectionChangeBus, SelectionEvent


def test__publish__delivers_to_every_handler() -> None:
    bus = SelectionChangeBus()
    seen_a: list[SelectionEvent] = []
    seen_b: list[SelectionEvent] = []
    bus.subscribe(seen_a.append)
    bus.subscribe(seen_b.append)
    event = SelectionEvent(surface_id="note-1", start=0, end=4)
    bus.publish(event)
    assert seen_a == [event]
    assert seen_b == [event]


def test__unsubscribe__stops_delivery_and_is_idempotent() -> None:
    bus = SelectionChangeBus()
    seen: list[SelectionEvent] = []
    subscription = bus.subscribe(seen.append)
    subscription.unsubscribe()
    subscription.unsubscribe()
    bus.publish(SelectionEvent(surface_id=None, start=0, end=1))
    assert seen == []
    assert bus.listener_count == 0


def test__publish__handler_may_unsubscribe_during_delivery() -> None:
    bus = SelectionChangeBus()
    seen: list[str] = []
    subscription = None

    def once(event: SelectionEvent) -> None:
        seen.append("once")
        subscription.unsubscribe()

    subscription = bus.subscribe(once)
    bus.subscribe(lambda event: seen.append("always"))
    bus.publish(SelectionEvent(surface_id=None, start=0, end=0))
    bus.publish(SelectionEvent(surface_id=None, start=0, end=0))
    assert seen == ["once", "always", "always"]


def test__is_collapsed__caret_only() -> None:
    assert SelectionEvent(surface_id="x", start=3, end=3).is_collapsed
    assert not SelectionEvent(surface_id="x", start=3, end=4).is_collapsed
