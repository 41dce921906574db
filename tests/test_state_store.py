from __future__ import annotations

from datetime import date

import pytest

from pyconflict.models.filters import FilterState, IntRange
from pyconflict.query import encode
from pyconflict.state.address import AddressBar
from pyconflict.state.bus import MessageBus
from pyconflict.state.events import FiltersChanged, ResetMapView
from pyconflict.state.store import FilterStore

TODAY = date(2025, 6, 1)


def _store(address: AddressBar | None = None, bus: MessageBus | None = None) -> FilterStore:
    return FilterStore(FilterState.default(TODAY), address=address, bus=bus, today=lambda: TODAY)


def test_set_merges_without_mutating_previous_snapshot() -> None:
    store = _store()
    before = store.get()

    after = store.set(countries={"Mali"})

    assert before.countries == frozenset()
    assert after.countries == frozenset({"Mali"})
    assert after.date_range == before.date_range
    assert store.get() is after


def test_set_accepts_mapping_and_keywords() -> None:
    store = _store()

    state = store.set({"countries": ["Mali"], "deaths": {"min": 5}}, has_civilians=True)

    assert state.countries == frozenset({"Mali"})
    assert state.deaths == IntRange(min=5)
    assert state.has_civilians is True


def test_set_is_shallow_merge() -> None:
    store = _store()
    store.set(deaths={"min": 5, "max": 50})

    # A top-level field is replaced as a whole, not merged key by key.
    state = store.set(deaths={"max": 10})

    assert state.deaths == IntRange(max=10)


def test_reset_restores_default_window_and_clears_fields() -> None:
    store = _store()
    store.set(countries={"Mali"}, violence_types={1}, clarity={"min": 2})

    state = store.reset()

    assert state == FilterState.default(TODAY)


def test_address_is_replaced_before_subscribers_run() -> None:
    address = AddressBar("/explore")
    bus = MessageBus()
    store = _store(address=address, bus=bus)
    seen: list[tuple[str, str, int]] = []

    def _on_change(message: FiltersChanged) -> None:
        seen.append((address.query, encode(message.state), address.history_length))

    bus.subscribe(FiltersChanged, _on_change)

    store.set(countries={"Mali"})
    store.set(deaths={"min": 5})

    assert len(seen) == 2
    for query_at_publish, expected, history_length in seen:
        assert query_at_publish == expected
        assert history_length == 1


def test_reset_publishes_reset_flag() -> None:
    bus = MessageBus()
    store = _store(bus=bus)
    messages: list[FiltersChanged] = []
    bus.subscribe(FiltersChanged, messages.append)

    store.set(countries={"Mali"})
    store.reset()

    assert [message.reset for message in messages] == [False, True]


@pytest.mark.parametrize(
    "changes",
    [
        {"deaths": {"min": -1}},
        {"clarity": {"min": 0}},
        {"violence_types": [0]},
        {"countries": ["Mali,Niger"]},
        {"deaths": {"min": 10, "max": 5}},
        {"not_a_field": 1},
    ],
)
def test_invalid_set_leaves_everything_untouched(changes: dict[str, object]) -> None:
    address = AddressBar("/explore")
    bus = MessageBus()
    store = _store(address=address, bus=bus)
    store.sync_address()
    messages: list[FiltersChanged] = []
    bus.subscribe(FiltersChanged, messages.append)
    before = store.get()
    query_before = address.query

    with pytest.raises(ValueError):
        store.set(changes)

    assert store.get() is before
    assert address.query == query_before
    assert messages == []


def test_empty_ranges_collapse_to_none() -> None:
    store = _store()

    state = store.set(deaths={}, clarity={"min": None, "max": None})

    assert state.deaths is None
    assert state.clarity is None


def test_bus_isolates_failing_handlers() -> None:
    bus = MessageBus()
    calls: list[str] = []

    def _broken(_message: ResetMapView) -> None:
        raise RuntimeError("boom")

    bus.subscribe(ResetMapView, _broken)
    bus.subscribe(ResetMapView, lambda _message: calls.append("second"))

    assert bus.publish(ResetMapView()) == 2
    assert calls == ["second"]


def test_bus_unsubscribe_is_idempotent() -> None:
    bus = MessageBus()
    unsubscribe = bus.subscribe(ResetMapView, lambda _message: None)

    assert bus.subscriber_count(ResetMapView) == 1
    unsubscribe()
    unsubscribe()
    assert bus.subscriber_count(ResetMapView) == 0
    assert bus.publish(ResetMapView()) == 0


def test_address_bar_replace_and_navigate() -> None:
    address = AddressBar("/explore", "?countries=Mali")
    assert address.url == "/explore?countries=Mali"

    address.replace("countries=Niger")
    assert address.history_length == 1
    assert address.query == "countries=Niger"

    address.navigate("/event/42")
    assert address.history_length == 2
    assert address.url == "/event/42"

    assert address.back() is True
    assert address.url == "/explore?countries=Niger"
    assert address.back() is False
    assert address.forward() is True
    assert address.path == "/event/42"
    assert address.forward() is False


def test_navigate_discards_forward_history() -> None:
    address = AddressBar("/explore")
    address.navigate("/event/1")
    address.back()

    address.navigate("/event/2")

    assert address.history_length == 2
    assert address.forward() is False
    assert address.path == "/event/2"
