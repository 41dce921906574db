"""Filter store.

This is the only component allowed to replace the active
:class:`~pyconflict.models.filters.FilterState`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from pyconflict.models.filters import FilterState
from pyconflict.query import encode
from pyconflict.state.address import AddressBar
from pyconflict.state.bus import MessageBus
from pyconflict.state.events import FiltersChanged

_logger = logging.getLogger(__name__)


class FilterStore:
    """Holds the current filter snapshot.

    Every successful :meth:`set` or :meth:`reset` first mirrors the new
    snapshot into the address bar, then publishes
    :class:`~pyconflict.state.events.FiltersChanged`, so the address bar
    never shows a state older than the one being fetched.
    """

    def __init__(
        self,
        initial: FilterState | None = None,
        *,
        address: AddressBar | None = None,
        bus: MessageBus | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._today = today
        self._state = initial if initial is not None else FilterState.default(today())
        self._address = address
        self._path = address.path if address is not None else None
        self._bus = bus

    def get(self) -> FilterState:
        """Return the current snapshot (never mutated afterwards)."""
        return self._state

    def set(self, partial: Mapping[str, Any] | None = None, **changes: Any) -> FilterState:
        """Shallow-merge *partial* and *changes* over the current snapshot.

        Raises
        ------
        ValueError
            If the merged state is invalid. The current snapshot is kept
            and nothing is published.
        """
        merged_changes: dict[str, Any] = dict(partial or {})
        merged_changes.update(changes)
        state = self._state.merged(merged_changes)
        self._commit(state, reset=False)
        return state

    def reset(self) -> FilterState:
        """Restore the default date window and clear every other field."""
        state = FilterState.default(self._today())
        self._commit(state, reset=True)
        return state

    def sync_address(self) -> None:
        """Write the current snapshot into the address bar.

        Only while the address bar still shows the page the store was
        created on; other entries are left untouched.
        """
        if self._address is None:
            return
        if self._address.path != self._path:
            _logger.debug("Address bar on %s, not syncing filters", self._address.path)
            return
        self._address.replace(encode(self._state))

    def _commit(self, state: FilterState, *, reset: bool) -> None:
        self._state = state
        self.sync_address()
        _logger.debug("Filters %s: %s", "reset" if reset else "updated", encode(state))
        if self._bus is not None:
            self._bus.publish(FiltersChanged(state=state, reset=reset))
