"""In-process publish/subscribe channel between views."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from typing import TypeVar

from pyconflict.state.events import BusMessage

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BusMessage)


class MessageBus:
    """Typed message bus.

    Handlers are registered per message class and called synchronously,
    in subscription order, from :meth:`publish`. A failing handler is
    logged and does not prevent the remaining handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[BusMessage], list[Callable[[BusMessage], None]]] = {}

    def subscribe(self, message_type: type[M], handler: Callable[[M], None]) -> Callable[[], None]:
        """Register *handler* and return a callable that unregisters it."""
        handlers = self._handlers.setdefault(message_type, [])
        handlers.append(handler)  # type: ignore[arg-type]

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                handlers.remove(handler)  # type: ignore[arg-type]

        return _unsubscribe

    def publish(self, message: BusMessage) -> int:
        """Deliver *message*; returns the number of handlers called."""
        handlers = list(self._handlers.get(type(message), ()))
        for handler in handlers:
            try:
                handler(message)
            except Exception:
                _logger.warning("Handler for %s failed", type(message).__name__, exc_info=True)
        return len(handlers)

    def subscriber_count(self, message_type: type[BusMessage]) -> int:
        return len(self._handlers.get(message_type, ()))
