"""Simulated browser address bar.

Filter edits rewrite the current entry in place so that back/forward
navigation is not polluted by every tweak; only real navigation (for
example opening an event detail page) pushes a new entry.
"""

from __future__ import annotations

import logging

_logger = logging.getLogger(__name__)


class AddressBar:
    """Location history with replace and push semantics."""

    def __init__(self, path: str = "/explore", query: str = "") -> None:
        self._entries: list[tuple[str, str]] = [(path, query.lstrip("?"))]
        self._index = 0

    @property
    def path(self) -> str:
        return self._entries[self._index][0]

    @property
    def query(self) -> str:
        return self._entries[self._index][1]

    @property
    def url(self) -> str:
        path, query = self._entries[self._index]
        return f"{path}?{query}" if query else path

    @property
    def history_length(self) -> int:
        return len(self._entries)

    def replace(self, query: str, *, path: str | None = None) -> None:
        """Rewrite the current entry without adding to history."""
        self._entries[self._index] = (path or self.path, query.lstrip("?"))
        _logger.debug("Address replaced: %s", self.url)

    def navigate(self, path: str, query: str = "") -> None:
        """Push a new entry, discarding any forward history."""
        del self._entries[self._index + 1 :]
        self._entries.append((path, query.lstrip("?")))
        self._index += 1
        _logger.debug("Navigated to %s", self.url)

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def forward(self) -> bool:
        if self._index >= len(self._entries) - 1:
            return False
        self._index += 1
        return True
