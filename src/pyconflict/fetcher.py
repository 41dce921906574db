"""Trailing-debounce fetch orchestration.

A :class:`DebouncedFetcher` turns a burst of requests (filter edits,
page changes) into a single remote read for the last request of the
burst, and only ever applies the result of the request it is currently
waiting on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from pyconflict._constants import DEFAULT_DEBOUNCE_DELAY
from pyconflict.exceptions import ConflictConfigError, ConflictError
from pyconflict.models.result import FetchResult
from pyconflict.state.policy import is_stale, should_apply_result

_logger = logging.getLogger(__name__)

Q = TypeVar("Q")
T = TypeVar("T")


class DebouncedFetcher(Generic[Q, T]):
    """Debounced, stale-safe reader for one view.

    Parameters
    ----------
    read : callable
        Coroutine function issuing the remote read(s) for a request.
    delay : float
        Quiescence window in seconds. Each :meth:`schedule` call within
        the window re-arms the timer with the newest request.
    timeout : float or None
        Optional bound for the whole read; expiry becomes an error result.
    fallback : callable or None
        Builds demo data when the read raises ``ConflictConfigError``.
        Without one, misconfiguration is reported as an error.
    fallback_notice : str or None
        Notice attached to fallback results.
    on_result : callable or None
        Called with every published :class:`FetchResult`.
    name : str
        Used in log lines.
    """

    def __init__(
        self,
        read: Callable[[Q], Awaitable[T]],
        *,
        delay: float = DEFAULT_DEBOUNCE_DELAY,
        timeout: float | None = None,
        fallback: Callable[[Q], T] | None = None,
        fallback_notice: str | None = None,
        on_result: Callable[[FetchResult[Q, T]], None] | None = None,
        name: str = "fetch",
    ) -> None:
        self._read = read
        self._delay = delay
        self._timeout = timeout
        self._fallback = fallback
        self._fallback_notice = fallback_notice
        self._on_result = on_result
        self._name = name
        self._result: FetchResult[Q, T] = FetchResult()
        self._latest: Q | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self.reads_issued = 0

    @property
    def result(self) -> FetchResult[Q, T]:
        return self._result

    @property
    def latest(self) -> Q | None:
        """The most recently scheduled request."""
        return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_scheduled(self) -> bool:
        """Whether a debounce timer is armed."""
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule(self, request: Q) -> None:
        """Arm (or re-arm) the debounce timer for *request*.

        Must be called from within a running event loop.
        """
        if self._closed:
            _logger.debug("%s: schedule after close ignored", self._name)
            return
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._latest = request
        self._timer = loop.call_later(self._delay, self._fire, request)
        self._publish(self._result.pending(request))

    def retry(self) -> bool:
        """Re-schedule the latest request (explicit user retry)."""
        if self._latest is None or self._closed:
            return False
        self.schedule(self._latest)
        return True

    def close(self) -> None:
        """Cancel the pending timer and every in-flight read.

        No further results are published after this call.
        """
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        """:meth:`close`, then wait for cancelled reads to unwind."""
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fire(self, request: Q) -> None:
        self._timer = None
        if self._closed or is_stale(request, self._latest):
            return
        task = asyncio.get_running_loop().create_task(self._run(request), name=f"pyconflict-{self._name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, request: Q) -> None:
        self.reads_issued += 1
        _logger.debug("%s: read #%d issued", self._name, self.reads_issued)
        try:
            if self._timeout is not None:
                data = await asyncio.wait_for(self._read(request), self._timeout)
            else:
                data = await self._read(request)
        except ConflictConfigError as exc:
            if self._fallback is None:
                self._settle(request, lambda current: current.failed(request, exc))
                return
            _logger.debug("%s: not configured, using fallback data", self._name)
            demo = self._fallback(request)
            self._settle(
                request,
                lambda current: current.succeeded(request, demo, is_demo=True, notice=self._fallback_notice),
            )
            return
        except (ConflictError, TimeoutError) as exc:
            _logger.debug("%s: read failed: %s", self._name, exc, exc_info=True)
            self._settle(request, lambda current: current.failed(request, exc))
            return
        except Exception as exc:
            # The read itself is buggy; still report it on the view.
            _logger.warning("%s: unexpected read failure", self._name, exc_info=True)
            self._settle(request, lambda current: current.failed(request, exc))
            return

        self._settle(request, lambda current: current.succeeded(request, data))

    def _settle(
        self,
        request: Q,
        build: Callable[[FetchResult[Q, T]], FetchResult[Q, T]],
    ) -> None:
        if not should_apply_result(fetched_for=request, latest=self._latest, closed=self._closed):
            _logger.debug("%s: discarding stale result", self._name)
            return
        self._publish(build(self._result))

    def _publish(self, result: FetchResult[Q, T]) -> None:
        self._result = result
        if self._on_result is None:
            return
        try:
            self._on_result(result)
        except Exception:
            _logger.debug("%s: on_result callback failed", self._name, exc_info=True)
