"""Session-lifetime cache for facet vocabularies."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pyconflict.exceptions import ConflictConfigError, ConflictError
from pyconflict.models.lookups import LookupVocabulary
from pyconflict.models.result import FetchResult

_logger = logging.getLogger(__name__)


class LookupCache:
    """Load the lookup vocabulary once and share it.

    Concurrent :meth:`load` calls await the same in-flight read. A
    successful vocabulary is kept for the lifetime of the cache. A failed
    read is not retried automatically; the next :meth:`load` issues a
    fresh one.
    """

    def __init__(
        self,
        loader: Callable[[], Awaitable[LookupVocabulary]],
        *,
        fallback: Callable[[], LookupVocabulary] | None = None,
        fallback_notice: str | None = None,
    ) -> None:
        self._loader = loader
        self._fallback = fallback
        self._fallback_notice = fallback_notice
        self._state: FetchResult[None, LookupVocabulary] = FetchResult()
        self._task: asyncio.Task[LookupVocabulary] | None = None
        self.reads_issued = 0

    @property
    def state(self) -> FetchResult[None, LookupVocabulary]:
        return self._state

    @property
    def vocabulary(self) -> LookupVocabulary | None:
        return self._state.data

    async def load(self) -> LookupVocabulary:
        """Return the vocabulary, reading it if needed.

        Raises
        ------
        ConflictError
            If the read failed. Every concurrent caller receives the
            same exception.
        """
        if self._state.data is not None:
            return self._state.data
        if self._task is None:
            self._state = self._state.pending(None)
            self._task = asyncio.get_running_loop().create_task(self._load(), name="pyconflict-lookups")
        # shield: a cancelled caller must not cancel the shared read.
        return await asyncio.shield(self._task)

    async def _load(self) -> LookupVocabulary:
        self.reads_issued += 1
        try:
            vocabulary = await self._loader()
        except ConflictConfigError as exc:
            if self._fallback is None:
                self._fail(exc)
                raise
            _logger.debug("Lookups not configured, using fallback vocabulary")
            vocabulary = self._fallback()
            self._state = self._state.succeeded(None, vocabulary, is_demo=True, notice=self._fallback_notice)
            return vocabulary
        except ConflictError as exc:
            self._fail(exc)
            raise
        except Exception as exc:
            _logger.warning("Unexpected lookup load failure", exc_info=True)
            self._fail(exc)
            raise
        self._state = self._state.succeeded(None, vocabulary)
        return vocabulary

    def _fail(self, exc: Exception) -> None:
        _logger.debug("Lookup load failed: %s", exc)
        self._state = self._state.failed(None, exc)
        # Allow an explicit retry to issue a fresh read.
        self._task = None

    def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
