"""SearchDebouncer: runs session searches after the user stops typing.

Each ``submit`` cancels the pending timer and schedules a new one, so at most
one search runs per quiet period and it always uses the latest query.  Timers
live on the running asyncio event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from locale_editor.result import SearchResult
    from locale_editor.session import TranslationSession

__all__ = ["SearchDebouncer"]


class SearchDebouncer:
    """Debounced query box feeding ``TranslationSession.search``.

    Args:
        session:  Session to search.
        callback: Receives ``(query, results)`` once the delay elapses.
        delay:    Quiet period in seconds; defaults to
                  ``session.config.search_debounce_seconds``.
    """

    def __init__(
        self,
        session: TranslationSession,
        callback: Callable[[str, list[SearchResult]], None],
        delay: float | None = None,
    ) -> None:
        self._session = session
        self._callback = callback
        self._delay = delay if delay is not None else session.config.search_debounce_seconds
        self._handle: asyncio.TimerHandle | None = None
        self._pending: str | None = None

    @property
    def pending(self) -> str | None:
        """The query waiting to be searched, if any."""
        return self._pending

    def submit(self, query: str) -> None:
        """Schedule ``query``; must be called from a running event loop."""
        self.cancel()
        self._pending = query
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self.flush)

    def cancel(self) -> None:
        """Drop the pending query without searching."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None

    def flush(self) -> None:
        """Search the pending query now, if there is one."""
        query = self._pending
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None
        if query is not None:
            self._callback(query, self._session.search(query))
