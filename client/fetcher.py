"""
Debounced suggestion fetching for the search box.

One keystroke → submit(raw). Within a quiet window of `wait` seconds only the
latest input is dispatched (trailing debounce). Each dispatch gets a
generation number; a response, or failure, from any generation except the
latest is dropped without touching state, so a slow early request can never
overwrite the suggestions for newer input.

Empty input clears the suggestions at once, without a request and without
waiting. close() cancels the pending trigger and the in-flight requests and
drops anything that still arrives.

Public API:
    DebouncedSuggestionFetcher(transport, scheduler, wait, on_change)
    .submit(raw)      .clear()      .close()
    .suggestions      .loading
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import TypeAdapter

from client.normalizer import normalize
from client.scheduler import Handle, LoopScheduler, Scheduler
from grades.models import Suggestion

log = logging.getLogger(__name__)

DEBOUNCE_WAIT = 0.1   # seconds

Transport = Callable[[str], Awaitable[list]]

_suggestions = TypeAdapter(list[Suggestion])


class DebouncedSuggestionFetcher:
    def __init__(
        self,
        transport: Transport,
        scheduler: Scheduler | None = None,
        wait: float = DEBOUNCE_WAIT,
        on_change: Callable[["DebouncedSuggestionFetcher"], None] | None = None,
    ):
        self.transport = transport
        self.scheduler = scheduler or LoopScheduler()
        self.wait = wait
        self.on_change = on_change

        self.suggestions: list[Suggestion] = []
        self.loading = False
        self.closed = False

        self._pending: Handle | None = None
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def submit(self, raw: str) -> None:
        if self.closed:
            return
        if len(raw) == 0:
            self.clear()
            return

        self._cancel_pending()
        self._pending = self.scheduler.schedule(lambda: self._dispatch(raw), self.wait)

    def clear(self) -> None:
        """Empty the list now and forget any pending or in-flight request."""
        self._cancel_pending()
        self._generation += 1
        self.suggestions = []
        self.loading = False
        self._changed()

    def close(self) -> None:
        """Teardown: nothing scheduled or in flight may touch state afterwards."""
        self.closed = True
        self._cancel_pending()
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _dispatch(self, raw: str) -> None:
        self._pending = None
        if self.closed:
            return
        if not normalize(raw):
            self.clear()
            return
        self._generation += 1
        task = asyncio.get_running_loop().create_task(self._fetch(raw, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, raw: str, generation: int) -> None:
        self.loading = True
        self._changed()
        try:
            data = await self.transport(normalize(raw))
            suggestions = _suggestions.validate_python(data)
        except Exception:
            log.exception("Error fetching suggestions for %r", raw)
            if self._generation == generation:
                self.suggestions = []
        else:
            if self._generation == generation:
                self.suggestions = suggestions
            else:
                log.debug("Dropped stale suggestions for %r", raw)
        finally:
            if self._generation == generation:
                self.loading = False
                self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
