"""
Incremental search controller.
Debounces keystrokes into search requests and renders the results area.
"""

import asyncio
import logging
from typing import Optional

from docconsole.api.client import APIError, ConsoleAPIClient
from docconsole.api.models import SearchMode, SearchQuery
from docconsole.config import config
from docconsole.intents import SEARCH_RESULTS_REGION, Render
from docconsole.rendering import render_empty, render_error, render_loading, render_results
from docconsole.view import IntentDispatcher

logger = logging.getLogger(__name__)


class SearchController:
    """
    Search box controller with debouncing.

    At most one debounced search is scheduled at a time: each keystroke
    cancels the pending task and schedules a new one. Every search takes a
    generation number, and a response that comes back after a newer search
    (or after the box was cleared) is discarded instead of rendered.
    """

    def __init__(
        self,
        client: ConsoleAPIClient,
        dispatcher: IntentDispatcher,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None,
        limit: Optional[int] = None,
        mode: Optional[str] = None,
        library_id: Optional[str] = None,
    ):
        self.client = client
        self.dispatcher = dispatcher
        self.debounce_seconds = (
            config.SEARCH_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self.min_query_length = min_query_length or config.SEARCH_MIN_QUERY_LENGTH
        self.limit = limit or config.SEARCH_LIMIT
        self.mode = SearchMode((mode or config.SEARCH_DEFAULT_MODE).lower())
        self.library_id = library_id

        self._pending: Optional[asyncio.Task] = None
        self._running: set[asyncio.Task] = set()
        self._generation = 0

    def on_input_changed(self, raw_text: str) -> None:
        """Handle a keystroke in the search box. Must run inside the event loop."""
        self._cancel_pending()

        text = raw_text.strip()
        if len(text) < self.min_query_length:
            # Too short to be a query: clear, and drop anything still in flight
            self._generation += 1
            self._render("")
            return

        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._debounced(text))

    async def on_submit(self, raw_text: str) -> None:
        """Search immediately, skipping the debounce."""
        self._cancel_pending()

        text = raw_text.strip()
        if not text:
            return
        await self.search(self.build_query(text))

    def build_query(self, text: str) -> SearchQuery:
        return SearchQuery(
            text=text,
            mode=self.mode,
            library_id=self.library_id or None,
            limit=self.limit,
        )

    async def search(self, query: SearchQuery) -> None:
        """Run ``query`` and render its outcome. Failures are rendered, not raised."""
        self._generation += 1
        generation = self._generation

        self._render(render_loading())

        try:
            response = await self.client.search(query)
        except APIError as e:
            logger.error(f"Search error: {e}")
            if self._is_current(generation, query):
                self._render(render_error())
            return

        if not self._is_current(generation, query):
            return

        if response.items:
            self._render(render_results(response.items))
        else:
            self._render(render_empty(query.text))

    async def wait_idle(self) -> None:
        """Wait for the scheduled search (if any) and in-flight searches to finish."""
        while self._pending is not None or self._running:
            tasks = list(self._running)
            if self._pending is not None:
                tasks.append(self._pending)
            await asyncio.gather(*tasks, return_exceptions=True)

    def stop(self) -> None:
        """Cancel the scheduled search."""
        self._cancel_pending()

    async def _debounced(self, text: str) -> None:
        try:
            await asyncio.sleep(self.debounce_seconds)
        except asyncio.CancelledError:
            logger.debug(f"Superseded search for '{text}'")
            raise

        # Past the quiet period; newer keystrokes no longer cancel this task
        task = asyncio.current_task()
        if self._pending is task:
            self._pending = None
        self._running.add(task)
        try:
            await self.search(self.build_query(text))
        finally:
            self._running.discard(task)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _is_current(self, generation: int, query: SearchQuery) -> bool:
        if generation != self._generation:
            logger.debug(f"Discarding stale results for '{query.text}'")
            return False
        return True

    def _render(self, html: str) -> None:
        self.dispatcher.dispatch((Render(SEARCH_RESULTS_REGION, html),))
