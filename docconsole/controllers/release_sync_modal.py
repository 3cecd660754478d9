"""
Release sync modal controller.

Owns a ModalState and runs the release_sync reducers, performing the
fetch/submit intents against the console API and handing the rest to the
view dispatcher.
"""

import logging
from typing import Optional

from docconsole.api.client import APIError, ConsoleAPIClient
from docconsole.config import config
from docconsole.intents import FetchReleases, SubmitBatchSync
from docconsole.release_sync import (
    ModalState,
    Transition,
    close_modal,
    open_modal,
    releases_failed,
    releases_loaded,
    start_sync,
    sync_failed,
    sync_succeeded,
    toggle_release,
    toggle_select_all,
)
from docconsole.view import IntentDispatcher

logger = logging.getLogger(__name__)


class ReleaseSyncModal:
    """
    Batch sync of a library's GitHub releases.

    The modal phase doubles as the mutual-exclusion gate: a sync can only be
    started from ``ready`` and the modal cannot be closed while ``syncing``.
    """

    def __init__(
        self,
        client: ConsoleAPIClient,
        dispatcher: IntentDispatcher,
        fetch_limit: Optional[int] = None,
        reload_delay: Optional[float] = None,
    ):
        self.client = client
        self.dispatcher = dispatcher
        self.fetch_limit = fetch_limit or config.RELEASES_FETCH_LIMIT
        self.reload_delay = config.RELOAD_DELAY_SECONDS if reload_delay is None else reload_delay
        self._state = ModalState()

    @property
    def state(self) -> ModalState:
        return self._state

    @property
    def selected_count(self) -> int:
        return self._state.selected_count

    @property
    def all_selectable_selected(self) -> bool:
        return self._state.all_selectable_selected

    async def open(self, library_id: Optional[str]) -> None:
        """Open for ``library_id`` (taken from the triggering element) and load releases."""
        await self._apply(open_modal(self._state, library_id, self.fetch_limit))

    def close(self) -> None:
        self._apply_sync(close_modal(self._state))

    def toggle_select_all(self) -> None:
        self._apply_sync(toggle_select_all(self._state))

    def toggle_release(self, tag_name: str) -> None:
        self._apply_sync(toggle_release(self._state, tag_name))

    async def start_sync(self) -> None:
        await self._apply(start_sync(self._state))

    def _apply_sync(self, transition: Transition) -> None:
        self._state = transition.state
        self.dispatcher.dispatch(transition.intents)

    async def _apply(self, transition: Transition) -> None:
        self._state = transition.state
        for intent in transition.intents:
            if isinstance(intent, FetchReleases):
                await self._fetch(intent)
            elif isinstance(intent, SubmitBatchSync):
                await self._submit(intent)
            else:
                self.dispatcher.dispatch((intent,))

    async def _fetch(self, intent: FetchReleases) -> None:
        try:
            response = await self.client.list_releases(intent.library_id, limit=intent.limit)
        except APIError as e:
            logger.error(f"Failed to load GitHub releases for {intent.library_id}: {e}")
            transition = releases_failed(self._state, intent.generation)
        except BaseException:
            # Cancelled or crashed mid-fetch: leave loading before propagating
            logger.warning(f"Release fetch for {intent.library_id} aborted")
            self._apply_sync(releases_failed(self._state, intent.generation))
            raise
        else:
            logger.info(
                f"Loaded {len(response.releases)} release(s) for library {intent.library_id}"
            )
            transition = releases_loaded(self._state, intent.generation, response)
        await self._apply(transition)

    async def _submit(self, intent: SubmitBatchSync) -> None:
        versions = [v.version for v in intent.request.versions]
        logger.info(f"Submitting batch sync for {intent.library_id}: {versions}")
        try:
            response = await self.client.batch_sync(intent.library_id, intent.request)
        except APIError as e:
            logger.error(f"Batch sync failed for {intent.library_id}: {e}")
            transition = sync_failed(self._state, e.detail)
        except BaseException:
            # close() refuses while syncing, so syncing must never outlive the request
            logger.warning(f"Batch sync for {intent.library_id} aborted")
            self._apply_sync(sync_failed(self._state))
            raise
        else:
            transition = sync_succeeded(self._state, response.message, self.reload_delay)
        await self._apply(transition)
