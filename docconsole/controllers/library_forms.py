"""
Library form controller: create/edit, delete and single-version sync.
"""

import logging
from typing import Callable, Mapping, Optional

from docconsole.api.client import APIError, ConsoleAPIClient
from docconsole.api.models import LibraryPayload
from docconsole.config import config
from docconsole.intents import Navigate, Notify, Reload
from docconsole.view import IntentDispatcher

logger = logging.getLogger(__name__)

LIBRARIES_URL = "/libraries"

UNEXPECTED_ERROR_MESSAGE = "An error occurred, please try again later"


def serialize_form(fields: Mapping[str, Optional[str]]) -> LibraryPayload:
    """Build a library payload from raw form fields. Tags are comma separated."""
    raw_tags = fields.get("tags") or ""
    return LibraryPayload(
        name=fields.get("name"),
        display_name=fields.get("displayName"),
        description=fields.get("description"),
        source_type=fields.get("sourceType"),
        source_url=fields.get("sourceUrl"),
        category=fields.get("category"),
        tags=[t.strip() for t in raw_tags.split(",") if t.strip()],
    )


class LibraryFormController:
    """One-shot request/response handlers for the library pages."""

    def __init__(
        self,
        client: ConsoleAPIClient,
        dispatcher: IntentDispatcher,
        navigate_delay: Optional[float] = None,
        reload_delay: Optional[float] = None,
    ):
        self.client = client
        self.dispatcher = dispatcher
        self.navigate_delay = (
            config.NAVIGATE_DELAY_SECONDS if navigate_delay is None else navigate_delay
        )
        self.reload_delay = config.RELOAD_DELAY_SECONDS if reload_delay is None else reload_delay

    async def submit_library(
        self,
        fields: Mapping[str, Optional[str]],
        library_id: Optional[str] = None,
    ) -> bool:
        """Create a library, or update ``library_id`` when given."""
        is_edit = library_id is not None
        payload = serialize_form(fields)

        try:
            if is_edit:
                await self.client.update_library(library_id, payload)
            else:
                await self.client.create_library(payload)
        except APIError as e:
            logger.error(f"Library form submit failed: {e}")
            self._failed(e, "Operation failed")
            return False

        message = "Library updated" if is_edit else "Library created"
        self.dispatcher.dispatch((
            Notify(message, "success"),
            Navigate(LIBRARIES_URL, delay=self.navigate_delay),
        ))
        return True

    async def delete_library(
        self,
        library_id: str,
        library_name: Optional[str] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> bool:
        """Delete a library after the user confirms."""
        name = library_name or "this library"
        prompt = f"Delete {name}? This cannot be undone."
        if confirm is not None and not confirm(prompt):
            return False

        try:
            await self.client.delete_library(library_id)
        except APIError as e:
            logger.error(f"Delete error: {e}")
            self._failed(e, "Delete failed")
            return False

        self.dispatcher.dispatch((
            Notify("Library deleted", "success"),
            Navigate(LIBRARIES_URL, delay=self.navigate_delay),
        ))
        return True

    async def sync_version(self, library_id: str, version: Optional[str]) -> bool:
        """Queue a sync for a single version. An empty version does nothing."""
        if not version or not version.strip():
            return False

        try:
            await self.client.sync_version(library_id, version.strip())
        except APIError as e:
            logger.error(f"Sync error: {e}")
            self._failed(e, "Sync failed")
            return False

        self.dispatcher.dispatch((
            Notify("Sync started", "success"),
            Reload(delay=self.reload_delay),
        ))
        return True

    def _failed(self, error: APIError, default: str) -> None:
        # No status code means the request never got an answer
        if error.status_code is None:
            message = UNEXPECTED_ERROR_MESSAGE
        else:
            message = error.detail or default
        self.dispatcher.dispatch((Notify(message, "error"),))
