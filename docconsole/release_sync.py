"""
Release sync state machine.

The modal's state is a frozen ModalState record. Every operation is a pure
function taking the current state and returning a Transition: the next
state plus the intents (fetch, submit, notify, reload) the caller must carry
out. Network results are fed back in through releases_loaded /
releases_failed and sync_succeeded / sync_failed.

    closed -> loading -> ready <-> syncing -> closed
    (a failed sync goes back to ready, a failed load lands in ready with an error)
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from docconsole.api.models import (
    BatchSyncRequest,
    BatchSyncVersion,
    GitHubRelease,
    ReleasesResponse,
)
from docconsole.config import config
from docconsole.intents import FetchReleases, Intent, Notify, Reload, SubmitBatchSync

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load GitHub releases, please try again later"
NO_SELECTION_MESSAGE = "Select at least one version"
SYNC_STARTED_MESSAGE = "Sync started"
SYNC_FAILED_MESSAGE = "Sync failed, please try again later"


class ModalPhase(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    READY = "ready"
    SYNCING = "syncing"


@dataclass(frozen=True)
class ReleaseCandidate:
    """One upstream version offered for sync. ``selected`` is client-only."""
    tag_name: str
    version: str
    docs_path: str
    exists: bool = False
    selected: bool = False
    name: Optional[str] = None
    published_at: Optional[datetime] = None

    def __post_init__(self):
        if self.exists and self.selected:
            raise ValueError(f"Release {self.tag_name} is already indexed and cannot be selected")

    @classmethod
    def from_release(cls, release: GitHubRelease) -> "ReleaseCandidate":
        return cls(
            tag_name=release.tag_name,
            version=release.version,
            docs_path=release.docs_path,
            exists=release.exists,
            name=release.display_name,
            published_at=release.published_at,
        )

    @property
    def selectable(self) -> bool:
        return not self.exists

    def with_selected(self, selected: bool) -> "ReleaseCandidate":
        # Indexed versions stay unselected whatever is asked
        if self.exists or self.selected == selected:
            return self
        return replace(self, selected=selected)

    def to_batch_version(self) -> BatchSyncVersion:
        return BatchSyncVersion(
            tag_name=self.tag_name,
            version=self.version,
            docs_path=self.docs_path,
        )


@dataclass(frozen=True)
class ModalState:
    phase: ModalPhase = ModalPhase.CLOSED
    library_id: Optional[str] = None
    releases: tuple[ReleaseCandidate, ...] = ()
    docs_path: str = "docs"
    error: Optional[str] = None
    # Bumped on every open; fetch results carrying an older value are stale
    generation: int = 0

    @property
    def selectable_releases(self) -> list[ReleaseCandidate]:
        return [r for r in self.releases if r.selectable]

    @property
    def selected_releases(self) -> list[ReleaseCandidate]:
        return [r for r in self.releases if r.selected and r.selectable]

    @property
    def selected_count(self) -> int:
        return len(self.selected_releases)

    @property
    def all_selectable_selected(self) -> bool:
        selectable = self.selectable_releases
        return len(selectable) > 0 and all(r.selected for r in selectable)


@dataclass(frozen=True)
class Transition:
    state: ModalState
    intents: tuple[Intent, ...] = ()


def open_modal(
    state: ModalState,
    library_id: Optional[str],
    limit: Optional[int] = None,
) -> Transition:
    """Start loading release candidates for ``library_id``."""
    if state.phase != ModalPhase.CLOSED:
        logger.debug(f"Ignoring open while modal is {state.phase.value}")
        return Transition(state)

    if not library_id:
        # Markup/wiring defect, not something the user caused
        logger.error("Library ID not found, cannot open release sync modal")
        return Transition(state)

    generation = state.generation + 1
    loading = ModalState(
        phase=ModalPhase.LOADING,
        library_id=library_id,
        generation=generation,
    )
    fetch = FetchReleases(
        library_id=library_id,
        limit=limit or config.RELEASES_FETCH_LIMIT,
        generation=generation,
    )
    return Transition(loading, (fetch,))


def _is_current_fetch(state: ModalState, generation: int) -> bool:
    if state.phase != ModalPhase.LOADING or state.generation != generation:
        logger.debug(
            f"Discarding stale release fetch (generation {generation}, "
            f"modal is {state.phase.value} at generation {state.generation})"
        )
        return False
    return True


def releases_loaded(
    state: ModalState,
    generation: int,
    response: ReleasesResponse,
    default_docs_path: Optional[str] = None,
) -> Transition:
    if not _is_current_fetch(state, generation):
        return Transition(state)

    releases = tuple(ReleaseCandidate.from_release(r) for r in response.releases)
    return Transition(replace(
        state,
        phase=ModalPhase.READY,
        releases=releases,
        docs_path=response.default_docs_path or default_docs_path or config.DEFAULT_DOCS_PATH,
        error=None,
    ))


def releases_failed(
    state: ModalState,
    generation: int,
    message: str = LOAD_FAILED_MESSAGE,
) -> Transition:
    if not _is_current_fetch(state, generation):
        return Transition(state)

    return Transition(replace(state, phase=ModalPhase.READY, releases=(), error=message))


def close_modal(state: ModalState) -> Transition:
    """Close and discard candidates. Refused while a sync is being submitted."""
    if state.phase == ModalPhase.SYNCING:
        logger.debug("Ignoring close while syncing")
        return Transition(state)
    if state.phase == ModalPhase.CLOSED:
        return Transition(state)
    return Transition(ModalState(generation=state.generation))


def toggle_select_all(state: ModalState) -> Transition:
    """Select every selectable candidate, or deselect them all if all are selected."""
    if state.phase != ModalPhase.READY or not state.selectable_releases:
        return Transition(state)

    should_select = not state.all_selectable_selected
    releases = tuple(r.with_selected(should_select) for r in state.releases)
    return Transition(replace(state, releases=releases))


def toggle_release(state: ModalState, tag_name: str) -> Transition:
    """Flip the selection of a single candidate. Indexed candidates are left alone."""
    if state.phase != ModalPhase.READY:
        return Transition(state)

    releases = tuple(
        r.with_selected(not r.selected) if r.tag_name == tag_name else r
        for r in state.releases
    )
    return Transition(replace(state, releases=releases))


def build_batch_request(state: ModalState) -> BatchSyncRequest:
    """Batch request for the selected candidates, in list order."""
    return BatchSyncRequest(
        versions=[r.to_batch_version() for r in state.selected_releases],
        default_docs_path=state.docs_path,
    )


def start_sync(state: ModalState) -> Transition:
    if state.phase != ModalPhase.READY:
        logger.debug(f"Ignoring sync request while modal is {state.phase.value}")
        return Transition(state)

    if state.selected_count == 0:
        return Transition(state, (Notify(NO_SELECTION_MESSAGE, "error"),))

    submit = SubmitBatchSync(library_id=state.library_id, request=build_batch_request(state))
    return Transition(replace(state, phase=ModalPhase.SYNCING), (submit,))


def sync_succeeded(
    state: ModalState,
    message: Optional[str] = None,
    reload_delay: Optional[float] = None,
) -> Transition:
    if state.phase != ModalPhase.SYNCING:
        return Transition(state)

    delay = config.RELOAD_DELAY_SECONDS if reload_delay is None else reload_delay
    return Transition(
        ModalState(generation=state.generation),
        (Notify(message or SYNC_STARTED_MESSAGE, "success"), Reload(delay=delay)),
    )


def sync_failed(state: ModalState, detail: Optional[str] = None) -> Transition:
    if state.phase != ModalPhase.SYNCING:
        return Transition(state)

    return Transition(
        replace(state, phase=ModalPhase.READY),
        (Notify(detail or SYNC_FAILED_MESSAGE, "error"),),
    )
