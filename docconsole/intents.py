"""
Side-effect intents returned by controllers and reducers.

Reducers stay free of I/O and rendering: they return a new state plus a
list of these values, and the caller applies them.
"""

from dataclasses import dataclass
from typing import Union

from docconsole.api.models import BatchSyncRequest

SEARCH_RESULTS_REGION = "search-results"


@dataclass(frozen=True)
class Render:
    """Replace the content of a view region."""
    region: str
    html: str


@dataclass(frozen=True)
class Notify:
    message: str
    level: str = "info"


@dataclass(frozen=True)
class Navigate:
    url: str
    delay: float = 0.0


@dataclass(frozen=True)
class Reload:
    """Reload the whole view, e.g. so the library page shows queued syncs."""
    delay: float = 0.0


@dataclass(frozen=True)
class FetchReleases:
    library_id: str
    limit: int
    generation: int


@dataclass(frozen=True)
class SubmitBatchSync:
    library_id: str
    request: BatchSyncRequest


ViewIntent = Union[Render, Notify, Navigate, Reload]
Intent = Union[Render, Notify, Navigate, Reload, FetchReleases, SubmitBatchSync]
