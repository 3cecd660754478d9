"""
Pydantic models for the console API request/response types.

All models are re-exported here for convenience:
    from docconsole.api.models import SearchQuery, ReleasesResponse, ...
"""

from docconsole.api.models.common import (
    WireModel,
    MessageResponse,
    ErrorResponse,
)
from docconsole.api.models.search import (
    SearchMode,
    SearchQuery,
    SearchResultItem,
    SearchResponse,
)
from docconsole.api.models.releases import (
    GitHubRelease,
    ReleasesResponse,
    BatchSyncVersion,
    BatchSyncRequest,
)
from docconsole.api.models.libraries import (
    LibraryPayload,
    SyncVersionRequest,
)

__all__ = [
    # Common
    "WireModel",
    "MessageResponse",
    "ErrorResponse",
    # Search
    "SearchMode",
    "SearchQuery",
    "SearchResultItem",
    "SearchResponse",
    # Releases
    "GitHubRelease",
    "ReleasesResponse",
    "BatchSyncVersion",
    "BatchSyncRequest",
    # Libraries
    "LibraryPayload",
    "SyncVersionRequest",
]
