"""
Release-sync API models: GitHub release candidates and batch sync requests.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from docconsole.api.models.common import WireModel


class GitHubRelease(WireModel):
    """One upstream release as reported by the console API."""
    tag_name: str
    version: str
    docs_path: str
    exists: bool = False
    name: Optional[str] = None
    published_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        # Releases published without a title only carry the tag
        return self.name or self.tag_name


class ReleasesResponse(WireModel):
    """Response for GET /api/libraries/{id}/github-releases."""
    default_docs_path: Optional[str] = None
    releases: list[GitHubRelease] = Field(default_factory=list)


class BatchSyncVersion(WireModel):
    """A version to sync, with its precomputed documentation path."""
    tag_name: str
    version: str
    docs_path: str


class BatchSyncRequest(WireModel):
    """Body for POST /api/libraries/{id}/batch-sync."""
    versions: list[BatchSyncVersion]
    default_docs_path: str
