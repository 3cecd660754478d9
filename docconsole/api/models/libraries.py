"""
Library CRUD API models.
"""

from typing import Optional

from pydantic import Field

from docconsole.api.models.common import WireModel


class LibraryPayload(WireModel):
    """Body for creating or updating a library."""
    name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    source_type: Optional[str] = None
    source_url: Optional[str] = None
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class SyncVersionRequest(WireModel):
    """Body for POST /api/libraries/{id}/sync."""
    version: str = Field(..., min_length=1)
