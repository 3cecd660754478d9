"""
Search-related API models: query parameters and ranked result items.
"""

from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from docconsole.api.models.common import WireModel


class SearchMode(str, Enum):
    """Retrieval strategy used by the search backend."""
    HYBRID = "hybrid"
    KEYWORD = "keyword"
    SEMANTIC = "semantic"


class SearchQuery(WireModel):
    """A single search request. Built per request, never stored."""
    text: str = Field(..., min_length=1)
    mode: SearchMode = SearchMode.HYBRID
    library_id: Optional[str] = None
    limit: int = Field(10, ge=1)

    def to_params(self) -> dict:
        """Query-string parameters for GET /api/search."""
        params = {"query": self.text, "mode": self.mode.value, "limit": self.limit}
        if self.library_id:
            params["libraryId"] = self.library_id
        return params


class SearchResultItem(WireModel):
    """Single search hit, in server relevance order."""
    model_config = ConfigDict(frozen=True)

    title: str
    path: str = ""
    content: str = ""
    score: float = 0.0
    chunk_index: Optional[int] = None


class SearchResponse(WireModel):
    """Search results response."""
    items: list[SearchResultItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _null_items_as_empty(cls, value):
        return [] if value is None else value
