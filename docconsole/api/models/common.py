"""
Shared wire-model base and generic response envelopes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for console API payloads (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Serialize with wire aliases, ready for a JSON body."""
        return self.model_dump(by_alias=True, mode="json")


class MessageResponse(WireModel):
    """Success body carrying a human-readable message."""
    message: Optional[str] = None


class ErrorResponse(WireModel):
    """Error body. ``detail`` is optional on the wire."""
    detail: Optional[str] = None
