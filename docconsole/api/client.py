"""
Console API client.
Thin async wrapper over the console's HTTP contract (search, releases, sync, library CRUD).
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from docconsole.api.models import (
    BatchSyncRequest,
    ErrorResponse,
    LibraryPayload,
    MessageResponse,
    ReleasesResponse,
    SearchQuery,
    SearchResponse,
    SyncVersionRequest,
)
from docconsole.config import Config

logger = logging.getLogger(__name__)


class APIError(Exception):
    """
    Raised for any failed console API call.

    ``detail`` is only set when the server answered with a string ``detail``
    field; callers fall back to their own message otherwise.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Extract the ``detail`` of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        return ErrorResponse.model_validate(body).detail
    except ValidationError:
        # detail present but not a string
        return None


def _library_path(library_id: str, *rest: str) -> str:
    """Path under /api/libraries with the id quoted as a single segment."""
    return "/".join(["/api/libraries", quote(library_id, safe=""), *rest])


class ConsoleAPIClient:
    """Async client for the documentation console API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        client_config = Config.get_client_config()
        headers = dict(client_config["headers"])
        if api_key:
            headers["X-API-Key"] = api_key

        self.base_url = (base_url or client_config["base_url"]).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or client_config["timeout"],
            headers=headers,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Returns an empty dict for bodiless success responses.

        Raises:
            APIError: On transport failure, non-2xx status or malformed JSON.
        """
        try:
            response = await self.client.request(method, path, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise APIError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise APIError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                detail=_error_detail(response),
            )

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"{method} {path} returned a malformed body",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _parse(model, data: Any, what: str):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Unexpected {what} payload: {e.error_count()} error(s)") from e

    async def search(self, query: SearchQuery) -> SearchResponse:
        """Run a search against the indexed documentation."""
        data = await self._request("GET", "/api/search", params=query.to_params())
        return self._parse(SearchResponse, data, "search")

    async def list_releases(self, library_id: str, limit: int = 20) -> ReleasesResponse:
        """List candidate GitHub releases for a library."""
        data = await self._request(
            "GET",
            _library_path(library_id, "github-releases"),
            params={"limit": limit},
        )
        return self._parse(ReleasesResponse, data, "releases")

    async def batch_sync(self, library_id: str, request: BatchSyncRequest) -> MessageResponse:
        """Queue a sync for several versions at once."""
        data = await self._request(
            "POST",
            _library_path(library_id, "batch-sync"),
            json=request.to_wire(),
        )
        return self._parse(MessageResponse, data, "batch sync")

    async def sync_version(self, library_id: str, version: str) -> dict:
        """Trigger a sync of a single version."""
        body = SyncVersionRequest(version=version).to_wire()
        return await self._request("POST", _library_path(library_id, "sync"), json=body)

    async def create_library(self, payload: LibraryPayload) -> dict:
        return await self._request("POST", "/api/libraries", json=payload.to_wire())

    async def update_library(self, library_id: str, payload: LibraryPayload) -> dict:
        return await self._request("PUT", _library_path(library_id), json=payload.to_wire())

    async def delete_library(self, library_id: str) -> None:
        await self._request("DELETE", _library_path(library_id))

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
