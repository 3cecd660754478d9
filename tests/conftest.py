"""
Pytest configuration and shared fixtures for docconsole tests.
"""

from typing import Optional

import httpx
import pytest
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from docconsole.api.client import ConsoleAPIClient
from docconsole.services.notification_service import Notification, NotificationService
from docconsole.view import IntentDispatcher, View


class RecordingView(View):
    """View double that records everything it is asked to do."""

    def __init__(self):
        self.regions: dict[str, str] = {}
        self.renders: list[tuple[str, str]] = []
        self.notifications: list[Notification] = []
        self.navigations: list[str] = []
        self.reloads = 0

    def render(self, region: str, html: str) -> None:
        self.regions[region] = html
        self.renders.append((region, html))

    def show_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def navigate(self, url: str) -> None:
        self.navigations.append(url)

    def reload(self) -> None:
        self.reloads += 1

    @property
    def last_notification(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None


class FakeConsoleAPI:
    """
    In-memory stand-in for the console API, served through httpx.ASGITransport.
    Records every mutating request so tests can assert on wire bodies.
    """

    def __init__(self):
        self.search_items: list[dict] = []
        self.search_calls: list[dict] = []
        self.releases: dict[str, dict] = {
            "lib-1": {
                "defaultDocsPath": "docs",
                "releases": [
                    {"tagName": "v1.0", "version": "1.0", "docsPath": "docs/1.0", "exists": False},
                ],
            },
        }
        self.release_calls: list[dict] = []
        self.batch_requests: list[dict] = []
        self.sync_requests: list[dict] = []
        self.library_requests: list[tuple[str, Optional[str], Optional[dict]]] = []
        # (status_code, body) to answer with instead of success
        self.failure: Optional[tuple[int, dict]] = None

        self.app = self._build_app()

    def _fail(self) -> Optional[JSONResponse]:
        if self.failure is None:
            return None
        status_code, body = self.failure
        return JSONResponse(status_code=status_code, content=body)

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/api/search")
        async def search(
            query: str,
            mode: str = "hybrid",
            limit: int = 10,
            libraryId: Optional[str] = None,
        ):
            self.search_calls.append(
                {"query": query, "mode": mode, "limit": limit, "libraryId": libraryId}
            )
            return self._fail() or {"items": self.search_items}

        @app.get("/api/libraries/{library_id}/github-releases")
        async def github_releases(library_id: str, limit: int = 20):
            self.release_calls.append({"libraryId": library_id, "limit": limit})
            if library_id not in self.releases:
                return JSONResponse(status_code=404, content={"detail": "Library not found"})
            return self._fail() or self.releases[library_id]

        @app.post("/api/libraries/{library_id}/batch-sync")
        async def batch_sync(library_id: str, request: Request):
            body = await request.json()
            self.batch_requests.append(body)
            return self._fail() or {"message": f"{len(body['versions'])} versions queued"}

        @app.post("/api/libraries/{library_id}/sync")
        async def sync(library_id: str, request: Request):
            body = await request.json()
            self.sync_requests.append(body)
            return self._fail() or JSONResponse(
                status_code=202, content={"id": "sync-1", "status": "PENDING"}
            )

        @app.post("/api/libraries")
        async def create_library(request: Request):
            body = await request.json()
            self.library_requests.append(("POST", None, body))
            return self._fail() or JSONResponse(status_code=201, content={"id": "lib-2", **body})

        @app.put("/api/libraries/{library_id}")
        async def update_library(library_id: str, request: Request):
            body = await request.json()
            self.library_requests.append(("PUT", library_id, body))
            return self._fail() or {"id": library_id, **body}

        @app.delete("/api/libraries/{library_id}")
        async def delete_library(library_id: str):
            self.library_requests.append(("DELETE", library_id, None))
            return self._fail() or Response(status_code=204)

        return app


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def notifier(view: RecordingView) -> NotificationService:
    return NotificationService(sink=view.show_notification, duration=3.0)


@pytest.fixture
def dispatcher(view: RecordingView, notifier: NotificationService) -> IntentDispatcher:
    return IntentDispatcher(view, notifier)


@pytest.fixture
def fake_api() -> FakeConsoleAPI:
    return FakeConsoleAPI()


@pytest.fixture
def api_client(fake_api: FakeConsoleAPI) -> ConsoleAPIClient:
    """Console client wired to the fake API."""
    return ConsoleAPIClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=fake_api.app),
    )


def mock_client(handler) -> ConsoleAPIClient:
    """Console client whose requests are answered by ``handler``."""
    return ConsoleAPIClient(
        base_url="http://testserver",
        transport=httpx.MockTransport(handler),
    )
