"""
Tests for the debounced search controller.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from docconsole.api.client import APIError, ConsoleAPIClient
from docconsole.api.models import SearchMode, SearchQuery, SearchResponse
from docconsole.controllers.search import SearchController
from docconsole.intents import SEARCH_RESULTS_REGION
from docconsole.rendering import SEARCH_ERROR_TEXT, SEARCH_LOADING_TEXT


def results_response(*titles: str) -> SearchResponse:
    return SearchResponse.model_validate({
        "items": [
            {"title": t, "path": f"docs/{t}.md", "content": f"About {t}", "score": 0.9, "chunkIndex": i}
            for i, t in enumerate(titles)
        ],
    })


@pytest.fixture
def mock_api():
    client = Mock(spec=ConsoleAPIClient)
    client.search = AsyncMock(return_value=results_response("Auth"))
    return client


@pytest.fixture
def controller(mock_api, dispatcher) -> SearchController:
    return SearchController(mock_api, dispatcher, debounce_seconds=0.05)


def results_html(view) -> str:
    return view.regions.get(SEARCH_RESULTS_REGION, "")


class TestInputChanged:
    """Tests for keystroke handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", " ", "a", "  b  ", "\tx\n"])
    async def test_short_input_clears_without_request(self, controller, mock_api, view, text):
        view.regions[SEARCH_RESULTS_REGION] = "<p>old results</p>"

        controller.on_input_changed(text)

        # Cleared synchronously
        assert results_html(view) == ""
        await asyncio.sleep(0.1)
        mock_api.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_rapid_keystrokes_issue_one_search(self, controller, mock_api):
        """Only the last keystroke in the quiet period is searched."""
        for text in ["au", "aut", "auth", "auth f", "auth flow"]:
            controller.on_input_changed(text)
            await asyncio.sleep(0.01)

        await asyncio.sleep(0.1)

        assert mock_api.search.call_count == 1
        query = mock_api.search.call_args.args[0]
        assert query.text == "auth flow"

    @pytest.mark.asyncio
    async def test_search_runs_after_quiet_period(self, controller, mock_api, view):
        controller.on_input_changed("  auth  ")
        mock_api.search.assert_not_called()

        await controller.wait_idle()

        mock_api.search.assert_called_once()
        assert mock_api.search.call_args.args[0].text == "auth"
        assert "Auth" in results_html(view)

    @pytest.mark.asyncio
    async def test_short_input_cancels_scheduled_search(self, controller, mock_api):
        controller.on_input_changed("auth")
        controller.on_input_changed("a")

        await asyncio.sleep(0.1)

        mock_api.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_stop_cancels_scheduled_search(self, controller, mock_api):
        controller.on_input_changed("auth")
        controller.stop()

        await asyncio.sleep(0.1)

        mock_api.search.assert_not_called()


class TestSubmit:
    """Tests for explicit form submission."""

    @pytest.mark.asyncio
    async def test_submit_bypasses_debounce(self, controller, mock_api):
        await controller.on_submit("x")

        mock_api.search.assert_called_once()
        assert mock_api.search.call_args.args[0].text == "x"

    @pytest.mark.asyncio
    async def test_submit_empty_does_nothing(self, controller, mock_api):
        await controller.on_submit("   ")
        mock_api.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_replaces_pending_debounce(self, controller, mock_api):
        controller.on_input_changed("auth")
        await controller.on_submit("auth")

        await asyncio.sleep(0.1)

        assert mock_api.search.call_count == 1


class TestSearch:
    """Tests for running a query and rendering the outcome."""

    @pytest.mark.asyncio
    async def test_loading_then_results(self, controller, view):
        await controller.search(SearchQuery(text="auth"))

        htmls = [html for region, html in view.renders if region == SEARCH_RESULTS_REGION]
        assert SEARCH_LOADING_TEXT in htmls[0]
        assert "Auth" in htmls[-1]
        assert "docs/Auth.md" in htmls[-1]
        assert "Chunk: 0" in htmls[-1]

    @pytest.mark.asyncio
    async def test_results_keep_server_order(self, controller, mock_api, view):
        mock_api.search.return_value = results_response("Zeta", "Alpha", "Mid")

        await controller.search(SearchQuery(text="x"))

        html = results_html(view)
        assert html.index("Zeta") < html.index("Alpha") < html.index("Mid")

    @pytest.mark.asyncio
    async def test_error_renders_message(self, controller, mock_api, view, caplog):
        mock_api.search.side_effect = APIError("GET /api/search failed: connection refused")

        with caplog.at_level("ERROR"):
            await controller.search(SearchQuery(text="auth"))

        assert SEARCH_ERROR_TEXT in results_html(view)
        assert "Search error" in caplog.text

    @pytest.mark.asyncio
    async def test_controller_usable_after_error(self, controller, mock_api, view):
        mock_api.search.side_effect = [APIError("boom"), results_response("Retry")]

        await controller.on_submit("auth")
        await controller.on_submit("auth")

        assert "Retry" in results_html(view)

    @pytest.mark.asyncio
    async def test_query_carries_mode_filter_and_limit(self, mock_api, dispatcher):
        controller = SearchController(
            mock_api, dispatcher, mode="keyword", library_id="lib-1", limit=5,
        )

        await controller.on_submit("auth")

        query = mock_api.search.call_args.args[0]
        assert query.mode == SearchMode.KEYWORD
        assert query.library_id == "lib-1"
        assert query.limit == 5

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, mock_api, dispatcher, view):
        """A slow earlier search must not overwrite a newer one."""
        slow_gate = asyncio.Event()

        async def fake_search(query):
            if query.text == "slow":
                await slow_gate.wait()
                return results_response("Slow")
            return results_response("Fast")

        mock_api.search = AsyncMock(side_effect=fake_search)
        controller = SearchController(mock_api, dispatcher)

        slow = asyncio.create_task(controller.on_submit("slow"))
        await asyncio.sleep(0)
        await controller.on_submit("fast")
        slow_gate.set()
        await slow

        assert "Fast" in results_html(view)
        assert "Slow" not in results_html(view)

    @pytest.mark.asyncio
    async def test_clearing_discards_in_flight_results(self, mock_api, dispatcher, view):
        gate = asyncio.Event()

        async def fake_search(query):
            await gate.wait()
            return results_response("Late")

        mock_api.search = AsyncMock(side_effect=fake_search)
        controller = SearchController(mock_api, dispatcher)

        task = asyncio.create_task(controller.on_submit("auth"))
        await asyncio.sleep(0)
        controller.on_input_changed("")
        gate.set()
        await task

        assert results_html(view) == ""


class TestAgainstFakeAPI:
    """Search flow through the real HTTP client."""

    @pytest.mark.asyncio
    async def test_keyword_search_without_results_escapes_query(self, api_client, dispatcher, view, fake_api):
        controller = SearchController(api_client, dispatcher, mode="keyword")

        await controller.on_submit("auth<script>alert(1)</script>")

        html = results_html(view)
        assert "No results found for" in html
        assert "<script>" not in html
        assert "auth&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert fake_api.search_calls == [{
            "query": "auth<script>alert(1)</script>",
            "mode": "keyword",
            "limit": 10,
            "libraryId": None,
        }]

    @pytest.mark.asyncio
    async def test_no_results_message_for_plain_query(self, api_client, dispatcher, view):
        controller = SearchController(api_client, dispatcher, mode="keyword")

        await controller.on_submit("auth")

        assert 'No results found for "auth"' in results_html(view)

    @pytest.mark.asyncio
    async def test_results_are_escaped(self, api_client, dispatcher, view, fake_api):
        fake_api.search_items = [{
            "title": "<b>Tokens</b>",
            "path": "docs/auth.md",
            "content": "Use <img src=x onerror=alert(1)>",
            "score": 0.87654,
            "chunkIndex": None,
        }]
        controller = SearchController(api_client, dispatcher, library_id="lib-1")

        await controller.on_submit("tokens")

        html = results_html(view)
        assert "&lt;b&gt;Tokens&lt;/b&gt;" in html
        assert "<img" not in html
        assert "Score: 0.88" in html
        assert "Chunk:" not in html
        assert fake_api.search_calls[0]["libraryId"] == "lib-1"

    @pytest.mark.asyncio
    async def test_server_error_renders_error(self, api_client, dispatcher, view, fake_api):
        fake_api.failure = (500, {"detail": "index offline"})
        controller = SearchController(api_client, dispatcher)

        await controller.on_submit("auth")

        assert SEARCH_ERROR_TEXT in results_html(view)
