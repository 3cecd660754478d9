"""
HTML fragments for the search results area and notifications.
All user- or server-supplied text goes through escape_html.
"""

import html
from datetime import datetime
from typing import Optional

from docconsole.api.models import SearchResultItem

SEARCH_LOADING_TEXT = "Searching..."
SEARCH_ERROR_TEXT = "Search failed, please try again later"
SEARCH_EMPTY_HINT = "Try other keywords or adjust the search mode"

_NOTIFICATION_ICONS = {
    "success": "check",
    "error": "x",
    "info": "info",
}


def escape_html(text: Optional[str]) -> str:
    """Escape text for safe inclusion in markup. None/empty becomes ''."""
    if not text:
        return ""
    return html.escape(str(text), quote=True)


def render_loading() -> str:
    return (
        '<div class="flex items-center justify-center py-8">'
        '<div class="spinner"></div>'
        f'<span class="ml-3 text-secondary">{SEARCH_LOADING_TEXT}</span>'
        "</div>"
    )


def render_result_item(item: SearchResultItem, index: int) -> str:
    """Render one search hit. ``index`` staggers the fade-in animation."""
    chunk = ""
    if item.chunk_index is not None:
        chunk = f'<span class="text-xs text-tertiary">Chunk: {item.chunk_index}</span>'

    return (
        '<div class="p-4 border-b transition-all hover:bg-gray-50" '
        f'style="animation: fadeIn 0.3s ease {index * 0.05:.2f}s both;">'
        f'<h3 class="font-semibold text-primary">{escape_html(item.title)}</h3>'
        f'<p class="text-sm text-secondary mt-1 font-mono">{escape_html(item.path)}</p>'
        f'<p class="text-sm text-secondary mt-2 line-clamp-2">{escape_html(item.content)}</p>'
        '<div class="flex items-center gap-4 mt-2">'
        f'<span class="text-xs text-tertiary">Score: {item.score:.2f}</span>'
        f"{chunk}"
        "</div>"
        "</div>"
    )


def render_results(items: list[SearchResultItem]) -> str:
    """Render hits in the order the server returned them."""
    return "".join(render_result_item(item, i) for i, item in enumerate(items))


def no_results_message(query: str) -> str:
    return f'No results found for "{escape_html(query)}"'


def render_empty(query: str) -> str:
    return (
        '<div class="empty-state">'
        f'<p class="font-medium">{no_results_message(query)}</p>'
        f'<p class="text-sm mt-2">{SEARCH_EMPTY_HINT}</p>'
        "</div>"
    )


def render_error() -> str:
    return (
        '<div class="p-4 text-error text-center">'
        f"<p>{SEARCH_ERROR_TEXT}</p>"
        "</div>"
    )


def render_notification(message: str, level: str = "info") -> str:
    icon = _NOTIFICATION_ICONS.get(level, _NOTIFICATION_ICONS["info"])
    return (
        f'<div class="notification {escape_html(level)}">'
        '<div class="flex items-center gap-3">'
        f'<span class="icon icon-{icon}"></span>'
        f"<span>{escape_html(message)}</span>"
        "</div>"
        "</div>"
    )


def format_release_date(published_at: Optional[datetime]) -> str:
    """Short date for the release list, '-' when unknown."""
    if published_at is None:
        return "-"
    return f"{published_at:%b} {published_at.day}, {published_at.year}"
