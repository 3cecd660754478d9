"""
View abstraction and the dispatcher that applies view intents to it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable

from docconsole.intents import Navigate, Notify, Reload, Render, ViewIntent
from docconsole.services.notification_service import Notification, NotificationService

logger = logging.getLogger(__name__)


class View(ABC):
    """Rendering target for the console (browser page, terminal, test double)."""

    @abstractmethod
    def render(self, region: str, html: str) -> None:
        """Replace the markup of a region."""
        pass

    @abstractmethod
    def show_notification(self, notification: Notification) -> None:
        """Show a toast, replacing any toast currently visible."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @abstractmethod
    def reload(self) -> None:
        pass


class IntentDispatcher:
    """Applies view intents; delayed navigate/reload go through loop.call_later."""

    def __init__(self, view: View, notifier: NotificationService):
        self.view = view
        self.notifier = notifier
        self._scheduled: list[asyncio.TimerHandle] = []

    def dispatch(self, intents: Iterable[ViewIntent]) -> None:
        for intent in intents:
            if isinstance(intent, Render):
                self.view.render(intent.region, intent.html)
            elif isinstance(intent, Notify):
                self.notifier.show(intent.message, intent.level)
            elif isinstance(intent, Navigate):
                self._later(intent.delay, self.view.navigate, intent.url)
            elif isinstance(intent, Reload):
                self._later(intent.delay, self.view.reload)
            else:
                raise TypeError(f"Cannot dispatch intent: {type(intent).__name__}")

    def _later(self, delay: float, callback: Callable, *args) -> None:
        if delay <= 0:
            callback(*args)
            return
        loop = asyncio.get_running_loop()
        self._scheduled = [h for h in self._scheduled if not h.cancelled()]
        self._scheduled.append(loop.call_later(delay, callback, *args))

    def cancel_pending(self) -> None:
        """Cancel delayed navigate/reload intents."""
        for handle in self._scheduled:
            handle.cancel()
        self._scheduled.clear()
