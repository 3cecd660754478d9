"""
Notification service: ephemeral user-visible status messages.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from docconsole.config import config

logger = logging.getLogger(__name__)

LEVELS = ("info", "success", "error")


@dataclass(frozen=True)
class Notification:
    """A toast shown to the user, dismissed after ``duration`` seconds."""
    message: str
    level: str = "info"
    duration: float = 3.0


class NotificationService:
    """
    Fire-and-forget notifications.

    Each call builds a fresh Notification and hands it to the sink; the sink
    (normally a View) replaces whatever toast is currently visible. Nothing
    is kept between calls.
    """

    def __init__(
        self,
        sink: Optional[Callable[[Notification], None]] = None,
        duration: Optional[float] = None,
    ):
        self.sink = sink
        self.duration = duration or config.NOTIFICATION_DURATION_SECONDS

    def show(self, message: str, level: str = "info") -> Notification:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")

        notification = Notification(message=message, level=level, duration=self.duration)
        if level == "error":
            logger.warning(f"Notify error: {message}")
        else:
            logger.info(f"Notify {level}: {message}")

        if self.sink is not None:
            self.sink(notification)
        return notification

    def show_error(self, message: str) -> Notification:
        return self.show(message, "error")

    def show_success(self, message: str) -> Notification:
        return self.show(message, "success")
