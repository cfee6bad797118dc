# =============================================================================
# lib/notifications.py - Admin Notification Banner
# =============================================================================
# Editors report the outcome of each save/upload/delete as a dismissible
# banner (success / error / info). A banner auto-hides a fixed delay after
# it was shown. Showing a new banner replaces the current one and starts a
# fresh delay. A hidden banner never comes back.
#
# The clock is injectable so the timing can be tested without sleeping.
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_AUTO_HIDE_SECONDS = 5.0


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    type: NotificationType
    title: str
    message: str
    shown_at: float
    hide_at: float

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
        }


class NotificationBanner:
    """
    A single notification slot with auto-hide.

    Example:
        banner = NotificationBanner(auto_hide_seconds=5)
        banner.show(NotificationType.SUCCESS, "Success!", "Section saved")
        banner.current  # visible for exactly 5 seconds, then None
    """

    def __init__(
        self,
        auto_hide_seconds: float = DEFAULT_AUTO_HIDE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if auto_hide_seconds <= 0:
            raise ValueError("auto_hide_seconds must be positive")
        self.auto_hide_seconds = auto_hide_seconds
        self._clock = clock
        self._current: Notification | None = None

    def show(self, type: NotificationType, title: str, message: str) -> Notification:
        now = self._clock()
        notification = Notification(
            type=NotificationType(type),
            title=title,
            message=message,
            shown_at=now,
            hide_at=now + self.auto_hide_seconds,
        )
        self._current = notification
        return notification

    def success(self, title: str, message: str) -> Notification:
        return self.show(NotificationType.SUCCESS, title, message)

    def error(self, title: str, message: str) -> Notification:
        return self.show(NotificationType.ERROR, title, message)

    def info(self, title: str, message: str) -> Notification:
        return self.show(NotificationType.INFO, title, message)

    def dismiss(self) -> None:
        self._current = None

    @property
    def current(self) -> Notification | None:
        """The visible notification, or None once its delay has elapsed."""
        notification = self._current
        if notification is None:
            return None
        if self._clock() >= notification.hide_at:
            # Dropped for good; only a new show() brings a banner back
            self._current = None
            return None
        return notification


class NotificationCenter:
    """One banner per admin user, keyed by user id."""

    def __init__(
        self,
        auto_hide_seconds: float = DEFAULT_AUTO_HIDE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.auto_hide_seconds = auto_hide_seconds
        self._clock = clock
        self._banners: dict[str, NotificationBanner] = {}

    def banner_for(self, user_id: str) -> NotificationBanner:
        key = str(user_id)
        banner = self._banners.get(key)
        if banner is None:
            banner = NotificationBanner(self.auto_hide_seconds, clock=self._clock)
            self._banners[key] = banner
        return banner

    def current(self, user_id: str) -> Notification | None:
        banner = self._banners.get(str(user_id))
        return banner.current if banner else None

    def dismiss(self, user_id: str) -> None:
        banner = self._banners.get(str(user_id))
        if banner:
            banner.dismiss()
