"""Transient, self-dismissing status messages.

At most one notification is visible at a time. A new notification replaces
the current one immediately instead of queuing behind it. Each notification
expires after a fixed lifetime; when an asyncio loop is running the expiry
is also pushed to the display sink through a timer.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()

DEFAULT_LIFETIME_SECONDS = 3.0


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"

    @property
    def icon(self) -> str:
        return SEVERITY_ICONS.get(self, "fa-bell")

    @property
    def color(self) -> str:
        return SEVERITY_COLORS.get(self, "#667eea")


SEVERITY_ICONS = {
    Severity.SUCCESS: "fa-check-circle",
    Severity.ERROR: "fa-exclamation-circle",
    Severity.INFO: "fa-info-circle",
}

SEVERITY_COLORS = {
    Severity.SUCCESS: "#48bb78",
    Severity.ERROR: "#e53e3e",
    Severity.INFO: "#4299e1",
}


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity
    shown_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


def log_display(notification: Notification) -> None:
    """Default display sink: write the notification to the log."""
    logger.info(
        "notification",
        message=notification.message,
        severity=notification.severity.value,
    )


class NotificationEmitter:
    """
    Shows one notification at a time and drops it after its lifetime.

    The display sinks are plain callables so the emitter can paint into
    any surface (a terminal, a test recorder, a widget toolkit).
    ``notify`` never raises: sink failures are logged and dropped.
    """

    def __init__(
        self,
        on_show: Callable[[Notification], None] = log_display,
        on_dismiss: Optional[Callable[[Notification], None]] = None,
        lifetime: float = DEFAULT_LIFETIME_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_show = on_show
        self.on_dismiss = on_dismiss
        self.lifetime = lifetime
        self._clock = clock
        self._current: Optional[Notification] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def current(self) -> Optional[Notification]:
        """The visible notification, or None once it has expired."""
        self.tick()
        return self._current

    def notify(self, message: str, severity: Severity | str = Severity.SUCCESS) -> None:
        """Display ``message``, superseding whatever is currently shown."""
        try:
            severity = Severity(severity)
        except ValueError:
            logger.warning("unknown_notification_severity", severity=severity)
            severity = Severity.INFO

        self._cancel_timer()
        now = self._clock()
        notification = Notification(
            message=message,
            severity=severity,
            shown_at=now,
            expires_at=now + self.lifetime,
        )
        self._current = notification

        try:
            self.on_show(notification)
        except Exception as e:
            logger.error("notification_display_failed", error=str(e))

        self._schedule_dismiss(notification)

    def tick(self) -> None:
        """Dismiss the visible notification if its lifetime has run out.

        Without a running event loop nothing pushes the dismissal to the
        display, so a synchronous page loop calls this on each pass.
        """
        notification = self._current
        if notification is not None and notification.is_expired(self._clock()):
            self._cancel_timer()
            self._current = None
            self._emit_dismiss(notification)

    def dismiss(self) -> None:
        """Remove the visible notification before its lifetime ends."""
        self._cancel_timer()
        notification, self._current = self._current, None
        if notification is not None:
            self._emit_dismiss(notification)

    def _schedule_dismiss(self, notification: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: expiry is enforced through ``current`` and ``tick``.
            return
        self._timer = loop.call_later(self.lifetime, self._expire, notification)

    def _expire(self, notification: Notification) -> None:
        self._timer = None
        if self._current is notification:
            self._current = None
            self._emit_dismiss(notification)

    def _emit_dismiss(self, notification: Notification) -> None:
        if self.on_dismiss is None:
            return
        try:
            self.on_dismiss(notification)
        except Exception as e:
            logger.error("notification_dismiss_failed", error=str(e))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
