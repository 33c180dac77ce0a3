from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

import nanoid

from base import get_logger

from .catalog import BANNER_MESSAGES

logger = get_logger(__name__)

Listener = Callable[["MessageCenter"], None]
Scheduler = Callable[[float, Callable[[], None]], Any]


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    severity: Severity = Severity.INFO
    duration: Optional[float] = None
    created_at: float = field(default_factory=time.monotonic)

    @property
    def sticky(self) -> bool:
        return self.duration is None or self.duration <= 0


@dataclass(frozen=True)
class BannerState:
    message: str
    severity: Severity = Severity.INFO
    visible: bool = True
    dismissible: bool = True


def thread_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class MessageCenter:
    """Toasts and the page banner behind one observable object.

    Toasts form a FIFO queue capped at ``max_notifications``; the oldest is
    evicted when a new one arrives on a full queue, and each one dismisses
    itself after its own duration. The banner is a singleton that every
    ``show_banner`` call overwrites.
    """

    def __init__(
        self,
        *,
        default_duration: float = 5.0,
        max_notifications: int = 5,
        scheduler: Scheduler = thread_scheduler,
        initial_banner: Optional[BannerState] = None,
    ):
        if max_notifications < 1:
            raise ValueError("max_notifications must be at least 1")
        self.default_duration = default_duration
        self.max_notifications = max_notifications
        self.scheduler = scheduler
        self._lock = threading.RLock()
        self._notifications: list[Notification] = []
        self._banner = initial_banner or BannerState(BANNER_MESSAGES["WELCOME"])
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception as e:
                logger.exception(f"Message listener failed: {e}")

    @property
    def notifications(self) -> tuple[Notification, ...]:
        with self._lock:
            return tuple(self._notifications)

    @property
    def banner(self) -> BannerState:
        with self._lock:
            return self._banner

    def notify(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        duration: Optional[float] = None,
    ) -> str:
        if duration is None:
            duration = self.default_duration
        notification = Notification(
            id=nanoid.generate(size=12),
            message=message,
            severity=Severity(severity),
            duration=duration,
        )

        with self._lock:
            self._notifications.append(notification)
            while len(self._notifications) > self.max_notifications:
                evicted = self._notifications.pop(0)
                logger.debug(f"Evicted notification {evicted.id}")

        if not notification.sticky:
            self.scheduler(notification.duration, lambda: self.dismiss(notification.id))

        self._publish()
        return notification.id

    def show_success(self, message: str, duration: Optional[float] = None) -> str:
        return self.notify(message, Severity.SUCCESS, duration)

    def show_error(self, message: str, duration: Optional[float] = None) -> str:
        return self.notify(message, Severity.ERROR, duration)

    def show_info(self, message: str, duration: Optional[float] = None) -> str:
        return self.notify(message, Severity.INFO, duration)

    def show_warning(self, message: str, duration: Optional[float] = None) -> str:
        return self.notify(message, Severity.WARNING, duration)

    def dismiss(self, notification_id: str) -> bool:
        with self._lock:
            remaining = [n for n in self._notifications if n.id != notification_id]
            removed = len(remaining) != len(self._notifications)
            self._notifications = remaining
        if removed:
            self._publish()
        return removed

    def clear_notifications(self) -> None:
        with self._lock:
            self._notifications = []
        self._publish()

    def show_banner(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        dismissible: bool = True,
    ) -> None:
        with self._lock:
            self._banner = BannerState(
                message=message,
                severity=Severity(severity),
                visible=True,
                dismissible=dismissible,
            )
        self._publish()

    def hide_banner(self) -> None:
        # message is cleared so that a later visible=True can not reveal stale text
        with self._lock:
            self._banner = replace(self._banner, message="", visible=False)
        self._publish()

    def update_banner(self, **changes: Any) -> None:
        if "severity" in changes:
            changes["severity"] = Severity(changes["severity"])
        with self._lock:
            self._banner = replace(self._banner, **changes)
        self._publish()
