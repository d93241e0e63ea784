# backend/core/notification_adapter.py

"""
Fire-and-forget notification adapters.

Services hand finished events to an adapter and move on: adapters never
return anything the caller acts on, and a failing adapter must not undo or
abort the operation that produced the event.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from threading import Lock
from typing import Any, Deque, Dict, List, Optional
import logging

from .config import settings


logger = logging.getLogger(__name__)


@dataclass
class NotificationEvent:
    """Standard notification event structure"""

    kind: str
    message: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.utcnow()

    @property
    def kind_value(self) -> str:
        return getattr(self.kind, "value", self.kind)


@dataclass(frozen=True)
class SoundCue:
    """A beep pattern the presentation layer plays for an event kind"""

    frequency: int  # Hz
    duration_ms: int
    repeat: int


SOUND_CUES: Dict[str, SoundCue] = {
    "new_order": SoundCue(frequency=800, duration_ms=200, repeat=2),
    "order_ready": SoundCue(frequency=1200, duration_ms=150, repeat=3),
    "status_change": SoundCue(frequency=600, duration_ms=100, repeat=1),
    "error": SoundCue(frequency=300, duration_ms=300, repeat=1),
}


class NotificationAdapter(ABC):
    """
    Abstract base class for notification adapters

    Implement this interface to add new notification channels.
    """

    @abstractmethod
    def notify(self, event: NotificationEvent) -> bool:
        """Deliver one event; return whether it was accepted"""
        pass

    @abstractmethod
    def get_adapter_name(self) -> str:
        """Return the name of this adapter"""
        pass


class LoggingAdapter(NotificationAdapter):
    """
    Default logging adapter for notifications

    This adapter logs all notifications and can be used for
    development/testing or as a fallback
    """

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def notify(self, event: NotificationEvent) -> bool:
        logger.log(
            self.log_level,
            f"[NOTIFICATION] {event.kind_value}: {event.message}",
            extra={
                "notification_kind": event.kind_value,
                "timestamp": event.timestamp.isoformat(),
                "metadata": event.metadata,
            },
        )
        return True

    def get_adapter_name(self) -> str:
        return "logging"


class RecordingAdapter(NotificationAdapter):
    """Keeps every event in memory, in delivery order"""

    def __init__(self):
        self.events: List[NotificationEvent] = []

    def notify(self, event: NotificationEvent) -> bool:
        self.events.append(event)
        return True

    def kinds(self) -> List[str]:
        return [event.kind_value for event in self.events]

    def clear(self):
        self.events.clear()

    def get_adapter_name(self) -> str:
        return "recording"


class SoundCueAdapter(NotificationAdapter):
    """
    Turns events into sound cues for the kitchen display.

    Cues are queued until the display drains them; the queue is bounded and
    drops the oldest cue when full. While sounds are disabled events are
    accepted but produce no cue.
    """

    def __init__(self, enabled: bool = True, max_queued: int = 50):
        self.enabled = enabled
        self._queue: Deque[Dict[str, Any]] = deque(maxlen=max_queued)
        self._lock = Lock()

    def notify(self, event: NotificationEvent) -> bool:
        cue = SOUND_CUES.get(event.kind_value)
        if cue is None or not self.enabled:
            return False

        with self._lock:
            self._queue.append({
                "kind": event.kind_value,
                "frequency": cue.frequency,
                "duration_ms": cue.duration_ms,
                "repeat": cue.repeat,
                "message": event.message,
                "timestamp": event.timestamp,
            })
        return True

    def enable(self):
        self.enabled = True

    def disable(self):
        self.enabled = False
        self.clear()

    def toggle(self) -> bool:
        if self.enabled:
            self.disable()
        else:
            self.enable()
        return self.enabled

    def drain(self) -> List[Dict[str, Any]]:
        """Return queued cues oldest first and empty the queue"""
        with self._lock:
            cues = list(self._queue)
            self._queue.clear()
        return cues

    def clear(self):
        with self._lock:
            self._queue.clear()

    def get_adapter_name(self) -> str:
        return "sound_cue"


class CompositeAdapter(NotificationAdapter):
    """
    Fans an event out to several adapters.

    An adapter that raises is logged and skipped; the remaining adapters
    still receive the event.
    """

    def __init__(self, adapters: List[NotificationAdapter]):
        self.adapters = adapters

    def notify(self, event: NotificationEvent) -> bool:
        delivered = False
        for adapter in self.adapters:
            try:
                delivered = adapter.notify(event) or delivered
            except Exception:
                logger.exception(
                    f"Notification adapter {adapter.get_adapter_name()} "
                    f"failed for {event.kind_value}"
                )
        return delivered

    def get_adapter_name(self) -> str:
        return "composite(" + ",".join(
            adapter.get_adapter_name() for adapter in self.adapters
        ) + ")"


@lru_cache()
def get_sound_cue_adapter() -> SoundCueAdapter:
    """Process-wide sound cue queue shared by producers and the display"""
    return SoundCueAdapter(
        enabled=settings.sound_notifications_enabled,
        max_queued=settings.sound_cue_queue_size,
    )


@lru_cache()
def get_notification_adapter() -> NotificationAdapter:
    """
    Create default notification adapter based on configuration

    Returns composite adapter with logging and sound cues
    """
    return CompositeAdapter([LoggingAdapter(), get_sound_cue_adapter()])
