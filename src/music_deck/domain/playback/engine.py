"""
Playback engine contract and the notification channel back to the transport.

The engine is whatever actually decodes and outputs audio. It runs its own
threads; the only way its activity reaches the transport is through a
NotificationChannel that the transport's owner drains.
"""

import threading
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Deque, Optional, Protocol, Union

PlayOutcome = Optional[Future]


@dataclass(frozen=True)
class Progress:
    """Playback position report (seconds)."""

    current_time: float
    duration: float


@dataclass(frozen=True)
class EndedNaturally:
    """The loaded track played to its end.

    url names the source that ended, so an end that is drained after the
    transport moved on can be recognised as stale.
    """

    url: Optional[str] = None


Notification = Union[Progress, EndedNaturally]


class PlaybackEngine(Protocol):
    """Narrow interface the transport drives.

    load() must never start playback by itself. play() must not block: it
    returns a Future resolving to whether playback actually started (or None
    when the engine cannot tell), and may raise if the request could not
    even be issued.
    """

    def load(self, url: str) -> None: ...

    def play(self) -> PlayOutcome: ...

    def pause(self) -> None: ...

    def seek(self, time: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...

    def close(self) -> None: ...


class NotificationListener(Protocol):
    """Receiver of engine notifications (implemented by Transport)."""

    def on_progress(self, current_time: float, duration: float) -> None: ...

    def on_ended_naturally(self, url: Optional[str] = None) -> None: ...


class NotificationChannel:
    """Thread-safe mailbox from engine threads to the transport.

    Progress reports overwrite each other so a slow consumer only ever sees
    the latest position. End-of-track notifications are queued and each one
    is delivered exactly once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._progress: Optional[Progress] = None
        self._ended: Deque[EndedNaturally] = deque()
        self._wakeup = threading.Event()

    def publish(self, notification: Notification) -> None:
        with self._lock:
            if isinstance(notification, Progress):
                self._progress = notification
            else:
                self._ended.append(notification)
        self._wakeup.set()

    def publish_progress(self, current_time: float, duration: float) -> None:
        self.publish(Progress(current_time=current_time, duration=duration))

    def publish_ended(self, url: Optional[str] = None) -> None:
        self.publish(EndedNaturally(url=url))

    def pending(self) -> int:
        with self._lock:
            return len(self._ended) + (1 if self._progress is not None else 0)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until something is published or the timeout passes."""
        signalled = self._wakeup.wait(timeout)
        self._wakeup.clear()
        return signalled

    def drain(self, listener: NotificationListener) -> int:
        """Deliver everything pending to the listener.

        The latest progress goes first, then end-of-track events in arrival
        order, so a restart or advance triggered by an end is not followed
        by a stale position from the previous track.

        Returns:
            Number of notifications delivered
        """
        with self._lock:
            progress = self._progress
            self._progress = None
            ended = list(self._ended)
            self._ended.clear()

        delivered = 0
        if progress is not None:
            listener.on_progress(progress.current_time, progress.duration)
            delivered += 1
        for event in ended:
            listener.on_ended_naturally(event.url)
            delivered += 1
        return delivered
