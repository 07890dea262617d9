"""Playback domain - queue decisions, transport state machine, engines.

This domain handles:
- Pure next/previous/select/ended decisions (shuffle and repeat rules)
- The Transport that owns current index, play state and settings
- The playback engine contract and its notification channel
- MPV integration via JSON IPC
"""

from .engine import (
    EndedNaturally,
    NotificationChannel,
    NotificationListener,
    PlaybackEngine,
    Progress,
)
from .mpv import MpvEngine, check_mpv_available
from .queue import (
    Decision,
    Ended,
    Next,
    Previous,
    RepeatMode,
    Select,
    decide,
)
from .transport import PlaybackState, Transport, TransportStatus

__all__ = [
    # Engine
    "EndedNaturally",
    "NotificationChannel",
    "NotificationListener",
    "PlaybackEngine",
    "Progress",
    "MpvEngine",
    "check_mpv_available",
    # Queue
    "Decision",
    "Ended",
    "Next",
    "Previous",
    "RepeatMode",
    "Select",
    "decide",
    # Transport
    "PlaybackState",
    "Transport",
    "TransportStatus",
]
