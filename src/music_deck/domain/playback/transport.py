"""
Transport: the stateful owner of playback position and mode settings.

Every public method runs under one re-entrant lock, so UI intents and engine
notifications are applied one at a time, in the order they arrive. Queue
decisions come from the pure functions in queue.py; this module only applies
them to the library store and the playback engine.
"""

import math
import random
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from music_deck.core.config import PlayerConfig
from music_deck.domain.library.models import RemovalResult, Track
from music_deck.domain.library.store import LibraryStore

from .engine import PlaybackEngine
from .queue import Decision, Ended, Next, Previous, QueueEvent, RepeatMode, Select, decide

DEFAULT_RESTART_THRESHOLD = 5.0
DEFAULT_VOLUME = 0.8


class TransportStatus(str, Enum):
    """Coarse transport state."""

    IDLE = "idle"
    PAUSED = "loaded-paused"
    PLAYING = "loaded-playing"


@dataclass(frozen=True)
class PlaybackState:
    """Immutable snapshot of the transport's state.

    is_playing reflects the user's intent; play_confirmed is whether the
    engine acknowledged the most recent play request.
    """

    current_index: Optional[int] = None
    is_playing: bool = False
    shuffle: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    volume: float = DEFAULT_VOLUME
    current_time: float = 0.0
    duration: float = 0.0
    play_confirmed: bool = False


def _clamp_volume(volume: float) -> float:
    return min(1.0, max(0.0, float(volume)))


def _non_negative(value: float) -> float:
    """Clamp a reported time to a finite value >= 0 (NaN/inf become 0)."""
    value = float(value)
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


class Transport:
    """Single owner of playback state, driven by discrete events."""

    def __init__(
        self,
        engine: PlaybackEngine,
        library: Optional[LibraryStore] = None,
        *,
        volume: float = DEFAULT_VOLUME,
        shuffle: bool = False,
        repeat_mode: RepeatMode = RepeatMode.OFF,
        restart_threshold: float = DEFAULT_RESTART_THRESHOLD,
        unmute_volume: float = DEFAULT_VOLUME,
        rng: Optional[random.Random] = None,
    ):
        self.engine = engine
        self.library = library if library is not None else LibraryStore()
        self.restart_threshold = restart_threshold
        self.unmute_volume = _clamp_volume(unmute_volume) or DEFAULT_VOLUME
        self._rng = rng
        self._lock = threading.RLock()

        self._current_index: Optional[int] = None
        self._is_playing = False
        self._shuffle = shuffle
        self._repeat_mode = repeat_mode
        self._volume = _clamp_volume(volume)
        self._current_time = 0.0
        self._duration = 0.0
        self._play_confirmed = False
        # Source last handed to engine.load(); ends for any other source are stale
        self._loaded_url: Optional[str] = None
        # Bumped on every play request so stale play() results are ignored
        self._play_generation = 0

    @classmethod
    def from_config(
        cls,
        engine: PlaybackEngine,
        config: PlayerConfig,
        library: Optional[LibraryStore] = None,
    ) -> "Transport":
        """Create a transport with startup settings from [player]."""
        return cls(
            engine,
            library,
            volume=config.volume,
            shuffle=config.shuffle_on_start,
            repeat_mode=RepeatMode.parse(config.repeat_mode),
            restart_threshold=config.restart_threshold_seconds,
            unmute_volume=config.unmute_volume,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        with self._lock:
            return PlaybackState(
                current_index=self._current_index,
                is_playing=self._is_playing,
                shuffle=self._shuffle,
                repeat_mode=self._repeat_mode,
                volume=self._volume,
                current_time=self._current_time,
                duration=self._duration,
                play_confirmed=self._play_confirmed,
            )

    @property
    def status(self) -> TransportStatus:
        with self._lock:
            if self._current_index is None:
                return TransportStatus.IDLE
            return TransportStatus.PLAYING if self._is_playing else TransportStatus.PAUSED

    @property
    def current_track(self) -> Optional[Track]:
        with self._lock:
            if self._current_index is None:
                return None
            return self.library.get(self._current_index)

    def tracks(self) -> List[Track]:
        with self._lock:
            return self.library.tracks()

    # ------------------------------------------------------------------
    # Track selection and transport controls
    # ------------------------------------------------------------------

    def select_track(self, index: int) -> None:
        """Load and play the track at index; out-of-range indices are ignored."""
        with self._lock:
            decision = self._decide(Select(index))
            if not decision.valid or decision.next_index is None:
                logger.debug(f"Ignoring selection of index {index} (library size {len(self.library)})")
                return
            self._load_and_play(decision.next_index)

    def toggle_play_pause(self) -> None:
        with self._lock:
            if len(self.library) == 0:
                return
            if self._current_index is None:
                self.select_track(0)
                return
            if self._is_playing:
                self._halt()
                logger.debug("Paused")
            else:
                self._is_playing = True
                self._request_play()
                logger.debug("Resumed")

    def request_next(self) -> None:
        with self._lock:
            self._apply(self._decide(Next()))

    def request_previous(self) -> None:
        """Go back one track, or restart the current one if it has played a while."""
        with self._lock:
            if len(self.library) == 0:
                return
            if (
                self._current_index is not None
                and self._current_time > self.restart_threshold
            ):
                self.engine.seek(0.0)
                self._current_time = 0.0
                logger.debug("Restarted current track instead of going back")
                return
            self._apply(self._decide(Previous()))

    def seek(self, seconds: float) -> None:
        """Jump to an absolute position in the loaded track."""
        with self._lock:
            if self._current_index is None:
                return
            target = _non_negative(seconds)
            if self._duration > 0:
                target = min(target, self._duration)
            self.engine.seek(target)
            self._current_time = target

    def seek_fraction(self, fraction: float) -> None:
        """Jump to a fraction (0..1) of the track; needs a known duration."""
        with self._lock:
            if self._current_index is None or self._duration <= 0:
                return
            fraction = min(1.0, max(0.0, float(fraction)))
            self.seek(fraction * self._duration)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_volume(self, volume: float) -> None:
        with self._lock:
            self._volume = _clamp_volume(volume)
            self.engine.set_volume(self._volume)

    def toggle_mute(self) -> None:
        with self._lock:
            self.set_volume(0.0 if self._volume > 0 else self.unmute_volume)

    def set_shuffle(self, enabled: bool) -> None:
        with self._lock:
            self._shuffle = bool(enabled)

    def toggle_shuffle(self) -> bool:
        with self._lock:
            self._shuffle = not self._shuffle
            return self._shuffle

    def set_repeat_mode(self, mode: RepeatMode) -> None:
        with self._lock:
            self._repeat_mode = RepeatMode(mode)

    def cycle_repeat_mode(self) -> RepeatMode:
        """Advance off -> all -> one -> off and return the new mode."""
        with self._lock:
            self._repeat_mode = self._repeat_mode.cycle()
            return self._repeat_mode

    # ------------------------------------------------------------------
    # Library mutations
    # ------------------------------------------------------------------

    def add_tracks(self, tracks: Iterable[Track]) -> None:
        """Append tracks; the first load into an empty library selects track 0 without playing."""
        with self._lock:
            tracks = list(tracks)
            if not tracks:
                return
            was_empty = len(self.library) == 0
            self.library.add(tracks)
            logger.info(f"Added {len(tracks)} tracks (library size {len(self.library)})")

            if self._current_index is None and was_empty:
                first = self.library.get(0)
                self._current_index = 0
                self._current_time = 0.0
                self._duration = 0.0
                self.engine.load(first.url)
                self._loaded_url = first.url
                logger.debug(f"Selected first track without playing: {first.title}")

    def remove_track(self, track_id: str) -> RemovalResult:
        """Remove a track and rebase the current index around it."""
        with self._lock:
            result = self.library.remove(track_id)
            if not result.found:
                logger.debug(f"Remove ignored, no track with id {track_id}")
                return result

            removed = result.removed_index
            if self._current_index is not None:
                if removed < self._current_index:
                    self._current_index -= 1
                elif removed == self._current_index:
                    self._halt()
                    self._current_index = None
                    self._current_time = 0.0
                    self._duration = 0.0
                    logger.info("Removed the current track; playback stopped")
            return result

    # ------------------------------------------------------------------
    # Engine notifications
    # ------------------------------------------------------------------

    def on_progress(self, current_time: float, duration: float) -> None:
        with self._lock:
            self._current_time = _non_negative(current_time)
            self._duration = _non_negative(duration)

    def on_ended_naturally(self, url: Optional[str] = None) -> None:
        """Advance after a natural end; ends reported for another source are dropped."""
        with self._lock:
            if url is not None and url != self._loaded_url:
                logger.debug(f"Ignoring stale end of {url}")
                return
            self._apply(self._decide(Ended()))

    def close(self) -> None:
        """Release the engine binding."""
        with self._lock:
            self._is_playing = False
            self._play_generation += 1
            self.engine.close()

    # ------------------------------------------------------------------
    # Internals (lock already held)
    # ------------------------------------------------------------------

    def _decide(self, event: QueueEvent) -> Decision:
        return decide(
            len(self.library),
            self._current_index,
            self._shuffle,
            self._repeat_mode,
            event,
            rng=self._rng,
        )

    def _apply(self, decision: Decision) -> None:
        if decision.next_index is None:
            return
        if not decision.should_play:
            self._halt()
            return
        if decision.restart:
            self.engine.seek(0.0)
            self._current_time = 0.0
            self._is_playing = True
            self._request_play()
            return
        self._load_and_play(decision.next_index)

    def _load_and_play(self, index: int) -> None:
        track = self.library.get(index)
        self.engine.load(track.url)
        self._loaded_url = track.url
        self._current_index = index
        self._current_time = 0.0
        self._duration = 0.0
        self._is_playing = True
        logger.info(f"Playing [{index}] {track.title}")
        self._request_play()

    def _halt(self) -> None:
        if self._is_playing:
            self.engine.pause()
            self._is_playing = False
            # Invalidate pending play results
            self._play_generation += 1
            self._play_confirmed = False

    def _request_play(self) -> None:
        self._play_generation += 1
        generation = self._play_generation
        try:
            outcome = self.engine.play()
        except Exception as e:
            logger.warning(f"Playback request failed: {e}")
            self._play_confirmed = False
            return

        if outcome is None:
            self._play_confirmed = True
            return

        self._play_confirmed = False
        outcome.add_done_callback(
            lambda future: self._on_play_outcome(generation, future)
        )

    def _on_play_outcome(self, generation: int, future: Future) -> None:
        try:
            started = bool(future.result())
        except Exception as e:
            logger.warning(f"Playback did not start: {e}")
            started = False

        with self._lock:
            if generation != self._play_generation:
                return
            self._play_confirmed = started
            if not started:
                logger.warning("Engine did not confirm playback")
