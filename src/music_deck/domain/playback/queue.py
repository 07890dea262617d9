"""
Queue decisions for the transport.

Pure functions only: given the library size, the current position, the
shuffle flag, the repeat mode and a requested transition, work out which
index plays next and whether playback continues.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union


class RepeatMode(str, Enum):
    """Repeat behaviour at the ends of the library and of a track."""

    OFF = "off"
    ALL = "all"
    ONE = "one"

    def cycle(self) -> "RepeatMode":
        """Next mode in the off -> all -> one -> off rotation."""
        order = (RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def parse(cls, value: str) -> "RepeatMode":
        """Parse a mode name such as 'all'.

        Raises:
            ValueError: If the name is not a repeat mode
        """
        return cls(value.strip().lower())


@dataclass(frozen=True)
class Next:
    """User asked for the next track."""


@dataclass(frozen=True)
class Previous:
    """User asked for the previous track."""


@dataclass(frozen=True)
class Ended:
    """The current track finished playing on its own."""


@dataclass(frozen=True)
class Select:
    """User picked a track by position."""

    index: int


QueueEvent = Union[Next, Previous, Ended, Select]


class Decision(NamedTuple):
    """Result of a queue decision.

    Attributes:
        next_index: Index to play, or None when nothing is selected
        should_play: Whether playback should (re)start
        restart: Replay the current track in place instead of loading it again
        valid: False when the request was rejected (out-of-range select)
    """

    next_index: Optional[int]
    should_play: bool
    restart: bool = False
    valid: bool = True


NOTHING = Decision(next_index=None, should_play=False)


def _shuffle_pick(
    library_length: int, current_index: int, step: int, rng: Optional[random.Random]
) -> int:
    """Pick a random index, stepping off the current one on a collision."""
    pick = (rng or random).randrange(library_length)
    if library_length > 1 and pick == current_index:
        pick = (pick + step) % library_length
    return pick


def _sequential(
    library_length: int, current_index: int, step: int, repeat_mode: RepeatMode
) -> Decision:
    candidate = current_index + step
    if 0 <= candidate < library_length:
        return Decision(next_index=candidate, should_play=True)
    if repeat_mode == RepeatMode.ALL:
        wrapped = 0 if step > 0 else library_length - 1
        return Decision(next_index=wrapped, should_play=True)
    # Ran off the end: stop but keep the selection
    return Decision(next_index=current_index, should_play=False)


def decide(
    library_length: int,
    current_index: Optional[int],
    shuffle: bool,
    repeat_mode: RepeatMode,
    event: QueueEvent,
    rng: Optional[random.Random] = None,
) -> Decision:
    """Decide what plays after a transition.

    Args:
        library_length: Number of tracks in the library
        current_index: Index of the selected track, or None
        shuffle: Whether shuffle is enabled
        repeat_mode: Current repeat mode
        event: Requested transition
        rng: Random source for shuffle picks (module-level random by default)

    Returns:
        The decision; never raises for invalid input
    """
    if library_length <= 0:
        return NOTHING

    if isinstance(event, Select):
        if 0 <= event.index < library_length:
            return Decision(next_index=event.index, should_play=True)
        return Decision(next_index=current_index, should_play=False, valid=False)

    if current_index is None:
        return NOTHING

    if isinstance(event, Ended) and repeat_mode == RepeatMode.ONE:
        return Decision(next_index=current_index, should_play=True, restart=True)

    step = -1 if isinstance(event, Previous) else 1

    if shuffle:
        pick = _shuffle_pick(library_length, current_index, step, rng)
        return Decision(next_index=pick, should_play=True)

    return _sequential(library_length, current_index, step, repeat_mode)
