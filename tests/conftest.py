"""Shared fixtures: a recording playback engine and small libraries."""

from concurrent.futures import Future
from typing import Any, List, Optional, Tuple

import pytest

from music_deck.domain.library.models import Track
from music_deck.domain.library.store import LibraryStore
from music_deck.domain.playback.transport import Transport


class FakeEngine:
    """PlaybackEngine that records every call instead of playing audio."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.play_result: Optional[Future] = None
        self.play_error: Optional[Exception] = None
        self.closed = False

    def load(self, url: str) -> None:
        self.calls.append(("load", url))

    def play(self) -> Optional[Future]:
        self.calls.append(("play",))
        if self.play_error is not None:
            raise self.play_error
        return self.play_result

    def pause(self) -> None:
        self.calls.append(("pause",))

    def seek(self, time: float) -> None:
        self.calls.append(("seek", time))

    def set_volume(self, volume: float) -> None:
        self.calls.append(("set_volume", volume))

    def close(self) -> None:
        self.closed = True

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


def make_tracks(*titles: str) -> List[Track]:
    return [
        Track(id=f"id-{title.lower()}", title=title, url=f"file:///music/{title}.mp3")
        for title in titles
    ]


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def abc_tracks() -> List[Track]:
    return make_tracks("A", "B", "C")


@pytest.fixture
def transport(engine: FakeEngine, abc_tracks: List[Track]) -> Transport:
    """Transport over [A, B, C] with nothing selected and no engine calls yet."""
    return Transport(engine, LibraryStore(abc_tracks))


@pytest.fixture
def empty_transport(engine: FakeEngine) -> Transport:
    return Transport(engine)


@pytest.fixture
def track_factory():
    """Build tracks with predictable ids ('id-<title lowercased>')."""
    return make_tracks
