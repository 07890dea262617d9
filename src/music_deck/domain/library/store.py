"""
Ordered in-memory store of library tracks.

The store knows nothing about playback; the transport owns the current
index and asks the store for lookups and mutations.
"""

from typing import Iterable, Iterator, List, Optional

from .models import RemovalResult, Track


class LibraryStore:
    """Ordered collection of tracks with unique ids."""

    def __init__(self, tracks: Optional[Iterable[Track]] = None):
        self._tracks: List[Track] = []
        if tracks:
            self.add(tracks)

    def add(self, tracks: Iterable[Track]) -> None:
        """Append tracks in order.

        Unique ids are the caller's responsibility.
        """
        self._tracks.extend(tracks)

    def remove(self, track_id: str) -> RemovalResult:
        """Remove the track with a matching id, if present."""
        index = self.index_of(track_id)
        if index is None:
            return RemovalResult()
        del self._tracks[index]
        return RemovalResult(removed_index=index)

    def get(self, index: int) -> Optional[Track]:
        if 0 <= index < len(self._tracks):
            return self._tracks[index]
        return None

    def index_of(self, track_id: str) -> Optional[int]:
        for i, track in enumerate(self._tracks):
            if track.id == track_id:
                return i
        return None

    def length(self) -> int:
        return len(self._tracks)

    def tracks(self) -> List[Track]:
        """Return a copy of the tracks in library order."""
        return list(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(list(self._tracks))
