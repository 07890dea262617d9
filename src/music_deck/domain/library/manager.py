"""
Keeps a library provider and the transport in step.

The provider is always called first. The transport only changes after the
provider succeeded, so a failed upload or delete leaves playback untouched.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Sequence

from loguru import logger

from .models import RemovalResult, Track
from .provider import LibraryProvider

if TYPE_CHECKING:
    from music_deck.domain.playback.transport import Transport


class LibraryManager:
    """Binds a LibraryProvider to a Transport."""

    def __init__(self, provider: LibraryProvider, transport: "Transport"):
        self.provider = provider
        self.transport = transport

    def load(self) -> List[Track]:
        """Fetch the provider's tracks and append them to the transport.

        Raises:
            LibraryError: If the provider cannot list its tracks
        """
        tracks = self.provider.list_tracks()
        self.transport.add_tracks(tracks)
        logger.info(f"Loaded {len(tracks)} tracks from {self.provider.name} library")
        return tracks

    def upload(self, paths: Sequence[Path]) -> List[Track]:
        """Add files through the provider, then to the transport.

        Raises:
            LibraryError: If the provider rejects the files
        """
        added = self.provider.add_files(paths)
        self.transport.add_tracks(added)
        return added

    def delete(self, track_id: str) -> RemovalResult:
        """Delete a track at the source, then drop it from the transport.

        A track the source no longer knows is stale, so it is dropped from
        the transport as well.

        Returns:
            The transport's removal result

        Raises:
            LibraryError: If the provider fails (transport left unchanged)
        """
        if not self.provider.delete_track(track_id):
            logger.info(f"{self.provider.name} library has no track {track_id}; dropping stale entry")
        return self.transport.remove_track(track_id)

