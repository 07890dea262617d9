"""
Provider interface for library sources.

A provider is the collaborator that owns where tracks live: the local
filesystem for ephemeral sessions, or a remote upload service. The transport
only ever sees the Track records a provider hands back.
"""

from pathlib import Path
from typing import List, Protocol, Sequence

from .models import Track


class LibraryProvider(Protocol):
    """Protocol for library collaborators.

    All operations raise LibraryError when the collaborator fails. A failed
    call must not leave partially applied changes on the caller's side.
    """

    name: str

    def list_tracks(self) -> List[Track]:
        """Return every track the source currently holds, in library order."""
        ...

    def add_files(self, paths: Sequence[Path]) -> List[Track]:
        """Add audio files and return the newly created tracks.

        Args:
            paths: Audio files to add

        Returns:
            New tracks, in the order the files were given
        """
        ...

    def delete_track(self, track_id: str) -> bool:
        """Delete a track by id.

        Returns:
            True when deleted, False when the source had no such track
        """
        ...
