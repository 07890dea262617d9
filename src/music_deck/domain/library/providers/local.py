"""
Local filesystem provider.

Tracks live only for the lifetime of the process: files are referenced in
place through file:// URIs and nothing is copied or persisted.
"""

from pathlib import Path
from typing import List, Sequence

from loguru import logger

from music_deck.core.config import LibraryConfig
from music_deck.core.errors import LibraryError

from ..metadata import read_title
from ..models import Track, new_track_id


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported."""
    return local_path.suffix.lower() in supported_formats


def scan_directory(directory: Path, config: LibraryConfig) -> List[Path]:
    """Collect supported audio files under a directory, sorted by path.

    Raises:
        LibraryError: If the directory does not exist
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        raise LibraryError(f"Not a directory: {directory}")

    files: list[Path] = []
    for ext in config.supported_formats:
        pattern = f"*{ext}"
        matches = directory.rglob(pattern) if config.scan_recursive else directory.glob(pattern)
        files.extend(p for p in matches if p.is_file())

    logger.debug(f"Scanned {directory}: {len(files)} supported files")
    return sorted(set(files))


class LocalProvider:
    """Ephemeral library backed by files on this machine."""

    name = "local"

    def __init__(self, config: LibraryConfig):
        self.config = config
        self._tracks: List[Track] = []

    def list_tracks(self) -> List[Track]:
        return list(self._tracks)

    def add_files(self, paths: Sequence[Path]) -> List[Track]:
        """Create tracks for existing, supported files.

        Missing files fail the whole call before anything is added.

        Raises:
            LibraryError: If any path does not exist
        """
        resolved = [Path(p).expanduser().resolve() for p in paths]
        missing = [str(p) for p in resolved if not p.is_file()]
        if missing:
            raise LibraryError(f"File not found: {', '.join(missing)}")

        taken = {t.id for t in self._tracks}
        added: List[Track] = []
        for path in resolved:
            if not is_supported_format(path, self.config.supported_formats):
                logger.warning(f"Skipping unsupported file: {path}")
                continue
            track_id = new_track_id()
            while track_id in taken:
                track_id = new_track_id()
            taken.add(track_id)
            added.append(Track(id=track_id, title=read_title(path), url=path.as_uri()))

        self._tracks.extend(added)
        logger.info(f"Added {len(added)} local tracks")
        return added

    def delete_track(self, track_id: str) -> bool:
        for i, track in enumerate(self._tracks):
            if track.id == track_id:
                del self._tracks[i]
                return True
        return False
