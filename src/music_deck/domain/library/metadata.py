"""
Track title extraction for local audio files.

Uses Mutagen to read the title tag and falls back to the file name when the
file has no readable tags.
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .models import title_from_filename


def get_tag_value(audio_file, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
            if value:
                if isinstance(value, list) and value:
                    return str(value[0])
                return str(value)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
    return None


def read_title(local_path: Path) -> str:
    """Return the embedded title of an audio file, or a title from its name."""
    fallback = title_from_filename(local_path.name)
    try:
        audio_file = MutagenFile(str(local_path))
    except (MutagenError, OSError) as e:
        logger.debug(f"Could not read tags from {local_path}: {e}")
        return fallback

    if audio_file is None:
        return fallback

    # ID3 (MP3), MP4, and Vorbis/Opus tags (lowercase)
    title = get_tag_value(audio_file, ["TIT2", "\xa9nam", "TITLE", "title"])
    return title.strip() if title and title.strip() else fallback
