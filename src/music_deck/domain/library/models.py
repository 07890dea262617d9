"""
Music library domain models.

Contains the immutable Track record and helpers used when tracks are created.
"""

import random
import string
import time
from typing import NamedTuple, Optional

_ID_ALPHABET = string.digits + string.ascii_lowercase


class Track(NamedTuple):
    """An identified playable audio item.

    The url may point at a local file (file:// URI) or at a remote origin;
    playback does not care which.
    """

    id: str
    title: str
    url: str


class RemovalResult(NamedTuple):
    """Outcome of removing a track from the library.

    removed_index is None when no track had the requested id.
    """

    removed_index: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.removed_index is not None


def new_track_id() -> str:
    """Generate a track id of the form '<epoch-ms>-<6 base-36 chars>'."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"{int(time.time() * 1000)}-{suffix}"


def title_from_filename(filename: str) -> str:
    """Strip the final extension from a file name ('a.live.mp3' -> 'a.live')."""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem or not ext:
        return filename
    return stem


def track_from_dict(data: dict) -> Track:
    """Build a Track from a {id, title, url} mapping (e.g. a JSON payload).

    Raises:
        KeyError: If id or url is missing
    """
    return Track(
        id=str(data["id"]),
        title=str(data.get("title") or data["id"]),
        url=str(data["url"]),
    )
