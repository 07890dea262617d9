"""
Remote upload-service provider.

Talks to the track server over plain HTTP:
    GET    {base}/api/tracks        -> [{id, title, url}, ...]
    POST   {base}/api/upload        -> multipart "file" parts, returns created tracks
    DELETE {base}/api/tracks/{id}   -> {"ok": true} or 404
"""

from contextlib import ExitStack
from pathlib import Path
from typing import Any, List, Sequence
from urllib.parse import quote

import requests
from loguru import logger

from music_deck.core.config import LibraryConfig
from music_deck.core.errors import LibraryError

from ..models import Track, track_from_dict


def _parse_tracks(payload: Any) -> List[Track]:
    """Convert a JSON array of track objects into Tracks.

    Raises:
        LibraryError: If the payload is not a list of {id, title, url} objects
    """
    if not isinstance(payload, list):
        raise LibraryError(f"Expected a list of tracks, got {type(payload).__name__}")
    try:
        return [track_from_dict(item) for item in payload]
    except (KeyError, TypeError) as e:
        raise LibraryError(f"Malformed track in server response: {e}") from e


def _json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise LibraryError(f"Invalid JSON from {response.url}") from e


class RemoteProvider:
    """Library hosted by the upload service."""

    name = "remote"

    def __init__(self, config: LibraryConfig, base_url: str | None = None):
        base = base_url or config.server_url
        if not base:
            raise LibraryError("No server URL configured for remote library")
        self.base_url = base.rstrip("/")
        self.timeout = config.request_timeout_seconds

    def list_tracks(self) -> List[Track]:
        url = f"{self.base_url}/api/tracks"
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise LibraryError(
                f"Failed to load tracks: HTTP {e.response.status_code}"
            ) from e
        except requests.RequestException as e:
            raise LibraryError(f"Network error loading tracks: {e}") from e

        tracks = _parse_tracks(_json(response))
        logger.info(f"Loaded {len(tracks)} tracks from {self.base_url}")
        return tracks

    def add_files(self, paths: Sequence[Path]) -> List[Track]:
        """Upload files in a single multipart request.

        Raises:
            LibraryError: If a file cannot be opened or the upload fails
        """
        if not paths:
            return []

        url = f"{self.base_url}/api/upload"
        try:
            with ExitStack() as stack:
                files = [
                    ("file", (Path(p).name, stack.enter_context(open(p, "rb"))))
                    for p in paths
                ]
                response = requests.post(url, files=files, timeout=self.timeout)
                response.raise_for_status()
        # requests exceptions subclass OSError, so they must be caught first
        except requests.HTTPError as e:
            raise LibraryError(f"Upload failed: HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            raise LibraryError(f"Network error during upload: {e}") from e
        except OSError as e:
            raise LibraryError(f"Cannot read file for upload: {e}") from e

        added = _parse_tracks(_json(response))
        logger.info(f"Uploaded {len(added)} tracks to {self.base_url}")
        return added

    def delete_track(self, track_id: str) -> bool:
        url = f"{self.base_url}/api/tracks/{quote(track_id, safe='')}"
        try:
            response = requests.delete(url, timeout=self.timeout)
            if response.status_code == 404:
                logger.info(f"Track not found on server: {track_id}")
                return False
            response.raise_for_status()
        except requests.HTTPError as e:
            raise LibraryError(f"Delete failed: HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            raise LibraryError(f"Network error deleting track: {e}") from e

        logger.info(f"Deleted track {track_id} from {self.base_url}")
        return True
