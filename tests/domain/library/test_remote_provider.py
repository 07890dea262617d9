"""Tests for the upload-service provider (HTTP mocked)."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from music_deck.core.config import LibraryConfig
from music_deck.core.errors import LibraryError
from music_deck.domain.library.models import Track
from music_deck.domain.library.providers.remote import RemoteProvider

REQUESTS = "music_deck.domain.library.providers.remote.requests"


def _response(status_code: int = 200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.url = "http://server/api"
    response.json.return_value = payload
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} error")
        error.response = response
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def provider() -> RemoteProvider:
    return RemoteProvider(LibraryConfig(server_url="http://server/", request_timeout_seconds=3))


@pytest.fixture
def song(tmp_path: Path) -> Path:
    path = tmp_path / "one.mp3"
    path.write_bytes(b"1")
    return path


class TestRemoteProviderInit:
    """Tests for provider construction."""

    def test_requires_url(self) -> None:
        """A provider without any server URL cannot be created."""
        with pytest.raises(LibraryError):
            RemoteProvider(LibraryConfig())

    def test_explicit_url_wins(self) -> None:
        """An explicit base URL overrides the configured one and loses its trailing slash."""
        provider = RemoteProvider(LibraryConfig(server_url="http://a"), base_url="http://b/")
        assert provider.base_url == "http://b"


class TestListTracks:
    """Tests for GET /api/tracks."""

    @patch(f"{REQUESTS}.get")
    def test_lists_tracks(self, mock_get, provider) -> None:
        """Server track objects become Tracks in server order."""
        mock_get.return_value = _response(
            payload=[
                {"id": "1", "title": "One", "url": "/uploads/1.mp3"},
                {"id": "2", "title": "Two", "url": "/uploads/2.mp3"},
            ]
        )
        tracks = provider.list_tracks()

        assert tracks == [
            Track("1", "One", "/uploads/1.mp3"),
            Track("2", "Two", "/uploads/2.mp3"),
        ]
        mock_get.assert_called_once_with("http://server/api/tracks", timeout=3)

    @patch(f"{REQUESTS}.get")
    def test_http_error(self, mock_get, provider) -> None:
        """A non-2xx response is reported with its status code."""
        mock_get.return_value = _response(status_code=500)
        with pytest.raises(LibraryError, match="HTTP 500"):
            provider.list_tracks()

    @patch(f"{REQUESTS}.get", side_effect=requests.ConnectionError("refused"))
    def test_network_error(self, mock_get, provider) -> None:
        """Connection failures are wrapped in LibraryError."""
        with pytest.raises(LibraryError, match="Network error"):
            provider.list_tracks()

    @patch(f"{REQUESTS}.get")
    def test_non_list_payload(self, mock_get, provider) -> None:
        """A JSON object instead of a list is rejected."""
        mock_get.return_value = _response(payload={"error": "nope"})
        with pytest.raises(LibraryError):
            provider.list_tracks()

    @patch(f"{REQUESTS}.get")
    def test_malformed_track(self, mock_get, provider) -> None:
        """A track object without an id is rejected."""
        mock_get.return_value = _response(payload=[{"title": "no id"}])
        with pytest.raises(LibraryError, match="Malformed"):
            provider.list_tracks()

    @patch(f"{REQUESTS}.get")
    def test_invalid_json(self, mock_get, provider) -> None:
        """A body that is not JSON is rejected."""
        response = _response()
        response.json.side_effect = ValueError("bad json")
        mock_get.return_value = response
        with pytest.raises(LibraryError, match="Invalid JSON"):
            provider.list_tracks()


class TestUpload:
    """Tests for POST /api/upload."""

    @patch(f"{REQUESTS}.post")
    def test_uploads_all_files_in_one_request(self, mock_post, provider, tmp_path: Path) -> None:
        """Every path becomes one multipart 'file' part of a single request."""
        first = tmp_path / "one.mp3"
        second = tmp_path / "two.mp3"
        first.write_bytes(b"1")
        second.write_bytes(b"2")
        mock_post.return_value = _response(
            payload=[
                {"id": "a", "title": "one", "url": "/uploads/a.mp3"},
                {"id": "b", "title": "two", "url": "/uploads/b.mp3"},
            ]
        )

        added = provider.add_files([first, second])

        assert [t.id for t in added] == ["a", "b"]
        args, kwargs = mock_post.call_args
        assert args == ("http://server/api/upload",)
        assert [(field, name) for field, (name, _) in kwargs["files"]] == [
            ("file", "one.mp3"),
            ("file", "two.mp3"),
        ]

    @patch(f"{REQUESTS}.post")
    def test_no_paths_skips_request(self, mock_post, provider) -> None:
        """Uploading nothing makes no HTTP call."""
        assert provider.add_files([]) == []
        mock_post.assert_not_called()

    @patch(f"{REQUESTS}.post")
    def test_missing_file(self, mock_post, provider, tmp_path: Path) -> None:
        """An unreadable file fails before any request is sent."""
        with pytest.raises(LibraryError, match="Cannot read file"):
            provider.add_files([tmp_path / "gone.mp3"])
        mock_post.assert_not_called()

    @patch(f"{REQUESTS}.post")
    def test_rejected_upload(self, mock_post, provider, song: Path) -> None:
        """A server rejection is reported as an HTTP failure, not a file error."""
        mock_post.return_value = _response(status_code=400)
        with pytest.raises(LibraryError, match="Upload failed: HTTP 400"):
            provider.add_files([song])

    @patch(f"{REQUESTS}.post", side_effect=requests.ConnectionError("refused"))
    def test_network_error_during_upload(self, mock_post, provider, song: Path) -> None:
        """Connection failures are reported as network errors, not file errors."""
        with pytest.raises(LibraryError, match="Network error during upload"):
            provider.add_files([song])

    @patch(f"{REQUESTS}.post", side_effect=requests.Timeout("slow"))
    def test_timeout_during_upload(self, mock_post, provider, song: Path) -> None:
        """Timeouts are reported as network errors."""
        with pytest.raises(LibraryError, match="Network error during upload"):
            provider.add_files([song])


class TestDelete:
    """Tests for DELETE /api/tracks/{id}."""

    @patch(f"{REQUESTS}.delete")
    def test_delete_ok(self, mock_delete, provider) -> None:
        """A successful delete returns True."""
        mock_delete.return_value = _response(payload={"ok": True})
        assert provider.delete_track("1") is True
        mock_delete.assert_called_once_with("http://server/api/tracks/1", timeout=3)

    @patch(f"{REQUESTS}.delete")
    def test_delete_not_found(self, mock_delete, provider) -> None:
        """A 404 means the server had no such track."""
        mock_delete.return_value = _response(status_code=404)
        assert provider.delete_track("1") is False

    @patch(f"{REQUESTS}.delete")
    def test_id_is_url_quoted(self, mock_delete, provider) -> None:
        """Track ids are quoted into a single path segment."""
        mock_delete.return_value = _response(payload={"ok": True})
        provider.delete_track("a/b c")
        assert mock_delete.call_args[0][0] == "http://server/api/tracks/a%2Fb%20c"

    @patch(f"{REQUESTS}.delete")
    def test_server_error(self, mock_delete, provider) -> None:
        """Other HTTP errors raise LibraryError."""
        mock_delete.return_value = _response(status_code=500)
        with pytest.raises(LibraryError):
            provider.delete_track("1")
