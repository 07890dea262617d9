"""Tests for LibraryManager keeping a provider and the transport in sync."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from music_deck.core.errors import LibraryError
from music_deck.domain.library.manager import LibraryManager


@pytest.fixture
def provider(track_factory) -> MagicMock:
    provider = MagicMock()
    provider.name = "fake"
    provider.list_tracks.return_value = track_factory("A", "B")
    provider.add_files.return_value = track_factory("New")
    provider.delete_track.return_value = True
    return provider


class TestLibraryManager:
    """Tests for load, upload and delete."""

    def test_load_fills_transport(self, provider, empty_transport, engine) -> None:
        """Loading feeds the provider tracks to the transport and selects the first."""
        manager = LibraryManager(provider, empty_transport)
        loaded = manager.load()

        assert [t.title for t in loaded] == ["A", "B"]
        assert [t.title for t in empty_transport.tracks()] == ["A", "B"]
        assert empty_transport.state.current_index == 0
        assert engine.calls == [("load", "file:///music/A.mp3")]

    def test_upload_appends(self, provider, transport) -> None:
        """Uploaded tracks are appended after the existing ones."""
        manager = LibraryManager(provider, transport)
        added = manager.upload([Path("/music/New.mp3")])

        provider.add_files.assert_called_once_with([Path("/music/New.mp3")])
        assert added[0].title == "New"
        assert transport.tracks()[-1].title == "New"

    def test_failed_upload_leaves_transport_alone(self, provider, transport) -> None:
        """A provider failure on upload changes nothing in the transport."""
        provider.add_files.side_effect = LibraryError("Upload failed: HTTP 500")
        manager = LibraryManager(provider, transport)

        with pytest.raises(LibraryError):
            manager.upload([Path("/music/New.mp3")])
        assert len(transport.tracks()) == 3

    def test_delete_removes_from_both(self, provider, transport) -> None:
        """Deleting goes to the provider first, then rebases the transport."""
        transport.select_track(2)
        manager = LibraryManager(provider, transport)

        result = manager.delete("id-a")

        provider.delete_track.assert_called_once_with("id-a")
        assert result.removed_index == 0
        assert transport.state.current_index == 1

    def test_delete_unknown_at_source_drops_stale_entry(self, provider, transport) -> None:
        """A track the source no longer knows is still dropped locally."""
        provider.delete_track.return_value = False
        manager = LibraryManager(provider, transport)

        result = manager.delete("id-b")

        assert result.found is True
        assert [t.title for t in transport.tracks()] == ["A", "C"]

    def test_failed_delete_leaves_transport_alone(self, provider, transport, engine) -> None:
        """A provider failure on delete leaves the track and index untouched."""
        transport.select_track(1)
        engine.calls.clear()
        provider.delete_track.side_effect = LibraryError("Network error")
        manager = LibraryManager(provider, transport)

        with pytest.raises(LibraryError):
            manager.delete("id-b")
        assert transport.state.current_index == 1
        assert len(transport.tracks()) == 3
        assert engine.calls == []
