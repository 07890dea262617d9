"""Tests for the in-memory LibraryStore."""

from music_deck.domain.library.store import LibraryStore


class TestLibraryStore:
    """Tests for LibraryStore ordering and lookups."""

    def test_empty_store(self) -> None:
        """An empty store has no tracks and no valid index."""
        store = LibraryStore()
        assert len(store) == 0
        assert store.length() == 0
        assert store.get(0) is None
        assert store.tracks() == []

    def test_add_preserves_order(self, track_factory) -> None:
        """Tracks are appended in insertion order."""
        store = LibraryStore(track_factory("A"))
        store.add(track_factory("B", "C"))
        assert [t.title for t in store] == ["A", "B", "C"]

    def test_get_out_of_range(self, track_factory) -> None:
        """Out-of-range and negative indices return None."""
        store = LibraryStore(track_factory("A", "B"))
        assert store.get(1).title == "B"
        assert store.get(2) is None
        assert store.get(-1) is None

    def test_remove_reports_index(self, track_factory) -> None:
        """Removing a track reports where it was."""
        store = LibraryStore(track_factory("A", "B", "C"))
        result = store.remove("id-b")
        assert result.removed_index == 1
        assert [t.title for t in store.tracks()] == ["A", "C"]

    def test_remove_unknown_id(self, track_factory) -> None:
        """Removing an unknown id is a reported no-op."""
        store = LibraryStore(track_factory("A"))
        result = store.remove("nope")
        assert result.found is False
        assert len(store) == 1

    def test_index_of(self, track_factory) -> None:
        """index_of finds tracks by id."""
        store = LibraryStore(track_factory("A", "B"))
        assert store.index_of("id-b") == 1
        assert store.index_of("id-z") is None

    def test_tracks_returns_copy(self, track_factory) -> None:
        """Mutating the returned list does not touch the store."""
        store = LibraryStore(track_factory("A"))
        snapshot = store.tracks()
        snapshot.clear()
        assert len(store) == 1
