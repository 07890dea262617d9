"""Tests for library models and helpers."""

import re

import pytest

from music_deck.domain.library.models import (
    RemovalResult,
    Track,
    new_track_id,
    title_from_filename,
    track_from_dict,
)


class TestTitleFromFilename:
    """Tests for title_from_filename."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("song.mp3", "song"),
            ("a.live.mp3", "a.live"),
            ("My Track.flac", "My Track"),
            ("noext", "noext"),
            (".hidden", ".hidden"),
            ("trailing.", "trailing."),
        ],
    )
    def test_strips_last_extension(self, filename: str, expected: str) -> None:
        """Only the final extension is removed; names without one are kept."""
        assert title_from_filename(filename) == expected


class TestNewTrackId:
    """Tests for new_track_id."""

    def test_format(self) -> None:
        """Ids look like '<epoch-ms>-<6 base-36 chars>'."""
        assert re.fullmatch(r"\d{13,}-[0-9a-z]{6}", new_track_id())

    def test_ids_differ(self) -> None:
        """Ids generated back to back are practically unique."""
        ids = {new_track_id() for _ in range(200)}
        assert len(ids) > 190


class TestTrackFromDict:
    """Tests for track_from_dict."""

    def test_builds_track(self) -> None:
        """A complete mapping becomes a Track."""
        track = track_from_dict({"id": "1", "title": "One", "url": "/uploads/1.mp3"})
        assert track == Track(id="1", title="One", url="/uploads/1.mp3")

    def test_missing_title_uses_id(self) -> None:
        """Tracks without a title are titled by their id."""
        track = track_from_dict({"id": "abc", "url": "/uploads/abc.mp3"})
        assert track.title == "abc"

    def test_missing_url_raises(self) -> None:
        """A url is required."""
        with pytest.raises(KeyError):
            track_from_dict({"id": "abc", "title": "x"})


class TestRemovalResult:
    """Tests for RemovalResult."""

    def test_found(self) -> None:
        """found is True only when an index was removed."""
        assert RemovalResult(removed_index=0).found is True
        assert RemovalResult().found is False
