"""Exceptions shared across Music Deck layers."""


class MusicDeckError(Exception):
    """Base exception for Music Deck operations."""

    pass


class LibraryError(MusicDeckError):
    """Raised when a library collaborator (local or remote) fails."""

    pass


class MpvError(MusicDeckError):
    """Raised when the mpv process cannot be started or reached."""

    pass
