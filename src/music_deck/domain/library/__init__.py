"""Library domain - tracks, the ordered store, and library sources.

This domain handles:
- Track data model and id/title helpers
- The ordered in-memory library store
- Local and remote library providers
- Keeping a provider and the transport in step
"""

from .manager import LibraryManager
from .models import RemovalResult, Track, new_track_id, title_from_filename
from .provider import LibraryProvider
from .store import LibraryStore

__all__ = [
    "LibraryManager",
    "LibraryProvider",
    "LibraryStore",
    "RemovalResult",
    "Track",
    "new_track_id",
    "title_from_filename",
]
