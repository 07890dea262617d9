"""Application context for explicit state passing.

Command handlers receive the AppContext instead of reaching for globals.
The transport inside it is the only holder of playback state.
"""

from dataclasses import dataclass

from rich.console import Console

from music_deck.core.config import Config
from music_deck.domain.library.manager import LibraryManager
from music_deck.domain.playback.engine import NotificationChannel
from music_deck.domain.playback.transport import Transport


@dataclass
class AppContext:
    """Everything an interactive session needs.

    Attributes:
        config: Application configuration
        transport: Playback state owner
        library: Provider/transport binding used for add and remove
        channel: Engine notifications waiting to be applied to the transport
        console: Rich Console for formatted output
    """

    config: Config
    transport: Transport
    library: LibraryManager
    channel: NotificationChannel
    console: Console
