"""
Library command handlers for Music Deck.

Handles: ls, add, rm
"""

from pathlib import Path
from typing import List

from music_deck.context import AppContext
from music_deck.core.config import LibraryConfig
from music_deck.core.errors import LibraryError
from music_deck.core.output import log
from music_deck.domain.library.providers.local import scan_directory
from music_deck.helpers import parse_position


def collect_audio_files(paths: List[str], config: LibraryConfig) -> List[Path]:
    """Expand directories into their supported audio files; keep files as given.

    Raises:
        LibraryError: If a directory cannot be scanned
    """
    files: List[Path] = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            files.extend(scan_directory(path, config))
        else:
            files.append(path)
    return files


def handle_list_command(ctx: AppContext, args: List[str]) -> bool:
    tracks = ctx.transport.tracks()
    if not tracks:
        log("Library is empty. Use 'add <path>' to add music.")
        return True

    current = ctx.transport.state.current_index
    for i, track in enumerate(tracks):
        marker = "▶" if i == current else " "
        style = "bold cyan" if i == current else None
        ctx.console.print(f"{marker} {i + 1:>3}. {track.title}", style=style, highlight=False)
    return True


def handle_add_command(ctx: AppContext, args: List[str]) -> bool:
    if not args:
        log("Usage: add <file-or-directory> [...]", level="warning")
        return True

    try:
        files = collect_audio_files(args, ctx.config.library)
        if not files:
            log("No supported audio files found", level="warning")
            return True
        added = ctx.library.upload(files)
    except LibraryError as e:
        log(f"❌ {e}", level="error")
        return True

    log(f"✓ Added {len(added)} tracks", level="success")
    return True


def handle_remove_command(ctx: AppContext, args: List[str]) -> bool:
    if not args:
        log("Usage: rm <position>", level="warning")
        return True

    index = parse_position(args[0])
    track = ctx.transport.library.get(index) if index is not None else None
    if track is None:
        log(f"No track at position {args[0]}", level="warning")
        return True

    try:
        ctx.library.delete(track.id)
    except LibraryError as e:
        log(f"❌ {e}", level="error")
        return True

    log(f"🗑 Removed {track.title}", level="success")
    return True
