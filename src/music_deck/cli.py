"""
Music Deck CLI - entry point and interactive loop
"""

import argparse
import sys
import threading
from pathlib import Path
from typing import List, Optional

from loguru import logger

from music_deck import router
from music_deck.commands.library import collect_audio_files
from music_deck.context import AppContext
from music_deck.core.config import (
    LOG_LEVELS,
    REPEAT_MODES,
    Config,
    ensure_directories,
    get_log_file_path,
    load_config,
)
from music_deck.core.console import get_console
from music_deck.core.errors import LibraryError, MpvError
from music_deck.core.output import log, setup_loguru
from music_deck.domain.library.manager import LibraryManager
from music_deck.domain.library.providers import LocalProvider, RemoteProvider
from music_deck.domain.playback.engine import NotificationChannel
from music_deck.domain.playback.mpv import MpvEngine, check_mpv_available
from music_deck.domain.playback.transport import Transport


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-deck",
        description="Music Deck - personal music player with shuffle and repeat",
    )
    parser.add_argument(
        "paths", nargs="*", help="Audio files or directories to load at startup"
    )
    parser.add_argument("--server", help="Upload service base URL (remote library)")
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument(
        "--shuffle", action="store_true", help="Start with shuffle enabled"
    )
    parser.add_argument("--repeat", choices=REPEAT_MODES, help="Start with a repeat mode")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Override the log level"
    )
    return parser


def apply_overrides(cfg: Config, args: argparse.Namespace) -> Config:
    """Fold command-line options into the loaded configuration."""
    if args.server:
        cfg.library.server_url = args.server
    if args.shuffle:
        cfg.player.shuffle_on_start = True
    if args.repeat:
        cfg.player.repeat_mode = args.repeat
    if args.log_level:
        cfg.logging.level = args.log_level.upper()
    return cfg


def start_notification_pump(
    channel: NotificationChannel, transport: Transport, stop: threading.Event
) -> threading.Thread:
    """Apply engine notifications to the transport from a background thread."""

    def pump() -> None:
        threading.current_thread().silent_logging = True
        while not stop.is_set():
            channel.wait(timeout=0.5)
            try:
                channel.drain(transport)
            except Exception:
                logger.exception("Failed to apply playback notifications")

    thread = threading.Thread(target=pump, name="notification-pump", daemon=True)
    thread.start()
    return thread


def load_initial_library(ctx: AppContext, paths: List[str]) -> None:
    """Load the remote library, or the given and configured local paths."""
    try:
        if isinstance(ctx.library.provider, RemoteProvider):
            ctx.library.load()
            if paths:
                ctx.library.upload(collect_audio_files(paths, ctx.config.library))
        else:
            sources = list(paths) + list(ctx.config.library.library_paths)
            if sources:
                ctx.library.upload(collect_audio_files(sources, ctx.config.library))
    except LibraryError as e:
        log(f"❌ Could not load library: {e}", level="error")

    count = len(ctx.transport.library)
    log(f"Library: {count} track{'s' if count != 1 else ''}. Type 'help' for commands.")


def interactive_loop(ctx: AppContext) -> None:
    while True:
        try:
            user_input = ctx.console.input("[bold cyan]deck>[/bold cyan] ")
        except (EOFError, KeyboardInterrupt):
            ctx.console.print()
            break

        command, args = router.parse_command(user_input)
        try:
            if not router.handle_command(ctx, command, args):
                break
        except Exception as e:
            logger.exception(f"Command failed: {command}")
            log(f"❌ {command} failed: {e}", level="error")


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = apply_overrides(
        load_config(Path(args.config).expanduser() if args.config else None), args
    )
    ensure_directories()
    setup_loguru(
        get_log_file_path(cfg),
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )

    console = get_console()
    if not check_mpv_available(cfg.player.mpv_path):
        log(f"❌ mpv not found ({cfg.player.mpv_path}). Install mpv to play music.", level="error")
        return 1

    channel = NotificationChannel()
    engine = MpvEngine.from_config(cfg.player, channel)
    try:
        engine.start()
    except MpvError as e:
        log(f"❌ {e}", level="error")
        return 1

    transport = Transport.from_config(engine, cfg.player)
    if cfg.library.server_url:
        provider = RemoteProvider(cfg.library)
    else:
        provider = LocalProvider(cfg.library)

    ctx = AppContext(
        config=cfg,
        transport=transport,
        library=LibraryManager(provider, transport),
        channel=channel,
        console=console,
    )

    stop = threading.Event()
    pump = start_notification_pump(channel, transport, stop)
    try:
        load_initial_library(ctx, args.paths)
        interactive_loop(ctx)
    finally:
        stop.set()
        pump.join(timeout=1.0)
        transport.close()
    return 0


def main() -> None:
    """Main entry point for the music-deck command."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
