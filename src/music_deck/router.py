"""
Command routing for Music Deck.

Routes user commands to the appropriate handler functions.
"""

import shlex
from typing import List, Tuple

from music_deck.commands import library, playback
from music_deck.context import AppContext
from music_deck.core.output import log


def print_help(ctx: AppContext) -> None:
    """Display help information for available commands."""
    help_text = """
Music Deck - personal music player

Playback:
  play [n]             Play track n, or resume the current track
  pause                Pause playback
  toggle               Toggle play/pause (starts track 1 when nothing is selected)
  next                 Next track (respects shuffle and repeat)
  prev                 Previous track, or restart if more than a few seconds in
  seek <secs|pct%>     Seek within the current track
  vol [0-100]          Show or set volume
  mute                 Toggle mute
  shuffle [on|off]     Toggle or set shuffle
  repeat [off|all|one] Cycle or set repeat mode
  status               Show current track and settings

Library:
  ls                   List tracks
  add <path> [...]     Add audio files or directories
  rm <n>               Remove track n

  help                 Show this help
  quit                 Exit
"""
    ctx.console.print(help_text.strip(), highlight=False)


def parse_command(user_input: str) -> Tuple[str, List[str]]:
    """
    Parse user input into command and arguments.

    Quoted arguments keep their spaces ('add "My Music/a b.mp3"').

    Returns:
        Tuple of (command, args) where command is lowercase
    """
    try:
        parts = shlex.split(user_input)
    except ValueError:
        parts = user_input.strip().split()
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]


COMMANDS = {
    "play": playback.handle_play_command,
    "pause": playback.handle_pause_command,
    "toggle": playback.handle_toggle_command,
    "next": playback.handle_next_command,
    "skip": playback.handle_next_command,
    "prev": playback.handle_prev_command,
    "seek": playback.handle_seek_command,
    "vol": playback.handle_volume_command,
    "volume": playback.handle_volume_command,
    "mute": playback.handle_mute_command,
    "shuffle": playback.handle_shuffle_command,
    "repeat": playback.handle_repeat_command,
    "status": playback.handle_status_command,
    "ls": library.handle_list_command,
    "list": library.handle_list_command,
    "add": library.handle_add_command,
    "rm": library.handle_remove_command,
    "remove": library.handle_remove_command,
}


def handle_command(ctx: AppContext, command: str, args: List[str]) -> bool:
    """
    Handle a single command.

    Args:
        ctx: Application context
        command: Command name
        args: Command arguments

    Returns:
        Whether the interactive loop should continue
    """
    if not command:
        return True

    if command in ("quit", "exit"):
        log("Goodbye!")
        return False

    if command == "help":
        print_help(ctx)
        return True

    handler = COMMANDS.get(command)
    if handler is None:
        log(f"Unknown command: {command}. Type 'help' for available commands.", level="warning")
        return True

    return handler(ctx, args)
