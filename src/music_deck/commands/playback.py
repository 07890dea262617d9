"""
Playback command handlers for Music Deck.

Handles: play, pause, next, prev, seek, vol, mute, shuffle, repeat, status
"""

from typing import List

from music_deck.context import AppContext
from music_deck.core.output import log
from music_deck.domain.playback.queue import RepeatMode
from music_deck.domain.playback.transport import TransportStatus
from music_deck.helpers import format_time, parse_position


def _announce(ctx: AppContext) -> None:
    track = ctx.transport.current_track
    state = ctx.transport.state
    if track is None:
        log("⏹ Nothing selected", level="info")
    elif state.is_playing:
        log(f"▶ [{state.current_index + 1}] {track.title}", level="info")
    else:
        log(f"⏸ [{state.current_index + 1}] {track.title}", level="info")


def handle_play_command(ctx: AppContext, args: List[str]) -> bool:
    """Play a track by list position, or resume the current one."""
    if args:
        index = parse_position(args[0])
        if index is None or index >= len(ctx.transport.library):
            log(f"No track at position {args[0]}", level="warning")
            return True
        ctx.transport.select_track(index)
    elif len(ctx.transport.library) == 0:
        log("Library is empty. Use 'add <path>' first.", level="warning")
        return True
    elif not ctx.transport.state.is_playing:
        ctx.transport.toggle_play_pause()

    _announce(ctx)
    return True


def handle_pause_command(ctx: AppContext, args: List[str]) -> bool:
    if ctx.transport.status == TransportStatus.PLAYING:
        ctx.transport.toggle_play_pause()
    _announce(ctx)
    return True


def handle_toggle_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.transport.toggle_play_pause()
    _announce(ctx)
    return True


def handle_next_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.transport.request_next()
    _announce(ctx)
    return True


def handle_prev_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.transport.request_previous()
    _announce(ctx)
    return True


def handle_seek_command(ctx: AppContext, args: List[str]) -> bool:
    """Seek to seconds ('seek 90') or to a percentage ('seek 50%')."""
    if not args:
        log("Usage: seek <seconds> | seek <percent>%", level="warning")
        return True

    target = args[0]
    try:
        if target.endswith("%"):
            ctx.transport.seek_fraction(float(target[:-1]) / 100.0)
        else:
            ctx.transport.seek(float(target))
    except ValueError:
        log(f"Invalid position: {target}", level="warning")
        return True

    state = ctx.transport.state
    log(f"⏩ {format_time(state.current_time)} / {format_time(state.duration)}")
    return True


def handle_volume_command(ctx: AppContext, args: List[str]) -> bool:
    """Show or set volume (0-100)."""
    if args:
        try:
            ctx.transport.set_volume(float(args[0]) / 100.0)
        except ValueError:
            log(f"Invalid volume: {args[0]}", level="warning")
            return True
    log(f"🔊 Volume: {round(ctx.transport.state.volume * 100)}%")
    return True


def handle_mute_command(ctx: AppContext, args: List[str]) -> bool:
    ctx.transport.toggle_mute()
    volume = ctx.transport.state.volume
    log("🔇 Muted" if volume == 0 else f"🔊 Volume: {round(volume * 100)}%")
    return True


def handle_shuffle_command(ctx: AppContext, args: List[str]) -> bool:
    """Toggle shuffle, or set it with 'shuffle on|off'."""
    if not args:
        enabled = ctx.transport.toggle_shuffle()
    elif args[0].lower() in ("on", "off"):
        enabled = args[0].lower() == "on"
        ctx.transport.set_shuffle(enabled)
    else:
        log("Usage: shuffle [on|off]", level="warning")
        return True

    log(f"🔀 Shuffle {'on' if enabled else 'off'}")
    return True


def handle_repeat_command(ctx: AppContext, args: List[str]) -> bool:
    """Cycle repeat mode, or set it with 'repeat off|all|one'."""
    if not args:
        mode = ctx.transport.cycle_repeat_mode()
    else:
        try:
            mode = RepeatMode.parse(args[0])
        except ValueError:
            log("Usage: repeat [off|all|one]", level="warning")
            return True
        ctx.transport.set_repeat_mode(mode)

    log(f"🔁 Repeat: {mode.value}")
    return True


def handle_status_command(ctx: AppContext, args: List[str]) -> bool:
    state = ctx.transport.state
    track = ctx.transport.current_track

    ctx.console.print(f"[bold]{track.title if track else 'No track selected'}[/bold]")
    ctx.console.print(
        f"  {ctx.transport.status.value}  "
        f"{format_time(state.current_time)} / {format_time(state.duration)}"
    )
    ctx.console.print(
        f"  shuffle: {'on' if state.shuffle else 'off'}  "
        f"repeat: {state.repeat_mode.value}  "
        f"volume: {round(state.volume * 100)}%"
    )
    if state.is_playing and not state.play_confirmed:
        ctx.console.print("  [yellow]playback not confirmed by engine[/yellow]")
    return True
