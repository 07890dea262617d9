"""
MPV playback engine over JSON IPC.

mpv runs as a child process with --idle and --keep-open, so a finished track
stays loaded with eof-reached=true until the next loadfile or seek. A poll
thread turns mpv's properties into Progress and EndedNaturally notifications;
play() runs on a worker thread and never blocks the caller.
"""

import json
import os
import socket
import subprocess
import tempfile
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from itertools import count
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from music_deck.core.config import PlayerConfig
from music_deck.core.errors import MpvError

from .engine import NotificationChannel

SOCKET_TIMEOUT = 2.0
STARTUP_TIMEOUT = 5.0


def check_mpv_available(mpv_path: str = "mpv") -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            [mpv_path, "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


class MpvEngine:
    """PlaybackEngine backed by an mpv subprocess."""

    def __init__(
        self,
        channel: NotificationChannel,
        mpv_path: str = "mpv",
        socket_path: Optional[str] = None,
        volume: float = 0.8,
        poll_interval: float = 0.25,
    ):
        self.channel = channel
        self.mpv_path = mpv_path
        self.socket_path = socket_path or str(
            Path(tempfile.gettempdir()) / f"music-deck-mpv-{os.getpid()}"
        )
        self.volume = volume
        self.poll_interval = poll_interval

        self._process: Optional[subprocess.Popen] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._poll_thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._request_ids = count(1)
        self._socket_lock = threading.Lock()
        self._last_eof = False
        self._loaded_url: Optional[str] = None

    @classmethod
    def from_config(cls, config: PlayerConfig, channel: NotificationChannel) -> "MpvEngine":
        return cls(
            channel,
            mpv_path=config.mpv_path,
            socket_path=config.mpv_socket_path,
            volume=config.volume,
            poll_interval=config.poll_interval_seconds,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start mpv and the poll thread.

        Raises:
            MpvError: If mpv cannot be launched or its socket never appears
        """
        logger.info(f"Starting MPV player with socket: {self.socket_path}")

        if os.path.exists(self.socket_path):
            logger.debug(f"Removing existing socket: {self.socket_path}")
            os.unlink(self.socket_path)

        cmd = [
            self.mpv_path,
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            f"--input-ipc-server={self.socket_path}",
            f"--volume={round(self.volume * 100)}",
            "--keep-open=yes",
            "--pause=yes",
            "--load-scripts=no",
        ]

        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise MpvError(f"Failed to start MPV: {e}") from e

        deadline = time.monotonic() + STARTUP_TIMEOUT
        while not os.path.exists(self.socket_path):
            if time.monotonic() > deadline or self._process.poll() is not None:
                self._process.kill()
                raise MpvError(f"MPV socket creation timeout after {STARTUP_TIMEOUT}s")
            time.sleep(0.1)

        if self._get_property("idle-active") is None:
            self._process.kill()
            raise MpvError("MPV socket connection test failed")

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mpv-play")
        self._stop.clear()
        self._poll_thread = threading.Thread(
            target=self._poll_loop, name="mpv-poll", daemon=True
        )
        self._poll_thread.start()
        logger.info("MPV started successfully")

    def close(self) -> None:
        """Stop polling, kill mpv and remove the socket."""
        self._stop.set()
        if self._poll_thread is not None:
            self._poll_thread.join(timeout=2.0)
            self._poll_thread = None
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

        if self._process is not None:
            try:
                self._process.kill()
                self._process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Process already terminated or couldn't be killed
            self._process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    # ------------------------------------------------------------------
    # PlaybackEngine
    # ------------------------------------------------------------------

    def load(self, url: str) -> None:
        # Pause first so loadfile never starts playback on its own
        self._command("set_property", "pause", True)
        # Report the next end only after mpv has been seen past eof again
        self._last_eof = True
        self._loaded_url = url
        if not self._command("loadfile", url, "replace"):
            logger.warning(f"MPV refused to load: {url}")

    def play(self) -> Future:
        if self._executor is None:
            raise MpvError("MPV is not running")
        return self._executor.submit(self._command, "set_property", "pause", False)

    def pause(self) -> None:
        self._command("set_property", "pause", True)

    def seek(self, time: float) -> None:
        self._last_eof = True
        self._command("seek", float(time), "absolute")

    def set_volume(self, volume: float) -> None:
        self.volume = volume
        self._command("set_property", "volume", round(volume * 100, 1))

    # ------------------------------------------------------------------
    # IPC
    # ------------------------------------------------------------------

    def _send(self, *args: Any) -> Optional[dict]:
        """Send one JSON IPC command and return mpv's reply.

        mpv broadcasts events on every connection, so lines are read until
        the reply carrying our request_id arrives.
        """
        if not os.path.exists(self.socket_path):
            return None

        request_id = next(self._request_ids)
        payload = json.dumps({"command": list(args), "request_id": request_id}) + "\n"

        with self._socket_lock:
            try:
                with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                    sock.settimeout(SOCKET_TIMEOUT)
                    sock.connect(self.socket_path)
                    sock.sendall(payload.encode("utf-8"))
                    with sock.makefile("r", encoding="utf-8") as reader:
                        for line in reader:
                            try:
                                message = json.loads(line)
                            except json.JSONDecodeError:
                                continue
                            if message.get("request_id") == request_id:
                                return message
            except (socket.error, OSError) as e:
                logger.debug(f"MPV IPC error for {args[0]}: {e}")
        return None

    def _command(self, *args: Any) -> bool:
        response = self._send(*args)
        return response is not None and response.get("error") == "success"

    def _get_property(self, name: str) -> Any:
        response = self._send("get_property", name)
        if response is None or response.get("error") != "success":
            return None
        return response.get("data")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def poll_once(self) -> None:
        """Read position and end-of-file state and publish notifications."""
        position = self._get_property("time-pos")
        duration = self._get_property("duration")
        if position is not None:
            self.channel.publish_progress(float(position), float(duration or 0.0))

        eof = bool(self._get_property("eof-reached"))
        if eof and not self._last_eof:
            self.channel.publish_ended(self._loaded_url)
        self._last_eof = eof

    def _poll_loop(self) -> None:
        threading.current_thread().silent_logging = True
        while not self._stop.wait(self.poll_interval):
            if not self.is_running():
                logger.error("MPV process exited; polling stopped")
                return
            try:
                self.poll_once()
            except Exception:
                logger.exception("MPV poll failed")
