"""
Configuration management for Music Deck
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

REPEAT_MODES = ("off", "all", "one")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class PlayerConfig:
    """Configuration for the playback engine and transport."""

    mpv_path: str = "mpv"
    mpv_socket_path: Optional[str] = None
    volume: float = 0.8  # 0.0 - 1.0
    unmute_volume: float = 0.8  # Level restored by the mute toggle
    shuffle_on_start: bool = False
    repeat_mode: str = "off"  # off, all, one
    restart_threshold_seconds: float = 5.0  # "previous" restarts the track past this point
    poll_interval_seconds: float = 0.25

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be between 0 and 1, got {self.volume}")
        if not 0.0 < self.unmute_volume <= 1.0:
            raise ValueError(
                f"unmute_volume must be in (0, 1], got {self.unmute_volume}"
            )
        if self.repeat_mode not in REPEAT_MODES:
            raise ValueError(
                f"Invalid repeat_mode: {self.repeat_mode!r}. "
                f"Valid modes are: {', '.join(REPEAT_MODES)}"
            )
        if self.restart_threshold_seconds < 0:
            raise ValueError("restart_threshold_seconds must not be negative")
        if self.poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")


@dataclass
class LibraryConfig:
    """Configuration for library sources."""

    server_url: Optional[str] = None  # Remote upload service; local mode when unset
    library_paths: List[str] = field(default_factory=list)
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]
    )
    scan_recursive: bool = True
    request_timeout_seconds: float = 10.0


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/music-deck/music-deck.log)
    )
    rotation: str = "10 MB"
    retention: int = 5


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    library: LibraryConfig = field(default_factory=LibraryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "music-deck"
    return Path.home() / ".config" / "music-deck"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "music-deck"
    return Path.home() / ".local" / "share" / "music-deck"


def get_log_file_path(config: Config) -> Path:
    """Resolve the log file, honouring a custom path from [logging]."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "music-deck.log"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. MUSIC_DECK_CONFIG environment variable
    2. Current working directory
    3. XDG_CONFIG_HOME/music-deck (or ~/.config/music-deck)
    """
    env_config = os.environ.get("MUSIC_DECK_CONFIG")
    if env_config:
        return Path(env_config).expanduser()

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Music Deck Configuration

[player]
# mpv executable
mpv_path = "mpv"

# Path for mpv socket (auto-generated if not specified)
# mpv_socket_path = "/tmp/music-deck-mpv"

# Startup volume (0.0 - 1.0)
volume = 0.8

# Volume restored when unmuting
unmute_volume = 0.8

# Start with shuffle enabled
shuffle_on_start = false

# Repeat mode on start: off, all, one
repeat_mode = "off"

# "prev" restarts the current track when more than this many seconds have played
restart_threshold_seconds = 5.0

# How often to read position from mpv (seconds)
poll_interval_seconds = 0.25

[library]
# Upload service base URL (leave unset for local-only mode)
# server_url = "http://localhost:4000"

# Directories loaded at startup in local mode
library_paths = []

# Supported audio file formats
supported_formats = [".mp3", ".m4a", ".wav", ".flac", ".ogg", ".opus"]

# Recursively scan subdirectories
scan_recursive = true

# HTTP timeout for the upload service (seconds)
request_timeout_seconds = 10.0

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/music-deck/music-deck.log)
# log_file = "/path/to/music-deck.log"

# Rotate the log file at this size
rotation = "10 MB"

# Number of rotated log files to keep
retention = 5
""".strip()


def _parse_player(data: dict, defaults: PlayerConfig) -> PlayerConfig:
    player = PlayerConfig(
        mpv_path=data.get("mpv_path", defaults.mpv_path),
        mpv_socket_path=data.get("mpv_socket_path"),
        volume=float(data.get("volume", defaults.volume)),
        unmute_volume=float(data.get("unmute_volume", defaults.unmute_volume)),
        shuffle_on_start=data.get("shuffle_on_start", defaults.shuffle_on_start),
        repeat_mode=str(data.get("repeat_mode", defaults.repeat_mode)).lower(),
        restart_threshold_seconds=float(
            data.get("restart_threshold_seconds", defaults.restart_threshold_seconds)
        ),
        poll_interval_seconds=float(
            data.get("poll_interval_seconds", defaults.poll_interval_seconds)
        ),
    )
    try:
        player.validate()
    except ValueError as e:
        logger.warning(f"Invalid player configuration: {e}. Using defaults.")
        return PlayerConfig()
    return player


def _string_list(data: dict, key: str, default: List[str]) -> List[str]:
    """Read a list of strings, keeping the default when the value has another shape."""
    value = data.get(key, default)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        logger.warning(f"{key} must be a list of strings, got {value!r}. Using defaults.")
        return list(default)
    return value


def _parse_library(data: dict, defaults: LibraryConfig) -> LibraryConfig:
    return LibraryConfig(
        server_url=data.get("server_url") or None,
        library_paths=[
            str(Path(p).expanduser())
            for p in _string_list(data, "library_paths", defaults.library_paths)
        ],
        supported_formats=[
            fmt.lower()
            for fmt in _string_list(data, "supported_formats", defaults.supported_formats)
        ],
        scan_recursive=bool(data.get("scan_recursive", defaults.scan_recursive)),
        request_timeout_seconds=float(
            data.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
    )


def _parse_logging(data: dict, defaults: LoggingConfig) -> LoggingConfig:
    log_file = data.get("log_file")
    if log_file:
        log_file = str(Path(str(log_file)).expanduser())

    level = str(data.get("level", defaults.level)).upper()
    if level not in LOG_LEVELS:
        logger.warning(
            f"Invalid log level: {level!r}. Valid levels are: {', '.join(LOG_LEVELS)}. "
            f"Using {defaults.level}."
        )
        level = defaults.level

    return LoggingConfig(
        level=level,
        log_file=log_file,
        rotation=str(data.get("rotation", defaults.rotation)),
        retention=data.get("retention", defaults.retention),
    )


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - MUSIC_DECK_SERVER_URL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = get_config_path()

    config = Config()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)

            if "player" in toml_data:
                config.player = _parse_player(toml_data["player"], config.player)
            if "library" in toml_data:
                config.library = _parse_library(toml_data["library"], config.library)
            if "logging" in toml_data:
                config.logging = _parse_logging(toml_data["logging"], config.logging)

        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Error loading configuration from {config_path}: {e}")
            logger.warning("Using default configuration.")
            config = Config()

    server_url = os.environ.get("MUSIC_DECK_SERVER_URL")
    if server_url:
        config.library.server_url = server_url

    return config


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
