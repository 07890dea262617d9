"""Library provider implementations (local files, remote upload service)."""

from .local import LocalProvider, is_supported_format, scan_directory
from .remote import RemoteProvider

__all__ = ["LocalProvider", "RemoteProvider", "is_supported_format", "scan_directory"]
