"""Data models and constants for the ZipHopp archive viewer."""

from __future__ import annotations

from dataclasses import dataclass

# Application identity: single source of truth for platformdirs config paths
CONFIG_APP_NAME = "ziphopp"
APP_VERSION = "0.1"

# Recent-files history limits
DEFAULT_HISTORY_LIMIT = 5
MAX_HISTORY_LIMIT = 50

# Session phases
PHASE_EMPTY = "empty"
PHASE_OPENING = "opening"
PHASE_OPEN = "open"
PHASE_AWAITING_PASSWORD = "awaiting_password"
SESSION_PHASES = (PHASE_EMPTY, PHASE_OPENING, PHASE_OPEN, PHASE_AWAITING_PASSWORD)


@dataclass(slots=True)
class ArchiveMeta:
    """Display metadata reported by the backend for an open archive."""

    name: str
    size: str = ""  # Uncompressed size, already formatted for display
    compressed: str = ""  # On-disk size, already formatted for display


@dataclass(slots=True)
class ArchiveHandle:
    """The currently open archive."""

    path: str
    meta: ArchiveMeta
    entries: tuple[str, ...] = ()


@dataclass(slots=True)
class HistoryEntry:
    """A previously opened archive, as listed by the backend."""

    name: str
    path: str


@dataclass(slots=True)
class PendingPasswordRequest:
    """An archive waiting for the user to supply a password."""

    path: str
    message: str = ""  # Backend hint shown in the prompt (e.g. wrong password)


@dataclass(slots=True)
class PasswordRequired:
    """Open failure: the archive is readable but encrypted."""

    path: str
    message: str = ""


@dataclass(slots=True)
class OpenFailed:
    """Open failure of any other kind (missing file, corrupt archive, I/O)."""

    message: str


@dataclass(slots=True)
class RefreshFailed:
    """History refresh failure. Never shown to the user."""

    message: str = ""


OpenError = PasswordRequired | OpenFailed
OpenResult = ArchiveHandle | PasswordRequired | OpenFailed
RefreshResult = list[HistoryEntry] | RefreshFailed


@dataclass(slots=True)
class UserConfig:
    """User preferences persisted between runs."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    start_directory: str = ""  # Empty = home directory
    show_hidden_files: bool = False
    version: int = 1


__all__ = [
    "APP_VERSION",
    "CONFIG_APP_NAME",
    "DEFAULT_HISTORY_LIMIT",
    "MAX_HISTORY_LIMIT",
    "PHASE_AWAITING_PASSWORD",
    "PHASE_EMPTY",
    "PHASE_OPEN",
    "PHASE_OPENING",
    "SESSION_PHASES",
    "ArchiveHandle",
    "ArchiveMeta",
    "HistoryEntry",
    "OpenError",
    "OpenFailed",
    "OpenResult",
    "PasswordRequired",
    "PendingPasswordRequest",
    "RefreshFailed",
    "RefreshResult",
    "UserConfig",
]
