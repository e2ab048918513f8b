"""ZipHopp — browse ZIP archives, including password-protected ones, in a TUI."""

from ziphopp.history_view import HistoryView
from ziphopp.models import (
    APP_VERSION,
    PHASE_AWAITING_PASSWORD,
    PHASE_EMPTY,
    PHASE_OPEN,
    PHASE_OPENING,
    ArchiveHandle,
    ArchiveMeta,
    HistoryEntry,
    OpenFailed,
    PasswordRequired,
    PendingPasswordRequest,
    RefreshFailed,
    UserConfig,
)
from ziphopp.password_retry import PasswordRetryCoordinator
from ziphopp.services.gateway import RequestGateway
from ziphopp.services.interfaces import ArchiveBackend, BackendError
from ziphopp.session import ArchiveSession

__version__ = APP_VERSION

__all__ = [
    "PHASE_AWAITING_PASSWORD",
    "PHASE_EMPTY",
    "PHASE_OPEN",
    "PHASE_OPENING",
    "ArchiveBackend",
    "ArchiveHandle",
    "ArchiveMeta",
    "ArchiveSession",
    "BackendError",
    "HistoryEntry",
    "HistoryView",
    "OpenFailed",
    "PasswordRequired",
    "PasswordRetryCoordinator",
    "PendingPasswordRequest",
    "RefreshFailed",
    "RequestGateway",
    "UserConfig",
    "__version__",
]
