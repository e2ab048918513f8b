"""Archive backend boundary: backend contract, default ZIP backend, request gateway."""

from ziphopp.services.archive_backend import LocalArchiveBackend, format_size, read_archive
from ziphopp.services.gateway import RequestGateway
from ziphopp.services.history_store import HistoryStore
from ziphopp.services.interfaces import (
    AppServices,
    ArchiveBackend,
    BackendError,
    build_default_app_services,
)

__all__ = [
    "AppServices",
    "ArchiveBackend",
    "BackendError",
    "HistoryStore",
    "LocalArchiveBackend",
    "RequestGateway",
    "build_default_app_services",
    "format_size",
    "read_archive",
]
