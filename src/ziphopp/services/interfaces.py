"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ziphopp.models import DEFAULT_HISTORY_LIMIT

ChooseFile = Callable[[], Awaitable[str | None]]


class BackendError(Exception):
    """Failure raised by an archive backend.

    ``payload`` is the raw failure shape of the backend contract: either
    ``{"password_required": True, "path": ...}`` or ``{"message": ...}``.
    Only the request gateway is expected to look inside it.
    """

    def __init__(self, payload: dict[str, Any]) -> None:
        super().__init__(payload.get("message") or "archive backend error")
        self.payload = payload


@runtime_checkable
class ArchiveBackend(Protocol):
    """Interface for the external archive backend.

    ``open_file`` returns ``{"meta": {name, size, compressed}, "contents":
    [...], "path": ...}``; ``refresh`` returns ``{"history": [{name, path}]}``.
    Both raise ``BackendError`` on failure.
    """

    async def open_file(
        self,
        *,
        path: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        """Open an archive, prompting for a file when ``path`` is omitted."""
        ...

    async def refresh(self) -> dict[str, Any]:
        """Return the backend's recent-files list."""
        ...


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    backend: ArchiveBackend


def build_default_app_services(
    *,
    choose_file: ChooseFile | None = None,
    history_db_path: Path | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> AppServices:
    """Build default app services backed by the local ZIP backend."""
    from ziphopp.config import get_history_db_path
    from ziphopp.services.archive_backend import LocalArchiveBackend
    from ziphopp.services.history_store import HistoryStore

    store = HistoryStore(history_db_path or get_history_db_path(), max_entries=history_limit)
    return AppServices(backend=LocalArchiveBackend(store, choose_file=choose_file))


__all__ = [
    "AppServices",
    "ArchiveBackend",
    "BackendError",
    "ChooseFile",
    "build_default_app_services",
]
