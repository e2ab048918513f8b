"""Request gateway between the session core and the archive backend.

The gateway is the only place that knows the backend's raw shapes. Every
response leaves it as one of the typed results from ``ziphopp.models``:

    open_archive()     -> ArchiveHandle | PasswordRequired | OpenFailed
    refresh_history()  -> list[HistoryEntry] | RefreshFailed

It never raises for backend problems and never retries.
"""

from __future__ import annotations

import logging
from typing import Any

from ziphopp.models import (
    ArchiveHandle,
    ArchiveMeta,
    HistoryEntry,
    OpenError,
    OpenFailed,
    OpenResult,
    PasswordRequired,
    RefreshFailed,
    RefreshResult,
)
from ziphopp.services.interfaces import ArchiveBackend, BackendError

logger = logging.getLogger(__name__)

MALFORMED_RESPONSE_MESSAGE = "The archive backend returned an unexpected response"


class MalformedResponseError(ValueError):
    """Raised internally when a backend success payload has the wrong shape."""


def _display_value(value: Any) -> str:
    """Meta values are opaque display strings or plain numbers."""
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


def parse_open_payload(payload: Any) -> ArchiveHandle:
    """Build an ArchiveHandle from a backend success payload."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("open payload is not an object")
    path = payload.get("path")
    if not isinstance(path, str) or not path:
        raise MalformedResponseError("open payload has no path")
    contents = payload.get("contents", [])
    if not isinstance(contents, list) or not all(isinstance(c, str) for c in contents):
        raise MalformedResponseError("open payload contents are not a list of strings")
    meta = payload.get("meta", {})
    if not isinstance(meta, dict):
        meta = {}
    name = meta.get("name")
    return ArchiveHandle(
        path=path,
        meta=ArchiveMeta(
            name=name if isinstance(name, str) and name else path,
            size=_display_value(meta.get("size")),
            compressed=_display_value(meta.get("compressed")),
        ),
        entries=tuple(contents),
    )


def parse_open_failure(payload: Any, requested_path: str | None) -> OpenError:
    """Normalize a backend failure payload into the tagged open error.

    The ``password_required`` flag is the only discriminant; the message
    text is carried along but never inspected.
    """
    if not isinstance(payload, dict):
        return OpenFailed(message=str(payload) if payload else "")
    message = payload.get("message")
    message = message if isinstance(message, str) else ""
    if payload.get("password_required") is True:
        path = payload.get("path")
        if not isinstance(path, str) or not path:
            path = requested_path or ""
        if path:
            return PasswordRequired(path=path, message=message)
        logger.warning("Backend asked for a password without naming the archive")
        return OpenFailed(message=message or MALFORMED_RESPONSE_MESSAGE)
    return OpenFailed(message=message)


def parse_history_payload(payload: Any) -> list[HistoryEntry]:
    """Build the history list from a backend refresh payload.

    Order is preserved exactly as given; entries that are not
    ``{name, path}`` objects are skipped.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("refresh payload is not an object")
    raw = payload.get("history")
    if not isinstance(raw, list):
        raise MalformedResponseError("refresh payload has no history list")
    entries: list[HistoryEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        path = item.get("path")
        if not isinstance(path, str) or not path:
            continue
        name = item.get("name")
        entries.append(HistoryEntry(name=name if isinstance(name, str) and name else path, path=path))
    return entries


class RequestGateway:
    """Typed boundary issuing ``open_file`` and ``refresh`` against a backend."""

    __slots__ = ("_backend",)

    def __init__(self, backend: ArchiveBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> ArchiveBackend:
        return self._backend

    async def open_archive(
        self,
        path: str | None = None,
        password: str | None = None,
    ) -> OpenResult:
        """Open an archive. ``path=None`` lets the backend ask the user for a file."""
        request: dict[str, str] = {}
        if path is not None:
            request["path"] = path
        if password is not None:
            request["password"] = password

        try:
            payload = await self._backend.open_file(**request)
        except BackendError as exc:
            return parse_open_failure(exc.payload, path)
        except Exception as exc:
            logger.warning("Archive backend open failed for %r: %s", path, exc, exc_info=True)
            return OpenFailed(message=str(exc) or MALFORMED_RESPONSE_MESSAGE)

        try:
            return parse_open_payload(payload)
        except MalformedResponseError as exc:
            logger.warning("Malformed open response for %r: %s", path, exc)
            return OpenFailed(message=MALFORMED_RESPONSE_MESSAGE)

    async def refresh_history(self) -> RefreshResult:
        """Fetch the backend's recent-files list."""
        try:
            payload = await self._backend.refresh()
        except BackendError as exc:
            message = exc.payload.get("message") if isinstance(exc.payload, dict) else None
            return RefreshFailed(message=message if isinstance(message, str) else "")
        except Exception as exc:
            logger.warning("Archive backend refresh failed: %s", exc, exc_info=True)
            return RefreshFailed(message=str(exc))

        try:
            return parse_history_payload(payload)
        except MalformedResponseError as exc:
            logger.warning("Malformed refresh response: %s", exc)
            return RefreshFailed(message=str(exc))


__all__ = [
    "MALFORMED_RESPONSE_MESSAGE",
    "MalformedResponseError",
    "RequestGateway",
    "parse_history_payload",
    "parse_open_failure",
    "parse_open_payload",
]
