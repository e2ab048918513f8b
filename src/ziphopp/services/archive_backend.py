"""Default in-process archive backend for ZIP files."""

from __future__ import annotations

import asyncio
import logging
import zipfile
import zlib
from pathlib import Path
from typing import Any

from ziphopp.services.history_store import HistoryStore, display_name
from ziphopp.services.interfaces import BackendError, ChooseFile

logger = logging.getLogger(__name__)

# General purpose bit 0: entry is encrypted
ZIP_FLAG_ENCRYPTED = 0x1

WRONG_PASSWORD_MESSAGE = "Incorrect password"

_READ_CHUNK = 64 * 1024

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: int) -> str:
    """Format a byte count for display (``"512 B"``, ``"1.5 MB"``)."""
    if num_bytes < 1024:
        return f"{max(0, num_bytes)} B"
    value = float(num_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS[1:]:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}"


def _password_required(path: str, message: str = "") -> BackendError:
    return BackendError({"password_required": True, "path": path, "message": message})


def _read_member(zf: zipfile.ZipFile, info: zipfile.ZipInfo, pwd: bytes | None = None) -> None:
    with zf.open(info, pwd=pwd) as member:
        while member.read(_READ_CHUNK):
            pass


def _check_readable(
    zf: zipfile.ZipFile,
    files: list[zipfile.ZipInfo],
    path: str,
    password: str | None,
) -> None:
    """Read an entry to prove the archive (and password) works.

    The ZipCrypto check byte lets roughly one wrong password in 256
    through, so an encrypted archive is verified by reading its smallest
    encrypted entry to the end, where the CRC check rejects bad keys.
    """
    encrypted = [info for info in files if info.flag_bits & ZIP_FLAG_ENCRYPTED]
    if not encrypted:
        with zf.open(files[0]) as member:
            member.read(1)
        return
    if password is None:
        raise _password_required(path)
    smallest = min(encrypted, key=lambda info: info.file_size)
    try:
        _read_member(zf, smallest, password.encode("utf-8"))
    except (RuntimeError, zlib.error, zipfile.BadZipFile, EOFError) as e:
        logger.debug("Password rejected for %s: %s", path, e)
        raise _password_required(path, WRONG_PASSWORD_MESSAGE) from e


def read_archive(path: str, password: str | None = None) -> dict[str, Any]:
    """Read a ZIP archive listing and return the backend success payload.

    Raises BackendError with the contract's failure payload on any problem.
    Blocking; callers on the event loop should run it in a thread.
    """
    archive_path = Path(path).expanduser().resolve()
    resolved = str(archive_path)
    try:
        compressed = archive_path.stat().st_size
        with zipfile.ZipFile(archive_path) as zf:
            infos = zf.infolist()
            files = [info for info in infos if not info.is_dir()]
            if files:
                _check_readable(zf, files, resolved, password)
            contents = [info.filename for info in infos]
            uncompressed = sum(info.file_size for info in infos)
    except FileNotFoundError:
        raise BackendError({"message": f"File not found: {resolved}"}) from None
    except IsADirectoryError:
        raise BackendError({"message": f"{resolved} is a directory, not an archive"}) from None
    except PermissionError:
        raise BackendError({"message": f"{resolved} is not readable (permission denied)"}) from None
    except zipfile.BadZipFile as e:
        raise BackendError({"message": f"Corrupt archive: {e}"}) from e
    except NotImplementedError as e:
        raise BackendError({"message": f"Unsupported archive: {e}"}) from e
    except OSError as e:
        raise BackendError({"message": f"Could not read {resolved}: {e}"}) from e

    return {
        "meta": {
            "name": display_name(resolved),
            "size": format_size(uncompressed),
            "compressed": format_size(compressed),
        },
        "contents": contents,
        "path": resolved,
    }


class LocalArchiveBackend:
    """Archive backend that reads ZIP files from the local file system.

    Successful opens are recorded in the history store. When no path is
    given, the injected ``choose_file`` coroutine picks one; a dismissed
    chooser fails with an empty message, which the UI treats as silent.
    """

    def __init__(self, history: HistoryStore, *, choose_file: ChooseFile | None = None) -> None:
        self._history = history
        self._choose_file = choose_file

    @property
    def history(self) -> HistoryStore:
        return self._history

    def set_file_chooser(self, choose_file: ChooseFile | None) -> None:
        self._choose_file = choose_file

    async def _choose(self) -> str:
        if self._choose_file is None:
            raise BackendError({"message": "No file chooser is available"})
        chosen = await self._choose_file()
        if not chosen:
            logger.debug("File chooser dismissed without a selection")
            raise BackendError({"message": ""})
        return chosen

    async def open_file(
        self,
        *,
        path: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        if path is None:
            path = await self._choose()
        payload = await asyncio.to_thread(read_archive, path, password)
        # History writes stay on the loop thread; refresh() reads there too.
        self._history.insert(payload["path"])
        logger.debug("Opened %s (%d entries)", payload["path"], len(payload["contents"]))
        return payload

    async def refresh(self) -> dict[str, Any]:
        return self._history.refresh()


__all__ = [
    "WRONG_PASSWORD_MESSAGE",
    "ZIP_FLAG_ENCRYPTED",
    "LocalArchiveBackend",
    "format_size",
    "read_archive",
]
