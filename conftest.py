"""Shared test fixtures for ZipHopp tests."""

from __future__ import annotations

import asyncio
import struct
import zipfile
import zlib
from collections import deque
from pathlib import Path
from typing import Any

import pytest

from ziphopp.models import ArchiveHandle, ArchiveMeta, HistoryEntry
from ziphopp.services.gateway import RequestGateway
from ziphopp.session import ArchiveSession

# ── Config isolation ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path, monkeypatch):
    """Point platformdirs at a temp directory so tests never touch real settings."""
    config_dir = tmp_path / "ziphopp-config"
    monkeypatch.setattr(
        "ziphopp.config.user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    return config_dir


# ── Backend double ───────────────────────────────────────────────────────────


class FakeBackend:
    """Archive backend double driven by queued results.

    Each queued item is a payload dict, an exception to raise, or an
    ``asyncio.Future`` the test resolves later to control response order.
    """

    def __init__(self) -> None:
        self.open_calls: list[dict[str, Any]] = []
        self.refresh_calls = 0
        self.open_results: deque[Any] = deque()
        self.refresh_results: deque[Any] = deque()
        self.default_history: dict[str, Any] = {"history": []}

    def hold_open(self) -> asyncio.Future:
        """Queue a pending open response and return its future."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.open_results.append(future)
        return future

    def hold_refresh(self) -> asyncio.Future:
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.refresh_results.append(future)
        return future

    @staticmethod
    async def _resolve(result: Any) -> Any:
        if isinstance(result, asyncio.Future):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return result

    async def open_file(self, **kwargs: Any) -> dict[str, Any]:
        self.open_calls.append(kwargs)
        return await self._resolve(self.open_results.popleft())

    async def refresh(self) -> dict[str, Any]:
        self.refresh_calls += 1
        if self.refresh_results:
            return await self._resolve(self.refresh_results.popleft())
        return self.default_history


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_session(fake_backend):
    """Factory fixture for an ArchiveSession wired to the fake backend."""

    def _make(on_change=None) -> ArchiveSession:
        return ArchiveSession(RequestGateway(fake_backend), on_change=on_change)

    return _make


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def open_payload():
    """Factory fixture for backend success payloads."""

    def _make(
        path: str = "/archives/sample.zip",
        contents: list[str] | None = None,
        name: str | None = None,
        size: str = "2.0 KB",
        compressed: str = "1.0 KB",
    ) -> dict[str, Any]:
        return {
            "meta": {
                "name": name if name is not None else Path(path).name,
                "size": size,
                "compressed": compressed,
            },
            "contents": list(contents) if contents is not None else ["a.txt", "b.txt"],
            "path": path,
        }

    return _make


@pytest.fixture
def make_handle():
    """Factory fixture for ArchiveHandle instances."""

    def _make(
        path: str = "/archives/sample.zip",
        entries: tuple[str, ...] = ("a.txt", "b.txt"),
    ) -> ArchiveHandle:
        return ArchiveHandle(
            path=path,
            meta=ArchiveMeta(name=Path(path).name, size="2.0 KB", compressed="1.0 KB"),
            entries=entries,
        )

    return _make


@pytest.fixture
def history_payload():
    """Factory fixture for backend refresh payloads."""

    def _make(*paths: str) -> dict[str, Any]:
        return {"history": [{"name": Path(p).name, "path": p} for p in paths]}

    return _make


@pytest.fixture
def history_entries():
    def _make(*paths: str) -> list[HistoryEntry]:
        return [HistoryEntry(name=Path(p).name, path=p) for p in paths]

    return _make


@pytest.fixture
def make_zip(tmp_path):
    """Create a real (unencrypted) ZIP archive under tmp_path."""

    def _make(name: str = "sample.zip", files: dict[str, bytes] | None = None) -> Path:
        archive = tmp_path / name
        members = files if files is not None else {"a.txt": b"hello", "docs/b.txt": b"world"}
        with zipfile.ZipFile(archive, "w") as zf:
            for member, data in members.items():
                zf.writestr(member, data)
        return archive

    return _make


# ── Encrypted archives ───────────────────────────────────────────────────────
# zipfile cannot write ZipCrypto entries, so these helpers lay the archive out
# by hand: deflated members, each behind the 12 byte traditional PKWARE header.


def _crc_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0xEDB88320 if crc & 1 else crc >> 1
        table.append(crc)
    return table


_CRC_TABLE = _crc_table()


def _zipcrypto_encrypt(password: bytes, plain: bytes) -> bytes:
    keys = [305419896, 591751049, 878082192]

    def crc_update(crc: int, byte: int) -> int:
        return (crc >> 8) ^ _CRC_TABLE[(crc ^ byte) & 0xFF]

    def update_keys(byte: int) -> None:
        keys[0] = crc_update(keys[0], byte)
        keys[1] = ((keys[1] + (keys[0] & 0xFF)) * 134775813 + 1) & 0xFFFFFFFF
        keys[2] = crc_update(keys[2], keys[1] >> 24)

    for byte in password:
        update_keys(byte)
    out = bytearray()
    for byte in plain:
        temp = keys[2] | 2
        out.append(byte ^ (((temp * (temp ^ 1)) >> 8) & 0xFF))
        update_keys(byte)
    return bytes(out)


def write_encrypted_zip(archive: Path, files: dict[str, bytes], password: str) -> Path:
    """Write ``files`` as deflated, ZipCrypto-encrypted members of ``archive``."""
    body = bytearray()
    central = bytearray()
    for name, data in files.items():
        crc = zlib.crc32(data)
        compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
        deflated = compressor.compress(data) + compressor.flush()
        # Fixed salt keeps the archives deterministic; the last byte is the check byte.
        header = bytes(range(11)) + bytes([(crc >> 24) & 0xFF])
        payload = _zipcrypto_encrypt(password.encode("utf-8"), header + deflated)
        encoded = name.encode("utf-8")
        offset = len(body)
        body += struct.pack(
            "<4s2B4HL2L2H",
            b"PK\x03\x04", 20, 0, 0x1, zipfile.ZIP_DEFLATED, 0, 33,
            crc, len(payload), len(data), len(encoded), 0,
        )
        body += encoded + payload
        central += struct.pack(
            "<4s4B4HL2L5H2L",
            b"PK\x01\x02", 20, 3, 20, 0, 0x1, zipfile.ZIP_DEFLATED, 0, 33,
            crc, len(payload), len(data), len(encoded), 0, 0, 0, 0, 0o644 << 16, offset,
        )
        central += encoded
    end = struct.pack(
        "<4s4H2LH", b"PK\x05\x06", 0, 0, len(files), len(files), len(central), len(body), 0
    )
    archive.write_bytes(bytes(body + central + end))
    return archive


@pytest.fixture
def make_encrypted_zip(tmp_path):
    """Create a real password-protected ZIP archive under tmp_path."""

    def _make(
        name: str = "secret.zip",
        files: dict[str, bytes] | None = None,
        password: str = "hunter2",
    ) -> Path:
        members = files if files is not None else {"secret.txt": b"top secret " * 40}
        return write_encrypted_zip(tmp_path / name, members, password)

    return _make
