"""Tests for the local ZIP archive backend."""

from __future__ import annotations

import threading
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from ziphopp.models import ArchiveHandle, OpenFailed, PasswordRequired
from ziphopp.services.archive_backend import (
    WRONG_PASSWORD_MESSAGE,
    LocalArchiveBackend,
    format_size,
    read_archive,
)
from ziphopp.services.gateway import RequestGateway
from ziphopp.services.history_store import HistoryStore
from ziphopp.services.interfaces import ArchiveBackend, BackendError


@pytest.fixture
def encrypted_zip(make_encrypted_zip) -> Path:
    return make_encrypted_zip(password="hunter2")


@pytest.fixture
def store(tmp_path) -> HistoryStore:
    return HistoryStore(tmp_path / "history.db")


class TestFormatSize:
    def test_bytes(self) -> None:
        assert format_size(0) == "0 B"
        assert format_size(1023) == "1023 B"

    def test_larger_units(self) -> None:
        assert format_size(1024) == "1.0 KB"
        assert format_size(1536) == "1.5 KB"
        assert format_size(3 * 1024 * 1024) == "3.0 MB"
        assert format_size(2 * 1024**3) == "2.0 GB"


class TestReadArchive:
    def test_lists_every_entry(self, make_zip) -> None:
        archive = make_zip(files={"a.txt": b"hello", "docs/b.txt": b"world"})

        payload = read_archive(str(archive))

        assert payload["path"] == str(archive.resolve())
        assert payload["contents"] == ["a.txt", "docs/b.txt"]
        assert payload["meta"]["name"] == "sample.zip"
        assert payload["meta"]["size"] == "10 B"
        assert payload["meta"]["compressed"].endswith("B")

    def test_empty_archive_opens(self, make_zip) -> None:
        archive = make_zip("empty.zip", {})

        assert read_archive(str(archive))["contents"] == []

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(BackendError) as exc_info:
            read_archive(str(tmp_path / "missing.zip"))

        assert exc_info.value.payload["message"].startswith("File not found:")

    def test_directory(self, tmp_path) -> None:
        with pytest.raises(BackendError) as exc_info:
            read_archive(str(tmp_path))

        assert "is a directory" in exc_info.value.payload["message"]

    def test_not_a_zip(self, tmp_path) -> None:
        bogus = tmp_path / "bogus.zip"
        bogus.write_text("this is not a zip file", encoding="utf-8")

        with pytest.raises(BackendError) as exc_info:
            read_archive(str(bogus))

        assert exc_info.value.payload["message"].startswith("Corrupt archive:")
        assert "password_required" not in exc_info.value.payload

    def test_encrypted_without_password_requires_one(self, encrypted_zip) -> None:
        with pytest.raises(BackendError) as exc_info:
            read_archive(str(encrypted_zip))

        assert exc_info.value.payload == {
            "password_required": True,
            "path": str(encrypted_zip.resolve()),
            "message": "",
        }

    def test_encrypted_with_wrong_password(self, encrypted_zip) -> None:
        with pytest.raises(BackendError) as exc_info:
            read_archive(str(encrypted_zip), "wrong")

        assert exc_info.value.payload["password_required"] is True
        assert exc_info.value.payload["message"] == WRONG_PASSWORD_MESSAGE

    def test_wrong_passwords_past_check_byte_are_rejected(self, encrypted_zip) -> None:
        # About 1 in 256 wrong passwords match the header check byte and
        # only fail once the member is decompressed.
        for i in range(1000):
            with pytest.raises(BackendError) as exc_info:
                read_archive(str(encrypted_zip), f"wrong{i}")

            assert exc_info.value.payload == {
                "password_required": True,
                "path": str(encrypted_zip.resolve()),
                "message": WRONG_PASSWORD_MESSAGE,
            }

    def test_encrypted_with_correct_password(self, encrypted_zip) -> None:
        payload = read_archive(str(encrypted_zip), "hunter2")

        assert payload["contents"] == ["secret.txt"]
        assert payload["meta"]["size"] == format_size(len(b"top secret " * 40))

    def test_multi_member_archive_checks_password(self, make_encrypted_zip) -> None:
        archive = make_encrypted_zip(
            "two.zip", {"big.bin": bytes(range(256)) * 64, "small.txt": b"tiny"}, password="pw"
        )

        assert read_archive(str(archive), "pw")["contents"] == ["big.bin", "small.txt"]
        with pytest.raises(BackendError) as exc_info:
            read_archive(str(archive), "nope")
        assert exc_info.value.payload["message"] == WRONG_PASSWORD_MESSAGE


class TestLocalArchiveBackend:
    def test_satisfies_protocol(self, store) -> None:
        assert isinstance(LocalArchiveBackend(store), ArchiveBackend)

    @pytest.mark.asyncio
    async def test_open_records_history(self, store, make_zip) -> None:
        backend = LocalArchiveBackend(store)
        archive = make_zip()

        payload = await backend.open_file(path=str(archive))

        assert payload["contents"] == ["a.txt", "docs/b.txt"]
        assert store.paths() == [str(archive.resolve())]
        assert await backend.refresh() == {
            "history": [{"name": "sample.zip", "path": str(archive.resolve())}]
        }

    @pytest.mark.asyncio
    async def test_failed_open_is_not_recorded(self, store, tmp_path) -> None:
        backend = LocalArchiveBackend(store)

        with pytest.raises(BackendError):
            await backend.open_file(path=str(tmp_path / "missing.zip"))

        assert store.paths() == []

    @pytest.mark.asyncio
    async def test_history_insert_runs_on_loop_thread(self, store, make_zip, monkeypatch) -> None:
        backend = LocalArchiveBackend(store)
        insert = store.insert
        threads: list[int] = []

        def recording_insert(path: str) -> None:
            threads.append(threading.get_ident())
            insert(path)

        monkeypatch.setattr(store, "insert", recording_insert)

        await backend.open_file(path=str(make_zip()))

        assert threads == [threading.get_ident()]

    @pytest.mark.asyncio
    async def test_password_prompt_is_not_recorded(self, store, encrypted_zip) -> None:
        backend = LocalArchiveBackend(store)

        with pytest.raises(BackendError) as exc_info:
            await backend.open_file(path=str(encrypted_zip))

        assert exc_info.value.payload["password_required"] is True
        assert store.paths() == []

    @pytest.mark.asyncio
    async def test_no_path_uses_file_chooser(self, store, make_zip) -> None:
        archive = make_zip()
        chooser = AsyncMock(return_value=str(archive))
        backend = LocalArchiveBackend(store, choose_file=chooser)

        payload = await backend.open_file()

        chooser.assert_awaited_once_with()
        assert payload["path"] == str(archive.resolve())

    @pytest.mark.asyncio
    async def test_dismissed_chooser_fails_silently(self, store) -> None:
        backend = LocalArchiveBackend(store, choose_file=AsyncMock(return_value=None))

        with pytest.raises(BackendError) as exc_info:
            await backend.open_file()

        assert exc_info.value.payload == {"message": ""}

    @pytest.mark.asyncio
    async def test_no_chooser_available(self, store) -> None:
        backend = LocalArchiveBackend(store)

        with pytest.raises(BackendError) as exc_info:
            await backend.open_file()

        assert exc_info.value.payload["message"] == "No file chooser is available"

    @pytest.mark.asyncio
    async def test_set_file_chooser(self, store, make_zip) -> None:
        archive = make_zip()
        backend = LocalArchiveBackend(store)
        backend.set_file_chooser(AsyncMock(return_value=str(archive)))

        payload = await backend.open_file()

        assert payload["path"] == str(archive.resolve())


class TestThroughGateway:
    @pytest.mark.asyncio
    async def test_encrypted_archive_becomes_password_required(self, store, encrypted_zip) -> None:
        gateway = RequestGateway(LocalArchiveBackend(store))

        result = await gateway.open_archive(str(encrypted_zip))

        assert result == PasswordRequired(
            path=str(encrypted_zip.resolve()), message=""
        )

    @pytest.mark.asyncio
    async def test_wrong_password_prompts_again(self, store, encrypted_zip) -> None:
        gateway = RequestGateway(LocalArchiveBackend(store))

        result = await gateway.open_archive(str(encrypted_zip), "letmein")

        assert result == PasswordRequired(
            path=str(encrypted_zip.resolve()), message=WRONG_PASSWORD_MESSAGE
        )
        assert store.paths() == []

    @pytest.mark.asyncio
    async def test_real_archive_becomes_handle(self, store, make_zip) -> None:
        gateway = RequestGateway(LocalArchiveBackend(store))

        result = await gateway.open_archive(str(make_zip()))

        assert isinstance(result, ArchiveHandle)
        assert result.entries == ("a.txt", "docs/b.txt")
        assert result.meta.size == "10 B"

    @pytest.mark.asyncio
    async def test_dismissed_chooser_is_blank_failure(self, store) -> None:
        gateway = RequestGateway(LocalArchiveBackend(store, choose_file=AsyncMock(return_value="")))

        assert await gateway.open_archive() == OpenFailed(message="")
