"""Archive session state machine.

States and transitions (``phase``):

    empty             --open-->            opening
    open              --open-->            opening   (old archive hidden at once)
    awaiting_password --open-->            opening   (pending request dropped)
    opening           --open-->            opening   (earlier request superseded)
    opening           --success-->         open      (+ background history refresh)
    opening           --PasswordRequired--> awaiting_password
    opening           --OpenFailed-->      empty     (last_error set)
    awaiting_password --submit-->          opening
    awaiting_password --cancel-->          empty     (no backend call)

Every open bumps a request token; a response whose token is no longer
current is dropped, so a slow answer to an older request never replaces
the state produced by a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from ziphopp.history_view import HistoryView
from ziphopp.models import (
    PHASE_AWAITING_PASSWORD,
    PHASE_EMPTY,
    PHASE_OPEN,
    PHASE_OPENING,
    ArchiveHandle,
    HistoryEntry,
    OpenFailed,
    OpenResult,
    PasswordRequired,
    PendingPasswordRequest,
)
from ziphopp.password_retry import PasswordRetryCoordinator
from ziphopp.services.gateway import RequestGateway

logger = logging.getLogger(__name__)

EMPTY_PATH_MESSAGE = "No archive path was given"


class ArchiveSession:
    """Owns the open archive, the password retry and the history list."""

    def __init__(
        self,
        gateway: RequestGateway,
        *,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._on_change = on_change
        self._phase: str = PHASE_EMPTY
        self._handle: ArchiveHandle | None = None
        self._last_error: str | None = None
        self._request_token: int = 0

        # Background task tracking (prevent GC of fire-and-forget tasks)
        self._background_tasks: set[asyncio.Task[None]] = set()

        self.password = PasswordRetryCoordinator(
            resubmit=self._resubmit_with_password,
            abandon=self._abandon_password,
        )
        self.history = HistoryView(gateway, open_path=self.open, on_change=self._notify)

    # ── Presentation boundary ───────────────────────────────────────────

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def handle(self) -> ArchiveHandle | None:
        """The open archive; None unless ``phase`` is ``open``."""
        return self._handle

    @property
    def pending(self) -> PendingPasswordRequest | None:
        return self.password.pending

    @property
    def awaiting_password(self) -> bool:
        return self._phase == PHASE_AWAITING_PASSWORD

    @property
    def last_error(self) -> str | None:
        """Message of the most recent failed open, cleared by the next open."""
        return self._last_error

    @property
    def request_token(self) -> int:
        return self._request_token

    @property
    def history_entries(self) -> list[HistoryEntry]:
        return self.history.entries

    # ── Events ──────────────────────────────────────────────────────────

    def open(
        self,
        path: str | None = None,
        password: str | None = None,
    ) -> asyncio.Task[None] | None:
        """Start opening an archive and return the tracked request task.

        ``path=None`` lets the backend ask the user for a file. An explicit
        empty path fails immediately without contacting the backend, in
        which case None is returned.
        """
        self._request_token += 1
        token = self._request_token
        self.password.clear()
        self._handle = None
        self._last_error = None

        if path is not None and not path.strip():
            self._fail(OpenFailed(message=EMPTY_PATH_MESSAGE))
            return None

        self._phase = PHASE_OPENING
        self._notify()
        return self._track_task(self._run_open(token, path, password))

    def submit_password(self, password: str) -> bool:
        """Retry the archive awaiting a password. False if nothing is waiting."""
        return self.password.submit(password)

    def cancel_password(self) -> bool:
        """Dismiss the password prompt and return to empty."""
        return self.password.cancel()

    def select_history(self, entry: HistoryEntry) -> asyncio.Task[None] | None:
        return self.history.select(entry)

    def refresh_history(self) -> asyncio.Task[None]:
        """Refresh the history list in the background."""
        return self._track_task(self._refresh_history())

    # ── Internals ───────────────────────────────────────────────────────

    async def _run_open(self, token: int, path: str | None, password: str | None) -> None:
        result = await self._gateway.open_archive(path, password)
        if token != self._request_token:
            logger.debug(
                "Discarding stale open response for %r (request %d, current %d)",
                path,
                token,
                self._request_token,
            )
            return
        self._apply_open_result(result)

    def _apply_open_result(self, result: OpenResult) -> None:
        if isinstance(result, ArchiveHandle):
            self._handle = result
            self._phase = PHASE_OPEN
            self._notify()
            self.refresh_history()
        elif isinstance(result, PasswordRequired):
            self.password.capture(result.path, result.message)
            self._phase = PHASE_AWAITING_PASSWORD
            self._notify()
        else:
            self._fail(result)

    def _fail(self, error: OpenFailed) -> None:
        self._handle = None
        self._last_error = error.message
        self._phase = PHASE_EMPTY
        if error.message:
            logger.info("Open failed: %s", error.message)
        self._notify()

    def _resubmit_with_password(self, path: str, password: str) -> None:
        self.open(path, password)

    def _abandon_password(self) -> None:
        self._phase = PHASE_EMPTY
        self._notify()

    async def _refresh_history(self) -> None:
        await self.history.refresh()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _track_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Session background task failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait until every request and refresh started so far has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding background work (for app teardown)."""
        self._request_token += 1
        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()


__all__ = [
    "EMPTY_PATH_MESSAGE",
    "ArchiveSession",
]
