"""Recent-files list as last reported by the archive backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ziphopp.models import HistoryEntry, RefreshFailed
from ziphopp.services.gateway import RequestGateway

logger = logging.getLogger(__name__)


class HistoryView:
    """Holds the backend's history list and maps selections back to opens.

    The list is replaced wholesale by each applied refresh and never sorted,
    merged or deduplicated here. Failed refreshes leave it untouched. A
    refresh that completes after a newer one was already applied is dropped.
    """

    def __init__(
        self,
        gateway: RequestGateway,
        *,
        open_path: Callable[[str], Any],
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._open_path = open_path
        self._on_change = on_change
        self._entries: list[HistoryEntry] = []
        self._issued_token = 0
        self._applied_token = 0

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    async def refresh(self) -> bool:
        """Fetch the history list; return whether it was applied."""
        self._issued_token += 1
        token = self._issued_token
        result = await self._gateway.refresh_history()

        if isinstance(result, RefreshFailed):
            logger.debug("History refresh failed, keeping current list: %s", result.message)
            return False
        if token < self._applied_token:
            logger.debug("Discarding history refresh %d, %d already applied", token, self._applied_token)
            return False

        self._applied_token = token
        self._entries = result
        if self._on_change is not None:
            self._on_change()
        return True

    def select(self, entry: HistoryEntry) -> Any:
        """Open a history entry. Passwords, if needed, go through the normal prompt."""
        return self._open_path(entry.path)


__all__ = ["HistoryView"]
