"""Password retry coordination for encrypted archives."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ziphopp.models import PendingPasswordRequest

logger = logging.getLogger(__name__)


class PasswordRetryCoordinator:
    """Holds at most one archive waiting for a password and re-drives its open.

    ``resubmit(path, password)`` issues the retry; ``abandon()`` returns the
    session to its empty state. The pending request is always cleared before
    either callback runs, so a retry that fails again starts from a fresh
    capture instead of a leftover one.
    """

    __slots__ = ("_abandon", "_pending", "_resubmit")

    def __init__(
        self,
        *,
        resubmit: Callable[[str, str], object],
        abandon: Callable[[], None],
    ) -> None:
        self._resubmit = resubmit
        self._abandon = abandon
        self._pending: PendingPasswordRequest | None = None

    @property
    def pending(self) -> PendingPasswordRequest | None:
        return self._pending

    def capture(self, path: str, message: str = "") -> PendingPasswordRequest:
        """Record ``path`` as the archive awaiting a password."""
        self._pending = PendingPasswordRequest(path=path, message=message)
        return self._pending

    def clear(self) -> None:
        """Drop the pending request without touching the session."""
        self._pending = None

    def submit(self, password: str) -> bool:
        """Retry the pending archive with ``password``.

        Returns False (and does nothing) when no request is pending, which
        is also the case while a retry is already in flight.
        """
        pending = self._pending
        if pending is None:
            logger.debug("Rejected password submission: nothing is awaiting a password")
            return False
        self._pending = None
        self._resubmit(pending.path, password)
        return True

    def cancel(self) -> bool:
        """Abandon the pending request without contacting the backend."""
        if self._pending is None:
            return False
        self._pending = None
        self._abandon()
        return True


__all__ = ["PasswordRetryCoordinator"]
