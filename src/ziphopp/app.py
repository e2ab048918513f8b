"""ZipHopp TUI application."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Button, Footer, Header, Input, Label, OptionList
from textual.widgets.option_list import Option

from ziphopp.action_messages import build_open_failed_message, build_opened_notification
from ziphopp.cli import main
from ziphopp.config import save_config
from ziphopp.filtering import filter_entries
from ziphopp.modals import FileChooserModal, HelpScreen, PasswordModal
from ziphopp.models import (
    APP_VERSION,
    PHASE_AWAITING_PASSWORD,
    PHASE_EMPTY,
    PHASE_OPEN,
    ArchiveHandle,
    UserConfig,
)
from ziphopp.services.gateway import RequestGateway
from ziphopp.services.interfaces import AppServices, build_default_app_services
from ziphopp.session import ArchiveSession
from ziphopp.ui_constants import APP_BINDINGS, APP_CSS
from ziphopp.widgets import (
    RECENT_EMPTY_HINT,
    RECENT_HEADER_EMPTY,
    RECENT_HEADER_FILLED,
    ArchivePanel,
    open_button_label,
    render_history_option,
)

logger = logging.getLogger(__name__)


class ZipHopp(App):
    """A TUI for browsing ZIP archives and reopening recent ones."""

    TITLE = "ZipHopp"
    SUB_TITLE = f"v{APP_VERSION}"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        services: AppServices | None = None,
        initial_path: str | None = None,
    ) -> None:
        super().__init__()
        self._config = config or UserConfig()
        self._services = services or build_default_app_services(
            choose_file=self._choose_file,
            history_limit=self._config.history_limit,
        )
        self._session = ArchiveSession(
            RequestGateway(self._services.backend),
            on_change=self._on_session_change,
        )
        self._initial_path = initial_path

        self._filter_query: str = ""
        self._rendered_handle: ArchiveHandle | None = None
        self._visible_entries: list[str] = []
        self._password_prompt_open: bool = False
        self._notified_request_token: int = 0

    @property
    def session(self) -> ArchiveSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="left-pane"):
                yield Label(" Archive", id="archive-header")
                yield ArchivePanel(id="archive-panel")
                yield Button(open_button_label(PHASE_EMPTY), variant="primary", id="open-btn")
                yield Label(RECENT_HEADER_EMPTY, id="recent-header")
                yield OptionList(id="recent-list")
            with Vertical(id="right-pane"):
                yield Label(" Contents", id="contents-header")
                yield Input(placeholder=" Filter entries...", id="filter-input")
                yield OptionList(id="contents-list")
        yield Footer()

    def on_mount(self) -> None:
        self._render_session()
        self._session.refresh_history()
        if self._initial_path:
            self._session.open(self._initial_path)

    async def on_unmount(self) -> None:
        await self._session.aclose()

    # ── Session rendering ───────────────────────────────────────────────

    def _on_session_change(self) -> None:
        try:
            self._render_session()
        except NoMatches:
            # Widgets already torn down during shutdown
            return
        self._notify_outcome()
        if self._session.awaiting_password and not self._password_prompt_open:
            self._show_password_prompt()

    def _render_session(self) -> None:
        session = self._session
        self.query_one("#archive-panel", ArchivePanel).show(session.phase, session.handle)
        self.query_one("#open-btn", Button).label = open_button_label(session.phase)
        if session.handle is not self._rendered_handle:
            self._rendered_handle = session.handle
            self._refresh_contents()
        self._refresh_recent_list()

    def _refresh_contents(self) -> None:
        handle = self._rendered_handle
        entries = handle.entries if handle is not None else ()
        self._visible_entries = filter_entries(entries, self._filter_query)
        contents = self.query_one("#contents-list", OptionList)
        contents.clear_options()
        contents.add_options([Option(entry) for entry in self._visible_entries])

        header = self.query_one("#contents-header", Label)
        if handle is None:
            header.update(" Contents")
        elif self._filter_query:
            header.update(f" Contents ({len(self._visible_entries)} of {len(entries)})")
        else:
            header.update(f" Contents ({len(entries)})")

    def _refresh_recent_list(self) -> None:
        entries = self._session.history_entries
        recent = self.query_one("#recent-list", OptionList)
        recent.clear_options()
        if entries:
            recent.add_options([Option(render_history_option(entry)) for entry in entries])
        else:
            recent.add_option(Option(RECENT_EMPTY_HINT, disabled=True))
        self.query_one("#recent-header", Label).update(
            RECENT_HEADER_FILLED if entries else RECENT_HEADER_EMPTY
        )

    def _notify_outcome(self) -> None:
        session = self._session
        token = session.request_token
        if token == self._notified_request_token:
            return
        if session.phase == PHASE_OPEN and session.handle is not None:
            self._notified_request_token = token
            self.sub_title = session.handle.meta.name
            self.notify(
                build_opened_notification(session.handle.meta.name, len(session.handle.entries)),
                title="Open",
            )
        elif session.phase == PHASE_EMPTY and session.last_error is not None:
            self._notified_request_token = token
            self.sub_title = f"v{APP_VERSION}"
            if session.last_error:
                self.notify(
                    build_open_failed_message(session.last_error),
                    title="Open",
                    severity="error",
                    timeout=8,
                )

    def _show_password_prompt(self) -> None:
        pending = self._session.pending
        if pending is None:
            return
        self._password_prompt_open = True
        prompt_path = pending.path

        def on_password(password: str | None) -> None:
            self._password_prompt_open = False
            if self._session.phase != PHASE_AWAITING_PASSWORD:
                return
            current = self._session.pending
            if current is None or current.path != prompt_path:
                # A newer open replaced the request this prompt was for.
                logger.debug("Dropping password typed for %s", prompt_path)
                self._show_password_prompt()
                return
            if password is None:
                self._session.cancel_password()
            else:
                self._session.submit_password(password)

        self.push_screen(PasswordModal(pending.path, pending.message), on_password)

    # ── Backend file chooser ────────────────────────────────────────────

    def _start_directory(self) -> Path:
        start = Path(self._config.start_directory).expanduser() if self._config.start_directory else None
        if start is not None and start.is_dir():
            return start
        return Path.home()

    async def _choose_file(self) -> str | None:
        """Ask the user for an archive; used by the local backend."""
        future: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()

        def on_chosen(path: str | None) -> None:
            if not future.done():
                future.set_result(path)

        self.push_screen(
            FileChooserModal(self._start_directory(), show_hidden=self._config.show_hidden_files),
            on_chosen,
        )
        chosen = await future
        if chosen:
            directory = str(Path(chosen).parent)
            if directory != self._config.start_directory:
                self._config.start_directory = directory
                if not save_config(self._config):
                    self.notify("Failed to save settings.", severity="warning")
        return chosen

    # ── Actions ─────────────────────────────────────────────────────────

    def action_open_archive(self) -> None:
        """Open an archive chosen by the user."""
        self._session.open()

    def action_refresh_history(self) -> None:
        self._session.refresh_history()

    def action_focus_filter(self) -> None:
        self.query_one("#filter-input", Input).focus()

    def action_clear_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        if filter_input.value:
            filter_input.value = ""
        else:
            self.query_one("#contents-list", OptionList).focus()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    @on(Button.Pressed, "#open-btn")
    def on_open_pressed(self) -> None:
        self.action_open_archive()

    @on(OptionList.OptionSelected, "#recent-list")
    def on_recent_selected(self, event: OptionList.OptionSelected) -> None:
        entries = self._session.history_entries
        if 0 <= event.option_index < len(entries):
            self._session.select_history(entries[event.option_index])

    @on(Input.Changed, "#filter-input")
    def on_filter_changed(self, event: Input.Changed) -> None:
        self._filter_query = event.value
        self._refresh_contents()


__all__ = [
    "ZipHopp",
    "main",
]
