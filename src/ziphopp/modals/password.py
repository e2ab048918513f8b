"""Password prompt for encrypted archives."""

from __future__ import annotations

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label


class PasswordModal(ModalScreen[str | None]):
    """Ask for an archive password. Dismisses with the password or None."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    PasswordModal {
        align: center middle;
    }

    #password-dialog {
        width: 50%;
        min-width: 40;
        height: auto;
        background: $surface;
        border: tall $warning;
        padding: 0 2;
    }

    #password-title {
        text-style: bold;
        color: $warning;
        margin-bottom: 1;
    }

    #password-path {
        color: $text-muted;
        margin-bottom: 1;
    }

    #password-input {
        width: 100%;
        background: $panel;
        border: none;
    }

    #password-input:focus {
        border-left: tall $warning;
    }

    #password-error {
        color: $error;
        height: auto;
    }

    #password-buttons {
        height: auto;
        margin-top: 1;
        align: right middle;
    }

    #password-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, archive_path: str, error: str = "") -> None:
        super().__init__()
        self._archive_path = archive_path
        self._error = error

    def compose(self) -> ComposeResult:
        with Vertical(id="password-dialog"):
            yield Label("This file is password protected", id="password-title")
            yield Label(escape(self._archive_path), id="password-path")
            yield Input(placeholder="Type your password", password=True, id="password-input")
            yield Label(escape(self._error), id="password-error")
            with Horizontal(id="password-buttons"):
                yield Button("Cancel", variant="default", id="password-cancel-btn")
                yield Button("Open", variant="primary", id="password-open-btn")

    def on_mount(self) -> None:
        self.query_one("#password-input", Input).focus()

    def action_submit(self) -> None:
        password = self.query_one("#password-input", Input).value
        self.dismiss(password)

    def action_cancel(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#password-open-btn")
    def on_open_pressed(self) -> None:
        self.action_submit()

    @on(Button.Pressed, "#password-cancel-btn")
    def on_cancel_pressed(self) -> None:
        self.action_cancel()

    @on(Input.Submitted, "#password-input")
    def on_input_submitted(self) -> None:
        self.action_submit()
