"""General-purpose modal dialogs."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Label, Static


class HelpScreen(ModalScreen[None]):
    """Help overlay listing keyboard shortcuts by category."""

    _DEFAULT_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
        (
            "Archives",
            [
                ("o", "Open an archive"),
                ("Enter", "Reopen the highlighted recent file"),
                ("r", "Refresh the recent files list"),
            ],
        ),
        (
            "Contents",
            [
                ("/", "Filter entries"),
                ("Esc", "Clear filter"),
            ],
        ),
        (
            "General",
            [
                ("?", "Help overlay"),
                ("q", "Quit"),
            ],
        ),
    ]

    BINDINGS = [
        Binding("question_mark", "dismiss", "Close", show=False),
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close", show=False),
    ]

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-dialog {
        width: 60%;
        height: 70%;
        min-width: 50;
        min-height: 16;
        background: $surface;
        border: tall $accent;
        padding: 0 2;
    }

    #help-title {
        text-style: bold;
        color: $accent;
        text-align: center;
        margin-bottom: 1;
    }

    .help-section-title {
        text-style: bold;
    }

    .help-keys {
        padding-left: 2;
        margin-bottom: 1;
    }

    #help-footer {
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        sections: list[tuple[str, list[tuple[str, str]]]] | None = None,
        footer_note: str = "Close: ? / Esc / q",
    ) -> None:
        super().__init__()
        self._sections = sections or list(self._DEFAULT_SECTIONS)
        self._footer_note = footer_note

    @staticmethod
    def _render_section_lines(entries: list[tuple[str, str]]) -> str:
        return "\n".join(f"  [bold]{key}[/]  {description}" for key, description in entries)

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="help-dialog"):
            yield Label("Keyboard Shortcuts", id="help-title")
            for section_name, entries in self._sections:
                if not entries:
                    continue
                yield Label(section_name, classes="help-section-title")
                yield Static(self._render_section_lines(entries), classes="help-keys")
            yield Label(self._footer_note, id="help-footer")

    def action_dismiss(self) -> None:
        """Close the help screen."""
        self.dismiss(None)
