"""File chooser used by the local backend when no archive path is given."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Input, Label


class ArchiveDirectoryTree(DirectoryTree):
    """Directory tree that hides dotfiles unless asked not to."""

    def __init__(self, path: str | Path, *, show_hidden: bool = False, id: str | None = None) -> None:
        super().__init__(path, id=id)
        self._show_hidden = show_hidden

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        if self._show_hidden:
            return paths
        return [path for path in paths if not path.name.startswith(".")]


class FileChooserModal(ModalScreen[str | None]):
    """Pick an archive from a directory tree or by typing its path."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    FileChooserModal {
        align: center middle;
    }

    #chooser-dialog {
        width: 70%;
        height: 80%;
        min-width: 50;
        min-height: 15;
        background: $surface;
        border: tall $accent;
        padding: 0 2;
    }

    #chooser-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    #chooser-tree {
        height: 1fr;
        background: $panel;
    }

    #chooser-path {
        width: 100%;
        margin-top: 1;
        background: $panel;
        border: none;
    }

    #chooser-buttons {
        height: auto;
        margin-top: 1;
        align: right middle;
    }

    #chooser-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, start_directory: str | Path, show_hidden: bool = False) -> None:
        super().__init__()
        self._start_directory = Path(start_directory)
        self._show_hidden = show_hidden

    def compose(self) -> ComposeResult:
        with Vertical(id="chooser-dialog"):
            yield Label("Choose an archive", id="chooser-title")
            yield ArchiveDirectoryTree(
                self._start_directory, show_hidden=self._show_hidden, id="chooser-tree"
            )
            yield Input(placeholder="...or type a path and press Enter", id="chooser-path")
            with Horizontal(id="chooser-buttons"):
                yield Button("Cancel", variant="default", id="chooser-cancel-btn")
                yield Button("Open", variant="primary", id="chooser-open-btn")

    def on_mount(self) -> None:
        self.query_one("#chooser-tree", ArchiveDirectoryTree).focus()

    def _typed_path(self) -> str | None:
        value = self.query_one("#chooser-path", Input).value.strip()
        if not value:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self._start_directory / path
        return str(path)

    def action_submit(self) -> None:
        typed = self._typed_path()
        if typed is None:
            self.notify("Select a file or type its path", title="Open", severity="warning")
            return
        self.dismiss(typed)

    def action_cancel(self) -> None:
        self.dismiss(None)

    @on(DirectoryTree.FileSelected, "#chooser-tree")
    def on_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self.dismiss(str(event.path))

    @on(Button.Pressed, "#chooser-open-btn")
    def on_open_pressed(self) -> None:
        self.action_submit()

    @on(Button.Pressed, "#chooser-cancel-btn")
    def on_cancel_pressed(self) -> None:
        self.action_cancel()

    @on(Input.Submitted, "#chooser-path")
    def on_input_submitted(self) -> None:
        self.action_submit()
