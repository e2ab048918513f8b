"""Internal UI constants for the ZipHopp app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $background;
}

#main-container {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    max-width: 80;
    height: 100%;
    border: tall $panel;
    background: $surface;
}

#left-pane:focus-within {
    border: tall $accent;
}

#right-pane {
    width: 3fr;
    height: 100%;
    border: tall $panel;
    background: $surface;
}

#right-pane:focus-within {
    border: tall $accent;
}

#archive-header, #recent-header, #contents-header {
    padding: 0 1;
    color: $accent;
    text-style: bold;
}

#archive-panel {
    height: auto;
    min-height: 4;
    padding: 1 2;
}

#open-btn {
    margin: 0 2 1 2;
}

#recent-list {
    height: 1fr;
    scrollbar-gutter: stable;
}

#filter-input {
    margin: 0 1;
    border: none;
    background: $panel;
}

#contents-list {
    height: 1fr;
    scrollbar-gutter: stable;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("o", "open_archive", "Open"),
    Binding("r", "refresh_history", "Refresh recent"),
    Binding("slash", "focus_filter", "Filter"),
    Binding("escape", "clear_filter", "Clear filter", show=False),
    Binding("question_mark", "show_help", "Help"),
    Binding("q", "quit", "Quit"),
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
]
