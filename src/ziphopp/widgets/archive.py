"""Widgets and render helpers for the open archive and the recent list."""

from __future__ import annotations

from rich.markup import escape
from textual.widgets import Static

from ziphopp.models import (
    PHASE_AWAITING_PASSWORD,
    PHASE_OPEN,
    PHASE_OPENING,
    ArchiveHandle,
    HistoryEntry,
)

RECENT_HEADER_EMPTY = " Recent files"
RECENT_HEADER_FILLED = " You previously opened..."
RECENT_EMPTY_HINT = "[dim italic]Files you open will appear here[/]"


def render_archive_summary(phase: str, handle: ArchiveHandle | None) -> str:
    """Build Rich markup describing the session's archive."""
    if phase == PHASE_OPEN and handle is not None:
        lines = [
            f"[bold]{escape(handle.meta.name)}[/]",
            f"[dim]{escape(handle.path)}[/]",
        ]
        if handle.meta.compressed or handle.meta.size:
            lines.append(
                f"{escape(handle.meta.compressed)}, uncompresses to {escape(handle.meta.size)}"
            )
        return "\n".join(lines)
    if phase == PHASE_OPENING:
        return "[italic]Opening archive...[/]"
    if phase == PHASE_AWAITING_PASSWORD:
        return "[italic]Waiting for a password...[/]"
    return "[dim]No archive open.[/]\n[dim]Press [bold]o[/bold] to open a ZIP file.[/]"


def render_history_option(entry: HistoryEntry) -> str:
    """Build Rich markup for one recent-files row."""
    return f"[bold]{escape(entry.name)}[/]\n[dim]{escape(entry.path)}[/]"


def open_button_label(phase: str) -> str:
    return "Open another" if phase == PHASE_OPEN else "Open file"


class ArchivePanel(Static):
    """Summary of the archive currently open in the session."""

    def show(self, phase: str, handle: ArchiveHandle | None) -> None:
        self.update(render_archive_summary(phase, handle))


__all__ = [
    "RECENT_EMPTY_HINT",
    "RECENT_HEADER_EMPTY",
    "RECENT_HEADER_FILLED",
    "ArchivePanel",
    "open_button_label",
    "render_archive_summary",
    "render_history_option",
]
