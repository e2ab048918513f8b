"""Widget classes used by the ZipHopp app."""

from ziphopp.widgets.archive import (
    RECENT_EMPTY_HINT,
    RECENT_HEADER_EMPTY,
    RECENT_HEADER_FILLED,
    ArchivePanel,
    open_button_label,
    render_archive_summary,
    render_history_option,
)

__all__ = [
    "RECENT_EMPTY_HINT",
    "RECENT_HEADER_EMPTY",
    "RECENT_HEADER_FILLED",
    "ArchivePanel",
    "open_button_label",
    "render_archive_summary",
    "render_history_option",
]
