"""Modal dialogs for the ZipHopp TUI.

Import modals from this package: ``from ziphopp.modals import PasswordModal``
"""

from ziphopp.modals.common import HelpScreen
from ziphopp.modals.file_chooser import ArchiveDirectoryTree, FileChooserModal
from ziphopp.modals.password import PasswordModal

__all__ = [
    "ArchiveDirectoryTree",
    "FileChooserModal",
    "HelpScreen",
    "PasswordModal",
]
