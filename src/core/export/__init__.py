"""Copy and save of the diagnostics output."""

from .facade import (
    NOTHING_TO_COPY,
    NOTHING_TO_SAVE,
    ExportFacade,
    ExportResult,
    ExportStatus,
    default_filename,
    write_text_file,
)
from .clipboard import SystemClipboard, find_clipboard_command

__all__ = [
    'NOTHING_TO_COPY',
    'NOTHING_TO_SAVE',
    'ExportFacade',
    'ExportResult',
    'ExportStatus',
    'default_filename',
    'write_text_file',
    'SystemClipboard',
    'find_clipboard_command',
]
