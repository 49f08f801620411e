"""
Export Facade

Stateless copy and save operations over a snapshot of the session buffer.
Neither operation touches session state, so both are safe while a run is
still streaming. Failures come back as ExportResult values; the caller
decides how to show them and may simply retry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from core.errors import ExportError, PersistError

logger = logging.getLogger(__name__)

NOTHING_TO_COPY = "No diagnostics output to copy"
NOTHING_TO_SAVE = "No diagnostics output to save"

FILENAME_PREFIX = "netdiag"
FILENAME_TIME_FORMAT = "%Y-%m-%d-%H%M%S"


class ExportStatus(Enum):
    """Outcome of an export operation."""
    COPIED = "copied"
    SAVED = "saved"
    NOTHING_TO_COPY = "nothing_to_copy"
    NOTHING_TO_SAVE = "nothing_to_save"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ExportResult:
    """
    Result of copy() or persist().

    Attributes:
        status: What happened
        message: Human-readable message for the UI
        path: Destination written, for SAVED
    """
    status: ExportStatus
    message: str
    path: Optional[Path] = None

    @property
    def success(self) -> bool:
        return self.status in (ExportStatus.COPIED, ExportStatus.SAVED)

    def __bool__(self) -> bool:
        return self.success


class Clipboard(Protocol):
    def copy(self, text: str) -> None:
        """Raise ClipboardError on failure."""


def write_text_file(path: Path, text: str) -> None:
    """Default writer: UTF-8 text, parent directories created.

    Raises:
        PersistError: The file could not be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise PersistError(e.strerror or str(e)) from e


def default_filename(now: Optional[datetime] = None) -> str:
    """Report file name, e.g. netdiag-2025-06-01-143005.txt"""
    now = now or datetime.now()
    return f"{FILENAME_PREFIX}-{now.strftime(FILENAME_TIME_FORMAT)}.txt"


class ExportFacade:
    """
    Copy and save for the diagnostics report.

    Args:
        clipboard: Object with copy(text) raising ClipboardError
        writer: Called as writer(path, text); raises PersistError or OSError
        save_dir: Directory for default_destination()
    """

    def __init__(self, clipboard: Clipboard,
                 writer: Callable[[Path, str], None] = write_text_file,
                 save_dir: Optional[Path] = None):
        self._clipboard = clipboard
        self._writer = writer
        self._save_dir = save_dir

    def default_destination(self, now: Optional[datetime] = None) -> Path:
        base = self._save_dir if self._save_dir is not None else Path.cwd()
        return base / default_filename(now)

    def copy(self, text: str) -> ExportResult:
        """Put text on the clipboard."""
        if not text:
            return ExportResult(ExportStatus.NOTHING_TO_COPY, NOTHING_TO_COPY)

        try:
            self._clipboard.copy(text)
        except ExportError as e:
            logger.warning(f"Copy to clipboard failed: {e}")
            return ExportResult(ExportStatus.FAILED, f"Failed to copy to clipboard: {e}")

        return ExportResult(ExportStatus.COPIED, "Copied to clipboard")

    def persist(self, text: str, destination: Optional[Union[str, Path]]) -> ExportResult:
        """Write text to the destination the user picked.

        Args:
            text: Report contents
            destination: Chosen path, or None if the user cancelled
        """
        if not text:
            return ExportResult(ExportStatus.NOTHING_TO_SAVE, NOTHING_TO_SAVE)

        if destination is None or str(destination).strip() == "":
            return ExportResult(ExportStatus.CANCELLED, "Save cancelled")

        path = Path(destination).expanduser()
        try:
            self._writer(path, text)
        except (OSError, ExportError) as e:
            logger.warning(f"Saving report to {path} failed: {e}")
            return ExportResult(ExportStatus.FAILED, f"Failed to save file: {e}", path)

        logger.info(f"Saved diagnostics report to {path}")
        return ExportResult(ExportStatus.SAVED, f"Saved to {path}", path)
