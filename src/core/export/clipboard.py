"""System clipboard access through the platform's clipboard command."""

import logging
import os
import shutil
import subprocess
import sys
from typing import Callable, List, Optional

from core.errors import ClipboardError

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT = 5  # seconds


def find_clipboard_command() -> Optional[List[str]]:
    """Pick the clipboard command for this platform, or None."""
    if sys.platform == "darwin" and shutil.which("pbcopy"):
        return ["pbcopy"]
    if os.name == "nt" and shutil.which("clip"):
        return ["clip"]
    if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
        return ["wl-copy"]
    if shutil.which("xclip"):
        return ["xclip", "-selection", "clipboard"]
    if shutil.which("xsel"):
        return ["xsel", "--clipboard", "--input"]
    if shutil.which("wl-copy"):
        return ["wl-copy"]
    return None


class SystemClipboard:
    """
    Copies text with pbcopy, clip, wl-copy, xclip or xsel.

    Args:
        fallback: Called with the text when no clipboard command exists or
            the command fails (the TUI passes Textual's OSC 52 copy)
        command: Override the detected command
    """

    def __init__(self, fallback: Optional[Callable[[str], None]] = None,
                 command: Optional[List[str]] = None):
        self._fallback = fallback
        self._command = command

    def copy(self, text: str) -> None:
        """Place text on the clipboard.

        Raises:
            ClipboardError: Nothing could take the text
        """
        command = self._command or find_clipboard_command()
        error = None

        if command:
            try:
                subprocess.run(
                    command,
                    input=text.encode("utf-8"),
                    check=True,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    timeout=CLIPBOARD_TIMEOUT,
                )
                logger.debug(f"Copied {len(text)} chars with {command[0]}")
                return
            except (OSError, subprocess.SubprocessError) as e:
                error = f"{command[0]} failed: {e}"
                logger.warning(f"Clipboard command {error}")
        else:
            error = "No clipboard tool found (pbcopy/clip/wl-copy/xclip/xsel)"

        if self._fallback is not None:
            try:
                self._fallback(text)
                return
            except Exception as e:
                error = f"{error}; fallback failed: {e}"

        raise ClipboardError(error)
