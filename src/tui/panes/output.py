"""Output Pane - The accumulated diagnostics report."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

PLACEHOLDER = "Click 'Run Diagnostics' to start..."


class OutputPane(VerticalScroll):
    """Scrolling, monospace view of the session buffer"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.text = ""

    def compose(self) -> ComposeResult:
        yield Static(PLACEHOLDER, id="output-text", classes="placeholder")

    def show(self, text: str) -> None:
        """Replace the shown report. Follows the tail as output grows."""
        if text == self.text:
            return
        self.text = text
        body = self.query_one("#output-text", Static)
        body.set_class(not text, "placeholder")
        # Plain Text so brackets in command output are not read as markup
        body.update(Text(text) if text else PLACEHOLDER)
        self.scroll_end(animate=False)
