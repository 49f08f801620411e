"""Status Bar - Run control, run status and export buttons."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, LoadingIndicator, Static

from core.session import SessionSnapshot

COPY_LABEL = "Copy to Clipboard"
COPIED_LABEL = "Copied"
SAVE_LABEL = "Save to File"


class StatusBar(Horizontal):
    """Run button while idle, spinner and status line while running"""

    status_text = ""

    def compose(self) -> ComposeResult:
        yield Button("Run Diagnostics", id="run-diagnostics", variant="primary")
        yield LoadingIndicator(id="run-spinner")
        yield Static("", id="run-status")
        yield Static("", classes="spacer")
        yield Button(COPY_LABEL, id="copy-output")
        yield Button(SAVE_LABEL, id="save-output")

    def on_mount(self) -> None:
        self.render_snapshot(SessionSnapshot())

    def render_snapshot(self, snapshot: SessionSnapshot) -> None:
        running = snapshot.running
        show_exports = snapshot.has_output and not running

        self.query_one("#run-diagnostics", Button).display = not running
        self.query_one("#run-spinner", LoadingIndicator).display = running

        status = self.query_one("#run-status", Static)
        status.set_class(snapshot.status.startswith("Error"), "error")
        status.update(Text(snapshot.status))
        self.status_text = snapshot.status

        for button_id in ("#copy-output", "#save-output"):
            button = self.query_one(button_id, Button)
            button.display = show_exports
            button.disabled = not show_exports

    def show_copied(self, copied: bool) -> None:
        self.query_one("#copy-output", Button).label = COPIED_LABEL if copied else COPY_LABEL
