"""
netdiag - Textual TUI Application

A terminal window for running network diagnostics and sharing the
report. Works over SSH and on headless systems.

Session snapshots are produced on the update channel's consumer thread;
they reach the UI as SessionChanged messages, which Textual delivers on
its own event loop in posting order.
"""

import logging
from typing import Optional

from rich.style import Style
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Static

from core.app import DiagnosticsApp
from core.export import ExportResult, ExportStatus
from core.session import SessionSnapshot

from .panes import OutputPane, StatusBar

logger = logging.getLogger('tui')

SOURCE_URL = "https://github.com/railwayapp/netdiag"
DESCRIPTION = (
    "A network diagnostic tool that runs a series of tests against the "
    "diagnostic endpoint and produces a report that can be shared with support."
)
COPIED_FEEDBACK_SECONDS = 1.0


def footer_text(version: str) -> Text:
    """Version line with a clickable source link"""
    text = Text(f"netdiag • Version {version} • ")
    text.append("Source Code", style=Style(link=SOURCE_URL))
    return text


class SessionChanged(Message):
    """A new session snapshot is available"""

    def __init__(self, snapshot: SessionSnapshot):
        super().__init__()
        self.snapshot = snapshot


class SavePrompt(ModalScreen[Optional[str]]):
    """Ask where to save the report. Dismisses with the path or None."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, default_path: str):
        super().__init__()
        self.default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Diagnostics Report", classes="title")
            yield Input(value=self.default_path, id="save-path")
            with Horizontal(classes="button-row"):
                yield Button("Save", id="save-confirm", variant="primary")
                yield Button("Cancel", id="save-cancel")

    def on_mount(self) -> None:
        self.query_one("#save-path", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "save-confirm":
            self._submit()
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        path = self.query_one("#save-path", Input).value.strip()
        self.dismiss(path or None)


class NetDiagTUI(App):
    """Network diagnostics TUI"""

    CSS = """
    Screen {
        background: $surface;
    }

    .title {
        text-style: bold;
        color: $primary;
        padding: 1;
    }

    #description {
        color: $text-muted;
        padding: 0 1 1 1;
    }

    StatusBar {
        height: 5;
        padding: 1 2;
        background: $boost;
        border: tall $primary;
    }

    StatusBar Button {
        margin-right: 1;
    }

    #run-spinner {
        width: 6;
        height: 1;
    }

    #run-status {
        width: auto;
        padding: 0 1;
        color: $accent;
    }

    #run-status.error {
        color: $error;
    }

    StatusBar .spacer {
        width: 1fr;
    }

    OutputPane {
        height: 1fr;
        min-height: 8;
        border: solid $primary;
        padding: 1 2;
        background: $panel;
    }

    #output-text.placeholder {
        color: $text-muted;
    }

    #app-footer {
        color: $text-muted;
        text-align: center;
        padding: 1 0 0 0;
    }

    SavePrompt {
        align: center middle;
    }

    #save-dialog {
        width: 80;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    .button-row {
        height: auto;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "run_diagnostics", "Run"),
        Binding("c", "copy_output", "Copy"),
        Binding("s", "save_output", "Save"),
    ]

    TITLE = "Network Diagnostics"

    def __init__(self, diagnostics: Optional[DiagnosticsApp] = None):
        super().__init__()
        self.diagnostics = diagnostics or DiagnosticsApp.create(
            clipboard_fallback=self.copy_to_clipboard
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(DESCRIPTION, id="description")
        yield StatusBar()
        yield OutputPane(id="output")
        yield Static("", id="app-footer")
        yield Footer()

    def on_mount(self) -> None:
        self.diagnostics.add_listener(self._on_snapshot)
        self.diagnostics.startup()

        version = self.diagnostics.get_version()
        self.sub_title = f"v{version}"
        self.query_one("#app-footer", Static).update(footer_text(version))
        self.render_session(self.diagnostics.snapshot())

    def on_unmount(self) -> None:
        self.diagnostics.remove_listener(self._on_snapshot)
        self.diagnostics.shutdown()

    def _on_snapshot(self, snapshot: SessionSnapshot) -> None:
        # Called on the channel consumer thread; post_message is thread-safe
        self.post_message(SessionChanged(snapshot))

    def on_session_changed(self, message: SessionChanged) -> None:
        self.render_session(message.snapshot)

    def render_session(self, snapshot: SessionSnapshot) -> None:
        self.query_one(StatusBar).render_snapshot(snapshot)
        self.query_one(OutputPane).show(snapshot.buffer)

    # ==================== Actions ====================

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "run-diagnostics":
            self.action_run_diagnostics()
        elif button_id == "copy-output":
            self.action_copy_output()
        elif button_id == "save-output":
            self.action_save_output()

    def action_run_diagnostics(self) -> None:
        self.diagnostics.run_diagnostics()

    def action_copy_output(self) -> None:
        if self.diagnostics.snapshot().running:
            return
        result = self.diagnostics.copy_output()
        if result.status == ExportStatus.COPIED:
            status_bar = self.query_one(StatusBar)
            status_bar.show_copied(True)
            self.set_timer(COPIED_FEEDBACK_SECONDS, lambda: status_bar.show_copied(False))
        else:
            self._report(result)

    def action_save_output(self) -> None:
        snapshot = self.diagnostics.snapshot()
        if snapshot.running:
            return
        if not snapshot.buffer:
            self._report(self.diagnostics.save_output(None))
            return
        default = str(self.diagnostics.default_destination())
        self.push_screen(SavePrompt(default), self._on_save_chosen)

    def _on_save_chosen(self, destination: Optional[str]) -> None:
        self._report(self.diagnostics.save_output(destination))

    def _report(self, result: ExportResult) -> None:
        # Messages carry paths and OS error text, never markup
        if result.status == ExportStatus.CANCELLED:
            return
        if result.status == ExportStatus.FAILED:
            self.notify(result.message, title="Export failed", severity="error", markup=False)
        elif result.success:
            self.notify(result.message, markup=False)
        else:
            self.notify(result.message, severity="warning", markup=False)


def run_tui(diagnostics: Optional[DiagnosticsApp] = None) -> None:
    """Start the TUI and block until it exits"""
    app = NetDiagTUI(diagnostics)
    try:
        app.run()
    finally:
        app.diagnostics.shutdown()
