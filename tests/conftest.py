"""Shared fixtures: an app wired to a scripted engine instead of the network."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.app import DiagnosticsApp
from core.errors import StartFailure
from core.export import ExportFacade
from core.session import DiagnosticUpdate, UpdateChannel, UpdateKind
from utils.threads import ThreadManager

SCRIPT = [
    DiagnosticUpdate(UpdateKind.START, "Starting...", ""),
    DiagnosticUpdate(UpdateKind.STEP_START, "Checking DNS", "DNS: OK\n"),
    DiagnosticUpdate(UpdateKind.STEP_PROGRESS, "", "HTTP: OK\n"),
    DiagnosticUpdate(UpdateKind.DONE, "", "Summary: all tests passed\n"),
]


class ScriptedEngine:
    """Publishes a fixed update list on every start_run()"""

    def __init__(self, channel, script=None, error=None):
        self.channel = channel
        self.script = SCRIPT if script is None else script
        self.error = error
        self.starts = 0

    def start_run(self):
        self.starts += 1
        if self.error is not None:
            raise StartFailure(self.error)
        for update in self.script:
            self.channel.publish(update)


class RecordingClipboard:
    def __init__(self):
        self.copied = []

    def copy(self, text):
        self.copied.append(text)


@pytest.fixture
def make_app(tmp_path):
    """Factory for DiagnosticsApp instances; shut down after the test"""
    apps = []

    def factory(script=None, error=None):
        threads = ThreadManager()
        channel = UpdateChannel(thread_manager=threads)
        engine = ScriptedEngine(channel, script, error)
        exporter = ExportFacade(RecordingClipboard(), save_dir=tmp_path)
        app = DiagnosticsApp(channel, engine, exporter, thread_manager=threads,
                             version_provider=lambda: "1.0.0")
        apps.append(app)
        return app

    yield factory
    for app in apps:
        app.shutdown()
