"""
Tests for the DiagnosticsApp facade.

Run: python3 -m pytest tests/test_app.py -v
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.app import DiagnosticsApp
from core.export import ExportStatus
from core.session import DiagnosticUpdate, UpdateKind


def run_and_wait(app):
    started = app.run_diagnostics()
    assert app.channel.join(timeout=5)
    return started


class TestLifecycle:
    """Tests for startup/shutdown"""

    def test_startup_subscribes_once(self, make_app):
        app = make_app()
        app.startup()
        app.startup()
        assert app.channel.subscribed

    def test_shutdown_closes_channel(self, make_app):
        app = make_app()
        app.startup()
        app.shutdown()
        app.shutdown()
        assert not app.channel.subscribed
        assert app.channel.closed

    def test_version_looked_up_once(self, make_app):
        """Test the version provider is called a single time"""
        calls = []
        app = make_app()
        app._version_provider = lambda: calls.append(1) or "2.0.0"
        assert app.get_version() == "2.0.0"
        assert app.get_version() == "2.0.0"
        assert len(calls) == 1

    def test_version_failure(self, make_app):
        """Test a failing lookup reports 'unknown'"""
        def broken():
            raise OSError("no metadata")

        app = make_app()
        app._version_provider = broken
        assert app.get_version() == "unknown"


class TestRun:
    """Tests for a run through the facade"""

    def test_full_run(self, make_app):
        app = make_app()
        app.startup()
        assert run_and_wait(app) is True

        snapshot = app.snapshot()
        assert snapshot.buffer == "DNS: OK\nHTTP: OK\nSummary: all tests passed\n"
        assert snapshot.status == ""
        assert snapshot.running is False

    def test_engine_unreachable(self, make_app):
        app = make_app(error="connection refused")
        app.startup()
        assert app.run_diagnostics() is False

        snapshot = app.snapshot()
        assert snapshot.running is False
        assert "connection refused" in snapshot.buffer

    def test_stream_error(self, make_app):
        """Test an engine error keeps the partial buffer"""
        app = make_app(script=[
            DiagnosticUpdate(UpdateKind.STEP_START, "Checking DNS", "DNS: OK\n"),
            DiagnosticUpdate(UpdateKind.ERROR, "timeout", ""),
        ])
        app.startup()
        run_and_wait(app)

        snapshot = app.snapshot()
        assert snapshot.status == "Error: timeout"
        assert snapshot.buffer == "DNS: OK\n"

    def test_listener(self, make_app):
        seen = []
        app = make_app()
        app.add_listener(seen.append)
        app.startup()
        run_and_wait(app)
        assert seen[-1].running is False
        assert len(seen) == 1 + len(app.engine.script)


class TestExport:
    """Tests for copy/save through the facade"""

    def test_copy_after_run(self, make_app):
        app = make_app()
        app.startup()
        run_and_wait(app)

        result = app.copy_output()
        assert result.status == ExportStatus.COPIED
        assert app.exporter._clipboard.copied == [app.snapshot().buffer]

    def test_copy_before_run(self, make_app):
        assert make_app().copy_output().status == ExportStatus.NOTHING_TO_COPY

    def test_save_to_default_destination(self, make_app, tmp_path):
        app = make_app()
        app.startup()
        run_and_wait(app)

        destination = app.default_destination()
        assert destination.parent == tmp_path
        result = app.save_output(destination)
        assert result.status == ExportStatus.SAVED
        assert destination.read_text(encoding="utf-8") == app.snapshot().buffer

    def test_save_keeps_session(self, make_app, tmp_path):
        """Test exporting never changes the session"""
        app = make_app()
        app.startup()
        run_and_wait(app)
        before = app.snapshot()
        app.save_output(tmp_path / "out.txt")
        app.copy_output()
        assert app.snapshot() == before

    def test_save_before_run(self, make_app, tmp_path):
        result = make_app().save_output(tmp_path / "out.txt")
        assert result.status == ExportStatus.NOTHING_TO_SAVE
        assert not (tmp_path / "out.txt").exists()


class TestCreate:
    """Tests for the standard wiring"""

    def test_create(self, tmp_path):
        from engine import DiagnosticRunner

        app = DiagnosticsApp.create(save_dir=tmp_path)
        try:
            assert isinstance(app.engine, DiagnosticRunner)
            assert app.default_destination().parent == tmp_path
        finally:
            app.shutdown()
