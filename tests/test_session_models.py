"""
Tests for the session data models.

Run: python3 -m pytest tests/test_session_models.py -v
"""

import dataclasses
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.session.models import (
    DiagnosticUpdate,
    RunState,
    SessionSnapshot,
    UpdateKind,
)


class TestUpdateKind:
    """Tests for UpdateKind enum."""

    def test_wire_values(self):
        """Test the wire names of every kind."""
        assert UpdateKind.START.value == "start"
        assert UpdateKind.STEP_START.value == "step_start"
        assert UpdateKind.STEP_PROGRESS.value == "step_progress"
        assert UpdateKind.DONE.value == "done"
        assert UpdateKind.ERROR.value == "error"

    def test_closed_set(self):
        """Test there are exactly five kinds."""
        assert len(UpdateKind) == 5

    def test_only_done_and_error_are_terminal(self):
        """Test terminal detection."""
        terminal = {kind for kind in UpdateKind if kind.is_terminal}
        assert terminal == {UpdateKind.DONE, UpdateKind.ERROR}


class TestDiagnosticUpdate:
    """Tests for DiagnosticUpdate."""

    def test_defaults(self):
        """Test message and data default to empty strings."""
        update = DiagnosticUpdate(UpdateKind.START)
        assert update.message == ""
        assert update.data == ""

    def test_immutable(self):
        """Test updates cannot be modified after creation."""
        update = DiagnosticUpdate(UpdateKind.STEP_PROGRESS, "Ping", "64 bytes\n")
        with pytest.raises(dataclasses.FrozenInstanceError):
            update.data = "changed"

    def test_to_dict(self):
        """Test serialization."""
        update = DiagnosticUpdate(UpdateKind.STEP_START, "Checking DNS", "DNS: OK\n")
        assert update.to_dict() == {
            "kind": "step_start",
            "message": "Checking DNS",
            "data": "DNS: OK\n",
        }

    def test_from_dict(self):
        """Test deserialization."""
        update = DiagnosticUpdate.from_dict({"kind": "done", "message": "", "data": "Summary\n"})
        assert update == DiagnosticUpdate(UpdateKind.DONE, "", "Summary\n")

    def test_from_dict_legacy_type_key(self):
        """Test the older 'type' key is accepted."""
        update = DiagnosticUpdate.from_dict({"type": "error", "message": "timeout"})
        assert update.kind == UpdateKind.ERROR
        assert update.message == "timeout"
        assert update.data == ""

    def test_from_dict_null_fields(self):
        """Test null message/data become empty strings."""
        update = DiagnosticUpdate.from_dict({"kind": "start", "message": None, "data": None})
        assert update.message == ""
        assert update.data == ""

    def test_from_dict_unknown_kind(self):
        """Test unknown kinds are rejected."""
        with pytest.raises(ValueError):
            DiagnosticUpdate.from_dict({"kind": "warning", "message": "x"})

    def test_from_dict_missing_kind(self):
        """Test a payload without kind is rejected."""
        with pytest.raises(ValueError):
            DiagnosticUpdate.from_dict({"message": "x"})


class TestSessionSnapshot:
    """Tests for SessionSnapshot."""

    def test_initial_state_is_idle(self):
        """Test a fresh snapshot is idle and empty."""
        snapshot = SessionSnapshot()
        assert snapshot.running is False
        assert snapshot.buffer == ""
        assert snapshot.status == ""
        assert snapshot.state == RunState.IDLE
        assert snapshot.has_output is False

    def test_running_state(self):
        """Test state follows the running flag."""
        snapshot = SessionSnapshot(running=True, status="Starting diagnostics...")
        assert snapshot.state == RunState.RUNNING

    def test_to_dict(self):
        """Test serialization."""
        snapshot = SessionSnapshot(running=False, buffer="DNS: OK\n", status="", run_count=2)
        d = snapshot.to_dict()
        assert d["state"] == "idle"
        assert d["buffer"] == "DNS: OK\n"
        assert d["run_count"] == 2

    def test_from_dict_non_text_data(self):
        """Test data that is not a string is rejected."""
        with pytest.raises(ValueError, match="data must be a string"):
            DiagnosticUpdate.from_dict({"kind": "step_progress", "data": 5})

    def test_from_dict_non_text_message(self):
        """Test a message that is not a string is rejected."""
        with pytest.raises(ValueError, match="message must be a string"):
            DiagnosticUpdate.from_dict({"kind": "error", "message": ["timeout"]})
