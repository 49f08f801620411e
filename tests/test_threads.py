"""
Tests for the thread manager.

Run: python3 -m pytest tests/test_threads.py -v
"""

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utils.threads import ThreadManager


def wait_for_stop(stop_event):
    stop_event.wait(5)


@pytest.fixture
def manager():
    m = ThreadManager()
    yield m
    m.shutdown(timeout=2)


class TestThreadManager:
    """Tests for ThreadManager."""

    def test_target_receives_stop_event_and_args(self, manager):
        """Test the target is called with the stop event first."""
        seen = []
        done = threading.Event()

        def target(stop_event, value, key=None):
            seen.append((isinstance(stop_event, threading.Event), value, key))
            done.set()

        manager.start_thread("worker", target, args=(1,), kwargs={"key": "k"})
        assert done.wait(5)
        assert seen == [(True, 1, "k")]

    def test_duplicate_name_rejected(self, manager):
        """Test a live thread name cannot be reused."""
        manager.start_thread("worker", wait_for_stop)
        with pytest.raises(RuntimeError):
            manager.start_thread("worker", wait_for_stop)

    def test_name_reused_after_finish(self, manager):
        """Test a finished thread's name can be started again."""
        manager.start_thread("once", lambda stop: None)
        assert manager.join_thread("once", timeout=5)
        manager.start_thread("once", lambda stop: None)
        assert manager.join_thread("once", timeout=5)

    def test_stop_thread(self, manager):
        """Test stop_thread signals and joins."""
        manager.start_thread("worker", wait_for_stop)
        assert manager.is_running("worker")
        assert manager.stop_thread("worker", timeout=5)
        assert not manager.is_running("worker")

    def test_stop_unknown_thread(self, manager):
        assert manager.stop_thread("missing") is True

    def test_join_does_not_signal(self, manager):
        """Test join_thread waits without setting the stop event."""
        manager.start_thread("worker", wait_for_stop)
        assert manager.join_thread("worker", timeout=0.1) is False
        assert manager.is_running("worker")

    def test_shutdown(self, manager):
        """Test shutdown stops everything."""
        manager.start_thread("a", wait_for_stop)
        manager.start_thread("b", wait_for_stop)
        assert sorted(manager.running_threads) == ["a", "b"]
        assert manager.shutdown(timeout=5) == 0
        assert manager.running_threads == []
