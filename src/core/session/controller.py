"""
Session Controller

Owns the state of the current diagnostic run. State changes only through
start_run() and apply_update(); each one builds a new SessionSnapshot and
swaps it in under a lock, so readers always see whole updates.

    Idle --start_run()--> Running --done/error--> Idle

A run that never receives a terminal update stays Running. There is no
client-side timeout and no cancellation; ending a run is the engine's job.
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Protocol

from .channel import Subscription, UpdateChannel
from .models import DiagnosticUpdate, SessionSnapshot, UpdateKind

logger = logging.getLogger(__name__)

STARTING_STATUS = "Starting diagnostics..."
START_FAILED_PREFIX = "Error starting diagnostics: "
ERROR_STATUS_PREFIX = "Error: "

SnapshotListener = Callable[[SessionSnapshot], None]


class Engine(Protocol):
    """Anything that can begin a run and stream its updates to the channel."""

    def start_run(self) -> None:
        """Begin streaming. Raises if the run cannot even begin."""


class SessionController:
    """
    Folds DiagnosticUpdate events into the session state.

    Usage:
        controller = SessionController(engine, channel)
        controller.start()            # subscribe once per process
        controller.start_run()
        ...
        controller.shutdown()         # unsubscribe once
    """

    def __init__(self, engine: Engine, channel: UpdateChannel):
        self._engine = engine
        self._channel = channel
        self._state = SessionSnapshot()
        self._lock = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._listeners: List[SnapshotListener] = []

    # ==================== Lifecycle ====================

    def start(self) -> None:
        """Subscribe to the update channel. Further calls do nothing."""
        if self._subscription is None:
            self._subscription = self._channel.subscribe(self.apply_update)
            logger.debug("Session controller subscribed")

    def shutdown(self) -> None:
        """Unsubscribe from the update channel. Further calls do nothing."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()
            logger.debug("Session controller unsubscribed")

    # ==================== State access ====================

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._state

    @property
    def running(self) -> bool:
        return self.snapshot().running

    @property
    def buffer(self) -> str:
        return self.snapshot().buffer

    @property
    def status(self) -> str:
        return self.snapshot().status

    # ==================== Listeners ====================

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call listener with the new snapshot after every transition."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, snapshot: SessionSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Session listener error: {e}", exc_info=True)

    # ==================== Transitions ====================

    def start_run(self) -> bool:
        """Begin a run.

        Ignored while a run is active. If the engine fails before streaming
        anything, the failure is written to the buffer and the session goes
        back to idle.

        Returns:
            True if the engine accepted the run
        """
        with self._lock:
            if self._state.running:
                logger.info("Run already in progress, ignoring start request")
                return False
            self._state = SessionSnapshot(
                running=True,
                buffer="",
                status=STARTING_STATUS,
                run_count=self._state.run_count + 1,
            )
            started = self._state
        self._notify(started)
        logger.info(f"Starting diagnostic run #{started.run_count}")

        try:
            self._engine.start_run()
        except Exception as e:
            logger.error(f"Diagnostic run could not start: {e}")
            with self._lock:
                self._state = replace(
                    self._state,
                    running=False,
                    buffer=f"{START_FAILED_PREFIX}{e}",
                    status="",
                )
                failed = self._state
            self._notify(failed)
            return False

        return True

    def apply_update(self, update: DiagnosticUpdate) -> None:
        """Fold one update into the session, in arrival order."""
        with self._lock:
            current = self._state
            if not current.running:
                logger.debug(f"Ignoring {update.kind.value} update, no run in progress")
                return
            self._state = self._fold(current, update)
            folded = self._state

        if update.kind.is_terminal:
            logger.info(f"Diagnostic run #{folded.run_count} ended: {update.kind.value}")
        self._notify(folded)

    @staticmethod
    def _fold(state: SessionSnapshot, update: DiagnosticUpdate) -> SessionSnapshot:
        buffer = state.buffer + update.data
        kind = update.kind

        if kind in (UpdateKind.START, UpdateKind.STEP_START):
            return replace(state, buffer=buffer, status=update.message)
        if kind == UpdateKind.STEP_PROGRESS:
            return replace(state, buffer=buffer, status=update.message or state.status)
        if kind == UpdateKind.DONE:
            return replace(state, running=False, buffer=buffer, status="")
        if kind == UpdateKind.ERROR:
            return replace(state, running=False, buffer=buffer,
                           status=f"{ERROR_STATUS_PREFIX}{update.message}")
        raise ValueError(f"Unknown update kind: {kind!r}")
