"""
Session Data Models

The wire type produced by the diagnostic engine and the immutable
snapshot the session controller swaps in on every transition.
Snapshots are frozen dataclasses, so any reader holding one sees a
fully applied state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class UpdateKind(Enum):
    """Kind of a streamed diagnostic update. Closed set."""
    START = "start"                  # Run accepted, header text
    STEP_START = "step_start"        # A diagnostic step begins
    STEP_PROGRESS = "step_progress"  # Output chunk for the current step
    DONE = "done"                    # Run finished
    ERROR = "error"                  # Run aborted by the engine

    @property
    def is_terminal(self) -> bool:
        """True for the kinds that end a run."""
        return self in (UpdateKind.DONE, UpdateKind.ERROR)


class RunState(Enum):
    """State of the session state machine."""
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class DiagnosticUpdate:
    """
    A single event emitted by the engine during a run.

    Attributes:
        kind: What happened (see UpdateKind)
        message: Short status text; step name or error description
        data: Output text to append to the buffer, may be empty
    """
    kind: UpdateKind
    message: str = ""
    data: str = ""

    def to_dict(self) -> dict:
        """Serialize for JSON/event transport."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'DiagnosticUpdate':
        """Deserialize from dict.

        Accepts the legacy ``type`` key in place of ``kind``.

        Raises:
            ValueError: Missing or unknown kind, or a message or data that is not text
        """
        raw_kind = payload.get('kind', payload.get('type'))
        if raw_kind is None:
            raise ValueError("DiagnosticUpdate payload has no kind")

        fields = {}
        for key in ('message', 'data'):
            value = payload.get(key)
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise ValueError(f"DiagnosticUpdate {key} must be a string, got {type(value).__name__}")
            fields[key] = value
        return cls(kind=UpdateKind(raw_kind), **fields)


@dataclass(frozen=True)
class SessionSnapshot:
    """
    The session controller's state at one point in time.

    Attributes:
        running: True from start_run() until a terminal update
        buffer: Accumulated output of the current or most recent run
        status: Human-readable status line
        run_count: Number of runs started in this process
    """
    running: bool = False
    buffer: str = ""
    status: str = ""
    run_count: int = 0

    @property
    def state(self) -> RunState:
        return RunState.RUNNING if self.running else RunState.IDLE

    @property
    def has_output(self) -> bool:
        return bool(self.buffer)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "running": self.running,
            "buffer": self.buffer,
            "status": self.status,
            "run_count": self.run_count,
        }
