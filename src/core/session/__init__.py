"""
Diagnostic Session

Usage:
    from core.session import SessionController, UpdateChannel

    channel = UpdateChannel()
    controller = SessionController(engine, channel)
    controller.start()
    controller.start_run()
"""

from .models import (
    UpdateKind,
    RunState,
    DiagnosticUpdate,
    SessionSnapshot,
)
from .channel import UpdateChannel, Subscription
from .controller import SessionController, STARTING_STATUS

__all__ = [
    'UpdateKind',
    'RunState',
    'DiagnosticUpdate',
    'SessionSnapshot',
    'UpdateChannel',
    'Subscription',
    'SessionController',
    'STARTING_STATUS',
]
