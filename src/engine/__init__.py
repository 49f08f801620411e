"""
Local Diagnostic Engine

Produces the DiagnosticUpdate stream the session controller consumes.

Usage:
    from engine import DiagnosticRunner, EngineConfig

    runner = DiagnosticRunner(channel, EngineConfig.from_env())
    runner.start_run()
"""

from .config import EngineConfig
from .probes import ProbeError
from .runner import DiagnosticRunner, Step, default_steps, frame_update

__all__ = [
    'EngineConfig',
    'ProbeError',
    'DiagnosticRunner',
    'Step',
    'default_steps',
    'frame_update',
]
