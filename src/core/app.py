"""
Application Facade

Wires the update channel, the diagnostic engine, the session controller
and the export facade together. Front ends (TUI, headless runner) only
talk to DiagnosticsApp.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from __version__ import get_version
from utils.threads import ThreadManager

from .export import ExportFacade, ExportResult, SystemClipboard
from .session import SessionController, SessionSnapshot, UpdateChannel
from .session.controller import Engine, SnapshotListener

logger = logging.getLogger(__name__)


class DiagnosticsApp:
    """
    One diagnostics client per process.

    Usage:
        app = DiagnosticsApp.create()
        app.startup()
        app.add_listener(render)
        app.run_diagnostics()
        ...
        app.save_output(app.default_destination())
        app.shutdown()
    """

    def __init__(self, channel: UpdateChannel, engine: Engine, exporter: ExportFacade,
                 thread_manager: Optional[ThreadManager] = None,
                 version_provider: Callable[[], str] = get_version):
        self.channel = channel
        self.engine = engine
        self.exporter = exporter
        self.controller = SessionController(engine, channel)
        self._threads = thread_manager
        self._version_provider = version_provider
        self._version: Optional[str] = None
        self._started = False

    @classmethod
    def create(cls, clipboard_fallback: Optional[Callable[[str], None]] = None,
               save_dir: Optional[Path] = None,
               thread_manager: Optional[ThreadManager] = None) -> 'DiagnosticsApp':
        """Build the standard app: local engine, system clipboard, config from env."""
        from engine import DiagnosticRunner, EngineConfig
        from utils.env_config import get_save_dir

        threads = thread_manager or ThreadManager()
        channel = UpdateChannel(thread_manager=threads)
        runner = DiagnosticRunner(channel, EngineConfig.from_env(), thread_manager=threads)
        exporter = ExportFacade(
            SystemClipboard(fallback=clipboard_fallback),
            save_dir=save_dir or get_save_dir(),
        )
        return cls(channel, runner, exporter, thread_manager=threads)

    # ==================== Lifecycle ====================

    def startup(self) -> None:
        """Subscribe the session to the update channel and look up the version."""
        if self._started:
            return
        self._started = True
        self.controller.start()
        self.get_version()
        logger.info(f"netdiag {self._version} started")

    def shutdown(self) -> None:
        if not self._started:
            return
        self._started = False
        self.controller.shutdown()
        self.channel.close()
        if self._threads is not None:
            self._threads.shutdown(timeout=2.0)
        logger.info("netdiag stopped")

    def get_version(self) -> str:
        """Version string, looked up once."""
        if self._version is None:
            try:
                self._version = self._version_provider() or "unknown"
            except Exception as e:
                logger.warning(f"Version lookup failed: {e}")
                self._version = "unknown"
        return self._version

    # ==================== Session ====================

    def run_diagnostics(self) -> bool:
        return self.controller.start_run()

    def snapshot(self) -> SessionSnapshot:
        return self.controller.snapshot()

    def add_listener(self, listener: SnapshotListener) -> None:
        self.controller.add_listener(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        self.controller.remove_listener(listener)

    # ==================== Export ====================

    def default_destination(self) -> Path:
        return self.exporter.default_destination()

    def copy_output(self) -> ExportResult:
        return self.exporter.copy(self.snapshot().buffer)

    def save_output(self, destination: Optional[Union[str, Path]]) -> ExportResult:
        return self.exporter.persist(self.snapshot().buffer, destination)
