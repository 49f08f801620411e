"""
Diagnostic Runner

The local diagnostic engine. start_run() returns as soon as the run is
under way; the steps execute on a managed background thread and every
result is published to the update channel as a DiagnosticUpdate.

A run publishes, in order:
    start          report header
    step_start     framed step title            (per step)
    step_progress  output, line by line or whole (per step)
    done           closing line

A failing step does not end the run: its error is published as a
step_progress chunk and the next step starts. Only a crash of the runner
itself publishes a terminal error update.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from core.errors import ChannelClosed, StartFailure
from core.session.channel import UpdateChannel
from core.session.models import DiagnosticUpdate, UpdateKind
from utils.threads import ThreadManager, get_thread_manager

from . import probes
from .config import EngineConfig
from .probes import LineCallback, ProbeError

logger = logging.getLogger(__name__)

REPORT_TITLE = "Network Diagnostics"
SEPARATOR = "-" * 79
RUN_THREAD_NAME = "diagnostics-run"

KNOWN_RESOLVERS = {
    "1.1.1.1": "Cloudflare",
    "1.0.0.1": "Cloudflare",
    "8.8.8.8": "Google",
    "8.8.4.4": "Google",
    "9.9.9.9": "Quad9",
}

# probe(on_line, stop_event) returns the step output, or None when the
# output was already streamed through on_line
Probe = Callable[[LineCallback, threading.Event], Optional[str]]


@dataclass
class Step:
    """One diagnostic step of a run."""
    title: str
    message: str
    done_message: str
    failed_message: str
    probe: Probe
    progress_message: str = ""


def resolver_label(server: str) -> str:
    return KNOWN_RESOLVERS.get(server, server)


def format_timestamp(now: datetime) -> str:
    """e.g. 'Monday, Jun 2 2025 14:30:05 CEST'"""
    zone = now.strftime("%Z") or now.strftime("%z")
    return f"{now:%A, %b} {now.day} {now:%Y %H:%M:%S} {zone}".rstrip()


def frame_update(update: DiagnosticUpdate) -> DiagnosticUpdate:
    """Apply report layout to an update's data.

    Step titles are boxed between separator lines and every non-terminal
    chunk ends with a newline, so the session can concatenate chunks
    verbatim.
    """
    data = update.data
    if update.kind == UpdateKind.STEP_START:
        data = f"\n{SEPARATOR}\n{data}\n{SEPARATOR}"
    if update.kind in (UpdateKind.START, UpdateKind.STEP_START, UpdateKind.STEP_PROGRESS):
        data = data + "\n"
    return DiagnosticUpdate(update.kind, update.message, data)


def default_steps(config: EngineConfig) -> List[Step]:
    """The standard run: IP info, HTTP, DNS twice, traceroute, ping."""
    host = config.endpoint
    resolver = resolver_label(config.dns_server)

    return [
        Step(
            title="Client IP Info",
            message="Fetching client IP info...",
            done_message="Client IP information retrieved",
            failed_message="IP info failed",
            probe=lambda on_line, stop: probes.fetch_ip_info(
                config.ipinfo_url, config.http_timeout, config.user_agent),
        ),
        Step(
            title="HTTP HEAD request",
            message="Making HTTP request...",
            done_message="HTTP request completed",
            failed_message="HTTP request failed",
            probe=lambda on_line, stop: probes.http_head(
                host, config.http_timeout, config.user_agent),
        ),
        Step(
            title="DNS lookup (using system DNS)",
            message="Running DNS lookup (system DNS)...",
            done_message="DNS lookup (system) completed",
            failed_message="DNS lookup (system) failed",
            probe=lambda on_line, stop: probes.dns_lookup(
                host, None, config.command_timeout),
        ),
        Step(
            title=f"DNS lookup (using {resolver})",
            message=f"Running DNS lookup ({resolver})...",
            done_message=f"DNS lookup ({resolver}) completed",
            failed_message=f"DNS lookup ({resolver}) failed",
            probe=lambda on_line, stop: probes.dns_lookup(
                host, config.dns_server, config.command_timeout),
        ),
        Step(
            title="Traceroute",
            message="Running traceroute (this may take a while)...",
            progress_message="Traceroute running (this may take a while)...",
            done_message="Traceroute completed",
            failed_message="Traceroute failed",
            probe=lambda on_line, stop: probes.traceroute(
                host, on_line, config.traceroute_wait, config.command_timeout, stop),
        ),
        Step(
            title=f"Ping (n={config.ping_count})",
            message=f"Running ping test (n={config.ping_count})...",
            progress_message="Ping running (this may take a while)...",
            done_message="Ping completed",
            failed_message="Ping test failed",
            probe=lambda on_line, stop: probes.ping(
                host, on_line, config.ping_count, config.command_timeout, stop),
        ),
    ]


class DiagnosticRunner:
    """
    Runs diagnostic steps in the background and streams their output.

    Args:
        channel: Where updates are published
        config: Targets and tuning, defaults to EngineConfig.from_env()
        steps: Override the step list (tests, custom runs)
        thread_manager: Owner of the run thread
        clock: Returns the time shown in the report header
        sleep: Used for the pause between steps
    """

    def __init__(self, channel: UpdateChannel, config: Optional[EngineConfig] = None,
                 steps: Optional[List[Step]] = None,
                 thread_manager: Optional[ThreadManager] = None,
                 clock: Callable[[], datetime] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self._channel = channel
        self.config = config or EngineConfig.from_env()
        self._steps = steps
        self._threads = thread_manager or get_thread_manager()
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._sleep = sleep

    @property
    def steps(self) -> List[Step]:
        if self._steps is None:
            return default_steps(self.config)
        return self._steps

    @property
    def busy(self) -> bool:
        return self._threads.is_running(RUN_THREAD_NAME)

    def start_run(self) -> None:
        """Begin a run in the background.

        Raises:
            StartFailure: Channel closed or a run is still in flight
        """
        if self._channel.closed:
            raise StartFailure(f"update channel {self._channel.name} is closed")
        # The previous run's thread may still be returning after its done update
        self._threads.join_thread(RUN_THREAD_NAME, timeout=1.0)
        try:
            self._threads.start_thread(RUN_THREAD_NAME, self._run)
        except RuntimeError as e:
            raise StartFailure("a diagnostic run is already in progress") from e

    def stop(self, timeout: float = 5.0) -> bool:
        """Ask a running run to stop at the next step boundary."""
        return self._threads.stop_thread(RUN_THREAD_NAME, timeout=timeout)

    def report_header(self) -> str:
        return (
            f"{REPORT_TITLE}\n"
            f"Generated : {format_timestamp(self._clock())}\n"
            f"Endpoint  : {self.config.endpoint}\n"
        )

    def emit(self, kind: UpdateKind, message: str, data: str = "") -> None:
        self._channel.publish(frame_update(DiagnosticUpdate(kind, message, data)))

    def _run(self, stop_event: threading.Event) -> None:
        steps = self.steps
        failures = 0
        try:
            self.emit(UpdateKind.START, "Starting diagnostics...", self.report_header())

            for step in steps:
                if stop_event.is_set():
                    self.emit(UpdateKind.ERROR, "Diagnostics stopped", "\nStopped\n")
                    return
                self._sleep(self.config.step_delay)
                if not self._run_step(step, stop_event):
                    failures += 1

            if failures:
                message = f"Diagnostics complete ({failures} of {len(steps)} steps failed)"
            else:
                message = "Diagnostics complete!"
            self.emit(UpdateKind.DONE, message, "\nCompleted")
            logger.info(message)

        except ChannelClosed:
            logger.warning("Update channel closed during a diagnostic run")
        except Exception as e:
            logger.error(f"Diagnostic run crashed: {e}", exc_info=True)
            try:
                self.emit(UpdateKind.ERROR, "Diagnostics failed", f"\nError: {e}\n")
            except ChannelClosed:
                pass

    def _run_step(self, step: Step, stop_event: threading.Event) -> bool:
        self.emit(UpdateKind.STEP_START, step.message, step.title)
        logger.debug(f"Step started: {step.title}")

        def on_line(line: str) -> None:
            self.emit(UpdateKind.STEP_PROGRESS, step.progress_message or step.message, line)

        try:
            output = step.probe(on_line, stop_event)
        except ProbeError as e:
            logger.warning(f"{step.failed_message}: {e}")
            self.emit(UpdateKind.STEP_PROGRESS, step.failed_message, f"Error: {e}\n")
            if e.partial_output:
                self.emit(UpdateKind.STEP_PROGRESS, "Partial output", e.partial_output)
            return False
        except ChannelClosed:
            raise
        except Exception as e:
            logger.error(f"{step.failed_message}: {e}", exc_info=True)
            self.emit(UpdateKind.STEP_PROGRESS, step.failed_message, f"Error: {e}\n")
            return False

        self.emit(UpdateKind.STEP_PROGRESS, step.done_message, output or "")
        return True
