"""
Headless diagnostic run

Streams the report to the terminal as it is produced, then optionally
saves it and copies it to the clipboard.

Usage:
    netdiag run
    netdiag run --output report.txt --copy
"""

import threading
from pathlib import Path
from typing import Optional

from rich.console import Console

from core.app import DiagnosticsApp
from core.export import ExportResult, ExportStatus
from core.session import SessionSnapshot

console = Console()

EXIT_OK = 0
EXIT_FAILED = 1


class StreamPrinter:
    """Session listener that prints only the newly appended part of the buffer"""

    def __init__(self, out: Console, quiet: bool = False):
        self._out = out
        self._quiet = quiet
        self._printed = 0
        self._last_status = ""
        self.finished = threading.Event()
        self.final: Optional[SessionSnapshot] = None

    def __call__(self, snapshot: SessionSnapshot) -> None:
        if len(snapshot.buffer) < self._printed:
            # New run, buffer was reset
            self._printed = 0
        if not self._quiet:
            chunk = snapshot.buffer[self._printed:]
            if chunk:
                self._out.print(chunk, end="", markup=False, highlight=False, soft_wrap=True)
        self._printed = len(snapshot.buffer)

        if snapshot.running and snapshot.status and snapshot.status != self._last_status:
            self._last_status = snapshot.status
            if self._quiet:
                self._out.print(snapshot.status, style="dim", markup=False, highlight=False)

        if not snapshot.running:
            self.final = snapshot
            self.finished.set()


def _report(result: ExportResult) -> None:
    if result.success:
        style = "green"
    elif result.status == ExportStatus.FAILED:
        style = "red"
    else:
        style = "yellow"
    console.print(result.message, style=style, markup=False, highlight=False)


def run_headless(diagnostics: DiagnosticsApp, output: Optional[Path] = None,
                 copy: bool = False, quiet: bool = False,
                 timeout: Optional[float] = None) -> int:
    """Run one diagnostic session to completion.

    Args:
        diagnostics: The app to drive
        output: Save the report here when the run ends
        copy: Copy the report to the clipboard when the run ends
        quiet: Print status lines instead of the full report
        timeout: Stop waiting after this many seconds (no limit by default)

    Returns:
        Process exit code
    """
    printer = StreamPrinter(console, quiet=quiet)
    diagnostics.add_listener(printer)
    diagnostics.startup()
    try:
        if not diagnostics.run_diagnostics():
            # Outside quiet mode the printer already showed the failure text
            if quiet or not diagnostics.snapshot().buffer:
                failure = diagnostics.snapshot().buffer or "Diagnostics did not start"
                console.print(failure, style="red", markup=False, highlight=False)
            else:
                console.print()
            return EXIT_FAILED

        if not printer.finished.wait(timeout):
            console.print(f"\n[red]No result after {timeout:g}s, giving up[/red]")
            return EXIT_FAILED

        final = printer.final or diagnostics.snapshot()
        console.print()
        if final.status:
            console.print(final.status, style="red", markup=False, highlight=False)
        else:
            console.print("[green]Diagnostics complete[/green]")

        if output is not None:
            _report(diagnostics.save_output(output))
        if copy:
            _report(diagnostics.copy_output())

        return EXIT_FAILED if final.status else EXIT_OK
    finally:
        diagnostics.remove_listener(printer)
        diagnostics.shutdown()
