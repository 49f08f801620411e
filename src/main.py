#!/usr/bin/env python3
"""
netdiag - Network Diagnostics
Main entry point for the application

Commands:
- tui      Interactive terminal window (default)
- run      Headless run, report streamed to stdout
- version  Show version information
- config   Show current configuration
"""

import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from __version__ import get_full_version, show_version_history
from utils.env_config import get_config, get_config_bool, initialize_config, show_config_summary
from utils.logging_config import parse_level, setup_logging
from utils.paths import NetDiagPaths

console = Console()


def configure_logging(debug: bool, console_output: bool) -> None:
    """Set up logging from LOG_LEVEL / LOG_FILE / DEBUG_MODE and --debug"""
    if not debug and get_config_bool('DEBUG_MODE'):
        debug = True
    level = parse_level('DEBUG' if debug else get_config('LOG_LEVEL'))
    log_file = get_config('LOG_FILE') or str(NetDiagPaths.log_file())
    setup_logging(level=level, log_file=log_file, console=console_output, force=True)


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """Network diagnostics: run tests against the diagnostic endpoint and share the report"""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    config_result = initialize_config()
    if not config_result['valid']:
        for error in config_result['errors']:
            console.print(f"[bold red]Config error:[/bold red] {escape(error)}")
        ctx.exit(2)

    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


@cli.command()
@click.pass_context
def tui(ctx):
    """Open the interactive terminal window"""
    # The TUI owns the terminal, log to file only
    configure_logging(ctx.obj.get('debug', False), console_output=False)

    from tui.app import run_tui
    run_tui()


@cli.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Save the report to this file')
@click.option('--copy', 'copy_report', is_flag=True, help='Copy the report to the clipboard')
@click.option('--quiet', '-q', is_flag=True, help='Show step status instead of the full report')
@click.option('--timeout', type=float, default=None,
              help='Give up waiting after this many seconds (default: wait for the engine)')
@click.pass_context
def run(ctx, output, copy_report, quiet, timeout):
    """Run diagnostics without the UI"""
    configure_logging(ctx.obj.get('debug', False), console_output=ctx.obj.get('debug', False))

    from cli.run import run_headless
    from core.app import DiagnosticsApp

    ctx.exit(run_headless(DiagnosticsApp.create(), output=output, copy=copy_report,
                          quiet=quiet, timeout=timeout))


@cli.command()
@click.option('--history', is_flag=True, help='Show version history')
def version(history):
    """Show version information"""
    console.print(f"netdiag v{get_full_version()}")
    if history:
        show_version_history()


@cli.command()
def config():
    """Show current configuration"""
    show_config_summary()


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
