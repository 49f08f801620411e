"""Version information for netdiag"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__release_date__ = "2025-06-02"

DISTRIBUTION_NAME = "netdiag"

# Version history
VERSION_HISTORY = [
    {
        "version": "1.0.0",
        "date": "2025-06-02",
        "changes": [
            "Streaming diagnostic session with ordered update channel",
            "Client IP, HTTP HEAD, DNS, traceroute and ping steps",
            "Copy report to clipboard and save to file",
            "Textual terminal UI and headless runner",
        ]
    },
]


def get_version():
    """Installed distribution version, else the source version, else 'unknown'"""
    try:
        from importlib.metadata import version, PackageNotFoundError
    except ImportError:
        return __version__ or "unknown"

    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return __version__ or "unknown"


def get_full_version():
    """Get version with release date"""
    return f"{get_version()} ({__release_date__})"


def show_version_history():
    """Display version history"""
    from rich.console import Console
    from rich.table import Table

    console = Console()

    table = Table(title="Version History", show_header=True, header_style="bold magenta")
    table.add_column("Version", style="cyan", width=10)
    table.add_column("Date", style="green", width=12)
    table.add_column("Changes", style="white")

    for entry in VERSION_HISTORY:
        table.add_row(entry["version"], entry["date"], "\n".join(entry["changes"]))

    console.print(table)
