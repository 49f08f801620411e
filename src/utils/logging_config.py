"""
netdiag Logging Configuration

Provides centralized logging setup for consistent log formatting
across the session core, the engine and the front ends.

Modules log through logging.getLogger(__name__); the entry point calls
setup_logging() once at startup:

    from utils.logging_config import setup_logging
    setup_logging(level=logging.DEBUG, log_file="~/.config/netdiag/logs/netdiag.log")

The TUI owns the terminal, so it configures logging with console=False and
sends records to the log file only.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
import threading

# Thread-safe initialization
_initialized = False
_lock = threading.Lock()

DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DEBUG_FORMAT = "%(asctime)s | %(name)s:%(lineno)d | %(levelname)s | %(message)s"

LEVEL_COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
}
RESET = '\033[0m'

NOISY_LOGGERS = [
    'urllib3',
    'requests',
    'asyncio',
    'markdown_it',
]


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for terminal output."""

    def __init__(self, fmt=None, datefmt=None, use_colors=True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record):
        if not self.use_colors or record.levelname not in LEVEL_COLORS:
            return super().format(record)
        # Color a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{LEVEL_COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().format(record)


def parse_level(name: str, default: int = logging.INFO) -> int:
    """Map a level name like 'debug' to its logging constant."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def _console_handler(level: int, log_format: str, use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(log_format, use_colors=use_colors))
    return handler


def _file_handler(log_file: str, level: int, max_bytes: int,
                  backup_count: int) -> Optional[logging.Handler]:
    """Rotating file handler, or None if the file cannot be opened."""
    log_path = Path(log_file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8',
        )
    except OSError as e:
        # Logging must never stop a diagnostic run
        sys.stderr.write(f"netdiag: cannot open log file {log_path}: {e}\n")
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_FORMAT,
    console: bool = True,
    use_colors: bool = True,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    suppress_libs: bool = True,
    force: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level (default INFO)
        log_file: Rotating log file, always written with line numbers
        log_format: Console format string
        console: Attach a stderr handler (off while the TUI owns the terminal)
        use_colors: Color level names when stderr is a terminal
        max_bytes: Log file size before rotation
        backup_count: Rotated files to keep
        suppress_libs: Keep urllib3/requests/asyncio at WARNING
        force: Replace an earlier configuration
    """
    global _initialized

    with _lock:
        if _initialized and not force:
            return

        handlers = []
        if console:
            handlers.append(_console_handler(level, log_format, use_colors))
        if log_file:
            file_handler = _file_handler(log_file, level, max_bytes, backup_count)
            if file_handler is not None:
                handlers.append(file_handler)
        if not handlers:
            handlers.append(logging.NullHandler())

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(level)
        for handler in handlers:
            root_logger.addHandler(handler)

        if suppress_libs:
            for lib_name in NOISY_LOGGERS:
                logging.getLogger(lib_name).setLevel(logging.WARNING)

        _initialized = True
