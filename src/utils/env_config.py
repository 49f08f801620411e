"""
netdiag settings from the environment

Every setting is an environment variable with a built-in default. A .env
file in the working directory or in ~/.config/netdiag/ is read at startup;
variables already set in the real environment take precedence over it.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from rich.console import Console
from rich.table import Table

from utils.paths import NetDiagPaths

console = Console()
logger = logging.getLogger(__name__)

DEFAULTS = {
    # Diagnostic targets
    'NETDIAG_ENDPOINT': 'routing-info-production.up.railway.app',
    'NETDIAG_IPINFO_URL': 'https://ipinfo.io/json',
    'NETDIAG_DNS_SERVER': '1.1.1.1',

    # Probe tuning
    'NETDIAG_HTTP_TIMEOUT': '10',
    'NETDIAG_PING_COUNT': '10',
    'NETDIAG_TRACEROUTE_WAIT': '3',
    'NETDIAG_COMMAND_TIMEOUT': '120',
    'NETDIAG_STEP_DELAY': '0.1',

    # Reports
    'NETDIAG_SAVE_DIR': '',

    # Logging
    'LOG_LEVEL': 'INFO',
    'LOG_FILE': '',
    'DEBUG_MODE': 'false',
}

SECTIONS = [
    ("Targets", ['NETDIAG_ENDPOINT', 'NETDIAG_IPINFO_URL', 'NETDIAG_DNS_SERVER']),
    ("Probes", ['NETDIAG_HTTP_TIMEOUT', 'NETDIAG_PING_COUNT', 'NETDIAG_TRACEROUTE_WAIT',
                'NETDIAG_COMMAND_TIMEOUT', 'NETDIAG_STEP_DELAY']),
    ("Reports", ['NETDIAG_SAVE_DIR']),
    ("Logging", ['LOG_LEVEL', 'LOG_FILE', 'DEBUG_MODE']),
]

POSITIVE_INT_KEYS = ('NETDIAG_HTTP_TIMEOUT', 'NETDIAG_PING_COUNT',
                     'NETDIAG_TRACEROUTE_WAIT', 'NETDIAG_COMMAND_TIMEOUT')

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

TRUE_VALUES = ('true', 'yes', '1', 'on')

# Keys taken from the .env file, for show_config_summary()
_from_env_file: Dict[str, str] = {}


def find_env_file() -> Optional[Path]:
    """First existing .env: working directory, then the user config dir"""
    for candidate in (Path.cwd() / '.env', NetDiagPaths.env_file()):
        if candidate.is_file():
            return candidate
    return None


def parse_env_line(line: str) -> Optional[Tuple[str, str]]:
    """Split one .env line into (key, value).

    Handles comments, blank lines, an 'export ' prefix and matching quotes.
    Returns None for lines that do not assign anything.
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    if line.startswith('export '):
        line = line[len('export '):].lstrip()

    key, sep, value = line.partition('=')
    key = key.strip()
    if not sep or not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
        value = value[1:-1]
    return key, value


def load_env_file(env_path: Optional[Path] = None, override: bool = False) -> Dict[str, str]:
    """Read a .env file into os.environ.

    Args:
        env_path: File to read, found with find_env_file() when None
        override: Replace variables already set in the environment

    Returns:
        Every key/value pair the file assigns
    """
    if env_path is None:
        env_path = find_env_file()
    if env_path is None or not env_path.is_file():
        return {}

    try:
        text = env_path.read_text(encoding='utf-8')
    except OSError as e:
        console.print(f"[yellow]Warning: Could not read {env_path}: {e}[/yellow]")
        return {}

    assigned = {}
    for line in text.splitlines():
        parsed = parse_env_line(line)
        if parsed is None:
            continue
        key, value = parsed
        assigned[key] = value
        if override or key not in os.environ:
            os.environ[key] = value
            _from_env_file[key] = value

    return assigned


def get_config(key: str, default: Optional[str] = None) -> str:
    """Environment value, else the given default, else the built-in default"""
    value = os.environ.get(key)
    if value is not None:
        return value
    if default is not None:
        return default
    return DEFAULTS.get(key, '')


def get_config_bool(key: str, default: bool = False) -> bool:
    return get_config(key, str(default).lower()).strip().lower() in TRUE_VALUES


def get_config_int(key: str, default: int = 0) -> int:
    try:
        return int(get_config(key, str(default)))
    except ValueError:
        return default


def get_config_float(key: str, default: float = 0.0) -> float:
    try:
        return float(get_config(key, str(default)))
    except ValueError:
        return default


def validate_config() -> Dict[str, Any]:
    """Check the current settings.

    Errors make the configuration unusable (netdiag exits); warnings are
    logged and the built-in default is used instead.

    Returns:
        {'valid': bool, 'errors': [...], 'warnings': [...], 'config': {...}}
    """
    errors = []
    warnings = []

    endpoint = get_config('NETDIAG_ENDPOINT').strip()
    if not endpoint:
        errors.append("NETDIAG_ENDPOINT is empty")
    elif '://' in endpoint or '/' in endpoint:
        errors.append(f"NETDIAG_ENDPOINT must be a host name, got: {endpoint}")

    ipinfo_url = get_config('NETDIAG_IPINFO_URL')
    if not ipinfo_url.startswith(('http://', 'https://')):
        warnings.append(f"NETDIAG_IPINFO_URL is not an http(s) URL: {ipinfo_url}")

    for key in POSITIVE_INT_KEYS:
        raw = get_config(key)
        if not raw.strip().isdigit() or int(raw) <= 0:
            warnings.append(f"Invalid {key}: {raw!r}, using default {DEFAULTS[key]}")

    log_level = get_config('LOG_LEVEL').strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid LOG_LEVEL: {log_level}")

    save_dir = get_config('NETDIAG_SAVE_DIR')
    if save_dir and not Path(save_dir).expanduser().is_dir():
        warnings.append(f"Save directory does not exist: {save_dir}")

    return {
        'valid': not errors,
        'errors': errors,
        'warnings': warnings,
        'config': {
            'endpoint': endpoint,
            'ipinfo_url': ipinfo_url,
            'log_level': log_level,
            'save_dir': str(get_save_dir()),
            'debug_mode': get_config_bool('DEBUG_MODE'),
        },
    }


def get_save_dir() -> Path:
    """Directory offered by default when saving a report"""
    save_dir = get_config('NETDIAG_SAVE_DIR')
    if save_dir:
        return Path(save_dir).expanduser()
    return NetDiagPaths.default_save_dir()


def _source_of(key: str) -> str:
    value = os.environ.get(key)
    if value is None:
        return "default"
    if _from_env_file.get(key) == value:
        return ".env"
    return "environment"


def show_config_summary():
    """Print every setting, its value and where it came from"""
    table = Table(title="netdiag Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="yellow")

    for title, keys in SECTIONS:
        table.add_row(f"[bold]{title}[/bold]", "", "")
        for key in keys:
            value = get_config(key)
            table.add_row(f"  {key}", value or "[dim](unset)[/dim]", _source_of(key))

    console.print(table)
    console.print(f"[dim]Reports are saved to: {get_save_dir()}[/dim]")

    env_file = find_env_file()
    if env_file:
        console.print(f"[dim].env file: {env_file}[/dim]")
    else:
        console.print(f"[dim]No .env file (looked in {Path.cwd()} and {NetDiagPaths.config_dir()})[/dim]")


def initialize_config() -> Dict[str, Any]:
    """Load the .env file and validate. Call once at startup."""
    env_file = find_env_file()
    loaded = load_env_file(env_file)
    if loaded:
        logger.info(f"Loaded {len(loaded)} settings from {env_file}")

    results = validate_config()
    for warning in results['warnings']:
        logger.warning(warning)
    for error in results['errors']:
        logger.error(error)
    return results
