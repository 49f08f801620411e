"""
netdiag Path Constants

Centralized path definitions for config, logs and saved reports.

Always use get_real_user_home() instead of Path.home() for paths in the
user's home directory. When netdiag is started with sudo (traceroute with
ICMP needs raw sockets on some systems), Path.home() returns /root, but
reports and config belong to the invoking user.
"""

from pathlib import Path
import os


def get_real_user_home() -> Path:
    """
    Get the real user's home directory, even when running as root via sudo.

    Returns:
        Path to the real user's home directory
    """
    sudo_user = os.environ.get('SUDO_USER')
    if sudo_user and sudo_user != 'root':
        return Path(f'/home/{sudo_user}')

    return Path(os.path.expanduser('~'))


class NetDiagPaths:
    """Paths used by netdiag"""

    APP_NAME = 'netdiag'

    @classmethod
    def config_dir(cls) -> Path:
        """User config directory (~/.config/netdiag)"""
        xdg = os.environ.get('XDG_CONFIG_HOME')
        base = Path(xdg) if xdg else get_real_user_home() / '.config'
        return base / cls.APP_NAME

    @classmethod
    def env_file(cls) -> Path:
        return cls.config_dir() / '.env'

    @classmethod
    def log_dir(cls) -> Path:
        return cls.config_dir() / 'logs'

    @classmethod
    def log_file(cls) -> Path:
        return cls.log_dir() / 'netdiag.log'

    @classmethod
    def default_save_dir(cls) -> Path:
        """Where saved reports go unless NETDIAG_SAVE_DIR says otherwise"""
        documents = get_real_user_home() / 'Documents'
        if documents.is_dir():
            return documents
        return get_real_user_home()
