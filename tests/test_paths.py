"""
Tests for path utilities.

Run: python3 -m pytest tests/test_paths.py -v
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utils.paths import NetDiagPaths, get_real_user_home


class TestGetRealUserHome:
    """Tests for get_real_user_home function."""

    def test_normal_user(self):
        """Test returns HOME when running as normal user."""
        with patch.dict(os.environ, {'HOME': '/home/alex'}):
            os.environ.pop('SUDO_USER', None)
            assert get_real_user_home() == Path('/home/alex')

    def test_with_sudo_user(self):
        """Test returns real user home when running with sudo."""
        with patch.dict(os.environ, {'SUDO_USER': 'testuser', 'HOME': '/root'}):
            assert get_real_user_home() == Path('/home/testuser')

    def test_sudo_user_root(self):
        """Test SUDO_USER=root falls back to HOME."""
        with patch.dict(os.environ, {'SUDO_USER': 'root', 'HOME': '/root'}):
            assert get_real_user_home() == Path('/root')

    def test_empty_sudo_user(self):
        """Test empty SUDO_USER falls back to HOME."""
        with patch.dict(os.environ, {'SUDO_USER': '', 'HOME': '/home/default'}):
            assert get_real_user_home() == Path('/home/default')


class TestNetDiagPaths:
    """Tests for NetDiagPaths."""

    def test_config_dir_under_home(self):
        """Test ~/.config/netdiag without XDG_CONFIG_HOME."""
        with patch.dict(os.environ, {'HOME': '/home/alex'}):
            os.environ.pop('SUDO_USER', None)
            os.environ.pop('XDG_CONFIG_HOME', None)
            assert NetDiagPaths.config_dir() == Path('/home/alex/.config/netdiag')

    def test_config_dir_xdg(self):
        """Test XDG_CONFIG_HOME is honored."""
        with patch.dict(os.environ, {'XDG_CONFIG_HOME': '/tmp/xdg'}):
            assert NetDiagPaths.config_dir() == Path('/tmp/xdg/netdiag')

    def test_files_inside_config_dir(self):
        """Test .env and log file live under the config dir."""
        with patch.dict(os.environ, {'XDG_CONFIG_HOME': '/tmp/xdg'}):
            assert NetDiagPaths.env_file() == Path('/tmp/xdg/netdiag/.env')
            assert NetDiagPaths.log_file() == Path('/tmp/xdg/netdiag/logs/netdiag.log')

    def test_default_save_dir_prefers_documents(self, tmp_path):
        """Test reports go to ~/Documents when it exists."""
        with patch.dict(os.environ, {'HOME': str(tmp_path)}):
            os.environ.pop('SUDO_USER', None)
            assert NetDiagPaths.default_save_dir() == tmp_path

            (tmp_path / 'Documents').mkdir()
            assert NetDiagPaths.default_save_dir() == tmp_path / 'Documents'
