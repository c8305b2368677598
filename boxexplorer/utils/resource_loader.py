"""
Per-user directories for configuration and logs.
"""
import os
import sys
from pathlib import Path

from boxexplorer import __appname__

CONFIG_DIR_ENV = "BOX_EXPLORER_CONFIG_DIR"


def get_app_data_dir(app_name: str = __appname__) -> Path:
    """
    Get the application data directory for storing user data.

    Args:
        app_name: Name of the application

    Returns:
        Path to the app data directory (not created)
    """
    if os.name == 'nt':  # Windows
        base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
    elif sys.platform == 'darwin':  # macOS
        base_dir = os.path.expanduser('~/Library/Application Support')
    else:  # Linux and others
        base_dir = os.path.expanduser('~/.local/share')

    return Path(base_dir) / app_name


def get_config_dir(app_name: str = __appname__) -> Path:
    """
    Get the configuration directory for settings and reading state.

    ``BOX_EXPLORER_CONFIG_DIR`` overrides the platform location.

    Args:
        app_name: Name of the application

    Returns:
        Path to the config directory (not created)
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if os.name == 'nt':  # Windows
        return get_app_data_dir(app_name)
    elif sys.platform == 'darwin':  # macOS
        return Path.home() / "Library" / "Application Support" / app_name
    return Path.home() / ".config" / app_name


def get_log_dir(app_name: str = __appname__) -> Path:
    """Directory holding the dated log files."""
    return get_app_data_dir(app_name) / "logs"
