"""
Utility functions and helpers.
"""
from .debounce import Debouncer
from .logger import logger
from .resource_loader import get_app_data_dir, get_config_dir, get_log_dir
from .settings_store import (
    DEFAULT_INSTRUCTION,
    SettingsStore,
    ViewerSettings,
    document_fingerprint,
)

__all__ = [
    'Debouncer',
    'logger',
    'get_app_data_dir',
    'get_config_dir',
    'get_log_dir',
    'DEFAULT_INSTRUCTION',
    'SettingsStore',
    'ViewerSettings',
    'document_fingerprint',
]
