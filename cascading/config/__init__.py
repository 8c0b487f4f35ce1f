"""
Configuration for the cascading package: environment settings and logging.
"""
from .settings import Settings, load_settings, get_env_str, get_env_int
from .logging_config import setup_logging

__all__ = [
    'Settings',
    'load_settings',
    'get_env_str',
    'get_env_int',
    'setup_logging',
]
