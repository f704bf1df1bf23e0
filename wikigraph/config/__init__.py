"""Configuration for the wikigraph engine and command-line tool."""

from .config_loader import ConfigLoader, ENV_PROTECTED_SLUGS, ENV_SNAPSHOT_PATH
from .errors import ConfigurationError, ConfigError, ConfigFilesystemError
from .models import EngineConfig

__all__ = [
    'ConfigLoader',
    'EngineConfig',
    'ConfigurationError',
    'ConfigError',
    'ConfigFilesystemError',
    'ENV_PROTECTED_SLUGS',
    'ENV_SNAPSHOT_PATH',
]
