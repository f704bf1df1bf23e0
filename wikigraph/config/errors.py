"""Typed exception hierarchy for configuration errors.

All exceptions inherit from ConfigurationError, itself a WikiGraphError,
and carry the offending field or path for debugging.
"""

from typing import Optional

from wikigraph.link_graph.errors import WikiGraphError


class ConfigurationError(WikiGraphError):
    """Base exception for all configuration errors."""
    pass


class ConfigError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ConfigFilesystemError(ConfigurationError):
    """Raised when the configuration file cannot be read or written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
