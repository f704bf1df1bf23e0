"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Command completed (including dry runs)
    - GENERAL_ERROR (1): Config, snapshot or argument errors
    - PARTIAL_FAILURE (2): Some page writes of a plan failed

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PARTIAL_FAILURE = 2


@dataclass
class GlobalOptions:
    """Options shared by every command, collected by the app callback.

    Attributes:
        snapshot: Snapshot file path overriding the configured one
        config_path: Config file path (None for .wikigraph/config.yaml)
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        logdir: Directory for log files
        no_color: Disable colored output
    """
    snapshot: Optional[str] = None
    config_path: Optional[str] = None
    verbosity: int = 0
    logdir: Optional[str] = None
    no_color: bool = False
