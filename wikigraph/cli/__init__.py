"""Command-line interface for wikigraph.

This package provides the Typer application, the command orchestration
that ties configuration, the page store and the link graph engine
together, and Rich-based terminal output.
"""

from .errors import CLIError, SlugTakenError, UnknownSlugError
from .graph_command import GraphCommand
from .models import ExitCode, GlobalOptions
from .output import OutputHandler

__all__ = [
    'CLIError',
    'SlugTakenError',
    'UnknownSlugError',
    'GraphCommand',
    'ExitCode',
    'GlobalOptions',
    'OutputHandler',
]
