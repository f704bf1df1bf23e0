"""Main CLI entry point for the wikigraph command.

This module provides the Typer application behind the wikigraph
command-line tool. Global options (snapshot, config, logging, color) are
collected by the app callback; each subcommand hands them to a
GraphCommand and exits with the code it returns.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from wikigraph import __version__
from wikigraph.cli.graph_command import GraphCommand
from wikigraph.cli.models import GlobalOptions
from wikigraph.cli.output import OutputHandler

app = typer.Typer(
    name="wikigraph",
    help="""Maintain the links between wiki pages.

QUICK START:
  wikigraph init                          # Write .wikigraph/config.yaml
  wikigraph orphans                       # List pages nothing links to
  wikigraph archive --dry-run             # Preview archive flag changes
  wikigraph rename old-slug new-slug      # Rename a page, fix its links
  wikigraph delete old-slug               # Unlink and delete a page
  wikigraph links my-page                 # Show a page's links
  wikigraph stubs                         # Create pages for broken links""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)


logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s"
_FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console and file handlers share one level, picked by -v count
_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Attach wikigraph's log handlers.

    Only the 'wikigraph' logger is touched; handlers from an earlier call
    are closed and replaced.

    Args:
        verbosity: 0 for warnings, 1 for info, 2 or more for debug
        logdir: Directory for a wikigraph_<timestamp>.log file, if any
    """
    level = _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]

    package_logger = logging.getLogger("wikigraph")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers = [(logging.StreamHandler(sys.stderr), _LOG_FORMAT)]
    log_file = None
    if logdir:
        run_dir = Path(logdir)
        run_dir.mkdir(parents=True, exist_ok=True)
        log_file = run_dir / f"wikigraph_{datetime.now():%Y%m%d_%H%M%S}.log"
        handlers.append((logging.FileHandler(log_file, encoding="utf-8"), _FILE_LOG_FORMAT))

    for handler, fmt in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
        package_logger.addHandler(handler)

    if log_file is not None:
        logger.info(f"Writing log to {log_file}")


def _command(ctx: typer.Context) -> GraphCommand:
    options: GlobalOptions = ctx.obj
    output = OutputHandler(verbosity=options.verbosity, no_color=options.no_color)
    return GraphCommand(
        output_handler=output,
        config_path=options.config_path,
        snapshot_path=options.snapshot,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    snapshot: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Page snapshot file (default from config: .wikigraph/pages.yaml)",
        metavar="PATH",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Config file (default .wikigraph/config.yaml)",
        metavar="PATH",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Maintain the links between wiki pages."""
    if version:
        typer.echo(f"wikigraph version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    ctx.obj = GlobalOptions(
        snapshot=snapshot,
        config_path=config_path,
        verbosity=verbosity,
        logdir=logdir,
        no_color=no_color,
    )


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write a config file with the default settings."""
    raise typer.Exit(_command(ctx).init(force=force))


@app.command()
def orphans(ctx: typer.Context) -> None:
    """List pages with no links to or from other pages."""
    raise typer.Exit(_command(ctx).orphans())


@app.command()
def archive(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
) -> None:
    """Archive orphaned pages and unarchive pages that are linked again."""
    raise typer.Exit(_command(ctx).archive(dry_run=dry_run))


@app.command()
def rename(
    ctx: typer.Context,
    old_slug: str = typer.Argument(..., help="Current slug of the page"),
    new_slug: str = typer.Argument(..., help="New slug for the page"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
) -> None:
    """Rename a page and rewrite every link to it."""
    raise typer.Exit(_command(ctx).rename(old_slug, new_slug, dry_run=dry_run))


@app.command()
def delete(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Slug of the page to delete"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
) -> None:
    """Turn links to a page into plain text, then delete the page."""
    raise typer.Exit(_command(ctx).delete(slug, dry_run=dry_run))


@app.command()
def links(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Slug of the page"),
) -> None:
    """Show a page's outgoing, incoming and broken links."""
    raise typer.Exit(_command(ctx).links(slug))


@app.command()
def stubs(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
) -> None:
    """Create a stub page for every broken link."""
    raise typer.Exit(_command(ctx).stubs(dry_run=dry_run))


def main() -> None:
    """Console script entry point (`wikigraph`)."""
    app()


if __name__ == "__main__":
    main()
