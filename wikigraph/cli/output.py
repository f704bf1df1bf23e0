"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, a spinner for snapshot loading, and summaries of
orphan lists, archival decisions, rewrite plans and link neighbourhoods.
Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from wikigraph.link_graph.models import (
    ArchivalDecision,
    EdgeDirection,
    Page,
    PageInsert,
    PageNeighbourhood,
    ResolvedLink,
    RewriteEntry,
)
from wikigraph.store.plan_applier import ApplyResult


class OutputHandler:
    """Handles all terminal output using Rich library.

    Page slugs and titles are escaped before printing, since a title such
    as "[draft] Notes" would otherwise be read as Rich markup.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Archived 2 page(s)")
        >>> with handler.spinner("Loading snapshot..."):
        ...     pages = store.load()
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.no_color = no_color
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Without color (and so without a terminal) the spinner is skipped.

        Example:
            >>> with handler.spinner("Loading snapshot..."):
            ...     pages = store.load()
        """
        if self.no_color:
            yield
            return
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_orphans(self, orphans: List[Page]) -> None:
        """Display the orphaned pages of a snapshot.

        Args:
            orphans: Orphaned pages in snapshot order
        """
        if not orphans:
            self.console.print("[green]No orphaned pages[/green]")
            return

        self.console.print(f"[bold]Orphaned pages ({len(orphans)}):[/bold]")
        for page in orphans:
            marker = " [dim](archived)[/dim]" if page.is_archived else ""
            self.console.print(f"  • {_label(page.slug, page.title)}{marker}")

    def print_archival_plan(
        self,
        decision: ArchivalDecision,
        slugs: Dict[str, str],
        dryrun: bool = False,
    ) -> None:
        """Display an archival decision.

        Args:
            decision: Pages to archive and unarchive (by id)
            slugs: Page id -> slug, for display
            dryrun: Word the summary as a preview
        """
        prefix = "Would " if dryrun else ""
        title = "Dry Run - Archival Preview:" if dryrun else "Archival Plan:"
        self.console.print(f"\n[bold]{title}[/bold]")

        if decision.is_empty:
            self.console.print("\n[green]Archive flags already up to date. No changes.[/green]")
            return

        if decision.to_archive:
            verb = f"{prefix}archive" if dryrun else "Archive"
            self.console.print(
                f"\n[yellow]{verb} ({len(decision.to_archive)} page(s)):[/yellow]"
            )
            for page_id in sorted(decision.to_archive):
                self.console.print(f"  • {escape(slugs.get(page_id, page_id))}")

        if decision.to_unarchive:
            verb = f"{prefix}unarchive" if dryrun else "Unarchive"
            self.console.print(
                f"\n[blue]{verb} ({len(decision.to_unarchive)} page(s)):[/blue]"
            )
            for page_id in sorted(decision.to_unarchive):
                self.console.print(f"  • {escape(slugs.get(page_id, page_id))}")

    def print_rewrite_plan(
        self,
        entries: List[RewriteEntry],
        slugs: Dict[str, str],
        dryrun: bool = False,
    ) -> None:
        """Display the pages a rewrite plan touches.

        Args:
            entries: Planned content rewrites
            slugs: Page id -> slug, for display
            dryrun: Word the summary as a preview
        """
        if not entries:
            self.console.print("[dim]No pages link to this page[/dim]")
            return

        verb = "Would rewrite" if dryrun else "Rewriting"
        self.console.print(f"\n[bold]{verb} links in {len(entries)} page(s):[/bold]")
        for entry in entries:
            self.console.print(f"  • {escape(slugs.get(entry.page_id, entry.page_id))}")

    def print_stub_plan(self, inserts: List[PageInsert], dryrun: bool = False) -> None:
        """Display the stub pages planned for broken links."""
        if not inserts:
            self.console.print("[green]No broken links[/green]")
            return

        verb = "Would create" if dryrun else "Creating"
        self.console.print(f"\n[bold]{verb} {len(inserts)} stub page(s):[/bold]")
        for request in inserts:
            self.console.print(f"  • {_label(request.slug, request.title)}")

    def print_apply_result(self, label: str, result: ApplyResult) -> None:
        """Display the outcome of applying a plan.

        Args:
            label: What was written, e.g. "page(s) archived"
            result: Result returned by PlanApplier
        """
        if result.dryrun:
            return

        if result.applied:
            self.console.print(f"  [green]✓[/green] {len(result.applied)} {label}")

        if result.failed:
            self.console.print(f"  [red]✗[/red] {len(result.failed)} failed:")
            for key, reason in result.failed.items():
                self.console.print(f"    • {escape(key)}: {escape(reason)}")

    def print_links(
        self,
        slug: str,
        neighbourhood: PageNeighbourhood,
        resolved: List[ResolvedLink],
    ) -> None:
        """Display the link neighbourhood of one page.

        Args:
            slug: Slug of the current page
            neighbourhood: Pages linked to and from the current page
            resolved: Resolved outgoing links, for the broken-link list
        """
        nodes_by_id = {node.id: node for node in neighbourhood.nodes}
        # Edges, not node classes: a mutual link is one node with two edges
        outgoing = [
            nodes_by_id[edge.target] for edge in neighbourhood.edges
            if edge.direction == EdgeDirection.OUT
        ]
        incoming = [
            nodes_by_id[edge.source] for edge in neighbourhood.edges
            if edge.direction == EdgeDirection.IN
        ]
        broken = [link for link in resolved if not link.exists]

        self.console.print(f"[bold]Links for {escape(slug)}:[/bold]")

        self.console.print(f"\n[green]→ Links to ({len(outgoing)}):[/green]")
        for node in outgoing:
            self.console.print(f"  • {_label(node.slug, node.title)}")

        self.console.print(f"\n[blue]← Linked from ({len(incoming)}):[/blue]")
        for node in incoming:
            self.console.print(f"  • {_label(node.slug, node.title)}")

        if broken:
            self.console.print(f"\n[red]⚡ Broken links ({len(broken)}):[/red]")
            for link in broken:
                self.console.print(f"  • {escape(link.slug)}")


def _label(slug: str, title: str) -> str:
    if title and title != slug:
        return f"{escape(slug)} ({escape(title)})"
    return escape(slug)
