"""Graph command orchestration for CLI.

This module provides the GraphCommand class behind every wikigraph
subcommand. It loads configuration and the page snapshot, asks the link
graph engine for a decision or a plan, shows it through the
OutputHandler, and (unless it is a dry run) applies it with the
PlanApplier.

Engine operations never write anything themselves; all writes in this
module go through the store, one page at a time.
"""

import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

from rich.markup import escape

from wikigraph.cli.errors import CLIError, InitError, SlugTakenError, UnknownSlugError
from wikigraph.cli.models import ExitCode
from wikigraph.cli.output import OutputHandler
from wikigraph.config.config_loader import ConfigLoader
from wikigraph.config.errors import ConfigurationError
from wikigraph.config.models import EngineConfig
from wikigraph.link_graph.archival_policy import ArchivalPolicy
from wikigraph.link_graph.errors import LinkGraphError, WikiGraphError
from wikigraph.link_graph.models import Page, RewriteMode
from wikigraph.link_graph.reference_graph import ReferenceGraph
from wikigraph.link_graph.reference_rewriter import ReferenceRewriter
from wikigraph.link_graph.slugs import SlugConverter
from wikigraph.link_graph.stub_pages import plan_stub_pages
from wikigraph.link_graph.title_cache import resolve_links
from wikigraph.store.errors import StoreError
from wikigraph.store.page_store import PageStore
from wikigraph.store.plan_applier import ApplyResult, PlanApplier
from wikigraph.store.retry_logic import retry_on_transient_error

logger = logging.getLogger(__name__)


class GraphCommand:
    """Runs wikigraph commands against a page snapshot.

    Each public method returns an ExitCode and never raises: errors are
    logged, shown to the user and translated to GENERAL_ERROR, while
    individual page writes that fail while applying a plan yield
    PARTIAL_FAILURE.

    Example:
        >>> command = GraphCommand(output_handler=OutputHandler())
        >>> command.archive(dry_run=True)
        <ExitCode.SUCCESS: 0>
    """

    def __init__(
        self,
        output_handler: Optional[OutputHandler] = None,
        config_path: Optional[str] = None,
        snapshot_path: Optional[str] = None,
    ):
        """Initialize graph command.

        Args:
            output_handler: Terminal output (a default one if omitted)
            config_path: Config file path (None for .wikigraph/config.yaml)
            snapshot_path: Snapshot file overriding the configured one
        """
        self.output = output_handler or OutputHandler()
        self.config_path = config_path
        self.snapshot_path = snapshot_path

    # Commands

    def init(self, force: bool = False) -> ExitCode:
        """Write a config file holding the default settings.

        A --snapshot given on the command line becomes the configured
        snapshot path.
        """
        def run() -> ExitCode:
            config_path = self.config_path or ConfigLoader.DEFAULT_CONFIG_PATH
            if os.path.exists(config_path) and not force:
                raise InitError(
                    f"Config file already exists: {config_path} (use --force to overwrite)",
                    config_path,
                )

            config = EngineConfig()
            if self.snapshot_path:
                config.snapshot_path = self.snapshot_path

            ConfigLoader.save(config_path, config)
            logger.info(f"Wrote config to {config_path}")

            self.output.success("Configuration initialized successfully")
            self.output.info(f"  Config file: {escape(config_path)}")
            self.output.info(f"  Snapshot: {escape(config.snapshot_path)}")
            return ExitCode.SUCCESS

        return self._run("init", run)

    def orphans(self) -> ExitCode:
        """List pages with no links to or from other pages."""
        def run() -> ExitCode:
            config, _, pages = self._load()
            graph = ReferenceGraph.build(pages, protected_slugs=config.protected_slugs)
            self.output.print_orphans(graph.orphans())
            return ExitCode.SUCCESS

        return self._run("orphans", run)

    def archive(self, dry_run: bool = False) -> ExitCode:
        """Archive orphaned pages and unarchive pages that are linked again."""
        def run() -> ExitCode:
            config, store, pages = self._load()
            decision = ArchivalPolicy(config.protected_slugs).compute_archival_set(pages)
            self.output.print_archival_plan(decision, _slugs_by_id(pages), dryrun=dry_run)

            if dry_run or decision.is_empty:
                return ExitCode.SUCCESS

            result = self._applier(store, config).apply_archival(decision)
            self.output.print_apply_result("archive flag(s) updated", result)
            return self._finish(result, "Archive flags updated")

        return self._run("archive", run)

    def rename(self, old_slug: str, new_slug: str, dry_run: bool = False) -> ExitCode:
        """Rename a page and rewrite every link pointing at its old slug.

        The page itself is renamed first; the referencing pages are then
        rewritten one by one. Rerunning after a partial failure finishes
        the remaining rewrites, since the page already carries new_slug.
        """
        def run() -> ExitCode:
            config, store, pages = self._load()
            page = self._find_renamable(pages, old_slug, new_slug)

            if SlugConverter.slug_from_title(new_slug) != new_slug:
                self.output.warning(f"'{escape(new_slug)}' is not a normalized slug")

            plan = ReferenceRewriter(config.protected_slugs).plan_rewrite(
                old_slug, RewriteMode.RENAME, pages, new_slug=new_slug
            )
            self.output.print_rewrite_plan(plan, _slugs_by_id(pages), dryrun=dry_run)

            if dry_run:
                self.output.print(f"\nWould rename {escape(old_slug)} → {escape(new_slug)}")
                return ExitCode.SUCCESS

            if page is not None:
                retry_on_transient_error(
                    store.rename, page.id, new_slug, max_retries=config.max_retries
                )
                logger.info(f"Renamed page {page.id}: {old_slug} -> {new_slug}")

            result = self._applier(store, config).apply_rewrites(plan)
            self.output.print_apply_result("page(s) rewritten", result)
            return self._finish(result, f"Renamed {escape(old_slug)} → {escape(new_slug)}")

        return self._run("rename", run)

    def delete(self, slug: str, dry_run: bool = False) -> ExitCode:
        """Turn every link to a page into plain text, then delete the page.

        If any referencing page cannot be rewritten the page is kept, so
        the command can be rerun without losing track of its links.
        """
        def run() -> ExitCode:
            config, store, pages = self._load()
            page = self._find(pages, slug)

            plan = ReferenceRewriter(config.protected_slugs).plan_rewrite(
                slug, RewriteMode.DELETE, pages
            )
            self.output.print_rewrite_plan(plan, _slugs_by_id(pages), dryrun=dry_run)

            if dry_run:
                self.output.print(f"\nWould delete {escape(slug)}")
                return ExitCode.SUCCESS

            result = self._applier(store, config).apply_rewrites(plan)
            self.output.print_apply_result("page(s) rewritten", result)
            if not result.ok:
                self.output.warning(f"Kept {escape(slug)} because some links could not be rewritten")
                return ExitCode.PARTIAL_FAILURE

            retry_on_transient_error(store.delete, page.id, max_retries=config.max_retries)
            logger.info(f"Deleted page {page.id} ({slug})")
            self.output.success(f"Deleted {escape(slug)}")
            return ExitCode.SUCCESS

        return self._run("delete", run)

    def links(self, slug: str) -> ExitCode:
        """Show the pages a page links to, the pages linking to it and its broken links."""
        def run() -> ExitCode:
            config, _, pages = self._load()
            graph = ReferenceGraph.build(pages, protected_slugs=config.protected_slugs)
            page = graph.resolve_target(slug)
            if page is None:
                raise UnknownSlugError(slug)

            self.output.print_links(
                slug,
                graph.neighbourhood(slug),
                resolve_links(page.content, graph),
            )
            return ExitCode.SUCCESS

        return self._run("links", run)

    def stubs(self, dry_run: bool = False) -> ExitCode:
        """Create a stub page for every link target no page owns."""
        def run() -> ExitCode:
            config, store, pages = self._load()
            inserts = plan_stub_pages(pages)
            self.output.print_stub_plan(inserts, dryrun=dry_run)

            if dry_run or not inserts:
                return ExitCode.SUCCESS

            result = self._applier(store, config).apply_inserts(inserts)
            self.output.print_apply_result("stub page(s) created", result)
            return self._finish(result, "Stub pages created")

        return self._run("stubs", run)

    # Helpers

    def _run(self, name: str, run: Callable[[], ExitCode]) -> ExitCode:
        """Run a command body and translate exceptions to exit codes."""
        try:
            return run()

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            self.output.error(f"Configuration error: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

        except StoreError as e:
            logger.error(f"Snapshot error: {e}")
            self.output.error(f"Snapshot error: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

        except (LinkGraphError, CLIError) as e:
            logger.error(f"{name} failed: {e}")
            self.output.error(escape(str(e)))
            return ExitCode.GENERAL_ERROR

        except WikiGraphError as e:
            logger.error(f"{name} failed: {e}")
            self.output.error(f"Error: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception(f"Unexpected error during {name}")
            self.output.error(f"Unexpected error: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

    def _load(self) -> Tuple[EngineConfig, PageStore, List[Page]]:
        config = ConfigLoader.load(self.config_path)
        self.output.debug(
            f"Protected slugs: {escape(', '.join(config.protected_slugs))}; "
            f"max retries: {config.max_retries}"
        )
        snapshot_path = self.snapshot_path or config.snapshot_path
        store = PageStore(snapshot_path)

        with self.output.spinner("Loading snapshot..."):
            pages = store.load()

        self.output.info(f"Loaded {len(pages)} page(s) from {snapshot_path}")
        return config, store, pages

    @staticmethod
    def _applier(store: PageStore, config: EngineConfig) -> PlanApplier:
        return PlanApplier(store, max_retries=config.max_retries)

    def _finish(self, result: ApplyResult, message: str) -> ExitCode:
        if result.ok:
            self.output.success(message)
            return ExitCode.SUCCESS
        self.output.warning(f"{message} with {len(result.failed)} failure(s)")
        return ExitCode.PARTIAL_FAILURE

    @staticmethod
    def _find(pages: List[Page], slug: str) -> Page:
        for page in pages:
            if page.slug == slug:
                return page
        raise UnknownSlugError(slug)

    @classmethod
    def _find_renamable(cls, pages: List[Page], old_slug: str, new_slug: str) -> Optional[Page]:
        """Find the page to rename.

        Returns None when the page already carries new_slug (a rerun after
        a partial failure), so only the link rewrites are left to do.

        Raises:
            UnknownSlugError: If neither slug belongs to a page
            SlugTakenError: If another page already uses new_slug
        """
        by_slug = {page.slug: page for page in pages}
        page = by_slug.get(old_slug)
        target = by_slug.get(new_slug)

        if page is None:
            if target is not None:
                return None
            raise UnknownSlugError(old_slug)
        if target is not None and target.id != page.id:
            raise SlugTakenError(new_slug, target.id)
        return page


def _slugs_by_id(pages: List[Page]) -> Dict[str, str]:
    return {page.id: page.slug for page in pages}
