"""File-backed page snapshot store.

The store keeps every page of a wiki in a single YAML or JSON file and
plays the storage collaborator for the link graph engine: it supplies the
full page snapshot and applies the engine's plans one page at a time.

Snapshot file structure (YAML shown, JSON uses the same shape):
    pages:
      - id: "p-1"
        slug: hello
        title: Hello
        content: "Welcome! See [getting-started]."
        is_archived: false
      - id: "p-2"
        slug: getting-started
        title: Getting Started
        content:
          type: doc
          content:
            - type: paragraph
              content:
                - type: pageLink
                  attrs: {slug: hello}

Each write re-reads the file, changes one page and writes the file back
(last writer wins).
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import yaml

from wikigraph.link_graph.errors import ContentTypeError
from wikigraph.link_graph.models import Page, PageContent, PageInsert, content_to_raw

from .errors import (
    PageNotFoundError,
    SlugConflictError,
    SnapshotFilesystemError,
    SnapshotFormatError,
)

logger = logging.getLogger(__name__)

JSON_SUFFIXES = ('.json',)


class PageStore:
    """Loads and saves the page snapshot file.

    A missing snapshot file is an empty wiki.

    Example:
        >>> store = PageStore(".wikigraph/pages.yaml")
        >>> pages = store.load()
        >>> store.set_archived(pages[0].id, True)
    """

    def __init__(self, path: str):
        """Initialize page store.

        Args:
            path: Snapshot file path (.json for JSON, anything else YAML)
        """
        self.path = path
        self.is_json = path.lower().endswith(JSON_SUFFIXES)

    def load(self) -> List[Page]:
        """Load all pages from the snapshot file.

        Returns:
            Pages in file order (empty list if the file does not exist)

        Raises:
            SnapshotFilesystemError: If the file cannot be read
            SnapshotFormatError: If the file is not a valid page snapshot
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = f.read()
        except FileNotFoundError:
            logger.debug(f"Snapshot {self.path} does not exist, starting empty")
            return []
        except PermissionError:
            raise SnapshotFilesystemError(self.path, 'read', 'Permission denied')
        except OSError as e:
            raise SnapshotFilesystemError(self.path, 'read', str(e))

        if not raw.strip():
            return []

        try:
            data = json.loads(raw) if self.is_json else yaml.safe_load(raw)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SnapshotFormatError(self.path, f"parse error: {e}")

        if data is None:
            return []
        if not isinstance(data, dict) or not isinstance(data.get('pages', []), list):
            raise SnapshotFormatError(self.path, "expected a mapping with a 'pages' list")

        pages = [self._page_from_dict(i, item) for i, item in enumerate(data.get('pages') or [])]
        logger.debug(f"Loaded {len(pages)} page(s) from {self.path}")
        return pages

    def save(self, pages: List[Page]) -> None:
        """Write all pages to the snapshot file.

        Raises:
            SnapshotFilesystemError: If the file cannot be written
        """
        data = {'pages': [self._page_to_dict(page) for page in pages]}

        if self.is_json:
            text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        else:
            text = yaml.safe_dump(
                data,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )

        directory = os.path.dirname(self.path)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                raise SnapshotFilesystemError(directory, 'create_directory', str(e))

        # Write to a temp file first so a failed write leaves the old snapshot
        temp_path = f"{self.path}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(text)
            os.replace(temp_path, self.path)
        except PermissionError:
            raise SnapshotFilesystemError(self.path, 'write', 'Permission denied')
        except OSError as e:
            raise SnapshotFilesystemError(self.path, 'write', str(e))

    # Single-page writes

    def update_content(self, page_id: str, content: PageContent) -> Page:
        """Replace one page's content."""
        def apply(page: Page) -> None:
            page.content = content
        return self._update(page_id, apply, "content")

    def set_archived(self, page_id: str, is_archived: bool) -> Page:
        """Set one page's archived flag."""
        def apply(page: Page) -> None:
            page.is_archived = is_archived
        return self._update(page_id, apply, "is_archived")

    def rename(self, page_id: str, new_slug: str) -> Page:
        """Change one page's slug.

        Raises:
            SlugConflictError: If another page already uses new_slug
        """
        pages = self.load()
        for other in pages:
            if other.slug == new_slug and other.id != page_id:
                raise SlugConflictError(new_slug, other.id)

        def apply(page: Page) -> None:
            page.slug = new_slug
        return self._update(page_id, apply, "slug", pages=pages)

    def insert(self, request: PageInsert) -> Page:
        """Create a page from an insert request.

        Raises:
            SlugConflictError: If a page with the slug already exists
        """
        pages = self.load()
        for other in pages:
            if other.slug == request.slug:
                raise SlugConflictError(request.slug, other.id)

        now = self._now()
        page = Page(
            id=str(uuid.uuid4()),
            slug=request.slug,
            title=request.title,
            content=request.content,
            created_at=now,
            updated_at=now,
        )
        pages.append(page)
        self.save(pages)
        logger.debug(f"Inserted page {page.id} ({page.slug})")
        return page

    def delete(self, page_id: str) -> None:
        """Remove one page.

        Raises:
            PageNotFoundError: If the page does not exist
        """
        pages = self.load()
        remaining = [page for page in pages if page.id != page_id]
        if len(remaining) == len(pages):
            raise PageNotFoundError(page_id)
        self.save(remaining)
        logger.debug(f"Deleted page {page_id}")

    def get_by_slug(self, slug: str) -> Page:
        """Find a page by slug.

        Raises:
            PageNotFoundError: If no page has this slug
        """
        for page in self.load():
            if page.slug == slug:
                return page
        raise PageNotFoundError(slug)

    def _update(
        self,
        page_id: str,
        apply: Callable[[Page], None],
        field_name: str,
        pages: Optional[List[Page]] = None,
    ) -> Page:
        pages = self.load() if pages is None else pages
        for page in pages:
            if page.id == page_id:
                apply(page)
                page.updated_at = self._now()
                self.save(pages)
                logger.debug(f"Updated {field_name} of page {page_id}")
                return page
        raise PageNotFoundError(page_id)

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _page_from_dict(self, index: int, item: Any) -> Page:
        if not isinstance(item, dict):
            raise SnapshotFormatError(self.path, f"page at index {index} must be a mapping")

        missing = [key for key in ('id', 'slug') if not item.get(key)]
        if missing:
            raise SnapshotFormatError(
                self.path, f"page at index {index} is missing {', '.join(missing)}"
            )

        try:
            return Page(
                id=str(item['id']),
                slug=str(item['slug']),
                title=str(item.get('title') or ''),
                content=item.get('content'),
                is_archived=bool(item.get('is_archived', False)),
                created_at=_optional_str(item.get('created_at')),
                updated_at=_optional_str(item.get('updated_at')),
            )
        except ContentTypeError as e:
            raise SnapshotFormatError(self.path, str(e)) from e

    @staticmethod
    def _page_to_dict(page: Page) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'id': page.id,
            'slug': page.slug,
            'title': page.title,
            'content': content_to_raw(page.content),
            'is_archived': page.is_archived,
        }
        if page.created_at:
            result['created_at'] = page.created_at
        if page.updated_at:
            result['updated_at'] = page.updated_at
        return result


def _optional_str(value: Any) -> Optional[str]:
    # Unquoted YAML timestamps load as datetime objects
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
