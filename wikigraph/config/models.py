"""Data models for engine configuration."""

from dataclasses import dataclass, field
from typing import List

from wikigraph.link_graph.models import DEFAULT_PROTECTED_SLUGS


@dataclass
class EngineConfig:
    """Configuration for the link graph engine and CLI.

    Attributes:
        protected_slugs: Slugs never archived and never renamed or deleted
            (default admin, archive, hello)
        snapshot_path: Page snapshot file used by the CLI
        max_retries: Retries per page write when applying a plan
    """
    protected_slugs: List[str] = field(
        default_factory=lambda: sorted(DEFAULT_PROTECTED_SLUGS)
    )
    snapshot_path: str = ".wikigraph/pages.yaml"
    max_retries: int = 3
