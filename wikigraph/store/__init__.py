"""Page storage for the wikigraph command-line tool.

This package provides a file-backed page snapshot store and the plan
applier that writes the engine's archival decisions, rewrite plans and
stub-page inserts to it one page at a time.
"""

from .page_store import PageStore
from .plan_applier import PlanApplier, ApplyResult
from .retry_logic import retry_on_transient_error
from .errors import (
    StoreError,
    SnapshotFilesystemError,
    SnapshotFormatError,
    PageNotFoundError,
    SlugConflictError,
    TransientStoreError,
    RetryExhaustedError,
)

__all__ = [
    'PageStore',
    'PlanApplier',
    'ApplyResult',
    'retry_on_transient_error',
    'StoreError',
    'SnapshotFilesystemError',
    'SnapshotFormatError',
    'PageNotFoundError',
    'SlugConflictError',
    'TransientStoreError',
    'RetryExhaustedError',
]
