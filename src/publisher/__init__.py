"""Reconciliation engine publishing a local document tree to Confluence.

The engine compares the local tree, section by section, with the pages
under the matching remote anchor and creates, updates or deletes pages
until both sides agree.
"""

from .anchor_tracker import SectionAnchorTracker
from .confluence_store import ConfluenceStore
from .dry_run_store import DryRunStore
from .errors import (
    PublishError,
    IdentityConflictError,
    ParentPageNotFoundError,
    CyclicSectionHierarchyError,
    DuplicatePageError,
)
from .level_reconciler import LevelReconciler, plan_level
from .models import (
    LocalNode,
    PageMeta,
    PageResult,
    RemoteNode,
    SyncOutcome,
    SyncReport,
    ToCreate,
    ToDelete,
    ToUpdate,
)
from .protocols import RemoteStore
from .publisher import Publisher
from .root_resolver import RootResolver
from .teardown import Teardown
from .traversal import TraversalDriver

__all__ = [
    'SectionAnchorTracker',
    'ConfluenceStore',
    'DryRunStore',
    'PublishError',
    'IdentityConflictError',
    'ParentPageNotFoundError',
    'CyclicSectionHierarchyError',
    'DuplicatePageError',
    'LevelReconciler',
    'plan_level',
    'LocalNode',
    'PageMeta',
    'PageResult',
    'RemoteNode',
    'SyncOutcome',
    'SyncReport',
    'ToCreate',
    'ToDelete',
    'ToUpdate',
    'RemoteStore',
    'Publisher',
    'RootResolver',
    'Teardown',
    'TraversalDriver',
]
