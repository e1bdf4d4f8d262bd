"""A RemoteStore that reads from a real store and writes nothing.

Creates get placeholder ids so that sections below a new page can still
be planned; the children of a placeholder are always empty.
"""

import itertools
import logging
from typing import Dict, Optional

from .models import LocalNode, RemoteNode
from .protocols import RemoteStore

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "dry-run-"


class DryRunStore:
    """Wraps ``store`` and swallows every write."""

    def __init__(self, store: RemoteStore):
        self._store = store
        self._ids = itertools.count(1)

    def find_page(self, title: str) -> Optional[RemoteNode]:
        return self._store.find_page(title)

    def get_child_pages(self, parent_id: Optional[str]) -> Dict[str, RemoteNode]:
        if parent_id is None or str(parent_id).startswith(PLACEHOLDER_PREFIX):
            return {}
        return self._store.get_child_pages(parent_id)

    def create_or_update_page(
        self,
        local: LocalNode,
        parent_id: Optional[str],
        remote: Optional[RemoteNode] = None,
    ) -> RemoteNode:
        if remote is None:
            page_id = f"{PLACEHOLDER_PREFIX}{next(self._ids)}"
            logger.info(f"[dry run] Would create page: {local.title} ({local.path})")
            return RemoteNode(page_id, local.title, local.meta, parent_id)

        if not remote.in_sync_with(local, parent_id):
            logger.info(f"[dry run] Would update page: [{remote.page_id}] {local.title}")
        return RemoteNode(remote.page_id, local.title, local.meta, parent_id, remote.version)

    def delete_page(self, page_id: str) -> None:
        logger.info(f"[dry run] Would delete page: [{page_id}]")
