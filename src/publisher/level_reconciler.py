"""Reconciliation of one section against the remote children of its anchor.

The work is split in two steps:

- ``plan_level`` is a pure function that pairs local nodes with remote
  pages by identity key and returns the ordered union list of actions:
  local-driven creates/updates first (in local order), then deletes for the
  remote pages nobody claimed (in fetched order).
- ``LevelReconciler.reconcile`` fetches the remote children, applies the
  plan strictly in order and records the section's anchor from the first
  action of the plan.
"""

import logging
from typing import AbstractSet, Dict, List, Optional, Sequence

from .anchor_tracker import ROOT_SECTION, SectionAnchorTracker
from .models import (
    LocalNode,
    PageResult,
    RemoteNode,
    SyncAction,
    SyncOutcome,
    ToCreate,
    ToDelete,
    ToUpdate,
)
from .protocols import RemoteStore

logger = logging.getLogger(__name__)


def plan_level(
    local_nodes: Sequence[LocalNode],
    remote_children: Dict[str, RemoteNode],
) -> List[SyncAction]:
    """Build the union list of actions for one section.

    Args:
        local_nodes: Local nodes of the section, in publishing order
        remote_children: Remote children of the section's parent, keyed by
                         identity key, in fetched order

    Returns:
        Ordered actions; empty when both sides are empty
    """
    unclaimed = dict(remote_children)
    actions: List[SyncAction] = []

    for local in local_nodes:
        remote = unclaimed.pop(local.path, None)
        if remote is None:
            actions.append(ToCreate(local))
        else:
            actions.append(ToUpdate(local, remote))

    actions.extend(ToDelete(remote) for remote in unclaimed.values())
    return actions


class LevelReconciler:
    """Diffs and applies one section at a time.

    Example:
        >>> reconciler = LevelReconciler(store, tracker)
        >>> results = reconciler.reconcile("Guide", "101", guide_pages)
    """

    def __init__(self, store: RemoteStore, tracker: SectionAnchorTracker):
        self._store = store
        self._tracker = tracker

    def reconcile(
        self,
        section: Optional[str],
        parent_id: Optional[str],
        local_nodes: Sequence[LocalNode],
        foreign_keys: AbstractSet[str] = frozenset(),
        sweep: bool = True,
    ) -> List[PageResult]:
        """Reconcile ``section`` under ``parent_id``.

        Several sections can publish under the same parent page. Children
        whose key belongs to one of those other sections are left alone,
        and children nobody claims are deleted only by the section that
        sweeps the parent.

        Args:
            section: Section key (None for root)
            parent_id: Page id the section's pages live under
            local_nodes: The section's local nodes
            foreign_keys: Identity keys of the other sections sharing ``parent_id``
            sweep: Whether unclaimed children of ``parent_id`` are deleted here

        Returns:
            One PageResult per applied action, in application order

        Raises:
            Exception: Any store failure, unchanged; the remaining actions
                       of the section are not applied
        """
        own_keys = {local.path for local in local_nodes}
        remote_children = {
            key: remote
            for key, remote in self._store.get_child_pages(parent_id).items()
            if key not in foreign_keys and (sweep or key in own_keys)
        }
        actions = plan_level(local_nodes, remote_children)
        if not actions:
            logger.debug(f"Section '{section}': nothing to reconcile")
            return []

        logger.info(
            f"Section '{section}' under {parent_id}: {len(local_nodes)} local, "
            f"{len(remote_children)} remote"
        )

        results = []
        for index, action in enumerate(actions):
            result = self._apply(action, section, parent_id)
            results.append(result)
            if index == 0 and section is not ROOT_SECTION:
                self._tracker.record(section, result.page_id)
        return results

    def _apply(
        self,
        action: SyncAction,
        section: Optional[str],
        parent_id: Optional[str],
    ) -> PageResult:
        if isinstance(action, ToDelete):
            remote = action.remote
            self._store.delete_page(remote.page_id)
            logger.debug(f"Deleted page: [{remote.page_id}] {remote.title}")
            return PageResult(SyncOutcome.DELETED, remote.key, remote.title, None, section)

        if isinstance(action, ToUpdate):
            local, remote = action.local, action.remote
            outcome = (
                SyncOutcome.UNCHANGED if remote.in_sync_with(local, parent_id)
                else SyncOutcome.UPDATED
            )
        else:
            local, remote = action.local, None
            outcome = SyncOutcome.CREATED

        page = self._store.create_or_update_page(local, parent_id, remote)
        logger.debug(f"{outcome.value.capitalize()} page: [{page.page_id}] {local.title}")
        return PageResult(outcome, local.path, local.title, page.page_id, section)
