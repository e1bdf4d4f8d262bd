"""Entry points of the reconciliation engine: publish and clean up a site."""

import logging
from typing import Mapping, Optional, Sequence

from .anchor_tracker import SectionAnchorTracker
from .errors import DuplicatePageError
from .level_reconciler import LevelReconciler
from .models import LocalNode, SyncReport
from .protocols import RemoteStore
from .root_resolver import RootResolver
from .teardown import Teardown
from .traversal import TraversalDriver

logger = logging.getLogger(__name__)


def check_unique_paths(pages: Sequence[LocalNode]) -> None:
    """Reject two pages sharing an identity key.

    Keys must be unique across the whole tree, not only within a section:
    sections published under the same parent page split its children by key.

    Raises:
        DuplicatePageError: On the first duplicate found, naming the section
                            of the second occurrence
    """
    seen = set()
    for page in pages:
        if page.path in seen:
            raise DuplicatePageError(page.section, page.path)
        seen.add(page.path)


class Publisher:
    """Publishes a local document tree to a remote store.

    A run resolves the home page, then reconciles every section of the
    tree top-down. Re-running with unchanged input changes nothing.

    Example:
        >>> publisher = Publisher(store, repo="acme/widgets")
        >>> report = publisher.sync("Widgets", pages, {"Guide": None}, home=readme)
        >>> print(f"{report.created} created, {report.deleted} deleted")
    """

    def __init__(
        self,
        store: RemoteStore,
        repo: str,
        parent_page: Optional[str] = None,
        max_workers: int = 1,
    ):
        self._store = store
        self._repo = repo
        self._parent_page = parent_page
        self._max_workers = max_workers

    def sync(
        self,
        site_name: str,
        pages: Sequence[LocalNode],
        section_hierarchy: Mapping[str, Optional[str]],
        home: Optional[LocalNode] = None,
    ) -> SyncReport:
        """Publish ``pages`` under the home page titled ``site_name``.

        Raises:
            DuplicatePageError: If the same path is listed twice
            IdentityConflictError: If the home page belongs to another repo
            ParentPageNotFoundError: If the configured parent page is missing
            CyclicSectionHierarchyError: If section parents form a cycle
        """
        check_unique_paths(pages)

        logger.info(f'Publishing "{site_name}" ({len(pages)} page(s), repo {self._repo})')
        resolver = RootResolver(self._store, self._repo, self._parent_page)
        home_id = resolver.resolve(site_name, home)

        tracker = SectionAnchorTracker(home_id)
        driver = TraversalDriver(
            LevelReconciler(self._store, tracker),
            tracker,
            max_workers=self._max_workers,
        )
        traversal = driver.run(pages, section_hierarchy)

        report = SyncReport(
            home_id=home_id,
            results=traversal.results,
            unreachable_sections=traversal.unreachable_sections,
        )
        logger.info(
            f'"{site_name}" published: {report.created} created, {report.updated} updated, '
            f'{report.unchanged} unchanged, {report.deleted} deleted'
        )
        return report

    def cleanup(self, site_name: str) -> SyncReport:
        """Delete every page published for ``site_name``."""
        return Teardown(self._store).run(site_name)
