"""Removal of everything a site published."""

import logging
from typing import List

from .models import PageResult, SyncOutcome, SyncReport
from .protocols import RemoteStore

logger = logging.getLogger(__name__)


class Teardown:
    """Deletes the home page of a site and its immediate children.

    Children are deleted before the home page. ``RemoteStore.delete_page``
    removes a page's whole subtree, so deeper pages go with their parents
    and are not reported one by one. The first failed deletion stops the
    teardown.
    """

    def __init__(self, store: RemoteStore):
        self._store = store

    def run(self, site_name: str) -> SyncReport:
        """Delete the site titled ``site_name``.

        Returns:
            SyncReport with one DELETED result per page; ``home_id`` is None
            when there was nothing to delete
        """
        home = self._store.find_page(site_name)
        if home is None:
            logger.warning(f'No page with title "{site_name}" found in confluence, nothing to clean here')
            return SyncReport()

        results: List[PageResult] = []
        for page in [*self._store.get_child_pages(home.page_id).values(), home]:
            self._store.delete_page(page.page_id)
            logger.debug(f"Deleted Page: [{page.page_id}] {page.title}")
            results.append(PageResult(SyncOutcome.DELETED, page.key, page.title, None))

        logger.info(f'Deleted {len(results)} page(s) of "{site_name}"')
        return SyncReport(home_id=home.page_id, results=results)
