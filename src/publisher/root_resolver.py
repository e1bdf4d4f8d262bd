"""Resolution of the home page anchoring the whole published tree."""

import html
import logging
from typing import Optional

from .errors import IdentityConflictError, ParentPageNotFoundError
from .models import LocalNode
from .protocols import RemoteStore

logger = logging.getLogger(__name__)

HOME_PATH = "README.md"


def placeholder_home(site_name: str, repo: str) -> LocalNode:
    """Minimal home page used when the project has no README."""
    return LocalNode(
        path=HOME_PATH,
        title=site_name,
        body=f"<h1>{html.escape(site_name)}</h1>",
        repo=repo,
    )


class RootResolver:
    """Creates or adopts the site's home page.

    The home page is the page titled with the site name. An existing page
    is adopted only if its metadata says it belongs to the same repository;
    otherwise the run stops before touching anything, so one project can
    never overwrite another project's documentation.

    Example:
        >>> resolver = RootResolver(store, repo="acme/widgets", parent_page="Engineering")
        >>> home_id = resolver.resolve("Widgets", readme)
    """

    def __init__(self, store: RemoteStore, repo: str, parent_page: Optional[str] = None):
        self._store = store
        self._repo = repo
        self._parent_page = parent_page

    def resolve(self, site_name: str, home: Optional[LocalNode] = None) -> str:
        """Create or update the home page and return its id.

        Args:
            site_name: Title of the home page
            home: Local home document; a placeholder is generated if None

        Returns:
            Id of the home page

        Raises:
            ParentPageNotFoundError: If the configured parent page is missing
            IdentityConflictError: If the existing home page belongs to another repo
        """
        local = home or placeholder_home(site_name, self._repo)
        if local.title != site_name:
            local = LocalNode(
                path=local.path, title=site_name, body=local.body, repo=local.repo,
            )

        parent_id = self._find_parent_page()

        remote = self._store.find_page(site_name)
        if remote is not None:
            existing_repo = remote.meta.repo if remote.meta else None
            if existing_repo != self._repo:
                logger.error(
                    f'Home page "{site_name}" [{remote.page_id}] belongs to '
                    f'"{existing_repo}", not "{self._repo}"'
                )
                raise IdentityConflictError(site_name, existing_repo, self._repo)
            logger.info(f'Adopting existing home page "{site_name}" [{remote.page_id}]')
        else:
            logger.info(f'Creating home page "{site_name}"')

        page = self._store.create_or_update_page(local, parent_id, remote)
        return page.page_id

    def _find_parent_page(self) -> Optional[str]:
        if not self._parent_page:
            return None
        parent = self._store.find_page(self._parent_page)
        if parent is None:
            raise ParentPageNotFoundError(self._parent_page)
        logger.debug(f'Parent page "{self._parent_page}" is [{parent.page_id}]')
        return parent.page_id
