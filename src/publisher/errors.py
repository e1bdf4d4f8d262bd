"""Typed exception hierarchy for publisher errors.

All exceptions inherit from PublishError. These are the fatal outcomes of
a publish run; failures from the remote store are not wrapped and reach
the caller as the client raised them.
"""

from typing import Iterable, Optional

from src.confluence_client.errors import SyncError


class PublishError(SyncError):
    """Base exception for all publisher errors."""
    pass


class IdentityConflictError(PublishError):
    """Raised when the site's home page belongs to another repository."""

    def __init__(self, site_name: str, existing_repo: Optional[str], current_repo: str):
        super().__init__(
            f'Page "{site_name}" already exists for another repo '
            f'"{existing_repo or "unknown"}" (current repo: "{current_repo}")'
        )
        self.site_name = site_name
        self.existing_repo = existing_repo
        self.current_repo = current_repo


class ParentPageNotFoundError(PublishError):
    """Raised when the configured parent page does not exist."""

    def __init__(self, title: str):
        super().__init__(
            f"The page configured as parent ({title}) does not exist in confluence"
        )
        self.title = title


class CyclicSectionHierarchyError(PublishError):
    """Raised when section parents form a cycle."""

    def __init__(self, sections: Iterable[str]):
        self.sections = list(sections)
        super().__init__(
            f"Cyclic section hierarchy: {' -> '.join(self.sections)}"
        )


class DuplicatePageError(PublishError):
    """Raised when two pages share an identity key."""

    def __init__(self, section: Optional[str], path: str):
        where = f"section '{section}'" if section is not None else "the root section"
        super().__init__(f"Duplicate page '{path}' in {where}")
        self.section = section
        self.path = path
