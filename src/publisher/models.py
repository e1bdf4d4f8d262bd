"""Data models for the publisher.

Local documents, remote pages and the actions that reconcile them. The
actions are immutable values produced by a pure diff step, so a plan can
be inspected (or printed in a dry run) before anything is applied.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class PageMeta:
    """Ownership metadata stored on every published page.

    Attributes:
        repo: Repository identifier of the project that owns the page
        path: Identity key of the page (docs-relative path of its source)
        sha: Digest of the rendered title and body, used to skip no-op updates
    """
    repo: str
    path: str
    sha: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {'repo': self.repo, 'path': self.path, 'sha': self.sha}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['PageMeta']:
        """Build metadata from a stored property value; None if unusable."""
        if not isinstance(data, dict) or not data.get('path'):
            return None
        return cls(
            repo=str(data.get('repo') or ''),
            path=str(data['path']),
            sha=str(data.get('sha') or ''),
        )


def content_digest(title: str, body: str) -> str:
    """SHA-256 of a page's title and rendered body."""
    digest = hashlib.sha256()
    digest.update(title.encode('utf-8'))
    digest.update(b'\0')
    digest.update(body.encode('utf-8'))
    return digest.hexdigest()


@dataclass(frozen=True)
class LocalNode:
    """A local document ready to be published.

    Attributes:
        path: Identity key, unique and stable across runs
        title: Page title
        body: Rendered storage format content
        repo: Repository identifier of the project being published
        section: Parent section key, None for root level pages
    """
    path: str
    title: str
    body: str
    repo: str
    section: Optional[str] = None

    @property
    def meta(self) -> PageMeta:
        return PageMeta(repo=self.repo, path=self.path, sha=content_digest(self.title, self.body))


@dataclass(frozen=True)
class RemoteNode:
    """A page as it currently exists in the remote store.

    Attributes:
        page_id: Id assigned by the store
        title: Page title
        meta: Ownership metadata, None for pages this tool did not create
        parent_id: Id of the parent page, if known
        version: Version number of the page
    """
    page_id: str
    title: str
    meta: Optional[PageMeta] = None
    parent_id: Optional[str] = None
    version: int = 1

    @property
    def key(self) -> str:
        """Identity key used for matching against local nodes."""
        if self.meta is not None:
            return self.meta.path
        return f"page:{self.page_id}"

    def in_sync_with(self, local: LocalNode, parent_id: Optional[str]) -> bool:
        """True when publishing ``local`` under ``parent_id`` would change nothing."""
        return (
            self.meta is not None
            and self.meta == local.meta
            and self.title == local.title
            and (parent_id is None or self.parent_id == parent_id)
        )


@dataclass(frozen=True)
class ToCreate:
    """Publish a local node that has no remote counterpart yet."""
    local: LocalNode


@dataclass(frozen=True)
class ToUpdate:
    """Publish a local node over its existing remote page."""
    local: LocalNode
    remote: RemoteNode


@dataclass(frozen=True)
class ToDelete:
    """Remove a remote page that no local node claims any more."""
    remote: RemoteNode


SyncAction = Union[ToCreate, ToUpdate, ToDelete]


class SyncOutcome(str, Enum):
    """What applying a single action did to the remote store."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


@dataclass
class PageResult:
    """Result of applying one action.

    Attributes:
        outcome: What happened to the page
        path: Identity key of the page
        title: Page title
        page_id: Remote id after the action (None for deletions)
        section: Section the page was reconciled in
    """
    outcome: SyncOutcome
    path: str
    title: str
    page_id: Optional[str]
    section: Optional[str] = None


@dataclass
class SyncReport:
    """Summary of a publish or cleanup run.

    Attributes:
        home_id: Id of the home page (None when cleanup found nothing)
        results: Per-page results in the order they were applied
        unreachable_sections: Sections never visited because their parent
                              chain does not lead to the root
    """
    home_id: Optional[str] = None
    results: List[PageResult] = field(default_factory=list)
    unreachable_sections: List[str] = field(default_factory=list)

    def count(self, outcome: SyncOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def created(self) -> int:
        return self.count(SyncOutcome.CREATED)

    @property
    def updated(self) -> int:
        return self.count(SyncOutcome.UPDATED)

    @property
    def unchanged(self) -> int:
        return self.count(SyncOutcome.UNCHANGED)

    @property
    def deleted(self) -> int:
        return self.count(SyncOutcome.DELETED)

    @property
    def changed(self) -> bool:
        return any(result.outcome != SyncOutcome.UNCHANGED for result in self.results)
