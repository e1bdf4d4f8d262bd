"""Interface the publisher expects from a remote page store."""

from typing import Dict, Optional, Protocol

from .models import LocalNode, RemoteNode


class RemoteStore(Protocol):
    """A hierarchical page store.

    ``get_child_pages`` returns an insertion-ordered mapping from identity
    key to page. ``create_or_update_page`` creates a page when ``remote`` is
    None and updates ``remote`` otherwise. ``delete_page`` removes the page
    together with its subtree. Every method raises on failure.
    """

    def find_page(self, title: str) -> Optional[RemoteNode]:
        ...

    def get_child_pages(self, parent_id: Optional[str]) -> Dict[str, RemoteNode]:
        ...

    def create_or_update_page(
        self,
        local: LocalNode,
        parent_id: Optional[str],
        remote: Optional[RemoteNode] = None,
    ) -> RemoteNode:
        ...

    def delete_page(self, page_id: str) -> None:
        ...
