"""Test helper modules.

- fake_store: In-memory RemoteStore recording every write
"""

from .fake_store import REPO, InMemoryStore, StoredPage, local_page

__all__ = [
    'InMemoryStore',
    'StoredPage',
    'REPO',
    'local_page',
]
