"""Unit tests for publisher.dry_run_store module."""

from src.publisher.dry_run_store import PLACEHOLDER_PREFIX, DryRunStore
from src.publisher.models import PageMeta
from tests.helpers import REPO, InMemoryStore, local_page


class TestDryRunStore:
    """Test cases for DryRunStore."""

    def setup_method(self):
        self.inner = InMemoryStore()
        self.home = self.inner.seed("Widgets", meta=PageMeta(REPO, "README.md"))
        self.existing = self.inner.seed("A", parent_id=self.home, meta=PageMeta(REPO, "a.md"))
        self.store = DryRunStore(self.inner)

    def test_reads_go_to_wrapped_store(self):
        assert self.store.find_page("Widgets").page_id == self.home
        assert list(self.store.get_child_pages(self.home)) == ["a.md"]

    def test_create_returns_placeholder_without_writing(self):
        first = self.store.create_or_update_page(local_page("b.md"), self.home)
        second = self.store.create_or_update_page(local_page("c.md"), self.home)

        assert first.page_id == f"{PLACEHOLDER_PREFIX}1"
        assert second.page_id == f"{PLACEHOLDER_PREFIX}2"
        assert self.inner.mutations == 0

    def test_placeholder_has_no_children(self):
        placeholder = self.store.create_or_update_page(local_page("b.md"), self.home)

        assert self.store.get_child_pages(placeholder.page_id) == {}
        assert self.store.get_child_pages(None) == {}
        assert self.inner.child_queries == []

    def test_update_keeps_remote_id(self):
        remote = self.inner.pages[self.existing].as_remote()

        node = self.store.create_or_update_page(local_page("a.md", body="<p>new</p>"), self.home, remote)

        assert node.page_id == self.existing
        assert self.inner.pages[self.existing].body == ""
        assert self.inner.updates == []

    def test_delete_is_skipped(self):
        self.store.delete_page(self.existing)

        assert self.existing in self.inner.pages
        assert self.inner.deletes == []
