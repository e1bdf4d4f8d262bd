"""Unit tests for the exception hierarchy."""

import pytest
from src.confluence_client.errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    ConversionError,
)
from src.doc_tree.errors import ConfigError, DocTreeError, FilesystemError, FrontmatterError, NavError
from src.publisher.errors import (
    CyclicSectionHierarchyError,
    DuplicatePageError,
    IdentityConflictError,
    ParentPageNotFoundError,
    PublishError,
)


class TestHierarchy:
    """Every application error derives from SyncError."""

    @pytest.mark.parametrize("error_class,base", [
        (ConfluenceError, SyncError),
        (InvalidCredentialsError, ConfluenceError),
        (PageNotFoundError, ConfluenceError),
        (APIUnreachableError, ConfluenceError),
        (APIAccessError, ConfluenceError),
        (ConversionError, ConfluenceError),
        (DocTreeError, SyncError),
        (ConfigError, DocTreeError),
        (FilesystemError, DocTreeError),
        (NavError, DocTreeError),
        (FrontmatterError, DocTreeError),
        (PublishError, SyncError),
        (IdentityConflictError, PublishError),
        (ParentPageNotFoundError, PublishError),
        (CyclicSectionHierarchyError, PublishError),
        (DuplicatePageError, PublishError),
    ])
    def test_subclass(self, error_class, base):
        assert issubclass(error_class, base)


class TestConfluenceErrors:
    """Test cases for REST client errors."""

    def test_invalid_credentials_message(self):
        error = InvalidCredentialsError(user="a@b.c", endpoint="https://x")

        assert str(error) == "API key is invalid (user: a@b.c, endpoint: https://x)"
        assert error.user == "a@b.c"

    def test_page_not_found(self):
        assert str(PageNotFoundError("42")) == "Page 42 not found"

    def test_api_unreachable(self):
        assert str(APIUnreachableError("https://x")) == "API is not available at https://x"

    def test_page_not_found_with_operation(self):
        error = PageNotFoundError("42", operation="update_page(42)")

        assert str(error) == "Page 42 not found during update_page(42)"
        assert error.operation == "update_page(42)"

    def test_api_access_bare_message(self):
        assert str(APIAccessError()) == "Confluence API failure"

    def test_api_access_carries_call_context(self):
        error = APIAccessError("update_page(123)", page_id="123", reason="version conflict")

        assert str(error) == "Confluence API failure during update_page(123) (version conflict)"
        assert error.page_id == "123"
        assert error.reason == "version conflict"


class TestPublishErrors:
    """Test cases for publisher errors."""

    def test_identity_conflict_message(self):
        error = IdentityConflictError("Widgets", "acme/other", "acme/widgets")

        assert str(error) == (
            'Page "Widgets" already exists for another repo "acme/other" '
            '(current repo: "acme/widgets")'
        )

    def test_parent_page_not_found_message(self):
        assert str(ParentPageNotFoundError("Eng")) == (
            "The page configured as parent (Eng) does not exist in confluence"
        )

    def test_cycle_message(self):
        assert str(CyclicSectionHierarchyError(["a", "b", "a"])) == "Cyclic section hierarchy: a -> b -> a"

    def test_duplicate_in_root(self):
        assert str(DuplicatePageError(None, "a.md")) == "Duplicate page 'a.md' in the root section"


class TestDocTreeErrors:
    """Test cases for document tree errors."""

    def test_filesystem_error_with_reason(self):
        error = FilesystemError("docs/a.md", "read", "File not found")

        assert str(error) == "Filesystem operation 'read' failed for docs/a.md: File not found"

    def test_config_error_with_field(self):
        error = ConfigError("cannot be empty", "space_key")

        assert str(error) == "Configuration error in field 'space_key': cannot be empty"
        assert error.original_message == "cannot be empty"

    def test_config_error_without_field(self):
        assert str(ConfigError("bad")) == "Configuration error: bad"
