"""Typed exception hierarchy for Confluence-related errors.

Every error raised by confluence-publish derives from SyncError so the CLI
can catch application failures in one place. Errors coming out of the
REST client derive from ConfluenceError and name the call that failed
(``create_page(DOCS, Intro)``, ``delete_page(123)``) so a failed publish
can be reported without a stack trace.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all confluence-publish errors."""
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a page addressed by id does not exist, typically because
    it was deleted in Confluence between listing and writing."""

    def __init__(self, page_id: str, operation: Optional[str] = None):
        message = f"Page {page_id} not found"
        if operation:
            message += f" during {operation}"
        super().__init__(message)
        self.page_id = page_id
        self.operation = operation


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API cannot be reached."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when an API call fails for any other reason.

    Attributes:
        operation: The wrapper call that failed, e.g. ``update_page(123)``
        page_id: The page the call addressed, when it addressed one
        reason: Short cause, e.g. ``version conflict`` or ``after 3 retries``
    """

    def __init__(
        self,
        operation: Optional[str] = None,
        page_id: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        message = "Confluence API failure"
        if operation:
            message += f" during {operation}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.operation = operation
        self.page_id = page_id
        self.reason = reason


class ConversionError(ConfluenceError):
    """Raised when Markdown cannot be rendered to storage format."""
    pass
