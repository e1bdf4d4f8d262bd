"""API wrapper for the Confluence Cloud REST API.

This module wraps the atlassian-python-api Confluence client and provides
error translation from HTTP exceptions to our typed exception hierarchy.
Every call goes through the rate limit retry logic.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from atlassian import Confluence
from requests.exceptions import ConnectionError, ConnectTimeout, ReadTimeout, Timeout

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    PageNotFoundError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

# Secrets that may appear in exception text coming back from requests
_SANITIZE_RULES = (
    (re.compile(r'://([\w.-]+):([\w.-]+)@'), r'://***:***@'),
    (re.compile(r'Authorization:\s*[^\n\r]+', re.IGNORECASE), 'Authorization: ***REDACTED***'),
    (re.compile(r'(Bearer|Basic)\s+[^\s\n\r]+', re.IGNORECASE), r'\1 ***REDACTED***'),
    (re.compile(r'(api_?token|token|password)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE),
     r'\1=***REDACTED***'),
    (re.compile(r'\b[\w.-]+@([\w.-]+\.[a-z]{2,})\b', re.IGNORECASE), r'***@\1'),
)


class APIWrapper:
    """Thin wrapper around the atlassian-python-api Confluence client.

    The wrapper:
    1. Creates the client lazily from the Authenticator's credentials
    2. Translates HTTP errors to typed exceptions
    3. Retries 429 rate limit responses
    4. Exposes only the operations the publisher needs

    Example:
        >>> api = APIWrapper(Authenticator())
        >>> page = api.get_page_by_title("DOCS", "My Site")
    """

    def __init__(self, authenticator: Authenticator, timeout: int = 30):
        """Initialize the wrapper.

        Args:
            authenticator: Authenticator used to load credentials on first use
            timeout: HTTP timeout in seconds for every request
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._client: Optional[Confluence] = None

    def _get_client(self) -> Confluence:
        """Create the Confluence client on first use.

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._client is None:
            creds = self._authenticator.get_credentials()
            self._client = Confluence(
                url=creds.url,
                username=creds.user,
                password=creds.api_token,
                cloud=True,
                timeout=self._timeout,
            )
        return self._client

    def _validate_page_id(self, page_id: str) -> None:
        """Reject anything but a numeric page id before building a URL with it.

        Raises:
            ValueError: If page_id is empty or not numeric
        """
        if not page_id or not str(page_id).strip():
            raise ValueError("page_id cannot be empty")

        if not re.match(r'^\d+$', str(page_id).strip()):
            raise ValueError(
                f"Invalid page_id format: '{page_id}'. "
                f"Page IDs must contain only numeric characters."
            )

    @staticmethod
    def _sanitize_credentials(text: str) -> str:
        """Mask passwords, tokens and email local parts in an error message."""
        if not text:
            return text
        for pattern, replacement in _SANITIZE_RULES:
            text = pattern.sub(replacement, text)
        return text

    def _translate_error(self, exception: Exception, operation: str) -> Exception:
        """Translate an exception from the client into a typed ConfluenceError.

        Args:
            exception: The original exception from the API client
            operation: Description of the failed call, e.g. "delete_page(123)"

        Returns:
            The translated exception (not raised)
        """
        if isinstance(exception, (Timeout, ConnectTimeout, ReadTimeout, ConnectionError)):
            return APIUnreachableError(endpoint=self._authenticator.get_credentials().url)

        status_code = getattr(exception, 'status_code', None)
        response = getattr(exception, 'response', None)
        if status_code is None and response is not None:
            status_code = getattr(response, 'status_code', None)

        error_msg = str(exception).lower()

        if status_code == 401 or '401' in error_msg or 'unauthorized' in error_msg:
            creds = self._authenticator.get_credentials()
            return InvalidCredentialsError(user=creds.user, endpoint=creds.url)

        match = re.search(r'\((\d+)', operation)
        page_id = match.group(1) if match else None

        if status_code == 404 or '404' in error_msg or 'not found' in error_msg:
            return PageNotFoundError(page_id=page_id or "unknown", operation=operation)

        if any(keyword in error_msg for keyword in (
            'connection', 'timeout', 'unreachable', 'network', 'failed to connect',
        )):
            return APIUnreachableError(endpoint=self._authenticator.get_credentials().url)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        return APIAccessError(operation, page_id=page_id)

    def get_page_by_title(
        self,
        space: str,
        title: str,
        expand: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Fetch a page by space and title.

        Returns:
            Page data, or None if no page has that title

        Raises:
            InvalidCredentialsError: If credentials are invalid
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
        """
        def _fetch():
            try:
                return self._get_client().get_page_by_title(
                    space=space,
                    title=title,
                    expand=expand or "version,ancestors",
                )
            except Exception as e:
                error_msg = str(e).lower()
                if '404' in error_msg or 'not found' in error_msg:
                    return None
                raise self._translate_error(e, f"get_page_by_title({space}, {title})") from e

        return retry_on_rate_limit(_fetch)

    def get_child_pages(
        self,
        page_id: str,
        expand: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List the immediate child pages of a page, in Confluence order.

        Raises:
            PageNotFoundError: If the parent page doesn't exist
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
        """
        self._validate_page_id(page_id)

        def _fetch():
            try:
                response = self._get_client().get_page_child_by_type(
                    page_id=page_id,
                    type='page',
                    expand=expand,
                )
                # Older client versions return {'results': [...]}, newer a generator
                if isinstance(response, dict):
                    return list(response.get('results', []))
                return list(response or [])
            except Exception as e:
                raise self._translate_error(e, f"get_child_pages({page_id})") from e

        return retry_on_rate_limit(_fetch)

    def create_page(
        self,
        space: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a page with a storage format body.

        Returns:
            Created page data (including its new 'id')

        Raises:
            InvalidCredentialsError: If credentials are invalid
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
        """
        def _create():
            try:
                return self._get_client().create_page(
                    space=space,
                    title=title,
                    body=body,
                    parent_id=parent_id,
                    representation='storage',
                )
            except Exception as e:
                raise self._translate_error(e, f"create_page({space}, {title})") from e

        return retry_on_rate_limit(_create)

    def update_page(
        self,
        page_id: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Replace a page's title, body and parent.

        The client increments the version number itself.

        Raises:
            PageNotFoundError: If the page doesn't exist
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries or on a version conflict
        """
        self._validate_page_id(page_id)

        def _update():
            try:
                return self._get_client().update_page(
                    page_id=page_id,
                    title=title,
                    body=body,
                    parent_id=parent_id,
                    representation='storage',
                    always_update=True,
                )
            except Exception as e:
                error_msg = str(e).lower()
                if '409' in error_msg or 'conflict' in error_msg:
                    raise APIAccessError(
                        f"update_page({page_id})", page_id=page_id, reason="version conflict"
                    ) from e
                raise self._translate_error(e, f"update_page({page_id})") from e

        return retry_on_rate_limit(_update)

    def delete_page(self, page_id: str) -> None:
        """Move a page and all of its descendants to the trash.

        Confluence itself trashes only the page and moves its children up
        to its parent, so the client walks the subtree.

        Raises:
            PageNotFoundError: If the page doesn't exist
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
        """
        self._validate_page_id(page_id)

        def _delete():
            try:
                self._get_client().remove_page(page_id, recursive=True)
            except Exception as e:
                raise self._translate_error(e, f"delete_page({page_id})") from e

        retry_on_rate_limit(_delete)

    def get_page_property(self, page_id: str, key: str) -> Optional[Dict[str, Any]]:
        """Fetch a content property of a page.

        Returns:
            Property data with 'key', 'value' and 'version', or None if the
            page has no such property
        """
        self._validate_page_id(page_id)

        def _fetch():
            try:
                return self._get_client().get_page_property(page_id, key)
            except Exception as e:
                error_msg = str(e).lower()
                if '404' in error_msg or 'not found' in error_msg:
                    return None
                raise self._translate_error(e, f"get_page_property({page_id}, {key})") from e

        return retry_on_rate_limit(_fetch)

    def set_page_property(self, page_id: str, key: str, value: Dict[str, Any]) -> None:
        """Create or replace a content property of a page."""
        self._validate_page_id(page_id)
        existing = self.get_page_property(page_id, key)

        def _write():
            client = self._get_client()
            try:
                if existing is None:
                    client.set_page_property(page_id, {'key': key, 'value': value})
                else:
                    version = existing.get('version', {}).get('number', 1)
                    client.update_page_property(page_id, {
                        'key': key,
                        'value': value,
                        'version': {'number': version + 1, 'minorEdit': True},
                    })
            except Exception as e:
                raise self._translate_error(e, f"set_page_property({page_id}, {key})") from e

        retry_on_rate_limit(_write)
