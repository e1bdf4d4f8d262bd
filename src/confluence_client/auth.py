"""Credential loading for the Confluence REST client.

Credentials come from environment variables, optionally seeded from a
.env file through python-dotenv. They are read on demand and never
cached or logged.
"""

import logging
import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

logger = logging.getLogger(__name__)


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str

    @property
    def wiki_url(self) -> str:
        """Base URL including the /wiki context path used by Confluence Cloud."""
        base_url = self.url.rstrip('/')
        if not base_url.endswith('/wiki'):
            base_url = f"{base_url}/wiki"
        return base_url

    def page_url(self, space_key: str, page_id: str) -> str:
        """Browser URL of a page, e.g. https://x.atlassian.net/wiki/spaces/DOCS/pages/42."""
        return f"{self.wiki_url}/spaces/{space_key}/pages/{page_id}"


class Authenticator:
    """Loads and validates Confluence credentials from the environment.

    Required environment variables:
        CONFLUENCE_URL: Confluence instance URL (e.g. https://yourinstance.atlassian.net)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> creds.page_url("DOCS", "123456")
    """

    REQUIRED_VARIABLES = ('CONFLUENCE_URL', 'CONFLUENCE_USER', 'CONFLUENCE_API_TOKEN')

    def __init__(self, env_file: Optional[str] = None):
        """Load variables from ``env_file`` (or the nearest .env) without
        overriding values already present in the environment."""
        load_dotenv(dotenv_path=env_file)

    def get_credentials(self) -> Credentials:
        """Read the credentials from the environment.

        Returns:
            Credentials with url, user and api_token

        Raises:
            InvalidCredentialsError: If any required variable is missing or blank
        """
        values = {name: (os.getenv(name) or '').strip() for name in self.REQUIRED_VARIABLES}
        missing = [name for name, value in values.items() if not value]

        if missing:
            logger.error(f"Missing Confluence credentials: {', '.join(missing)}")
            raise InvalidCredentialsError(
                user=values['CONFLUENCE_USER'] or "unknown",
                endpoint=values['CONFLUENCE_URL'] or "unknown",
            )

        return Credentials(
            url=values['CONFLUENCE_URL'],
            user=values['CONFLUENCE_USER'],
            api_token=values['CONFLUENCE_API_TOKEN'],
        )
