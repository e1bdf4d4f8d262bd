"""Confluence client library for confluence-publish.

This package wraps the Confluence Cloud REST API behind a small,
typed interface: credential loading, error translation and rate limit
retries.
"""

from .api_wrapper import APIWrapper
from .auth import Authenticator, Credentials
from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    ConversionError,
)

__all__ = [
    "APIWrapper",
    "Authenticator",
    "Credentials",
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "ConversionError",
]
