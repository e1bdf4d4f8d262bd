"""Typed exception hierarchy for local document tree errors.

All exceptions inherit from DocTreeError and carry the file or field at
fault so the message can be shown to the user as is.
"""

from typing import Optional

from src.confluence_client.errors import SyncError


class DocTreeError(SyncError):
    """Base exception for all document tree errors."""
    pass


class FilesystemError(DocTreeError):
    """Raised when a file cannot be read."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class ConfigError(DocTreeError):
    """Raised when the publish configuration or mkdocs.yml is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class NavError(DocTreeError):
    """Raised when an mkdocs ``nav`` entry cannot be interpreted."""

    def __init__(self, entry: object, message: str):
        super().__init__(f"Invalid nav entry {entry!r}: {message}")
        self.entry = entry


class FrontmatterError(DocTreeError):
    """Raised when YAML front-matter cannot be parsed."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"Frontmatter error in {file_path}: {message}")
        self.file_path = file_path
        self.message = message
