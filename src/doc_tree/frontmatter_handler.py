"""YAML front-matter parsing for Markdown documents.

Front-matter is the YAML block between ``---`` lines at the very top of a
document. Only ``title`` is used by the publisher; any other field is
kept for callers but otherwise ignored.
"""

import re
from typing import Any, Dict, Tuple

import yaml

from .errors import FrontmatterError


class FrontmatterHandler:
    """Splits a Markdown document into front-matter and body."""

    FRONTMATTER_PATTERN = re.compile(
        r'^---\s*\n(.*?)\n---\s*(?:\n|$)',
        re.DOTALL
    )

    H1_PATTERN = re.compile(r'^#\s+(.+?)\s*#*\s*$', re.MULTILINE)

    # Maximum allowed nesting of the YAML block
    MAX_YAML_DEPTH = 10

    @classmethod
    def split(cls, file_path: str, content: str) -> Tuple[Dict[str, Any], str]:
        """Parse front-matter from a document.

        Args:
            file_path: Path of the document (for error messages)
            content: Full document text

        Returns:
            Tuple of (front-matter dict, body without front-matter)

        Raises:
            FrontmatterError: If the YAML is malformed or not a mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise FrontmatterError(
                file_path,
                f"Front-matter must be a mapping, got {type(data).__name__}"
            )
        cls._validate_depth(file_path, data)

        return data, content[match.end():]

    @classmethod
    def first_heading(cls, body: str) -> str:
        """Text of the first level-one heading, or an empty string."""
        match = cls.H1_PATTERN.search(body)
        return match.group(1).strip() if match else ""

    @classmethod
    def _validate_depth(cls, file_path: str, obj: Any, depth: int = 0) -> None:
        if depth > cls.MAX_YAML_DEPTH:
            raise FrontmatterError(
                file_path,
                f"YAML structure exceeds maximum depth of {cls.MAX_YAML_DEPTH}"
            )
        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_depth(file_path, value, depth + 1)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_depth(file_path, item, depth + 1)
