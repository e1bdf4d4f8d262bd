"""Markdown to Confluence storage format conversion using Pandoc.

Only plain Markdown is converted: headings, lists, tables, links, code
blocks. The output is XHTML, which Confluence accepts as storage format.
"""

import logging
import re
import shutil
import subprocess

from ..confluence_client.errors import ConversionError

logger = logging.getLogger(__name__)

PANDOC_TIMEOUT = 10

# Pandoc emits HTML5 void elements; storage format is XML
_VOID_ELEMENTS = re.compile(r'<(br|hr|img|col|input)(\s[^<>]*?)?\s*(?<!/)>')


class MarkdownConverter:
    """Converts Markdown documents to Confluence storage format.

    Example:
        >>> converter = MarkdownConverter()
        >>> converter.markdown_to_storage("# Title")
        '<h1 id="title">Title</h1>'
    """

    def __init__(self):
        """Verify Pandoc is available.

        Raises:
            ConversionError: If Pandoc is not found on PATH
        """
        if shutil.which("pandoc") is None:
            raise ConversionError(
                "Pandoc not found. Install: brew install pandoc (macOS) or "
                "apt-get install pandoc (Linux) or download from "
                "https://pandoc.org/installing.html"
            )

    def markdown_to_storage(self, markdown: str) -> str:
        """Convert Markdown to XHTML storage format.

        Args:
            markdown: Markdown source (front-matter already removed)

        Returns:
            Storage format XHTML, empty for empty input

        Raises:
            ConversionError: If Pandoc fails or times out
        """
        if not markdown.strip():
            return ""

        try:
            result = subprocess.run(
                ["pandoc", "-f", "gfm", "-t", "html", "--wrap=none"],
                input=markdown,
                text=True,
                capture_output=True,
                check=True,
                timeout=PANDOC_TIMEOUT,
            )
        except subprocess.CalledProcessError as e:
            raise ConversionError(f"Pandoc conversion failed: {e.stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(f"Pandoc conversion timed out (>{PANDOC_TIMEOUT}s)") from e

        return self._close_void_elements(result.stdout.strip())

    @staticmethod
    def _close_void_elements(html: str) -> str:
        """Rewrite ``<br>`` style tags as ``<br />`` so the result is valid XML."""
        return _VOID_ELEMENTS.sub(lambda m: f"<{m.group(1)}{m.group(2) or ''} />", html)
