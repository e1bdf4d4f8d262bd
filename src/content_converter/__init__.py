"""Content conversion from Markdown to Confluence storage format.

This module provides the MarkdownConverter, a thin wrapper around Pandoc.
"""

from .markdown_converter import MarkdownConverter

__all__ = ['MarkdownConverter']
