"""Loading of the local MkDocs site and of the publish configuration."""

from .config_loader import ConfigLoader, DEFAULT_CONFIG_PATH
from .errors import (
    DocTreeError,
    FilesystemError,
    ConfigError,
    NavError,
    FrontmatterError,
)
from .frontmatter_handler import FrontmatterHandler
from .models import DocTree, PublishConfig
from .tree_loader import DocTreeLoader, repo_from_url

__all__ = [
    'ConfigLoader',
    'DEFAULT_CONFIG_PATH',
    'DocTreeError',
    'FilesystemError',
    'ConfigError',
    'NavError',
    'FrontmatterError',
    'FrontmatterHandler',
    'DocTree',
    'PublishConfig',
    'DocTreeLoader',
    'repo_from_url',
]
