"""Data models for the local document tree and publish configuration."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.publisher.models import LocalNode


@dataclass
class PublishConfig:
    """Settings of a publish run.

    Attributes:
        space_key: Confluence space the site is published to
        parent_page: Title of the page the home page is created under
                     (None to create it at the space root)
        mkdocs_file: Path to the MkDocs configuration of the site
        repo: Repository identifier; derived from mkdocs.yml when None
        max_workers: Number of sibling sections reconciled concurrently
    """
    space_key: str
    parent_page: Optional[str] = None
    mkdocs_file: str = "mkdocs.yml"
    repo: Optional[str] = None
    max_workers: int = 1


@dataclass
class DocTree:
    """A site ready to publish.

    Attributes:
        site_name: Title of the home page
        repo: Repository identifier owning the pages
        home: Home document (the project README), if any
        pages: Pages in publishing order
        section_hierarchy: Section key -> parent section key (None = root)
    """
    site_name: str
    repo: str
    home: Optional[LocalNode] = None
    pages: List[LocalNode] = field(default_factory=list)
    section_hierarchy: Dict[str, Optional[str]] = field(default_factory=dict)
