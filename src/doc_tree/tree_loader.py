"""Builds the local document tree of an MkDocs site.

The tree comes from ``mkdocs.yml``: ``site_name`` titles the home page,
``repo_url`` identifies the owning repository and ``nav`` gives the pages,
their order and their sections. Without a ``nav``, every Markdown file
under ``docs_dir`` is published and each sub-directory is a section.

Section keys are the ``/``-joined chain of section names, so two sections
with the same name under different parents stay distinct.
"""

import logging
import os
import re
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from src.content_converter.markdown_converter import MarkdownConverter
from src.publisher.models import LocalNode
from src.publisher.root_resolver import HOME_PATH

from .errors import ConfigError, FilesystemError, NavError
from .frontmatter_handler import FrontmatterHandler
from .models import DocTree

logger = logging.getLogger(__name__)

REPO_URL_PATTERN = re.compile(r'^(?:https?://|git@)[^/:]+[/:]([^/]+/[^/]+?)(?:\.git)?/?$')

_EXTERNAL_LINK = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)


class _MkDocsYamlLoader(yaml.SafeLoader):
    """SafeLoader that tolerates MkDocs-specific tags such as ``!ENV`` or
    ``!!python/name:``; their values are irrelevant here."""


_MkDocsYamlLoader.add_multi_constructor('!', lambda loader, suffix, node: None)
_MkDocsYamlLoader.add_multi_constructor('tag:yaml.org,2002:python/', lambda loader, suffix, node: None)


def repo_from_url(repo_url: str) -> Optional[str]:
    """Extract ``owner/name`` from a repository URL, e.g. https://github.com/acme/widgets."""
    match = REPO_URL_PATTERN.match(repo_url.strip())
    return match.group(1) if match else None


class DocTreeLoader:
    """Loads an MkDocs site into a DocTree.

    Example:
        >>> loader = DocTreeLoader(MarkdownConverter())
        >>> tree = loader.load("mkdocs.yml")
        >>> print(f"{tree.site_name}: {len(tree.pages)} pages")
    """

    def __init__(self, converter: Optional[MarkdownConverter] = None, repo: Optional[str] = None):
        """Initialize the loader.

        Args:
            converter: Renders Markdown bodies to storage format; a
                       MarkdownConverter is created on first use when None
            repo: Repository identifier overriding the one derived from
                  mkdocs.yml or GITHUB_REPOSITORY
        """
        self._converter = converter
        self._repo = repo

    def load(self, mkdocs_file: str) -> DocTree:
        """Read the site described by ``mkdocs_file``.

        Raises:
            FilesystemError: If mkdocs.yml or a listed page cannot be read
            ConfigError: If site_name or the repository cannot be determined
            NavError: If the nav contains an entry of an unknown shape
            FrontmatterError: If a page has malformed front-matter
        """
        config_path = Path(mkdocs_file)
        site_config = self._read_site_config(config_path)
        root = config_path.parent
        site_name = _site_name(site_config)
        repo = self._resolve_repo(site_config)
        docs_dir = root / str(site_config.get('docs_dir') or 'docs')

        if site_config.get('nav'):
            entries, hierarchy = self._walk_nav(site_config['nav'])
        else:
            logger.info(f"No nav in {mkdocs_file}, publishing every page under {docs_dir}")
            entries, hierarchy = self._walk_docs_dir(docs_dir)
        hierarchy = lift_empty_sections(hierarchy, {section for _, _, section in entries})

        pages = [
            self._load_page(docs_dir, rel_path, nav_title, section, repo)
            for rel_path, nav_title, section in entries
        ]

        home = None
        readme = root / HOME_PATH
        if readme.is_file():
            home = self._load_home(readme, site_name, repo)

        logger.info(
            f'Loaded "{site_name}": {len(pages)} page(s) in {len(hierarchy)} section(s), '
            f'home page from {"README.md" if home else "placeholder"}'
        )
        return DocTree(
            site_name=site_name,
            repo=repo,
            home=home,
            pages=pages,
            section_hierarchy=hierarchy,
        )

    def read_site_name(self, mkdocs_file: str) -> str:
        """Read only ``site_name`` from mkdocs.yml, without rendering any page.

        Raises:
            FilesystemError: If mkdocs.yml cannot be read
            ConfigError: If site_name is missing
        """
        return _site_name(self._read_site_config(Path(mkdocs_file)))

    def _render(self, markdown: str) -> str:
        if self._converter is None:
            self._converter = MarkdownConverter()
        return self._converter.markdown_to_storage(markdown)

    def _read_site_config(self, config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.load(f, Loader=_MkDocsYamlLoader)
        except FileNotFoundError:
            raise FilesystemError(str(config_path), 'read', 'MkDocs configuration not found')
        except OSError as e:
            raise FilesystemError(str(config_path), 'read', str(e))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a YAML dictionary")
        return data

    def _resolve_repo(self, site_config: Dict[str, Any]) -> str:
        if self._repo:
            return self._repo
        repo_url = site_config.get('repo_url')
        if repo_url:
            repo = repo_from_url(str(repo_url))
            if repo:
                return repo
            logger.warning(f"Cannot derive a repository from repo_url '{repo_url}'")
        repo = os.getenv('GITHUB_REPOSITORY')
        if repo:
            return repo
        raise ConfigError(
            "Cannot determine the repository: set 'repo' in the config, "
            "repo_url in mkdocs.yml or GITHUB_REPOSITORY",
            'repo'
        )

    def _walk_nav(
        self,
        nav: Any,
        section: Optional[str] = None,
        entries: Optional[List[Tuple[str, Optional[str], Optional[str]]]] = None,
        hierarchy: Optional[Dict[str, Optional[str]]] = None,
    ) -> Tuple[List[Tuple[str, Optional[str], Optional[str]]], Dict[str, Optional[str]]]:
        """Flatten a nav into (path, nav title, section) entries plus the section hierarchy."""
        entries = [] if entries is None else entries
        hierarchy = {} if hierarchy is None else hierarchy

        if not isinstance(nav, list):
            raise NavError(nav, "expected a list of entries")

        for entry in nav:
            if isinstance(entry, str):
                title, target = None, entry
            elif isinstance(entry, dict) and len(entry) == 1:
                title, target = next(iter(entry.items()))
            else:
                raise NavError(entry, "expected a path or a single 'Title: target' mapping")

            if isinstance(target, list):
                child = f"{section}/{title}" if section else str(title)
                hierarchy.setdefault(child, section)
                self._walk_nav(target, child, entries, hierarchy)
            elif isinstance(target, str):
                if _EXTERNAL_LINK.match(target):
                    logger.debug(f"Skipping external nav link {target}")
                    continue
                entries.append((target, None if title is None else str(title), section))
            else:
                raise NavError(entry, "target must be a path or a list")

        return entries, hierarchy

    def _walk_docs_dir(
        self,
        docs_dir: Path,
    ) -> Tuple[List[Tuple[str, Optional[str], Optional[str]]], Dict[str, Optional[str]]]:
        if not docs_dir.is_dir():
            raise FilesystemError(str(docs_dir), 'list', 'Docs directory not found')

        entries = []
        hierarchy: Dict[str, Optional[str]] = {}
        for dirpath, dirnames, filenames in os.walk(docs_dir):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
            rel_dir = PurePosixPath(Path(dirpath).relative_to(docs_dir).as_posix())
            section = None if str(rel_dir) == '.' else str(rel_dir)
            if section is not None:
                parent = str(rel_dir.parent)
                hierarchy[section] = None if parent == '.' else parent

            markdown = sorted(
                (f for f in filenames if f.endswith('.md')),
                key=lambda f: (f not in ('index.md', 'README.md'), f),
            )
            for filename in markdown:
                rel_path = filename if section is None else f"{section}/{filename}"
                entries.append((rel_path, None, section))

        return entries, hierarchy

    def _load_page(
        self,
        docs_dir: Path,
        rel_path: str,
        nav_title: Optional[str],
        section: Optional[str],
        repo: str,
    ) -> LocalNode:
        file_path = docs_dir / rel_path
        frontmatter, markdown = FrontmatterHandler.split(str(file_path), _read_text(file_path))
        title = (
            str(frontmatter.get('title') or '').strip()
            or nav_title
            or FrontmatterHandler.first_heading(markdown)
            or file_path.stem
        )
        logger.debug(f"Rendering {rel_path} as '{title}' in section '{section}'")
        return LocalNode(
            path=PurePosixPath(rel_path).as_posix(),
            title=title,
            body=self._render(markdown),
            repo=repo,
            section=section,
        )

    def _load_home(self, readme: Path, site_name: str, repo: str) -> LocalNode:
        _, markdown = FrontmatterHandler.split(str(readme), _read_text(readme))
        return LocalNode(
            path=HOME_PATH,
            title=site_name,
            body=self._render(markdown),
            repo=repo,
        )


def lift_empty_sections(
    hierarchy: Dict[str, Optional[str]],
    populated: Set[Optional[str]],
) -> Dict[str, Optional[str]]:
    """Drop sections that hold no pages and re-parent their subsections.

    A section without pages has no first page to nest its subsections
    under, so each subsection moves to its nearest ancestor that has pages,
    or to the top level.
    """
    lifted: Dict[str, Optional[str]] = {}
    for section, parent in hierarchy.items():
        if section not in populated:
            logger.debug(f"Section '{section}' has no pages, lifting its subsections")
            continue
        seen = set()
        while parent is not None and parent not in populated and parent not in seen:
            seen.add(parent)
            parent = hierarchy.get(parent)
        lifted[section] = parent if parent in populated else None
    return lifted


def _site_name(site_config: Dict[str, Any]) -> str:
    site_name = str(site_config.get('site_name') or '').strip()
    if not site_name:
        raise ConfigError("mkdocs.yml must define site_name", 'site_name')
    return site_name


def _read_text(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise FilesystemError(str(file_path), 'read', 'File not found')
    except OSError as e:
        raise FilesystemError(str(file_path), 'read', str(e))
