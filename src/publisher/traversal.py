"""Top-down traversal of the section hierarchy.

The root section is reconciled first; every other section is reconciled
only after its parent section, because its pages are published under the
anchor the parent section produced. The hierarchy is checked for cycles
before anything is published, and sections that cannot be reached from
the root are reported and skipped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .anchor_tracker import ROOT_SECTION, SectionAnchorTracker
from .errors import CyclicSectionHierarchyError
from .level_reconciler import LevelReconciler
from .models import LocalNode, PageResult

logger = logging.getLogger(__name__)

SectionHierarchy = Mapping[str, Optional[str]]


@dataclass
class TraversalResult:
    """Outcome of a traversal.

    Attributes:
        results: Per-page results, grouped by section in visiting order
        visited: Sections reconciled, in visiting order (root is None)
        unreachable_sections: Sections skipped because no parent chain
                              leads from them to the root
    """
    results: List[PageResult] = field(default_factory=list)
    visited: List[Optional[str]] = field(default_factory=list)
    unreachable_sections: List[str] = field(default_factory=list)


def build_children_index(hierarchy: SectionHierarchy) -> Dict[Optional[str], List[str]]:
    """Invert ``{section: parent}`` into ``{parent: [sections]}``, keeping map order."""
    children: Dict[Optional[str], List[str]] = {}
    for section, parent in hierarchy.items():
        if section is ROOT_SECTION:
            logger.warning(f"Ignoring parent '{parent}' declared for the root section")
            continue
        children.setdefault(parent or ROOT_SECTION, []).append(section)
    return children


def find_cycle(hierarchy: SectionHierarchy) -> Optional[List[str]]:
    """Return the sections of a parent cycle, or None if there is none.

    The returned list starts and ends with the same section, e.g.
    ``['a', 'b', 'a']``.
    """
    settled = set()
    for start in hierarchy:
        path: List[str] = []
        on_path = set()
        section = start
        while section is not ROOT_SECTION and section not in settled:
            if section in on_path:
                return path[path.index(section):] + [section]
            path.append(section)
            on_path.add(section)
            section = hierarchy.get(section) or ROOT_SECTION
        settled.update(path)
    return None


class TraversalDriver:
    """Visits every section reachable from the root exactly once.

    With ``max_workers == 1`` sections are reconciled sequentially,
    depth-first. With more workers the hierarchy is processed in waves:
    all sections whose parents were reconciled in the previous wave run
    concurrently on a bounded thread pool, and the wave is joined before
    the next one starts.

    Example:
        >>> driver = TraversalDriver(reconciler, tracker)
        >>> result = driver.run(pages, {"Guide": None, "Guide/Advanced": "Guide"})
    """

    def __init__(
        self,
        reconciler: LevelReconciler,
        tracker: SectionAnchorTracker,
        max_workers: int = 1,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._reconciler = reconciler
        self._tracker = tracker
        self._max_workers = max_workers

    def run(
        self,
        pages: Sequence[LocalNode],
        hierarchy: SectionHierarchy,
    ) -> TraversalResult:
        """Reconcile all reachable sections.

        Args:
            pages: Local nodes, in publishing order
            hierarchy: Mapping from section key to parent section key
                       (None for sections directly under the root)

        Returns:
            TraversalResult with per-page results and skipped sections

        Raises:
            CyclicSectionHierarchyError: If section parents form a cycle
        """
        cycle = find_cycle(hierarchy)
        if cycle:
            raise CyclicSectionHierarchyError(cycle)

        pages_by_section: Dict[Optional[str], List[LocalNode]] = {}
        for page in pages:
            pages_by_section.setdefault(page.section, []).append(page)

        children = build_children_index(hierarchy)
        levels = plan_levels(children, hierarchy, pages_by_section)
        result = TraversalResult()

        if self._max_workers == 1:
            self._run_depth_first(children, levels, result)
        else:
            self._run_in_waves(children, levels, result)

        visited = set(result.visited)
        known = list(hierarchy) + [section for section in pages_by_section if section not in hierarchy]
        result.unreachable_sections = _unique(
            section for section in known
            if section is not ROOT_SECTION and section not in visited
        )
        for section in result.unreachable_sections:
            skipped = len(pages_by_section.get(section, []))
            logger.warning(
                f"Section '{section}' is not reachable from the root section, "
                f"skipping it ({skipped} page(s))"
            )
        return result

    def _run_depth_first(self, children, levels, result) -> None:
        visited = {ROOT_SECTION}
        stack: List[Optional[str]] = [ROOT_SECTION]
        while stack:
            section = stack.pop()
            result.visited.append(section)
            result.results.extend(self._process(levels[section]))
            pending = [child for child in children.get(section, []) if child not in visited]
            visited.update(pending)
            stack.extend(reversed(pending))

    def _run_in_waves(self, children, levels, result) -> None:
        visited = {ROOT_SECTION}
        result.visited.append(ROOT_SECTION)
        result.results.extend(self._process(levels[ROOT_SECTION]))

        wave = list(children.get(ROOT_SECTION, []))
        visited.update(wave)
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            while wave:
                logger.debug(f"Reconciling {len(wave)} section(s) concurrently")
                for section, section_results in zip(
                    wave,
                    executor.map(lambda s: self._process(levels[s]), wave),
                ):
                    result.visited.append(section)
                    result.results.extend(section_results)

                next_wave = []
                for section in wave:
                    for child in children.get(section, []):
                        if child not in visited:
                            visited.add(child)
                            next_wave.append(child)
                wave = next_wave

    def _process(self, level: 'Level') -> List[PageResult]:
        if level.section is ROOT_SECTION:
            parent_id = self._tracker.home_id
        else:
            parent_id = self._tracker.anchor_for(level.parent_section)
            if parent_id is None:
                logger.warning(
                    f"Section '{level.parent_section}' has no anchor page, "
                    f"section '{level.section}' has no parent page"
                )
        return self._reconciler.reconcile(
            level.section,
            parent_id,
            level.pages,
            foreign_keys=level.foreign_keys,
            sweep=level.sweep,
        )


@dataclass(frozen=True)
class Level:
    """What one section reconciles.

    Attributes:
        section: Section key (None for root)
        parent_section: Section whose anchor the pages are published under
        pages: The section's local nodes, in publishing order
        foreign_keys: Keys of the other sections published under the same anchor
        sweep: Whether this section deletes the anchor's unclaimed children
    """
    section: Optional[str]
    parent_section: Optional[str]
    pages: Sequence[LocalNode] = ()
    foreign_keys: FrozenSet[str] = frozenset()
    sweep: bool = True


def plan_levels(
    children: Mapping[Optional[str], List[str]],
    hierarchy: SectionHierarchy,
    pages_by_section: Mapping[Optional[str], List[LocalNode]],
) -> Dict[Optional[str], Level]:
    """Describe the reconciliation of every section.

    The root section and the top level sections all publish under the home
    page; the child sections of any other section all publish under that
    section's anchor. Within each such group the first member (root for
    the home page) is the one that sweeps unclaimed children.
    """
    groups: List[List[Optional[str]]] = [[ROOT_SECTION, *children.get(ROOT_SECTION, [])]]
    groups.extend(members for parent, members in children.items() if parent is not ROOT_SECTION)

    levels: Dict[Optional[str], Level] = {}
    for members in groups:
        keys = {
            section: frozenset(page.path for page in pages_by_section.get(section, []))
            for section in members
        }
        for index, section in enumerate(members):
            foreign = frozenset().union(*(keys[other] for other in members if other != section))
            levels[section] = Level(
                section=section,
                parent_section=hierarchy.get(section) or ROOT_SECTION,
                pages=pages_by_section.get(section, []),
                foreign_keys=foreign,
                sweep=index == 0,
            )
    return levels


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered
