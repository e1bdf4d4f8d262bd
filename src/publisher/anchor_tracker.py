"""Section anchor table.

Sections have no page of their own; the first page reconciled in a
section stands in for it, and child sections are published under that
page. The table is insert-once: the first anchor recorded for a section
wins, and the root section is pinned to the home page from the start.
"""

import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)

ROOT_SECTION = None


class SectionAnchorTracker:
    """Maps section keys to the page id that anchors their children.

    Example:
        >>> tracker = SectionAnchorTracker(home_id="100")
        >>> tracker.record("Guide", "101")
        True
        >>> tracker.anchor_for("Guide")
        '101'
    """

    def __init__(self, home_id: str):
        self._anchors: Dict[Optional[str], str] = {ROOT_SECTION: home_id}
        self._lock = threading.Lock()

    @property
    def home_id(self) -> str:
        return self._anchors[ROOT_SECTION]

    def record(self, section: Optional[str], page_id: Optional[str]) -> bool:
        """Record ``page_id`` as the anchor of ``section``.

        Returns:
            True if the anchor was recorded, False if the section is root,
            already anchored, or ``page_id`` is empty
        """
        if section is ROOT_SECTION or not page_id:
            return False
        with self._lock:
            if section in self._anchors:
                logger.debug(
                    f"Section '{section}' already anchored to {self._anchors[section]}, "
                    f"ignoring {page_id}"
                )
                return False
            self._anchors[section] = page_id
        logger.debug(f"Section '{section}' anchored to page {page_id}")
        return True

    def anchor_for(self, section: Optional[str]) -> Optional[str]:
        """Page id anchoring ``section``, or None if it has none yet."""
        with self._lock:
            return self._anchors.get(section)

    def __contains__(self, section: Optional[str]) -> bool:
        with self._lock:
            return section in self._anchors

    def as_dict(self) -> Dict[Optional[str], str]:
        with self._lock:
            return dict(self._anchors)
