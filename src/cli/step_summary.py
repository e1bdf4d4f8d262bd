"""GitHub Actions job summary.

When the command runs inside a GitHub Actions job, ``GITHUB_STEP_SUMMARY``
names a Markdown file whose content is shown on the run page. Entries are
appended, never overwritten, so several steps can share it.
"""

import logging
import os
from typing import Optional

from src.doc_tree.errors import FilesystemError

logger = logging.getLogger(__name__)

STEP_SUMMARY_ENV = "GITHUB_STEP_SUMMARY"


class StepSummary:
    """Appends Markdown to the job summary file, if there is one."""

    def __init__(self, path: Optional[str] = None):
        self.path = path

    @classmethod
    def from_env(cls) -> 'StepSummary':
        return cls(os.getenv(STEP_SUMMARY_ENV) or None)

    @property
    def enabled(self) -> bool:
        return bool(self.path)

    def write_published(self, site_name: str, url: str) -> None:
        self._append(
            "# :books: Documentation published\n"
            "View the documentation using the following link<br>"
            f":link: [{site_name}]({url})\n"
        )

    def write_cleanup(self, site_name: str) -> None:
        self._append(
            "# :broom: Cleanup\n"
            f'All confluence pages of "{site_name}" have been deleted\n'
        )

    def _append(self, markdown: str) -> None:
        if not self.enabled:
            return
        try:
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(markdown)
        except OSError as e:
            raise FilesystemError(self.path, 'write', str(e))
        logger.debug(f"Wrote job summary to {self.path}")
