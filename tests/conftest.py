"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs a missing page at ERROR level; lookups of absent
# pages are normal here.
logging.getLogger("atlassian").setLevel(logging.WARNING)
