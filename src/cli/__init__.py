"""Command-line interface for publishing MkDocs sites to Confluence.

This package provides the `confluence-publish` CLI tool that loads an MkDocs
site, publishes it to a Confluence space and reports the outcome with
progress indication, exit codes and an optional GitHub job summary.
"""

__version__ = "0.1.0"

from .models import ExitCode
from .output import OutputHandler
from .publish_command import PublishCommand
from .step_summary import StepSummary

__all__ = [
    '__version__',
    'ExitCode',
    'OutputHandler',
    'PublishCommand',
    'StepSummary',
]
