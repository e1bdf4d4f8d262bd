"""Main CLI entry point for the confluence-publish command.

This module provides the Typer application that serves as the entry point
for the confluence-publish command-line tool. It uses options on the main
command rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli import __version__
from src.cli.output import OutputHandler
from src.cli.publish_command import PublishCommand
from src.doc_tree.config_loader import DEFAULT_CONFIG_PATH

app = typer.Typer(
    name="confluence-publish",
    help="Publish an MkDocs documentation site to Confluence.",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-publish_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt=date_format,
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    cleanup: bool = typer.Option(
        False,
        "--cleanup",
        help="Delete every page published for the site instead of publishing it",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview changes without applying them",
    ),
    config: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the publish configuration file",
        metavar="PATH",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Publish an MkDocs documentation site to Confluence.

    \b
    QUICK START:
      confluence-publish                 # Publish the site described by mkdocs.yml
      confluence-publish --dry-run       # Preview changes
      confluence-publish --cleanup       # Delete the published pages

    \b
    ENVIRONMENT:
      CONFLUENCE_URL, CONFLUENCE_USER, CONFLUENCE_API_TOKEN   Credentials
      CONFLUENCE_SPACE_KEY                                    Target space
      CONFLUENCE_PARENT_PAGE                                  Optional parent page title
    """
    if version:
        typer.echo(f"confluence-publish version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    command = PublishCommand(config_path=config, output_handler=output)
    exit_code = command.run(cleanup=cleanup, dry_run=dry_run)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


if __name__ == "__main__":
    main()
