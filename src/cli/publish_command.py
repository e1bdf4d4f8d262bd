"""Publish command orchestration for CLI.

This module provides the PublishCommand class that runs a publish or a
cleanup end to end: it loads the configuration and the MkDocs site,
builds the Confluence store, runs the Publisher and reports the outcome
through the OutputHandler and the GitHub job summary.
"""

import logging
from typing import Optional

from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.step_summary import StepSummary
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator, Credentials
from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    ConversionError,
    InvalidCredentialsError,
    SyncError,
)
from src.content_converter.markdown_converter import MarkdownConverter
from src.doc_tree.config_loader import DEFAULT_CONFIG_PATH, ConfigLoader
from src.doc_tree.errors import DocTreeError
from src.doc_tree.models import PublishConfig
from src.doc_tree.tree_loader import DocTreeLoader
from src.publisher.confluence_store import ConfluenceStore
from src.publisher.dry_run_store import PLACEHOLDER_PREFIX, DryRunStore
from src.publisher.errors import IdentityConflictError, PublishError
from src.publisher.protocols import RemoteStore
from src.publisher.publisher import Publisher

logger = logging.getLogger(__name__)


class PublishCommand:
    """Runs a publish or cleanup for the CLI.

    The workflow:
        1. Load the publish configuration (YAML file plus environment)
        2. Load and validate the Confluence credentials
        3. Load the MkDocs site (only its name for a cleanup)
        4. Publish or clean up through a ConfluenceStore, wrapped in a
           DryRunStore for --dry-run
        5. Print the summary and append the GitHub job summary
        6. Return the exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> command = PublishCommand(output_handler=output)
        >>> exit_code = command.run(dry_run=True)
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        store: Optional[RemoteStore] = None,
        converter: Optional[MarkdownConverter] = None,
        step_summary: Optional[StepSummary] = None,
    ):
        """Initialize the command.

        Args:
            config_path: Path of the publish configuration file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for Confluence API (optional)
            store: Remote store to publish to; a ConfluenceStore is built
                   from the configuration when None
            converter: Markdown renderer (optional)
            step_summary: GitHub job summary writer (optional)

        Note:
            All dependencies are optional to support testing. In production
            they are created from the configuration and environment.
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.store = store
        self.converter = converter
        self.step_summary = step_summary or StepSummary.from_env()

    def run(self, cleanup: bool = False, dry_run: bool = False) -> ExitCode:
        """Execute the publish (or cleanup) and translate errors to exit codes.

        Args:
            cleanup: Delete the published site instead of publishing it
            dry_run: Plan against the live pages without changing anything

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load(
                self.config_path,
                required=self.config_path != DEFAULT_CONFIG_PATH,
            )

            if not self.authenticator:
                self.authenticator = Authenticator()
            credentials = self.authenticator.get_credentials()

            store = self.store or ConfluenceStore(APIWrapper(self.authenticator), config.space_key)
            if dry_run:
                store = DryRunStore(store)

            if cleanup:
                return self._run_cleanup(config, store, dry_run)
            return self._run_publish(config, store, credentials, dry_run)

        except IdentityConflictError as e:
            logger.error(f"Identity conflict: {e}")
            self.output_handler.error(str(e))
            self.output_handler.info(
                "Rename site_name in mkdocs.yml or remove the existing pages first"
            )
            return ExitCode.CONFLICT

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CONFLUENCE_URL, CONFLUENCE_USER and CONFLUENCE_API_TOKEN environment variables"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except DocTreeError as e:
            logger.error(f"Invalid documentation: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (PublishError, ConversionError) as e:
            logger.error(f"Publish failed: {e}")
            self.output_handler.error(f"Publish failed: {e}")
            return ExitCode.GENERAL_ERROR

        except SyncError as e:
            logger.error(f"Error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during publish")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _run_publish(
        self,
        config: PublishConfig,
        store: RemoteStore,
        credentials: Credentials,
        dry_run: bool,
    ) -> ExitCode:
        loader = DocTreeLoader(self.converter, repo=config.repo)
        with self.output_handler.spinner(f"Rendering {config.mkdocs_file}..."):
            tree = loader.load(config.mkdocs_file)
        self.output_handler.info(
            f'Site "{tree.site_name}" ({tree.repo}): {len(tree.pages)} page(s)'
        )

        publisher = Publisher(
            store,
            tree.repo,
            parent_page=config.parent_page,
            max_workers=config.max_workers,
        )
        with self.output_handler.spinner(f'Publishing "{tree.site_name}" to {config.space_key}...'):
            report = publisher.sync(tree.site_name, tree.pages, tree.section_hierarchy, tree.home)

        url = None
        if report.home_id and not report.home_id.startswith(PLACEHOLDER_PREFIX):
            url = credentials.page_url(config.space_key, report.home_id)

        self.output_handler.print_publish_summary(tree.site_name, report, url=url, dry_run=dry_run)
        if url and not dry_run:
            logger.info(f'"{tree.site_name}" Documentation published at {url}')
            self.step_summary.write_published(tree.site_name, url)
        return ExitCode.SUCCESS

    def _run_cleanup(self, config: PublishConfig, store: RemoteStore, dry_run: bool) -> ExitCode:
        site_name = DocTreeLoader(self.converter, repo=config.repo).read_site_name(config.mkdocs_file)

        # Teardown never reads the repository.
        publisher = Publisher(store, config.repo or "")
        with self.output_handler.spinner(f'Deleting "{site_name}" from {config.space_key}...'):
            report = publisher.cleanup(site_name)

        self.output_handler.print_cleanup_summary(site_name, report, dry_run=dry_run)
        if report.home_id is not None and not dry_run:
            self.step_summary.write_cleanup(site_name)
        return ExitCode.SUCCESS
