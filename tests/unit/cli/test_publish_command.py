"""Unit tests for cli.publish_command module."""

import io
import pytest
from unittest.mock import Mock, patch

from rich.console import Console

from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.publish_command import PublishCommand
from src.cli.step_summary import StepSummary
from src.confluence_client.auth import Credentials
from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    ConversionError,
    InvalidCredentialsError,
)
from src.publisher.models import PageMeta
from tests.helpers import InMemoryStore


MKDOCS = """
site_name: Widgets
repo_url: https://github.com/acme/widgets
nav:
  - index.md
  - Guide:
      - guide/a.md
"""


@pytest.fixture
def site(tmp_path, monkeypatch):
    """An MkDocs site and a config file in a temporary working directory."""
    for name in ("CONFLUENCE_SPACE_KEY", "CONFLUENCE_PARENT_PAGE", "GITHUB_REPOSITORY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "mkdocs.yml").write_text(MKDOCS)
    (tmp_path / "docs" / "guide").mkdir(parents=True)
    (tmp_path / "docs" / "index.md").write_text("# Welcome\n")
    (tmp_path / "docs" / "guide" / "a.md").write_text("# A\n")
    (tmp_path / "config.yaml").write_text("space_key: DOCS\n")
    return tmp_path


@pytest.fixture
def authenticator():
    auth = Mock()
    auth.get_credentials.return_value = Credentials(
        url="https://test.atlassian.net", user="test@example.com", api_token="token",
    )
    return auth


@pytest.fixture
def converter():
    mock = Mock()
    mock.markdown_to_storage.side_effect = lambda markdown: f"<p>{markdown.strip()}</p>"
    return mock


def make_command(site, store, authenticator, converter=None, verbosity=0):
    output = OutputHandler(
        verbosity=verbosity,
        console=Console(file=io.StringIO(), no_color=True, width=120),
    )
    command = PublishCommand(
        config_path=str(site / "config.yaml"),
        output_handler=output,
        authenticator=authenticator,
        store=store,
        converter=converter,
        step_summary=StepSummary(str(site / "summary.md")),
    )
    return command, output.console.file


class TestPublish:
    """Test cases for PublishCommand.run() publishing a site."""

    def test_publish_success(self, site, authenticator, converter):
        store = InMemoryStore()
        command, out = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.SUCCESS

        assert store.children_titles("100") == ["Welcome", "A"]
        assert "published successfully" in out.getvalue()
        summary = (site / "summary.md").read_text()
        assert "Documentation published" in summary
        assert "[Widgets](https://test.atlassian.net/wiki/spaces/DOCS/pages/100)" in summary

    def test_second_publish_is_up_to_date(self, site, authenticator, converter):
        store = InMemoryStore()
        make_command(site, store, authenticator, converter)[0].run()
        store.reset_log()
        command, out = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.SUCCESS

        assert store.mutations == 0
        assert "already up to date" in out.getvalue()

    def test_dry_run_writes_nothing(self, site, authenticator, converter):
        store = InMemoryStore()
        command, out = make_command(site, store, authenticator, converter)

        assert command.run(dry_run=True) == ExitCode.SUCCESS

        assert store.pages == {}
        assert "Dry run: no changes were made" in out.getvalue()
        assert "Welcome" in out.getvalue()
        assert not (site / "summary.md").exists()

    def test_repo_from_config_file(self, site, authenticator, converter):
        (site / "config.yaml").write_text("space_key: DOCS\nrepo: acme/override\n")
        store = InMemoryStore()

        make_command(site, store, authenticator, converter)[0].run()

        assert store.pages["100"].meta.repo == "acme/override"


class TestCleanup:
    """Test cases for PublishCommand.run(cleanup=True)."""

    def test_cleanup_deletes_site(self, site, authenticator, converter):
        store = InMemoryStore()
        make_command(site, store, authenticator, converter)[0].run()
        command, out = make_command(site, store, authenticator)

        with patch("src.doc_tree.tree_loader.MarkdownConverter") as converter_cls:
            assert command.run(cleanup=True) == ExitCode.SUCCESS

        converter_cls.assert_not_called()
        assert store.find_page("Widgets") is None
        assert "have been deleted" in out.getvalue()
        assert "Cleanup" in (site / "summary.md").read_text()

    def test_cleanup_nothing_to_delete(self, site, authenticator):
        command, out = make_command(site, InMemoryStore(), authenticator)

        assert command.run(cleanup=True) == ExitCode.SUCCESS

        assert 'No pages found for "Widgets"' in out.getvalue()
        assert not (site / "summary.md").exists()

    def test_dry_run_cleanup_keeps_pages(self, site, authenticator, converter):
        store = InMemoryStore()
        make_command(site, store, authenticator, converter)[0].run()
        store.reset_log()
        command, out = make_command(site, store, authenticator)

        assert command.run(cleanup=True, dry_run=True) == ExitCode.SUCCESS

        assert store.deletes == []
        assert "would be deleted" in out.getvalue()


class TestExitCodes:
    """Test cases for error to exit code translation."""

    def test_identity_conflict(self, site, authenticator, converter):
        store = InMemoryStore()
        store.seed("Widgets", meta=PageMeta("acme/other", "README.md"))
        command, out = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.CONFLICT
        assert "acme/other" in out.getvalue()

    def test_invalid_credentials(self, site, authenticator, converter):
        authenticator.get_credentials.side_effect = InvalidCredentialsError("unknown", "unknown")
        command, out = make_command(site, InMemoryStore(), authenticator, converter)

        assert command.run() == ExitCode.AUTH_ERROR
        assert "Authentication failed" in out.getvalue()

    @pytest.mark.parametrize("error", [APIUnreachableError("https://x"), APIAccessError()])
    def test_network_errors(self, site, authenticator, converter, error):
        store = Mock()
        store.find_page.side_effect = error
        command, _ = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.NETWORK_ERROR

    def test_missing_config_file(self, site, authenticator, converter):
        (site / "config.yaml").unlink()
        command, out = make_command(site, InMemoryStore(), authenticator, converter)

        assert command.run() == ExitCode.GENERAL_ERROR
        assert "Configuration file not found" in out.getvalue()

    def test_invalid_docs(self, site, authenticator, converter):
        (site / "docs" / "guide" / "a.md").unlink()
        store = InMemoryStore()
        command, _ = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.GENERAL_ERROR
        assert store.pages == {}

    def test_conversion_error(self, site, authenticator, converter):
        converter.markdown_to_storage.side_effect = ConversionError("Pandoc not found")
        command, out = make_command(site, InMemoryStore(), authenticator, converter)

        assert command.run() == ExitCode.GENERAL_ERROR
        assert "Pandoc not found" in out.getvalue()

    def test_unexpected_error(self, site, authenticator, converter):
        store = Mock()
        store.find_page.side_effect = RuntimeError("boom")
        command, out = make_command(site, store, authenticator, converter)

        assert command.run() == ExitCode.GENERAL_ERROR
        assert "Unexpected error: boom" in out.getvalue()
