"""Unit tests for content_converter.markdown_converter module."""

import pytest
from unittest.mock import patch, MagicMock
import subprocess
from src.content_converter.markdown_converter import PANDOC_TIMEOUT, MarkdownConverter
from src.confluence_client.errors import ConversionError


@pytest.fixture
def converter():
    with patch('shutil.which', return_value='/usr/bin/pandoc'):
        return MarkdownConverter()


class TestMarkdownConverterInit:
    """Test cases for MarkdownConverter initialization."""

    @patch('shutil.which', return_value='/usr/bin/pandoc')
    def test_init_succeeds_when_pandoc_installed(self, mock_which):
        MarkdownConverter()

        mock_which.assert_called_once_with("pandoc")

    @patch('shutil.which', return_value=None)
    def test_init_raises_error_when_pandoc_not_installed(self, mock_which):
        with pytest.raises(ConversionError) as exc_info:
            MarkdownConverter()

        assert "Pandoc not found" in str(exc_info.value)
        assert "brew install pandoc" in str(exc_info.value)


class TestMarkdownToStorage:
    """Test cases for MarkdownConverter.markdown_to_storage() method."""

    @patch('subprocess.run')
    def test_markdown_to_storage_success(self, mock_run, converter):
        mock_run.return_value = MagicMock(stdout='<h1 id="title">Title</h1>\n')

        result = converter.markdown_to_storage("# Title")

        assert result == '<h1 id="title">Title</h1>'

    @patch('subprocess.run')
    def test_uses_correct_pandoc_args(self, mock_run, converter):
        mock_run.return_value = MagicMock(stdout='<p>x</p>')

        converter.markdown_to_storage("x")

        mock_run.assert_called_once_with(
            ["pandoc", "-f", "gfm", "-t", "html", "--wrap=none"],
            input="x",
            text=True,
            capture_output=True,
            check=True,
            timeout=PANDOC_TIMEOUT,
        )

    @patch('subprocess.run')
    def test_empty_markdown_skips_pandoc(self, mock_run, converter):
        assert converter.markdown_to_storage("  \n") == ""
        mock_run.assert_not_called()

    @patch('subprocess.run')
    def test_void_elements_are_closed(self, mock_run, converter):
        mock_run.return_value = MagicMock(
            stdout='<p>a<br>b</p><hr><img src="x.png" alt="x"><br />'
        )

        result = converter.markdown_to_storage("a  \nb")

        assert result == '<p>a<br />b</p><hr /><img src="x.png" alt="x" /><br />'

    @patch('subprocess.run')
    def test_raises_on_pandoc_error(self, mock_run, converter):
        mock_run.side_effect = subprocess.CalledProcessError(1, "pandoc", stderr="bad input")

        with pytest.raises(ConversionError) as exc_info:
            converter.markdown_to_storage("# Title")

        assert "bad input" in str(exc_info.value)

    @patch('subprocess.run')
    def test_raises_on_timeout(self, mock_run, converter):
        mock_run.side_effect = subprocess.TimeoutExpired("pandoc", PANDOC_TIMEOUT)

        with pytest.raises(ConversionError) as exc_info:
            converter.markdown_to_storage("# Title")

        assert "timed out" in str(exc_info.value)
