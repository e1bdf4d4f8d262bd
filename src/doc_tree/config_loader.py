"""Loading and validation of the publish configuration.

Settings come from an optional YAML file, overridden by environment
variables so the same file can serve local runs and CI:

    space_key: "DOCS"              # CONFLUENCE_SPACE_KEY
    parent_page: "Engineering"     # CONFLUENCE_PARENT_PAGE
    mkdocs_file: "mkdocs.yml"
    repo: "acme/widgets"
    max_workers: 1
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError, FilesystemError
from .models import PublishConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".confluence-publish/config.yaml"


class ConfigLoader:
    """Builds a PublishConfig from a YAML file and the environment."""

    REQUIRED_FIELDS = {'space_key'}

    KNOWN_FIELDS = {'space_key', 'parent_page', 'mkdocs_file', 'repo', 'max_workers'}

    ENV_OVERRIDES = {
        'CONFLUENCE_SPACE_KEY': 'space_key',
        'CONFLUENCE_PARENT_PAGE': 'parent_page',
    }

    DEFAULTS = {
        'parent_page': None,
        'mkdocs_file': 'mkdocs.yml',
        'repo': None,
        'max_workers': 1,
    }

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> PublishConfig:
        """Load the configuration.

        Args:
            config_path: Path of the YAML file
            required: If True, a missing file is an error; otherwise the
                      environment alone may provide the settings

        Returns:
            Validated PublishConfig

        Raises:
            FilesystemError: If the file exists but cannot be read, or is
                             missing while required
            ConfigError: If the configuration is invalid
        """
        config_dict: Dict[str, Any] = {}
        if Path(config_path).exists():
            config_dict = cls._read(config_path)
            logger.debug(f"Loaded configuration from {config_path}")
        elif required:
            raise FilesystemError(config_path, 'read', 'Configuration file not found')
        else:
            logger.debug(f"No configuration file at {config_path}, using environment only")

        for env_name, field_name in cls.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config_dict[field_name] = value

        return cls._parse_config(config_dict)

    @classmethod
    def _read(cls, config_path: str) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return {}
        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )
        return config_dict

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> PublishConfig:
        missing_fields = cls.REQUIRED_FIELDS - {k for k, v in config_dict.items() if v}
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))} "
                f"(set it in the config file or CONFLUENCE_SPACE_KEY)"
            )

        unknown = set(config_dict) - cls.KNOWN_FIELDS
        if unknown:
            logger.warning(f"Ignoring unknown configuration fields: {', '.join(sorted(unknown))}")

        values = {**cls.DEFAULTS, **{k: v for k, v in config_dict.items() if k in cls.KNOWN_FIELDS}}

        space_key = str(values['space_key']).strip()
        if not space_key:
            raise ConfigError("Field 'space_key' cannot be empty", 'space_key')

        try:
            max_workers = int(values['max_workers'])
        except (TypeError, ValueError):
            raise ConfigError(
                f"Field 'max_workers' must be an integer, got {values['max_workers']!r}",
                'max_workers'
            )
        if max_workers < 1:
            raise ConfigError(
                f"Field 'max_workers' must be at least 1, got {max_workers}",
                'max_workers'
            )

        return PublishConfig(
            space_key=space_key,
            parent_page=_optional_str(values['parent_page']),
            mkdocs_file=str(values['mkdocs_file'] or cls.DEFAULTS['mkdocs_file']),
            repo=_optional_str(values['repo']),
            max_workers=max_workers,
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
