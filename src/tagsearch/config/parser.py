"""
Loading tagsearch settings from YAML.

Settings are layered: built-in defaults, then the first settings file found
(or the one named with ``--config``), then command-line overrides. The merged
result is validated once, so a bad value is reported the same way whichever
layer it came from.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..errors import TagsearchError
from ..models.config import TagsearchConfig


logger = logging.getLogger(__name__)


# Leading comment for each top-level key in a generated settings file
SECTION_COMMENTS = {
    'roots': "Directories searched when no --root is given",
    'extensions': "Only files with these suffixes are read (case-insensitive)",
    'ignore': "fnmatch patterns; without '/' they match any path component",
    'limits': "Discovery stops after max_files; larger files are skipped",
    'extraction': "strategy is 'regex' or 'scanner'; both find the same tags",
    'output': "Defaults for --long and --vim",
}


@dataclass
class ConfigParseResult:
    """
    Outcome of loading settings.

    Attributes:
        config: The validated configuration
        warnings: Non-fatal problems found in it
        config_path: Settings file that was read, if any
        is_default: True when no settings file was read
    """
    config: TagsearchConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(TagsearchError):
    """Raised when settings cannot be read or do not validate."""
    pass


def merge_settings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge override values into settings, section by section.

    Nested mappings are merged key by key, so overriding
    ``limits.max_workers`` keeps the file's ``limits.max_files``.
    Any other value replaces the base value outright.

    Args:
        base: Settings read from a file
        overrides: Values that take precedence

    Returns:
        A new merged dictionary; neither argument is modified
    """
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


class ConfigParser:
    """
    Finds, reads and validates tagsearch settings.

    In strict mode any warning from ``TagsearchConfig.validate_configuration``
    (a missing root, an unusual extension) is raised as a ConfigurationError
    instead of being returned.
    """

    DEFAULT_CONFIG_NAMES = [
        '.tagsearch.yaml',
        '.tagsearch.yml',
        'tagsearch.yaml',
        'tagsearch.yml'
    ]

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def search_directories() -> List[Path]:
        """Directories checked for a settings file, most specific first."""
        return [Path.cwd(), Path.home(), Path.home() / '.config' / 'tagsearch']

    def discover(self) -> Optional[Path]:
        """
        Locate the settings file to use when none is named.

        Returns:
            The first existing file, trying every name in one directory
            before moving to the next, or None
        """
        for directory in self.search_directories():
            for name in self.DEFAULT_CONFIG_NAMES:
                candidate = directory / name
                if candidate.is_file():
                    self.logger.debug(f"Discovered settings file {candidate}")
                    return candidate
        return None

    def load_config(
        self,
        config_path: Optional[Union[str, Path]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ConfigParseResult:
        """
        Build the effective configuration.

        Args:
            config_path: Settings file to read; discovered when None
            overrides: Values that win over the file, e.g. from command-line flags

        Returns:
            ConfigParseResult with the validated configuration and its warnings

        Raises:
            ConfigurationError: If the file is missing or unreadable, is not a
                YAML mapping, or the merged settings do not validate
        """
        if config_path is not None:
            path = Path(config_path).expanduser()
            if not path.is_file():
                raise ConfigurationError(f"Configuration file not found: {path}")
        else:
            path = self.discover()

        settings = self.read_settings(path) if path is not None else {}
        origin = str(path) if path is not None else "defaults"
        if overrides:
            settings = merge_settings(settings, overrides)
            origin += " and command-line options"

        config = self._build_config(settings, origin)

        warnings = config.validate_configuration()
        if path is None:
            warnings.append("No configuration file found, using default settings")

        if self.strict_mode and warnings:
            raise ConfigurationError(f"Rejected in strict mode: {'; '.join(warnings)}")

        self.logger.info(f"Using settings from {origin}")
        return ConfigParseResult(
            config=config,
            warnings=warnings,
            config_path=path,
            is_default=path is None
        )

    def read_settings(self, path: Path) -> Dict[str, Any]:
        """
        Parse one settings file.

        An empty file, or one holding only comments, yields no settings.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid YAML
                or its top level is not a mapping
        """
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{path} must hold a mapping of settings, not a {type(data).__name__}"
            )
        return data

    def _build_config(self, settings: Dict[str, Any], origin: str) -> TagsearchConfig:
        try:
            return TagsearchConfig.from_dict(settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings from {origin}: {e}") from e

    def get_config_template(self) -> str:
        """
        Render a commented settings file showing every option.

        Values are the defaults, plus an example extra root and ignore pattern.
        """
        example = TagsearchConfig().to_dict()
        example['roots'] = ['.', '~/notes']
        example['ignore'] = example['ignore'] + ['archive/*']

        chunks = ["# tagsearch settings", "# Keys left out keep their default value.", ""]
        for key, value in example.items():
            chunks.append(f"# {SECTION_COMMENTS[key]}")
            chunks.append(yaml.safe_dump({key: value}, default_flow_style=False, sort_keys=False).rstrip())
            chunks.append("")
        return "\n".join(chunks)


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    strict_mode: bool = False,
) -> ConfigParseResult:
    """Load settings with a fresh ConfigParser."""
    return ConfigParser(strict_mode=strict_mode).load_config(config_path, overrides)


def create_config_template(output_path: Union[str, Path], overwrite: bool = False) -> Path:
    """
    Write the commented settings template.

    Args:
        output_path: Destination file; missing parent directories are created
        overwrite: Replace an existing file instead of refusing

    Returns:
        The path written

    Raises:
        ConfigurationError: If the file exists and overwrite is False, or it
            cannot be written
    """
    path = Path(output_path).expanduser()
    if path.exists() and not overwrite:
        raise ConfigurationError(f"Refusing to overwrite existing file: {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ConfigParser().get_config_template(), encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Cannot write template {path}: {e}") from e

    logger.info(f"Wrote settings template to {path}")
    return path
