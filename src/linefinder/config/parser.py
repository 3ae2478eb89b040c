"""
YAML settings loader for linefinder.

Engine settings (worker cap, encoding, highlight style, csv dialect) may be
kept in a small YAML file. An explicit path wins; otherwise the first
``linefinder.yaml``-style file found in the working directory, the home
directory or ``~/.config/linefinder`` is used, and the built-in defaults
apply when there is none.
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from ..models.config import EngineSettings, validate_settings_dict


logger = logging.getLogger(__name__)

SETTINGS_FILE_NAMES = (
    '.linefinder.yaml',
    '.linefinder.yml',
    'linefinder.yaml',
    'linefinder.yml',
)


@dataclass
class SettingsParseResult:
    """Settings together with where they came from and any warnings."""
    settings: EngineSettings
    config_path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def is_default(self) -> bool:
        return self.config_path is None


def _candidate_files() -> Iterator[Path]:
    for directory in (Path.cwd(), Path.home(), Path.home() / '.config' / 'linefinder'):
        for name in SETTINGS_FILE_NAMES:
            yield directory / name


def find_settings_file() -> Optional[Path]:
    """Return the first settings file in the default locations, if any."""
    for candidate in _candidate_files():
        if candidate.is_file():
            return candidate
    return None


def read_settings_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML settings file into a mapping.

    An empty file reads as an empty mapping.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML or
            does not hold a mapping
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file {path}: {e}", original_error=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a YAML object, got {type(data).__name__}")
    return data


class SettingsParser:
    """
    Builds EngineSettings from a settings file or from the defaults.

    In strict mode any settings warning is raised as a ConfigurationError.
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def load_settings(self, config_path: Optional[Union[str, Path]] = None) -> SettingsParseResult:
        """
        Load settings from ``config_path`` or from a discovered settings file.

        Args:
            config_path: Settings file to use; None searches the default locations

        Returns:
            SettingsParseResult with the validated settings

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigurationError(f"Settings file not found: {path}")
        else:
            path = find_settings_file()

        data = read_settings_file(path) if path is not None else {}
        try:
            settings = EngineSettings.from_dict(validate_settings_dict(data))
        except ValueError as e:
            raise ConfigurationError(f"Settings validation failed: {e}", original_error=e) from e

        warnings = settings.validate_settings()
        if self.strict_mode and warnings:
            raise ConfigurationError(f"Settings warnings in strict mode: {'; '.join(warnings)}")

        if path is None:
            warnings.append("No settings file found, using default settings")
        logger.debug(f"Settings loaded from {path or 'defaults'}: {settings}")

        return SettingsParseResult(settings=settings, config_path=path, warnings=warnings)


def load_settings(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> SettingsParseResult:
    """Load settings with a fresh SettingsParser."""
    return SettingsParser(strict_mode=strict_mode).load_settings(config_path)
