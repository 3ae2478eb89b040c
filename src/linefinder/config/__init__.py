"""Settings file loading for linefinder."""

from ..exceptions import ConfigurationError
from .parser import (
    SettingsParser,
    SettingsParseResult,
    find_settings_file,
    load_settings,
)

__all__ = [
    'SettingsParser',
    'SettingsParseResult',
    'ConfigurationError',
    'find_settings_file',
    'load_settings',
]
