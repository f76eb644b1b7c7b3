"""
Configuration package for tagsearch.

Finds, reads and validates YAML settings files.
"""

from .parser import (
    ConfigParser,
    ConfigParseResult,
    ConfigurationError,
    load_config,
    merge_settings,
    create_config_template
)

__all__ = [
    'ConfigParser',
    'ConfigParseResult',
    'ConfigurationError',
    'load_config',
    'merge_settings',
    'create_config_template'
]
