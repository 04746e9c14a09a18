"""repohistory configuration.

This module provides the public API for configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from repohistory.config import Config
    >>> config = Config.load()
    >>> config.graph.commit_ordering
    <CommitOrdering.DATE: 'date'>
"""

from repohistory.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_FILENAME
from ._load import safe_load_config
from ._loader import deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    GitConfig,
    GraphConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    find_config_file,
)
from ._validation import ValidationIssue, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "GitConfig",
    "GraphConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ValidationIssue",
    "deep_merge",
    "find_config_file",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
