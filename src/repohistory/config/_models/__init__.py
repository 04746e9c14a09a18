"""Configuration models."""

from ._common import ConfigSource, ConfigSourceName, LogFormat, LogLevel
from ._config import Config, find_config_file
from ._git import GitConfig
from ._graph import GraphConfig
from ._logging import LoggingConfig

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "GitConfig",
    "GraphConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "find_config_file",
]
