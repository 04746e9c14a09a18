# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing repohistory configuration values.
"""

from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, PrivateAttr

from repohistory.config._defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_FILENAME
from repohistory.config._loader import deep_merge, parse_env_vars, read_toml_file
from repohistory.config._models._common import ConfigSource, ConfigSourceName
from repohistory.config._models._git import GitConfig
from repohistory.config._models._graph import GraphConfig
from repohistory.config._models._logging import LoggingConfig


def find_config_file(start: Path | None = None) -> Path | None:
    """Search upward from `start` for a repohistory.toml file.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        Path to the nearest config file, or None if none exists.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class Config(BaseModel):
    """Configuration container with typed access.

    Instances are immutable. Use the factory methods rather than the
    constructor so that defaults are merged and values validated.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    git: GitConfig = GitConfig()
    graph: GraphConfig = GraphConfig()
    logging: LoggingConfig = LoggingConfig()

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def _build(cls, merged: dict[str, Any], sources: tuple[ConfigSource, ...]) -> Self:
        # Deferred import to avoid circular dependency
        from repohistory.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        schema, issues = validate_config(merged)
        source = next((str(s.path) for s in sources if s.path is not None), None)
        raise_if_validation_errors(issues, source=source)
        assert schema is not None  # noqa: S101

        config = cls(git=schema.git, graph=schema.graph, logging=schema.logging)
        config._data = merged
        config._sources = sources
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.FILE, path=path, exists=True, values=data
        )
        return cls._build(deep_merge(DEFAULT_CONFIG, data), (source,))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        search_from: Path | None = None,
        include_env: bool = True,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged in precedence order (defaults -> file -> env).

        Args:
            config_path: Explicit TOML file. If None, search upward from
                `search_from` for repohistory.toml.
            search_from: Directory to start the config file search from.
            include_env: Include REPOHISTORY_* environment variables.

        Raises:
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If merged config fails validation.
        """
        sources: list[ConfigSource] = [
            ConfigSource(
                name=ConfigSourceName.DEFAULT,
                path=None,
                exists=True,
                values=DEFAULT_CONFIG,
            )
        ]

        path = config_path if config_path is not None else find_config_file(search_from)
        if path is not None:
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.FILE,
                    path=path,
                    exists=True,
                    values=read_toml_file(path),
                )
            )

        if include_env:
            env_values = parse_env_vars()
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.ENV,
                    path=None,
                    exists=bool(env_values),
                    values=env_values,
                )
            )

        merged: dict[str, Any] = {}
        for source in sources:
            if source.values:
                merged = deep_merge(merged, source.values)

        # Highest precedence first, matching ConfigSourceName ordering
        return cls._build(merged, tuple(reversed(sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config = Config.from_dict({})
            >>> config.get("graph.commit_ordering")
            'date'
            >>> config.get("missing.key", 1)
            1
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current
