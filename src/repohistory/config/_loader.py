# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Raw configuration layers for repohistory.

Settings come from the built-in defaults, then `repohistory.toml`, then
`REPOHISTORY_*` environment variables, each later layer winning. The
functions here turn a layer into a plain nested dict and fold layers
together. Validation happens afterwards, in the pydantic models.
"""

import contextlib
import copy
import json
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

from repohistory.exceptions import ConfigLoadError

ENV_PREFIX = "REPOHISTORY_"

# REPOHISTORY_GIT__MAX_PARALLEL addresses git.max_parallel
ENV_NESTING_SEPARATOR = "__"

_BOOLEAN_WORDS = {"true": True, "false": False}
_JSON_DELIMITERS = (("[", "]"), ("{", "}"))


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Load a single repohistory.toml.

    Raises:
        FileNotFoundError: If `path` does not exist. Discovery treats this
            as "no file" rather than as an error.
        ConfigLoadError: If the file is not valid TOML. The error carries
            the path and, on interpreters that report it, the position.
    """
    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Failed to parse TOML file: {e}"
            # lineno and colno only exist from Python 3.14
            raise ConfigLoadError(
                msg, path=path, line=getattr(e, "lineno", None), column=getattr(e, "colno", None)
            ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Return `base` with `override` layered on top of it.

    Tables present in both merge key by key. Any other value from `override`
    replaces the one in `base` outright, so `graph.hide_remotes = ["x"]`
    does not extend the default list. The result shares no mutable state
    with either argument.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect environment overrides into a nested dict.

    `REPOHISTORY_GRAPH__COMMIT_ORDERING=topo` becomes
    `{"graph": {"commit_ordering": "topo"}}`. Names are lowercased, and a
    variable named exactly `prefix` is ignored. Variables are applied in
    sorted order, so a conflicting pair resolves the same way every run.
    """
    overrides: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
    for name in sorted(os.environ):
        if not name.startswith(prefix) or name == prefix:
            continue
        key_path = name[len(prefix) :].replace(ENV_NESTING_SEPARATOR, ".").lower()
        set_nested_key(overrides, key_path, parse_env_value(os.environ[name]))
    return overrides


def _boolean(value: str) -> bool:
    try:
        return _BOOLEAN_WORDS[value.lower()]
    except KeyError:
        raise ValueError(value) from None


def _decimal(value: str) -> float:
    if "." not in value:
        raise ValueError(value)
    return float(value)


def _json_container(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    if (value[:1], value[-1:]) not in _JSON_DELIMITERS:
        raise ValueError(value)
    # JSONDecodeError is a ValueError
    return json.loads(value)


# Tried in order; the first that accepts the string wins.
_ENV_CONVERTERS: tuple[Callable[[str], Any], ...] = (  # pyright: ignore[reportExplicitAny]
    _boolean,
    int,
    _decimal,
    _json_container,
)


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Give an environment string the type it would have had in TOML.

    Booleans are matched case-insensitively. Decimals need a point, so
    `"1.2.3"` and `"8"` are not floats. JSON is only attempted for text
    wrapped in brackets or braces. Anything unconvertible stays a string.
    """
    for convert in _ENV_CONVERTERS:
        with contextlib.suppress(ValueError):
            return convert(value)
    return value


def set_nested_key(
    target: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Assign `value` at the dotted `key_path` inside `target`.

    Missing tables are created. A non-table value sitting on the path is
    replaced by a table, e.g. `git.path` under `{"git": "off"}`.
    """
    *parents, leaf = key_path.split(".")
    table = target
    for part in parents:
        child = table.get(part)
        if not isinstance(child, dict):
            child = table[part] = {}
        table = child
    table[leaf] = value
