"""Safe configuration loading for library entry points."""

import os
import sys
from pathlib import Path

from repohistory.exceptions import ConfigError

from ._models import Config


def safe_load_config(
    *,
    config_path: Path | None = None,
    search_from: Path | None = None,
) -> tuple[Config, str | None]:
    """Load configuration, falling back to defaults on error.

    Behaviour on error depends on REPOHISTORY_STRICT_CONFIG:
    - If unset or "0": warn to stderr and return the default config
    - If "1": fail fast with sys.exit(1)

    Args:
        config_path: Explicit path to a TOML config file.
        search_from: Directory to start the config file search from.

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    strict_mode = os.environ.get("REPOHISTORY_STRICT_CONFIG", "0") == "1"

    try:
        config = Config.load(config_path=config_path, search_from=search_from)
    except (ConfigError, OSError) as e:
        error_msg = f"Failed to load config: {e}"
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
        print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}), error_msg
    else:
        return config, None
