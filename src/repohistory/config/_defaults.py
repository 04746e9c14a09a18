"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be fed to deep_merge; the merge
functions copy it, so callers never mutate the original.
"""

from typing import Any

# 64 MiB
DEFAULT_MAX_OUTPUT_BYTES: int = 64 * 1024 * 1024

DEFAULT_CONFIG_FILENAME = "repohistory.toml"

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "graph": {
        "date_type": "commit",
        "use_mailmap": False,
        "commit_ordering": "date",
        "show_uncommitted_changes": True,
        "show_untracked_files": True,
        "show_tags": True,
        "show_commits_only_referenced_by_tags": True,
        "show_stashes": False,
        "show_signature_status": False,
    },
    "git": {
        "path": "",
        "file_encoding": "utf-8",
        "max_parallel": 4,
        "max_output_bytes": DEFAULT_MAX_OUTPUT_BYTES,
    },
}
