"""Working tree status from `git status --porcelain`."""

from ._models import StatusFiles
from ._records import output_lines


def _untracked_files_arg(show_untracked_files: bool) -> str:  # noqa: FBT001
    return f"--untracked-files={'all' if show_untracked_files else 'no'}"


def uncommitted_count_args(*, show_untracked_files: bool) -> list[str]:
    return ["status", _untracked_files_arg(show_untracked_files), "--porcelain"]


def status_files_args(*, show_untracked_files: bool) -> list[str]:
    return ["status", "-s", _untracked_files_arg(show_untracked_files), "--porcelain", "-z"]


def count_uncommitted_changes(text: str) -> int:
    """Count the changed paths listed by `git status --porcelain`."""
    return sum(1 for line in output_lines(text) if line)


def parse_status_files(text: str) -> StatusFiles:
    """Extract deleted and untracked paths from `status --porcelain -z` output.

    Each entry is `XY path`. Renames and copies are followed by an extra
    token holding the original path, which is skipped. An entry shorter than
    `XY path` ends the well-formed data.
    """
    tokens = text.split("\0")
    deleted: list[str] = []
    untracked: list[str] = []
    i = 0
    while i < len(tokens) and tokens[i] != "":
        entry = tokens[i]
        if len(entry) < 4:
            break
        index_status, worktree_status, path = entry[0], entry[1], entry[3:]
        codes = (index_status, worktree_status)
        if "D" in codes:
            deleted.append(path)
        elif "?" in codes:
            untracked.append(path)
        i += 2 if ("R" in codes or "C" in codes) else 1
    return StatusFiles(deleted=tuple(deleted), untracked=tuple(untracked))
