"""Diff statistics: merging `--name-status` and `--numstat` output.

The two diff modes are fetched independently and joined by the file's new
path, so the order in which they complete does not matter. Git is invoked
with -z; `nul_output_to_lines` regroups the NUL-separated tokens into the
tab-separated line form that `combine` consumes.
"""

import re
from dataclasses import dataclass, replace
from typing import Literal

from repohistory.enums import FileChangeType

from ._models import FileChange, ParseResult, StatusFiles

type DiffMode = Literal["--name-status", "--numstat"]

BINARY_SENTINEL = "-"
RENAME_ARROW = " => "

_STATUS_TOKEN_REGEX = re.compile(r"^[A-Z]\d*$")
_BRACE_RENAME_REGEX = re.compile(r"^(?P<prefix>.*)\{(?P<old>.*) => (?P<new>.*)\}(?P<suffix>.*)$")

_TWO_PATH_STATUSES = frozenset({"R", "C"})


@dataclass(frozen=True, slots=True)
class NumStat:
    """Line counts for one path. Counts are None for binary files."""

    path: str
    additions: int | None
    deletions: int | None


def diff_header_count(from_hash: str, to_hash: str) -> int:
    """Number of header lines printed before the file records."""
    return 1 if from_hash == to_hash else 0


def diff_args(mode: DiffMode, from_hash: str, to_hash: str) -> list[str]:
    """Build the diff arguments for a pair of revisions.

    When both revisions are the same commit, `diff-tree` lists the commit's
    own changes (against its first parent, or the empty tree for a root
    commit) and prints the commit hash first. An empty `to_hash` compares
    against the working tree.

    Returns:
        The arguments. See `diff_header_count` for the header lines printed.
    """
    if from_hash == to_hash:
        args = [
            "diff-tree",
            mode,
            "-r",
            "-m",
            "--root",
            "--find-renames",
            "--diff-filter=AMDR",
            "-z",
            from_hash,
        ]
        return args

    args = ["diff", mode, "--find-renames", "--diff-filter=AMDR", "-z", from_hash]
    if to_hash:
        args.append(to_hash)
    return args


def nul_output_to_lines(text: str, mode: DiffMode) -> list[str]:
    """Regroup -z diff output into one tab-separated line per file.

    name-status renames become `R100<TAB>old<TAB>new`; numstat renames become
    `adds<TAB>dels<TAB>new`. Tokens that are not part of a file record (the
    commit hash printed by diff-tree) are kept as lines of their own. Paths
    in -z output are literal, so none of them is in the abbreviated rename
    form.
    """
    tokens = text.split("\0")
    lines: list[str] = []
    i = 0
    while i < len(tokens) and tokens[i] != "":
        token = tokens[i]
        if mode == "--name-status":
            if _STATUS_TOKEN_REGEX.match(token) is None:
                lines.append(token)
                i += 1
            else:
                path_count = 2 if token[0] in _TWO_PATH_STATUSES else 1
                lines.append("\t".join(tokens[i : i + 1 + path_count]))
                i += 1 + path_count
        else:
            fields = token.split("\t")
            if len(fields) == 3 and fields[2] == "":
                new_path = tokens[i + 2] if i + 2 < len(tokens) else ""
                lines.append(f"{fields[0]}\t{fields[1]}\t{new_path}")
                i += 3
            else:
                lines.append(token)
                i += 1
    return lines


def change_type_for_status(status_token: str) -> FileChangeType | None:
    """Map a status token to a change type by its first character."""
    if not status_token:
        return None
    try:
        return FileChangeType(status_token[0])
    except ValueError:
        return None


def parse_name_status(lines: list[str]) -> ParseResult[FileChange]:
    """Parse `--name-status` lines into file changes with no counts.

    Truncation rule STOP: an unknown status or a line with the wrong number
    of paths ends the well-formed data.
    """
    changes: list[FileChange] = []
    for index, line in enumerate(lines):
        fields = line.split("\t")
        change_type = change_type_for_status(fields[0])
        expected = 3 if change_type is FileChangeType.RENAMED else 2
        if change_type is None or len(fields) != expected:
            return ParseResult(records=tuple(changes), skipped=len(lines) - index)
        old_path = fields[1]
        new_path = fields[2] if change_type is FileChangeType.RENAMED else old_path
        changes.append(
            FileChange(old_file_path=old_path, new_file_path=new_path, change_type=change_type)
        )
    return ParseResult(records=tuple(changes))


def resolve_rename_path(path_field: str) -> str:
    """Return the new path from a numstat path field.

    Two forms encode a rename:
    - brace shorthand `prefix{old => new}suffix`: the braces are replaced
      by the new part (an empty new part also drops the doubled slash)
    - arrow form `old => new`: the part after the arrow

    Any other path is returned unchanged.

    Examples:
        >>> resolve_rename_path("src/{a.txt => b.txt}")
        'src/b.txt'
        >>> resolve_rename_path("A.txt => B.txt")
        'B.txt'
        >>> resolve_rename_path("src/{old => }/a.txt")
        'src/a.txt'
    """
    brace = _BRACE_RENAME_REGEX.match(path_field)
    if brace is not None:
        prefix = brace.group("prefix")
        new = brace.group("new")
        suffix = brace.group("suffix")
        if new == "" and prefix.endswith("/") and suffix.startswith("/"):
            suffix = suffix[1:]
        return f"{prefix}{new}{suffix}"
    if RENAME_ARROW in path_field:
        return path_field.split(RENAME_ARROW, 1)[1]
    return path_field


def _parse_count(value: str) -> int | None:
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def parse_numstat(lines: list[str], *, resolve_renames: bool = True) -> ParseResult[NumStat]:
    """Parse `--numstat` lines.

    With `resolve_renames` false the path field is taken verbatim, as for
    lines regrouped from -z output.

    Truncation rule STOP: a line that does not hold three tab-separated
    fields, or whose counts are neither integers nor the binary sentinel,
    ends the well-formed data.
    """
    stats: list[NumStat] = []
    for index, line in enumerate(lines):
        fields = line.split("\t", 2)
        if len(fields) != 3:
            return ParseResult(records=tuple(stats), skipped=len(lines) - index)
        additions_token, deletions_token, path_field = fields
        if BINARY_SENTINEL in (additions_token, deletions_token):
            additions = deletions = None
        else:
            additions = _parse_count(additions_token)
            deletions = _parse_count(deletions_token)
            if additions is None or deletions is None:
                return ParseResult(records=tuple(stats), skipped=len(lines) - index)
        path = resolve_rename_path(path_field) if resolve_renames else path_field
        stats.append(NumStat(path=path, additions=additions, deletions=deletions))
    return ParseResult(records=tuple(stats))


def combine(
    name_status_lines: list[str],
    numstat_lines: list[str],
    skip_leading_count: int = 0,
    status: StatusFiles | None = None,
    *,
    resolve_renames: bool = True,
) -> ParseResult[FileChange]:
    """Merge name-status and numstat output into file change records.

    Args:
        name_status_lines: Tab-separated `--name-status` lines.
        numstat_lines: Tab-separated `--numstat` lines.
        skip_leading_count: Header lines to discard from both inputs.
        status: Working tree status, when comparing against the working
            tree. Deleted files are marked deleted and untracked files are
            appended.
        resolve_renames: Apply the textual rename rule to numstat paths.
            Pass false for lines built by `nul_output_to_lines`.

    Returns:
        File changes in name-status order, followed by status-only files,
        and the number of lines either parser discarded.
    """
    name_status = parse_name_status(name_status_lines[skip_leading_count:])
    numstat = parse_numstat(numstat_lines[skip_leading_count:], resolve_renames=resolve_renames)

    changes = list(name_status.records)
    positions = {change.new_file_path: index for index, change in enumerate(changes)}

    if status is not None:
        for path in status.deleted:
            if path in positions:
                changes[positions[path]] = replace(
                    changes[positions[path]], change_type=FileChangeType.DELETED
                )
            else:
                changes.append(
                    FileChange(old_file_path=path, new_file_path=path, change_type=FileChangeType.DELETED)
                )
        changes.extend(
            FileChange(old_file_path=path, new_file_path=path, change_type=FileChangeType.UNTRACKED)
            for path in status.untracked
        )

    for stat in numstat.records:
        position = positions.get(stat.path)
        if position is not None:
            changes[position] = replace(
                changes[position], additions=stat.additions, deletions=stat.deletions
            )

    return ParseResult(
        records=tuple(changes), skipped=name_status.skipped + numstat.skipped
    )
