"""Branches, remotes, settings, tags and submodules of a repository."""

import re
from collections.abc import Iterable, Sequence

from repohistory.enums import ConfigLocation

from ._formats import FIELD_SEPARATOR
from ._models import BranchListing, TagDetails
from ._records import output_lines, parse_body_record, parse_int

CONFIG_USER_NAME = "user.name"
CONFIG_USER_EMAIL = "user.email"

# Entries such as "(HEAD detached at 1a2b3c4)"
_INVALID_BRANCH_REGEX = re.compile(r"^\(.* .*\)$")

_SECTION_REGEX = re.compile(r"^\s*\[.*\]\s*$")
_SUBMODULE_SECTION_REGEX = re.compile(r'^\s*\[submodule "([^"]+)"\]\s*$')
_PATH_PROPERTY_REGEX = re.compile(r"^\s*path\s+=\s+(.*)$")


def branch_args(*, show_remote_branches: bool) -> list[str]:
    args = ["branch"]
    if show_remote_branches:
        args.append("-a")
    args.append("--no-color")
    return args


def parse_branches(text: str, hide_remotes: Sequence[str] = ()) -> BranchListing:
    """Parse `git branch [-a] --no-color` output.

    The checked-out branch (marked with `*`) is listed first. Detached HEAD
    entries and branches of hidden remotes are left out; symbolic remote
    branches keep only their own name.
    """
    hidden_prefixes = tuple(f"remotes/{remote}/" for remote in hide_remotes)
    branches: list[str] = []
    head: str | None = None
    for line in output_lines(text):
        name = line[2:].split(" -> ")[0]
        if _INVALID_BRANCH_REGEX.match(name) or name.startswith(hidden_prefixes):
            continue
        if line.startswith("*"):
            head = name
            branches.insert(0, name)
        else:
            branches.append(name)
    return BranchListing(branches=tuple(branches), head=head)


def parse_remotes(text: str) -> tuple[str, ...]:
    return tuple(output_lines(text))


def config_list_args(location: ConfigLocation) -> list[str]:
    return ["--no-pager", "config", "--list", f"--{location.value}"]


def get_configs(config_lines: Iterable[str], names: Sequence[str]) -> dict[str, str | None]:
    """Pick the values of `names` from `git config --list` lines.

    Names missing from the output map to None. When a name occurs more than
    once the last occurrence wins, matching git's own resolution.
    """
    results: dict[str, str | None] = dict.fromkeys(names)
    for line in config_lines:
        key, separator, value = line.partition("=")
        if separator and key in results:
            results[key] = value
    return results


def remote_url_args(remote: str) -> list[str]:
    return ["config", "--get", f"remote.{remote}.url"]


def tag_details_args(tag_name: str, separator: str = FIELD_SEPARATOR) -> list[str]:
    tag_format = separator.join(
        ["%(objectname)", "%(taggername)", "%(taggeremail)", "%(taggerdate:unix)", "%(contents)"]
    )
    return ["for-each-ref", f"refs/tags/{tag_name}", f"--format={tag_format}"]


def parse_tag_details(text: str, separator: str = FIELD_SEPARATOR) -> TagDetails | None:
    """Parse `for-each-ref` output for a single annotated tag."""
    fields = parse_body_record(text, separator, 4)
    if fields is None:
        return None
    tag_hash, name, email, date, message = fields
    return TagDetails(
        tag_hash=tag_hash,
        name=name,
        email=email.removeprefix("<").removesuffix(">"),
        date=parse_int(date),
        message=message,
    )


def commit_subject_args(commit_hash: str) -> list[str]:
    return ["log", "--format=%s", "-n", "1", commit_hash, "--"]


def normalize_subject(text: str) -> str:
    return " ".join(text.split())


def parse_gitmodules_paths(text: str) -> list[str]:
    """Return the `path` values of the [submodule] sections of a .gitmodules file."""
    paths: list[str] = []
    in_submodule_section = False
    for line in output_lines(text):
        if _SECTION_REGEX.match(line):
            in_submodule_section = _SUBMODULE_SECTION_REGEX.match(line) is not None
            continue
        if in_submodule_section and (match := _PATH_PROPERTY_REGEX.match(line)):
            paths.append(match.group(1).strip())
    return paths
