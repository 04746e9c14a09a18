"""Discovery and version checks for the git executable."""

import re
import shutil
from dataclasses import dataclass

from ._models import CommandOutput
from ._runner import run_command

_VERSION_REGEX = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?")

# Oldest git that understands the %G? / %GS / %GK format placeholders
SIGNATURE_FORMAT_MIN_VERSION = "2.4.0"

UNABLE_TO_FIND_GIT_MSG = (
    "Unable to find a Git executable. Either set the git.path configuration "
    "value to an existing Git executable, or install Git and add it to PATH."
)


@dataclass(frozen=True, slots=True)
class GitExecutable:
    """A usable git executable.

    Attributes:
        path: Path to the executable.
        version: Version string as reported by `git --version`.
    """

    path: str
    version: str


def parse_version(version: str) -> tuple[int, int, int] | None:
    """Parse the leading major.minor.patch of a git version string.

    Examples:
        >>> parse_version("2.39.2")
        (2, 39, 2)
        >>> parse_version("2.30.1.windows.1")
        (2, 30, 1)
        >>> parse_version("2")
        (2, 0, 0)
    """
    match = _VERSION_REGEX.match(version.strip())
    if match is None:
        return None
    major, minor, patch = match.groups()
    return (int(major), int(minor or 0), int(patch or 0))


def is_git_at_least(executable: GitExecutable, required: str) -> bool:
    """Check whether the executable's version is at least `required`.

    Unparseable versions are treated as not meeting the requirement.
    """
    have = parse_version(executable.version)
    want = parse_version(required)
    if have is None or want is None:
        return False
    return have >= want


async def get_git_executable(path: str) -> GitExecutable | None:
    """Probe `path` with `--version`.

    Returns:
        The executable, or None if it cannot be run or is not git.
    """
    result = await run_command(path, ["--version"], None)
    if not isinstance(result, CommandOutput) or result.exit_code != 0:
        return None
    version = result.stdout.strip()
    if not version.startswith("git version "):
        return None
    return GitExecutable(path=path, version=version.removeprefix("git version "))


async def find_git(configured_path: str = "") -> GitExecutable | None:
    """Locate a git executable.

    The configured path is tried first, then `git` on PATH.

    Args:
        configured_path: Path from the git.path configuration value.

    Returns:
        The first working executable, or None if none is found.
    """
    candidates: list[str] = []
    if configured_path:
        candidates.append(configured_path)
    on_path = shutil.which("git")
    if on_path is not None and on_path not in candidates:
        candidates.append(on_path)

    for candidate in candidates:
        executable = await get_git_executable(candidate)
        if executable is not None:
            return executable
    return None
