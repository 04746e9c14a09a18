"""Enumeration types for repohistory."""

from enum import StrEnum


class RefKind(StrEnum):
    """Kinds of references attached to commits."""

    HEAD = "head"
    TAG = "tag"
    REMOTE = "remote"


class FileChangeType(StrEnum):
    """Change types reported for a file, keyed by git's status letter."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    UNTRACKED = "U"


class CommitOrdering(StrEnum):
    """Ordering of commits returned by `git log`."""

    DATE = "date"
    AUTHOR_DATE = "author-date"
    TOPOLOGICAL = "topo"


class DateType(StrEnum):
    """Which timestamp of a commit is reported as its date."""

    AUTHOR = "author"
    COMMIT = "commit"


class ConfigLocation(StrEnum):
    """Scopes accepted by `git config --list`."""

    LOCAL = "local"
    GLOBAL = "global"
    SYSTEM = "system"


class FailureKind(StrEnum):
    """Classification of a failed git invocation.

    - SPAWN: the executable could not be started
    - TOOL: git ran and exited with a non-zero status
    - NOT_A_REPOSITORY: a TOOL failure caused by a path outside any repository
    - EXECUTABLE_UNKNOWN: no git executable has been configured or found
    """

    SPAWN = "spawn"
    TOOL = "tool"
    NOT_A_REPOSITORY = "not_a_repository"
    EXECUTABLE_UNKNOWN = "executable_unknown"


class SignatureStatus(StrEnum):
    """GPG signature verification codes emitted by `%G?`."""

    GOOD = "G"
    GOOD_UNKNOWN_VALIDITY = "U"
    GOOD_EXPIRED = "X"
    GOOD_EXPIRED_KEY = "Y"
    GOOD_REVOKED_KEY = "R"
    CANNOT_CHECK = "E"
    BAD = "B"
