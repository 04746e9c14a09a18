"""Data models for repository history extraction.

This module defines the immutable records produced by the parsers and the
result shapes returned by GitDataSource:
- CommandOutput / SpawnFailure: raw outcome of one git invocation
- ToolFailure: classified failure carried by Err
- Ok / Err: tagged success/failure variant for a single query
- CommitRecord, Reference, StashEntry, FileChange: parsed records
- RepoSnapshot and the other *Result types: aggregate results that carry
  either data or an error message, never both
"""

from dataclasses import dataclass, field

from repohistory.enums import FailureKind, FileChangeType, RefKind, SignatureStatus

# Reserved hash of the synthetic uncommitted changes commit
UNCOMMITTED = "*"


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Outcome of a git process that started and exited.

    Attributes:
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        exit_code: Process exit status.
        truncated: Whether stdout exceeded the buffer bound and was cut.
    """

    stdout: str
    stderr: str
    exit_code: int
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class SpawnFailure:
    """The git process could not be started.

    Attributes:
        message: The underlying OS error text, newline-normalized.
    """

    message: str


type CommandResult = CommandOutput | SpawnFailure


@dataclass(frozen=True, slots=True)
class ToolFailure:
    """A classified failure of a git query.

    Attributes:
        kind: What went wrong.
        message: Human-readable message, possibly empty.
    """

    kind: FailureKind
    message: str


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful query result."""

    value: T


@dataclass(frozen=True, slots=True)
class Err:
    """Failed query result."""

    failure: ToolFailure

    @property
    def message(self) -> str:
        return self.failure.message


type Outcome[T] = Ok[T] | Err


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Records parsed from tool output.

    Attributes:
        records: Well-formed records in output order.
        skipped: Number of lines discarded by the parser's truncation rule.
    """

    records: tuple[T, ...]
    skipped: int = 0


@dataclass(frozen=True, slots=True)
class Reference:
    """A named pointer to a commit.

    Attributes:
        hash: Hash of the commit the reference resolves to.
        name: Display name without the refs/<kind>/ prefix.
        kind: Head, tag or remote-tracking branch.
        annotated: Whether a tag is annotated (always False for other kinds).
        remote: Remote owning a remote-tracking branch, when known.
    """

    hash: str
    name: str
    kind: RefKind
    annotated: bool = False
    remote: str | None = None


@dataclass(frozen=True, slots=True)
class StashInfo:
    """Stash metadata attached to a stash commit in the graph."""

    selector: str
    base_hash: str
    untracked_files_hash: str | None


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """A commit as listed by `git log`.

    Attributes:
        hash: Full commit hash, or UNCOMMITTED for the synthetic node.
        parent_hashes: Parents, first parent first. Empty for root commits.
        author: Author name.
        email: Author email.
        timestamp: Commit (or author) date as epoch seconds.
        message: Subject line.
        references: References pointing at this commit, in catalog order.
        stash: Stash metadata when this record is a stash.
    """

    hash: str
    parent_hashes: tuple[str, ...]
    author: str
    email: str
    timestamp: int
    message: str
    references: tuple[Reference, ...] = ()
    stash: StashInfo | None = None


@dataclass(frozen=True, slots=True)
class StashEntry:
    """A stash listed from the stash reflog.

    Attributes:
        hash: Hash of the stash commit.
        base_hash: Commit the stash was taken from.
        untracked_files_hash: Commit holding untracked files, if captured.
        selector: Positional identifier such as stash@{0}.
        author: Author name.
        email: Author email.
        timestamp: Stash date as epoch seconds.
        message: Stash subject.
    """

    hash: str
    base_hash: str
    untracked_files_hash: str | None
    selector: str
    author: str
    email: str
    timestamp: int
    message: str


@dataclass(frozen=True, slots=True)
class FileChange:
    """A changed file between two revisions.

    Additions and deletions are None when unavailable (binary content) or
    not applicable (untracked files).
    """

    old_file_path: str
    new_file_path: str
    change_type: FileChangeType
    additions: int | None = None
    deletions: int | None = None


@dataclass(frozen=True, slots=True)
class StatusFiles:
    """Deleted and untracked paths reported by `git status`."""

    deleted: tuple[str, ...] = ()
    untracked: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RefCatalog:
    """Index of references by the commit hash they point at.

    Attributes:
        head: Hash HEAD resolves to, or None when unknown.
        by_hash: Hash to references in encounter order.
    """

    head: str | None = None
    by_hash: dict[str, tuple[Reference, ...]] = field(default_factory=dict)

    def references_for(self, commit_hash: str) -> tuple[Reference, ...]:
        return self.by_hash.get(commit_hash, ())


@dataclass(frozen=True, slots=True)
class BranchListing:
    """Branches reported by `git branch`, checked-out branch first."""

    branches: tuple[str, ...]
    head: str | None


@dataclass(frozen=True, slots=True)
class Signature:
    """GPG signature of a commit."""

    key: str
    signer: str
    status: SignatureStatus


@dataclass(frozen=True, slots=True)
class CommitDetails:
    """Full details of one commit, including its file changes."""

    hash: str
    parent_hashes: tuple[str, ...]
    author: str
    author_email: str
    author_date: int
    committer: str
    committer_email: str
    committer_date: int
    signature: Signature | None
    body: str
    file_changes: tuple[FileChange, ...] = ()


@dataclass(frozen=True, slots=True)
class TagDetails:
    """Tagger and message of an annotated tag."""

    tag_hash: str
    name: str
    email: str
    date: int
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValue:
    """A git config value at local and global scope."""

    local: str | None
    global_: str | None


@dataclass(frozen=True, slots=True)
class RemoteSettings:
    name: str
    url: str | None
    push_url: str | None


@dataclass(frozen=True, slots=True)
class RepoSettings:
    """Settings shown for a repository."""

    user_name: ConfigValue
    user_email: ConfigValue
    remotes: tuple[RemoteSettings, ...]


@dataclass(frozen=True, slots=True)
class RepoSnapshot:
    """Commit graph returned by GitDataSource.get_commits.

    Attributes:
        commits: Commits in the order git returned them, references attached.
        head: Hash HEAD resolves to, or None.
        more_available: Whether more commits exist beyond `commits`.
        error: Failure message. When set, the other fields are empty.
    """

    commits: tuple[CommitRecord, ...] = ()
    head: str | None = None
    more_available: bool = False
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RepoInfo:
    """Branches, remotes and stashes of a repository."""

    branches: tuple[str, ...] = ()
    head: str | None = None
    remotes: tuple[str, ...] = ()
    stashes: tuple[StashEntry, ...] = ()
    error: str | None = None


@dataclass(frozen=True, slots=True)
class CommitDetailsResult:
    details: CommitDetails | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    file_changes: tuple[FileChange, ...] = ()
    error: str | None = None


@dataclass(frozen=True, slots=True)
class TagDetailsResult:
    details: TagDetails | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RepoSettingsResult:
    settings: RepoSettings | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class FileContentResult:
    content: str | None = None
    error: str | None = None
