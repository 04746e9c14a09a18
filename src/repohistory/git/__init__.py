"""Git history extraction.

This package invokes the git command-line tool and turns its output into
typed records: commits with their references, stashes, file changes and
repository settings.

Classes:
    GitDataSource: Aggregate, never-raising queries against a repository.
    GitExecutable: A discovered git executable and its version.
    GitFormats: Format strings derived from the graph configuration.
    FakeRunner: Canned git responses for tests.

Models:
    CommitRecord: A commit in the graph, with references and stash data.
    Reference: A head, tag or remote-tracking branch.
    StashEntry: A stash from the stash reflog.
    FileChange: A changed path with optional line counts.
    RepoSnapshot: Result of GitDataSource.get_commits.

Example:
    >>> import anyio
    >>> from repohistory.git import GitDataSource
    >>> async def main():
    ...     source = await GitDataSource.create()
    ...     snapshot = await source.get_commits(".", None, 50, False)
    ...     return snapshot.commits
    >>> commits = anyio.run(main)  # doctest: +SKIP
"""

from repohistory.git._commits import assemble_graph, log_args, paginate, parse_commit_details, parse_log
from repohistory.git._diff import combine, diff_args, parse_name_status, parse_numstat, resolve_rename_path
from repohistory.git._executable import (
    SIGNATURE_FORMAT_MIN_VERSION,
    GitExecutable,
    find_git,
    get_git_executable,
    is_git_at_least,
    parse_version,
)
from repohistory.git._fake import FakeRunner
from repohistory.git._formats import FIELD_SEPARATOR, GitFormats, build_formats
from repohistory.git._models import (
    UNCOMMITTED,
    BranchListing,
    CommandOutput,
    CommandResult,
    CommitDetails,
    CommitDetailsResult,
    CommitRecord,
    ComparisonResult,
    ConfigValue,
    Err,
    FileChange,
    FileContentResult,
    Ok,
    Outcome,
    ParseResult,
    RefCatalog,
    Reference,
    RemoteSettings,
    RepoInfo,
    RepoSettings,
    RepoSettingsResult,
    RepoSnapshot,
    Signature,
    SpawnFailure,
    StashEntry,
    StashInfo,
    StatusFiles,
    TagDetails,
    TagDetailsResult,
    ToolFailure,
)
from repohistory.git._records import TruncationRule, parse_records
from repohistory.git._refs import build_ref_catalog
from repohistory.git._runner import CommandRunner, classify_failure, error_message, run_command
from repohistory.git._source import GitDataSource
from repohistory.git._stash import parse_stashes

__all__ = [
    "FIELD_SEPARATOR",
    "SIGNATURE_FORMAT_MIN_VERSION",
    "UNCOMMITTED",
    "BranchListing",
    "CommandOutput",
    "CommandResult",
    "CommandRunner",
    "CommitDetails",
    "CommitDetailsResult",
    "CommitRecord",
    "ComparisonResult",
    "ConfigValue",
    "Err",
    "FakeRunner",
    "FileChange",
    "FileContentResult",
    "GitDataSource",
    "GitExecutable",
    "GitFormats",
    "Ok",
    "Outcome",
    "ParseResult",
    "RefCatalog",
    "Reference",
    "RemoteSettings",
    "RepoInfo",
    "RepoSettings",
    "RepoSettingsResult",
    "RepoSnapshot",
    "Signature",
    "SpawnFailure",
    "StashEntry",
    "StashInfo",
    "StatusFiles",
    "TagDetails",
    "TagDetailsResult",
    "ToolFailure",
    "TruncationRule",
    "assemble_graph",
    "build_formats",
    "build_ref_catalog",
    "classify_failure",
    "combine",
    "diff_args",
    "error_message",
    "find_git",
    "get_git_executable",
    "is_git_at_least",
    "log_args",
    "paginate",
    "parse_commit_details",
    "parse_log",
    "parse_name_status",
    "parse_numstat",
    "parse_records",
    "parse_stashes",
    "parse_version",
    "resolve_rename_path",
    "run_command",
]
