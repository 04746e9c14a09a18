"""Aggregate git queries for a repository.

GitDataSource composes the runner and the parsers into the operations a
history viewer needs. Independent queries of one operation run concurrently
and are joined before the result is assembled. No operation raises for
tool, spawn or parse problems: each returns a result value whose `error`
field holds the failure message.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import replace
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Self

import anyio
import pendulum

from repohistory.config import Config
from repohistory.enums import ConfigLocation, FailureKind, FileChangeType
from repohistory.exceptions import BatchOperationError
from repohistory.utils import create_logger_from_config, gather_bounded

from ._commits import (
    assemble_graph,
    head_in_commits,
    log_args,
    paginate,
    parse_commit_details,
    parse_log,
)
from ._diff import DiffMode, combine, diff_args, diff_header_count, nul_output_to_lines
from ._executable import (
    SIGNATURE_FORMAT_MIN_VERSION,
    UNABLE_TO_FIND_GIT_MSG,
    GitExecutable,
    find_git,
    is_git_at_least,
)
from ._formats import GitFormats, build_formats
from ._models import (
    UNCOMMITTED,
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
    RemoteSettings,
    RepoInfo,
    RepoSettings,
    RepoSettingsResult,
    RepoSnapshot,
    SpawnFailure,
    StashEntry,
    StashInfo,
    StatusFiles,
    TagDetailsResult,
    ToolFailure,
)
from ._records import output_lines
from ._refs import build_ref_catalog, show_ref_args
from ._repo import (
    CONFIG_USER_EMAIL,
    CONFIG_USER_NAME,
    branch_args,
    commit_subject_args,
    config_list_args,
    get_configs,
    normalize_subject,
    parse_branches,
    parse_gitmodules_paths,
    parse_remotes,
    parse_tag_details,
    remote_url_args,
    tag_details_args,
)
from ._runner import CommandRunner, classify_failure, run_command
from ._stash import parse_stashes, stash_args
from ._status import (
    count_uncommitted_changes,
    parse_status_files,
    status_files_args,
    uncommitted_count_args,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_GITMODULES: Final = ".gitmodules"
_UNPARSEABLE_DETAILS_MSG: Final = "Unable to parse the commit details returned by Git."
_UNPARSEABLE_TAG_MSG: Final = "Unable to parse the tag details returned by Git."

type Query = Callable[[], Awaitable[Outcome[Any]]]  # pyright: ignore[reportExplicitAny]


async def _join(queries: Sequence[Query]) -> list[Outcome[Any]]:  # pyright: ignore[reportExplicitAny]
    """Run independent queries concurrently and wait for all of them."""
    return await gather_bounded(queries, len(queries), lambda query: query())


class GitDataSource:
    """Read-only access to the history of git repositories.

    Args:
        config: Configuration. Defaults to built-in defaults.
        executable: Git executable to invoke. None makes every query fail
            with an executable-unknown error until one is set.
        logger: Structured logger. Defaults to one built from the
            configuration's logging section.
        env: Environment for the git processes. None inherits the current
            environment.
        runner: Runs git. Tests substitute a FakeRunner.
    """

    __slots__: Final = ("_config", "_env", "_executable", "_logger", "_runner")
    _config: Config
    _env: Mapping[str, str] | None
    _executable: GitExecutable | None
    _logger: "FilteringBoundLogger"
    _runner: CommandRunner

    def __init__(
        self,
        config: Config | None = None,
        executable: GitExecutable | None = None,
        logger: "FilteringBoundLogger | None" = None,
        *,
        env: Mapping[str, str] | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self._config = config if config is not None else Config.from_dict({})
        self._executable = executable
        self._logger = logger if logger is not None else create_logger_from_config(self._config.logging)
        self._env = env
        self._runner = runner

    @classmethod
    async def create(
        cls,
        config: Config | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> Self:
        """Create a data source using the git executable found for `config`."""
        config = config if config is not None else Config.from_dict({})
        executable = await find_git(config.git.path)
        return cls(config, executable, logger)

    # =========================================================================
    # Executable and formats
    # =========================================================================

    @property
    def config(self) -> Config:
        return self._config

    @property
    def executable(self) -> GitExecutable | None:
        return self._executable

    def set_executable(self, executable: GitExecutable | None) -> None:
        self._executable = executable

    def is_executable_unknown(self) -> bool:
        return self._executable is None

    @property
    def formats(self) -> GitFormats:
        """Format strings for the current configuration and executable."""
        supports_signatures = self._executable is not None and is_git_at_least(
            self._executable, SIGNATURE_FORMAT_MIN_VERSION
        )
        return build_formats(self._config.graph, supports_signatures=supports_signatures)

    # =========================================================================
    # Query plumbing
    # =========================================================================

    async def _query[T](
        self,
        args: list[str],
        repo: str | Path,
        parse: Callable[[str], T],
        *,
        encoding: str | None = None,
    ) -> Outcome[T]:
        """Run one git command and parse its stdout on success.

        Args:
            args: Arguments after the executable.
            repo: Working directory of the process.
            parse: Applied to stdout when the command exits with status 0.
            encoding: Codec for stdout. Defaults to UTF-8.

        Returns:
            Ok with the parsed value, or Err with the classified failure.
        """
        if self._executable is None:
            return Err(ToolFailure(kind=FailureKind.EXECUTABLE_UNKNOWN, message=UNABLE_TO_FIND_GIT_MSG))

        self._logger.debug("git_command", args=args, repo=str(repo))
        result = await self._runner(
            self._executable.path,
            args,
            repo,
            encoding=encoding,
            env=self._env,
            max_output_bytes=self._config.git.max_output_bytes,
        )

        if isinstance(result, SpawnFailure):
            self._logger.warning("git_spawn_failed", args=args, message=result.message)
            return Err(ToolFailure(kind=FailureKind.SPAWN, message=result.message))

        failure = classify_failure(result)
        if failure is not None:
            self._logger.warning(
                "git_command_failed", args=args, exit_code=result.exit_code, message=failure.message
            )
            return Err(failure)

        if result.truncated:
            self._logger.warning(
                "git_output_truncated", args=args, max_output_bytes=self._config.git.max_output_bytes
            )
        return Ok(parse(result.stdout))

    def _records[T](self, record_type: str, parsed: ParseResult[T]) -> tuple[T, ...]:
        if parsed.skipped:
            self._logger.debug("records_truncated", record_type=record_type, skipped=parsed.skipped)
        return parsed.records

    def _parse_log(self, text: str) -> tuple[CommitRecord, ...]:
        return self._records("commit", parse_log(text))

    def _diff_lines(self, repo: str | Path, mode: DiffMode, from_hash: str, to_hash: str) -> Query:
        return partial(
            self._query,
            diff_args(mode, from_hash, to_hash),
            repo,
            partial(nul_output_to_lines, mode=mode),
        )

    def _status_files(self, repo: str | Path) -> Query:
        return partial(
            self._query,
            status_files_args(show_untracked_files=self._config.graph.show_untracked_files),
            repo,
            parse_status_files,
        )

    def _file_changes(
        self,
        name_status: Outcome[Any],  # pyright: ignore[reportExplicitAny]
        numstat: Outcome[Any],  # pyright: ignore[reportExplicitAny]
        skip_leading_count: int,
        status: Outcome[Any] | None = None,  # pyright: ignore[reportExplicitAny]
    ) -> Outcome[tuple[FileChange, ...]]:
        for outcome in (name_status, numstat, status):
            if isinstance(outcome, Err):
                return outcome
        status_files: StatusFiles | None = status.value if isinstance(status, Ok) else None
        parsed = combine(
            name_status.value,  # pyright: ignore[reportAttributeAccessIssue]
            numstat.value,  # pyright: ignore[reportAttributeAccessIssue]
            skip_leading_count,
            status_files,
            resolve_renames=False,
        )
        return Ok(self._records("file_change", parsed))

    # =========================================================================
    # Repository overview
    # =========================================================================

    async def get_repo_info(
        self,
        repo: str | Path,
        show_remote_branches: bool,  # noqa: FBT001
        hide_remotes: Sequence[str] = (),
    ) -> RepoInfo:
        """List branches, remotes and stashes.

        Branches and remotes are required. A failing stash listing leaves
        the stashes empty.
        """
        branches, remotes, stashes = await _join(
            [
                partial(
                    self._query,
                    branch_args(show_remote_branches=show_remote_branches),
                    repo,
                    partial(parse_branches, hide_remotes=hide_remotes),
                ),
                partial(self._query, ["remote"], repo, parse_remotes),
                partial(self._query, stash_args(self.formats.stash), repo, parse_stashes),
            ]
        )
        for outcome in (branches, remotes):
            if isinstance(outcome, Err):
                return RepoInfo(error=outcome.message)

        stash_entries: tuple[StashEntry, ...] = (
            self._records("stash", stashes.value) if isinstance(stashes, Ok) else ()
        )
        return RepoInfo(
            branches=branches.value.branches,
            head=branches.value.head,
            remotes=remotes.value,
            stashes=stash_entries,
        )

    async def get_commits(  # noqa: PLR0913
        self,
        repo: str | Path,
        branches: Sequence[str] | None,
        max_count: int,
        show_remote_branches: bool,  # noqa: FBT001
        *,
        show_tags: bool | None = None,
        remotes: Sequence[str] = (),
        hide_remotes: Sequence[str] = (),
    ) -> RepoSnapshot:
        """Build the commit graph snapshot of a repository.

        The log (requesting one record more than `max_count`) and the
        reference listing are queried concurrently, with the stash listing
        when stashes are shown. Only when HEAD is among the returned commits
        is the working tree status queried for the uncommitted changes node.

        Args:
            repo: Repository path.
            branches: Revisions to show. None or empty shows all branches.
            max_count: Number of commits to return.
            show_remote_branches: Include remote-tracking branches.
            show_tags: Attach tag references. Defaults to `graph.show_tags`.
            remotes: Known remote names.
            hide_remotes: Remotes whose branches are left out.

        Returns:
            The snapshot, or a snapshot carrying only an error.
        """
        graph = self._config.graph
        formats = self.formats
        if show_tags is None:
            show_tags = graph.show_tags

        queries: list[Query] = [
            partial(
                self._query,
                log_args(
                    formats.log,
                    max_count + 1,
                    ordering=graph.commit_ordering,
                    branches=branches or (),
                    include_tags=show_tags and graph.show_commits_only_referenced_by_tags,
                    include_remotes=show_remote_branches,
                    remotes=remotes,
                    hide_remotes=hide_remotes,
                ),
                repo,
                self._parse_log,
            ),
            partial(
                self._query,
                show_ref_args(include_remotes=show_remote_branches),
                repo,
                lambda text: build_ref_catalog(output_lines(text), remotes=remotes, hide_remotes=hide_remotes),
            ),
        ]
        if graph.show_stashes:
            queries.append(partial(self._query, stash_args(formats.stash), repo, parse_stashes))

        log, refs, *rest = await _join(queries)
        if isinstance(log, Err):
            return RepoSnapshot(error=log.message)
        commits, more_available = paginate(log.value, max_count)

        if isinstance(refs, Ok):
            catalog: RefCatalog = refs.value
        elif not commits:
            # An empty repository has no refs to list
            catalog = RefCatalog()
        else:
            return RepoSnapshot(error=refs.message)

        uncommitted_count = 0
        if graph.show_uncommitted_changes and head_in_commits(catalog.head, commits):
            status = await self._query(
                uncommitted_count_args(show_untracked_files=graph.show_untracked_files),
                repo,
                count_uncommitted_changes,
            )
            if isinstance(status, Err):
                return RepoSnapshot(error=status.message)
            uncommitted_count = status.value

        stashes: tuple[StashEntry, ...] = ()
        if rest and isinstance(rest[0], Ok):
            stashes = self._records("stash", rest[0].value)

        return RepoSnapshot(
            commits=assemble_graph(
                commits,
                catalog,
                uncommitted_count=uncommitted_count,
                timestamp=pendulum.now("UTC").int_timestamp,
                show_tags=show_tags,
                stashes=stashes,
            ),
            head=catalog.head,
            more_available=more_available,
        )

    # =========================================================================
    # Commit details and comparisons
    # =========================================================================

    async def get_commit_details(self, repo: str | Path, commit_hash: str) -> CommitDetailsResult:
        """Get the details and file changes of one commit."""
        details, name_status, numstat = await _join(
            [
                partial(
                    self._query,
                    ["show", "--quiet", commit_hash, f"--format={self.formats.commit_details}"],
                    repo,
                    parse_commit_details,
                ),
                self._diff_lines(repo, "--name-status", commit_hash, commit_hash),
                self._diff_lines(repo, "--numstat", commit_hash, commit_hash),
            ]
        )
        if isinstance(details, Err):
            return CommitDetailsResult(error=details.message)
        if details.value is None:
            return CommitDetailsResult(error=_UNPARSEABLE_DETAILS_MSG)

        changes = self._file_changes(name_status, numstat, diff_header_count(commit_hash, commit_hash))
        if isinstance(changes, Err):
            return CommitDetailsResult(error=changes.message)
        commit: CommitDetails = details.value
        return CommitDetailsResult(details=_with_changes(commit, changes.value))

    async def get_stash_details(
        self,
        repo: str | Path,
        commit_hash: str,
        stash: StashInfo | StashEntry,
    ) -> CommitDetailsResult:
        """Get the details of a stash.

        File changes are those between the stash's base commit and the
        stash, followed by the files of its untracked-files commit, which
        are reported as untracked.
        """
        queries: list[Query] = [
            partial(
                self._query,
                ["show", "--quiet", commit_hash, f"--format={self.formats.commit_details}"],
                repo,
                parse_commit_details,
            ),
            self._diff_lines(repo, "--name-status", stash.base_hash, commit_hash),
            self._diff_lines(repo, "--numstat", stash.base_hash, commit_hash),
        ]
        untracked_hash = stash.untracked_files_hash
        if untracked_hash is not None:
            queries.append(self._diff_lines(repo, "--name-status", untracked_hash, untracked_hash))
            queries.append(self._diff_lines(repo, "--numstat", untracked_hash, untracked_hash))

        details, name_status, numstat, *untracked = await _join(queries)
        if isinstance(details, Err):
            return CommitDetailsResult(error=details.message)
        if details.value is None:
            return CommitDetailsResult(error=_UNPARSEABLE_DETAILS_MSG)

        changes = self._file_changes(name_status, numstat, diff_header_count(stash.base_hash, commit_hash))
        if isinstance(changes, Err):
            return CommitDetailsResult(error=changes.message)
        file_changes = list(changes.value)

        if untracked_hash is not None:
            untracked_changes = self._file_changes(
                untracked[0], untracked[1], diff_header_count(untracked_hash, untracked_hash)
            )
            if isinstance(untracked_changes, Err):
                return CommitDetailsResult(error=untracked_changes.message)
            file_changes.extend(
                FileChange(
                    old_file_path=change.old_file_path,
                    new_file_path=change.new_file_path,
                    change_type=FileChangeType.UNTRACKED,
                    additions=change.additions,
                    deletions=change.deletions,
                )
                for change in untracked_changes.value
                if change.change_type is FileChangeType.ADDED
            )

        return CommitDetailsResult(details=_with_changes(details.value, tuple(file_changes)))

    async def get_uncommitted_details(self, repo: str | Path) -> CommitDetailsResult:
        """Get the changes of the working tree relative to HEAD."""
        name_status, numstat, status = await _join(
            [
                self._diff_lines(repo, "--name-status", "HEAD", ""),
                self._diff_lines(repo, "--numstat", "HEAD", ""),
                self._status_files(repo),
            ]
        )
        changes = self._file_changes(name_status, numstat, diff_header_count("HEAD", ""), status)
        if isinstance(changes, Err):
            return CommitDetailsResult(error=changes.message)
        return CommitDetailsResult(
            details=CommitDetails(
                hash=UNCOMMITTED,
                parent_hashes=(),
                author="",
                author_email="",
                author_date=0,
                committer="",
                committer_email="",
                committer_date=0,
                signature=None,
                body="",
                file_changes=changes.value,
            )
        )

    async def get_commit_comparison(
        self,
        repo: str | Path,
        from_hash: str,
        to_hash: str,
    ) -> ComparisonResult:
        """Get the file changes between two revisions.

        A `to_hash` equal to the uncommitted changes hash compares against
        the working tree, including deleted and untracked files.
        """
        working_tree = to_hash == UNCOMMITTED
        target = "" if working_tree else to_hash
        queries: list[Query] = [
            self._diff_lines(repo, "--name-status", from_hash, target),
            self._diff_lines(repo, "--numstat", from_hash, target),
        ]
        if working_tree:
            queries.append(self._status_files(repo))

        name_status, numstat, *status = await _join(queries)
        changes = self._file_changes(
            name_status,
            numstat,
            diff_header_count(from_hash, target),
            status[0] if status else None,
        )
        if isinstance(changes, Err):
            return ComparisonResult(error=changes.message)
        return ComparisonResult(file_changes=changes.value)

    # =========================================================================
    # Single values
    # =========================================================================

    async def get_commit_file(self, repo: str | Path, commit_hash: str, file_path: str) -> FileContentResult:
        """Get the content of a file at a commit, decoded with git.file_encoding."""
        outcome = await self._query(
            ["show", f"{commit_hash}:{file_path}"],
            repo,
            str,
            encoding=self._config.git.file_encoding,
        )
        if isinstance(outcome, Err):
            return FileContentResult(error=outcome.message)
        return FileContentResult(content=outcome.value)

    async def get_commit_subject(self, repo: str | Path, commit_hash: str) -> str | None:
        outcome = await self._query(commit_subject_args(commit_hash), repo, normalize_subject)
        return outcome.value if isinstance(outcome, Ok) else None

    async def get_remote_url(self, repo: str | Path, remote: str) -> str | None:
        outcome = await self._query(remote_url_args(remote), repo, output_lines)
        if isinstance(outcome, Ok) and outcome.value:
            return outcome.value[0]
        return None

    async def get_tag_details(self, repo: str | Path, tag_name: str) -> TagDetailsResult:
        """Get the tagger and message of an annotated tag."""
        outcome = await self._query(tag_details_args(tag_name), repo, parse_tag_details)
        if isinstance(outcome, Err):
            return TagDetailsResult(error=outcome.message)
        if outcome.value is None:
            return TagDetailsResult(error=_UNPARSEABLE_TAG_MSG)
        return TagDetailsResult(details=outcome.value)

    async def get_repo_settings(self, repo: str | Path) -> RepoSettingsResult:
        """Get the user identity and remote URLs configured for a repository.

        The global configuration is optional: git fails to list it when no
        global configuration file exists, which leaves global values unset.
        """
        remote_names, local, global_ = await _join(
            [
                partial(self._query, ["remote"], repo, parse_remotes),
                partial(self._query, config_list_args(ConfigLocation.LOCAL), repo, output_lines),
                partial(self._query, config_list_args(ConfigLocation.GLOBAL), repo, output_lines),
            ]
        )
        for outcome in (remote_names, local):
            if isinstance(outcome, Err):
                return RepoSettingsResult(error=outcome.message)

        remote_keys = [
            key for remote in remote_names.value for key in (f"remote.{remote}.url", f"remote.{remote}.pushurl")
        ]
        local_values = get_configs(local.value, [CONFIG_USER_NAME, CONFIG_USER_EMAIL, *remote_keys])
        global_values = get_configs(
            global_.value if isinstance(global_, Ok) else (), [CONFIG_USER_NAME, CONFIG_USER_EMAIL]
        )

        return RepoSettingsResult(
            settings=RepoSettings(
                user_name=_config_value(CONFIG_USER_NAME, local_values, global_values),
                user_email=_config_value(CONFIG_USER_EMAIL, local_values, global_values),
                remotes=tuple(
                    RemoteSettings(
                        name=remote,
                        url=local_values[f"remote.{remote}.url"],
                        push_url=local_values[f"remote.{remote}.pushurl"],
                    )
                    for remote in remote_names.value
                ),
            )
        )

    # =========================================================================
    # Repository discovery
    # =========================================================================

    async def repo_root(self, path: str | Path) -> str | None:
        """Find the top level of the repository containing `path`.

        When `path` reaches the top level through a symbolic link, the
        linked spelling is returned rather than the canonical one.

        Returns:
            The repository root, or None if `path` is not in a repository.
        """
        outcome = await self._query(["rev-parse", "--show-toplevel"], path, str.strip)
        if isinstance(outcome, Err) or not outcome.value:
            return None

        canonical = await anyio.Path(outcome.value).resolve()
        candidate = Path(path)
        while True:
            if await anyio.Path(candidate).resolve() == canonical:
                return str(candidate)
            parent = candidate.parent
            if parent == candidate:
                return str(canonical)
            candidate = parent

    async def get_submodules(self, repo: str | Path) -> tuple[str, ...]:
        """Find the repository roots of the submodules listed in .gitmodules.

        Submodule paths are resolved concurrently, at most `git.max_parallel`
        at a time. Paths that are not (yet) repositories are left out.
        """
        gitmodules = anyio.Path(repo) / _GITMODULES
        if not await gitmodules.is_file():
            return ()
        try:
            text = await gitmodules.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            self._logger.warning("gitmodules_unreadable", path=str(gitmodules), message=str(e))
            return ()

        paths = [Path(repo) / path for path in parse_gitmodules_paths(text)]
        if not paths:
            return ()
        try:
            roots = await gather_bounded(paths, self._config.git.max_parallel, self.repo_root)
        except BatchOperationError as e:
            self._logger.warning("submodule_discovery_failed", index=e.index, message=str(e))
            return ()

        repo_root = await self.repo_root(repo)
        unique: list[str] = []
        for root in roots:
            if root is not None and root != repo_root and root not in unique:
                unique.append(root)
        return tuple(unique)


def _with_changes(details: CommitDetails, file_changes: tuple[FileChange, ...]) -> CommitDetails:
    return replace(details, file_changes=file_changes)


def _config_value(
    name: str,
    local_values: Mapping[str, str | None],
    global_values: Mapping[str, str | None],
) -> ConfigValue:
    return ConfigValue(local=local_values[name], global_=global_values[name])
