"""Commit log parsing and commit graph assembly.

Assembly is split from the git queries so that each step is a pure function
over already-fetched output: `paginate` applies the max-count convention,
`head_in_commits` decides whether the working tree status is needed, and
`assemble_graph` produces the final commit sequence.
"""

from collections.abc import Sequence
from dataclasses import replace

from repohistory.enums import CommitOrdering, RefKind, SignatureStatus

from ._formats import COMMIT_DETAILS_FIELD_COUNT, FIELD_SEPARATOR, LOG_FIELD_COUNT
from ._models import (
    UNCOMMITTED,
    CommitDetails,
    CommitRecord,
    ParseResult,
    RefCatalog,
    Signature,
    StashEntry,
    StashInfo,
)
from ._records import TruncationRule, parse_body_record, parse_int, parse_records, split_parents

_SIGNATURE_CODES = frozenset(status.value for status in SignatureStatus)


def log_args(
    log_format: str,
    count: int,
    *,
    ordering: CommitOrdering,
    branches: Sequence[str] = (),
    include_tags: bool = False,
    include_remotes: bool = False,
    remotes: Sequence[str] = (),
    hide_remotes: Sequence[str] = (),
) -> list[str]:
    """Build `git log` arguments.

    Args:
        log_format: Log format string.
        count: Maximum number of records to request.
        ordering: Commit ordering.
        branches: Revisions to show. Empty shows all local branches and HEAD.
        include_tags: Also show commits reachable only from tags.
        include_remotes: Also show remote-tracking branches.
        remotes: Known remotes, used when some are hidden.
        hide_remotes: Remotes whose branches are left out.
    """
    args = ["log", f"--max-count={count}", f"--format={log_format}", f"--{ordering.value}-order"]
    if branches:
        args.extend(branches)
    else:
        args.append("--branches")
        if include_tags:
            args.append("--tags")
        if include_remotes:
            if not hide_remotes:
                args.append("--remotes")
            else:
                args.extend(
                    f"--glob=refs/remotes/{remote}"
                    for remote in remotes
                    if remote not in hide_remotes
                )
        args.append("HEAD")
    args.append("--")
    return args


def parse_log(text: str, separator: str = FIELD_SEPARATOR) -> ParseResult[CommitRecord]:
    """Parse `git log` output produced with the log format.

    Truncation rule STOP: the first line that does not split into exactly
    six fields ends the well-formed data.
    """
    parsed = parse_records(text, separator, LOG_FIELD_COUNT, rule=TruncationRule.STOP)
    commits = tuple(
        CommitRecord(
            hash=commit_hash,
            parent_hashes=split_parents(parents),
            author=author,
            email=email,
            timestamp=parse_int(date),
            message=message,
        )
        for commit_hash, parents, author, email, date, message in parsed.records
    )
    return ParseResult(records=commits, skipped=parsed.skipped)


def paginate(commits: Sequence[CommitRecord], max_count: int) -> tuple[tuple[CommitRecord, ...], bool]:
    """Apply the max-count + 1 convention.

    The log is queried for one record more than requested; receiving exactly
    that many means more commits are available.

    Returns:
        At most `max_count` commits, and whether more are available.
    """
    more_available = len(commits) == max_count + 1
    if more_available:
        return tuple(commits[:max_count]), True
    return tuple(commits), False


def head_in_commits(head: str | None, commits: Sequence[CommitRecord]) -> bool:
    return head is not None and any(commit.hash == head for commit in commits)


def uncommitted_changes_commit(head: str, count: int, timestamp: int) -> CommitRecord:
    """Build the synthetic commit standing for uncommitted changes."""
    return CommitRecord(
        hash=UNCOMMITTED,
        parent_hashes=(head,),
        author="*",
        email="",
        timestamp=timestamp,
        message=f"Uncommitted Changes ({count})",
    )


def _stash_info(stash: StashEntry) -> StashInfo:
    return StashInfo(
        selector=stash.selector,
        base_hash=stash.base_hash,
        untracked_files_hash=stash.untracked_files_hash,
    )


def _splice_stashes(commits: list[CommitRecord], stashes: Sequence[StashEntry]) -> list[CommitRecord]:
    positions = {commit.hash: index for index, commit in enumerate(commits)}
    to_insert: list[tuple[int, StashEntry]] = []
    for stash in stashes:
        if stash.hash in positions:
            index = positions[stash.hash]
            commits[index] = replace(commits[index], stash=_stash_info(stash))
        elif stash.base_hash in positions:
            to_insert.append((positions[stash.base_hash], stash))

    # Newest stash first, directly above the commit it was taken from
    to_insert.sort(key=lambda item: (item[0], -item[1].timestamp))
    for index, stash in reversed(to_insert):
        commits.insert(
            index,
            CommitRecord(
                hash=stash.hash,
                parent_hashes=(stash.base_hash,),
                author=stash.author,
                email=stash.email,
                timestamp=stash.timestamp,
                message=stash.message,
                stash=_stash_info(stash),
            ),
        )
    return commits


def assemble_graph(
    commits: Sequence[CommitRecord],
    catalog: RefCatalog,
    *,
    uncommitted_count: int = 0,
    timestamp: int = 0,
    show_tags: bool = True,
    stashes: Sequence[StashEntry] = (),
) -> tuple[CommitRecord, ...]:
    """Assemble the commit sequence of a snapshot.

    The order of `commits` is kept as returned by git. When the catalog's
    head is among the commits and `uncommitted_count` is positive, the
    uncommitted changes commit is prepended. Stashes whose base commit is
    present are inserted above it. Every commit then receives the catalog's
    references for its hash.

    Args:
        commits: Paginated log records.
        catalog: Reference catalog for the repository.
        uncommitted_count: Number of uncommitted changes in the working tree.
        timestamp: Date of the uncommitted changes commit.
        show_tags: Attach tag references.
        stashes: Stashes to splice into the graph.
    """
    nodes = list(commits)
    if uncommitted_count > 0 and catalog.head is not None and head_in_commits(catalog.head, nodes):
        nodes.insert(0, uncommitted_changes_commit(catalog.head, uncommitted_count, timestamp))

    if stashes:
        nodes = _splice_stashes(nodes, stashes)

    return tuple(
        replace(
            node,
            references=tuple(
                reference
                for reference in catalog.references_for(node.hash)
                if show_tags or reference.kind is not RefKind.TAG
            ),
        )
        for node in nodes
    )


def parse_commit_details(text: str, separator: str = FIELD_SEPARATOR) -> CommitDetails | None:
    """Parse `git show --quiet --format=<commit details format>` output.

    Returns:
        The details without file changes, or None if the output is malformed.
    """
    fields = parse_body_record(text, separator, COMMIT_DETAILS_FIELD_COUNT)
    if fields is None:
        return None
    (
        commit_hash,
        parents,
        author,
        author_email,
        author_date,
        committer,
        committer_email,
        committer_date,
        signature_status,
        signer,
        key,
        body,
    ) = fields
    signature = (
        Signature(key=key.strip(), signer=signer.strip(), status=SignatureStatus(signature_status))
        if signature_status in _SIGNATURE_CODES
        else None
    )
    return CommitDetails(
        hash=commit_hash,
        parent_hashes=split_parents(parents),
        author=author,
        author_email=author_email,
        author_date=parse_int(author_date),
        committer=committer,
        committer_email=committer_email,
        committer_date=parse_int(committer_date),
        signature=signature,
        body=body,
    )
