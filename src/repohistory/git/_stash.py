"""Stash catalog built from the stash reflog."""

from ._formats import FIELD_SEPARATOR, STASH_FIELD_COUNT
from ._models import ParseResult, StashEntry
from ._records import TruncationRule, parse_int, parse_records, split_parents


def stash_args(stash_format: str) -> list[str]:
    return ["reflog", f"--format={stash_format}", "refs/stash", "--"]


def parse_stashes(text: str, separator: str = FIELD_SEPARATOR) -> ParseResult[StashEntry]:
    """Parse stash reflog output, most recent stash first.

    Each record holds hash, parents, selector, author, email, date and
    subject. The first parent is the commit the stash was taken from; when
    more parents are listed the last one holds the untracked files. Lines
    of the wrong shape, or with no parents, are skipped.

    Args:
        text: Output of `git reflog --format=<stash format> refs/stash`.
        separator: Field separator used in the format.

    Returns:
        Stash entries in reflog order.
    """
    parsed = parse_records(text, separator, STASH_FIELD_COUNT, rule=TruncationRule.SKIP)
    stashes: list[StashEntry] = []
    skipped = parsed.skipped
    for commit_hash, parents, selector, author, email, date, message in parsed.records:
        parent_hashes = split_parents(parents)
        if not parent_hashes:
            skipped += 1
            continue
        stashes.append(
            StashEntry(
                hash=commit_hash,
                base_hash=parent_hashes[0],
                untracked_files_hash=parent_hashes[-1] if len(parent_hashes) > 1 else None,
                selector=selector,
                author=author,
                email=email,
                timestamp=parse_int(date),
                message=message,
            )
        )
    return ParseResult(records=tuple(stashes), skipped=skipped)
