from repohistory.git import FIELD_SEPARATOR as SEP
from repohistory.git import parse_stashes
from repohistory.git._stash import stash_args

STASH = "a" * 40
BASE = "b" * 40
INDEX = "c" * 40
UNTRACKED = "d" * 40


def stash_line(parents: str, selector: str = "refs/stash@{0}", date: int = 1_700_000_100) -> str:
    return SEP.join([STASH, parents, selector, "Ada", "ada@example.com", str(date), "WIP on main"])


class TestStashArgs:
    def test_reads_the_stash_reflog(self) -> None:
        assert stash_args("%H") == ["reflog", "--format=%H", "refs/stash", "--"]


class TestParseStashes:
    def test_base_is_first_parent(self) -> None:
        result = parse_stashes(stash_line(f"{BASE} {INDEX}") + "\n")

        (stash,) = result.records
        assert stash.hash == STASH
        assert stash.base_hash == BASE
        assert stash.selector == "refs/stash@{0}"
        assert stash.timestamp == 1_700_000_100
        assert stash.message == "WIP on main"

    def test_untracked_files_commit_is_last_of_three_parents(self) -> None:
        result = parse_stashes(stash_line(f"{BASE} {INDEX} {UNTRACKED}") + "\n")

        assert result.records[0].untracked_files_hash == UNTRACKED

    def test_single_parent_has_no_untracked_files_commit(self) -> None:
        result = parse_stashes(stash_line(BASE) + "\n")

        assert result.records[0].untracked_files_hash is None

    def test_skips_entries_without_parents(self) -> None:
        text = "\n".join([stash_line(""), stash_line(BASE, selector="refs/stash@{1}")]) + "\n"

        result = parse_stashes(text)

        assert [stash.selector for stash in result.records] == ["refs/stash@{1}"]
        assert result.skipped == 1

    def test_skips_malformed_lines_and_continues(self) -> None:
        text = "\n".join(["warning: something", stash_line(BASE)]) + "\n"

        result = parse_stashes(text)

        assert len(result.records) == 1
        assert result.skipped == 1

    def test_empty_reflog_has_no_stashes(self) -> None:
        assert parse_stashes("").records == ()
