"""Property-based tests for git output parsing.

Invariants covered:
- Well-formed log output parses to one record per line, in order
- STOP truncation keeps exactly the well-formed prefix
- SKIP truncation keeps exactly the well-formed lines
- Pagination never returns more than requested
- Parsers never raise on arbitrary text
- Graph assembly keeps git's commit order
"""

from hypothesis import given, strategies as st

from repohistory.enums import FileChangeType
from repohistory.git import (
    FIELD_SEPARATOR,
    CommitRecord,
    RefCatalog,
    assemble_graph,
    build_ref_catalog,
    combine,
    paginate,
    parse_log,
    parse_stashes,
    resolve_rename_path,
)
from repohistory.git._models import CommandOutput
from repohistory.git._runner import error_message
from repohistory.git._status import parse_status_files

# =============================================================================
# Strategies
# =============================================================================

commit_hash = st.text(alphabet="0123456789abcdef", min_size=40, max_size=40)

# Field text never holds a line terminator
field_text = st.text(
    alphabet=st.characters(exclude_characters="\r\n", exclude_categories=("Cs",)),
    max_size=20,
).filter(lambda value: FIELD_SEPARATOR not in value)

timestamp = st.integers(min_value=0, max_value=2**32)

# Lines that can never split into a full record
garbage_line = st.text(alphabet="xyz -", max_size=20)


@st.composite
def log_lines(draw: st.DrawFn) -> str:
    parents = draw(st.lists(commit_hash, max_size=2))
    return FIELD_SEPARATOR.join(
        [
            draw(commit_hash),
            " ".join(parents),
            draw(field_text),
            draw(field_text),
            str(draw(timestamp)),
            draw(field_text),
        ]
    )


@st.composite
def stash_lines(draw: st.DrawFn) -> str:
    parents = draw(st.lists(commit_hash, min_size=1, max_size=3))
    index = draw(st.integers(min_value=0, max_value=50))
    return FIELD_SEPARATOR.join(
        [
            draw(commit_hash),
            " ".join(parents),
            f"refs/stash@{{{index}}}",
            draw(field_text),
            draw(field_text),
            str(draw(timestamp)),
            draw(field_text),
        ]
    )


def as_output(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def commits_from(hashes: list[str]) -> list[CommitRecord]:
    return [
        CommitRecord(hash=h, parent_hashes=(), author="a", email="e", timestamp=0, message="m")
        for h in hashes
    ]


# =============================================================================
# Record parsing
# =============================================================================


class TestLogParsing:
    @given(st.lists(log_lines(), max_size=20))
    def test_one_record_per_well_formed_line(self, lines: list[str]) -> None:
        parsed = parse_log(as_output(lines))

        assert parsed.skipped == 0
        assert [commit.hash for commit in parsed.records] == [
            line.split(FIELD_SEPARATOR)[0] for line in lines
        ]

    @given(st.text())
    def test_reparsing_gives_identical_records(self, text: str) -> None:
        assert parse_log(text) == parse_log(text)

    @given(st.lists(log_lines(), max_size=10), garbage_line, st.lists(log_lines(), max_size=10))
    def test_stop_rule_keeps_prefix(self, prefix: list[str], garbage: str, suffix: list[str]) -> None:
        lines = [*prefix, garbage, *suffix]

        parsed = parse_log(as_output(lines))

        assert len(parsed.records) == len(prefix)
        assert parsed.skipped == len(suffix) + 1

    @given(st.lists(st.one_of(stash_lines(), garbage_line), max_size=20))
    def test_skip_rule_keeps_every_well_formed_line(self, lines: list[str]) -> None:
        well_formed = [line for line in lines if line.count(FIELD_SEPARATOR) == 6]

        parsed = parse_stashes(as_output(lines))

        assert [stash.hash for stash in parsed.records] == [
            line.split(FIELD_SEPARATOR)[0] for line in well_formed
        ]
        assert len(parsed.records) + parsed.skipped == len(lines)

    @given(st.lists(stash_lines(), min_size=1, max_size=10))
    def test_stash_base_is_first_parent(self, lines: list[str]) -> None:
        parsed = parse_stashes(as_output(lines))

        for line, stash in zip(lines, parsed.records, strict=True):
            parents = line.split(FIELD_SEPARATOR)[1].split(" ")
            assert stash.base_hash == parents[0]
            assert stash.untracked_files_hash == (parents[-1] if len(parents) > 1 else None)

    @given(st.text())
    def test_parsers_never_raise(self, text: str) -> None:
        _ = parse_log(text)
        _ = parse_stashes(text)
        _ = build_ref_catalog(text.splitlines())
        _ = parse_status_files(text)
        _ = combine(text.split("\n"), text.split("\n"))


# =============================================================================
# Assembly
# =============================================================================


class TestPagination:
    @given(st.integers(min_value=1, max_value=30), st.data())
    def test_never_exceeds_max_count(self, max_count: int, data: st.DataObject) -> None:
        # git is asked for at most max_count + 1 records
        hashes = data.draw(st.lists(commit_hash, unique=True, max_size=max_count + 1))
        commits = commits_from(hashes)

        page, more_available = paginate(commits, max_count)

        assert len(page) <= max_count
        assert list(page) == commits[: len(page)]
        assert more_available == (len(commits) == max_count + 1)


class TestAssembly:
    @given(st.lists(commit_hash, unique=True, max_size=20))
    def test_keeps_commit_order(self, hashes: list[str]) -> None:
        graph = assemble_graph(commits_from(hashes), RefCatalog())

        assert [commit.hash for commit in graph] == hashes

    @given(
        st.lists(commit_hash, unique=True, min_size=1, max_size=20),
        st.integers(min_value=1, max_value=99),
    )
    def test_uncommitted_node_precedes_head(self, hashes: list[str], count: int) -> None:
        head = hashes[-1]

        graph = assemble_graph(commits_from(hashes), RefCatalog(head=head), uncommitted_count=count)

        assert len(graph) == len(hashes) + 1
        assert graph[0].parent_hashes == (head,)
        assert graph[0].message == f"Uncommitted Changes ({count})"


# =============================================================================
# Diff statistics and messages
# =============================================================================

plain_path = st.text(alphabet="abcdefghij/._", min_size=1, max_size=30)


class TestDiffStatistics:
    @given(plain_path)
    def test_plain_paths_are_unchanged(self, path: str) -> None:
        assert resolve_rename_path(path) == path

    @given(plain_path, plain_path)
    def test_arrow_form_yields_new_path(self, old: str, new: str) -> None:
        assert resolve_rename_path(f"{old} => {new}") == new

    @given(st.lists(plain_path, unique=True, max_size=15), st.data())
    def test_counts_attach_to_matching_paths(self, paths: list[str], data: st.DataObject) -> None:
        counts = [data.draw(st.tuples(st.integers(0, 500), st.integers(0, 500))) for _ in paths]
        name_status = [f"M\t{path}" for path in paths]
        numstat = [f"{adds}\t{dels}\t{path}" for path, (adds, dels) in zip(paths, counts, strict=True)]

        parsed = combine(name_status, numstat)

        assert parsed.skipped == 0
        assert [change.new_file_path for change in parsed.records] == paths
        assert all(change.change_type is FileChangeType.MODIFIED for change in parsed.records)
        assert [(change.additions, change.deletions) for change in parsed.records] == counts


class TestErrorMessage:
    @given(st.text(), st.text(), st.integers(min_value=1, max_value=255))
    def test_never_ends_with_blank_line(self, stdout: str, stderr: str, exit_code: int) -> None:
        message = error_message(CommandOutput(stdout=stdout, stderr=stderr, exit_code=exit_code))

        assert not message.endswith("\n")
        assert "\r" not in message
