from repohistory.git._status import (
    count_uncommitted_changes,
    parse_status_files,
    status_files_args,
    uncommitted_count_args,
)


class TestStatusArgs:
    def test_untracked_files_follow_configuration(self) -> None:
        assert uncommitted_count_args(show_untracked_files=True) == [
            "status",
            "--untracked-files=all",
            "--porcelain",
        ]
        assert uncommitted_count_args(show_untracked_files=False)[1] == "--untracked-files=no"

    def test_file_listing_is_nul_separated(self) -> None:
        assert status_files_args(show_untracked_files=True) == [
            "status",
            "-s",
            "--untracked-files=all",
            "--porcelain",
            "-z",
        ]


class TestCountUncommittedChanges:
    def test_counts_one_change_per_line(self) -> None:
        assert count_uncommitted_changes(" M a.txt\n?? b.txt\nD  c.txt\n") == 3

    def test_clean_tree_has_no_changes(self) -> None:
        assert count_uncommitted_changes("") == 0


class TestParseStatusFiles:
    def test_collects_deleted_and_untracked_paths(self) -> None:
        text = " D gone.txt\0?? new file.txt\0 M changed.txt\0D  staged-delete.txt\0"

        status = parse_status_files(text)

        assert status.deleted == ("gone.txt", "staged-delete.txt")
        assert status.untracked == ("new file.txt",)

    def test_skips_original_path_of_renames(self) -> None:
        text = "R  new.txt\0old.txt\0?? extra.txt\0"

        status = parse_status_files(text)

        assert status.deleted == ()
        assert status.untracked == ("extra.txt",)

    def test_stops_at_truncated_entry(self) -> None:
        status = parse_status_files("?? a.txt\0?\0?? b.txt\0")

        assert status.untracked == ("a.txt",)
