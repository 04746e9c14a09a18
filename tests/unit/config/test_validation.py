from repohistory.config import validate_config
from repohistory.enums import CommitOrdering


class TestValidateConfig:
    def test_valid_config_has_no_issues(self) -> None:
        schema, issues = validate_config({"graph": {"commit_ordering": "topo"}, "unknown": {"x": 1}})

        assert issues == []
        assert schema is not None
        assert schema.graph.commit_ordering is CommitOrdering.TOPOLOGICAL

    def test_invalid_enum_value(self) -> None:
        schema, issues = validate_config({"graph": {"commit_ordering": "random"}})

        assert schema is None
        (issue,) = issues
        assert issue.key == "graph.commit_ordering"
        assert issue.actual == "random"
        assert issue.expected is not None

    def test_out_of_range_value(self) -> None:
        _, issues = validate_config({"git": {"max_output_bytes": 0}})

        (issue,) = issues
        assert issue.key == "git.max_output_bytes"
        assert issue.actual == 0

    def test_reports_every_issue(self) -> None:
        _, issues = validate_config({"git": {"max_parallel": "many"}, "logging": {"format": "xml"}})

        assert {issue.key for issue in issues} == {"git.max_parallel", "logging.format"}
