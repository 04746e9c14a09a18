from repohistory.config import GraphConfig
from repohistory.enums import DateType
from repohistory.git import FIELD_SEPARATOR as SEP
from repohistory.git import build_formats


class TestBuildFormats:
    def test_log_format_defaults_to_commit_date_without_mailmap(self) -> None:
        formats = build_formats(GraphConfig(), supports_signatures=True)

        assert formats.log.split(SEP) == ["%H", "%P", "%an", "%ae", "%ct", "%s"]

    def test_author_date_and_mailmap(self) -> None:
        formats = build_formats(
            GraphConfig(date_type=DateType.AUTHOR, use_mailmap=True), supports_signatures=True
        )

        assert formats.log.split(SEP) == ["%H", "%P", "%aN", "%aE", "%at", "%s"]
        assert formats.stash.split(SEP) == ["%H", "%P", "%gD", "%aN", "%aE", "%at", "%s"]

    def test_signature_fields_need_configuration_and_support(self) -> None:
        enabled = GraphConfig(show_signature_status=True)

        with_support = build_formats(enabled, supports_signatures=True).commit_details.split(SEP)
        without_support = build_formats(enabled, supports_signatures=False).commit_details.split(SEP)
        disabled = build_formats(GraphConfig(), supports_signatures=True).commit_details.split(SEP)

        assert with_support[8:11] == ["%G?", "%GS", "%GK"]
        assert without_support[8:11] == ["", "", ""]
        assert disabled[8:11] == ["", "", ""]

    def test_commit_details_end_with_body(self) -> None:
        fields = build_formats(GraphConfig(), supports_signatures=False).commit_details.split(SEP)

        assert len(fields) == 12
        assert fields[-1] == "%B"

    def test_same_configuration_builds_equal_formats(self) -> None:
        graph = GraphConfig(use_mailmap=True)

        assert build_formats(graph, supports_signatures=True) == build_formats(graph, supports_signatures=True)
