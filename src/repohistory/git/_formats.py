"""Format strings passed to git's --format option.

Formats are a pure function of the graph configuration and the executable's
capabilities. Callers compute them when they need them; a configuration
change is picked up by building a new GitFormats value.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from repohistory.enums import DateType

if TYPE_CHECKING:
    from repohistory.config import GraphConfig

# Field separator chosen so it cannot plausibly occur in authored text
FIELD_SEPARATOR = "XX7Nal-YARtTpjCikii9nJxER19D6diSyk-AWkPb"

# Fields per record, excluding any free-form body
LOG_FIELD_COUNT = 6
STASH_FIELD_COUNT = 7
COMMIT_DETAILS_FIELD_COUNT = 11


@dataclass(frozen=True, slots=True)
class GitFormats:
    """Format strings for the record types parsed by repohistory.

    Attributes:
        log: hash, parents, author, email, date, subject.
        commit_details: hash, parents, author, author email, author date,
            committer, committer email, committer date, signature status,
            signer, key, then the body.
        stash: hash, parents, selector, author, email, date, subject.
    """

    log: str
    commit_details: str
    stash: str


def build_formats(graph: "GraphConfig", *, supports_signatures: bool) -> GitFormats:
    """Build the format strings for a graph configuration.

    Args:
        graph: Graph configuration section.
        supports_signatures: Whether the git executable understands the
            signature placeholders.

    Returns:
        The format strings.
    """
    date = "%at" if graph.date_type == DateType.AUTHOR else "%ct"
    author = "%aN" if graph.use_mailmap else "%an"
    author_email = "%aE" if graph.use_mailmap else "%ae"
    committer = "%cN" if graph.use_mailmap else "%cn"
    committer_email = "%cE" if graph.use_mailmap else "%ce"
    signature = (
        ["%G?", "%GS", "%GK"]
        if graph.show_signature_status and supports_signatures
        else ["", "", ""]
    )

    return GitFormats(
        log=FIELD_SEPARATOR.join(["%H", "%P", author, author_email, date, "%s"]),
        commit_details=FIELD_SEPARATOR.join(
            [
                "%H",
                "%P",
                author,
                author_email,
                "%at",
                committer,
                committer_email,
                "%ct",
                *signature,
                "%B",
            ]
        ),
        stash=FIELD_SEPARATOR.join(
            ["%H", "%P", "%gD", author, author_email, date, "%s"]
        ),
    )
