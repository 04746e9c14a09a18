"""Commit graph configuration model.

This module provides the GraphConfig Pydantic model controlling which
commits and references are queried and how their fields are formatted.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from repohistory.enums import CommitOrdering, DateType


class GraphConfig(BaseModel):
    """Commit graph configuration section.

    Attributes:
        date_type: Whether commits report their author or committer date.
        use_mailmap: Resolve author names and emails through .mailmap.
        commit_ordering: Ordering passed to `git log`.
        show_uncommitted_changes: Prepend the uncommitted changes node when
            the working tree is dirty.
        show_untracked_files: Count untracked files as uncommitted changes.
        show_tags: Attach tag references to commits.
        show_commits_only_referenced_by_tags: Include commits reachable only
            from tags when no branch filter is given.
        show_stashes: Splice stashes into the commit graph.
        show_signature_status: Request GPG signature fields in commit details.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    date_type: DateType = DateType.COMMIT
    use_mailmap: bool = False
    commit_ordering: CommitOrdering = CommitOrdering.DATE
    show_uncommitted_changes: bool = True
    show_untracked_files: bool = True
    show_tags: bool = True
    show_commits_only_referenced_by_tags: bool = True
    show_stashes: bool = False
    show_signature_status: bool = False
