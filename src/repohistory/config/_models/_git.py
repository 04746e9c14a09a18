"""Git executable configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from repohistory.config._defaults import DEFAULT_MAX_OUTPUT_BYTES


class GitConfig(BaseModel):
    """Git executable configuration section.

    Attributes:
        path: Path to the git executable. Empty means search PATH.
        file_encoding: Encoding used to decode file contents and command output.
        max_parallel: Maximum concurrent git invocations for batch operations.
        max_output_bytes: Upper bound on buffered stdout per invocation.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = ""
    file_encoding: str = "utf-8"
    max_parallel: int = Field(default=4, ge=1)
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, ge=1)
