"""repohistory exceptions.

Git and parsing problems are never raised; they are reported through the
result values in `repohistory.git`. Exceptions cover configuration and the
batch helper only.
"""

from pathlib import Path
from typing import Any


class RepoHistoryError(Exception):
    """Base exception for repohistory errors."""


class ConfigError(RepoHistoryError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


class BatchOperationError(RepoHistoryError):
    """Raised when one operation of a bounded batch fails.

    The whole batch is abandoned; no partial results are returned.

    Attributes:
        index: Position of the first failing item in the input.
        cause: The exception raised by the failing operation.
    """

    def __init__(self, message: str, *, index: int, cause: Exception) -> None:
        """Initialize with the failing item's position and its exception."""
        super().__init__(message)
        self.index: int = index
        self.cause: Exception = cause
