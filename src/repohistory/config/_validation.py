# pyright: reportAny=false, reportExplicitAny=false
"""Configuration validation using Pydantic schemas."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from repohistory.config._models._git import GitConfig
from repohistory.config._models._graph import GraphConfig
from repohistory.config._models._logging import LoggingConfig
from repohistory.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "graph.date_type").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
    """

    key: str
    message: str
    expected: str | None
    actual: Any


class ConfigSchema(BaseModel):
    """Pydantic schema for the root configuration."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    git: GitConfig = GitConfig()
    graph: GraphConfig = GraphConfig()
    logging: LoggingConfig = LoggingConfig()


def _pydantic_error_to_issue(error: "ErrorDetails") -> ValidationIssue:
    loc = error.get("loc", ())
    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None and "expected" in ctx:
        expected = str(ctx["expected"])
    return ValidationIssue(
        key=".".join(str(part) for part in loc),
        message=str(error.get("msg", "Validation error")),
        expected=expected,
        actual=error.get("input"),
    )


def validate_config(config: dict[str, Any]) -> tuple[ConfigSchema | None, list[ValidationIssue]]:
    """Validate a merged configuration dictionary.

    Args:
        config: The merged configuration dictionary to validate.

    Returns:
        Tuple of (parsed schema or None, issues). Issues are empty when valid.
    """
    try:
        schema = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return None, [_pydantic_error_to_issue(err) for err in e.errors()]
    return schema, []


def raise_if_validation_errors(
    issues: list[ValidationIssue],
    source: str | None = None,
) -> None:
    """Raise ConfigValidationError for the first issue, if any.

    Raises:
        ConfigValidationError: If any issues exist.
    """
    if issues:
        issue = issues[0]
        msg = f"Invalid configuration value for '{issue.key}'"
        raise ConfigValidationError(
            msg,
            key=issue.key,
            value=issue.actual,
            expected=issue.expected or issue.message,
            source=source,
        )
