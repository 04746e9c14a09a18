"""Shared utilities for repohistory."""

from ._concurrency import gather_bounded
from ._logging import create_logger, create_logger_from_config

__all__ = [
    "create_logger",
    "create_logger_from_config",
    "gather_bounded",
]
