"""Shared utilities for XML comparison.

This module provides the configuration objects, error types, result model
and logging helpers used across all comparison layers.
"""

from .config import (
    ComparatorConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    SourceConfig,
    StreamingConfig,
)
from .errors import (
    ComparisonIOError,
    ComparisonParseError,
    ComparisonResourceError,
    XMLCompareError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from .result import (
    ComparisonResult,
    DifferenceKind,
    DifferenceRecord,
    FileInfo,
)

__all__ = [
    "ComparatorConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "SourceConfig",
    "StreamingConfig",
    "ComparisonIOError",
    "ComparisonParseError",
    "ComparisonResourceError",
    "XMLCompareError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "new_correlation_id",
    "ComparisonResult",
    "DifferenceKind",
    "DifferenceRecord",
    "FileInfo",
]
