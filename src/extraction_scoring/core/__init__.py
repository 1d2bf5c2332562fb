"""Core configuration and errors."""

from extraction_scoring.core.config import (
    DEFAULT_SIMILARITY_THRESHOLD,
    EvaluationConfig,
    ItemKind,
    MatchMode,
)
from extraction_scoring.core.exceptions import (
    ConfigurationError,
    ExtractionScoringError,
    ReportError,
)

__all__ = [
    "DEFAULT_SIMILARITY_THRESHOLD",
    "EvaluationConfig",
    "ItemKind",
    "MatchMode",
    "ExtractionScoringError",
    "ConfigurationError",
    "ReportError",
]
