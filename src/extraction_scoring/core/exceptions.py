"""Custom exceptions for extraction-scoring.

The scoring path itself never raises: malformed input degrades to an
all-zero result with a logged warning. These exceptions only guard the
configuration and reporting boundaries.
"""


class ExtractionScoringError(Exception):
    """Base exception for all extraction-scoring errors."""

    pass


class ConfigurationError(ExtractionScoringError):
    """Raised when an evaluator is requested with an invalid configuration."""

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class ReportError(ExtractionScoringError):
    """Raised when a report cannot be rendered in the requested format."""

    pass
