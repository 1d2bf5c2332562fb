"""Tests for configuration classes and exceptions."""

import logging

import pytest
from pydantic import ValidationError

from extraction_scoring import (
    DEFAULT_SIMILARITY_THRESHOLD,
    ConfigurationError,
    EvaluationConfig,
    ExtractionEvaluator,
    ExtractionScoringError,
    MatchMode,
    ReportError,
)


class TestEvaluationConfig:
    """Tests for EvaluationConfig class."""

    def test_default_values(self) -> None:
        """Test default evaluation config values."""
        config = EvaluationConfig()

        assert config.mode == MatchMode.STRICT
        assert config.similarity_threshold == DEFAULT_SIMILARITY_THRESHOLD == 0.85
        assert config.entity_types == []
        assert config.relationship_types == []
        assert config.sample_size == 5

    def test_custom_values(self) -> None:
        """Test evaluation config with custom values."""
        config = EvaluationConfig(
            mode=MatchMode.PARTIAL,
            similarity_threshold=0.7,
            entity_types=["Process", "Task", "Role"],
            sample_size=10,
        )

        assert config.mode == MatchMode.PARTIAL
        assert config.similarity_threshold == 0.7
        assert config.entity_types == ["Process", "Task", "Role"]
        assert config.sample_size == 10

    def test_mode_as_string(self) -> None:
        """Test that modes may be given as plain strings."""
        config = EvaluationConfig(mode="direction_agnostic")
        evaluator = ExtractionEvaluator.for_relationships(config)

        assert evaluator.mode == MatchMode.DIRECTION_AGNOSTIC

    def test_unknown_mode_accepted_then_degraded(self, caplog) -> None:
        """Test that an unknown mode loads but the evaluator falls back to strict."""
        config = EvaluationConfig(mode="fuzzy")

        with caplog.at_level(logging.WARNING):
            evaluator = ExtractionEvaluator.for_entities(config)

        assert evaluator.mode == MatchMode.STRICT
        assert "Unknown matching mode" in caplog.text

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_validation(self, threshold: float) -> None:
        """Test similarity threshold bounds."""
        with pytest.raises(ValidationError):
            EvaluationConfig(similarity_threshold=threshold)

    def test_threshold_bounds_inclusive(self) -> None:
        assert EvaluationConfig(similarity_threshold=0.0).similarity_threshold == 0.0
        assert EvaluationConfig(similarity_threshold=1.0).similarity_threshold == 1.0

    def test_sample_size_validation(self) -> None:
        with pytest.raises(ValidationError):
            EvaluationConfig(sample_size=-1)

    def test_vocabularies_not_shared(self) -> None:
        """Test that default lists are independent between instances."""
        first = EvaluationConfig()
        first.entity_types.append("Process")

        assert EvaluationConfig().entity_types == []

    def test_overrides_applied_on_top_of_config(self) -> None:
        """Test that keyword overrides win over the config object."""
        config = EvaluationConfig(mode=MatchMode.PARTIAL, entity_types=["Process"])

        evaluator = ExtractionEvaluator.for_entities(config, similarity_threshold=0.9)

        assert evaluator.mode == MatchMode.PARTIAL
        assert evaluator.similarity_threshold == 0.9
        assert evaluator.type_vocabulary == ["Process"]
        assert config.similarity_threshold == 0.85

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ValidationError):
            ExtractionEvaluator.for_entities(similarity_threshold=2.0)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self) -> None:
        assert issubclass(ConfigurationError, ExtractionScoringError)
        assert issubclass(ReportError, ExtractionScoringError)

    def test_configuration_error_option(self) -> None:
        error = ConfigurationError("Unknown item kind: 'event'", option="item_kind")

        assert str(error) == "Unknown item kind: 'event'"
        assert error.option == "item_kind"

    def test_configuration_error_default_option(self) -> None:
        assert ConfigurationError("bad").option is None
