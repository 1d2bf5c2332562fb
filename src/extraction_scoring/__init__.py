"""
extraction-scoring: Fuzzy matching and scoring for entity and relationship extraction.
"""

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

# Evaluation
from extraction_scoring.evaluation import (
    BatchResult,
    Entity,
    EntityPredicate,
    EvaluationItem,
    EvaluationReporter,
    EvaluationResult,
    ExtractionEvaluator,
    ItemMatch,
    MatchOutcome,
    MatchPredicate,
    Relationship,
    RelationshipPredicate,
    TypeMetrics,
    calculate_similarity,
    evaluate_batch_entity_extraction,
    evaluate_batch_relationship_extraction,
    evaluate_entity_extraction,
    evaluate_relationship_extraction,
    get_predicate,
    normalize_name,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "EvaluationConfig",
    "MatchMode",
    "ItemKind",
    "DEFAULT_SIMILARITY_THRESHOLD",
    # Errors
    "ExtractionScoringError",
    "ConfigurationError",
    "ReportError",
    # Items & Results
    "Entity",
    "Relationship",
    "EvaluationItem",
    "ItemMatch",
    "TypeMetrics",
    "EvaluationResult",
    "BatchResult",
    # Matching
    "normalize_name",
    "calculate_similarity",
    "MatchOutcome",
    "MatchPredicate",
    "EntityPredicate",
    "RelationshipPredicate",
    "get_predicate",
    # Evaluation
    "ExtractionEvaluator",
    "evaluate_entity_extraction",
    "evaluate_batch_entity_extraction",
    "evaluate_relationship_extraction",
    "evaluate_batch_relationship_extraction",
    # Reporting
    "EvaluationReporter",
]
