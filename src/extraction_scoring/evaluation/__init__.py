"""Evaluation module for extraction-scoring.

This module scores extracted entities and relationships against ground
truth annotations: fuzzy name matching, greedy one-to-one assignment, and
precision, recall, F1 and direction accuracy, per type and per corpus.

Example:
    ```python
    from extraction_scoring.evaluation import (
        EvaluationReporter,
        ExtractionEvaluator,
        MatchMode,
    )

    evaluator = ExtractionEvaluator.for_entities(
        mode=MatchMode.PARTIAL,
        similarity_threshold=0.8,
    )

    batch = evaluator.evaluate_batch([
        {
            "extracted": [{"name": "Purchase Order Process", "type": "Process"}],
            "ground_truth": [{"name": "Purchase Order Proces", "type": "Process"}],
        },
    ])

    print(f"Micro F1: {batch.aggregate.f1:.2%}")
    print(f"Macro F1: {batch.aggregate.macro_f1:.2%}")

    EvaluationReporter(batch).save("report.md")
    ```
"""

from extraction_scoring.core.config import ItemKind, MatchMode

# Assignment
from extraction_scoring.evaluation.assignment import (
    Assignment,
    MatchCandidate,
    assign,
    build_candidates,
    greedy_assign,
)

# Evaluator
from extraction_scoring.evaluation.evaluator import (
    ExtractionEvaluator,
    evaluate_batch_entity_extraction,
    evaluate_batch_relationship_extraction,
    evaluate_entity_extraction,
    evaluate_relationship_extraction,
)

# Metrics
from extraction_scoring.evaluation.metrics import (
    MacroMetrics,
    TypeCounts,
    TypeTable,
    compute_binary_metrics,
    macro_average,
)

# Predicates
from extraction_scoring.evaluation.predicates import (
    EntityPredicate,
    MatchOutcome,
    MatchPredicate,
    RelationshipPredicate,
    get_predicate,
)

# Reporters
from extraction_scoring.evaluation.reporters import EvaluationReporter, format_item

# Similarity
from extraction_scoring.evaluation.similarity import (
    calculate_similarity,
    levenshtein_distance,
    normalize_name,
)

# Types
from extraction_scoring.evaluation.types import (
    BatchResult,
    Entity,
    EvaluationItem,
    EvaluationResult,
    ItemMatch,
    Relationship,
    TypeMetrics,
)

__all__ = [
    # Modes
    "MatchMode",
    "ItemKind",
    # Types
    "Entity",
    "Relationship",
    "EvaluationItem",
    "ItemMatch",
    "TypeMetrics",
    "EvaluationResult",
    "BatchResult",
    # Similarity
    "normalize_name",
    "levenshtein_distance",
    "calculate_similarity",
    # Predicates
    "MatchOutcome",
    "MatchPredicate",
    "EntityPredicate",
    "RelationshipPredicate",
    "get_predicate",
    # Assignment
    "MatchCandidate",
    "Assignment",
    "build_candidates",
    "greedy_assign",
    "assign",
    # Metrics
    "TypeCounts",
    "TypeTable",
    "MacroMetrics",
    "compute_binary_metrics",
    "macro_average",
    # Evaluator
    "ExtractionEvaluator",
    "evaluate_entity_extraction",
    "evaluate_batch_entity_extraction",
    "evaluate_relationship_extraction",
    "evaluate_batch_relationship_extraction",
    # Reporters
    "EvaluationReporter",
    "format_item",
]
