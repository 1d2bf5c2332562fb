"""Configuration classes for extraction scoring."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_SIMILARITY_THRESHOLD = 0.85


class MatchMode(str, Enum):
    """Matching semantics used to pair extracted items with ground truth."""

    STRICT = "strict"  # Exact normalized names and type
    PARTIAL = "partial"  # Fuzzy names (Levenshtein) and exact type
    TYPE_ONLY = "type_only"  # Exact type with a weak name-overlap floor
    DIRECTION_AGNOSTIC = "direction_agnostic"  # Relationships only: A->B matches B->A


class ItemKind(str, Enum):
    """Kind of extracted item an evaluator scores."""

    ENTITY = "entity"
    RELATIONSHIP = "relationship"


class EvaluationConfig(BaseModel):
    """Configuration for an evaluation run.

    The type vocabularies are owned by the extraction schema and only used to
    pre-seed the per-type table; items with other types are still matched and
    counted.

    Example:
        ```python
        config = EvaluationConfig(
            mode=MatchMode.PARTIAL,
            similarity_threshold=0.8,
            entity_types=["Process", "Role", "System"],
        )
        evaluator = ExtractionEvaluator.for_entities(config)
        ```
    """

    # Matching settings
    mode: MatchMode | str = Field(
        default=MatchMode.STRICT,
        description=(
            "Matching mode. Unrecognized values fall back to strict matching "
            "with a warning when the evaluator is built."
        ),
    )
    similarity_threshold: float = Field(
        default=DEFAULT_SIMILARITY_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Minimum name similarity for partial and direction-agnostic matching",
    )

    # Type vocabulary
    entity_types: list[str] = Field(
        default_factory=list,
        description="Known entity types, in reporting order",
    )
    relationship_types: list[str] = Field(
        default_factory=list,
        description="Known relationship types, in reporting order",
    )

    # Report settings
    sample_size: int = Field(
        default=5,
        ge=0,
        description="Number of unmatched items listed per section in text reports",
    )
