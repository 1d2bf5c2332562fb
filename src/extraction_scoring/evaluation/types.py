"""Type definitions for extraction scoring."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from extraction_scoring.core.config import ItemKind, MatchMode

# ============================================================================
# Input items
# ============================================================================


class Entity(BaseModel):
    """An extracted or ground-truth entity.

    Fields are optional so that malformed records still load; they simply
    fail to match anything.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, description="Entity name as written")
    type: str | None = Field(default=None, description="Entity type from the vocabulary")


class Relationship(BaseModel):
    """An extracted or ground-truth relationship between two named entities.

    The source endpoint is exposed as `from_` and serialized as `from`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    from_: str | None = Field(default=None, alias="from", description="Source entity name")
    to: str | None = Field(default=None, description="Target entity name")
    type: str | None = Field(default=None, description="Relationship type from the vocabulary")


class EvaluationItem(BaseModel):
    """One document's extracted items paired with its ground truth."""

    model_config = ConfigDict(populate_by_name=True)

    extracted: Any = Field(default=None, description="Items produced by the extractor")
    ground_truth: Any = Field(
        default=None,
        alias="groundTruth",
        description="Annotated reference items",
    )


# ============================================================================
# Results
# ============================================================================


class ItemMatch(BaseModel):
    """A single assigned pair of extracted and ground-truth items."""

    model_config = ConfigDict(frozen=True)

    extracted_index: int = Field(description="Position of the item in the extracted list")
    ground_truth_index: int = Field(description="Position of the item in the ground truth list")
    extracted: Any = Field(description="The extracted item")
    ground_truth: Any = Field(description="The ground truth item it was assigned to")
    similarity: float = Field(ge=0.0, le=1.0, description="Similarity used for ranking")
    direction_match: bool | None = Field(
        default=None,
        description="Whether the relationship direction agrees with ground truth",
    )


class TypeMetrics(BaseModel):
    """Precision/recall/F1 restricted to one entity or relationship type."""

    model_config = ConfigDict(frozen=True)

    precision: float = Field(default=0.0, ge=0.0, le=1.0)
    recall: float = Field(default=0.0, ge=0.0, le=1.0)
    f1: float = Field(default=0.0, ge=0.0, le=1.0)

    support: int = Field(default=0, description="Ground truth items of this type")
    predicted: int = Field(default=0, description="Extracted items of this type")

    true_positives: int = Field(default=0)
    false_positives: int = Field(default=0)
    false_negatives: int = Field(default=0)

    # Relationships only
    direction_accuracy: float | None = Field(default=None, ge=0.0, le=1.0)
    correct_directions: int | None = Field(default=None)
    incorrect_directions: int | None = Field(default=None)


class EvaluationResult(BaseModel):
    """Scoring of extracted items against ground truth.

    Micro metrics (`precision`, `recall`, `f1`) come from the pooled
    TP/FP/FN counts; macro metrics average the per-type metrics over types
    that have ground truth support.

    Example:
        ```python
        result = evaluator.evaluate(extracted, ground_truth)
        print(f"F1: {result.f1:.2%}")
        for type_name, tm in result.per_type_metrics.items():
            print(type_name, tm.support, f"{tm.f1:.0%}")
        ```
    """

    model_config = ConfigDict(frozen=True)

    item_kind: ItemKind = Field(description="Whether entities or relationships were scored")

    # === Micro metrics ===
    precision: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="TP / (TP + FP) - fraction of extracted items that are correct",
    )
    recall: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="TP / (TP + FN) - fraction of ground truth items found",
    )
    f1: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Harmonic mean of precision and recall",
    )
    direction_accuracy: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Correctly oriented matches / TP (relationships only)",
    )

    # === Macro metrics (mean over types with support) ===
    macro_precision: float = Field(default=0.0, ge=0.0, le=1.0)
    macro_recall: float = Field(default=0.0, ge=0.0, le=1.0)
    macro_f1: float = Field(default=0.0, ge=0.0, le=1.0)
    macro_direction_accuracy: float | None = Field(default=None, ge=0.0, le=1.0)

    # === Counts ===
    true_positives: int = Field(default=0)
    false_positives: int = Field(default=0)
    false_negatives: int = Field(default=0)
    total_extracted: int = Field(default=0)
    total_ground_truth: int = Field(default=0)
    correct_directions: int | None = Field(default=None)
    incorrect_directions: int | None = Field(default=None)

    # Per-type breakdown
    per_type_metrics: dict[str, TypeMetrics] = Field(
        default_factory=dict,
        description="Metrics keyed by type, for types with support or predictions",
    )

    # Match details
    matches: list[ItemMatch] = Field(default_factory=list)
    unmatched_extracted: list[Any] = Field(
        default_factory=list,
        description="False positives",
    )
    unmatched_ground_truth: list[Any] = Field(
        default_factory=list,
        description="False negatives",
    )

    # Metadata
    mode: MatchMode = Field(default=MatchMode.STRICT, description="Effective matching mode")
    similarity_threshold: float = Field(ge=0.0, le=1.0)
    document_index: int | None = Field(
        default=None,
        description="Position of the document within a batch",
    )
    evaluated_at: str = Field(description="ISO-8601 timestamp")
    latency_ms: float = Field(default=0.0, description="Wall clock time spent scoring")


class BatchResult(BaseModel):
    """Corpus-level scoring built from summed per-document counts."""

    model_config = ConfigDict(frozen=True)

    item_kind: ItemKind
    aggregate: EvaluationResult = Field(
        description="Micro metrics over the summed counts plus macro metrics per type",
    )
    documents: list[EvaluationResult] = Field(
        default_factory=list,
        description="Per-document results for drill-down",
    )
    document_count: int = Field(default=0)
    mode: MatchMode = Field(default=MatchMode.STRICT)
    similarity_threshold: float = Field(ge=0.0, le=1.0)
    evaluated_at: str = Field(description="ISO-8601 timestamp")
    latency_ms: float = Field(default=0.0)
