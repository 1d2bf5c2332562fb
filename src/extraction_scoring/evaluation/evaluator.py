"""Extraction evaluator for scoring extracted items against ground truth."""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from extraction_scoring.core.config import (
    DEFAULT_SIMILARITY_THRESHOLD,
    EvaluationConfig,
    ItemKind,
    MatchMode,
)
from extraction_scoring.evaluation.assignment import assign
from extraction_scoring.evaluation.metrics import (
    TypeCounts,
    TypeTable,
    compute_binary_metrics,
    macro_average,
    safe_ratio,
)
from extraction_scoring.evaluation.predicates import (
    EntityPredicate,
    MatchPredicate,
    RelationshipPredicate,
    item_field,
)
from extraction_scoring.evaluation.types import (
    BatchResult,
    EvaluationItem,
    EvaluationResult,
    ItemMatch,
    TypeMetrics,
)

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


def _is_item_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _unpack_item(item: Any) -> tuple[Any, Any]:
    """Split a batch entry into its extracted and ground truth lists."""
    if isinstance(item, EvaluationItem):
        return item.extracted, item.ground_truth
    if isinstance(item, Mapping):
        parsed = EvaluationItem.model_validate(item)
        return parsed.extracted, parsed.ground_truth
    return None, None


class ExtractionEvaluator:
    """Scores extracted entities or relationships against ground truth.

    The evaluator is generic: an injected MatchPredicate decides which pairs
    may correspond, a greedy solver assigns them one-to-one, and the
    resulting counts are turned into precision, recall, F1 and (for
    relationships) direction accuracy, overall and per type.

    Scoring never raises. Invalid item lists produce an all-zero result and
    a logged warning, and malformed items surface as false positives or
    false negatives.

    Example:
        ```python
        from extraction_scoring import ExtractionEvaluator, MatchMode

        evaluator = ExtractionEvaluator.for_relationships(
            mode=MatchMode.DIRECTION_AGNOSTIC,
            relationship_types=["OWNS", "REPORTS_TO"],
        )

        result = evaluator.evaluate(
            extracted=[{"from": "Finance", "to": "Budget", "type": "OWNS"}],
            ground_truth=[{"from": "Budget", "to": "Finance", "type": "OWNS"}],
        )

        print(f"F1: {result.f1:.2%}")
        print(f"Direction accuracy: {result.direction_accuracy:.2%}")
        ```
    """

    def __init__(
        self,
        predicate: MatchPredicate,
        type_vocabulary: Iterable[str] = (),
    ) -> None:
        """Initialize the evaluator.

        Args:
            predicate: Matching strategy for one kind of item.
            type_vocabulary: Known types used to pre-seed the per-type table.
        """
        self.predicate = predicate
        self.type_vocabulary = list(type_vocabulary)

    @classmethod
    def for_entities(
        cls,
        config: EvaluationConfig | None = None,
        **overrides: Any,
    ) -> "ExtractionEvaluator":
        """Build an entity evaluator from a config and/or keyword overrides."""
        config = cls._resolve_config(config, overrides)
        return cls(
            EntityPredicate(config.mode, config.similarity_threshold),
            type_vocabulary=config.entity_types,
        )

    @classmethod
    def for_relationships(
        cls,
        config: EvaluationConfig | None = None,
        **overrides: Any,
    ) -> "ExtractionEvaluator":
        """Build a relationship evaluator from a config and/or keyword overrides."""
        config = cls._resolve_config(config, overrides)
        return cls(
            RelationshipPredicate(config.mode, config.similarity_threshold),
            type_vocabulary=config.relationship_types,
        )

    @staticmethod
    def _resolve_config(
        config: EvaluationConfig | None,
        overrides: dict[str, Any],
    ) -> EvaluationConfig:
        if config is None:
            return EvaluationConfig(**overrides)
        if not overrides:
            return config
        return EvaluationConfig(**{**config.model_dump(), **overrides})

    @property
    def item_kind(self) -> ItemKind:
        return self.predicate.item_kind

    @property
    def mode(self) -> MatchMode:
        return self.predicate.mode

    @property
    def similarity_threshold(self) -> float:
        return self.predicate.similarity_threshold

    @property
    def tracks_direction(self) -> bool:
        return self.item_kind == ItemKind.RELATIONSHIP

    def evaluate(
        self,
        extracted: Sequence[Any],
        ground_truth: Sequence[Any],
        document_index: int | None = None,
    ) -> EvaluationResult:
        """Evaluate one document's extracted items against its ground truth.

        Args:
            extracted: Items produced by the extractor.
            ground_truth: Annotated reference items.
            document_index: Position of the document within a batch, if any.

        Returns:
            EvaluationResult with micro/macro metrics, per-type metrics and
            match details.
        """
        start_time = time.perf_counter()

        if not _is_item_list(extracted):
            logger.warning(
                "%s evaluation called with invalid extracted list: %s",
                self.item_kind.value,
                type(extracted).__name__,
            )
            return self._empty_result(document_index)

        if not _is_item_list(ground_truth):
            logger.warning(
                "%s evaluation called with invalid ground truth list: %s",
                self.item_kind.value,
                type(ground_truth).__name__,
            )
            return self._empty_result(document_index)

        table = TypeTable(self.type_vocabulary)
        for gt_item in ground_truth:
            bucket = table.bucket(item_field(gt_item, "type"))
            if bucket is not None:
                bucket.support += 1
        for ext_item in extracted:
            bucket = table.bucket(item_field(ext_item, "type"))
            if bucket is not None:
                bucket.predicted += 1

        assignment = assign(extracted, ground_truth, self.predicate)

        matches = []
        for pair in assignment.pairs:
            gt_item = ground_truth[pair.ground_truth_index]
            matches.append(
                ItemMatch(
                    extracted_index=pair.extracted_index,
                    ground_truth_index=pair.ground_truth_index,
                    extracted=extracted[pair.extracted_index],
                    ground_truth=gt_item,
                    similarity=pair.similarity,
                    direction_match=pair.direction_match if self.tracks_direction else None,
                )
            )

            # True positives are credited to the ground truth type
            bucket = table.bucket(item_field(gt_item, "type"))
            if bucket is not None:
                bucket.true_positives += 1
                if pair.direction_match:
                    bucket.correct_directions += 1
                else:
                    bucket.incorrect_directions += 1

        unmatched_extracted = [extracted[i] for i in assignment.unmatched_extracted]
        for ext_item in unmatched_extracted:
            bucket = table.bucket(item_field(ext_item, "type"))
            if bucket is not None:
                bucket.false_positives += 1

        unmatched_ground_truth = [ground_truth[j] for j in assignment.unmatched_ground_truth]
        for gt_item in unmatched_ground_truth:
            bucket = table.bucket(item_field(gt_item, "type"))
            if bucket is not None:
                bucket.false_negatives += 1

        correct_directions = assignment.correct_directions
        totals = TypeCounts(
            true_positives=len(assignment.pairs),
            false_positives=len(unmatched_extracted),
            false_negatives=len(unmatched_ground_truth),
            support=len(ground_truth),
            predicted=len(extracted),
            correct_directions=correct_directions,
            incorrect_directions=len(assignment.pairs) - correct_directions,
        )

        result = self._build_result(
            totals=totals,
            per_type=table.to_metrics(include_direction=self.tracks_direction),
            matches=matches,
            unmatched_extracted=unmatched_extracted,
            unmatched_ground_truth=unmatched_ground_truth,
            document_index=document_index,
            latency_ms=_elapsed_ms(start_time),
        )

        logger.info(
            "%s extraction evaluation complete: mode=%s precision=%.4f recall=%.4f "
            "f1=%.4f extracted=%d ground_truth=%d",
            self.item_kind.value.capitalize(),
            self.mode.value,
            result.precision,
            result.recall,
            result.f1,
            result.total_extracted,
            result.total_ground_truth,
        )
        return result

    def evaluate_batch(self, items: Sequence[Any]) -> BatchResult:
        """Evaluate a corpus of documents.

        Each document is scored independently; the aggregate applies the
        metric formulas once to the summed counts, so batch micro metrics
        are not an average of per-document ratios.

        Args:
            items: Entries holding `extracted` and `ground_truth` (or
                `groundTruth`) lists, as mappings or EvaluationItem models.

        Returns:
            BatchResult with the aggregate and per-document results.
        """
        start_time = time.perf_counter()

        if not _is_item_list(items) or not items:
            logger.warning(
                "Batch %s evaluation called with empty items list", self.item_kind.value
            )
            return BatchResult(
                item_kind=self.item_kind,
                aggregate=self._empty_result(),
                documents=[],
                document_count=0,
                mode=self.mode,
                similarity_threshold=self.similarity_threshold,
                evaluated_at=_utc_now_iso(),
                latency_ms=0.0,
            )

        documents = [
            self.evaluate(*_unpack_item(item), document_index=index)
            for index, item in enumerate(items)
        ]
        aggregate = self.aggregate(documents)
        latency_ms = _elapsed_ms(start_time)

        logger.info(
            "Batch %s extraction evaluation complete: documents=%d micro_f1=%.4f "
            "macro_f1=%.4f extracted=%d ground_truth=%d",
            self.item_kind.value,
            len(documents),
            aggregate.f1,
            aggregate.macro_f1,
            aggregate.total_extracted,
            aggregate.total_ground_truth,
        )

        return BatchResult(
            item_kind=self.item_kind,
            aggregate=aggregate.model_copy(update={"latency_ms": latency_ms}),
            documents=documents,
            document_count=len(documents),
            mode=self.mode,
            similarity_threshold=self.similarity_threshold,
            evaluated_at=aggregate.evaluated_at,
            latency_ms=latency_ms,
        )

    def aggregate(self, results: Iterable[EvaluationResult]) -> EvaluationResult:
        """Combine per-document results by summing their counts.

        Match details are left on the per-document results.
        """
        start_time = time.perf_counter()
        totals = TypeCounts()
        table = TypeTable(self.type_vocabulary)

        for result in results:
            totals.add(
                TypeCounts(
                    true_positives=result.true_positives,
                    false_positives=result.false_positives,
                    false_negatives=result.false_negatives,
                    support=result.total_ground_truth,
                    predicted=result.total_extracted,
                    correct_directions=result.correct_directions or 0,
                    incorrect_directions=result.incorrect_directions or 0,
                )
            )
            for type_name, type_metrics in result.per_type_metrics.items():
                table.merge(type_name, TypeCounts.from_metrics(type_metrics))

        return self._build_result(
            totals=totals,
            per_type=table.to_metrics(include_direction=self.tracks_direction),
            latency_ms=_elapsed_ms(start_time),
        )

    def _build_result(
        self,
        totals: TypeCounts,
        per_type: dict[str, TypeMetrics],
        matches: list[ItemMatch] | None = None,
        unmatched_extracted: list[Any] | None = None,
        unmatched_ground_truth: list[Any] | None = None,
        document_index: int | None = None,
        latency_ms: float = 0.0,
    ) -> EvaluationResult:
        """Build an EvaluationResult from summed counts."""
        precision, recall, f1 = compute_binary_metrics(
            totals.true_positives, totals.false_positives, totals.false_negatives
        )
        macro = macro_average(per_type, include_direction=self.tracks_direction)

        direction: dict[str, Any] = {}
        if self.tracks_direction:
            direction = {
                "direction_accuracy": safe_ratio(
                    totals.correct_directions, totals.true_positives
                ),
                "macro_direction_accuracy": macro.direction_accuracy,
                "correct_directions": totals.correct_directions,
                "incorrect_directions": totals.incorrect_directions,
            }

        return EvaluationResult(
            item_kind=self.item_kind,
            precision=precision,
            recall=recall,
            f1=f1,
            macro_precision=macro.precision,
            macro_recall=macro.recall,
            macro_f1=macro.f1,
            true_positives=totals.true_positives,
            false_positives=totals.false_positives,
            false_negatives=totals.false_negatives,
            total_extracted=totals.predicted,
            total_ground_truth=totals.support,
            per_type_metrics=per_type,
            matches=matches or [],
            unmatched_extracted=unmatched_extracted or [],
            unmatched_ground_truth=unmatched_ground_truth or [],
            mode=self.mode,
            similarity_threshold=self.similarity_threshold,
            document_index=document_index,
            evaluated_at=_utc_now_iso(),
            latency_ms=latency_ms,
            **direction,
        )

    def _empty_result(self, document_index: int | None = None) -> EvaluationResult:
        """All-zero result used when the input cannot be scored."""
        return self._build_result(
            totals=TypeCounts(),
            per_type={},
            document_index=document_index,
        )


# ============================================================================
# Convenience functions
# ============================================================================


def evaluate_entity_extraction(
    extracted: Sequence[Any],
    ground_truth: Sequence[Any],
    mode: MatchMode | str = MatchMode.STRICT,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    entity_types: Iterable[str] = (),
) -> EvaluationResult:
    """Score extracted entities against ground truth for one document."""
    evaluator = ExtractionEvaluator.for_entities(
        mode=mode,
        similarity_threshold=similarity_threshold,
        entity_types=list(entity_types),
    )
    return evaluator.evaluate(extracted, ground_truth)


def evaluate_batch_entity_extraction(
    items: Sequence[Any],
    mode: MatchMode | str = MatchMode.STRICT,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    entity_types: Iterable[str] = (),
) -> BatchResult:
    """Score extracted entities for a corpus of documents."""
    evaluator = ExtractionEvaluator.for_entities(
        mode=mode,
        similarity_threshold=similarity_threshold,
        entity_types=list(entity_types),
    )
    return evaluator.evaluate_batch(items)


def evaluate_relationship_extraction(
    extracted: Sequence[Any],
    ground_truth: Sequence[Any],
    mode: MatchMode | str = MatchMode.STRICT,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    relationship_types: Iterable[str] = (),
) -> EvaluationResult:
    """Score extracted relationships against ground truth for one document."""
    evaluator = ExtractionEvaluator.for_relationships(
        mode=mode,
        similarity_threshold=similarity_threshold,
        relationship_types=list(relationship_types),
    )
    return evaluator.evaluate(extracted, ground_truth)


def evaluate_batch_relationship_extraction(
    items: Sequence[Any],
    mode: MatchMode | str = MatchMode.STRICT,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    relationship_types: Iterable[str] = (),
) -> BatchResult:
    """Score extracted relationships for a corpus of documents."""
    evaluator = ExtractionEvaluator.for_relationships(
        mode=mode,
        similarity_threshold=similarity_threshold,
        relationship_types=list(relationship_types),
    )
    return evaluator.evaluate_batch(items)
