"""Precision/recall/F1 and per-type aggregation."""

import statistics
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from extraction_scoring.evaluation.types import TypeMetrics


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for an empty denominator."""
    return numerator / denominator if denominator > 0 else 0.0


def compute_binary_metrics(tp: int, fp: int, fn: int) -> tuple[float, float, float]:
    """Compute precision, recall, and F1 from confusion counts."""
    # Precision: TP / (TP + FP)
    precision = safe_ratio(tp, tp + fp)

    # Recall: TP / (TP + FN)
    recall = safe_ratio(tp, tp + fn)

    # F1: Harmonic mean of precision and recall
    f1 = safe_ratio(2 * precision * recall, precision + recall)

    return precision, recall, f1


@dataclass
class TypeCounts:
    """Mutable confusion counts for one type, local to a single evaluation."""

    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    support: int = 0
    predicted: int = 0
    correct_directions: int = 0
    incorrect_directions: int = 0

    @property
    def has_data(self) -> bool:
        return self.support > 0 or self.predicted > 0

    def add(self, other: "TypeCounts") -> None:
        self.true_positives += other.true_positives
        self.false_positives += other.false_positives
        self.false_negatives += other.false_negatives
        self.support += other.support
        self.predicted += other.predicted
        self.correct_directions += other.correct_directions
        self.incorrect_directions += other.incorrect_directions

    @classmethod
    def from_metrics(cls, metrics: TypeMetrics) -> "TypeCounts":
        """Recover the raw counts carried by a TypeMetrics."""
        return cls(
            true_positives=metrics.true_positives,
            false_positives=metrics.false_positives,
            false_negatives=metrics.false_negatives,
            support=metrics.support,
            predicted=metrics.predicted,
            correct_directions=metrics.correct_directions or 0,
            incorrect_directions=metrics.incorrect_directions or 0,
        )

    def to_metrics(self, include_direction: bool = False) -> TypeMetrics:
        precision, recall, f1 = compute_binary_metrics(
            self.true_positives, self.false_positives, self.false_negatives
        )
        direction: dict[str, Any] = {}
        if include_direction:
            direction = {
                "direction_accuracy": safe_ratio(self.correct_directions, self.true_positives),
                "correct_directions": self.correct_directions,
                "incorrect_directions": self.incorrect_directions,
            }
        return TypeMetrics(
            precision=precision,
            recall=recall,
            f1=f1,
            support=self.support,
            predicted=self.predicted,
            true_positives=self.true_positives,
            false_positives=self.false_positives,
            false_negatives=self.false_negatives,
            **direction,
        )


class TypeTable:
    """Per-type counters for one evaluation call.

    Buckets for the known vocabulary are created up front so reports keep
    the vocabulary order; any other string type gets a bucket the first
    time it is seen. Missing or non-string types are not tracked per type.
    """

    def __init__(self, vocabulary: Iterable[str] = ()) -> None:
        self._counts: dict[str, TypeCounts] = {name: TypeCounts() for name in vocabulary}

    def bucket(self, type_name: Any) -> TypeCounts | None:
        if not isinstance(type_name, str):
            return None
        if type_name not in self._counts:
            self._counts[type_name] = TypeCounts()
        return self._counts[type_name]

    def merge(self, type_name: str, counts: TypeCounts) -> None:
        bucket = self.bucket(type_name)
        if bucket is not None:
            bucket.add(counts)

    def items(self) -> Iterable[tuple[str, TypeCounts]]:
        return self._counts.items()

    def to_metrics(self, include_direction: bool = False) -> dict[str, TypeMetrics]:
        """Metrics for every type that has support or predictions."""
        return {
            name: counts.to_metrics(include_direction)
            for name, counts in self._counts.items()
            if counts.has_data
        }


@dataclass
class MacroMetrics:
    """Unweighted mean of per-type metrics."""

    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    direction_accuracy: float | None = None


def macro_average(
    per_type: Mapping[str, TypeMetrics],
    include_direction: bool = False,
) -> MacroMetrics:
    """Average per-type metrics over the types with ground truth support.

    Types with no ground truth are excluded so each annotated type counts
    once regardless of its frequency.
    """
    supported = [m for m in per_type.values() if m.support > 0]
    if not supported:
        return MacroMetrics(direction_accuracy=0.0 if include_direction else None)

    return MacroMetrics(
        precision=statistics.mean(m.precision for m in supported),
        recall=statistics.mean(m.recall for m in supported),
        f1=statistics.mean(m.f1 for m in supported),
        direction_accuracy=(
            statistics.mean(m.direction_accuracy or 0.0 for m in supported)
            if include_direction
            else None
        ),
    )
