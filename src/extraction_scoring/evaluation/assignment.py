"""Greedy one-to-one assignment of extracted items to ground truth.

Every (extracted, ground truth) pair accepted by the predicate becomes a
candidate. Candidates are taken in descending similarity order and kept
only while both sides are still free, which approximates a maximum-weight
bipartite matching. The result is not guaranteed optimal (no Hungarian
step), but it is deterministic: equal similarities are ordered by
extracted index, then ground truth index.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from extraction_scoring.evaluation.predicates import MatchPredicate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchCandidate:
    """A predicate-approved pairing, before assignment."""

    extracted_index: int
    ground_truth_index: int
    similarity: float
    type_match: bool
    direction_match: bool

    @property
    def sort_key(self) -> tuple[float, int, int]:
        return (-self.similarity, self.extracted_index, self.ground_truth_index)


@dataclass
class Assignment:
    """Outcome of the greedy solver.

    Attributes:
        pairs: Assigned candidates, in assignment order
        unmatched_extracted: Indices of extracted items left unassigned (false positives)
        unmatched_ground_truth: Indices of ground truth items left unassigned (false negatives)
    """

    pairs: list[MatchCandidate] = field(default_factory=list)
    unmatched_extracted: list[int] = field(default_factory=list)
    unmatched_ground_truth: list[int] = field(default_factory=list)

    @property
    def correct_directions(self) -> int:
        return sum(1 for pair in self.pairs if pair.direction_match)


def build_candidates(
    extracted: Sequence[Any],
    ground_truth: Sequence[Any],
    predicate: MatchPredicate,
) -> list[MatchCandidate]:
    """Evaluate the predicate on every pair and keep the matching ones."""
    candidates = []
    for i, ext_item in enumerate(extracted):
        for j, gt_item in enumerate(ground_truth):
            outcome = predicate.match(ext_item, gt_item)
            if outcome.matches:
                candidates.append(
                    MatchCandidate(
                        extracted_index=i,
                        ground_truth_index=j,
                        similarity=outcome.similarity,
                        type_match=outcome.type_match,
                        direction_match=outcome.direction_match,
                    )
                )

    logger.debug(
        "Built %d match candidates from %d extracted x %d ground truth items",
        len(candidates),
        len(extracted),
        len(ground_truth),
    )
    return candidates


def greedy_assign(
    candidates: Sequence[MatchCandidate],
    extracted_count: int,
    ground_truth_count: int,
) -> Assignment:
    """Assign candidates one-to-one, best similarity first.

    Args:
        candidates: Predicate-approved pairs, in any order.
        extracted_count: Number of extracted items.
        ground_truth_count: Number of ground truth items.

    Returns:
        Assignment with the chosen pairs and the unassigned indices.
    """
    used_extracted: set[int] = set()
    used_ground_truth: set[int] = set()
    pairs = []

    for candidate in sorted(candidates, key=lambda c: c.sort_key):
        if (
            candidate.extracted_index in used_extracted
            or candidate.ground_truth_index in used_ground_truth
        ):
            continue
        used_extracted.add(candidate.extracted_index)
        used_ground_truth.add(candidate.ground_truth_index)
        pairs.append(candidate)

    return Assignment(
        pairs=pairs,
        unmatched_extracted=[i for i in range(extracted_count) if i not in used_extracted],
        unmatched_ground_truth=[
            j for j in range(ground_truth_count) if j not in used_ground_truth
        ],
    )


def assign(
    extracted: Sequence[Any],
    ground_truth: Sequence[Any],
    predicate: MatchPredicate,
) -> Assignment:
    """Build candidates and solve the assignment in one step."""
    candidates = build_candidates(extracted, ground_truth, predicate)
    return greedy_assign(candidates, len(extracted), len(ground_truth))
