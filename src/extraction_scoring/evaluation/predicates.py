"""Match predicates for extracted items.

A predicate decides whether one extracted item corresponds to one ground
truth item under a matching mode. Each predicate outputs both:
- `matches`: Binary decision (candidate for assignment or not)
- `similarity`: Continuous score 0.0-1.0 (used to rank candidates)

Predicates:
- EntityPredicate: `{name, type}` items
- RelationshipPredicate: `{from, to, type}` items, optionally direction-agnostic
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel

from extraction_scoring.core.config import (
    DEFAULT_SIMILARITY_THRESHOLD,
    ItemKind,
    MatchMode,
)
from extraction_scoring.core.exceptions import ConfigurationError
from extraction_scoring.evaluation.similarity import calculate_similarity, normalize_name

logger = logging.getLogger(__name__)

# Minimum name overlap for TYPE_ONLY matching
ENTITY_TYPE_ONLY_FLOOR = 0.5
RELATIONSHIP_TYPE_ONLY_FLOOR = 0.3


@dataclass
class MatchOutcome:
    """Result of comparing an extracted item with a ground truth item.

    Attributes:
        matches: Binary match decision
        similarity: Similarity used to rank candidate pairs (0.0-1.0)
        type_match: Whether both items carry the same type
        direction_match: Whether a relationship kept its orientation
            (always True for entities)
    """

    matches: bool
    similarity: float
    type_match: bool
    direction_match: bool = True

    def __post_init__(self) -> None:
        """Validate similarity is in valid range."""
        if not 0.0 <= self.similarity <= 1.0:
            raise ValueError(f"Similarity must be between 0.0 and 1.0, got {self.similarity}")


@runtime_checkable
class MatchPredicate(Protocol):
    """Protocol for item matching strategies.

    The assignment solver and evaluator only depend on this interface, so
    entities and relationships share the same scoring engine.
    """

    item_kind: ItemKind
    mode: MatchMode
    similarity_threshold: float

    def match(self, extracted: Any, ground_truth: Any) -> MatchOutcome:
        """Compare an extracted item with a ground truth item.

        Args:
            extracted: The extracted item
            ground_truth: The reference item

        Returns:
            MatchOutcome with both binary match and similarity
        """
        ...


def item_field(item: Any, key: str) -> Any:
    """Read a field from a mapping or a model, returning None when absent."""
    if isinstance(item, Mapping):
        return item.get(key)
    if isinstance(item, BaseModel):
        for name, info in type(item).model_fields.items():
            if info.alias == key:
                return getattr(item, name)
    return getattr(item, key, None)


def resolve_mode(mode: Any, supported: tuple[MatchMode, ...]) -> MatchMode:
    """Resolve a mode value, falling back to STRICT for anything unsupported."""
    if isinstance(mode, str) and not isinstance(mode, MatchMode):
        mode = mode.strip().lower()
    try:
        resolved = MatchMode(mode)
    except ValueError:
        resolved = None

    if resolved not in supported:
        logger.warning("Unknown matching mode: %s, defaulting to strict", mode)
        return MatchMode.STRICT
    return resolved


def _validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(
            f"Threshold must be between 0.0 and 1.0, got {threshold}",
            option="similarity_threshold",
        )
    return threshold


def _same_type(extracted: Any, ground_truth: Any) -> bool:
    """Types agree only when both items carry one."""
    extracted_type = item_field(extracted, "type")
    return extracted_type is not None and extracted_type == item_field(ground_truth, "type")


def _has_label(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _same_name(s1: Any, s2: Any) -> bool:
    """Exact comparison of normalized labels; missing labels never match."""
    if not _has_label(s1) or not _has_label(s2):
        return False
    return normalize_name(s1) == normalize_name(s2)


class EntityPredicate:
    """Entity matching on name and type.

    - STRICT: normalized names equal and same type
    - PARTIAL: name similarity at or above threshold and same type
    - TYPE_ONLY: same type and name similarity above 0.5

    Example:
        ```python
        predicate = EntityPredicate(MatchMode.PARTIAL, similarity_threshold=0.8)
        outcome = predicate.match(
            {"name": "Purchase Order Process", "type": "Process"},
            {"name": "Purchase Order Proces", "type": "Process"},
        )
        assert outcome.matches is True
        ```
    """

    item_kind: ClassVar[ItemKind] = ItemKind.ENTITY
    supported_modes: ClassVar[tuple[MatchMode, ...]] = (
        MatchMode.STRICT,
        MatchMode.PARTIAL,
        MatchMode.TYPE_ONLY,
    )

    def __init__(
        self,
        mode: MatchMode | str = MatchMode.STRICT,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        """Initialize entity predicate.

        Args:
            mode: Matching mode. Unsupported values fall back to STRICT.
            similarity_threshold: Minimum similarity (0.0-1.0) for PARTIAL matching.
        """
        self.similarity_threshold = _validate_threshold(similarity_threshold)
        self.mode = resolve_mode(mode, self.supported_modes)

    def match(self, extracted: Any, ground_truth: Any) -> MatchOutcome:
        """Compare two entities under the configured mode."""
        type_match = _same_type(extracted, ground_truth)

        extracted_name = item_field(extracted, "name")
        ground_truth_name = item_field(ground_truth, "name")
        similarity = calculate_similarity(extracted_name, ground_truth_name)

        if self.mode == MatchMode.PARTIAL:
            matches = similarity >= self.similarity_threshold
        elif self.mode == MatchMode.TYPE_ONLY:
            matches = similarity > ENTITY_TYPE_ONLY_FLOOR
        else:
            matches = _same_name(extracted_name, ground_truth_name)

        return MatchOutcome(
            matches=matches and type_match,
            similarity=similarity,
            type_match=type_match,
        )


class RelationshipPredicate:
    """Relationship matching on both endpoints and type.

    Endpoints are compared in the forward orientation (from/from, to/to)
    and the reversed one (from/to, to/from).

    - STRICT: forward endpoints equal after normalization and same type
    - PARTIAL: both forward similarities at or above threshold and same type
    - DIRECTION_AGNOSTIC: forward or reversed pair at or above threshold and
      same type; the direction only counts as correct when the forward
      orientation matched and scored at least as well as the reversed one
    - TYPE_ONLY: same type, all endpoints present and best average endpoint
      similarity above 0.3

    Example:
        ```python
        predicate = RelationshipPredicate(MatchMode.DIRECTION_AGNOSTIC)
        outcome = predicate.match(
            {"from": "Manager", "to": "Employee", "type": "REPORTS_TO"},
            {"from": "Employee", "to": "Manager", "type": "REPORTS_TO"},
        )
        assert outcome.matches is True
        assert outcome.direction_match is False
        ```
    """

    item_kind: ClassVar[ItemKind] = ItemKind.RELATIONSHIP
    supported_modes: ClassVar[tuple[MatchMode, ...]] = (
        MatchMode.STRICT,
        MatchMode.PARTIAL,
        MatchMode.DIRECTION_AGNOSTIC,
        MatchMode.TYPE_ONLY,
    )

    def __init__(
        self,
        mode: MatchMode | str = MatchMode.STRICT,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        """Initialize relationship predicate.

        Args:
            mode: Matching mode. Unsupported values fall back to STRICT.
            similarity_threshold: Minimum per-endpoint similarity (0.0-1.0)
                for PARTIAL and DIRECTION_AGNOSTIC matching.
        """
        self.similarity_threshold = _validate_threshold(similarity_threshold)
        self.mode = resolve_mode(mode, self.supported_modes)

    def match(self, extracted: Any, ground_truth: Any) -> MatchOutcome:
        """Compare two relationships under the configured mode."""
        type_match = _same_type(extracted, ground_truth)

        ext_from = item_field(extracted, "from")
        ext_to = item_field(extracted, "to")
        gt_from = item_field(ground_truth, "from")
        gt_to = item_field(ground_truth, "to")

        from_similarity = calculate_similarity(ext_from, gt_from)
        to_similarity = calculate_similarity(ext_to, gt_to)
        reversed_from_similarity = calculate_similarity(ext_from, gt_to)
        reversed_to_similarity = calculate_similarity(ext_to, gt_from)

        forward_similarity = (from_similarity + to_similarity) / 2
        reversed_similarity = (reversed_from_similarity + reversed_to_similarity) / 2
        best_similarity = max(forward_similarity, reversed_similarity)

        threshold = self.similarity_threshold

        if self.mode == MatchMode.PARTIAL:
            return MatchOutcome(
                matches=from_similarity >= threshold and to_similarity >= threshold and type_match,
                similarity=forward_similarity,
                type_match=type_match,
            )

        if self.mode == MatchMode.DIRECTION_AGNOSTIC:
            forward_matches = from_similarity >= threshold and to_similarity >= threshold
            reversed_matches = (
                reversed_from_similarity >= threshold and reversed_to_similarity >= threshold
            )
            return MatchOutcome(
                matches=(forward_matches or reversed_matches) and type_match,
                similarity=best_similarity,
                type_match=type_match,
                direction_match=forward_matches and reversed_similarity <= forward_similarity,
            )

        if self.mode == MatchMode.TYPE_ONLY:
            # One strong endpoint can clear the floor on its own
            complete = all(_has_label(label) for label in (ext_from, ext_to, gt_from, gt_to))
            return MatchOutcome(
                matches=complete and type_match and best_similarity > RELATIONSHIP_TYPE_ONLY_FLOOR,
                similarity=best_similarity,
                type_match=type_match,
                direction_match=forward_similarity > reversed_similarity,
            )

        exact_forward = _same_name(ext_from, gt_from) and _same_name(ext_to, gt_to)
        return MatchOutcome(
            matches=exact_forward and type_match,
            similarity=forward_similarity,
            type_match=type_match,
        )


def get_predicate(
    item_kind: ItemKind | str,
    mode: MatchMode | str = MatchMode.STRICT,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> MatchPredicate:
    """Build the predicate for an item kind.

    Args:
        item_kind: "entity" or "relationship"
        mode: Matching mode
        similarity_threshold: Threshold for fuzzy matching

    Returns:
        A MatchPredicate for that kind of item

    Raises:
        ConfigurationError: If the item kind is not recognized
    """
    try:
        kind = ItemKind(item_kind)
    except ValueError:
        raise ConfigurationError(
            f"Unknown item kind: {item_kind!r}", option="item_kind"
        ) from None

    if kind == ItemKind.ENTITY:
        return EntityPredicate(mode, similarity_threshold)
    return RelationshipPredicate(mode, similarity_threshold)
