#!/usr/bin/env python
"""Example: Scoring Entity and Relationship Extraction.

This example demonstrates how to use the evaluation module to measure
entity and relationship extraction quality against annotated ground truth.

Features demonstrated:
- Building evaluators for entities and relationships
- Comparing strict, partial, type-only and direction-agnostic matching
- Micro and macro precision, recall, F1, and direction accuracy
- Generating evaluation reports

Usage:
    python examples/e2e_evaluation.py
    python examples/e2e_evaluation.py --mode partial --threshold 0.8
    python examples/e2e_evaluation.py --compare-modes
"""

import argparse
from pathlib import Path

from extraction_scoring import (
    EvaluationConfig,
    EvaluationReporter,
    ExtractionEvaluator,
    MatchMode,
)

# ============================================================================
# Vocabulary
# ============================================================================

ENTITY_TYPES = [
    "Process",
    "Task",
    "Role",
    "Department",
    "System",
    "Document",
    "Decision",
    "Event",
    "Policy",
    "KPI",
]

RELATIONSHIP_TYPES = [
    "PRECEDES",
    "PERFORMS",
    "OWNS",
    "USES",
    "PRODUCES",
    "CONSUMES",
    "BELONGS_TO",
    "TRIGGERS",
    "GOVERNS",
    "REPORTS_TO",
]


# ============================================================================
# Test Data
# ============================================================================

ENTITY_DOCUMENTS = [
    {
        "extracted": [
            {"name": "Purchase Order Process", "type": "Process"},
            {"name": "Approve Invoice", "type": "Task"},
            {"name": "The Finance Manager", "type": "Role"},
            {"name": "SAP ERP", "type": "System"},
        ],
        "ground_truth": [
            {"name": "Purchase Order Process", "type": "Process"},
            {"name": "Approve Invoices", "type": "Task"},
            {"name": "Finance Manager", "type": "Role"},
            {"name": "Procurement", "type": "Department"},
        ],
    },
    {
        "extracted": [
            {"name": "Employee Onboarding", "type": "Process"},
            {"name": "HR Specialist", "type": "Role"},
            {"name": "Acme Corporation", "type": "Department"},
        ],
        "ground_truth": [
            {"name": "Employee Onboarding Process", "type": "Process"},
            {"name": "HR Specialist", "type": "Role"},
            {"name": "Acme Corp", "type": "Department"},
            {"name": "Welcome Packet", "type": "Document"},
        ],
    },
]

RELATIONSHIP_DOCUMENTS = [
    {
        "extracted": [
            {"from": "Finance Manager", "to": "Approve Invoice", "type": "PERFORMS"},
            {"from": "Purchase Order Process", "to": "Finance", "type": "BELONGS_TO"},
            {"from": "CFO", "to": "Finance Manager", "type": "REPORTS_TO"},
        ],
        "ground_truth": [
            {"from": "Finance Manager", "to": "Approve Invoices", "type": "PERFORMS"},
            {"from": "Purchase Order Process", "to": "Finance", "type": "BELONGS_TO"},
            {"from": "Finance Manager", "to": "CFO", "type": "REPORTS_TO"},
        ],
    },
    {
        "extracted": [
            {"from": "HR Specialist", "to": "HRIS", "type": "USES"},
        ],
        "ground_truth": [
            {"from": "HR Specialist", "to": "HRIS", "type": "USES"},
            {"from": "Onboarding Policy", "to": "Employee Onboarding", "type": "GOVERNS"},
        ],
    },
]


# ============================================================================
# Demo
# ============================================================================


def run_evaluation_demo(
    mode: str = MatchMode.STRICT.value,
    threshold: float = 0.85,
    output_dir: Path = Path("examples/results"),
) -> None:
    """Run entity and relationship evaluations and save reports."""
    print("=" * 70)
    print("  📊 Extraction Scoring Demo")
    print("=" * 70)
    print()
    print(f"Matching mode: {mode}")
    print(f"Similarity threshold: {threshold:.0%}")
    print()

    config = EvaluationConfig(
        mode=mode,
        similarity_threshold=threshold,
        entity_types=ENTITY_TYPES,
        relationship_types=RELATIONSHIP_TYPES,
    )

    entity_batch = ExtractionEvaluator.for_entities(config).evaluate_batch(ENTITY_DOCUMENTS)
    relationship_batch = ExtractionEvaluator.for_relationships(config).evaluate_batch(
        RELATIONSHIP_DOCUMENTS
    )

    for batch in (entity_batch, relationship_batch):
        reporter = EvaluationReporter.from_config(batch, config)
        print(reporter.to_text())
        print()

    print("-" * 70)
    print("  Generating Reports")
    print("-" * 70)

    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, batch in (("entities", entity_batch), ("relationships", relationship_batch)):
        reporter = EvaluationReporter.from_config(batch, config)
        for suffix in (".json", ".md"):
            path = output_dir / f"{name}_report{suffix}"
            reporter.save(path)
            paths.append(path)

    print("\n✅ Reports saved:")
    for path in paths:
        print(f"   - {path}")

    print()
    EvaluationReporter(relationship_batch).print_summary()


def compare_modes(threshold: float = 0.85) -> None:
    """Show how each matching mode scores the same corpus."""
    print(f"{'Items':<15} {'Mode':<20} {'P':>8} {'R':>8} {'F1':>8} {'Dir':>8}")
    print("-" * 70)

    for mode in MatchMode:
        if mode != MatchMode.DIRECTION_AGNOSTIC:
            entities = ExtractionEvaluator.for_entities(
                mode=mode, similarity_threshold=threshold
            ).evaluate_batch(ENTITY_DOCUMENTS)
            agg = entities.aggregate
            print(
                f"{'entities':<15} {mode.value:<20} {agg.precision:>8.1%} "
                f"{agg.recall:>8.1%} {agg.f1:>8.1%} {'-':>8}"
            )

        relationships = ExtractionEvaluator.for_relationships(
            mode=mode, similarity_threshold=threshold
        ).evaluate_batch(RELATIONSHIP_DOCUMENTS)
        agg = relationships.aggregate
        print(
            f"{'relationships':<15} {mode.value:<20} {agg.precision:>8.1%} "
            f"{agg.recall:>8.1%} {agg.f1:>8.1%} {agg.direction_accuracy or 0.0:>8.1%}"
        )
    print()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Scoring demo for extraction-scoring")
    parser.add_argument(
        "--mode",
        default=MatchMode.STRICT.value,
        choices=[mode.value for mode in MatchMode],
        help="Matching mode",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=0.85,
        help="Similarity threshold for fuzzy matching",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("examples/results"),
        help="Directory for saved reports",
    )
    parser.add_argument(
        "--compare-modes",
        action="store_true",
        help="Print a comparison of all matching modes",
    )
    args = parser.parse_args()

    if args.compare_modes:
        compare_modes(threshold=args.threshold)
    else:
        run_evaluation_demo(mode=args.mode, threshold=args.threshold, output_dir=args.output_dir)


if __name__ == "__main__":
    main()
