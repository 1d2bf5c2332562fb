"""Tests for batch evaluation and corpus aggregation."""

import logging

import pytest

from extraction_scoring import (
    EvaluationItem,
    ExtractionEvaluator,
    ItemKind,
    MatchMode,
    evaluate_batch_entity_extraction,
    evaluate_batch_relationship_extraction,
)


def entity(name, type_):
    return {"name": name, "type": type_}


def relationship(from_, to, type_):
    return {"from": from_, "to": to, "type": type_}


# ============================================================================
# Entity batches
# ============================================================================


class TestEntityBatch:
    """Tests for evaluate_batch on entities."""

    @pytest.fixture
    def evaluator(self):
        return ExtractionEvaluator.for_entities(entity_types=["Process", "Role", "System"])

    def test_micro_metrics_use_summed_counts(self, evaluator):
        """Test that corpus precision is not an average of document precisions."""
        items = [
            {
                "extracted": [entity("Invoice Approval", "Process")],
                "ground_truth": [entity("Invoice Approval", "Process")],
            },
            {
                "extracted": [
                    entity("SAP", "System"),
                    entity("Oracle", "System"),
                    entity("Workday", "System"),
                ],
                "ground_truth": [],
            },
        ]

        batch = evaluator.evaluate_batch(items)

        assert [doc.precision for doc in batch.documents] == [1.0, 0.0]
        assert batch.aggregate.true_positives == 1
        assert batch.aggregate.false_positives == 3
        assert batch.aggregate.precision == pytest.approx(0.25)
        assert batch.aggregate.recall == 1.0

    def test_counts_and_per_type_summed(self, evaluator):
        items = [
            {
                "extracted": [entity("Invoice Approval", "Process")],
                "ground_truth": [
                    entity("Invoice Approval", "Process"),
                    entity("Finance Manager", "Role"),
                ],
            },
            {
                "extracted": [entity("Finance Manager", "Role"), entity("SAP", "System")],
                "ground_truth": [
                    entity("Finance Manager", "Role"),
                    entity("Purchase Order Process", "Process"),
                ],
            },
        ]

        batch = evaluator.evaluate_batch(items)
        aggregate = batch.aggregate

        assert aggregate.total_extracted == 3
        assert aggregate.total_ground_truth == 4
        assert aggregate.true_positives == 2
        assert aggregate.false_positives == 1
        assert aggregate.false_negatives == 2

        process = aggregate.per_type_metrics["Process"]
        role = aggregate.per_type_metrics["Role"]
        assert (process.support, process.true_positives, process.false_negatives) == (2, 1, 1)
        assert (role.support, role.true_positives, role.false_negatives) == (2, 1, 1)
        assert aggregate.per_type_metrics["System"].predicted == 1

        # Macro over Process and Role only; System has no support
        assert aggregate.macro_precision == pytest.approx(1.0)
        assert aggregate.macro_recall == pytest.approx(0.5)
        assert aggregate.macro_f1 == pytest.approx(2 / 3)

    def test_totals_equal_sum_of_documents(self, evaluator):
        """Test that aggregate counts match independently scored documents."""
        items = [
            {
                "extracted": [entity("Invoice Approval", "Process"), entity("SAP", "System")],
                "ground_truth": [entity("Invoice Approval", "Process")],
            },
            {
                "extracted": [entity("Finance Manager", "Role")],
                "ground_truth": [entity("Finance Manager", "Role"), entity("HR", "Department")],
            },
        ]

        batch = evaluator.evaluate_batch(items)
        singles = [evaluator.evaluate(i["extracted"], i["ground_truth"]) for i in items]

        assert batch.aggregate.true_positives == sum(r.true_positives for r in singles)
        assert batch.aggregate.false_positives == sum(r.false_positives for r in singles)
        assert batch.aggregate.false_negatives == sum(r.false_negatives for r in singles)

    def test_documents_indexed(self, evaluator):
        items = [{"extracted": [], "ground_truth": []} for _ in range(3)]

        batch = evaluator.evaluate_batch(items)

        assert batch.document_count == 3
        assert [doc.document_index for doc in batch.documents] == [0, 1, 2]

    def test_aggregate_has_no_match_details(self, evaluator):
        items = [
            {
                "extracted": [entity("SAP", "System")],
                "ground_truth": [entity("Finance Manager", "Role")],
            }
        ]

        batch = evaluator.evaluate_batch(items)

        assert batch.aggregate.matches == []
        assert batch.aggregate.unmatched_extracted == []
        assert batch.documents[0].unmatched_extracted == [entity("SAP", "System")]

    def test_camel_case_ground_truth_key(self, evaluator):
        items = [
            {
                "extracted": [entity("Invoice Approval", "Process")],
                "groundTruth": [entity("Invoice Approval", "Process")],
            }
        ]

        batch = evaluator.evaluate_batch(items)

        assert batch.aggregate.f1 == 1.0

    def test_evaluation_item_models(self, evaluator):
        items = [
            EvaluationItem(
                extracted=[entity("Invoice Approval", "Process")],
                ground_truth=[entity("Invoice Approval", "Process")],
            )
        ]

        batch = evaluator.evaluate_batch(items)

        assert batch.aggregate.true_positives == 1

    @pytest.mark.parametrize("items", [[], None, "documents"])
    def test_empty_or_invalid_batch(self, evaluator, items, caplog):
        with caplog.at_level(logging.WARNING):
            batch = evaluator.evaluate_batch(items)

        assert batch.document_count == 0
        assert batch.documents == []
        assert batch.aggregate.f1 == 0.0
        assert batch.aggregate.macro_f1 == 0.0
        assert "empty items list" in caplog.text

    def test_malformed_document_scores_zero(self, evaluator, caplog):
        """Test that one broken document does not stop the batch."""
        items = [
            {"extracted": None, "ground_truth": [entity("Invoice Approval", "Process")]},
            42,
            {
                "extracted": [entity("Invoice Approval", "Process")],
                "ground_truth": [entity("Invoice Approval", "Process")],
            },
        ]

        with caplog.at_level(logging.WARNING):
            batch = evaluator.evaluate_batch(items)

        assert batch.document_count == 3
        assert batch.documents[0].total_ground_truth == 0
        assert batch.documents[1].total_ground_truth == 0
        assert batch.aggregate.true_positives == 1
        assert batch.aggregate.f1 == 1.0
        assert "invalid" in caplog.text

    def test_metadata(self, evaluator):
        batch = evaluator.evaluate_batch([{"extracted": [], "ground_truth": []}])

        assert batch.item_kind == ItemKind.ENTITY
        assert batch.mode == MatchMode.STRICT
        assert batch.similarity_threshold == 0.85
        assert batch.latency_ms >= 0.0
        assert batch.aggregate.latency_ms == batch.latency_ms
        assert batch.aggregate.direction_accuracy is None

    def test_logs_completion(self, evaluator, caplog):
        caplog.set_level(logging.INFO, logger="extraction_scoring.evaluation.evaluator")

        evaluator.evaluate_batch([{"extracted": [], "ground_truth": []}])

        assert "Batch entity extraction evaluation complete: documents=1" in caplog.text

    def test_convenience_function(self):
        batch = evaluate_batch_entity_extraction(
            [
                {
                    "extracted": [entity("Purchase Order Proces", "Process")],
                    "ground_truth": [entity("Purchase Order Process", "Process")],
                }
            ],
            mode=MatchMode.PARTIAL,
        )

        assert batch.aggregate.f1 == 1.0
        assert batch.mode == MatchMode.PARTIAL


# ============================================================================
# Relationship batches
# ============================================================================


class TestRelationshipBatch:
    """Tests for evaluate_batch on relationships."""

    @pytest.fixture
    def items(self):
        return [
            {
                "extracted": [relationship("Budget", "Finance", "OWNS")],
                "ground_truth": [relationship("Finance", "Budget", "OWNS")],
            },
            {
                "extracted": [
                    relationship("Manager", "Employee", "REPORTS_TO"),
                    relationship("Analyst", "Manager", "REPORTS_TO"),
                ],
                "ground_truth": [
                    relationship("Manager", "Employee", "REPORTS_TO"),
                    relationship("Analyst", "Manager", "REPORTS_TO"),
                ],
            },
        ]

    def test_direction_accuracy_micro_and_macro(self, items):
        batch = evaluate_batch_relationship_extraction(
            items, mode=MatchMode.DIRECTION_AGNOSTIC
        )
        aggregate = batch.aggregate

        assert aggregate.true_positives == 3
        assert aggregate.correct_directions == 2
        assert aggregate.incorrect_directions == 1
        assert aggregate.direction_accuracy == pytest.approx(2 / 3)
        # OWNS is 0.0 and REPORTS_TO is 1.0
        assert aggregate.macro_direction_accuracy == pytest.approx(0.5)
        assert aggregate.per_type_metrics["OWNS"].direction_accuracy == 0.0
        assert aggregate.per_type_metrics["REPORTS_TO"].direction_accuracy == 1.0

    def test_strict_mode_misses_reversed(self, items):
        batch = evaluate_batch_relationship_extraction(items)

        assert batch.aggregate.true_positives == 2
        assert batch.aggregate.false_positives == 1
        assert batch.aggregate.false_negatives == 1
        assert batch.aggregate.direction_accuracy == 1.0

    def test_document_results_kept(self, items):
        batch = evaluate_batch_relationship_extraction(
            items, mode=MatchMode.DIRECTION_AGNOSTIC
        )

        assert batch.item_kind == ItemKind.RELATIONSHIP
        assert batch.documents[0].direction_accuracy == 0.0
        assert batch.documents[1].direction_accuracy == 1.0
        assert batch.documents[0].matches[0].direction_match is False
