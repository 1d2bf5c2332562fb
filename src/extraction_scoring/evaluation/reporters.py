"""Evaluation reporters for generating reports in various formats."""

import json
from pathlib import Path
from typing import Any

from extraction_scoring.core.config import EvaluationConfig, ItemKind
from extraction_scoring.core.exceptions import ReportError
from extraction_scoring.evaluation.predicates import item_field
from extraction_scoring.evaluation.types import BatchResult, EvaluationResult, TypeMetrics

_FORMATS = ("text", "json", "markdown")


def format_item(item: Any, item_kind: ItemKind) -> str:
    """Render an item on one line.

    Entities render as `name (type)`, relationships as `from -[type]-> to`.
    """
    if item_kind == ItemKind.RELATIONSHIP:
        return (
            f"{item_field(item, 'from')} -[{item_field(item, 'type')}]-> "
            f"{item_field(item, 'to')}"
        )
    return f"{item_field(item, 'name')} ({item_field(item, 'type')})"


class EvaluationReporter:
    """Generate evaluation reports in various formats.

    Accepts a single-document EvaluationResult or a BatchResult and supports
    text, JSON, and Markdown output formats. Batch reports sample false
    positives and false negatives from the per-document results in document
    order.

    Example:
        ```python
        batch = evaluator.evaluate_batch(documents)

        reporter = EvaluationReporter(batch)
        reporter.save("report.md")  # Auto-detects format from extension

        # Or get report as string
        print(reporter.to_text())
        ```
    """

    def __init__(
        self,
        result: EvaluationResult | BatchResult,
        title: str | None = None,
        sample_size: int = 5,
    ) -> None:
        """Initialize the reporter.

        Args:
            result: Evaluation or batch result to report on.
            title: Title for the report. Derived from the item kind if omitted.
            sample_size: Number of unmatched items listed per section.
        """
        self.result = result
        self.sample_size = sample_size

        if isinstance(result, BatchResult):
            self.batch: BatchResult | None = result
            self.summary = result.aggregate
        else:
            self.batch = None
            self.summary = result

        if title is None:
            kind = self.summary.item_kind.value.capitalize()
            prefix = "Batch " if self.batch is not None else ""
            title = f"{prefix}{kind} Extraction Evaluation"
        self.title = title

    @classmethod
    def from_config(
        cls,
        result: EvaluationResult | BatchResult,
        config: EvaluationConfig,
        title: str | None = None,
    ) -> "EvaluationReporter":
        """Create a reporter using the report settings of an EvaluationConfig."""
        return cls(result, title=title, sample_size=config.sample_size)

    @property
    def is_relationship(self) -> bool:
        return self.summary.item_kind == ItemKind.RELATIONSHIP

    def _types_by_support(self) -> list[tuple[str, TypeMetrics]]:
        """Per-type rows with data, largest support first."""
        rows = [
            (name, tm)
            for name, tm in self.summary.per_type_metrics.items()
            if tm.support > 0 or tm.predicted > 0
        ]
        return sorted(rows, key=lambda row: row[1].support, reverse=True)

    def _unmatched(self) -> tuple[list[Any], list[Any]]:
        """False positives and false negatives, pooled across documents for batches."""
        if self.batch is None:
            return self.summary.unmatched_extracted, self.summary.unmatched_ground_truth
        extracted: list[Any] = []
        ground_truth: list[Any] = []
        for doc in self.batch.documents:
            extracted.extend(doc.unmatched_extracted)
            ground_truth.extend(doc.unmatched_ground_truth)
        return extracted, ground_truth

    def _sample(self, items: list[Any]) -> tuple[list[str], int]:
        shown = [format_item(item, self.summary.item_kind) for item in items[: self.sample_size]]
        return shown, max(0, len(items) - self.sample_size)

    def to_text(self, include_details: bool = True) -> str:
        """Generate a plain text report.

        Args:
            include_details: Whether to include per-type rows and unmatched samples.

        Returns:
            Plain text report string.
        """
        s = self.summary
        width = 60 if self.is_relationship else 50
        lines = [self.title, "=" * width]

        if self.batch is not None:
            lines.append(f"Documents Evaluated: {self.batch.document_count}")
        lines.extend([
            f"Mode: {s.mode.value}",
            f"Similarity Threshold: {s.similarity_threshold}",
            "",
            (
                "Aggregate Metrics (Micro-averaged):"
                if self.batch is not None
                else "Aggregate Metrics:"
            ),
            f"  Precision:          {s.precision:.2%}",
            f"  Recall:             {s.recall:.2%}",
            f"  F1 Score:           {s.f1:.2%}",
        ])
        if s.direction_accuracy is not None:
            lines.append(f"  Direction Accuracy: {s.direction_accuracy:.2%}")

        if self.batch is not None:
            lines.extend([
                "",
                "Aggregate Metrics (Macro-averaged):",
                f"  Precision:          {s.macro_precision:.2%}",
                f"  Recall:             {s.macro_recall:.2%}",
                f"  F1 Score:           {s.macro_f1:.2%}",
            ])
            if s.macro_direction_accuracy is not None:
                lines.append(f"  Direction Accuracy: {s.macro_direction_accuracy:.2%}")

        lines.extend([
            "",
            "Counts:",
            f"  True Positives:     {s.true_positives}",
            f"  False Positives:    {s.false_positives}",
            f"  False Negatives:    {s.false_negatives}",
        ])
        if s.correct_directions is not None:
            lines.extend([
                f"  Correct Directions: {s.correct_directions}",
                f"  Incorrect Directions: {s.incorrect_directions}",
            ])
        lines.extend([
            f"  Total Extracted:    {s.total_extracted}",
            f"  Total Ground Truth: {s.total_ground_truth}",
            "",
        ])

        rows = self._types_by_support()
        if rows and include_details:
            header = f"{'Type':<18}{'P':>8}{'R':>8}{'F1':>8}"
            if self.is_relationship:
                header += f"{'Dir':>8}"
            header += f"{'Support':>10}{'Predicted':>11}"
            lines.extend(["Per-Type Metrics:", "-" * len(header), header, "-" * len(header)])
            for name, tm in rows:
                row = f"{name:<18}{tm.precision:>8.1%}{tm.recall:>8.1%}{tm.f1:>8.1%}"
                if self.is_relationship:
                    row += f"{tm.direction_accuracy or 0.0:>8.1%}"
                row += f"{tm.support:>10}{tm.predicted:>11}"
                lines.append(row)
            lines.append("")

        if include_details:
            unmatched_extracted, unmatched_ground_truth = self._unmatched()
            for label, items in (
                ("False Positives", unmatched_extracted),
                ("False Negatives", unmatched_ground_truth),
            ):
                if not items:
                    continue
                shown, remaining = self._sample(items)
                lines.append(f"{label} (sample):")
                lines.extend(f"  - {line}" for line in shown)
                if remaining:
                    lines.append(f"  ... and {remaining} more")
                lines.append("")

        lines.append(f"Evaluated at: {s.evaluated_at}")
        latency = self.batch.latency_ms if self.batch is not None else s.latency_ms
        lines.append(f"Latency: {latency:.1f}ms")
        return "\n".join(lines)

    def to_json(self) -> dict[str, Any]:
        """Generate a JSON-serializable report dictionary.

        Returns:
            Dictionary suitable for JSON serialization.
        """
        return {
            "title": self.title,
            **self.result.model_dump(mode="json", by_alias=True),
        }

    def to_markdown(self, include_details: bool = True) -> str:
        """Generate a Markdown report.

        Args:
            include_details: Whether to include per-type rows and unmatched samples.

        Returns:
            Markdown formatted report string.
        """
        s = self.summary
        lines = [
            f"# {self.title}",
            "",
            f"*Evaluated: {s.evaluated_at}*",
            "",
            "## Summary",
            "",
            "| Setting | Value |",
            "|---------|-------|",
            f"| Mode | {s.mode.value} |",
            f"| Similarity Threshold | {s.similarity_threshold} |",
        ]
        if self.batch is not None:
            lines.append(f"| Documents | {self.batch.document_count} |")

        lines.extend([
            "",
            "## Metrics",
            "",
            "| Metric | Micro | Macro |",
            "|--------|-------|-------|",
            f"| Precision | {s.precision:.2%} | {s.macro_precision:.2%} |",
            f"| Recall | {s.recall:.2%} | {s.macro_recall:.2%} |",
            f"| F1 Score | {s.f1:.2%} | {s.macro_f1:.2%} |",
        ])
        if s.direction_accuracy is not None:
            lines.append(
                f"| Direction Accuracy | {s.direction_accuracy:.2%} | "
                f"{s.macro_direction_accuracy or 0.0:.2%} |"
            )

        lines.extend([
            "",
            "## Counts",
            "",
            "| Count | Value |",
            "|-------|-------|",
            f"| True Positives | {s.true_positives} |",
            f"| False Positives | {s.false_positives} |",
            f"| False Negatives | {s.false_negatives} |",
            f"| Total Extracted | {s.total_extracted} |",
            f"| Total Ground Truth | {s.total_ground_truth} |",
        ])

        rows = self._types_by_support()
        if rows and include_details:
            lines.extend(["", "## Per-Type Metrics", ""])
            if self.is_relationship:
                lines.extend([
                    "| Type | Precision | Recall | F1 | Direction | Support | Predicted |",
                    "|------|-----------|--------|----|-----------|--------:|----------:|",
                ])
            else:
                lines.extend([
                    "| Type | Precision | Recall | F1 | Support | Predicted |",
                    "|------|-----------|--------|----|--------:|----------:|",
                ])
            for name, tm in rows:
                direction = (
                    f" {tm.direction_accuracy or 0.0:.0%} |" if self.is_relationship else ""
                )
                lines.append(
                    f"| {name} | {tm.precision:.0%} | {tm.recall:.0%} | {tm.f1:.0%} |"
                    f"{direction} {tm.support} | {tm.predicted} |"
                )

        if include_details:
            unmatched_extracted, unmatched_ground_truth = self._unmatched()
            for label, items in (
                ("False Positives", unmatched_extracted),
                ("False Negatives", unmatched_ground_truth),
            ):
                if not items:
                    continue
                shown, remaining = self._sample(items)
                lines.extend(["", f"## {label}", ""])
                lines.extend(f"- `{line}`" for line in shown)
                if remaining:
                    lines.append(f"- ... and {remaining} more")

        if self.batch is not None and include_details:
            lines.extend([
                "",
                "## Documents",
                "",
                "| Document | Precision | Recall | F1 | TP | FP | FN |",
                "|----------|-----------|--------|----|---:|---:|---:|",
            ])
            for doc in self.batch.documents:
                lines.append(
                    f"| {doc.document_index} | {doc.precision:.0%} | {doc.recall:.0%} | "
                    f"{doc.f1:.0%} | {doc.true_positives} | {doc.false_positives} | "
                    f"{doc.false_negatives} |"
                )

        lines.append("")
        return "\n".join(lines)

    def save(
        self,
        path: str | Path,
        format: str = "auto",
        include_details: bool = True,
    ) -> None:
        """Save the report to a file.

        Args:
            path: Output file path.
            format: Output format ("text", "json", "markdown", or "auto").
                   "auto" detects from file extension.
            include_details: Whether to include per-type rows and samples.

        Raises:
            ReportError: If the format is not recognized.
        """
        path = Path(path)

        # Auto-detect format from extension
        if format == "auto":
            suffix = path.suffix.lower()
            if suffix == ".json":
                format = "json"
            elif suffix in (".md", ".markdown"):
                format = "markdown"
            else:
                format = "text"

        if format not in _FORMATS:
            raise ReportError(f"Unknown report format: {format!r}")

        if format == "json":
            content = json.dumps(self.to_json(), indent=2, default=str)
        elif format == "markdown":
            content = self.to_markdown(include_details=include_details)
        else:
            content = self.to_text(include_details=include_details)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    def print_summary(self) -> None:
        """Print a concise summary to stdout."""
        s = self.summary
        print(f"\n{'=' * 50}")
        print(f"  {self.title}")
        print(f"{'=' * 50}")
        if self.batch is not None:
            print(f"  Documents:   {self.batch.document_count}")
        print(f"  Mode:        {s.mode.value}")
        print()
        print("  Metrics (Micro):")
        print(f"    Precision: {s.precision:.2%}")
        print(f"    Recall:    {s.recall:.2%}")
        print(f"    F1 Score:  {s.f1:.2%}")
        if s.direction_accuracy is not None:
            print(f"    Direction: {s.direction_accuracy:.2%}")
        print(f"{'=' * 50}\n")
