"""Domain-level results for invoice reconciliation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from .models import InvoiceOutcome, ValidationIssue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    total_records: int
    matched_records: int
    issues: Sequence[ValidationIssue] = field(default_factory=tuple)
    rule_set: str = ""

    @property
    def success(self) -> bool:
        return not self.issues

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_error)

    @property
    def warning_count(self) -> int:
        return len(self.issues) - self.error_count

    @property
    def success_rate(self) -> int:
        """Matched share of processed invoices as a whole percentage (half-up)."""
        if not self.total_records:
            return 0
        rate = Decimal(self.matched_records) * 100 / Decimal(self.total_records)
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def has_errors(self) -> bool:
        return any(issue.is_error for issue in self.issues)


class ReportBuilder:
    """Accumulates per-invoice outcomes into a ValidationResult."""

    def __init__(self, rule_set: str = "") -> None:
        self._rule_set = rule_set
        self._total = 0
        self._matched = 0
        self._issues: list[ValidationIssue] = []

    def add(self, outcome: InvoiceOutcome) -> None:
        self._total += 1
        if outcome.matched:
            self._matched += 1
        self._issues.extend(outcome.issues)
        logger.debug(
            "Invoice %s: matched=%s issues=%d",
            outcome.key,
            outcome.matched,
            len(outcome.issues),
        )

    def build(self) -> ValidationResult:
        result = ValidationResult(
            total_records=self._total,
            matched_records=self._matched,
            issues=tuple(self._issues),
            rule_set=self._rule_set,
        )
        logger.info(
            "Validation %s finished: total=%d matched=%d issues=%d errors=%d warnings=%d",
            self._rule_set or "-",
            result.total_records,
            result.matched_records,
            len(result.issues),
            result.error_count,
            result.warning_count,
            extra={
                "rule_set": self._rule_set,
                "total_records": result.total_records,
                "matched_records": result.matched_records,
                "issue_count": len(result.issues),
                "error_count": result.error_count,
                "warning_count": result.warning_count,
            },
        )
        return result
