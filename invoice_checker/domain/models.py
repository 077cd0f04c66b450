"""Domain models for SAT x Questor invoice reconciliation.

Spreadsheet rows stay as plain mappings keyed by the source column names; the
dataclasses here capture the shapes the engine derives from them.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, Mapping

RawRow = Mapping[str, Any]
Severity = Literal["error", "warning"]

ERROR: Severity = "error"
WARNING: Severity = "warning"


@dataclass(frozen=True)
class DocumentKey:
    """Document number and series identifying one logical invoice."""

    number: str
    series: str

    def key(self) -> tuple[str, str]:
        return (self.number, self.series)

    def __str__(self) -> str:
        return f"{self.number}|{self.series}"


@dataclass(frozen=True)
class InvoiceGroup:
    """All rows of one source sharing a document key, in input order."""

    key: DocumentKey
    rows: tuple[RawRow, ...]

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError(f"Invoice group {self.key} has no rows")

    @property
    def first(self) -> RawRow:
        return self.rows[0]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class ValidationIssue:
    """Represents one discrepancy discovered during reconciliation."""

    document_number: str
    series: str
    issue_date: str
    field: str
    sat_value: str
    questor_value: str
    severity: Severity
    difference: Decimal | None = None
    description: str | None = None

    @property
    def key(self) -> DocumentKey:
        return DocumentKey(self.document_number, self.series)

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR


@dataclass(frozen=True)
class InvoiceOutcome:
    key: DocumentKey
    issues: tuple[ValidationIssue, ...]
    matched: bool
