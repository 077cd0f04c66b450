"""Grouping of raw spreadsheet rows into logical invoices."""
from __future__ import annotations

from typing import Iterable

from .models import DocumentKey, InvoiceGroup, RawRow
from .normalization import to_text
from .rules import SAT_NUMBER, SAT_SERIES


def document_key(row: RawRow, number_field: str = SAT_NUMBER, series_field: str = SAT_SERIES) -> DocumentKey:
    # Only trimmed; number and series are not normalized like tax IDs.
    return DocumentKey(to_text(row.get(number_field)), to_text(row.get(series_field)))


def group_by_key(
    rows: Iterable[RawRow],
    number_field: str = SAT_NUMBER,
    series_field: str = SAT_SERIES,
) -> dict[DocumentKey, InvoiceGroup]:
    """Bucket rows by document key, keeping first-seen key order and row order."""
    buckets: dict[DocumentKey, list[RawRow]] = {}
    for row in rows:
        buckets.setdefault(document_key(row, number_field, series_field), []).append(row)
    return {key: InvoiceGroup(key=key, rows=tuple(bucket)) for key, bucket in buckets.items()}
