"""Per-invoice monetary totals."""
from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Iterable

from invoice_checker.config import SETTINGS

from .models import RawRow
from .normalization import parse_amount
from .rules import SAT_MONETARY_FIELDS

AggregatedTotals = dict[str, Decimal]


def aggregate_totals(rows: Iterable[RawRow], fields: Iterable[str] = SAT_MONETARY_FIELDS) -> AggregatedTotals:
    """Sum each monetary field across rows; missing cells count as zero.

    The result always carries every requested field, even when all rows are zero.
    """
    totals: AggregatedTotals = {field: Decimal("0") for field in fields}
    with localcontext(SETTINGS.decimal_context):
        for row in rows:
            for field in totals:
                totals[field] += parse_amount(row.get(field))
    return totals
