"""Canonical forms used when comparing values across the two exports.

Nothing here raises: a value that cannot be converted is returned as-is (or as
zero for amounts) so a single bad cell never aborts a validation run.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from invoice_checker.config import SETTINGS

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_DIGITS_ONLY = re.compile(r"^\d+$")


def to_text(value: object) -> str:
    """Trimmed string form of a cell; blanks and NaN become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def normalize_document(raw: object) -> str:
    """Strip every non-digit from a CNPJ/CPF."""
    return _NON_DIGITS.sub("", to_text(raw))


def normalize_date(raw: object) -> str:
    """Bring a date cell to YYYY-MM-DD.

    Accepts Excel serial day counts, DD/MM/YYYY and DD/MM/YY. Anything else is
    assumed to be canonical already and comes back unchanged.
    """
    value = to_text(raw)
    if not value:
        return ""
    try:
        if _DIGITS_ONLY.match(value):
            return (SETTINGS.excel_epoch + timedelta(days=int(value))).isoformat()
        if "/" in value:
            day, month, year = value.split("/")
            if len(year) == 2:
                year = f"20{year}"
            return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    except (ValueError, OverflowError) as exc:
        logger.debug("Could not normalize date %r: %s", raw, exc)
        return raw if isinstance(raw, str) else value
    return value


def parse_amount(value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return Decimal("0")
        return Decimal(repr(value))
    s = str(value).strip()
    if not s or s.upper() == "NAN":
        return Decimal("0")
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    for token in ("R$", " ", "\xa0"):
        s = s.replace(token, "")
    if "," in s:
        # Brazilian format: '.' groups thousands, ',' marks decimals.
        if "." in s and s.rindex(".") > s.rindex(","):
            s = s.replace(",", "")
        else:
            s = s.replace(".", "").replace(",", ".")
    elif s.count(".") > 1:
        # "1.234.567": dots can only be thousands separators.
        s = s.replace(".", "")
    try:
        result = Decimal(s)
    except InvalidOperation:
        logger.warning("Could not parse amount %r, treating as zero", value)
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return -result if negative else result


def format_amount(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"
