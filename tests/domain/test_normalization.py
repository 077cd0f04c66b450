from decimal import Decimal

import pytest

from invoice_checker.domain.normalization import (
    format_amount,
    normalize_date,
    normalize_document,
    parse_amount,
    to_text,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.345.678/0001-95", "12345678000195"),
        ("123.456.789-09", "12345678909"),
        (" 12345678000195 ", "12345678000195"),
        (12345678000195, "12345678000195"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_document_strips_non_digits(raw, expected):
    assert normalize_document(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("45366", "2024-03-15"),
        ("1", "1899-12-31"),
        ("15/03/2024", "2024-03-15"),
        ("5/3/2024", "2024-03-05"),
        ("15/03/24", "2024-03-15"),
        ("2024-03-15", "2024-03-15"),
        ("  15/03/2024 ", "2024-03-15"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_date_shapes(raw, expected):
    assert normalize_date(raw) == expected


def test_normalize_date_returns_original_on_malformed_input():
    assert normalize_date("03/2024") == "03/2024"
    # More than three parts is rejected rather than truncated to the first three.
    assert normalize_date("1/2/3/4") == "1/2/3/4"


def test_normalize_date_overflowing_serial_returns_original():
    assert normalize_date("99999999999") == "99999999999"


def test_normalize_date_leaves_unrecognized_text_alone():
    assert normalize_date("March 15") == "March 15"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("nan", Decimal("0")),
        (float("nan"), Decimal("0")),
        (372284.96, Decimal("372284.96")),
        (10, Decimal("10")),
        ("1234.56", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("1.234.567", Decimal("1234567")),
        ("R$ 10,50", Decimal("10.50")),
        ("(5.00)", Decimal("-5.00")),
        ("abc", Decimal("0")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_amount_warns_before_falling_back_to_zero(caplog):
    with caplog.at_level("WARNING", logger="invoice_checker.domain.normalization"):
        assert parse_amount("12,34,56x") == Decimal("0")

    assert "12,34,56x" in caplog.text


def test_format_amount_rounds_half_up():
    assert format_amount(Decimal("1.005")) == "1.01"
    assert format_amount(Decimal("0")) == "0.00"


def test_to_text_trims_and_blanks_nan():
    assert to_text("  SP ") == "SP"
    assert to_text(float("nan")) == ""
    assert to_text(55) == "55"
