from decimal import Decimal

import pytest

from invoice_checker.domain.aggregation import aggregate_totals
from invoice_checker.domain.grouping import group_by_key
from invoice_checker.domain.models import DocumentKey, InvoiceGroup
from invoice_checker.domain.rules import QUESTOR_NUMBER, QUESTOR_SERIES, SAT_MONETARY_FIELDS


def test_group_by_key_buckets_rows_in_input_order(sat_row):
    rows = [
        sat_row(NumeroDocumento="100", ValorFrete=1),
        sat_row(NumeroDocumento="200"),
        sat_row(NumeroDocumento="100", ValorFrete=2),
    ]

    groups = group_by_key(rows)

    assert list(groups) == [DocumentKey("100", "1"), DocumentKey("200", "1")]
    assert [len(group) for group in groups.values()] == [2, 1]
    assert [row["ValorFrete"] for row in groups[DocumentKey("100", "1")].rows] == [1, 2]


def test_group_by_key_keeps_inconsistent_rows(sat_row):
    rows = [sat_row(), sat_row(ModeloDocumento="65"), sat_row(Situacao="Denegada")]

    groups = group_by_key(rows)

    assert len(groups) == 1
    assert len(groups[DocumentKey("100", "1")]) == 3


def test_group_by_key_only_trims_key_parts(sat_row):
    rows = [sat_row(NumeroDocumento=" 100 "), sat_row(NumeroDocumento="0100"), sat_row(NumeroDocumento=100)]

    groups = group_by_key(rows)

    assert list(groups) == [DocumentKey("100", "1"), DocumentKey("0100", "1")]
    assert len(groups[DocumentKey("100", "1")]) == 2


def test_group_by_key_with_questor_columns(questor_row):
    groups = group_by_key([questor_row(), questor_row(**{"Série": "2"})], QUESTOR_NUMBER, QUESTOR_SERIES)

    assert list(groups) == [DocumentKey("100", "1"), DocumentKey("100", "2")]


def test_invoice_group_rejects_empty_rows():
    with pytest.raises(ValueError):
        InvoiceGroup(key=DocumentKey("1", "1"), rows=())


def test_aggregate_totals_sums_every_field_and_keeps_zero_fields(sat_row):
    rows = [
        sat_row(ValorTotalNota="600.10", ValorFrete=None),
        sat_row(ValorTotalNota=500.00, ValorFrete="10,25"),
    ]

    totals = aggregate_totals(rows)

    assert set(totals) == set(SAT_MONETARY_FIELDS)
    assert totals["ValorTotalNota"] == Decimal("1100.10")
    assert totals["ValorFrete"] == Decimal("10.25")
    assert totals["ValorSeguro"] == Decimal("0")
    assert totals["ValorTotalIpiDevolvA58"] == Decimal("0")


def test_aggregate_totals_follows_input_sign(sat_row):
    totals = aggregate_totals([sat_row(ValorDesconto=-5), sat_row(ValorDesconto=2)])

    assert totals["ValorDesconto"] == Decimal("-3")
