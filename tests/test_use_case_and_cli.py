import csv
from pathlib import Path

import pytest
from conftest import build_questor_row, build_sat_row
from openpyxl import load_workbook

from invoice_checker.application.use_cases import InvoiceValidationContext, ValidateInvoicesUseCase
from invoice_checker.cli import main
from invoice_checker.domain.rules import DESTINADAS, get_rule_set
from invoice_checker.domain.services import InvoiceValidator


class InMemoryRepository:
    def __init__(self, rows):
        self._rows = rows

    def list_rows(self):
        return self._rows


class FailingRepository:
    def list_rows(self):
        raise ValueError("Workbook has no sheets")


def write_csv(path: Path, rows: list[dict]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    return path


def test_use_case_returns_result_and_rows():
    sat_rows = [build_sat_row()]
    questor_rows = [build_questor_row()]
    context = InvoiceValidationContext(
        sat_repository=InMemoryRepository(sat_rows),
        questor_repository=InMemoryRepository(questor_rows),
        validator=InvoiceValidator(DESTINADAS),
    )

    response = ValidateInvoicesUseCase(context).execute()

    assert response.result.matched_records == 1
    assert response.result.rule_set == "destinadas"
    assert response.sat_rows is sat_rows
    assert response.questor_rows is questor_rows


def test_use_case_propagates_reader_failure():
    context = InvoiceValidationContext(
        sat_repository=FailingRepository(),
        questor_repository=InMemoryRepository([]),
        validator=InvoiceValidator(DESTINADAS),
    )

    with pytest.raises(ValueError):
        ValidateInvoicesUseCase(context).execute()


def test_get_rule_set_rejects_unknown_name():
    assert get_rule_set(" Destinadas ") is DESTINADAS
    with pytest.raises(ValueError):
        get_rule_set("saidas")


def test_cli_writes_reports_and_returns_zero_when_clean(tmp_path: Path, capsys):
    sat = write_csv(tmp_path / "sat.csv", [build_sat_row()])
    questor = write_csv(tmp_path / "questor.csv", [build_questor_row()])
    output = tmp_path / "report.xlsx"
    issues_csv = tmp_path / "issues.csv"

    code = main([str(sat), str(questor), "--output", str(output), "--csv", str(issues_csv)])

    assert code == 0
    out = capsys.readouterr().out
    assert "Invoices analysed: 1" in out
    assert "No discrepancies detected." in out
    assert load_workbook(output).sheetnames == ["Resumo", "Divergências", "Tabela Completa"]
    assert issues_csv.read_text(encoding="utf-8").startswith("Número,Série")


def test_cli_returns_one_on_errors(tmp_path: Path, capsys):
    sat = write_csv(tmp_path / "sat.csv", [build_sat_row(NumeroDocumento="555")])
    questor = write_csv(tmp_path / "questor.csv", [build_questor_row()])

    code = main([str(sat), str(questor), "--rule-set", "destinadas"])

    assert code == 1
    out = capsys.readouterr().out
    assert "[Erro] 555/1 Documento" in out
