"""Tabular projections and spreadsheet exports of a validation result."""
from __future__ import annotations

import csv
import io
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Sequence

import pandas as pd

from invoice_checker.domain.models import ValidationIssue
from invoice_checker.domain.normalization import normalize_date
from invoice_checker.domain.results import ValidationResult

SUMMARY_SHEET = "Resumo"
ISSUES_SHEET = "Divergências"
BY_DOCUMENT_SHEET = "Tabela Completa"

CURRENCY_FORMAT = '"R$"#,##0.00;[Red]\\-"R$"#,##0.00'
DATE_FORMAT = "dd/mm/yyyy"

ISSUE_COLUMNS = [
    "Número",
    "Série",
    "Data",
    "Campo",
    "Valor SAT",
    "Valor Questor",
    "Diferença/Problema",
    "Severidade",
]

# Pivot column -> issue field label whose SAT value fills it.
BY_DOCUMENT_FIELDS = {
    "CNPJ Emitente": "CNPJ Emitente",
    "CNPJ Destinatário": "CNPJ Destinatário",
    "UF": "UF Destinatário",
    "Situação": "Situacao",
    "Valor Total Nota": "Valor Total Nota",
    "Valor ICMS": "Valor ICMS",
    "Base Cálculo ICMS": "Base Cálculo ICMS",
    "Base Cálculo ST": "Base Cálculo ST",
    "Valor ICMS ST": "Valor ICMS ST",
    "Valor Frete": "Valor Frete",
    "Valor Seguro": "Valor Seguro",
    "Valor Despesa": "Valor Despesa Acessória",
    "Valor Desconto": "Valor Desconto",
    "Valor IPI": "Valor IPI",
    "Valor PIS": "Valor PIS",
    "Valor COFINS": "Valor COFINS",
}
BY_DOCUMENT_COLUMNS = ["Número", "Série", "Data", *BY_DOCUMENT_FIELDS, "Status"]
BY_DOCUMENT_MONETARY = [column for column in BY_DOCUMENT_FIELDS if column.startswith(("Valor", "Base"))]

_MONETARY_MARKERS = ("Valor", "Base", "ICMS", "IPI", "PIS", "COFINS")


def severity_label(issue: ValidationIssue) -> str:
    return "Erro" if issue.is_error else "Alerta"


def is_monetary_field(label: str) -> bool:
    return any(marker in label for marker in _MONETARY_MARKERS)


def summary_rows(result: ValidationResult) -> list[list[object]]:
    return [
        ["Relatório de Validação - SAT vs Questor"],
        [""],
        ["Total de registros analisados", result.total_records],
        ["Registros validados com sucesso", result.matched_records],
        ["Percentual de sucesso", f"{result.success_rate}%"],
        ["Total de problemas encontrados", len(result.issues)],
    ]


def issues_to_rows(issues: Sequence[ValidationIssue]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for issue in issues:
        if issue.difference is not None:
            detail = f"{issue.difference:.2f}"
        else:
            detail = issue.description or ""
        rows.append(
            {
                "Número": issue.document_number,
                "Série": issue.series,
                "Data": issue.issue_date,
                "Campo": issue.field,
                "Valor SAT": issue.sat_value,
                "Valor Questor": issue.questor_value,
                "Diferença/Problema": detail,
                "Severidade": severity_label(issue),
            }
        )
    return rows


def by_document_rows(issues: Sequence[ValidationIssue]) -> list[dict[str, str]]:
    """One row per invoice carrying whichever SAT values its issues captured."""
    grouped: dict[tuple[str, str], list[ValidationIssue]] = {}
    for issue in issues:
        grouped.setdefault(issue.key.key(), []).append(issue)

    rows: list[dict[str, str]] = []
    for doc_issues in grouped.values():
        first = doc_issues[0]
        row = {column: "" for column in BY_DOCUMENT_COLUMNS}
        row["Número"] = first.document_number
        row["Série"] = first.series
        row["Data"] = first.issue_date
        by_label = {issue.field: issue.sat_value for issue in doc_issues}
        for column, label in BY_DOCUMENT_FIELDS.items():
            row[column] = by_label.get(label, "")
        row["Status"] = "Erro" if any(issue.is_error for issue in doc_issues) else "Alerta"
        rows.append(row)
    return rows


def render_csv(issues: Sequence[ValidationIssue]) -> bytes:
    rows = issues_to_rows(issues)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=ISSUE_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def _as_number(value: str) -> object:
    if not value or value == "-":
        return value
    try:
        return float(Decimal(value))
    except (InvalidOperation, ValueError):
        return value


def _as_date(value: str) -> object:
    canonical = normalize_date(value)
    try:
        return datetime.strptime(canonical, "%Y-%m-%d").date()
    except ValueError:
        return value


def _issues_frame(issues: Sequence[ValidationIssue]) -> pd.DataFrame:
    rows = issues_to_rows(issues)
    for row, issue in zip(rows, issues):
        row["Data"] = _as_date(row["Data"])
        if is_monetary_field(issue.field):
            row["Valor SAT"] = _as_number(row["Valor SAT"])
            row["Valor Questor"] = _as_number(row["Valor Questor"])
            if issue.difference is not None:
                row["Diferença/Problema"] = float(issue.difference)
    return pd.DataFrame(rows, columns=ISSUE_COLUMNS)


def _by_document_frame(issues: Sequence[ValidationIssue]) -> pd.DataFrame:
    rows = by_document_rows(issues)
    for row in rows:
        row["Data"] = _as_date(row["Data"])
        for column in BY_DOCUMENT_MONETARY:
            row[column] = _as_number(row[column])
    return pd.DataFrame(rows, columns=BY_DOCUMENT_COLUMNS)


def _write_money_cells(worksheet, frame: pd.DataFrame, columns: Sequence[str], money_format) -> None:
    # pandas writes plain numbers; rewrite them with the currency format.
    for column in columns:
        col_idx = frame.columns.get_loc(column)
        worksheet.set_column(col_idx, col_idx, 15)
        for r, value in enumerate(frame[column]):
            if isinstance(value, float):
                worksheet.write_number(r + 1, col_idx, value, money_format)


def _highlight_errors(worksheet, frame: pd.DataFrame, status_column: str, error_format) -> None:
    if frame.empty:
        return
    status_idx = frame.columns.get_loc(status_column)
    worksheet.conditional_format(1, 0, len(frame), len(frame.columns) - 1, {
        "type": "formula",
        "criteria": f'=${_column_letter(status_idx)}2="Erro"',
        "format": error_format,
    })


def _column_letter(index: int) -> str:
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def render_xlsx(result: ValidationResult) -> bytes:
    """Workbook with the summary, flat issue list and per-document pivot sheets."""
    issues_frame = _issues_frame(result.issues)
    pivot_frame = _by_document_frame(result.issues)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter", date_format=DATE_FORMAT) as writer:
        pd.DataFrame(summary_rows(result)).to_excel(writer, sheet_name=SUMMARY_SHEET, index=False, header=False)
        issues_frame.to_excel(writer, sheet_name=ISSUES_SHEET, index=False)
        pivot_frame.to_excel(writer, sheet_name=BY_DOCUMENT_SHEET, index=False)

        workbook = writer.book
        money = workbook.add_format({"num_format": CURRENCY_FORMAT})
        error_row = workbook.add_format({"bg_color": "#FFC7CE"})

        writer.sheets[SUMMARY_SHEET].set_column(0, 0, 36)

        issues_sheet = writer.sheets[ISSUES_SHEET]
        issues_sheet.set_column(0, 1, 10)
        issues_sheet.set_column(2, 2, 12)
        issues_sheet.set_column(3, 3, 24)
        _write_money_cells(issues_sheet, issues_frame, ["Valor SAT", "Valor Questor", "Diferença/Problema"], money)
        _highlight_errors(issues_sheet, issues_frame, "Severidade", error_row)

        pivot_sheet = writer.sheets[BY_DOCUMENT_SHEET]
        pivot_sheet.set_column(2, 2, 12)
        pivot_sheet.set_column(3, 4, 20)
        _write_money_cells(pivot_sheet, pivot_frame, BY_DOCUMENT_MONETARY, money)
        _highlight_errors(pivot_sheet, pivot_frame, "Status", error_row)
    return buffer.getvalue()


def report_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"validacao-sat-questor_{stamp}.xlsx"
