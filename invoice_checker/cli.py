"""Command-line entrypoint for SAT x Questor validation."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from invoice_checker.application.use_cases import InvoiceValidationContext, ValidateInvoicesUseCase
from invoice_checker.config import SETTINGS
from invoice_checker.domain.rules import RULE_SETS, get_rule_set
from invoice_checker.domain.services import InvoiceValidator
from invoice_checker.infrastructure.repositories.excel_repositories import (
    QuestorSpreadsheetRepository,
    SatSpreadsheetRepository,
)
from invoice_checker.presentation.diff_report import render_csv, render_xlsx, severity_label


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile a SAT invoice export against a Questor export")
    parser.add_argument("sat", type=Path, help="Path to the SAT spreadsheet (.xlsx, .xls or .csv)")
    parser.add_argument("questor", type=Path, help="Path to the Questor spreadsheet (.xlsx, .xls or .csv)")
    parser.add_argument(
        "--rule-set",
        choices=sorted(RULE_SETS),
        default="emitidas",
        help="Which reconciliation direction to apply",
    )
    parser.add_argument("--output", type=Path, help="Write the Excel report to this path")
    parser.add_argument("--csv", type=Path, help="Write the flat issue list as CSV to this path")
    parser.add_argument("--verbose", action="store_true", help="Log per-invoice verdicts")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else SETTINGS.log_level)

    context = InvoiceValidationContext(
        sat_repository=SatSpreadsheetRepository(args.sat),
        questor_repository=QuestorSpreadsheetRepository(args.questor),
        validator=InvoiceValidator(get_rule_set(args.rule_set)),
    )
    result = ValidateInvoicesUseCase(context).execute().result

    print(f"Validation Summary ({context.validator.rule_set.title})")
    print("==================")
    print(f"Invoices analysed: {result.total_records}")
    print(f"Invoices matched: {result.matched_records}")
    print(f"Success rate: {result.success_rate}%")
    print(f"Issues: {len(result.issues)} ({result.error_count} errors, {result.warning_count} warnings)")

    if result.issues:
        print("\nDiscrepancies detected:")
        for issue in result.issues:
            detail = issue.description or (f"diff {issue.difference:.2f}" if issue.difference is not None else "")
            print(
                f"- [{severity_label(issue)}] {issue.document_number}/{issue.series} {issue.field}: "
                f"SAT={issue.sat_value} Questor={issue.questor_value} {detail}".rstrip()
            )
    else:
        print("\nNo discrepancies detected.")

    if args.output:
        args.output.write_bytes(render_xlsx(result))
        print(f"\nReport written to {args.output}")
    if args.csv:
        args.csv.write_bytes(render_csv(result.issues))
        print(f"Issue list written to {args.csv}")

    return 1 if result.has_errors() else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
