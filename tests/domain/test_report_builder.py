import logging

from invoice_checker.domain.models import DocumentKey, InvoiceOutcome, ValidationIssue
from invoice_checker.domain.results import ReportBuilder, ValidationResult


def make_issue(number: str, severity: str = "error", field: str = "Documento") -> ValidationIssue:
    return ValidationIssue(
        document_number=number,
        series="1",
        issue_date="2024-03-15",
        field=field,
        sat_value="Presente",
        questor_value="Ausente",
        severity=severity,
    )


def test_builder_counts_and_keeps_issue_order():
    builder = ReportBuilder("emitidas")
    builder.add(InvoiceOutcome(DocumentKey("1", "1"), (make_issue("1"),), matched=False))
    builder.add(InvoiceOutcome(DocumentKey("2", "1"), (), matched=True))
    builder.add(InvoiceOutcome(DocumentKey("3", "1"), (make_issue("3", "warning"), make_issue("3")), matched=False))

    result = builder.build()

    assert result.total_records == 3
    assert result.matched_records == 1
    assert [issue.document_number for issue in result.issues] == ["1", "3", "3"]
    assert result.error_count == 2
    assert result.warning_count == 1
    assert result.rule_set == "emitidas"
    assert not result.success


def test_builder_logs_summary(caplog):
    builder = ReportBuilder("destinadas")
    builder.add(InvoiceOutcome(DocumentKey("1", "1"), (make_issue("1", "warning"),), matched=True))

    with caplog.at_level(logging.INFO, logger="invoice_checker.domain.results"):
        builder.build()

    record = caplog.records[-1]
    assert "destinadas" in record.getMessage()
    assert record.total_records == 1
    assert record.matched_records == 1
    assert record.warning_count == 1
    assert record.error_count == 0


def test_success_rate_rounds_half_up():
    assert ValidationResult(total_records=8, matched_records=1).success_rate == 13
    assert ValidationResult(total_records=3, matched_records=2).success_rate == 67
    assert ValidationResult(total_records=0, matched_records=0).success_rate == 0


def test_empty_result_is_success():
    result = ValidationResult(total_records=2, matched_records=2)

    assert result.success
    assert not result.has_errors()
