"""Display filters over a validation result's issue list.

Filtering only narrows what is shown; exports always use the full report.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Sequence

from invoice_checker.domain.models import ValidationIssue
from invoice_checker.domain.normalization import normalize_date, normalize_document

StatusFilter = Literal["all", "ok", "warning", "error"]


@dataclass(frozen=True)
class IssueFilter:
    start_date: date | None = None
    end_date: date | None = None
    cnpj: str = ""
    status: StatusFilter = "all"


def _issue_day(issue: ValidationIssue) -> date | None:
    try:
        return datetime.strptime(normalize_date(issue.issue_date), "%Y-%m-%d").date()
    except ValueError:
        return None


def matches(issue: ValidationIssue, flt: IssueFilter) -> bool:
    if flt.start_date or flt.end_date:
        day = _issue_day(issue)
        if day is not None:
            if flt.start_date and day < flt.start_date:
                return False
            if flt.end_date and day > flt.end_date:
                return False
    # Issues only carry the document number, so that is what the text is matched against.
    needle = normalize_document(flt.cnpj)
    if needle and needle not in issue.document_number:
        return False
    if flt.status in ("warning", "error") and issue.severity != flt.status:
        return False
    return True


def filter_issues(issues: Sequence[ValidationIssue], flt: IssueFilter) -> list[ValidationIssue]:
    if flt.status == "ok":
        return []
    return [issue for issue in issues if matches(issue, flt)]
