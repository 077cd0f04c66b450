"""Domain services implementing the SAT x Questor reconciliation rules."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from invoice_checker.config import SETTINGS, Settings

from .aggregation import aggregate_totals
from .grouping import group_by_key
from .models import ERROR, WARNING, InvoiceGroup, InvoiceOutcome, RawRow, Severity, ValidationIssue
from .normalization import format_amount, normalize_date, normalize_document, to_text
from .results import ReportBuilder, ValidationResult
from .rules import (
    IDENTITY_FIELD_RULES,
    LABEL_BASIC_DATA,
    LABEL_DOCUMENT,
    LABEL_IPI_COMPLEMENT,
    MESSAGE_BASIC_DATA,
    MESSAGE_FIELD_MISMATCH,
    MESSAGE_IPI_COMPLEMENT,
    MESSAGE_NOT_FOUND,
    QUESTOR_MONETARY_FIELDS,
    QUESTOR_NUMBER,
    QUESTOR_SERIES,
    QUESTOR_TOTAL,
    SAT_DOCUMENT_TYPE,
    SAT_IPI_DEVOLV_A58,
    SAT_ISSUE_DATE,
    SAT_MODEL,
    SAT_OPERATION,
    SAT_STATUS,
    VALUE_FIELD_RULES,
    IdentityFieldRule,
    RuleSet,
)

logger = logging.getLogger(__name__)


class InvoiceValidator:
    """Applies the ordered reconciliation rules to every SAT invoice.

    Rules run in a fixed order and the first four stop the evaluation of an
    invoice when they fire. Only the message wording depends on the rule set.
    """

    def __init__(self, rule_set: RuleSet, settings: Settings | None = None) -> None:
        self._rule_set = rule_set
        self._settings = settings or SETTINGS

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def validate(self, sat_rows: Sequence[RawRow], questor_rows: Sequence[RawRow]) -> ValidationResult:
        sat_groups = group_by_key(sat_rows)
        questor_groups = group_by_key(questor_rows, QUESTOR_NUMBER, QUESTOR_SERIES)
        logger.debug(
            "Validating %d SAT invoices (%d rows) against %d Questor invoices (%d rows)",
            len(sat_groups),
            len(sat_rows),
            len(questor_groups),
            len(questor_rows),
        )

        builder = ReportBuilder(self._rule_set.name)
        for key, group in sat_groups.items():
            builder.add(self.evaluate(group, questor_groups.get(key)))
        return builder.build()

    def evaluate(self, group: InvoiceGroup, questor: InvoiceGroup | None) -> InvoiceOutcome:
        issues: list[ValidationIssue] = []

        def stop() -> InvoiceOutcome:
            return InvoiceOutcome(key=group.key, issues=tuple(issues), matched=False)

        first = group.first
        settings = self._settings

        if not self._has_valid_basic_data(group):
            issues.append(
                self._issue(group, LABEL_BASIC_DATA, "Inválido", "-", ERROR, description=MESSAGE_BASIC_DATA)
            )
            return stop()

        if to_text(first.get(SAT_OPERATION)) == settings.inbound_operation_code:
            issues.append(
                self._issue(
                    group,
                    SAT_OPERATION,
                    settings.inbound_operation_code,
                    "-",
                    ERROR,
                    description=self._rule_set.inbound_operation_message,
                )
            )
            return stop()

        if to_text(first.get(SAT_STATUS)) == settings.cancelled_status:
            if questor is not None:
                questor_total = aggregate_totals(questor.rows, (QUESTOR_TOTAL,))[QUESTOR_TOTAL]
                if questor_total > 0:
                    issues.append(
                        self._issue(
                            group,
                            SAT_STATUS,
                            settings.cancelled_status,
                            format_amount(questor_total),
                            ERROR,
                            description=self._rule_set.cancelled_message,
                        )
                    )
            return stop()

        if questor is None:
            issues.append(
                self._issue(group, LABEL_DOCUMENT, "Presente", "Ausente", ERROR, description=MESSAGE_NOT_FOUND)
            )
            return stop()

        field_issues = [
            self._issue(
                group,
                rule.label,
                to_text(first.get(rule.sat_field)) or "-",
                to_text(questor.first.get(rule.questor_field)) or "-",
                ERROR,
                description=MESSAGE_FIELD_MISMATCH,
            )
            for rule in IDENTITY_FIELD_RULES
            if not self._identity_matches(rule, first, questor.first)
        ]
        if field_issues:
            issues.extend(field_issues)
            return stop()

        sat_totals = aggregate_totals(group.rows)
        questor_totals = aggregate_totals(questor.rows, QUESTOR_MONETARY_FIELDS)
        for rule in VALUE_FIELD_RULES:
            sat_value = sat_totals[rule.sat_field]
            questor_value = sum((questor_totals[name] for name in rule.questor_fields), Decimal("0"))
            difference = abs(sat_value - questor_value)
            if difference > settings.tolerance_abs:
                issues.append(
                    self._issue(
                        group,
                        rule.label,
                        format_amount(sat_value),
                        format_amount(questor_value),
                        ERROR if difference > settings.error_threshold else WARNING,
                        difference=Decimal(format_amount(difference)),
                    )
                )

        ipi_complement = sat_totals[SAT_IPI_DEVOLV_A58]
        if ipi_complement > 0:
            issues.append(
                self._issue(
                    group,
                    LABEL_IPI_COMPLEMENT,
                    format_amount(ipi_complement),
                    "-",
                    WARNING,
                    description=MESSAGE_IPI_COMPLEMENT,
                )
            )

        matched = not any(issue.is_error for issue in issues)
        return InvoiceOutcome(key=group.key, issues=tuple(issues), matched=matched)

    def _has_valid_basic_data(self, group: InvoiceGroup) -> bool:
        settings = self._settings
        return all(
            to_text(row.get(SAT_MODEL)) == settings.valid_model
            and to_text(row.get(SAT_DOCUMENT_TYPE)) == settings.valid_document_type
            and to_text(row.get(SAT_STATUS)) in settings.valid_statuses
            for row in group.rows
        )

    @staticmethod
    def _identity_matches(rule: IdentityFieldRule, sat_row: RawRow, questor_row: RawRow) -> bool:
        sat_value = sat_row.get(rule.sat_field)
        questor_value = questor_row.get(rule.questor_field)
        if rule.comparison == "document":
            return normalize_document(sat_value) == normalize_document(questor_value)
        if rule.comparison == "date":
            return normalize_date(sat_value) == normalize_date(questor_value)
        return to_text(sat_value) == to_text(questor_value)

    @staticmethod
    def _issue(
        group: InvoiceGroup,
        label: str,
        sat_value: str,
        questor_value: str,
        severity: Severity,
        difference: Decimal | None = None,
        description: str | None = None,
    ) -> ValidationIssue:
        return ValidationIssue(
            document_number=group.key.number,
            series=group.key.series,
            issue_date=to_text(group.first.get(SAT_ISSUE_DATE)),
            field=label,
            sat_value=sat_value,
            questor_value=questor_value,
            severity=severity,
            difference=difference,
            description=description,
        )
