"""Application services orchestrating the invoice validation workflow."""
from __future__ import annotations

from dataclasses import dataclass

from invoice_checker.application.dto import ValidationResponse
from invoice_checker.domain.repositories import (
    QuestorInvoiceRepository,
    SatInvoiceRepository,
)
from invoice_checker.domain.services import InvoiceValidator


@dataclass(slots=True)
class InvoiceValidationContext:
    sat_repository: SatInvoiceRepository
    questor_repository: QuestorInvoiceRepository
    validator: InvoiceValidator


class ValidateInvoicesUseCase:
    def __init__(self, context: InvoiceValidationContext) -> None:
        self._context = context

    def execute(self) -> ValidationResponse:
        # Both sources are read in full before any rule runs; reader errors propagate.
        sat_rows = self._context.sat_repository.list_rows()
        questor_rows = self._context.questor_repository.list_rows()
        result = self._context.validator.validate(sat_rows, questor_rows)
        return ValidationResponse(result=result, sat_rows=sat_rows, questor_rows=questor_rows)
