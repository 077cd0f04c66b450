"""SAT x Questor fiscal invoice reconciliation toolkit."""
from invoice_checker.application.use_cases import InvoiceValidationContext, ValidateInvoicesUseCase
from invoice_checker.domain.rules import DESTINADAS, EMITIDAS, get_rule_set
from invoice_checker.domain.services import InvoiceValidator
from invoice_checker.infrastructure.repositories.excel_repositories import (
    QuestorSpreadsheetRepository,
    SatSpreadsheetRepository,
)

__all__ = [
    "ValidateInvoicesUseCase",
    "InvoiceValidationContext",
    "InvoiceValidator",
    "EMITIDAS",
    "DESTINADAS",
    "get_rule_set",
    "SatSpreadsheetRepository",
    "QuestorSpreadsheetRepository",
]
