"""Central configuration for the invoice checker package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from decimal import Context, Decimal

VALID_MODEL = "55"
VALID_DOCUMENT_TYPE = "Nfe"
AUTHORIZED_STATUS = "Autorizado"
CANCELLED_STATUS = "CANCELADA"
INBOUND_OPERATION_CODE = "E"

# Excel serial dates count days from this epoch (accounts for the 1900 leap-year bug).
EXCEL_EPOCH = date(1899, 12, 30)


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    tolerance_abs: Decimal
    error_threshold: Decimal
    valid_model: str
    valid_document_type: str
    valid_statuses: frozenset[str]
    cancelled_status: str
    inbound_operation_code: str
    excel_epoch: date
    log_level: str


SETTINGS = Settings(
    decimal_context=Context(prec=28),
    tolerance_abs=Decimal("0.01"),
    error_threshold=Decimal("1.00"),
    valid_model=VALID_MODEL,
    valid_document_type=VALID_DOCUMENT_TYPE,
    valid_statuses=frozenset({AUTHORIZED_STATUS, CANCELLED_STATUS}),
    cancelled_status=CANCELLED_STATUS,
    inbound_operation_code=INBOUND_OPERATION_CODE,
    excel_epoch=EXCEL_EPOCH,
    log_level=os.getenv("INVOICE_CHECKER_LOG_LEVEL", "INFO").upper(),
)
