"""Spreadsheet-backed repositories for SAT and Questor exports."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

from invoice_checker.domain.repositories import (
    QuestorInvoiceRepository,
    SatInvoiceRepository,
)
from invoice_checker.infrastructure.parsing.spreadsheet import read_rows
from invoice_checker.infrastructure.parsing.utils import ensure_bytes, file_extension


class _SpreadsheetRepository:
    def __init__(self, source: BytesIO | Path | bytes, filename: str | Path | None = None) -> None:
        if filename is None:
            if not isinstance(source, Path):
                raise ValueError("A filename is required when the source is not a path")
            filename = source.name
        file_extension(filename)
        self._source = ensure_bytes(source)
        self._filename = str(filename)

    def list_rows(self) -> Sequence[dict[str, Any]]:
        return read_rows(self._source, filename=self._filename)


class SatSpreadsheetRepository(_SpreadsheetRepository, SatInvoiceRepository):
    pass


class QuestorSpreadsheetRepository(_SpreadsheetRepository, QuestorInvoiceRepository):
    pass
