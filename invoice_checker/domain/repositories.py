"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import RawRow


class SatInvoiceRepository(Protocol):
    """Provides rows from the SAT (tax authority) export."""

    def list_rows(self) -> Sequence[RawRow]:
        ...


class QuestorInvoiceRepository(Protocol):
    """Provides rows from the Questor (accounting system) export."""

    def list_rows(self) -> Sequence[RawRow]:
        ...
