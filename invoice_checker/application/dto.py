"""Application-level DTOs for invoice validation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from invoice_checker.domain.models import RawRow
from invoice_checker.domain.results import ValidationResult


@dataclass(slots=True, frozen=True)
class ValidationResponse:
    result: ValidationResult
    sat_rows: Sequence[RawRow]
    questor_rows: Sequence[RawRow]
