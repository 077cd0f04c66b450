"""Shared parsing utilities for spreadsheet ingestion."""
from __future__ import annotations

import hashlib
import math
from datetime import date, datetime
from io import BytesIO
from pathlib import Path

import pandas as pd

SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm", ".xls", ".csv"}


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def file_extension(filename: str | Path) -> str:
    suffix = Path(str(filename)).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported spreadsheet type {suffix or '(none)'!r} for {filename}; "
            f"expected one of {sorted(SUPPORTED_EXTENSIONS)}"
        )
    return suffix


def plain_cell(value: object) -> object:
    """Convert a pandas cell into the plain value the domain layer expects."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, (pd.Timestamp, datetime)):
        if pd.isna(value):
            return None
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value if value.strip() else None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    # numpy scalars
    if hasattr(value, "item"):
        return plain_cell(value.item())
    return value
