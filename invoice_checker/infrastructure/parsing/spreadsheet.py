"""Reads the first sheet of an uploaded export into plain row mappings."""
from __future__ import annotations

import csv
import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from invoice_checker.infrastructure.parsing.utils import (
    compute_file_hash,
    ensure_bytes,
    file_extension,
    plain_cell,
)

logger = logging.getLogger(__name__)

_EXCEL_ENGINES = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd"}

# What openpyxl, xlrd and the csv sniffer raise on a corrupt or mislabelled upload.
_UNREADABLE_ERRORS = (zipfile.BadZipFile, InvalidFileException, XLRDError, csv.Error, KeyError)


def _list_sheets(source: BytesIO, engine: str) -> list[str]:
    xls = pd.ExcelFile(source, engine=engine)
    return xls.sheet_names


def _pick_sheet(source: BytesIO, engine: str, preferred: str | None) -> str:
    sheets = _list_sheets(source, engine)
    if not sheets:
        raise ValueError("Workbook has no sheets")
    if preferred:
        if preferred in sheets:
            return preferred
        lower_map = {name.lower(): name for name in sheets}
        if preferred.lower() in lower_map:
            return lower_map[preferred.lower()]
    return sheets[0]


def _read_csv(raw_bytes: bytes, encoding: str = "utf-8-sig") -> pd.DataFrame:
    return pd.read_csv(
        BytesIO(raw_bytes),
        sep=None,
        engine="python",
        dtype=str,
        keep_default_na=False,
        encoding=encoding,
    )


def read_dataframe(raw_bytes: bytes, filename: str | Path, sheet_name: str | None = None) -> pd.DataFrame:
    suffix = file_extension(filename)
    if suffix == ".csv":
        try:
            return _read_csv(raw_bytes)
        except UnicodeDecodeError:
            # Accounting systems often export cp1252; latin-1 decodes any byte.
            logger.info("%s is not UTF-8, retrying as latin-1", Path(str(filename)).name)
            return _read_csv(raw_bytes, encoding="latin-1")
    engine = _EXCEL_ENGINES[suffix]
    chosen = _pick_sheet(BytesIO(raw_bytes), engine, sheet_name)
    return pd.read_excel(BytesIO(raw_bytes), sheet_name=chosen, engine=engine, dtype=object)


def dataframe_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    columns = [str(column).strip() for column in df.columns]
    rows: list[dict[str, Any]] = []
    for values in df.itertuples(index=False, name=None):
        row = {column: plain_cell(value) for column, value in zip(columns, values)}
        if all(value is None for value in row.values()):
            continue
        rows.append(row)
    return rows


def read_rows(
    source: BytesIO | Path | bytes,
    filename: str | Path | None = None,
    sheet_name: str | None = None,
) -> list[dict[str, Any]]:
    """Load every non-blank row of an export, keyed by its header cells."""
    if filename is None:
        if not isinstance(source, Path):
            raise ValueError("A filename is required to detect the spreadsheet type")
        filename = source.name
    raw_bytes = ensure_bytes(source)
    name = Path(str(filename)).name
    try:
        frame = read_dataframe(raw_bytes, filename, sheet_name)
    except _UNREADABLE_ERRORS as exc:
        raise ValueError(f"Could not read {name}: {exc}") from exc
    rows = dataframe_to_rows(frame)
    logger.info(
        "Read %d rows from %s (sha256=%s)",
        len(rows),
        name,
        compute_file_hash(raw_bytes)[:12],
    )
    return rows
