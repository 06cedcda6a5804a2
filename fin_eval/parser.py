"""
fin_eval/parser.py
==================
Workbook reader + keyword extractor. Handles:
  - Excel (.xlsx) via openpyxl
  - Legacy Excel (.xls) via xlrd
  - HTML tables saved with an .xls extension (common in ERP/bank exports)
  - CSV (.csv) through extract_file()

Only the first sheet is read. Column 0 holds the label, column 1 the amount.
Nothing in here raises on bad input: an unreadable file yields an empty
FinancialRecord and the caller checks `is_valid`.
"""
from __future__ import annotations
import csv
import io
import logging
import math
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd
from bs4 import BeautifulSoup

from .keywords import match_field, normalize_label
from .types import FinancialRecord

logger = logging.getLogger(__name__)

Row = List[Any]

XLSX_MAGIC = b"PK\x03\x04"
XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


# ─── Numeric Normalisation ────────────────────────────────────────────────────

def _is_absent(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and val == ""


def to_number(val: Any) -> float:
    """Coerce a cell to float. Numbers pass through; text loses ',' and '$'."""
    if isinstance(val, (int, float, np.integer, np.floating)) and not isinstance(val, (bool, np.bool_)):
        return float(val)
    s = str(val).replace(",", "").replace("$", "")
    # float() would accept "1_000"
    if "_" in s:
        logger.debug("Unparseable amount %r, using 0", val)
        return 0.0
    try:
        num = float(s)
    except ValueError:
        logger.debug("Unparseable amount %r, using 0", val)
        return 0.0
    return num if math.isfinite(num) else 0.0


# ─── Row Extraction ───────────────────────────────────────────────────────────

def extract_rows(rows: Sequence[Sequence[Any]]) -> FinancialRecord:
    """Map label/amount rows onto a FinancialRecord (last matching row wins)."""
    record = FinancialRecord()
    for row in rows:
        if len(row) < 2:
            continue
        raw_value = row[1]
        if _is_absent(raw_value):
            continue

        label = normalize_label(row[0])
        value = to_number(raw_value)

        target = match_field(label)
        if target is not None:
            logger.debug("%r -> %s = %s", label, target, value)
            setattr(record, target, value)
    return record


# ─── Format Readers ───────────────────────────────────────────────────────────

def _looks_like_html(content: bytes) -> bool:
    """Heuristic detection for HTML payloads saved with .xls extension."""
    head = content[:4096]
    low = head.lower().replace(b"\x00", b"")
    return any(tok in low for tok in (b"<html", b"<table", b"<!doctype html", b"<tr", b"<td"))


def _decode_text(content: bytes) -> str:
    """Decode bytes with fallbacks for legacy exports (utf-16/latin1/etc.)."""
    for enc in ("utf-8", "utf-16", "latin1", "cp1252"):
        try:
            text = content.decode(enc)
            if text:
                return text
        except UnicodeDecodeError:
            continue
    return content.decode("utf-8", errors="replace")


def _frame_rows(df: pd.DataFrame) -> List[Row]:
    return [list(r) for r in df.itertuples(index=False, name=None)]


def _read_excel_rows(file_bytes: bytes, engine: str) -> List[Row]:
    xl = pd.ExcelFile(io.BytesIO(file_bytes), engine=engine)
    if not xl.sheet_names:
        return []
    first = xl.sheet_names[0]
    df = xl.parse(first, header=None, keep_default_na=False)
    logger.debug("Reading sheet %r (%d rows) with %s", first, len(df), engine)
    return _frame_rows(df)


def _read_html_rows(file_bytes: bytes) -> List[Row]:
    soup = BeautifulSoup(_decode_text(file_bytes), "lxml")
    table = soup.find("table")
    if table is None:
        return []
    rows: List[Row] = []
    for tr in table.find_all("tr"):
        cells: Row = []
        for td in tr.find_all(["td", "th"]):
            try:
                colspan = int(td.get("colspan", 1))
            except (TypeError, ValueError):
                colspan = 1
            text = " ".join(td.get_text().split())
            cells.extend([text] * max(colspan, 1))
        rows.append(cells)
    return rows


def read_first_sheet(file_bytes: bytes) -> List[Row]:
    """Return the raw rows of the first sheet, or [] when nothing decodes."""
    if not file_bytes:
        return []
    try:
        if file_bytes.startswith(XLSX_MAGIC):
            return _read_excel_rows(file_bytes, "openpyxl")
        if file_bytes.startswith(XLS_MAGIC):
            return _read_excel_rows(file_bytes, "xlrd")
        if _looks_like_html(file_bytes):
            return _read_html_rows(file_bytes)
    except Exception as exc:
        logger.warning("Could not read workbook: %s", exc)
        return []
    logger.warning("Unrecognised workbook format (%d bytes)", len(file_bytes))
    return []


def _csv_width(file_bytes: bytes) -> int:
    """Widest row, so title lines with a single field don't fix the column count."""
    reader = csv.reader(io.StringIO(_decode_text(file_bytes)))
    return max((len(r) for r in reader), default=0)


def _read_csv_rows(file_bytes: bytes) -> List[Row]:
    try:
        width = _csv_width(file_bytes)
        if width == 0:
            return []
        df = pd.read_csv(
            io.BytesIO(file_bytes), header=None, names=list(range(width)), keep_default_na=False,
        )
    except Exception as exc:
        logger.warning("Could not read CSV: %s", exc)
        return []
    return _frame_rows(df)


# ─── Main Entry Points ────────────────────────────────────────────────────────

def extract(file_bytes: bytes) -> FinancialRecord:
    """Parse workbook bytes into a FinancialRecord. Never raises."""
    rows = read_first_sheet(file_bytes)
    record = extract_rows(rows)
    logger.info(
        "Extracted %d rows, valid=%s", len(rows), record.is_valid,
    )
    return record


def extract_file(file_bytes: bytes, filename: Optional[str] = None) -> FinancialRecord:
    """Like extract(), but honours a .csv filename."""
    if filename and filename.lower().endswith(".csv"):
        rows = _read_csv_rows(file_bytes) if file_bytes else []
        record = extract_rows(rows)
        logger.info("Extracted %d CSV rows from %s, valid=%s", len(rows), filename, record.is_valid)
        return record
    return extract(file_bytes)
