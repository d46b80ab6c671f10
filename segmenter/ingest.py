"""
Row ingestion for CSV and XLSX sources.

Responsibilities:
- extension dispatch (rejected before any read)
- encoding detection for CSV bytes
- one segment per CSV file / per worksheet
- header skip, id/center extraction, bad-row policy
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from charset_normalizer import from_bytes
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import FormatError, IngestionError
from .models import ReportItem, Row
from .rules import (
    CSV_DELIMITER,
    CSV_EXTENSION,
    ON_BAD_ROW_ABORT,
    ON_BAD_ROW_SKIP,
    SUPPORTED_EXTENSIONS,
)

logger = logging.getLogger(__name__)


@dataclass
class Segment:
    name: str
    rows: List[Row] = field(default_factory=list)
    warnings: List[ReportItem] = field(default_factory=list)


def detect_format(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise FormatError(str(filename))
    return suffix


def decode_bytes(raw: bytes) -> str:
    """Best-effort decode; UTF-8 BOM is dropped."""
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig")
    match = from_bytes(raw).best()
    encoding = match.encoding if match is not None else "utf-8"
    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return raw.decode("utf-8", errors="replace")


def parse_id(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"id is missing or not numeric: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"id is not an integer: {value!r}")
    text = str(value).strip()
    if not text:
        raise ValueError("id is missing")
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"id is not numeric: {text!r}") from None


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _is_blank(cells: Sequence[Any]) -> bool:
    return all(_cell_text(cell) == "" for cell in cells)


def rows_from_cells(
    records: Iterable[Sequence[Any]],
    segment: str,
    source: str,
    on_bad_row: str = ON_BAD_ROW_ABORT,
) -> Segment:
    """
    Turn raw cell sequences (header included) into Rows.

    Column 1 is the numeric id, column 2 the center label. The header is the
    first non-blank record. Row numbers in errors are 1-based physical
    record numbers.
    """
    result = Segment(name=segment)
    header_seen = False
    for number, cells in enumerate(records, start=1):
        cells = list(cells or ())
        if _is_blank(cells):
            continue
        if not header_seen:
            header_seen = True
            continue
        try:
            if len(cells) < 2:
                raise ValueError(f"expected 2 columns, found {len(cells)}")
            row = Row(id=parse_id(cells[0]), center=_cell_text(cells[1]))
        except ValueError as exc:
            if on_bad_row == ON_BAD_ROW_SKIP:
                logger.warning("%s [%s] row %d skipped: %s", source, segment, number, exc)
                result.warnings.append(
                    ReportItem(
                        segment=segment,
                        row=number,
                        issue="bad_row",
                        value=str(exc),
                        action="skipped",
                    )
                )
                continue
            raise IngestionError(str(exc), path=source, segment=segment, row=number) from exc
        result.rows.append(row)
    return result


def parse_csv_segments(raw: bytes, filename: str, on_bad_row: str = ON_BAD_ROW_ABORT) -> List[Segment]:
    text = decode_bytes(raw)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=CSV_DELIMITER)
    segment = Path(filename).stem
    try:
        return [rows_from_cells(reader, segment, filename, on_bad_row)]
    except csv.Error as exc:
        raise IngestionError(f"malformed CSV: {exc}", path=filename, segment=segment) from exc


def parse_xlsx_segments(raw: bytes, filename: str, on_bad_row: str = ON_BAD_ROW_ABORT) -> List[Segment]:
    try:
        workbook = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, SyntaxError, KeyError, OSError, ValueError) as exc:
        raise IngestionError(f"unreadable workbook: {exc}", path=filename) from exc
    # Read-only sheets parse their XML lazily, inside iter_rows.
    # xml.etree ParseError and lxml XMLSyntaxError both subclass SyntaxError.
    segments: List[Segment] = []
    try:
        for sheet in workbook.worksheets:
            try:
                segments.append(
                    rows_from_cells(sheet.iter_rows(values_only=True), sheet.title, filename, on_bad_row)
                )
            except (SyntaxError, KeyError, ValueError, OSError) as exc:
                raise IngestionError(
                    f"unreadable worksheet: {exc}", path=filename, segment=sheet.title
                ) from exc
    finally:
        workbook.close()
    return segments


def parse_segments(raw: bytes, filename: str, on_bad_row: str = ON_BAD_ROW_ABORT) -> List[Segment]:
    fmt = detect_format(filename)
    if fmt == CSV_EXTENSION:
        return parse_csv_segments(raw, filename, on_bad_row)
    return parse_xlsx_segments(raw, filename, on_bad_row)


def load_segments(path: Path, on_bad_row: str = ON_BAD_ROW_ABORT) -> List[Segment]:
    path = Path(path)
    detect_format(path.name)
    logger.info("Loading %s file: %s", path.suffix.lstrip(".").upper(), path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise IngestionError(f"cannot read file: {exc}", path=str(path)) from exc
    return parse_segments(raw, str(path), on_bad_row)
