"""
Plain CSV -> JSON conversion and a minimal header-keyed CSV parser.

Neither path knows about brands or segments; both emit header-keyed rows.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .errors import IngestionError, WriteError
from .ingest import decode_bytes
from .rules import CSV_DELIMITER, JSON_INDENT, OUTPUT_ENCODING

logger = logging.getLogger(__name__)

ParsedRow = Dict[str, Optional[str]]

DERIVED_FIELD = "FIELD5"


def default_compute_field5(row: ParsedRow) -> str:
    return f"{row.get('field') or ''}-{row.get('value') or ''}"


def read_regular_csv(raw: bytes) -> List[Dict[str, Any]]:
    """Rows keyed by header; values stay text exactly as read."""
    reader = csv.DictReader(io.StringIO(decode_bytes(raw), newline=""), delimiter=CSV_DELIMITER)
    return [dict(row) for row in reader]


def convert_regular_csv(input_path: Path, output_path: Path) -> List[Dict[str, Any]]:
    input_path, output_path = Path(input_path), Path(output_path)
    try:
        rows = read_regular_csv(input_path.read_bytes())
    except (OSError, csv.Error) as exc:
        raise IngestionError(f"Error reading the CSV file: {exc}", path=str(input_path)) from exc

    tmp_path = output_path.with_suffix(output_path.suffix + ".tmp")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(rows, indent=JSON_INDENT, ensure_ascii=False) + "\n", encoding=OUTPUT_ENCODING)
        os.replace(tmp_path, output_path)
    except OSError as exc:
        raise WriteError(str(output_path), detail=str(exc)) from exc
    logger.info("Regular CSV converted to JSON and saved to %s", output_path)
    return rows


def parse_csv_text(
    content: str,
    delimiter: str = CSV_DELIMITER,
    headers: bool = True,
    quote_char: str = '"',
    compute_field5: Callable[[ParsedRow], str] = default_compute_field5,
) -> List[ParsedRow]:
    """
    Parse CSV text into header-keyed rows plus a derived FIELD5.

    - blank lines are dropped, cells trimmed
    - cells missing (or empty) relative to the header become None
    - a header row is required
    """
    lines = [line.strip() for line in content.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        raise IngestionError("CSV file is empty.")
    if not headers:
        raise IngestionError("CSV file must contain headers for proper mapping.")

    try:
        records = list(csv.reader(lines, delimiter=delimiter, quotechar=quote_char))
    except csv.Error as exc:
        raise IngestionError(f"malformed CSV: {exc}") from exc

    header_keys = [key.strip() for key in records[0]]
    parsed: List[ParsedRow] = []
    for values in records[1:]:
        values = [value.strip() for value in values]
        row: ParsedRow = {}
        for index, key in enumerate(header_keys):
            row[key] = values[index] if index < len(values) and values[index] else None
        row[DERIVED_FIELD] = compute_field5(row)
        parsed.append(row)
    return parsed


def parse_csv(
    file_path: Path,
    delimiter: str = CSV_DELIMITER,
    headers: bool = True,
    quote_char: str = '"',
    compute_field5: Callable[[ParsedRow], str] = default_compute_field5,
) -> List[ParsedRow]:
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except OSError as exc:
        raise IngestionError(f"cannot read file: {exc}", path=str(file_path)) from exc
    return parse_csv_text(content, delimiter, headers, quote_char, compute_field5)
