"""Turn spreadsheet rows into :class:`Row` objects via a column mapping.

The mapping links 0-based column indexes to record field names, e.g.
``{"0": "name", "2": "address", "3": "postal_code"}``. Columns mapped to an
empty field name are ignored. Row numbers are 1-based sheet positions.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from openpyxl import load_workbook

from contact_reconcile.errors import InvalidMappingError, UnsupportedFileError
from contact_reconcile.models import ContactRecord, Row

log = logging.getLogger(__name__)

_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def parse_mapping(raw: str | Mapping[object, object]) -> dict[int, str]:
    """Parse a column-index to field-name mapping from JSON text or a mapping."""
    if isinstance(raw, Mapping):
        payload: object = raw
    else:
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidMappingError(f"Mapping is not valid JSON: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise InvalidMappingError("Mapping must be a JSON object of column index to field name")

    mapping: dict[int, str] = {}
    for column, field_name in payload.items():
        try:
            index = int(str(column))
        except ValueError as exc:
            raise InvalidMappingError(f"Column index {column!r} is not an integer") from exc
        if index < 0:
            raise InvalidMappingError(f"Column index {index} is negative")
        if field_name is None or field_name == "":
            continue
        if not isinstance(field_name, str):
            raise InvalidMappingError(f"Field name for column {index} must be a string")
        mapping[index] = field_name
    return mapping


def read_sheet(source: Path | bytes, filename: str | None = None) -> list[tuple[object, ...]]:
    """Return raw cell values of the first sheet of an Excel workbook or a CSV file."""
    suffix = Path(filename or (source if isinstance(source, Path) else "upload.xlsx")).suffix.lower()
    if suffix == ".csv":
        return _read_csv(source)
    if suffix in _EXCEL_SUFFIXES:
        return _read_workbook(source)
    raise UnsupportedFileError(suffix or "<none>")


def rows_from_cells(
    cells: Iterable[Sequence[object]],
    mapping: Mapping[int, str],
    header_rows: int = 0,
) -> list[Row]:
    """Apply ``mapping`` to raw sheet rows, dropping rows without any mapped value."""
    rows: list[Row] = []
    for number, cell_row in enumerate(cells, start=1):
        if number <= header_rows:
            continue
        attributes: dict[str, str] = {}
        for column, field_name in mapping.items():
            if column >= len(cell_row):
                continue
            value = cell_row[column]
            text = _cell_text(value)
            if text:
                attributes[field_name] = text
        if attributes:
            rows.append(Row(number=number, record=ContactRecord(attributes=attributes)))
    return rows


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _read_workbook(source: Path | bytes) -> list[tuple[object, ...]]:
    handle = io.BytesIO(source) if isinstance(source, bytes) else source
    workbook = load_workbook(handle, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        log.debug("Reading sheet %s", sheet.title)
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_csv(source: Path | bytes) -> list[tuple[object, ...]]:
    if isinstance(source, bytes):
        text = source.decode("utf-8-sig")
    else:
        text = source.read_text(encoding="utf-8-sig")
    return [tuple(row) for row in csv.reader(io.StringIO(text))]
