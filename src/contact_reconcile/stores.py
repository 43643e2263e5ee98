from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from contact_reconcile.errors import FieldViolation, RecordValidationError
from contact_reconcile.models import ContactRecord

log = logging.getLogger(__name__)

RECORD_ID_COLUMN = "RECORD_ID"


class InMemoryRecordStore:
    """Reference record store keeping everything in a list.

    ``required_fields`` are checked on :meth:`create_one`; a record missing any
    of them is rejected with a :class:`RecordValidationError`.
    """

    def __init__(
        self,
        records: Iterable[ContactRecord] = (),
        required_fields: Sequence[str] = (),
        id_prefix: str = "rec_",
    ) -> None:
        self._records: list[ContactRecord] = list(records)
        self._required_fields = tuple(required_fields)
        self._id_prefix = id_prefix
        self._next_id = _next_numeric_id(self._records, id_prefix)

    @property
    def records(self) -> list[ContactRecord]:
        return list(self._records)

    def seed_all(self) -> list[ContactRecord]:
        return list(self._records)

    def create_one(self, record: ContactRecord) -> str:
        self.validate(record)
        record_id = f"{self._id_prefix}{self._next_id:07d}"
        self._next_id += 1
        self._records.append(record.with_id(record_id))
        return record_id

    def validate(self, record: ContactRecord) -> None:
        violations = [
            FieldViolation(field=name, type="required", code="FAILED_VALIDATION")
            for name in self._required_fields
            if not str(record.attributes.get(name) or "").strip()
        ]
        if violations:
            raise RecordValidationError(violations)


class CsvRecordStore(InMemoryRecordStore):
    """Record store backed by a CSV file with a ``RECORD_ID`` column.

    Created records are buffered in memory until :meth:`save` is called.
    """

    def __init__(self, path: Path, required_fields: Sequence[str] = (), id_prefix: str = "rec_") -> None:
        self.path = path
        super().__init__(_read_records_csv(path), required_fields=required_fields, id_prefix=id_prefix)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        columns: list[str] = []
        for record in self._records:
            for column in record.attributes:
                if column not in columns:
                    columns.append(column)

        with self.path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=[RECORD_ID_COLUMN, *columns])
            writer.writeheader()
            for record in self._records:
                writer.writerow({RECORD_ID_COLUMN: record.record_id, **record.attributes})
        log.info("Saved %d records to %s", len(self._records), self.path)


def _read_records_csv(path: Path) -> list[ContactRecord]:
    if not path.exists():
        return []
    records: list[ContactRecord] = []
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            record_id = row.get(RECORD_ID_COLUMN)
            if not record_id:
                continue
            attrs = {k: v for k, v in row.items() if k != RECORD_ID_COLUMN and k is not None and v}
            records.append(ContactRecord(attributes=attrs, record_id=record_id))
    log.info("Loaded %d records from %s", len(records), path)
    return records


def _next_numeric_id(records: Sequence[ContactRecord], prefix: str) -> int:
    highest = 0
    for record in records:
        suffix = (record.record_id or "").removeprefix(prefix)
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return max(highest, len(records)) + 1
