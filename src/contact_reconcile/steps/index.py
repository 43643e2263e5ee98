from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from contact_reconcile.errors import IndexStateError
from contact_reconcile.interfaces import Normalizer
from contact_reconcile.models import ContactRecord
from contact_reconcile.schema import DEFAULT_SCHEMA, FieldTag, RecordSchema
from contact_reconcile.steps.normalize import normalize


class CandidateIndex:
    """Run-scoped, append-only index of known records keyed by normalized name.

    Seeded once from the store, then extended with every record created during
    the run so later rows see earlier ones. Lookups return records in insertion
    order, seeded records first.
    """

    def __init__(
        self,
        schema: RecordSchema = DEFAULT_SCHEMA,
        normalizer: Normalizer = normalize,
    ) -> None:
        self._schema = schema
        self._normalize = normalizer
        self._buckets: dict[str, list[ContactRecord]] = defaultdict(list)
        self._size = 0
        self._seeded = False

    def __len__(self) -> int:
        return self._size

    @property
    def seeded(self) -> bool:
        return self._seeded

    def seed(self, records: Sequence[ContactRecord]) -> None:
        if self._seeded:
            raise IndexStateError("Candidate index has already been seeded")
        self._seeded = True
        for record in records:
            self._add(record)

    def lookup(self, name: str | None) -> list[ContactRecord]:
        key = self._normalize(name)
        if not key:
            return []
        return list(self._buckets.get(key, ()))

    def append(self, record: ContactRecord) -> None:
        if not self._seeded:
            raise IndexStateError("Candidate index must be seeded before records are appended")
        self._add(record)

    def _add(self, record: ContactRecord) -> None:
        self._size += 1
        key = self._normalize(self._schema.joined_value(record.attributes, FieldTag.NAME))
        if key:
            self._buckets[key].append(record)
