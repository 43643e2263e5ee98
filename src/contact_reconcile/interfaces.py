from __future__ import annotations

from typing import Protocol, Sequence

from contact_reconcile.models import ContactRecord, Verdict


class Normalizer(Protocol):
    """Canonicalize free text for comparison."""

    def __call__(self, text: object | None) -> str:
        ...


class Classifier(Protocol):
    """Step 1: compare a known record with an incoming one."""

    def classify(self, existing: ContactRecord, candidate: ContactRecord) -> Verdict:
        ...


class CandidateLookup(Protocol):
    """Step 2: run-scoped collection of known records keyed by name."""

    def seed(self, records: Sequence[ContactRecord]) -> None:
        ...

    def lookup(self, name: str | None) -> list[ContactRecord]:
        ...

    def append(self, record: ContactRecord) -> None:
        ...


class RecordStore(Protocol):
    """Persistence collaborator holding previously imported records."""

    def seed_all(self) -> list[ContactRecord]:
        ...

    def create_one(self, record: ContactRecord) -> str:
        """Persist ``record`` and return its identifier.

        Raises ``RecordValidationError`` when the record breaks the store schema.
        """
        ...

