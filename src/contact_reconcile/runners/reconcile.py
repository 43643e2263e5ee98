from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from contact_reconcile.errors import RecordValidationError, error_code, error_detail
from contact_reconcile.interfaces import CandidateLookup, Classifier, RecordStore
from contact_reconcile.models import (
    Action,
    ContactRecord,
    ErrorKind,
    Outcome,
    ReconciliationResult,
    Row,
    RowError,
    Verdict,
)
from contact_reconcile.schema import DEFAULT_SCHEMA, FieldTag, RecordSchema
from contact_reconcile.steps.concordance import ConcordanceClassifier
from contact_reconcile.steps.index import CandidateIndex
from contact_reconcile.steps.normalize import normalizer_for

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileSettings:
    """Tunables for a reconciliation run."""

    status_field: str = "status"
    created_status: str = "created"
    to_verify_status: str = "to_verify"
    strict_normalization: bool = False


class Reconciler:
    """Sequential import driver.

    Every run seeds a fresh :class:`CandidateIndex` from the store, then walks
    the rows in order. Exact duplicates are skipped, everything else is
    persisted (tagged for review on a partial match) and appended to the index
    before the next row is looked at.
    """

    def __init__(
        self,
        store: RecordStore,
        schema: RecordSchema = DEFAULT_SCHEMA,
        settings: ReconcileSettings | None = None,
        classifier: Classifier | None = None,
        index_factory: Callable[[], CandidateLookup] | None = None,
    ) -> None:
        self._store = store
        self._schema = schema
        self._settings = settings or ReconcileSettings()
        self._normalize = normalizer_for(self._settings.strict_normalization)
        self._classifier = classifier or ConcordanceClassifier(schema=schema, normalizer=self._normalize)
        self._index_factory = index_factory or (lambda: CandidateIndex(schema=schema, normalizer=self._normalize))

    def reconcile(self, rows: Sequence[Row]) -> ReconciliationResult:
        index = self._index_factory()
        index.seed(self._store.seed_all())

        result = ReconciliationResult()
        for row in rows:
            self._process(row, index, result)

        log.info(
            "Import finished: %d created, %d to verify, %d ignored, %d errors",
            result.created,
            result.to_verify,
            result.ignored,
            result.failed,
        )
        return result

    def _process(self, row: Row, index: CandidateLookup, result: ReconciliationResult) -> None:
        name = self._schema.joined_value(row.record.attributes, FieldTag.NAME)
        if not self._normalize(name):
            self._fail(result, RowError(row.number, "Missing name", ErrorKind.MISSING_NAME.value, ErrorKind.MISSING_NAME))
            return

        candidates = index.lookup(name)

        duplicate = self._first_with_verdict(candidates, row.record, Verdict.EXACT)
        if duplicate is not None:
            log.debug("Row %d duplicates record %s, skipping", row.number, duplicate.record_id)
            result.outcomes.append(Outcome(row.number, Action.IGNORED, duplicate.record_id))
            return

        settings = self._settings
        if self._first_with_verdict(candidates, row.record, Verdict.PARTIAL) is not None:
            action, status = Action.TO_VERIFY, settings.to_verify_status
        else:
            action, status = Action.CREATED, settings.created_status
        record = row.record.with_status(settings.status_field, status)

        try:
            record_id = self._store.create_one(record)
        except RecordValidationError as exc:
            self._fail(
                result,
                RowError(row.number, exc.describe(record.attributes), exc.code, ErrorKind.PERSISTENCE_VALIDATION),
            )
            return
        except Exception as exc:
            self._fail(result, RowError(row.number, error_detail(exc), error_code(exc), ErrorKind.UNKNOWN))
            return

        index.append(record.with_id(record_id))
        result.outcomes.append(Outcome(row.number, action, record_id))

    def _first_with_verdict(
        self,
        candidates: Sequence[ContactRecord],
        record: ContactRecord,
        verdict: Verdict,
    ) -> ContactRecord | None:
        for candidate in candidates:
            if self._classifier.classify(candidate, record) == verdict:
                return candidate
        return None

    @staticmethod
    def _fail(result: ReconciliationResult, error: RowError) -> None:
        log.error("Row %d failed: %s", error.row, error.error)
        result.errors.append(error)
