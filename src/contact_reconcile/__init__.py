"""Spreadsheet contact import with duplicate reconciliation."""

from contact_reconcile.models import Action, ContactRecord, Outcome, ReconciliationResult, Row, RowError, Verdict
from contact_reconcile.schema import DEFAULT_SCHEMA, FieldTag, RecordSchema

__all__ = [
    "Action",
    "ContactRecord",
    "Outcome",
    "ReconciliationResult",
    "Row",
    "RowError",
    "Verdict",
    "DEFAULT_SCHEMA",
    "FieldTag",
    "RecordSchema",
]
