from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from contact_reconcile.errors import (
    EmptyFileError,
    ImportRequestError,
    MissingFileError,
    MissingMappingError,
    NoValidItemsError,
    error_code,
    error_detail,
)
from contact_reconcile.interfaces import RecordStore
from contact_reconcile.reporting import (
    STATUS_BAD_REQUEST,
    STATUS_INTERNAL_ERROR,
    ImportReport,
    LocalizedReporter,
)
from contact_reconcile.runners.reconcile import ReconcileSettings, Reconciler
from contact_reconcile.schema import DEFAULT_SCHEMA, RecordSchema
from contact_reconcile.sources.spreadsheet import parse_mapping, read_sheet, rows_from_cells

log = logging.getLogger(__name__)


def import_spreadsheet(
    *,
    source: Path | bytes | None,
    mapping: str | Mapping[object, object] | None,
    store: RecordStore,
    filename: str | None = None,
    locale: str | None = None,
    header_rows: int = 0,
    schema: RecordSchema = DEFAULT_SCHEMA,
    settings: ReconcileSettings | None = None,
) -> ImportReport:
    """Import one uploaded spreadsheet into ``store`` and summarize the outcome.

    Request-level problems (no file, bad mapping, nothing to import) abort
    before any row is reconciled and produce a 400 report. Row-level failures
    are part of a normal 207 report.
    """

    reporter = LocalizedReporter(locale)
    try:
        if source is None or (isinstance(source, bytes) and not source):
            raise MissingFileError("No file supplied")
        if not mapping:
            raise MissingMappingError("No mapping supplied")

        column_mapping = parse_mapping(mapping)
        cells = read_sheet(source, filename=filename)
        if not cells:
            raise EmptyFileError("Sheet has no rows")

        rows = rows_from_cells(cells, column_mapping, header_rows=header_rows)
        if not rows:
            raise NoValidItemsError("No row has a mapped value")

        log.info("Reconciling %d rows", len(rows))
        result = Reconciler(store, schema=schema, settings=settings).reconcile(rows)
        return reporter.report(result)
    except ImportRequestError as exc:
        log.warning("Import rejected: %s", exc)
        return reporter.failure(exc.message_key, STATUS_BAD_REQUEST, error=str(exc), code=exc.code)
    except Exception as exc:
        detail = error_detail(exc)
        log.exception("Unexpected error during import: %s", detail)
        return reporter.failure("internalError", STATUS_INTERNAL_ERROR, error=detail, code=error_code(exc))
