"""Exceptions raised by the import pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

DEFAULT_ERROR_CODE = "UNKNOWN"


class ReconcileError(Exception):
    """Base class for contact-reconcile errors."""


class IndexStateError(ReconcileError):
    """Raised when the candidate index is used out of order."""


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single field-level rejection reported by a record store."""

    field: str
    type: str = "validation"
    code: str = "FAILED_VALIDATION"


class RecordValidationError(ReconcileError):
    """Raised by a record store when a record breaks its schema."""

    def __init__(self, violations: Sequence[FieldViolation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(f"{v.field}: {v.type} ({v.code})" for v in self.violations) or "Validation failed")

    @property
    def code(self) -> str:
        if self.violations:
            return self.violations[0].code
        return DEFAULT_ERROR_CODE

    def describe(self, attributes: Mapping[str, str] | None = None) -> str:
        attributes = attributes or {}
        parts: list[str] = []
        for violation in self.violations:
            text = f'Field "{violation.field}": {violation.type} ({violation.code})'
            value = attributes.get(violation.field)
            if value is not None:
                text += f' | value: "{value}"'
            parts.append(text)
        return "; ".join(parts) or "Validation failed"


def error_code(error: BaseException) -> str:
    """Return the ``code`` carried by an exception, if any."""

    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code
    return DEFAULT_ERROR_CODE


def error_detail(error: BaseException) -> str:
    return str(error) or type(error).__name__


class ImportRequestError(ReconcileError):
    """Precondition failure that aborts an import before any row is processed.

    ``message_key`` names the localized message reported back to the caller.
    """

    message_key = "internalError"
    code = "BAD_REQUEST"


class MissingFileError(ImportRequestError):
    message_key = "missingFile"
    code = "MISSING_FILE"


class MissingMappingError(ImportRequestError):
    message_key = "missingMapping"
    code = "MISSING_MAPPING"


class InvalidMappingError(ImportRequestError):
    message_key = "invalidMapping"
    code = "INVALID_MAPPING"


class UnsupportedFileError(ImportRequestError):
    message_key = "unsupportedFile"
    code = "UNSUPPORTED_FILE"


class EmptyFileError(ImportRequestError):
    message_key = "emptyFile"
    code = "EMPTY_FILE"


class NoValidItemsError(ImportRequestError):
    message_key = "noValidItems"
    code = "NO_VALID_ITEMS"
