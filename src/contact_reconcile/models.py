from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class Verdict(StrEnum):
    """Concordance between a known record and an incoming one."""

    EXACT = "EXACT"
    PARTIAL = "PARTIAL"
    NONE = "NONE"


class Action(StrEnum):
    IGNORED = "ignored"
    CREATED = "created"
    TO_VERIFY = "toVerify"


class RowStatus(StrEnum):
    PENDING = "PENDING"
    IGNORED = "IGNORED"
    CREATED = "CREATED"
    TO_VERIFY = "TO_VERIFY"
    FAILED = "FAILED"


class ErrorKind(StrEnum):
    MISSING_NAME = "MISSING_NAME"
    PERSISTENCE_VALIDATION = "PERSISTENCE_VALIDATION"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True, slots=True)
class ContactRecord:
    """Field/value mapping for one contact, optionally carrying its stored id."""

    attributes: dict[str, str]
    record_id: str | None = None

    def get(self, field_name: str, default: str | None = None) -> str | None:
        return self.attributes.get(field_name, default)

    def with_status(self, status_field: str, status: str) -> "ContactRecord":
        return replace(self, attributes={**self.attributes, status_field: status})

    def with_id(self, record_id: str) -> "ContactRecord":
        return replace(self, record_id=record_id)


@dataclass(frozen=True, slots=True)
class Row:
    """A record together with its 1-based position in the source sheet."""

    number: int
    record: ContactRecord


@dataclass(frozen=True, slots=True)
class Outcome:
    row: int
    action: Action
    record_id: str | None

    @property
    def status(self) -> RowStatus:
        return _ACTION_STATUS[self.action]

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "action": self.action.value, "id": self.record_id}


_ACTION_STATUS = {
    Action.IGNORED: RowStatus.IGNORED,
    Action.CREATED: RowStatus.CREATED,
    Action.TO_VERIFY: RowStatus.TO_VERIFY,
}


@dataclass(frozen=True, slots=True)
class RowError:
    """A row that could not be imported."""

    row: int
    error: str
    code: str
    kind: ErrorKind = ErrorKind.UNKNOWN

    @property
    def status(self) -> RowStatus:
        return RowStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "error": self.error, "code": self.code}


@dataclass(slots=True)
class ReconciliationResult:
    outcomes: list[Outcome] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    def _count(self, action: Action) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action is action)

    @property
    def created(self) -> int:
        return self._count(Action.CREATED)

    @property
    def to_verify(self) -> int:
        return self._count(Action.TO_VERIFY)

    @property
    def ignored(self) -> int:
        return self._count(Action.IGNORED)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def processed(self) -> int:
        return len(self.outcomes) + len(self.errors)

    def statuses(self) -> dict[int, RowStatus]:
        by_row: dict[int, RowStatus] = {}
        for outcome in self.outcomes:
            by_row[outcome.row] = outcome.status
        for error in self.errors:
            by_row[error.row] = error.status
        return dict(sorted(by_row.items()))
