from contact_reconcile.errors import FieldViolation, RecordValidationError
from contact_reconcile.models import Action, ContactRecord, ErrorKind, Row, RowStatus
from contact_reconcile.runners import ReconcileSettings, Reconciler
from contact_reconcile.stores import InMemoryRecordStore


def _row(number: int, **attributes: str) -> Row:
    return Row(number=number, record=ContactRecord(attributes=dict(attributes)))


class _FlakyStore(InMemoryRecordStore):
    """Fails with a plain exception for one specific name."""

    def __init__(self, failing_name: str) -> None:
        super().__init__()
        self._failing_name = failing_name

    def create_one(self, record: ContactRecord) -> str:
        if record.get("name") == self._failing_name:
            raise ConnectionError("store unavailable")
        return super().create_one(record)


def test_within_batch_duplicates_are_seen_immediately() -> None:
    store = InMemoryRecordStore()
    rows = [
        _row(1, name="Jean Dupont", address="12 Rue de Paris", postal_code="75001"),
        _row(2, name="jean dupont", address="12 rue de paris", postal_code="75001"),
        _row(3, name="Jean Dupont", address="5 Avenue Victor Hugo", postal_code="75001"),
    ]

    result = Reconciler(store).reconcile(rows)

    assert [o.action for o in result.outcomes] == [Action.CREATED, Action.IGNORED, Action.TO_VERIFY]
    first_id = result.outcomes[0].record_id
    assert result.outcomes[1].record_id == first_id
    assert (result.created, result.ignored, result.to_verify, result.failed) == (1, 1, 1, 0)

    stored = store.records
    assert len(stored) == 2
    assert stored[0].attributes["status"] == "created"
    assert stored[1].attributes["status"] == "to_verify"


def test_exact_match_wins_over_earlier_partial_candidate() -> None:
    store = InMemoryRecordStore(
        [
            ContactRecord({"name": "Jean Dupont", "address": "5 Avenue Victor Hugo", "postal_code": "75001"}, "p1"),
            ContactRecord({"name": "Jean Dupont", "address": "12 Rue de Paris", "postal_code": "75001"}, "p2"),
        ]
    )
    rows = [_row(1, name="Jean Dupont", address="12 Rue de Paris", postal_code="75001")]

    result = Reconciler(store).reconcile(rows)

    assert result.outcomes[0].action is Action.IGNORED
    assert result.outcomes[0].record_id == "p2"
    assert len(store.records) == 2


def test_missing_name_is_rejected_and_not_counted() -> None:
    store = InMemoryRecordStore()
    rows = [
        _row(1, address="12 Rue de Paris", postal_code="75001"),
        _row(2, name="   ", postal_code="75001"),
        _row(3, name="Marie Curie"),
    ]

    result = Reconciler(store).reconcile(rows)

    assert [(e.row, e.kind) for e in result.errors] == [(1, ErrorKind.MISSING_NAME), (2, ErrorKind.MISSING_NAME)]
    assert result.errors[0].code == "MISSING_NAME"
    assert (result.created, result.ignored, result.to_verify, result.failed) == (1, 0, 0, 2)
    assert len(store.records) == 1


def test_validation_failures_do_not_abort_the_batch() -> None:
    store = InMemoryRecordStore(required_fields=["postal_code"])
    rows = [
        _row(1, name="Jean Dupont", address="12 Rue de Paris"),
        _row(2, name="Marie Curie", postal_code="75005"),
    ]

    result = Reconciler(store).reconcile(rows)

    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.row == 1
    assert error.kind is ErrorKind.PERSISTENCE_VALIDATION
    assert error.code == "FAILED_VALIDATION"
    assert error.error == 'Field "postal_code": required (FAILED_VALIDATION)'
    assert [o.row for o in result.outcomes] == [2]


def test_failed_rows_are_not_added_to_the_index() -> None:
    store = _FlakyStore(failing_name="Jean Dupont")
    rows = [
        _row(1, name="Jean Dupont", address="12 Rue de Paris", postal_code="75001"),
        _row(2, name="Marie Curie", address="12 Rue de Paris", postal_code="75001"),
    ]

    result = Reconciler(store).reconcile(rows)

    assert result.errors[0].kind is ErrorKind.UNKNOWN
    assert result.errors[0].code == "UNKNOWN"
    assert result.errors[0].error == "store unavailable"
    assert result.statuses() == {1: RowStatus.FAILED, 2: RowStatus.CREATED}


def test_validation_detail_includes_offending_value() -> None:
    error = RecordValidationError([FieldViolation(field="email", type="format", code="INVALID_EMAIL")])

    assert error.describe({"email": "nope"}) == 'Field "email": format (INVALID_EMAIL) | value: "nope"'
    assert error.code == "INVALID_EMAIL"


def test_settings_control_status_labels_and_normalization() -> None:
    store = InMemoryRecordStore([ContactRecord({"name": "Sean O'Brien", "postal_code": "D02"}, "p1")])
    settings = ReconcileSettings(
        status_field="statut",
        created_status="Fiche créée",
        to_verify_status="Fiche à vérifier",
        strict_normalization=True,
    )
    rows = [_row(1, name="Sean O Brien", postal_code="d02"), _row(2, name="Ada Lovelace")]

    result = Reconciler(store, settings=settings).reconcile(rows)

    assert [o.action for o in result.outcomes] == [Action.TO_VERIFY, Action.CREATED]
    assert [r.attributes.get("statut") for r in store.records[1:]] == ["Fiche à vérifier", "Fiche créée"]


def test_each_run_builds_a_fresh_index() -> None:
    store = InMemoryRecordStore()
    reconciler = Reconciler(store)
    row = _row(1, name="Jean Dupont", address="12 Rue de Paris", postal_code="75001")

    first = reconciler.reconcile([row])
    second = reconciler.reconcile([row])

    assert first.outcomes[0].action is Action.CREATED
    assert second.outcomes[0].action is Action.IGNORED
    assert second.outcomes[0].record_id == first.outcomes[0].record_id


def test_created_ids_never_collide_with_seeded_ids() -> None:
    store = InMemoryRecordStore([ContactRecord({"name": "Ada Lovelace"}, "rec_0000002")])

    result = Reconciler(store).reconcile([_row(1, name="Grace Hopper"), _row(2, name="Alan Turing")])

    ids = [record.record_id for record in store.records]
    assert len(set(ids)) == len(ids) == 3
    assert [o.record_id for o in result.outcomes] == ["rec_0000003", "rec_0000004"]
