from __future__ import annotations

from collections.abc import Mapping

from contact_reconcile.interfaces import Normalizer
from contact_reconcile.models import ContactRecord, Verdict
from contact_reconcile.schema import DEFAULT_SCHEMA, FieldTag, RecordSchema
from contact_reconcile.steps.normalize import normalize


class ConcordanceClassifier:
    """Rule-based classifier: name gate, then address and postal code evidence.

    Name agreement is required for any match. With it, an overlapping address
    *and* an equal postal code make the pair ``EXACT``; either one alone makes
    it ``PARTIAL``. Blank fields never count as agreement.
    """

    def __init__(
        self,
        schema: RecordSchema = DEFAULT_SCHEMA,
        normalizer: Normalizer = normalize,
    ) -> None:
        self._schema = schema
        self._normalize = normalizer

    def name_key(self, attributes: Mapping[str, object]) -> str:
        return self._normalize(self._schema.joined_value(attributes, FieldTag.NAME))

    def classify(self, existing: ContactRecord, candidate: ContactRecord) -> Verdict:
        if self.name_key(existing.attributes) != self.name_key(candidate.attributes):
            return Verdict.NONE

        address_match = bool(self._addresses(existing) & self._addresses(candidate))
        postal_match = self._postal_match(existing, candidate)

        if address_match and postal_match:
            return Verdict.EXACT
        if address_match or postal_match:
            return Verdict.PARTIAL
        return Verdict.NONE

    def _addresses(self, record: ContactRecord) -> set[str]:
        normalized = (self._normalize(value) for value in self._schema.values_for(record.attributes, FieldTag.ADDRESS))
        return {value for value in normalized if value}

    def _postal_match(self, existing: ContactRecord, candidate: ContactRecord) -> bool:
        left = self._normalize(self._schema.joined_value(existing.attributes, FieldTag.POSTCODE))
        right = self._normalize(self._schema.joined_value(candidate.attributes, FieldTag.POSTCODE))
        return bool(left) and left == right


_DEFAULT_CLASSIFIER = ConcordanceClassifier()


def classify(existing: ContactRecord, candidate: ContactRecord) -> Verdict:
    return _DEFAULT_CLASSIFIER.classify(existing, candidate)
