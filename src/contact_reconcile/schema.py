from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Sequence


class FieldTag(StrEnum):
    ADDRESS = "ADDRESS"
    NAME = "NAME"
    POSTCODE = "POSTCODE"


@dataclass(frozen=True)
class RecordSchema:
    """Maps semantic tags to the record fields that carry them."""

    tag_to_fields: Mapping[FieldTag, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[FieldTag, Sequence[str]]) -> "RecordSchema":
        frozen = {FieldTag(tag): tuple(fields) for tag, fields in mapping.items()}
        return cls(tag_to_fields=frozen)

    def fields_for(self, tag: FieldTag) -> tuple[str, ...]:
        return self.tag_to_fields.get(tag, ())

    def values_for(self, attributes: Mapping[str, object], tag: FieldTag) -> list[str]:
        values: list[str] = []
        for field in self.fields_for(tag):
            value = attributes.get(field)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                values.append(text)
        return values

    def joined_value(self, attributes: Mapping[str, object], tag: FieldTag, sep: str = " ") -> str:
        return sep.join(self.values_for(attributes, tag)).strip()


DEFAULT_SCHEMA = RecordSchema.from_mapping(
    {
        FieldTag.NAME: ["name"],
        FieldTag.ADDRESS: ["address", "address_secondary"],
        FieldTag.POSTCODE: ["postal_code"],
    }
)
