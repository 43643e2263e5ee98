"""Localized summaries of a reconciliation run."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from contact_reconcile.models import ErrorKind, ReconciliationResult, RowError

DEFAULT_LOCALE = "en-US"

STATUS_OK = 200
STATUS_MULTI_STATUS = 207
STATUS_BAD_REQUEST = 400
STATUS_INTERNAL_ERROR = 500

MESSAGES: dict[str, dict[str, str]] = {
    "en-US": {
        "missingFile": "Missing Excel file.",
        "missingMapping": "Missing mapping.",
        "invalidMapping": "Invalid mapping: {error}",
        "unsupportedFile": "Unsupported file format: {error}",
        "emptyFile": "Empty Excel file.",
        "noValidItems": "No valid items to import. Check your mapping.",
        "missingName": "Missing name",
        "internalError": "Internal error during Excel import: {error}",
        "processedItemsPrefix": "items processed:",
        "created": "created",
        "toVerify": "to verify",
        "ignored": "ignored",
        "failed": "errors",
        "none": "no changes",
    },
    "fr-FR": {
        "missingFile": "Fichier Excel manquant.",
        "missingMapping": "Mapping manquant.",
        "invalidMapping": "Mapping invalide : {error}",
        "unsupportedFile": "Format de fichier non pris en charge : {error}",
        "emptyFile": "Fichier Excel vide.",
        "noValidItems": "Aucun élément valide à importer. Vérifiez le mapping.",
        "missingName": "Nom manquant",
        "internalError": "Erreur interne lors de l'import Excel : {error}",
        "processedItemsPrefix": "éléments traités :",
        "created": "Fiches créées",
        "toVerify": "Fiches à vérifier",
        "ignored": "Ignorées",
        "failed": "erreurs",
        "none": "aucun changement",
    },
    "tr-TR": {
        "missingFile": "Excel dosyası eksik.",
        "missingMapping": "Eşleştirme eksik.",
        "invalidMapping": "Geçersiz eşleştirme: {error}",
        "unsupportedFile": "Desteklenmeyen dosya biçimi: {error}",
        "emptyFile": "Excel dosyası boş.",
        "noValidItems": "İçe aktarılacak geçerli öğe yok. Eşleştirmeyi kontrol edin.",
        "missingName": "Ad eksik",
        "internalError": "Excel içe aktarımı sırasında dahili hata: {error}",
        "processedItemsPrefix": "işlenen öğeler:",
        "created": "oluşturuldu",
        "toVerify": "doğrulanacak",
        "ignored": "yoksayıldı",
        "failed": "hatalar",
        "none": "değişiklik yok",
    },
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def resolve_locale(accept_language: str | None) -> str:
    """Pick the catalog for the first entry of an ``Accept-Language`` value."""
    if not accept_language:
        return DEFAULT_LOCALE
    first = accept_language.split(",")[0].split(";")[0].strip()
    return first if first in MESSAGES else DEFAULT_LOCALE


def messages_for(locale: str | None) -> Mapping[str, str]:
    return MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES[DEFAULT_LOCALE])


def format_message(template: str, params: Mapping[str, object]) -> str:
    """Fill ``{name}`` placeholders; unknown or empty names become ``""``."""
    return _PLACEHOLDER.sub(lambda match: str(params.get(match.group(1)) or ""), template)


@dataclass(slots=True)
class ImportReport:
    """Final response for one import: a status code and a JSON-ready body."""

    status_code: int
    message: str
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code in (STATUS_OK, STATUS_MULTI_STATUS)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.body}


class LocalizedReporter:
    """Summarize a :class:`ReconciliationResult` in one of the message catalogs.

    ``locale`` may be a catalog key or a raw ``Accept-Language`` value.
    """

    def __init__(self, locale: str | None = DEFAULT_LOCALE) -> None:
        self.locale = resolve_locale(locale)
        self._messages = messages_for(self.locale)

    def summary(self, result: ReconciliationResult) -> str:
        messages = self._messages
        counts = (
            (result.created, "created"),
            (result.to_verify, "toVerify"),
            (result.ignored, "ignored"),
            (result.failed, "failed"),
        )
        parts = [f"{count} {messages[key]}" for count, key in counts if count > 0]
        summary = ", ".join(parts) if parts else messages["none"]
        return f"{result.processed} {messages['processedItemsPrefix']} {summary}."

    def report(self, result: ReconciliationResult) -> ImportReport:
        return ImportReport(
            status_code=STATUS_MULTI_STATUS if result.errors else STATUS_OK,
            message=self.summary(result),
            body={
                "created": result.created,
                "toVerify": result.to_verify,
                "ignored": result.ignored,
                "failed": [self._error_dict(error) for error in result.errors],
                "results": [outcome.to_dict() for outcome in result.outcomes],
            },
        )

    def _error_dict(self, error: RowError) -> dict[str, Any]:
        payload = error.to_dict()
        if error.kind is ErrorKind.MISSING_NAME:
            payload["error"] = self._messages["missingName"]
        return payload

    def failure(self, message_key: str, status_code: int, error: str = "", code: str | None = None) -> ImportReport:
        template = self._messages.get(message_key, self._messages["internalError"])
        body: dict[str, Any] = {}
        if code:
            body["code"] = code
        return ImportReport(status_code=status_code, message=format_message(template, {"error": error}), body=body)
