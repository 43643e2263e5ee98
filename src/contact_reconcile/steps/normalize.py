from __future__ import annotations

import re

from contact_reconcile.interfaces import Normalizer

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[,.\-'’]")


def normalize(text: object | None) -> str:
    """Trim, lower-case and collapse whitespace. ``None`` and blanks give ``""``."""
    if text is None:
        return ""
    return _WHITESPACE.sub(" ", str(text)).strip().lower()


def normalize_strict(text: object | None) -> str:
    """Like :func:`normalize`, but commas, periods, hyphens and apostrophes count as spaces."""
    if text is None:
        return ""
    return normalize(_PUNCTUATION.sub(" ", str(text)))


def normalizer_for(strict: bool) -> Normalizer:
    return normalize_strict if strict else normalize
