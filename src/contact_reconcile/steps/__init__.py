from contact_reconcile.steps.concordance import ConcordanceClassifier, classify
from contact_reconcile.steps.index import CandidateIndex
from contact_reconcile.steps.normalize import normalize, normalize_strict, normalizer_for

__all__ = [
    "ConcordanceClassifier",
    "classify",
    "CandidateIndex",
    "normalize",
    "normalize_strict",
    "normalizer_for",
]
