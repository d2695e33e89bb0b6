"""RAG status normalization and sort ranking."""

from __future__ import annotations
from typing import Any, Optional

from config.constants import (
    RAG_BUCKETS,
    RAG_UNKNOWN,
    RAG_ALIASES,
    STATUS_SORT_ORDER,
    IMPORTANCE_SORT_ORDER,
    UNSET_SORT_RANK,
)


def normalize_rag_status(value: Any) -> str:
    """Map a free-text status to green/amber/red/error, or 'unknown'.

    Case-insensitive; the legacy 'Yellow' value counts as amber. The
    function is idempotent: normalizing an already-normalized value
    returns it unchanged.
    """
    if value is None:
        return RAG_UNKNOWN

    key = str(value).strip().lower()
    key = RAG_ALIASES.get(key, key)
    if key in RAG_BUCKETS:
        return key
    return RAG_UNKNOWN


def display_rag_status(value: Any) -> Optional[str]:
    """Title-cased status for badges ('Amber' for 'yellow'), None when unknown."""
    normalized = normalize_rag_status(value)
    if normalized == RAG_UNKNOWN:
        return None
    return normalized.capitalize()


def status_rank(value: Any) -> int:
    """Red < Amber < Green < unset."""
    return STATUS_SORT_ORDER.get(normalize_rag_status(value), UNSET_SORT_RANK)


def importance_rank(value: Any) -> int:
    """High < Medium < Low < unset."""
    if value is None:
        return UNSET_SORT_RANK
    return IMPORTANCE_SORT_ORDER.get(str(value).strip().lower(), UNSET_SORT_RANK)


def health_score_band(score: Optional[float]) -> str:
    """Band for the overall health score card: above 5 green, exactly 5 amber, below red."""
    if score is None:
        return RAG_UNKNOWN
    if score > 5:
        return 'green'
    if score == 5:
        return 'amber'
    return 'red'
