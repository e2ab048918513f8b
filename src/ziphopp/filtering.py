"""Fuzzy filtering of archive entry labels."""

from __future__ import annotations

from collections.abc import Sequence

from rapidfuzz import fuzz

FUZZY_SCORE_CUTOFF = 60  # Minimum score (0-100) to keep an entry


def filter_entries(entries: Sequence[str], query: str) -> list[str]:
    """Return entries matching ``query``, best matches first.

    An empty query keeps every entry in archive order. Ties keep archive
    order too, so directories stay next to their files.
    """
    query_lower = query.strip().lower()
    if not query_lower:
        return list(entries)

    scored: list[tuple[float, int, str]] = []
    for index, entry in enumerate(entries):
        score = fuzz.partial_ratio(query_lower, entry.lower())
        if score >= FUZZY_SCORE_CUTOFF:
            scored.append((score, index, entry))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [entry for _, _, entry in scored]


__all__ = [
    "FUZZY_SCORE_CUTOFF",
    "filter_entries",
]
