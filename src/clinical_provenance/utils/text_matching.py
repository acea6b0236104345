# ============================================================================
# src/clinical_provenance/utils/text_matching.py
# ============================================================================
"""
Text Matching Utilities

Case-insensitive helpers shared by anchor linking, anchor verification and
hallucination checks:
- Locating every occurrence of a segment in letter text
- Word-level excerpt similarity against source material
"""

import re
from typing import List, Tuple

# Words at or below this length are ignored by word_similarity
MIN_SIMILARITY_WORD_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")


def find_occurrences(text: str, segment: str) -> List[Tuple[int, int]]:
    """
    Find every (start, end) span where segment occurs in text.

    Matching is case-insensitive and non-overlapping. An empty or
    whitespace-only segment never matches.
    """
    if not text or not segment or not segment.strip():
        return []

    pattern = re.compile(re.escape(segment), re.IGNORECASE)
    return [(m.start(), m.end()) for m in pattern.finditer(text)]


def contains_text(haystack: str, needle: str) -> bool:
    """Case-insensitive containment; empty needles never match."""
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


def word_similarity(full_text: str, excerpt: str) -> float:
    """
    Score how much of an excerpt appears in a source text.

    Returns 1.0 when the excerpt is a substring of the text, otherwise the
    fraction of excerpt words longer than MIN_SIMILARITY_WORD_LENGTH that
    appear somewhere in the text. 0.0 when there are no such words.
    """
    full_lower = full_text.lower()
    excerpt_lower = excerpt.lower().strip()

    if excerpt_lower and excerpt_lower in full_lower:
        return 1.0

    words = [
        w for w in _WHITESPACE.split(excerpt_lower)
        if len(w) > MIN_SIMILARITY_WORD_LENGTH
    ]
    if not words:
        return 0.0

    matched = sum(1 for w in words if w in full_lower)
    return matched / len(words)


def span_distance(position: int, start: int, end: int) -> int:
    """
    Distance from a character position to the span [start, end).

    Zero when the position falls inside the span, otherwise the distance
    to the nearer edge.
    """
    if start <= position < end:
        return 0
    return min(abs(start - position), abs(end - position))
