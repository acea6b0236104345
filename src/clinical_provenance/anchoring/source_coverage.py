# ============================================================================
# src/clinical_provenance/anchoring/source_coverage.py
# ============================================================================
"""
Source Coverage

Citation bookkeeping for the review screen:
- Anchor counts per source type and a one-line citation summary
- Anchors cited inside a letter section
- Share of clinical statements that have a source anchor nearby
"""

import re
from typing import Dict, List, Optional, Sequence
import logging

from ..config.linking_config import linking_settings
from ..config.thresholds_config import threshold_settings
from ..core.context.enums import SourceType
from ..core.context.source_anchor import SourceAnchor
from ..core.context.summaries import SourceCoverage

logger = logging.getLogger(__name__)


# Statements that must be backed by a source
CLINICAL_STATEMENT_PATTERNS = [
    re.compile(r"LVEF\s+(?:was\s+)?(\d+%)", re.IGNORECASE),
    re.compile(r"BP\s+(\d+/\d+)", re.IGNORECASE),
    re.compile(r"HR\s+(\d+)", re.IGNORECASE),
    re.compile(r"stenosis\s+of\s+(\d+%)", re.IGNORECASE),
    re.compile(r"gradient\s+(?:of\s+)?(\d+\s*mmHg)", re.IGNORECASE),
    re.compile(r"medications?:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"(?:presented|presenting)\s+with\s+([^.]+)", re.IGNORECASE),
]

# Display label per source type, in summary order
SOURCE_LABELS = [
    (SourceType.TRANSCRIPT, "Transcript"),
    (SourceType.DOCUMENT, "Documents"),
    (SourceType.USER_INPUT, "User Input"),
]


def count_anchors_by_type(anchors: Sequence[SourceAnchor]) -> Dict[str, int]:
    """Anchor counts keyed by source type value, plus "total"."""
    counts = {source_type.value: 0 for source_type in SourceType}
    for anchor in anchors:
        counts[anchor.source_type.value] += 1
    counts["total"] = len(anchors)
    return counts


def generate_source_summary(anchors: Sequence[SourceAnchor]) -> str:
    """
    e.g. "Sources used: Transcript (5 citations), Documents (1 citation)"
    """
    counts = count_anchors_by_type(anchors)

    parts = []
    for source_type, label in SOURCE_LABELS:
        count = counts[source_type.value]
        if count > 0:
            parts.append(f"{label} ({count} citation{'s' if count > 1 else ''})")

    if not parts:
        return "No sources cited"
    return f"Sources used: {', '.join(parts)}"


def get_anchors_for_section(
    section_text: str,
    anchors: Sequence[SourceAnchor]
) -> List[SourceAnchor]:
    """Anchors whose marker text appears in the given letter section."""
    return [a for a in anchors if a.segment_text and a.segment_text in section_text]


def _is_near(anchor: SourceAnchor, start: int, end: int, window: int) -> bool:
    return abs(anchor.start_index - start) < window or abs(anchor.end_index - end) < window


def validate_clinical_sources(
    letter_text: str,
    anchors: Sequence[SourceAnchor],
    proximity_window: Optional[int] = None,
) -> SourceCoverage:
    """
    Check that clinical statements in the letter have a nearby source anchor.

    Args:
        letter_text: Letter text (with or without markers)
        anchors: Anchors located in that text
        proximity_window: Character distance counted as "nearby"

    Returns:
        SourceCoverage; coverage is 100 when the letter has no clinical
        statements, and is_valid requires SOURCE_COVERAGE_THRESHOLD
    """
    window = linking_settings.ANCHOR_PROXIMITY_WINDOW if proximity_window is None else proximity_window

    unsourced = []
    total = 0
    sourced = 0

    for pattern in CLINICAL_STATEMENT_PATTERNS:
        for match in pattern.finditer(letter_text):
            total += 1
            if any(_is_near(a, match.start(), match.end(), window) for a in anchors):
                sourced += 1
            else:
                unsourced.append(match.group(0))

    coverage = (sourced / total) * 100 if total > 0 else 100.0

    logger.info(
        f"Clinical source validation: {sourced}/{total} statements sourced "
        f"({coverage:.1f}% coverage)"
    )

    return SourceCoverage(
        is_valid=coverage >= threshold_settings.SOURCE_COVERAGE_THRESHOLD,
        unsourced_statements=unsourced,
        coverage=coverage,
        total_statements=total,
        sourced_statements=sourced,
    )
