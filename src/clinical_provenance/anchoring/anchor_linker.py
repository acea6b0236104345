# ============================================================================
# src/clinical_provenance/anchoring/anchor_linker.py
# ============================================================================
"""
Source Anchor Linker

Attaches each extracted value to the nearest source anchor within a bounded
proximity window. A value with no anchor close enough stays unlinked; links
are never guessed across larger distances.
"""

from dataclasses import replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import logging

from ..config.linking_config import linking_settings
from ..core.context.clinical_value import ClinicalValue
from ..core.context.source_anchor import SourceAnchor
from ..utils.exceptions import MalformedAnchorError
from ..utils.text_matching import find_occurrences, span_distance

logger = logging.getLogger(__name__)


def coerce_anchors(anchors: Optional[Iterable[Any]]) -> List[SourceAnchor]:
    """
    Normalize caller-supplied anchors into SourceAnchor objects.

    Accepts None, SourceAnchor instances and JSON-like mappings. Entries that
    cannot be read are skipped with a warning.
    """
    if not anchors:
        return []

    coerced = []
    for index, raw in enumerate(anchors):
        if isinstance(raw, SourceAnchor):
            coerced.append(raw)
            continue
        try:
            coerced.append(SourceAnchor.from_dict(raw))
        except MalformedAnchorError as e:
            logger.warning(f"Skipping source anchor #{index}: {e}")

    return coerced


def anchor_spans(anchor: SourceAnchor, letter_text: Optional[str] = None) -> List[Tuple[int, int]]:
    """
    Where an anchor sits in the letter.

    With letter text, every case-insensitive occurrence of the anchor's
    segment text, or no span at all when the segment does not occur; the
    anchor's offsets index the source material and are never compared with
    letter positions. Without letter text the anchor's own offsets are used.
    """
    if letter_text is not None:
        return find_occurrences(letter_text, anchor.segment_text)
    return [(anchor.start_index, anchor.end_index)]


def link_anchor(
    position: int,
    anchors: Sequence[SourceAnchor],
    letter_text: Optional[str] = None,
    proximity_window: Optional[int] = None,
) -> Optional[str]:
    """
    Id of the anchor nearest to a letter position, or None.

    Args:
        position: Character offset of the value in the letter
        anchors: Candidate anchors, in caller order
        letter_text: Letter text used to locate anchor segments
        proximity_window: Maximum distance; configured default when omitted

    Equal distances keep the earlier anchor. Anchors whose segment does not
    occur in letter_text are never linked.
    """
    window = linking_settings.ANCHOR_PROXIMITY_WINDOW if proximity_window is None else proximity_window

    best_id = None
    best_distance = None

    for anchor in anchors:
        spans = anchor_spans(anchor, letter_text)
        if not spans:
            continue

        distance = min(span_distance(position, start, end) for start, end in spans)
        if best_distance is None or distance < best_distance:
            best_id = anchor.id
            best_distance = distance

    if best_distance is None or best_distance > window:
        return None
    return best_id


def link_values(
    values: Sequence[ClinicalValue],
    anchors: Optional[Iterable[Any]],
    letter_text: Optional[str] = None,
    proximity_window: Optional[int] = None,
) -> List[ClinicalValue]:
    """
    Return copies of values with source_anchor_id filled from the nearest anchor.

    Values without a position are left unlinked. Input values are not modified.
    """
    anchor_list = coerce_anchors(anchors)
    linked = []

    for value in values:
        anchor_id = None
        if anchor_list and value.start_index is not None:
            anchor_id = link_anchor(value.start_index, anchor_list, letter_text, proximity_window)
        linked.append(replace(value, source_anchor_id=anchor_id))

    if anchor_list:
        attached = sum(1 for v in linked if v.source_anchor_id is not None)
        logger.debug(f"Linked {attached}/{len(linked)} values to {len(anchor_list)} anchors")

    return linked
