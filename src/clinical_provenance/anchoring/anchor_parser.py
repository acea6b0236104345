# ============================================================================
# src/clinical_provenance/anchoring/anchor_parser.py
# ============================================================================
"""
Source Anchor Parser

Reads inline citation markers from generated letter text:

    The LVEF was 45% {{SOURCE:document-echo-1:LVEF 45% by Simpson's biplane}}

Each marker becomes a SourceAnchor. The cited excerpt is checked against
the letter's source material (transcript, documents, clinician notes);
anchors whose excerpt cannot be found are returned separately so the
review screen can show them as unverified citations.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..config.linking_config import linking_settings
from ..core.context.enums import SourceType
from ..core.context.source_anchor import SourceAnchor
from ..core.context.sources import LetterSources
from ..utils.text_matching import word_similarity

logger = logging.getLogger(__name__)


SOURCE_MARKER_PATTERN = re.compile(r"\{\{SOURCE:([^:]+):([^}]+)\}\}")

TRANSCRIPT_ID_PREFIXES = ("transcript", "recording")
DOCUMENT_ID_PREFIXES = ("document", "doc")
USER_INPUT_ID_PREFIXES = ("user",)


@dataclass
class AnchorParseResult:
    anchors: List[SourceAnchor] = field(default_factory=list)              # Verified
    letter_without_anchors: str = ""
    unverified_anchors: List[SourceAnchor] = field(default_factory=list)

    @property
    def all_anchors(self) -> List[SourceAnchor]:
        return sorted(self.anchors + self.unverified_anchors, key=lambda a: a.start_index)


@dataclass(frozen=True)
class AnchorVerification:
    source_type: SourceType
    verified: bool
    confidence: float


class SourceAnchorParser:
    """
    Parses {{SOURCE:<sourceId>:<excerpt>}} markers and verifies excerpts.
    """

    def __init__(self, similarity_threshold: Optional[float] = None):
        self.similarity_threshold = (
            linking_settings.ANCHOR_SIMILARITY_THRESHOLD
            if similarity_threshold is None else similarity_threshold
        )

    def parse(self, letter_text: str, sources: LetterSources) -> AnchorParseResult:
        result = AnchorParseResult()

        for index, match in enumerate(SOURCE_MARKER_PATTERN.finditer(letter_text)):
            source_id = match.group(1).strip()
            excerpt = match.group(2).strip()

            check = self.verify(source_id, excerpt, sources)
            anchor = SourceAnchor(
                id=f"anchor-{index}",
                segment_text=match.group(0),
                start_index=match.start(),
                end_index=match.end(),
                source_type=check.source_type,
                source_id=source_id,
                source_excerpt=excerpt,
                confidence=check.confidence,
            )

            if check.verified:
                result.anchors.append(anchor)
            else:
                result.unverified_anchors.append(anchor)

        result.letter_without_anchors = SOURCE_MARKER_PATTERN.sub("", letter_text).strip()

        logger.info(
            f"Parsed {len(result.anchors) + len(result.unverified_anchors)} source anchors "
            f"({len(result.anchors)} verified, {len(result.unverified_anchors)} unverified)"
        )
        return result

    def verify(self, source_id: str, excerpt: str, sources: LetterSources) -> AnchorVerification:
        """
        Resolve the cited source by id and look for the excerpt in it.

        Unknown source ids resolve to an unverified document citation.
        """
        transcript = sources.transcript
        if transcript and (source_id == transcript.id or source_id.startswith(TRANSCRIPT_ID_PREFIXES)):
            return self._search(SourceType.TRANSCRIPT, excerpt, transcript.searchable_texts(), source_id)

        if sources.documents and source_id.startswith(DOCUMENT_ID_PREFIXES):
            for document in sources.documents:
                if document.id == source_id or document.id in source_id:
                    return self._search(SourceType.DOCUMENT, excerpt, document.searchable_texts(), source_id)
            logger.warning(f"Document source not found: {source_id}")
            return AnchorVerification(SourceType.DOCUMENT, False, 0.0)

        user_input = sources.user_input
        if user_input and (source_id == user_input.id or source_id.startswith(USER_INPUT_ID_PREFIXES)):
            return self._search(SourceType.USER_INPUT, excerpt, user_input.searchable_texts(), source_id)

        logger.warning(f"Unknown source type for anchor source id: {source_id}")
        return AnchorVerification(SourceType.DOCUMENT, False, 0.0)

    def _search(
        self,
        source_type: SourceType,
        excerpt: str,
        texts: List[str],
        source_id: str,
    ) -> AnchorVerification:
        best = self._best_similarity(excerpt, texts)
        if best is not None:
            return AnchorVerification(source_type, True, best)

        logger.warning(f"{source_type.value} anchor not verified: {source_id}")
        return AnchorVerification(source_type, False, 0.0)

    def _best_similarity(self, excerpt: str, texts: List[str]) -> Optional[float]:
        """First text containing the excerpt or similar enough; None if none are."""
        for text in texts:
            score = word_similarity(text, excerpt)
            if score >= 1.0 or score > self.similarity_threshold:
                return score
        return None


def parse_source_anchors(
    letter_text: str,
    sources: LetterSources,
    similarity_threshold: Optional[float] = None,
) -> AnchorParseResult:
    """
    Parse and verify inline source markers.

    Args:
        letter_text: Generated letter containing {{SOURCE:id:excerpt}} markers
        sources: Source material the letter was generated from

    Returns:
        AnchorParseResult with verified anchors, unverified anchors and the
        letter text with markers removed
    """
    return SourceAnchorParser(similarity_threshold).parse(letter_text, sources)



def mask_source_markers(letter_text: str) -> str:
    """
    Blank out marker text with spaces of the same length.

    Offsets in the masked text match the original, so anchors found in the
    original still line up with statements extracted from the masked text.
    """
    return SOURCE_MARKER_PATTERN.sub(lambda m: " " * len(m.group(0)), letter_text)
