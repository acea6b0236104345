# ============================================================================
# FILE: tests/unit/test_anchor_parser.py
# ============================================================================
"""
Unit tests for inline source marker parsing and excerpt verification
"""

from clinical_provenance.anchoring.anchor_parser import (
    SourceAnchorParser,
    mask_source_markers,
    parse_source_anchors,
)
from clinical_provenance.core.context.enums import SourceType
from clinical_provenance.core.context.sources import LetterSources, TranscriptSource


def test_markers_parsed_and_verified(marked_letter, sample_sources):
    """Known sources are verified; the unknown document citation is not"""
    result = parse_source_anchors(marked_letter, sample_sources)

    assert [a.id for a in result.anchors] == ["anchor-0", "anchor-1", "anchor-2"]
    assert [a.source_type for a in result.anchors] == [
        SourceType.TRANSCRIPT,
        SourceType.DOCUMENT,
        SourceType.USER_INPUT,
    ]
    assert all(a.confidence == 1.0 for a in result.anchors)

    assert len(result.unverified_anchors) == 1
    unverified = result.unverified_anchors[0]
    assert unverified.id == "anchor-3"
    assert unverified.source_id == "doc-cath-9"
    assert unverified.source_type == SourceType.DOCUMENT
    assert unverified.confidence == 0.0
    print(f"✓ {len(result.anchors)} verified, {len(result.unverified_anchors)} unverified")


def test_anchor_offsets_cover_marker(marked_letter, sample_sources):
    anchor = parse_source_anchors(marked_letter, sample_sources).anchors[0]

    assert anchor.start_index == marked_letter.index("{{SOURCE:transcript-1")
    assert marked_letter[anchor.start_index:anchor.end_index] == anchor.segment_text
    assert anchor.source_excerpt == "chest pain on exertion"


def test_markers_removed_from_letter(marked_letter, sample_sources):
    result = parse_source_anchors(marked_letter, sample_sources)

    assert "{{SOURCE" not in result.letter_without_anchors
    assert result.letter_without_anchors.startswith("He reports chest pain on exertion")
    assert [a.id for a in result.all_anchors] == ["anchor-0", "anchor-1", "anchor-2", "anchor-3"]


def test_similar_excerpt_verified_with_partial_confidence(sample_sources):
    letter = "Chest discomfort {{SOURCE:transcript-1:patient reports chest discomfort on exertion}}"
    anchor = parse_source_anchors(letter, sample_sources).anchors[0]

    # patient, reports, chest, exertion found; discomfort is not
    assert anchor.confidence == 0.8


def test_speaker_segments_searched(sample_sources):
    letter = "Breathless {{SOURCE:recording-7:short of breath climbing stairs}}"
    result = parse_source_anchors(letter, sample_sources)

    assert len(result.anchors) == 1
    assert result.anchors[0].source_type == SourceType.TRANSCRIPT


def test_document_extracted_data_searched(sample_sources):
    parser = SourceAnchorParser()
    check = parser.verify("doc-echo-1", '"mr": "mild"', sample_sources)

    assert check.verified
    assert check.source_type == SourceType.DOCUMENT


def test_unmatched_excerpt_not_verified(sample_sources):
    letter = "Fabricated {{SOURCE:transcript-1:syncope while driving last month}}"
    result = parse_source_anchors(letter, sample_sources)

    assert result.anchors == []
    assert result.unverified_anchors[0].source_type == SourceType.TRANSCRIPT


def test_unknown_source_id():
    sources = LetterSources(transcript=TranscriptSource(id="transcript-1", text="chest pain"))
    result = parse_source_anchors("x {{SOURCE:pathology-1:chest pain}}", sources)

    assert result.anchors == []
    assert result.unverified_anchors[0].source_type == SourceType.DOCUMENT


def test_letter_without_markers():
    result = parse_source_anchors("No citations here.", LetterSources())

    assert result.anchors == []
    assert result.unverified_anchors == []
    assert result.letter_without_anchors == "No citations here."


def test_mask_keeps_offsets(marked_letter):
    masked = mask_source_markers(marked_letter)

    assert len(masked) == len(marked_letter)
    assert "SOURCE" not in masked
    assert masked.index("LVEF was 45%") == marked_letter.index("LVEF was 45%")
