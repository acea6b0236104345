# ============================================================================
# TEST: Context types
# ============================================================================

import pytest

from clinical_provenance.core.context import (
    ClinicalConcepts,
    ClinicalValue,
    ConceptCategory,
    ConceptMatch,
    SourceAnchor,
    SourceType,
    ValueType,
)
from clinical_provenance.utils.exceptions import MalformedAnchorError


def test_context():
    """Anchor mappings read from upstream JSON"""
    print("=" * 70)
    print("TEST: Source Anchor Context")
    print("=" * 70)

    anchor = SourceAnchor.from_dict({
        "id": "anchor-1",
        "segmentText": "LVEF was 45%",
        "startIndex": 10,
        "endIndex": 22,
        "sourceType": "document",
        "sourceId": "doc-echo-1",
        "sourceExcerpt": "LVEF 45%",
        "confidence": 0.9,
        "pageNumber": 2,
    })

    print(f"✓ Anchor created with ID: {anchor.id}")
    assert anchor.source_type == SourceType.DOCUMENT
    assert anchor.page_number == 2
    assert anchor.confidence == 0.9

    data = anchor.to_dict()
    assert data["sourceType"] == "document"
    assert data["pageNumber"] == 2
    assert "timestamp" not in data
    assert SourceAnchor.from_dict(data) == anchor


def test_anchor_snake_case_keys():
    anchor = SourceAnchor.from_dict({
        "id": "a", "segment_text": "BP 120/80", "start_index": 0, "end_index": 9,
        "source_type": "user-input", "source_id": "notes",
    })

    assert anchor.source_type == SourceType.USER_INPUT
    assert anchor.source_excerpt == ""
    assert anchor.confidence == 1.0


@pytest.mark.parametrize("data, field_name", [
    ({"segmentText": "x", "startIndex": 0, "endIndex": 1, "sourceType": "document", "sourceId": "d"}, "id"),
    ({"id": "a", "segmentText": "x", "startIndex": "0", "endIndex": 1,
      "sourceType": "document", "sourceId": "d"}, "start_index"),
    ({"id": "a", "segmentText": "x", "startIndex": 0, "endIndex": True,
      "sourceType": "document", "sourceId": "d"}, "end_index"),
    ({"id": "a", "segmentText": "x", "startIndex": 0, "endIndex": 1,
      "sourceType": "fax", "sourceId": "d"}, "sourceType"),
    ({"id": "a", "segmentText": None, "startIndex": 0, "endIndex": 1,
      "sourceType": "document", "sourceId": "d"}, "segment_text"),
    ({"id": 7, "segmentText": "x", "startIndex": 0, "endIndex": 1,
      "sourceType": "document", "sourceId": "d"}, "id"),
    ({"id": "a", "segmentText": "x", "startIndex": 0, "endIndex": 1,
      "sourceType": "document", "sourceId": None}, "source_id"),
])
def test_malformed_anchor(data, field_name):
    with pytest.raises(MalformedAnchorError) as exc_info:
        SourceAnchor.from_dict(data)
    assert exc_info.value.field_name == field_name


def test_anchor_must_be_mapping():
    with pytest.raises(MalformedAnchorError):
        SourceAnchor.from_dict(["not", "a", "mapping"])


def test_clinical_value_attention_states():
    value = ClinicalValue(id="value-0", type=ValueType.MEASUREMENT, name="LVEF", value="45", unit="%")
    assert value.requires_attention
    assert not value.has_source

    value.source_anchor_id = "anchor-0"
    assert not value.requires_attention
    assert value.to_dict() == {
        "id": "value-0", "type": "measurement", "name": "LVEF", "value": "45",
        "verified": False, "unit": "%", "sourceAnchorId": "anchor-0",
    }


def test_clinical_concepts_grouping():
    concepts = ClinicalConcepts()
    assert concepts.is_empty()

    match = ConceptMatch(
        category=ConceptCategory.RISK_FACTOR,
        raw_term="smoker",
        normalized_term="Smoking",
        confidence=0.9,
    )
    concepts.for_category(ConceptCategory.RISK_FACTOR).append(match)

    assert not concepts.is_empty()
    assert list(concepts) == [match]
    assert concepts.counts()["riskFactors"] == 1
    assert concepts.to_dict()["riskFactors"][0]["normalizedTerm"] == "Smoking"
    assert "code" not in match.to_dict()


def test_source_material_texts(sample_sources):
    texts = sample_sources.searchable_texts()

    assert len(texts) == 5
    assert texts[1] == "I get short of breath climbing stairs"
    assert '"lvef": "45%"' in texts[2]
    assert texts[-1] == "Started atorvastatin 40 mg"
