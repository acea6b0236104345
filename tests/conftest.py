# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import pytest

from clinical_provenance.core.context.sources import (
    DocumentSource,
    LetterSources,
    SpeakerSegment,
    TranscriptSource,
    UserInputSource,
)
from clinical_provenance.utils.metrics import get_metrics


SAMPLE_LETTER = (
    "Dear Dr Smith,\n\n"
    "Thank you for referring Mr Jones, who presented with exertional chest pain.\n"
    "He has a history of hypertension and type 2 diabetes, and is a current smoker.\n"
    "Coronary angiogram showed 70% stenosis of the LAD. "
    "LVEF was 45% on transthoracic echocardiogram.\n"
    "BP 138/84, HR 72 bpm.\n"
    "Medications: aspirin 100 mg daily, atorvastatin 40 mg nocte, metoprolol 25 mg bd.\n"
    "Impression: coronary artery disease with mildly reduced LV systolic function.\n"
)


def make_anchor(letter: str, anchor_id: str, segment: str, source_type: str = "transcript",
                source_id: str = "transcript-1", excerpt: str = "") -> dict:
    """Anchor mapping (upstream JSON shape) for a segment of the letter"""
    start = letter.index(segment)
    return {
        "id": anchor_id,
        "segmentText": segment,
        "startIndex": start,
        "endIndex": start + len(segment),
        "sourceType": source_type,
        "sourceId": source_id,
        "sourceExcerpt": excerpt or segment,
        "confidence": 1.0,
    }


@pytest.fixture
def sample_letter():
    """Cardiology consultation letter without citation markers"""
    return SAMPLE_LETTER


@pytest.fixture
def sample_anchors(sample_letter):
    """Two anchors: the echo statement and the observations line"""
    return [
        make_anchor(
            sample_letter, "anchor-echo",
            "LVEF was 45% on transthoracic echocardiogram",
            source_type="document", source_id="doc-echo-1",
            excerpt="LVEF 45% by Simpson's biplane",
        ),
        make_anchor(sample_letter, "anchor-obs", "BP 138/84, HR 72 bpm"),
    ]


@pytest.fixture
def sample_sources():
    """Transcript, echo report and clinician notes for one consultation"""
    return LetterSources(
        transcript=TranscriptSource(
            id="transcript-1",
            text="Patient reports chest pain on exertion for three weeks. "
                 "Referred by Dr Smith. BP today 138 over 84.",
            speakers=[
                SpeakerSegment(speaker="patient", text="I get short of breath climbing stairs"),
            ],
        ),
        documents=[
            DocumentSource(
                id="doc-echo-1",
                name="Echo report",
                extracted_data={"lvef": "45%", "mr": "mild"},
                raw_text="Transthoracic echo: LVEF 45% by Simpson's biplane. Mild MR.",
            ),
        ],
        user_input=UserInputSource(id="user-notes", text="Started atorvastatin 40 mg"),
    )


@pytest.fixture
def marked_letter():
    """Generated letter carrying inline source markers, one citing an unknown document"""
    return (
        "He reports chest pain on exertion {{SOURCE:transcript-1:chest pain on exertion}}. "
        "LVEF was 45% {{SOURCE:doc-echo-1:LVEF 45% by Simpson's biplane}}. "
        "Plan noted {{SOURCE:user-notes:started atorvastatin 40 mg}}. "
        "Cath showed disease {{SOURCE:doc-cath-9:LAD 90% stenosis}}."
    )


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset global metrics after each test"""
    yield
    get_metrics().reset()
