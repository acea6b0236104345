# ============================================================================
# FILE: tests/unit/test_risk_profile.py
# ============================================================================
"""
Unit tests for the cardiovascular risk profile
"""

from clinical_provenance.analysis.risk_profile import calculate_risk_profile, risk_level_for_score
from clinical_provenance.core.context.concepts import ClinicalConcepts
from clinical_provenance.core.context.enums import RiskLevel
from clinical_provenance.extractors.concept_extractor import extract_clinical_concepts


def _profile(text):
    return calculate_risk_profile(extract_clinical_concepts(text))


def test_no_risk_concepts_is_low():
    profile = calculate_risk_profile(ClinicalConcepts())

    assert profile.score == 0
    assert profile.level == RiskLevel.LOW
    assert profile.factors == []


def test_procedures_alone_score_zero():
    profile = _profile("Routine TTE, aspirin continued.")
    assert (profile.score, profile.level) == (0, RiskLevel.LOW)


def test_single_arrhythmia_is_moderate():
    profile = _profile("Known AF.")

    assert profile.score == 1
    assert profile.level == RiskLevel.MODERATE
    assert profile.factors == ["Atrial Fibrillation"]


def test_cad_with_risk_factors_is_high():
    profile = _profile("Coronary artery disease, diabetes and a current smoker.")

    assert profile.score == 4
    assert profile.level == RiskLevel.HIGH
    assert profile.factors == ["Coronary Artery Disease", "Diabetes Mellitus", "Smoking"]


def test_major_diagnoses_very_high():
    profile = _profile("Admitted with STEMI complicated by heart failure.")

    assert profile.score == 6
    assert profile.level == RiskLevel.VERY_HIGH


def test_hypertension_counted_once():
    """Weighted as a risk factor; as a diagnosis it carries no weight"""
    profile = _profile("Long-standing hypertension.")

    assert profile.score == 1
    assert profile.factors == ["Hypertension"]


def test_sample_letter_profile(sample_letter):
    profile = _profile(sample_letter)

    assert profile.score == 5
    assert profile.level == RiskLevel.HIGH
    assert profile.factors == [
        "Coronary Artery Disease", "Hypertension", "Diabetes Mellitus", "Smoking",
    ]


def test_level_thresholds():
    assert risk_level_for_score(0) == RiskLevel.LOW
    assert risk_level_for_score(1) == RiskLevel.MODERATE
    assert risk_level_for_score(3) == RiskLevel.MODERATE
    assert risk_level_for_score(4) == RiskLevel.HIGH
    assert risk_level_for_score(5) == RiskLevel.HIGH
    assert risk_level_for_score(6) == RiskLevel.VERY_HIGH
    assert risk_level_for_score(20) == RiskLevel.VERY_HIGH
