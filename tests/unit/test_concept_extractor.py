# ============================================================================
# FILE: tests/unit/test_concept_extractor.py
# ============================================================================
"""
Unit tests for taxonomy concept extraction and the concept summary
"""

from clinical_provenance.core.context.concepts import ClinicalConcepts
from clinical_provenance.core.context.enums import ConceptCategory
from clinical_provenance.extractors.concept_extractor import (
    extract_clinical_concepts,
    generate_concept_summary,
)


def _terms(matches):
    return [m.normalized_term for m in matches]


# ============================================================================
# Diagnoses
# ============================================================================

def test_af_cad_hf_sentence():
    """Three diagnoses are found, normalized and coded"""
    concepts = extract_clinical_concepts(
        "He has atrial fibrillation, coronary artery disease and heart failure."
    )

    assert len(concepts.diagnoses) >= 3
    assert {"Atrial Fibrillation", "Coronary Artery Disease", "Heart Failure"} <= set(
        _terms(concepts.diagnoses)
    )

    af = concepts.diagnoses[0]
    assert af.category == ConceptCategory.DIAGNOSIS
    assert af.raw_term == "atrial fibrillation"
    assert af.code == "I48"
    assert af.code_system == "ICD-10"
    assert af.group == "Arrhythmia"
    print(f"✓ Diagnoses: {_terms(concepts.diagnoses)}")


def test_abbreviations_normalized():
    concepts = extract_clinical_concepts("Background of AF and CAD. Presented with NSTEMI.")

    assert _terms(concepts.diagnoses) == [
        "Atrial Fibrillation",
        "Coronary Artery Disease",
        "Acute Myocardial Infarction",
    ]
    assert concepts.diagnoses[2].raw_term == "NSTEMI"


def test_rule_reports_first_occurrence_only():
    text = "Paroxysmal AF. The atrial fibrillation is rate controlled."
    concepts = extract_clinical_concepts(text)

    assert len(concepts.diagnoses) == 1
    assert concepts.diagnoses[0].raw_term == "AF"
    assert concepts.diagnoses[0].start_index == text.index("AF")


def test_matches_ordered_by_position():
    concepts = extract_clinical_concepts("Heart failure complicated by atrial fibrillation.")
    assert _terms(concepts.diagnoses) == ["Heart Failure", "Atrial Fibrillation"]


def test_triggers_are_word_bounded():
    """'AF' inside a word is not atrial fibrillation"""
    concepts = extract_clinical_concepts("AFTER the SAFE discharge, he felt well.")
    assert concepts.diagnoses == []


def test_pulmonary_hypertension_is_a_finding_not_hypertension():
    concepts = extract_clinical_concepts("Echo suggests pulmonary hypertension.")

    assert concepts.diagnoses == []
    assert concepts.risk_factors == []
    assert _terms(concepts.findings) == ["Pulmonary Hypertension"]


# ============================================================================
# Other categories
# ============================================================================

def test_procedures_carry_mbs_items():
    concepts = extract_clinical_concepts(
        "Underwent coronary angiogram followed by PCI; TTE arranged."
    )

    assert [(m.normalized_term, m.code) for m in concepts.procedures] == [
        ("Coronary Angiography", "38215"),
        ("Percutaneous Coronary Intervention", "38218"),
        ("Transthoracic Echocardiography", "55118"),
    ]
    assert all(m.code_system == "MBS" for m in concepts.procedures)


def test_ct_coronary_angiogram_is_not_invasive_angiography():
    concepts = extract_clinical_concepts("CT coronary angiogram showed no stenosis.")
    assert "Coronary Angiography" not in _terms(concepts.procedures)
    assert "38215" not in [m.code for m in concepts.procedures]

    concepts = extract_clinical_concepts("CT angiography excluded PE. Coronary angiogram booked.")
    assert [(m.normalized_term, m.code) for m in concepts.procedures] == [
        ("Coronary Angiography", "38215"),
    ]
    assert concepts.procedures[0].start_index == 28


def test_medication_classes_and_groups():
    concepts = extract_clinical_concepts("Continue atorvastatin and aspirin, add apixaban.")

    assert [(m.normalized_term, m.group) for m in concepts.medications] == [
        ("Statin", "Lipid-lowering"),
        ("Aspirin", "Antiplatelet"),
        ("DOAC", "Anticoagulant"),
    ]
    assert all(m.code is None for m in concepts.medications)


def test_risk_factors_and_findings(sample_letter):
    concepts = extract_clinical_concepts(sample_letter)

    assert _terms(concepts.risk_factors) == ["Hypertension", "Diabetes Mellitus", "Smoking"]
    assert _terms(concepts.findings) == ["LV Dysfunction"]


def test_non_smoker_is_not_smoking():
    concepts = extract_clinical_concepts("Lifelong non-smoker.")
    assert concepts.risk_factors == []


def test_plain_text_yields_empty_concepts():
    concepts = extract_clinical_concepts("Patient is well.")
    assert concepts.is_empty()
    assert concepts.counts() == {
        "diagnoses": 0, "procedures": 0, "medications": 0, "findings": 0, "riskFactors": 0,
    }


# ============================================================================
# Summary
# ============================================================================

def test_concept_summary(sample_letter):
    summary = generate_concept_summary(extract_clinical_concepts(sample_letter))

    assert summary.split("\n") == [
        "Diagnoses: Hypertension, Coronary Artery Disease",
        "Procedures: Coronary Angiography, Transthoracic Echocardiography",
        "Medications: Aspirin (Antiplatelet), Statin (Lipid-lowering), Beta-blocker (Antihypertensive)",
        "Findings: LV Dysfunction",
        "Risk Factors: Hypertension, Diabetes Mellitus, Smoking",
    ]


def test_summary_skips_empty_categories():
    summary = generate_concept_summary(extract_clinical_concepts("On atorvastatin."))
    assert summary == "Medications: Statin (Lipid-lowering)"


def test_empty_summary():
    assert generate_concept_summary(ClinicalConcepts()) == ""
