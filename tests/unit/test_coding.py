# ============================================================================
# FILE: tests/unit/test_coding.py
# ============================================================================
"""
Unit tests for ICD-10 and MBS code lists
"""

from clinical_provenance.analysis.coding import get_icd10_codes, get_mbs_items
from clinical_provenance.core.context.concepts import ClinicalConcepts, ConceptMatch
from clinical_provenance.core.context.enums import ConceptCategory
from clinical_provenance.extractors.concept_extractor import extract_clinical_concepts


def test_icd10_codes_sorted_and_unique():
    concepts = extract_clinical_concepts("Coronary artery disease and atrial fibrillation.")
    codes = get_icd10_codes(concepts)

    assert "I48" in codes and "I25.1" in codes
    assert codes == sorted(set(codes))
    assert codes == ["I25.1", "I48"]


def test_duplicate_codes_collapsed():
    match = ConceptMatch(
        category=ConceptCategory.DIAGNOSIS,
        raw_term="AF",
        normalized_term="Atrial Fibrillation",
        code="I48",
        code_system="ICD-10",
    )
    concepts = ClinicalConcepts(diagnoses=[match, match])

    assert get_icd10_codes(concepts) == ["I48"]


def test_mbs_items(sample_letter):
    assert get_mbs_items(extract_clinical_concepts(sample_letter)) == ["38215", "55118"]


def test_no_codes():
    concepts = ClinicalConcepts()
    assert get_icd10_codes(concepts) == []
    assert get_mbs_items(concepts) == []
