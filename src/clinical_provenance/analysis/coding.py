# ============================================================================
# src/clinical_provenance/analysis/coding.py
# ============================================================================
"""
Coding Mapper
- ICD-10 codes from diagnoses
- MBS item numbers from procedures
"""

from typing import Iterable, List

from ..core.context.concepts import ClinicalConcepts, ConceptMatch


def _unique_sorted_codes(matches: Iterable[ConceptMatch]) -> List[str]:
    return sorted({m.code for m in matches if m.code})


def get_icd10_codes(concepts: ClinicalConcepts) -> List[str]:
    """Deduplicated ICD-10 codes of the diagnoses, ascending."""
    return _unique_sorted_codes(concepts.diagnoses)


def get_mbs_items(concepts: ClinicalConcepts) -> List[str]:
    """Deduplicated MBS item numbers of the procedures, ascending."""
    return _unique_sorted_codes(concepts.procedures)
