# ============================================================================
# src/clinical_provenance/extractors/concept_extractor.py
# ============================================================================
"""
Concept Extractor

Scans letter text against the concept taxonomy and returns normalized,
coded matches grouped by category:
- Diagnoses (ICD-10)
- Procedures (MBS items)
- Medication classes
- Echo/angio findings
- Cardiovascular risk factors
"""

from typing import List, Optional
import logging

from ..constants.taxonomy import ConceptTaxonomy, get_default_taxonomy
from ..core.context.concepts import ClinicalConcepts, ConceptMatch
from ..core.context.enums import ConceptCategory
from .value_extractor import ensure_text

logger = logging.getLogger(__name__)


# Summary line label per category, in output order
SUMMARY_LABELS = [
    (ConceptCategory.DIAGNOSIS, "Diagnoses"),
    (ConceptCategory.PROCEDURE, "Procedures"),
    (ConceptCategory.MEDICATION, "Medications"),
    (ConceptCategory.FINDING, "Findings"),
    (ConceptCategory.RISK_FACTOR, "Risk Factors"),
]


class ConceptExtractor:
    """
    Taxonomy-driven categorical scanner.

    Each rule contributes at most one match per call: its first occurrence.
    Matches are ordered by position inside a category; rules matching at the
    same offset keep taxonomy order.
    """

    def __init__(self, taxonomy: Optional[ConceptTaxonomy] = None):
        self.taxonomy = taxonomy or get_default_taxonomy()

    def extract(self, text: str) -> ClinicalConcepts:
        text = ensure_text(text)
        concepts = ClinicalConcepts()

        for category in ConceptCategory:
            matches = self._scan_category(text, category)
            concepts.for_category(category).extend(matches)

        logger.debug(f"Concept extractor counts: {concepts.counts()}")
        return concepts

    def _scan_category(self, text: str, category: ConceptCategory) -> List[ConceptMatch]:
        matches = []

        for rule in self.taxonomy.rules_for(category):
            hit = rule.pattern.search(text)
            if not hit:
                continue

            matches.append(ConceptMatch(
                category=category,
                raw_term=hit.group(0),
                normalized_term=rule.normalized_term,
                code=rule.code,
                code_system=rule.code_system,
                group=rule.group,
                confidence=rule.confidence,
                start_index=hit.start(),
                end_index=hit.end(),
            ))

        # Stable sort keeps taxonomy order on equal offsets
        matches.sort(key=lambda m: m.start_index)
        return matches


def extract_clinical_concepts(
    text: str,
    taxonomy: Optional[ConceptTaxonomy] = None
) -> ClinicalConcepts:
    """
    Extract diagnoses, procedures, medications, findings and risk factors.

    Args:
        text: Letter text
        taxonomy: Concept taxonomy; the packaged one when omitted

    Returns:
        ClinicalConcepts, empty lists when nothing is recognized
    """
    return ConceptExtractor(taxonomy).extract(text)


def generate_concept_summary(concepts: ClinicalConcepts) -> str:
    """
    Render a short text summary, one line per non-empty category.

    Medications are listed with their pharmacological group, e.g.
    "Medications: Statin (Lipid-lowering), Aspirin (Antiplatelet)".
    """
    lines = []

    for category, label in SUMMARY_LABELS:
        matches = concepts.for_category(category)
        if not matches:
            continue

        if category == ConceptCategory.MEDICATION:
            terms = [
                f"{m.normalized_term} ({m.group})" if m.group else m.normalized_term
                for m in matches
            ]
        else:
            terms = [m.normalized_term for m in matches]

        lines.append(f"{label}: {', '.join(terms)}")

    return "\n".join(lines)
