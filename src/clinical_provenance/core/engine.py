# ============================================================================
# src/clinical_provenance/core/engine.py
# ============================================================================
"""
Clinical Value Extraction & Provenance-Linking Engine

Data flow for one letter:
1. Value Extractor: measurements and medication doses
2. Concept Extractor: diagnoses, procedures, medications, findings, risk factors
3. Merge measurements, doses, diagnoses and procedures by letter position
4. Link each value to the nearest source anchor
5. Derived views: verification rate, risk profile, codes, hallucination flags

Synchronous and stateless; the only process-wide state is the memoized
taxonomy and the metrics collector.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional
import logging

from ..analysis.coding import get_icd10_codes, get_mbs_items
from ..analysis.hallucination import (
    calculate_hallucination_risk,
    detect_hallucinations,
    recommend_approval,
)
from ..analysis.risk_profile import calculate_risk_profile
from ..analysis.verification import calculate_verification_rate, group_values_by_type
from ..anchoring.anchor_linker import coerce_anchors, link_values
from ..anchoring.anchor_parser import mask_source_markers, parse_source_anchors
from ..anchoring.source_coverage import generate_source_summary, validate_clinical_sources
from ..config.logging_config import logging_settings
from ..constants.taxonomy import ConceptTaxonomy, get_default_taxonomy
from ..extractors.concept_extractor import extract_clinical_concepts, generate_concept_summary
from ..extractors.value_extractor import ensure_text, extract_measurements
from ..utils import metrics
from .context.clinical_value import ClinicalValue
from .context.concepts import ClinicalConcepts, ConceptMatch
from .context.enums import ConceptCategory, ValueType
from .context.hallucination_flag import (
    ApprovalRecommendation,
    HallucinationFlag,
    HallucinationRisk,
)
from .context.source_anchor import SourceAnchor
from .context.sources import LetterSources
from .context.summaries import RiskProfile, SourceCoverage, VerificationStats

logger = logging.getLogger(__name__)


# Concept categories that become ClinicalValues
CONCEPT_VALUE_TYPES = {
    ConceptCategory.DIAGNOSIS: ValueType.DIAGNOSIS,
    ConceptCategory.PROCEDURE: ValueType.PROCEDURE,
}


@dataclass
class LetterAnalysis:
    """Everything the review screen shows for one letter."""
    values: List[ClinicalValue]
    concepts: ClinicalConcepts
    anchors: List[SourceAnchor]
    grouped_values: Dict[str, List[ClinicalValue]]
    verification: VerificationStats
    risk_profile: RiskProfile
    icd10_codes: List[str]
    mbs_items: List[str]
    concept_summary: str
    hallucination_flags: List[HallucinationFlag]
    hallucination_risk: HallucinationRisk
    approval_recommendation: ApprovalRecommendation
    source_coverage: SourceCoverage
    source_summary: str
    unverified_anchors: List[SourceAnchor] = field(default_factory=list)
    letter_without_anchors: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "values": [v.to_dict() for v in self.values],
            "concepts": self.concepts.to_dict(),
            "anchors": [a.to_dict() for a in self.anchors],
            "unverifiedAnchors": [a.to_dict() for a in self.unverified_anchors],
            "verification": self.verification.to_dict(),
            "riskProfile": self.risk_profile.to_dict(),
            "icd10Codes": list(self.icd10_codes),
            "mbsItems": list(self.mbs_items),
            "conceptSummary": self.concept_summary,
            "hallucinationFlags": [f.to_dict() for f in self.hallucination_flags],
            "hallucinationRisk": {
                "score": self.hallucination_risk.score,
                "level": self.hallucination_risk.level.value,
                "flagCount": self.hallucination_risk.flag_count,
                "criticalCount": self.hallucination_risk.critical_count,
            },
            "approvalRecommendation": {
                "shouldApprove": self.approval_recommendation.should_approve,
                "reason": self.approval_recommendation.reason,
                "actionRequired": self.approval_recommendation.action_required,
            },
            "sourceCoverage": {
                "isValid": self.source_coverage.is_valid,
                "coverage": self.source_coverage.coverage,
                "unsourcedStatements": list(self.source_coverage.unsourced_statements),
            },
            "sourceSummary": self.source_summary,
        }


def _concept_value(match: ConceptMatch) -> ClinicalValue:
    return ClinicalValue(
        id="",
        type=CONCEPT_VALUE_TYPES[match.category],
        name=match.normalized_term,
        value=match.raw_term,
        start_index=match.start_index,
    )


def _collect_values(
    letter_text: str,
    concepts: ClinicalConcepts,
    taxonomy: ConceptTaxonomy,
) -> List[ClinicalValue]:
    """Measurements, doses, diagnoses and procedures ordered by position, ids assigned."""
    values = extract_measurements(letter_text, taxonomy)
    for category in CONCEPT_VALUE_TYPES:
        values.extend(_concept_value(m) for m in concepts.for_category(category))

    values.sort(key=lambda v: v.start_index)
    return [replace(v, id=f"value-{index}") for index, v in enumerate(values)]


def _record_metrics(
    values: List[ClinicalValue],
    verification: VerificationStats,
    flags: List[HallucinationFlag],
):
    if not logging_settings.ENABLE_METRICS:
        return
    metrics.get_metrics().record_letter(
        values_extracted=len(values),
        values_linked=verification.verified_values,
        verification_rate=verification.rate,
        flag_count=len(flags),
    )


def extract_clinical_values(
    letter_text: str,
    source_anchors: Optional[Iterable[Any]] = None,
    proximity_window: Optional[int] = None,
    taxonomy: Optional[ConceptTaxonomy] = None,
) -> List[ClinicalValue]:
    """
    Extract typed clinical values and link each to its nearest source anchor.

    Args:
        letter_text: Generated letter text
        source_anchors: SourceAnchor objects or JSON-like mappings; may be None
        proximity_window: Linking window in characters; configured default when omitted
        taxonomy: Concept taxonomy; the packaged one when omitted

    Returns:
        Values ordered by position with ids "value-0".."value-<n-1>"

    Raises:
        InvalidLetterTextError: letter_text is not a string
    """
    letter_text = ensure_text(letter_text)
    taxonomy = taxonomy or get_default_taxonomy()

    with metrics.time_operation("extract_clinical_values"):
        concepts = extract_clinical_concepts(letter_text, taxonomy)
        values = _collect_values(letter_text, concepts, taxonomy)
        linked = link_values(values, source_anchors, letter_text, proximity_window)

    logger.info(
        f"Extracted {len(linked)} clinical values, "
        f"{sum(1 for v in linked if v.source_anchor_id)} linked to sources"
    )
    return linked


def analyze_letter(
    letter_text: str,
    source_anchors: Optional[Iterable[Any]] = None,
    sources: Optional[LetterSources] = None,
    proximity_window: Optional[int] = None,
    taxonomy: Optional[ConceptTaxonomy] = None,
) -> LetterAnalysis:
    """
    Run the full extraction and provenance pipeline for one letter.

    When sources are given without anchors, anchors are parsed from the
    letter's {{SOURCE:id:excerpt}} markers; only verified citations are
    used for linking. Marker text itself is never extracted as letter
    content.

    Raises:
        InvalidLetterTextError: letter_text is not a string
    """
    letter_text = ensure_text(letter_text)
    taxonomy = taxonomy or get_default_taxonomy()

    with metrics.time_operation("analyze_letter"):
        unverified_anchors: List[SourceAnchor] = []
        letter_without_anchors = None

        if source_anchors is None and sources is not None:
            parsed = parse_source_anchors(letter_text, sources)
            anchors = parsed.anchors
            unverified_anchors = parsed.unverified_anchors
            letter_without_anchors = parsed.letter_without_anchors
        else:
            anchors = coerce_anchors(source_anchors)

        content = mask_source_markers(letter_text)

        concepts = extract_clinical_concepts(content, taxonomy)
        values = _collect_values(content, concepts, taxonomy)
        values = link_values(values, anchors, letter_text, proximity_window)

        verification = calculate_verification_rate(values)
        flags = detect_hallucinations(content, anchors, values, sources)

        analysis = LetterAnalysis(
            values=values,
            concepts=concepts,
            anchors=anchors,
            grouped_values=group_values_by_type(values),
            verification=verification,
            risk_profile=calculate_risk_profile(concepts, taxonomy),
            icd10_codes=get_icd10_codes(concepts),
            mbs_items=get_mbs_items(concepts),
            concept_summary=generate_concept_summary(concepts),
            hallucination_flags=flags,
            hallucination_risk=calculate_hallucination_risk(flags),
            approval_recommendation=recommend_approval(flags),
            source_coverage=validate_clinical_sources(content, anchors, proximity_window),
            source_summary=generate_source_summary(anchors),
            unverified_anchors=unverified_anchors,
            letter_without_anchors=letter_without_anchors,
        )

    _record_metrics(values, verification, flags)

    logger.info(
        f"Letter analysis: {len(values)} values ({verification.rate}% sourced), "
        f"{len(flags)} hallucination flags, risk {analysis.risk_profile.level.value}"
    )
    return analysis
