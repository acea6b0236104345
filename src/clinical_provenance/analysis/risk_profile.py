# ============================================================================
# src/clinical_provenance/analysis/risk_profile.py
# ============================================================================
"""
Risk Profile Calculator

Weighted cardiovascular risk score from detected diagnoses and risk
factors. Weights live in the concept taxonomy:
- Major diagnoses (AMI, unstable angina, heart failure): 3
- Coronary artery disease, aortic stenosis: 2
- Arrhythmias, mitral regurgitation: 1
- Each risk factor: 1

Informational only; not a clinical decision tool.
"""

from typing import Optional
import logging

from ..config.thresholds_config import threshold_settings
from ..constants.taxonomy import ConceptTaxonomy, get_default_taxonomy
from ..core.context.concepts import ClinicalConcepts
from ..core.context.enums import ConceptCategory, RiskLevel
from ..core.context.summaries import RiskProfile

logger = logging.getLogger(__name__)


def risk_level_for_score(score: int) -> RiskLevel:
    """Map a score to its level; only a zero score is low."""
    if score >= threshold_settings.RISK_VERY_HIGH_MIN_SCORE:
        return RiskLevel.VERY_HIGH
    if score >= threshold_settings.RISK_HIGH_MIN_SCORE:
        return RiskLevel.HIGH
    if score > 0:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def calculate_risk_profile(
    concepts: ClinicalConcepts,
    taxonomy: Optional[ConceptTaxonomy] = None
) -> RiskProfile:
    """
    Score diagnoses then risk factors; each normalized term counts once.

    Factors list the contributing terms in detection order. Terms with no
    weight (e.g. hypertension as a diagnosis) do not appear.
    """
    taxonomy = taxonomy or get_default_taxonomy()

    score = 0
    factors = []

    for category in (ConceptCategory.DIAGNOSIS, ConceptCategory.RISK_FACTOR):
        for match in concepts.for_category(category):
            if match.normalized_term in factors:
                continue

            weight = taxonomy.risk_weight(category, match.normalized_term)
            if weight > 0:
                score += weight
                factors.append(match.normalized_term)

    profile = RiskProfile(score=score, level=risk_level_for_score(score), factors=factors)
    logger.debug(f"Risk profile: score={profile.score} level={profile.level.value}")
    return profile
