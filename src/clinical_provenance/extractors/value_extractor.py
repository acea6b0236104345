# ============================================================================
# src/clinical_provenance/extractors/value_extractor.py
# ============================================================================
"""
Value Extractor

Scans letter text for quantitative readings:
- Ventricular function, hemodynamics, gradients, stenosis, dimensions
- Medication doses ("aspirin 100 mg")

Each hit becomes a ClinicalValue carrying its offset in the letter so the
anchor linker can find the closest source span. Text without a match
yields an empty list; nothing is ever filled in by default.
"""

from typing import List, Optional
import logging

from ..constants.measurement_patterns import (
    MEASUREMENT_PATTERNS,
    DOSE_UNIT_CANONICAL,
    build_dose_pattern,
)
from ..constants.taxonomy import ConceptTaxonomy, get_default_taxonomy
from ..core.context.clinical_value import ClinicalValue
from ..core.context.enums import ValueType
from ..utils.exceptions import InvalidLetterTextError

logger = logging.getLogger(__name__)


def ensure_text(text) -> str:
    """Reject non-string letter text; strings pass through unchanged."""
    if not isinstance(text, str):
        raise InvalidLetterTextError(
            f"Letter text must be a string, got {type(text).__name__}"
        )
    return text


class ValueExtractor:
    """
    Pattern-based extractor for measurements and medication doses.

    Patterns run independently; matches of one pattern never overlap each
    other, matches of different patterns may.
    """

    def __init__(self, taxonomy: Optional[ConceptTaxonomy] = None):
        self.taxonomy = taxonomy or get_default_taxonomy()
        self.measurement_patterns = MEASUREMENT_PATTERNS
        self.dose_pattern = build_dose_pattern(self.taxonomy.medication_names)

    def extract(self, text: str) -> List[ClinicalValue]:
        """
        Extract measurements and doses, ordered by position in the text.

        Ids are "measurement-<n>" in that order; the engine renumbers them
        when merging with concept values.
        """
        text = ensure_text(text)

        found = self._extract_measurements(text) + self._extract_doses(text)
        found.sort(key=lambda v: v.start_index)

        for index, value in enumerate(found):
            value.id = f"measurement-{index}"

        logger.debug(f"Value extractor found {len(found)} values")
        return found

    def _extract_measurements(self, text: str) -> List[ClinicalValue]:
        values = []

        for definition in self.measurement_patterns:
            for match in definition.pattern.finditer(text):
                groups = match.groupdict()
                if "systolic" in groups:
                    reading = f"{groups['systolic']}/{groups['diastolic']}"
                else:
                    reading = groups["value"]

                values.append(ClinicalValue(
                    id="",
                    type=ValueType.MEASUREMENT,
                    name=definition.name,
                    value=reading,
                    unit=definition.unit or None,
                    start_index=match.start(),
                ))

        return values

    def _extract_doses(self, text: str) -> List[ClinicalValue]:
        values = []

        for match in self.dose_pattern.finditer(text):
            unit = DOSE_UNIT_CANONICAL[match.group("unit").lower()]
            values.append(ClinicalValue(
                id="",
                type=ValueType.MEDICATION,
                name=match.group("drug").capitalize(),
                value=match.group("dose"),
                unit=unit,
                start_index=match.start(),
            ))

        return values


def extract_measurements(
    text: str,
    taxonomy: Optional[ConceptTaxonomy] = None
) -> List[ClinicalValue]:
    """
    Convenience function for measurement and dose extraction.

    Args:
        text: Letter text
        taxonomy: Concept taxonomy supplying the dose drug names

    Returns:
        ClinicalValues with start offsets; empty when nothing matches
    """
    return ValueExtractor(taxonomy).extract(text)
