# ============================================================================
# src/clinical_provenance/constants/measurement_patterns.py
# ============================================================================
"""
Quantitative Measurement Patterns
- Ventricular function (LVEF, RVEF, GLS, TAPSE, E/e')
- Hemodynamics (BP, HR, LVEDP, RVSP)
- Valve gradients and area
- Stenosis severity
- Chamber dimensions
- Medication doses

Every pattern is case-insensitive. Group "value" holds the reading; blood
pressure uses "systolic"/"diastolic" instead.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

# Optional connective between a label and its reading: "LVEF of 45%", "HR was 72"
_LINK = r"\s*(?:of|was|is|=|:)?\s*"

DOSE_UNITS = ("mg", "mcg", "g", "ml", "units", "unit")

# Canonical dose unit spellings
DOSE_UNIT_CANONICAL = {
    "mg": "mg",
    "mcg": "mcg",
    "g": "g",
    "ml": "ml",
    "unit": "units",
    "units": "units",
}


@dataclass(frozen=True)
class MeasurementPattern:
    name: str
    pattern: Pattern
    unit: str


MEASUREMENT_PATTERNS: Tuple[MeasurementPattern, ...] = (
    # Ventricular function
    MeasurementPattern("LVEF", re.compile(r"\bLVEF" + _LINK + r"(?P<value>\d{1,2})\s*%", re.IGNORECASE), "%"),
    MeasurementPattern("RVEF", re.compile(r"\bRVEF" + _LINK + r"(?P<value>\d{1,2})\s*%", re.IGNORECASE), "%"),
    MeasurementPattern("GLS", re.compile(r"\bGLS" + _LINK + r"(?P<value>-?\d{1,2}(?:\.\d+)?)\s*%", re.IGNORECASE), "%"),
    MeasurementPattern("TAPSE", re.compile(r"\bTAPSE" + _LINK + r"(?P<value>\d{1,2}(?:\.\d+)?)\s*mm\b", re.IGNORECASE), "mm"),
    MeasurementPattern("E/e'", re.compile(r"\bE/e'" + _LINK + r"(?P<value>\d{1,2}(?:\.\d+)?)", re.IGNORECASE), ""),

    # Hemodynamics
    MeasurementPattern(
        "Blood Pressure",
        re.compile(
            r"\b(?:BP|blood pressure)" + _LINK + r"(?P<systolic>\d{2,3})\s*/\s*(?P<diastolic>\d{2,3})\b",
            re.IGNORECASE,
        ),
        "mmHg",
    ),
    MeasurementPattern(
        "Heart Rate",
        re.compile(r"\b(?:HR|heart rate)" + _LINK + r"(?P<value>\d{2,3})\b(?:\s*bpm)?", re.IGNORECASE),
        "bpm",
    ),
    MeasurementPattern("LVEDP", re.compile(r"\bLVEDP" + _LINK + r"(?P<value>\d{1,2})\s*mmHg", re.IGNORECASE), "mmHg"),
    MeasurementPattern("RVSP", re.compile(r"\bRVSP" + _LINK + r"(?P<value>\d{1,3})\s*mmHg", re.IGNORECASE), "mmHg"),

    # Valve gradients
    MeasurementPattern(
        "Mean Gradient",
        re.compile(r"\bmean gradient" + _LINK + r"(?P<value>\d{1,3}(?:\.\d+)?)\s*mmHg", re.IGNORECASE),
        "mmHg",
    ),
    MeasurementPattern(
        "Peak Gradient",
        re.compile(r"\bpeak gradient" + _LINK + r"(?P<value>\d{1,3}(?:\.\d+)?)\s*mmHg", re.IGNORECASE),
        "mmHg",
    ),
    MeasurementPattern(
        "Valve Area",
        re.compile(r"\bvalve area" + _LINK + r"(?P<value>\d(?:\.\d+)?)\s*cm(?:²|2)", re.IGNORECASE),
        "cm²",
    ),

    # Stenosis severity
    MeasurementPattern("Stenosis", re.compile(r"\b(?P<value>\d{2,3})\s*%\s+stenosis", re.IGNORECASE), "%"),

    # Dimensions
    MeasurementPattern("LVEDD", re.compile(r"\bLVEDD" + _LINK + r"(?P<value>\d{1,2}(?:\.\d+)?)\s*mm\b", re.IGNORECASE), "mm"),
    MeasurementPattern("LVESD", re.compile(r"\bLVESD" + _LINK + r"(?P<value>\d{1,2}(?:\.\d+)?)\s*mm\b", re.IGNORECASE), "mm"),
    MeasurementPattern("IVS", re.compile(r"\bIVS" + _LINK + r"(?P<value>\d{1,2}(?:\.\d+)?)\s*mm\b", re.IGNORECASE), "mm"),
)


def build_dose_pattern(drug_names) -> Pattern:
    """
    Pattern for "<drug> <dose> <unit>", e.g. "aspirin 100 mg", "metoprolol 12.5mg".

    Groups: drug, dose, unit.
    """
    drugs = "|".join(sorted(drug_names, key=len, reverse=True))
    units = "|".join(DOSE_UNITS)
    return re.compile(
        r"\b(?P<drug>" + drugs + r")\s+(?P<dose>\d+(?:\.\d+)?)\s*(?P<unit>" + units + r")\b",
        re.IGNORECASE,
    )
