# ============================================================================
# src/clinical_provenance/analysis/hallucination.py
# ============================================================================
"""
Hallucination Detector

Flags letter statements that lack provenance:
1. Extracted values without a source anchor
2. Vessel-specific angiogram findings without a citing anchor
3. Stent size specifications without a citing anchor
4. With source material available:
   - Referring doctor names absent from the sources
   - Explicit dates absent from the sources
   - Medication changes absent from the sources
   - Patient history details absent from the sources

Flags support review; they do not judge clinical correctness.
"""

import re
from typing import Dict, List, Optional, Sequence
import logging

from ..core.context.clinical_value import ClinicalValue
from ..core.context.enums import FlagSeverity, HallucinationRiskLevel, ValueType
from ..core.context.hallucination_flag import (
    ApprovalRecommendation,
    HallucinationFlag,
    HallucinationRisk,
)
from ..core.context.source_anchor import SourceAnchor
from ..core.context.sources import LetterSources
from ..utils.text_matching import contains_text

logger = logging.getLogger(__name__)


REFERRING_DOCTOR_PATTERN = re.compile(r"(?:dear|from)\s+dr\.?\s+([a-z]+)", re.IGNORECASE)
DATE_PATTERN = re.compile(
    r"\b(\d{1,2}\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}|\d{1,2}/\d{1,2}/\d{4})\b",
    re.IGNORECASE,
)
VESSEL_FINDING_PATTERN = re.compile(r"\b(LMCA|LAD|LCx|RCA|D1|D2|OM1|OM2)\s+[^.]+?(\d+%)", re.IGNORECASE)
MEDICATION_CHANGE_PATTERN = re.compile(
    r"(?:started|commenced|increased|decreased|ceased)\s+([a-z]+)\s+(\d+\.?\d*\s*mg)",
    re.IGNORECASE,
)
STENT_SIZE_PATTERN = re.compile(r"(\d+\.?\d*)\s*(?:x|×)\s*(\d+)\s*mm\s+stent", re.IGNORECASE)
HISTORY_PATTERN = re.compile(r"(?:history of|previous|prior)\s+([^.,]{10,50})", re.IGNORECASE)

# Distances (characters) within which an anchor counts as citing a statement
VESSEL_ANCHOR_DISTANCE = 200
STENT_ANCHOR_DISTANCE = 200
DATE_ANCHOR_DISTANCE = 100
HISTORY_ANCHOR_DISTANCE = 150

# Shorter history details are too generic to check
MIN_HISTORY_DETAIL_LENGTH = 15

# Risk scoring
CRITICAL_FLAG_POINTS = 30
WARNING_FLAG_POINTS = 10
MAX_RISK_SCORE = 100


class HallucinationDetector:
    """
    Runs provenance checks over one letter and collects flags.

    Flag ids are "hallucination-<n>" in detection order.
    """

    def __init__(
        self,
        letter_text: str,
        anchors: Sequence[SourceAnchor],
        sources: Optional[LetterSources] = None,
    ):
        self.letter_text = letter_text
        self.anchors = list(anchors)
        self.sources = sources
        self._source_texts = sources.searchable_texts() if sources else []
        self.flags: List[HallucinationFlag] = []

    def detect(self, values: Sequence[ClinicalValue]) -> List[HallucinationFlag]:
        self.check_unsourced_values(values)
        self.check_vessel_findings()
        self.check_stent_sizes()

        if self.sources is not None:
            self.check_referring_doctors()
            self.check_dates()
            self.check_medication_changes()
            self.check_history_details()

        critical = sum(1 for f in self.flags if f.severity == FlagSeverity.CRITICAL)
        logger.info(
            f"Hallucination detection complete: {len(self.flags)} flags "
            f"({critical} critical, {len(self.flags) - critical} warning)"
        )
        return self.flags

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def check_unsourced_values(self, values: Sequence[ClinicalValue]):
        for value in values:
            if value.source_anchor_id is not None:
                continue

            span = self._locate_value(value)
            if span is None:
                continue

            start, end = span
            severity = FlagSeverity.CRITICAL if value.type == ValueType.MEASUREMENT else FlagSeverity.WARNING
            self._flag(
                self.letter_text[start:end], start, end,
                f"Clinical {value.type.value} lacks source citation",
                severity,
            )

    def check_vessel_findings(self):
        for match in VESSEL_FINDING_PATTERN.finditer(self.letter_text):
            vessel = match.group(1)
            cited = any(
                abs(a.start_index - match.start()) < VESSEL_ANCHOR_DISTANCE
                and contains_text(a.source_excerpt, vessel)
                for a in self.anchors
            )
            if not cited:
                self._flag_match(match, f"Vessel finding for {vessel} lacks source citation", FlagSeverity.CRITICAL)

    def check_stent_sizes(self):
        for match in STENT_SIZE_PATTERN.finditer(self.letter_text):
            diameter, length = match.group(1), match.group(2)
            cited = any(
                abs(a.start_index - match.start()) < STENT_ANCHOR_DISTANCE
                and (diameter in a.source_excerpt or length in a.source_excerpt)
                for a in self.anchors
            )
            if not cited:
                self._flag_match(match, "Stent size specification lacks source citation", FlagSeverity.CRITICAL)

    def check_referring_doctors(self):
        for match in REFERRING_DOCTOR_PATTERN.finditer(self.letter_text):
            name = match.group(1)
            if not self._in_sources(name):
                self._flag_match(
                    match, f'Referring doctor name "{name}" not found in sources', FlagSeverity.WARNING
                )

    def check_dates(self):
        for match in DATE_PATTERN.finditer(self.letter_text):
            date = match.group(1)
            if self._in_sources(date) or self._near_anchor(match.start(), DATE_ANCHOR_DISTANCE):
                continue
            self._flag_match(match, f'Specific date "{date}" not found in sources', FlagSeverity.WARNING)

    def check_medication_changes(self):
        for match in MEDICATION_CHANGE_PATTERN.finditer(self.letter_text):
            medication, dose = match.group(1), match.group(2)
            if self._in_sources(medication) and self._in_sources(dose):
                continue
            self._flag_match(
                match, f'Medication change "{medication} {dose}" not found in sources', FlagSeverity.CRITICAL
            )

    def check_history_details(self):
        for match in HISTORY_PATTERN.finditer(self.letter_text):
            detail = match.group(1).strip()
            if len(detail) < MIN_HISTORY_DETAIL_LENGTH:
                continue
            if self._near_anchor(match.start(), HISTORY_ANCHOR_DISTANCE) or self._in_sources(detail):
                continue
            self._flag_match(match, "Patient history detail lacks source citation", FlagSeverity.WARNING)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locate_value(self, value: ClinicalValue):
        """(start, end) of a value's text in the letter, or None."""
        if value.start_index is not None:
            start = value.start_index
            value_pos = self.letter_text.find(value.value, start)
            end = value_pos + len(value.value) if value_pos != -1 else start + len(value.value)
            if value.unit and self.letter_text[end:end + len(value.unit)].lower() == value.unit.lower():
                end += len(value.unit)
            return start, min(end, len(self.letter_text))

        label = f"{value.name} {value.value}{value.unit or ''}"
        start = self.letter_text.find(label)
        if start == -1:
            return None
        return start, start + len(label)

    def _in_sources(self, text: str) -> bool:
        return any(contains_text(source, text) for source in self._source_texts)

    def _near_anchor(self, position: int, distance: int) -> bool:
        return any(abs(a.start_index - position) < distance for a in self.anchors)

    def _flag_match(self, match, reason: str, severity: FlagSeverity):
        self._flag(match.group(0), match.start(), match.end(), reason, severity)

    def _flag(self, segment: str, start: int, end: int, reason: str, severity: FlagSeverity):
        self.flags.append(HallucinationFlag(
            id=f"hallucination-{len(self.flags)}",
            segment_text=segment,
            start_index=start,
            end_index=end,
            reason=reason,
            severity=severity,
        ))


def detect_hallucinations(
    letter_text: str,
    anchors: Sequence[SourceAnchor],
    values: Sequence[ClinicalValue],
    sources: Optional[LetterSources] = None,
) -> List[HallucinationFlag]:
    """
    Flag letter statements lacking provenance.

    Args:
        letter_text: Letter text the values and anchors refer to
        anchors: Source anchors located in the letter
        values: Extracted (and linked) clinical values
        sources: Source material; enables the source-content checks

    Returns:
        Flags in detection order
    """
    return HallucinationDetector(letter_text, anchors, sources).detect(values)


def group_flags_by_severity(flags: Sequence[HallucinationFlag]) -> Dict[str, List[HallucinationFlag]]:
    """Undismissed flags keyed "critical" and "warning"."""
    return {
        FlagSeverity.CRITICAL.value: [f for f in flags if f.severity == FlagSeverity.CRITICAL and not f.dismissed],
        FlagSeverity.WARNING.value: [f for f in flags if f.severity == FlagSeverity.WARNING and not f.dismissed],
    }


def calculate_hallucination_risk(flags: Sequence[HallucinationFlag]) -> HallucinationRisk:
    """
    0-100 score from undismissed flags: 30 per critical, 10 per warning.
    """
    grouped = group_flags_by_severity(flags)
    critical_count = len(grouped["critical"])
    warning_count = len(grouped["warning"])

    score = min(critical_count * CRITICAL_FLAG_POINTS + warning_count * WARNING_FLAG_POINTS, MAX_RISK_SCORE)

    if score >= 60 or critical_count >= 3:
        level = HallucinationRiskLevel.CRITICAL
    elif score >= 40 or critical_count >= 2:
        level = HallucinationRiskLevel.HIGH
    elif score >= 20 or critical_count >= 1:
        level = HallucinationRiskLevel.MEDIUM
    else:
        level = HallucinationRiskLevel.LOW

    return HallucinationRisk(
        score=score,
        level=level,
        flag_count=len(flags),
        critical_count=critical_count,
    )


def generate_hallucination_report(flags: Sequence[HallucinationFlag]) -> str:
    if not flags:
        return "No potential hallucinations detected. All clinical statements are sourced."

    risk = calculate_hallucination_risk(flags)
    grouped = group_flags_by_severity(flags)

    lines = [f"Hallucination Risk: {risk.level.value.upper()} (score: {risk.score}/100)", ""]

    if grouped["critical"]:
        lines.append(f"Critical Flags ({len(grouped['critical'])}):")
        lines.extend(f'- {f.reason}: "{f.segment_text[:50]}..."' for f in grouped["critical"])
        lines.append("")

    if grouped["warning"]:
        lines.append(f"Warnings ({len(grouped['warning'])}):")
        lines.extend(f'- {f.reason}: "{f.segment_text[:50]}..."' for f in grouped["warning"])

    return "\n".join(lines).rstrip() + "\n"


def recommend_approval(flags: Sequence[HallucinationFlag]) -> ApprovalRecommendation:
    """Approval advice from the hallucination risk level."""
    risk = calculate_hallucination_risk(flags)

    if risk.level == HallucinationRiskLevel.CRITICAL:
        return ApprovalRecommendation(
            should_approve=False,
            reason=f"{risk.critical_count} critical hallucination(s) detected",
            action_required="Review and correct all critical flags before approval",
        )
    if risk.level == HallucinationRiskLevel.HIGH:
        return ApprovalRecommendation(
            should_approve=False,
            reason=f"High hallucination risk (score: {risk.score})",
            action_required="Review all flagged sections and verify against sources",
        )
    if risk.level == HallucinationRiskLevel.MEDIUM:
        return ApprovalRecommendation(
            should_approve=True,
            reason="Moderate hallucination risk, manual review recommended",
            action_required="Review flagged sections before final approval",
        )
    return ApprovalRecommendation(
        should_approve=True,
        reason="Low hallucination risk",
        action_required="Perform standard review",
    )
