# ============================================================================
# TEST: Configuration and Setup
# ============================================================================

import pydantic
import pytest

from clinical_provenance.config import (
    base_settings,
    linking_settings,
    logging_settings,
    threshold_settings,
)
from clinical_provenance.config.linking_config import LinkingSettings
from clinical_provenance.config.thresholds_config import ThresholdSettings
from clinical_provenance.analysis.risk_profile import risk_level_for_score
from clinical_provenance.core.context.enums import RiskLevel


def test_configuration():
    """Test that configuration loads correctly"""
    print("=" * 70)
    print("TEST: Configuration Loading")
    print("=" * 70)

    print(f"✓ Configuration loaded successfully")
    print(f"  - Taxonomy: {base_settings.get_taxonomy_path()}")
    print(f"  - Proximity window: {linking_settings.ANCHOR_PROXIMITY_WINDOW}")
    print(f"  - Coverage threshold: {threshold_settings.SOURCE_COVERAGE_THRESHOLD}")

    assert base_settings.get_taxonomy_path().is_file()
    assert linking_settings.ANCHOR_PROXIMITY_WINDOW == 200
    assert linking_settings.ANCHOR_SIMILARITY_THRESHOLD == 0.7
    assert (
        threshold_settings.RISK_HIGH_MIN_SCORE,
        threshold_settings.RISK_VERY_HIGH_MIN_SCORE,
    ) == (4, 6)
    assert threshold_settings.VERIFICATION_RATE_PRECISION == 1
    assert logging_settings.LOG_LEVEL == "INFO"


def test_risk_thresholds_must_ascend():
    with pytest.raises(ValueError):
        ThresholdSettings(RISK_HIGH_MIN_SCORE=10)


def test_low_risk_only_for_zero_score(monkeypatch):
    """The moderate boundary is fixed at 1; the environment cannot move it"""
    monkeypatch.setenv("RISK_MODERATE_MIN_SCORE", "2")

    assert not hasattr(ThresholdSettings(), "RISK_MODERATE_MIN_SCORE")
    assert risk_level_for_score(1) == RiskLevel.MODERATE
    assert risk_level_for_score(0) == RiskLevel.LOW


def test_negative_window_rejected():
    with pytest.raises(pydantic.ValidationError):
        LinkingSettings(ANCHOR_PROXIMITY_WINDOW=-1)


def test_similarity_threshold_bounded():
    with pytest.raises(pydantic.ValidationError):
        LinkingSettings(ANCHOR_SIMILARITY_THRESHOLD=1.5)


def test_environment_override(monkeypatch):
    monkeypatch.setenv("ANCHOR_PROXIMITY_WINDOW", "50")
    monkeypatch.setenv("SOURCE_COVERAGE_THRESHOLD", "90")

    assert LinkingSettings().ANCHOR_PROXIMITY_WINDOW == 50
    assert ThresholdSettings().SOURCE_COVERAGE_THRESHOLD == 90.0
