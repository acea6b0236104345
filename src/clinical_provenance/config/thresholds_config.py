# ============================================================================
# src/clinical_provenance/config/thresholds_config.py
# ============================================================================
"""
Scoring Thresholds
- Risk profile levels
- Verification rate rounding
- Source coverage and approval gates
- Hallucination risk warning
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

class ThresholdSettings(BaseSettings):
    RISK_HIGH_MIN_SCORE: int = Field(
        default=4,
        ge=1,
        description="Lowest risk score reported as 'high'. Any positive score below it is 'moderate', only 0 is 'low'."
    )
    RISK_VERY_HIGH_MIN_SCORE: int = Field(
        default=6,
        ge=1,
        description="Lowest risk score reported as 'very high'"
    )
    VERIFICATION_RATE_PRECISION: int = Field(
        default=1,
        ge=0,
        description="Decimal places kept in verification rate percentages"
    )
    SOURCE_COVERAGE_THRESHOLD: float = Field(
        default=80.0,
        ge=0.0, le=100.0,
        description="Minimum percentage of clinical statements with a nearby source anchor"
    )
    APPROVAL_MIN_VERIFICATION_RATE: float = Field(
        default=80.0,
        ge=0.0, le=100.0,
        description="Verification rate below which approval raises a warning"
    )
    HALLUCINATION_RISK_WARNING_SCORE: int = Field(
        default=70,
        ge=0, le=100,
        description="Hallucination risk score above which approval raises a warning"
    )

    @model_validator(mode="after")
    def check_risk_thresholds_ascending(self):
        if self.RISK_HIGH_MIN_SCORE > self.RISK_VERY_HIGH_MIN_SCORE:
            raise ValueError("Risk thresholds must be ascending: high <= very high")
        return self

threshold_settings = ThresholdSettings()
