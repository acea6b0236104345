# ============================================================================
# src/clinical_provenance/config/logging_config.py
# ============================================================================
"""
Logging & Monitoring Settings
- Log level
- JSON output
- Metrics collection
"""

from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings

class LoggingSettings(BaseSettings):
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit log records as JSON lines"
    )
    LOG_FILE: Optional[Path] = Field(
        default=None,
        description="Optional log file in addition to stdout"
    )
    ENABLE_METRICS: bool = Field(
        default=True,
        description="Record extraction counters and timings"
    )

logging_settings = LoggingSettings()
