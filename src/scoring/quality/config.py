"""Quality scoring configuration.

Holds the composite weights, attention-score weights and the closed band
tables for the quality domain. Defaults reproduce the dashboard reports;
every value can be overridden per call.
"""

from __future__ import annotations

from pydantic import Field, model_validator

from src.models.common import QHSEBase
from src.scoring.bands import (
    Breakpoint,
    ScoreBand,
    check_band_table,
    check_breakpoint_table,
)

QUALITY_PERFORMANCE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(key="EXCELLENT", label="Excellent", min=95, max=100, color="#10b981", icon="🌟"),
    ScoreBand(key="GOOD", label="Good", min=85, max=95, color="#3b82f6", icon="👍"),
    ScoreBand(key="FAIR", label="Fair", min=70, max=85, color="#f59e0b", icon="⚠️"),
    ScoreBand(key="POOR", label="Poor", min=50, max=70, color="#ef4444", icon="❌"),
    ScoreBand(key="CRITICAL", label="Critical", min=0, max=50, color="#dc2626", icon="🚨"),
)

COMPLIANCE_LEVELS: tuple[Breakpoint, ...] = (
    Breakpoint(key="COMPLIANT", label="Compliant", threshold=95, color="#10b981"),
    Breakpoint(key="MOSTLY_COMPLIANT", label="Mostly Compliant", threshold=85, color="#3b82f6"),
    Breakpoint(
        key="PARTIALLY_COMPLIANT",
        label="Partially Compliant",
        threshold=70,
        color="#f59e0b",
    ),
    Breakpoint(key="NON_COMPLIANT", label="Non-Compliant", threshold=0, color="#ef4444"),
)


class QualityScoringConfig(QHSEBase):
    """Configuration for the quality scorer."""

    score_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "kpi": 0.4,
            "compliance": 0.3,
            "completion": 0.2,
            "audit_on_time": 0.1,
        },
    )

    attention_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "open_issues": 5.0,
            "audit_delay_days": 2.0,
            "kpi_shortfall": 0.5,
        },
    )

    # None ranks every project; quality applies no significance filter.
    attention_min_score: float | None = None

    # Per-project pass mark for the CAR and KPI compliance-matrix rows.
    matrix_pass_pct: float = 80.0

    # Upcoming audits within this many days are DUE_SOON.
    due_soon_days: int = 7

    performance_bands: tuple[ScoreBand, ...] = QUALITY_PERFORMANCE_BANDS
    compliance_levels: tuple[Breakpoint, ...] = COMPLIANCE_LEVELS

    @model_validator(mode="after")
    def _check_tables(self) -> QualityScoringConfig:
        problems = check_band_table(self.performance_bands)
        problems += check_breakpoint_table(self.compliance_levels)
        if abs(sum(self.score_weights.values()) - 1.0) > 1e-9:
            problems.append("score_weights must sum to 1.0")
        if problems:
            raise ValueError("; ".join(problems))
        return self
