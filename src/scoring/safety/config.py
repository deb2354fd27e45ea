"""Health & safety scoring configuration.

Holds the OSHA-style rate constants, score penalties, risk-score weights
and the band / risk-level tables for the safety domain.

Risk scores are unbounded above, so risk levels use a breakpoint table
rather than the [0, 100] performance bands.
"""

from __future__ import annotations

from pydantic import Field, model_validator

from src.models.common import QHSEBase
from src.scoring.bands import (
    Breakpoint,
    RiskLevel,
    ScoreBand,
    check_band_table,
    check_breakpoint_table,
)

SAFETY_PERFORMANCE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(
        key="EXCELLENT",
        label="Excellent",
        min=95,
        max=100,
        color="#10b981",
        icon="⭐",
        description="Outstanding safety record",
    ),
    ScoreBand(
        key="VERY_GOOD",
        label="Very Good",
        min=85,
        max=95,
        color="#3b82f6",
        icon="✅",
        description="Strong safety performance",
    ),
    ScoreBand(
        key="GOOD",
        label="Good",
        min=75,
        max=85,
        color="#22c55e",
        icon="👍",
        description="Good safety standards",
    ),
    ScoreBand(
        key="FAIR",
        label="Fair",
        min=60,
        max=75,
        color="#f59e0b",
        icon="⚠️",
        description="Needs improvement",
    ),
    ScoreBand(
        key="POOR",
        label="Poor",
        min=40,
        max=60,
        color="#ef4444",
        icon="❌",
        description="Significant concerns",
    ),
    ScoreBand(
        key="CRITICAL",
        label="Critical",
        min=0,
        max=40,
        color="#dc2626",
        icon="🚨",
        description="Immediate action required",
    ),
)

RISK_LEVELS: tuple[RiskLevel, ...] = (
    RiskLevel(
        key="VERY_HIGH",
        label="Very High",
        threshold=50,
        color="#7f1d1d",
        priority=1,
        action="Stop work immediately",
    ),
    RiskLevel(
        key="HIGH",
        label="High",
        threshold=30,
        color="#dc2626",
        priority=2,
        action="Immediate controls required",
    ),
    RiskLevel(
        key="MEDIUM",
        label="Medium",
        threshold=15,
        color="#f59e0b",
        priority=3,
        action="Implement controls soon",
    ),
    RiskLevel(
        key="LOW",
        label="Low",
        threshold=5,
        color="#3b82f6",
        priority=4,
        action="Monitor and review",
    ),
    RiskLevel(
        key="VERY_LOW",
        label="Very Low",
        threshold=0,
        color="#10b981",
        priority=5,
        action="Acceptable risk",
    ),
)

CHECKLIST_LEVELS: tuple[Breakpoint, ...] = (
    Breakpoint(key="EXCELLENT", label="excellent", threshold=90, color="#10b981"),
    Breakpoint(key="GOOD", label="good", threshold=75, color="#3b82f6"),
    Breakpoint(key="FAIR", label="fair", threshold=60, color="#f59e0b"),
    Breakpoint(key="POOR", label="poor", threshold=0, color="#ef4444"),
)

# (label, min, max) over KPI percent; the top range is widened past 100.
KPI_DISTRIBUTION_RANGES: tuple[tuple[str, float, float], ...] = (
    ("90-100%", 90, 101),
    ("75-89%", 75, 90),
    ("60-74%", 60, 75),
    ("40-59%", 40, 60),
    ("0-39%", 0, 40),
)


class SafetyScoringConfig(QHSEBase):
    """Configuration for the safety scorer."""

    hours_per_workday: float = Field(default=8.0, gt=0)
    # OSHA normalisation base: 100 full-time workers for one year.
    osha_hours_base: float = 200_000.0
    # Share of incidents assumed to cause lost time.
    lost_time_share: float = Field(default=0.3, ge=0.0, le=1.0)

    score_penalties: dict[str, float] = Field(
        default_factory=lambda: {
            "incident_rate": 2.0,
            "lost_time_injury_rate": 3.0,
            "incident_project_share": 20.0,
        },
    )

    project_safety_weights: dict[str, float] = Field(
        default_factory=lambda: {"kpi": 0.6, "completion": 0.4},
    )

    risk_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "open_incidents": 20.0,
            "near_misses": 5.0,
            "audit_delay_days": 3.0,
            "kpi_shortfall": 0.8,
        },
    )

    # Coarse per-project exposure averaged into the summary.
    exposure_weights: dict[str, float] = Field(
        default_factory=lambda: {"open_issues": 5.0, "audit_delay_days": 2.0},
    )

    # Only risk scores strictly above this rank as high risk.
    high_risk_min_score: float = 10.0

    severity_weights: dict[str, float] = Field(
        default_factory=lambda: {"open_incidents": 100.0, "near_misses": 1.0},
    )

    manager_penalties: dict[str, float] = Field(
        default_factory=lambda: {"incidents": 5.0, "near_misses": 2.0},
    )

    checklist_kpi_pass_pct: float = 80.0

    # Average KPI reported for a positional bucket with no projects.
    empty_month_safety_score: float = 95.0

    performance_bands: tuple[ScoreBand, ...] = SAFETY_PERFORMANCE_BANDS
    risk_levels: tuple[RiskLevel, ...] = RISK_LEVELS
    checklist_levels: tuple[Breakpoint, ...] = CHECKLIST_LEVELS

    @model_validator(mode="after")
    def _check_tables(self) -> SafetyScoringConfig:
        problems = check_band_table(self.performance_bands)
        problems += check_breakpoint_table(self.risk_levels)
        problems += check_breakpoint_table(self.checklist_levels)
        if problems:
            raise ValueError("; ".join(problems))
        return self
