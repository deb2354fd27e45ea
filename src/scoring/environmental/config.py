"""Environmental scoring configuration and estimation model.

The source records carry no environmental measurements. Every resource
figure is estimated from ``manhours_used``, ``completion_percent`` and
open issues using the constants below (kg CO2e, kg waste, litres of water
and kWh per manhour). The constants are unverified domain assumptions and
are kept as named, overridable fields so a recalibration never touches the
formulas.
"""

from __future__ import annotations

from pydantic import Field, model_validator

from src.models.common import QHSEBase, QHSEFrozen
from src.scoring.bands import (
    Breakpoint,
    RiskLevel,
    ScoreBand,
    check_band_table,
    check_breakpoint_table,
)

ENVIRONMENTAL_PERFORMANCE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(
        key="EXCELLENT",
        label="Excellent",
        min=90,
        max=100,
        color="#10b981",
        icon="🌟",
        description="Outstanding environmental stewardship",
    ),
    ScoreBand(
        key="VERY_GOOD",
        label="Very Good",
        min=80,
        max=90,
        color="#22c55e",
        icon="🌱",
        description="Strong environmental practices",
    ),
    ScoreBand(
        key="GOOD",
        label="Good",
        min=70,
        max=80,
        color="#3b82f6",
        icon="♻️",
        description="Good environmental standards",
    ),
    ScoreBand(
        key="FAIR",
        label="Fair",
        min=55,
        max=70,
        color="#f59e0b",
        icon="⚠️",
        description="Needs improvement",
    ),
    ScoreBand(
        key="POOR",
        label="Poor",
        min=40,
        max=55,
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

# kg CO2e per project. A category applies from its threshold up to the
# next category's threshold (exclusive).
CARBON_CATEGORIES: tuple[Breakpoint, ...] = (
    Breakpoint(key="VERY_HIGH", label="Very High", threshold=60_000, color="#ef4444"),
    Breakpoint(key="HIGH", label="High", threshold=30_000, color="#f59e0b"),
    Breakpoint(key="MODERATE", label="Moderate", threshold=15_000, color="#3b82f6"),
    Breakpoint(key="LOW", label="Low", threshold=5_000, color="#22c55e"),
    Breakpoint(key="VERY_LOW", label="Very Low", threshold=0, color="#10b981"),
)

IMPACT_LEVELS: tuple[RiskLevel, ...] = (
    RiskLevel(
        key="VERY_HIGH",
        label="Very High",
        threshold=100,
        color="#dc2626",
        priority=1,
        action="Immediate mitigation plan required",
    ),
    RiskLevel(
        key="HIGH",
        label="High",
        threshold=50,
        color="#ef4444",
        priority=2,
        action="Reduce resource intensity",
    ),
    RiskLevel(
        key="MODERATE",
        label="Moderate",
        threshold=25,
        color="#f59e0b",
        priority=3,
        action="Monitor consumption",
    ),
    RiskLevel(
        key="LOW",
        label="Low",
        threshold=10,
        color="#3b82f6",
        priority=4,
        action="Maintain current practices",
    ),
    RiskLevel(
        key="VERY_LOW",
        label="Very Low",
        threshold=0,
        color="#10b981",
        priority=5,
        action="No action required",
    ),
)


class StandardDefinition(QHSEFrozen):
    """A compliance standard scored as the mean of summary fields."""

    key: str
    label: str
    description: str
    threshold: float
    score_fields: tuple[str, ...]


class WasteCategory(QHSEFrozen):
    key: str
    label: str
    color: str
    recyclable: bool
    share: float = Field(ge=0.0, le=1.0)


class SustainabilityGoal(QHSEFrozen):
    """A UN Sustainable Development Goal tracked on the dashboard."""

    key: str
    number: int
    label: str
    color: str
    target: float


COMPLIANCE_STANDARDS: tuple[StandardDefinition, ...] = (
    StandardDefinition(
        key="ISO_14001",
        label="ISO 14001:2015",
        description="Environmental Management Systems",
        threshold=85,
        score_fields=("environmental_score",),
    ),
    StandardDefinition(
        key="ISO_50001",
        label="ISO 50001:2018",
        description="Energy Management Systems",
        threshold=80,
        score_fields=("renewable_percentage",),
    ),
    StandardDefinition(
        key="LEED",
        label="LEED Certification",
        description="Leadership in Energy and Environmental Design",
        threshold=75,
        score_fields=("recycling_rate", "renewable_percentage"),
    ),
    StandardDefinition(
        key="BREEAM",
        label="BREEAM",
        description="Building Research Establishment Environmental Assessment",
        threshold=75,
        score_fields=("recycling_rate", "renewable_percentage"),
    ),
    StandardDefinition(
        key="LOCAL_REGULATIONS",
        label="Local Environmental Regulations",
        description="Regional compliance",
        threshold=95,
        score_fields=("compliance_rate",),
    ),
)

WASTE_CATEGORIES: tuple[WasteCategory, ...] = (
    WasteCategory(
        key="GENERAL",
        label="General Waste",
        color="#6b7280",
        recyclable=False,
        share=0.25,
    ),
    WasteCategory(
        key="RECYCLABLE",
        label="Recyclable",
        color="#10b981",
        recyclable=True,
        share=0.30,
    ),
    WasteCategory(
        key="HAZARDOUS",
        label="Hazardous",
        color="#ef4444",
        recyclable=False,
        share=0.05,
    ),
    WasteCategory(key="ELECTRONIC", label="E-Waste", color="#3b82f6", recyclable=True, share=0.10),
    WasteCategory(key="ORGANIC", label="Organic", color="#22c55e", recyclable=True, share=0.15),
    WasteCategory(
        key="CONSTRUCTION",
        label="Construction",
        color="#f59e0b",
        recyclable=True,
        share=0.15,
    ),
)

SUSTAINABILITY_GOALS: tuple[SustainabilityGoal, ...] = (
    SustainabilityGoal(
        key="SDG_7",
        number=7,
        label="Affordable and Clean Energy",
        color="#fcc30b",
        target=50,
    ),
    SustainabilityGoal(
        key="SDG_12",
        number=12,
        label="Responsible Consumption and Production",
        color="#bf8b2e",
        target=75,
    ),
    SustainabilityGoal(
        key="SDG_13",
        number=13,
        label="Climate Action",
        color="#3f7e44",
        target=100,
    ),
    SustainabilityGoal(
        key="SDG_6",
        number=6,
        label="Clean Water and Sanitation",
        color="#26bde2",
        target=95,
    ),
)


class EnvironmentalScoringConfig(QHSEBase):
    """Configuration for the environmental scorer."""

    # --- Estimation model (per manhour, scaled by completion) ---
    carbon_per_manhour: float = 50.0
    carbon_per_open_issue: float = 500.0
    waste_per_manhour: float = 5.0
    water_per_manhour: float = 100.0
    energy_per_manhour: float = 15.0
    recycled_waste_share: float = Field(default=0.65, ge=0.0, le=1.0)

    # (KPI strictly above, renewable share), walked in order.
    renewable_share_tiers: list[tuple[float, float]] = Field(
        default_factory=lambda: [(80.0, 0.40), (60.0, 0.25)],
    )
    renewable_share_floor: float = 0.15

    # --- Scores ---
    project_score_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "kpi": 0.4,
            "completion": 0.3,
            "open_issues": -2.0,
            "audit_delay_days": -0.5,
        },
    )
    compliance_delay_penalty: float = 0.5

    score_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "project_environmental": 0.3,
            "compliance": 0.25,
            "recycling": 0.2,
            "renewable": 0.15,
            "carbon": 0.1,
        },
    )
    sustainability_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "recycling": 0.3,
            "renewable": 0.3,
            "compliance": 0.25,
            "project_environmental": 0.15,
        },
    )
    # kg CO2e per project that costs one point of the carbon component.
    carbon_intensity_scale: float = Field(default=1000.0, gt=0)

    impact_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "carbon_emissions": 1 / 1000,
            "waste": 1 / 100,
            "water_usage": 1 / 10000,
            "environmental_score": -1.0,
        },
    )

    high_impact_carbon: float = 30_000.0
    compliant_kpi_pct: float = 80.0
    # Carbon budget the SDG 13 progress is measured against (kg CO2e).
    carbon_budget: float = 100_000.0
    # Average environmental score reported for an empty positional bucket.
    empty_month_env_score: float = 85.0

    performance_bands: tuple[ScoreBand, ...] = ENVIRONMENTAL_PERFORMANCE_BANDS
    carbon_categories: tuple[Breakpoint, ...] = CARBON_CATEGORIES
    impact_levels: tuple[RiskLevel, ...] = IMPACT_LEVELS
    compliance_standards: tuple[StandardDefinition, ...] = COMPLIANCE_STANDARDS
    waste_categories: tuple[WasteCategory, ...] = WASTE_CATEGORIES
    sustainability_goals: tuple[SustainabilityGoal, ...] = SUSTAINABILITY_GOALS

    @model_validator(mode="after")
    def _check_tables(self) -> EnvironmentalScoringConfig:
        problems = check_band_table(self.performance_bands)
        problems += check_breakpoint_table(self.carbon_categories)
        problems += check_breakpoint_table(self.impact_levels)
        for name in ("score_weights", "sustainability_weights"):
            if abs(sum(getattr(self, name).values()) - 1.0) > 1e-9:
                problems.append(f"{name} must sum to 1.0")
        if problems:
            raise ValueError("; ".join(problems))
        return self
