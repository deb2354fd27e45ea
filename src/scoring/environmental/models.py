"""Environmental domain output models."""

from __future__ import annotations

from pydantic import Field

from src.models.common import QHSEFrozen
from src.scoring.bands import Breakpoint, ScoreBand
from src.scoring.models import (
    AttentionEntry,
    ComplianceStandard,
    MonthlyProxyBucket,
    TrendBucket,
)


class ResourceEstimate(QHSEFrozen):
    """Estimated resource burden of one project.

    Units: kg CO2e, kg waste, litres of water, kWh of energy.
    """

    carbon_emissions: float
    waste: float
    recycled_waste: float
    water_usage: float
    energy_usage: float
    renewable_energy: float
    renewable_share: float


class EnvironmentalMetricsSummary(QHSEFrozen):
    """Aggregate environmental metrics over a project collection.

    All resource totals are estimates. An empty collection yields all
    zeros and no bands.
    """

    total_projects: int = Field(default=0, ge=0)
    high_impact_projects: int = Field(default=0, ge=0)
    compliant_projects: int = Field(default=0, ge=0)
    environmental_score: float = Field(default=0.0, ge=0.0, le=100.0)
    sustainability_score: float = Field(default=0.0, ge=0.0, le=100.0)
    avg_project_environmental_score: float = Field(default=0.0, ge=0.0, le=100.0)
    total_carbon_emissions: float = 0.0
    carbon_per_project: float = 0.0
    carbon_category: Breakpoint | None = None
    total_waste: float = 0.0
    recycled_waste: float = 0.0
    recycling_rate: float = 0.0
    total_water_usage: float = 0.0
    water_per_project: float = 0.0
    total_energy_usage: float = 0.0
    renewable_energy: float = 0.0
    renewable_percentage: float = 0.0
    compliance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    performance: ScoreBand | None = None


class WasteSlice(QHSEFrozen):
    """Estimated waste in one waste category."""

    key: str
    label: str
    amount: float
    percentage: float
    recyclable: bool
    color: str


class SustainabilityGoalProgress(QHSEFrozen):
    key: str
    number: int
    label: str
    color: str
    progress: float
    target: float
    description: str


class EnvironmentalReport(QHSEFrozen):
    """Everything the environmental dashboard renders."""

    summary: EnvironmentalMetricsSummary
    high_impact_projects: list[AttentionEntry] = Field(default_factory=list)
    carbon_trend: list[TrendBucket] = Field(default_factory=list)
    resource_trend: list[TrendBucket] = Field(default_factory=list)
    waste_breakdown: list[WasteSlice] = Field(default_factory=list)
    sustainability_progress: list[SustainabilityGoalProgress] = Field(default_factory=list)
    compliance_standards: list[ComplianceStandard] = Field(default_factory=list)
    monthly_trend: list[MonthlyProxyBucket] = Field(default_factory=list)
