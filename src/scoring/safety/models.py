"""Health & safety domain output models."""

from __future__ import annotations

from pydantic import Field

from src.models.common import QHSEFrozen
from src.scoring.bands import ScoreBand
from src.scoring.models import (
    AttentionEntry,
    ComplianceCheck,
    MonthlyProxyBucket,
    TrendBucket,
)


class SafetyMetricsSummary(QHSEFrozen):
    """Aggregate safety metrics over a project collection.

    Open CARs are read as incidents and open observations as near misses.
    Work hours are estimated from each project's duration. An empty
    collection yields all zeros and no performance band.
    """

    total_projects: int = Field(default=0, ge=0)
    total_incidents: float = 0.0
    near_miss_count: float = 0.0
    projects_with_incidents: int = Field(default=0, ge=0)
    projects_incident_free: int = Field(default=0, ge=0)
    total_work_days: int = Field(default=0, ge=0)
    total_work_hours: float = Field(default=0.0, ge=0.0)
    incident_rate: float = 0.0
    lost_time_injury_rate: float = 0.0
    days_without_incident: int = 0
    avg_project_safety: float = Field(default=0.0, ge=0.0, le=100.0)
    avg_risk_score: float = 0.0
    safety_score: float = Field(default=0.0, ge=0.0, le=100.0)
    performance: ScoreBand | None = None


class KPIDistributionSlice(QHSEFrozen):
    """Number and share of projects in one KPI range."""

    label: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0.0, le=100.0)


class ManagerSafetyStats(QHSEFrozen):
    """Safety record of all projects run by one manager."""

    name: str
    project_count: int = Field(ge=1)
    total_incidents: float
    total_near_miss: float
    avg_kpi: float = Field(ge=0.0, le=100.0)
    incident_rate: float
    safety_score: float = Field(ge=0.0, le=100.0)


class SafetyReport(QHSEFrozen):
    """Everything the health & safety dashboard renders."""

    summary: SafetyMetricsSummary
    high_risk_projects: list[AttentionEntry] = Field(default_factory=list)
    incident_trend: list[TrendBucket] = Field(default_factory=list)
    kpi_distribution: list[KPIDistributionSlice] = Field(default_factory=list)
    by_manager: list[ManagerSafetyStats] = Field(default_factory=list)
    checklist: list[ComplianceCheck] = Field(default_factory=list)
    monthly_trend: list[MonthlyProxyBucket] = Field(default_factory=list)
