"""Quality domain output models."""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import Field

from src.models.common import AuditType, QHSEFrozen
from src.scoring.bands import Breakpoint, ScoreBand
from src.scoring.models import AttentionEntry, ComplianceCheck, TrendBucket


class AuditStatus(StrEnum):
    """Timeline status of a scheduled audit relative to ``as_of``."""

    COMPLETED = "COMPLETED"
    DUE_SOON = "DUE_SOON"
    SCHEDULED = "SCHEDULED"


class QualityMetricsSummary(QHSEFrozen):
    """Aggregate quality metrics over a project collection.

    Rates and the composite are percentages in [0, 100], rounded to one
    decimal. An empty collection yields all zeros and no bands.
    """

    total_projects: int = Field(default=0, ge=0)
    total_audits: int = Field(default=0, ge=0)
    completed_audits: int = Field(default=0, ge=0)
    delayed_audits: int = Field(default=0, ge=0)
    total_cars: float = 0.0
    open_cars: float = 0.0
    closed_cars: float = 0.0
    total_obs: float = 0.0
    open_obs: float = 0.0
    closed_obs: float = 0.0
    avg_kpi: float = Field(default=0.0, ge=0.0, le=100.0)
    avg_completion: float = Field(default=0.0, ge=0.0, le=100.0)
    compliance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    audit_on_time_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    performance: ScoreBand | None = None
    compliance_status: Breakpoint | None = None


class AuditEvent(QHSEFrozen):
    """One dated audit on the audit timeline."""

    project_no: str
    project_title: str
    audit_type: AuditType
    audit_number: int
    audit_date: date
    status: AuditStatus
    days_until: int
    is_past: bool


class QualityReport(QHSEFrozen):
    """Everything the quality dashboard renders."""

    summary: QualityMetricsSummary
    needs_attention: list[AttentionEntry] = Field(default_factory=list)
    nc_trend: list[TrendBucket] = Field(default_factory=list)
    audit_timeline: list[AuditEvent] = Field(default_factory=list)
    compliance_matrix: list[ComplianceCheck] = Field(default_factory=list)
