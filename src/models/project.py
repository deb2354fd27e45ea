"""Project record models: the raw REST payload and its normalised form.

``ProjectRecord`` mirrors the untrusted ``/qhse/projects/`` payload: every
field is optional and untyped. ``NormalizedProject`` is the strictly-typed
value produced by :mod:`src.scoring.normalizer`; scorers only ever see the
latter.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import ConfigDict, Field

from src.models.common import AuditType, QHSEBase, QHSEFrozen
from src.scoring.arithmetic import finite

# Fallback span for duration-dependent computations (work hours).
DEFAULT_PROJECT_DAYS = 90


class ProjectRecord(QHSEBase):
    """Raw project record as supplied by the REST collaborator.

    No field is guaranteed present or correctly typed. Unknown keys are
    kept so callers can round-trip the payload.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    project_no: Any = Field(default=None, alias="projectNo")
    project_title: Any = Field(default=None, alias="projectTitle")
    project_manager: Any = Field(default=None, alias="projectManager")
    project_starting_date: Any = Field(default=None, alias="projectStartingDate")
    project_closing_date: Any = Field(default=None, alias="projectClosingDate")
    project_kpis_achieved_percent: Any = Field(
        default=None, alias="projectKPIsAchievedPercent"
    )
    project_completion_percent: Any = Field(
        default=None, alias="projectCompletionPercent"
    )
    project_quality_plan_status_rev: Any = Field(
        default=None, alias="projectQualityPlanStatusRev"
    )
    cars_open: Any = Field(default=None, alias="carsOpen")
    cars_closed: Any = Field(default=None, alias="carsClosed")
    obs_open: Any = Field(default=None, alias="obsOpen")
    obs_closed: Any = Field(default=None, alias="obsClosed")
    manhours_used: Any = Field(default=None, alias="manhoursUsed")
    delay_in_audits_no_days: Any = Field(default=None, alias="delayInAuditsNoDays")
    project_audit_1: Any = Field(default=None, alias="projectAudit1")
    project_audit_2: Any = Field(default=None, alias="projectAudit2")
    project_audit_3: Any = Field(default=None, alias="projectAudit3")
    project_audit_4: Any = Field(default=None, alias="projectAudit4")
    client_audit_1: Any = Field(default=None, alias="clientAudit1")
    client_audit_2: Any = Field(default=None, alias="clientAudit2")

    def audit_slots(self) -> list[tuple[AuditType, int, Any]]:
        """Return the six fixed audit slots as (type, number, raw value)."""
        return [
            (AuditType.PROJECT, 1, self.project_audit_1),
            (AuditType.PROJECT, 2, self.project_audit_2),
            (AuditType.PROJECT, 3, self.project_audit_3),
            (AuditType.PROJECT, 4, self.project_audit_4),
            (AuditType.CLIENT, 1, self.client_audit_1),
            (AuditType.CLIENT, 2, self.client_audit_2),
        ]


class AuditSlot(QHSEFrozen):
    """A populated audit slot. ``audit_date`` is None when unparseable."""

    audit_type: AuditType
    number: int
    raw: str
    audit_date: date | None = None


class NormalizedProject(QHSEFrozen):
    """Project with every numeric, percentage and date field resolved.

    Percentages are clamped to [0, 100]; counts are finite floats that
    default to 0; dates are ``None`` when absent or invalid.
    """

    project_no: str = ""
    project_title: str = ""
    project_manager: str = ""
    starting_date: date | None = None
    closing_date: date | None = None
    kpi_percent: float = Field(default=0.0, ge=0.0, le=100.0)
    completion_percent: float = Field(default=0.0, ge=0.0, le=100.0)
    cars_open: float = 0.0
    cars_closed: float = 0.0
    obs_open: float = 0.0
    obs_closed: float = 0.0
    manhours_used: float = 0.0
    audit_delay_days: float = 0.0
    quality_plan_status: str | None = None
    audits: tuple[AuditSlot, ...] = ()
    duration_days: int = DEFAULT_PROJECT_DAYS

    @property
    def open_issues(self) -> float:
        return finite(self.cars_open + self.obs_open)

    @property
    def closed_issues(self) -> float:
        return finite(self.cars_closed + self.obs_closed)

    @property
    def total_issues(self) -> float:
        return finite(self.open_issues + self.closed_issues)

    @property
    def audit_count(self) -> int:
        return len(self.audits)

    @property
    def has_audit_delay(self) -> bool:
        return self.audit_delay_days > 0
