"""Health & safety scoring engine.

No incident log exists in the source records, so open CARs stand in for
incidents and open observations for near misses. Work hours are estimated
from project duration (90 days when unknown) at 8 hours per day.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from datetime import date

from src.models.project import NormalizedProject
from src.scoring.arithmetic import (
    clamp,
    finite,
    mean,
    rate,
    round1,
    round2,
    total,
    weighted_sum,
)
from src.scoring.bands import Breakpoint, ScoreBand, classify, classify_breakpoint
from src.scoring.models import (
    AttentionEntry,
    ComplianceCheck,
    MonthlyProxyBucket,
    TrendBucket,
)
from src.scoring.ranking import rank_by_attention
from src.scoring.safety.config import KPI_DISTRIBUTION_RANGES, SafetyScoringConfig
from src.scoring.safety.models import (
    KPIDistributionSlice,
    ManagerSafetyStats,
    SafetyMetricsSummary,
    SafetyReport,
)
from src.scoring.trends import bucket_by_completion, bucket_by_position

logger = logging.getLogger(__name__)

UNKNOWN_MANAGER = "Unknown"


def incident_rate(
    incidents: float,
    work_hours: float,
    hours_base: float = 200_000.0,
) -> float:
    """OSHA-style incidents per ``hours_base`` work hours; 0 without hours."""
    if work_hours <= 0:
        return 0.0
    return finite(incidents * hours_base / work_hours)


class SafetyScorer:
    """Scores the health & safety domain of a project collection."""

    def __init__(self, config: SafetyScoringConfig | None = None) -> None:
        self._config = config or SafetyScoringConfig()

    @property
    def config(self) -> SafetyScoringConfig:
        return self._config

    # ---------------------------------------------------------------
    # Classification
    # ---------------------------------------------------------------

    def performance(self, score: float) -> ScoreBand:
        return classify(score, self._config.performance_bands)

    def risk_level(self, risk_score: float) -> Breakpoint:
        """Risk level for an unbounded risk score (breakpoint table)."""
        return classify_breakpoint(risk_score, self._config.risk_levels)

    # ---------------------------------------------------------------
    # Summary
    # ---------------------------------------------------------------

    def project_safety(self, project: NormalizedProject) -> float:
        """0.6 * kpi + 0.4 * completion"""
        return clamp(
            weighted_sum(
                {"kpi": project.kpi_percent, "completion": project.completion_percent},
                self._config.project_safety_weights,
            )
        )

    def summarize(self, projects: Sequence[NormalizedProject]) -> SafetyMetricsSummary:
        """Aggregate incident counts, OSHA rates and the composite score.

        safety_score = clamp(100 - 2 * IR - 3 * LTIR
                             - 20 * projects_with_incidents / total_projects)
        """
        if not projects:
            return SafetyMetricsSummary()

        cfg = self._config
        count = len(projects)
        total_incidents = total(p.cars_open for p in projects)
        near_misses = total(p.obs_open for p in projects)
        with_incidents = sum(1 for p in projects if p.open_issues > 0)

        total_work_days = sum(p.duration_days for p in projects)
        total_work_hours = total_work_days * cfg.hours_per_workday

        ir = incident_rate(total_incidents, total_work_hours, cfg.osha_hours_base)
        ltir = ir * cfg.lost_time_share

        if total_incidents == 0:
            days_without_incident = math.floor(total_work_days / count)
        else:
            days_without_incident = math.floor(
                total_work_days / max(total_incidents, 1)
            )

        exposure = [
            weighted_sum(
                {"open_issues": p.open_issues, "audit_delay_days": p.audit_delay_days},
                cfg.exposure_weights,
            )
            for p in projects
        ]

        safety_score = clamp(
            100.0
            - weighted_sum(
                {
                    "incident_rate": ir,
                    "lost_time_injury_rate": ltir,
                    "incident_project_share": with_incidents / count,
                },
                cfg.score_penalties,
            )
        )
        logger.debug(
            "Safety summary: %d projects, IR %.2f, score %.1f",
            count,
            ir,
            safety_score,
        )

        return SafetyMetricsSummary(
            total_projects=count,
            total_incidents=total_incidents,
            near_miss_count=near_misses,
            projects_with_incidents=with_incidents,
            projects_incident_free=count - with_incidents,
            total_work_days=total_work_days,
            total_work_hours=total_work_hours,
            incident_rate=round2(ir),
            lost_time_injury_rate=round2(ltir),
            days_without_incident=days_without_incident,
            avg_project_safety=round1(mean([self.project_safety(p) for p in projects])),
            avg_risk_score=round1(mean(exposure)),
            safety_score=round1(safety_score),
            performance=self.performance(safety_score),
        )

    # ---------------------------------------------------------------
    # Risk ranking
    # ---------------------------------------------------------------

    @staticmethod
    def _risk_signals(project: NormalizedProject) -> dict[str, float]:
        return {
            "open_incidents": project.cars_open,
            "near_misses": project.obs_open,
            "audit_delay_days": project.audit_delay_days,
            "kpi_shortfall": 100.0 - project.kpi_percent,
        }

    def risk_score(self, project: NormalizedProject) -> float:
        """open_incidents * 20 + near_misses * 5 + delay * 3 + (100 - kpi) * 0.8"""
        return weighted_sum(self._risk_signals(project), self._config.risk_weights)

    def enrich(self, projects: Sequence[NormalizedProject]) -> list[AttentionEntry]:
        """Attach risk score and risk level to every project, in input order."""
        entries = []
        for p in projects:
            score = self.risk_score(p)
            entries.append(
                AttentionEntry(
                    project=p,
                    score=score,
                    signals=self._risk_signals(p),
                    level=self.risk_level(score),
                )
            )
        return entries

    def high_risk_projects(
        self,
        projects: Sequence[NormalizedProject],
        limit: int = 5,
    ) -> list[AttentionEntry]:
        """Top ``limit`` projects whose risk score exceeds the significance bar."""
        return rank_by_attention(
            self.enrich(projects),
            limit,
            min_score=self._config.high_risk_min_score,
            levels=self._config.risk_levels,
        )

    def incident_severity(self, project: NormalizedProject) -> float:
        """Severity-weighted incident load (major injury vs near miss)."""
        return weighted_sum(
            {"open_incidents": project.cars_open, "near_misses": project.obs_open},
            self._config.severity_weights,
        )

    # ---------------------------------------------------------------
    # Charts and tables
    # ---------------------------------------------------------------

    def incident_trend(self, projects: Sequence[NormalizedProject]) -> list[TrendBucket]:
        return bucket_by_completion(
            projects,
            {
                "open_incidents": lambda p: p.cars_open,
                "near_misses": lambda p: p.obs_open,
                "resolved": lambda p: p.cars_closed,
            },
        )

    def kpi_distribution(
        self,
        projects: Sequence[NormalizedProject],
    ) -> list[KPIDistributionSlice]:
        """Project counts per KPI range, empty ranges dropped."""
        slices: list[KPIDistributionSlice] = []
        for label, low, high in KPI_DISTRIBUTION_RANGES:
            count = sum(1 for p in projects if low <= p.kpi_percent < high)
            if count == 0:
                continue
            slices.append(
                KPIDistributionSlice(
                    label=label,
                    count=count,
                    percentage=round(rate(count, len(projects))),
                )
            )
        return slices

    def by_manager(
        self,
        projects: Sequence[NormalizedProject],
        limit: int = 10,
    ) -> list[ManagerSafetyStats]:
        """Per-manager safety record, best first.

        Manager score = clamp(avg_kpi - 5 * incidents - 2 * near_misses).
        """
        groups: dict[str, list[NormalizedProject]] = {}
        for project in projects:
            groups.setdefault(project.project_manager or UNKNOWN_MANAGER, []).append(project)

        penalties = self._config.manager_penalties
        stats: list[ManagerSafetyStats] = []
        for name, members in groups.items():
            incidents = total(p.cars_open for p in members)
            near_misses = total(p.obs_open for p in members)
            avg_kpi = mean([p.kpi_percent for p in members])
            score = clamp(
                avg_kpi
                - weighted_sum(
                    {"incidents": incidents, "near_misses": near_misses}, penalties
                )
            )
            stats.append(
                ManagerSafetyStats(
                    name=name,
                    project_count=len(members),
                    total_incidents=incidents,
                    total_near_miss=near_misses,
                    avg_kpi=round1(avg_kpi),
                    incident_rate=round1(incidents / len(members)),
                    safety_score=score,
                )
            )

        stats.sort(key=lambda s: s.safety_score, reverse=True)
        return stats[: max(0, limit)]

    def checklist(
        self,
        projects: Sequence[NormalizedProject],
        as_of: date,
    ) -> list[ComplianceCheck]:
        """Weighted safety checklist compliance on ``as_of``."""
        kpi_pass = self._config.checklist_kpi_pass_pct
        items: list[tuple[str, float, Callable[[NormalizedProject], bool]]] = [
            ("Quality Plans Approved", 1, lambda p: p.quality_plan_status is not None),
            ("Audits Up to Date", 2, lambda p: p.audit_delay_days == 0),
            ("No Open Incidents", 3, lambda p: p.cars_open == 0),
            (f"KPI Above {kpi_pass:g}%", 2, lambda p: p.kpi_percent >= kpi_pass),
            (
                "Project On Schedule",
                1,
                lambda p: p.completion_percent >= 100
                or (p.closing_date is not None and p.closing_date > as_of),
            ),
        ]

        checks: list[ComplianceCheck] = []
        for name, weight, passes in items:
            compliant = sum(1 for p in projects if passes(p))
            rate_pct = clamp(rate(compliant, len(projects)))
            checks.append(
                ComplianceCheck(
                    name=name,
                    compliant_count=compliant,
                    total_count=len(projects),
                    compliance_rate=round1(rate_pct),
                    status=classify_breakpoint(rate_pct, self._config.checklist_levels),
                    weight=weight,
                )
            )
        return checks

    def monthly_trend(
        self,
        projects: Sequence[NormalizedProject],
        through: int | None = None,
    ) -> list[MonthlyProxyBucket]:
        """Positional proxy trend (index % 12); not real monthly data."""
        return bucket_by_position(
            projects,
            {
                "incidents": lambda p: p.cars_open,
                "near_misses": lambda p: p.obs_open,
                "safety_score": lambda p: p.kpi_percent,
            },
            through=through,
            empty_averages={"safety_score": self._config.empty_month_safety_score},
        )

    # ---------------------------------------------------------------
    # Report
    # ---------------------------------------------------------------

    def report(
        self,
        projects: Sequence[NormalizedProject],
        as_of: date,
        limit: int = 5,
        manager_limit: int = 10,
    ) -> SafetyReport:
        return SafetyReport(
            summary=self.summarize(projects),
            high_risk_projects=self.high_risk_projects(projects, limit),
            incident_trend=self.incident_trend(projects),
            kpi_distribution=self.kpi_distribution(projects),
            by_manager=self.by_manager(projects, manager_limit),
            checklist=self.checklist(projects, as_of),
            monthly_trend=self.monthly_trend(projects, through=as_of.month),
        )
