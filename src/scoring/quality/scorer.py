"""Quality scoring engine — audits, CARs/observations and composite score.

Works on normalised projects only; see :mod:`src.scoring.normalizer`.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date

from src.models.project import NormalizedProject
from src.scoring.arithmetic import (
    clamp,
    finite,
    mean,
    rate,
    round1,
    total,
    weighted_sum,
)
from src.scoring.bands import Breakpoint, ScoreBand, classify, classify_breakpoint
from src.scoring.models import AttentionEntry, ComplianceCheck, TrendBucket
from src.scoring.quality.config import QualityScoringConfig
from src.scoring.quality.models import (
    AuditEvent,
    AuditStatus,
    QualityMetricsSummary,
    QualityReport,
)
from src.scoring.ranking import rank_by_attention
from src.scoring.trends import bucket_by_completion

logger = logging.getLogger(__name__)


def compliance_rate(resolved: float, total: float) -> float:
    """Resolved share of all issues; no issues at all counts as 100."""
    return rate(resolved, total, when_empty=100.0)


def audit_on_time_rate(total_audits: int, delayed_audits: int) -> float:
    """Share of audits not delayed; no audits counts as 100."""
    return clamp(rate(total_audits - delayed_audits, total_audits, when_empty=100.0))


class QualityScorer:
    """Scores the quality domain of a project collection.

    ``summarize`` produces the domain ``QualityMetricsSummary``; ``enrich``
    and ``needs_attention`` produce per-project attention entries. The
    remaining methods build chart and table data for the dashboard.
    """

    def __init__(self, config: QualityScoringConfig | None = None) -> None:
        self._config = config or QualityScoringConfig()

    @property
    def config(self) -> QualityScoringConfig:
        return self._config

    # ---------------------------------------------------------------
    # Classification
    # ---------------------------------------------------------------

    def performance(self, score: float) -> ScoreBand:
        return classify(score, self._config.performance_bands)

    def compliance_status(self, rate_pct: float) -> Breakpoint:
        return classify_breakpoint(rate_pct, self._config.compliance_levels)

    # ---------------------------------------------------------------
    # Summary
    # ---------------------------------------------------------------

    def summarize(self, projects: Sequence[NormalizedProject]) -> QualityMetricsSummary:
        """Aggregate audit, issue, KPI and completion metrics.

        Composite:
            0.4 * avg_kpi + 0.3 * compliance_rate
            + 0.2 * avg_completion + 0.1 * audit_on_time_rate

        ``avg_kpi`` only averages projects that report a KPI (> 0).
        """
        if not projects:
            return QualityMetricsSummary()

        total_audits = sum(p.audit_count for p in projects)
        delayed_audits = sum(1 for p in projects if p.has_audit_delay)

        open_cars = total(p.cars_open for p in projects)
        closed_cars = total(p.cars_closed for p in projects)
        open_obs = total(p.obs_open for p in projects)
        closed_obs = total(p.obs_closed for p in projects)

        total_issues = finite(open_cars + closed_cars + open_obs + closed_obs)
        compliance = clamp(
            compliance_rate(finite(closed_cars + closed_obs), total_issues)
        )
        on_time = audit_on_time_rate(total_audits, delayed_audits)

        avg_kpi = mean([p.kpi_percent for p in projects if p.kpi_percent > 0])
        avg_completion = mean([p.completion_percent for p in projects])

        quality_score = clamp(
            weighted_sum(
                {
                    "kpi": avg_kpi,
                    "compliance": compliance,
                    "completion": avg_completion,
                    "audit_on_time": on_time,
                },
                self._config.score_weights,
            )
        )
        logger.debug(
            "Quality summary: %d projects, score %.1f", len(projects), quality_score
        )

        return QualityMetricsSummary(
            total_projects=len(projects),
            total_audits=total_audits,
            completed_audits=max(0, total_audits - delayed_audits),
            delayed_audits=delayed_audits,
            total_cars=finite(open_cars + closed_cars),
            open_cars=open_cars,
            closed_cars=closed_cars,
            total_obs=finite(open_obs + closed_obs),
            open_obs=open_obs,
            closed_obs=closed_obs,
            avg_kpi=round1(avg_kpi),
            avg_completion=round1(avg_completion),
            compliance_rate=round1(compliance),
            audit_on_time_rate=round1(on_time),
            quality_score=round1(quality_score),
            performance=self.performance(quality_score),
            compliance_status=self.compliance_status(compliance),
        )

    # ---------------------------------------------------------------
    # Attention ranking
    # ---------------------------------------------------------------

    def attention_score(self, project: NormalizedProject) -> float:
        """open_issues * 5 + audit_delay_days * 2 + (100 - kpi) * 0.5"""
        weights = self._config.attention_weights
        return weighted_sum(self._attention_signals(project), weights)

    @staticmethod
    def _attention_signals(project: NormalizedProject) -> dict[str, float]:
        return {
            "open_issues": project.open_issues,
            "audit_delay_days": project.audit_delay_days,
            "kpi_shortfall": 100.0 - project.kpi_percent,
        }

    def enrich(self, projects: Sequence[NormalizedProject]) -> list[AttentionEntry]:
        """Attach the attention score to every project, in input order."""
        return [
            AttentionEntry(
                project=p,
                score=self.attention_score(p),
                signals=self._attention_signals(p),
            )
            for p in projects
        ]

    def needs_attention(
        self,
        projects: Sequence[NormalizedProject],
        limit: int = 5,
    ) -> list[AttentionEntry]:
        return rank_by_attention(
            self.enrich(projects),
            limit,
            min_score=self._config.attention_min_score,
        )

    # ---------------------------------------------------------------
    # Charts and tables
    # ---------------------------------------------------------------

    def nc_trend(self, projects: Sequence[NormalizedProject]) -> list[TrendBucket]:
        """Open CARs and observations per completion range."""
        return bucket_by_completion(
            projects,
            {
                "cars": lambda p: p.cars_open,
                "observations": lambda p: p.obs_open,
                "total": lambda p: p.open_issues,
            },
        )

    def audit_timeline(
        self,
        projects: Sequence[NormalizedProject],
        as_of: date,
    ) -> list[AuditEvent]:
        """Every dated audit, oldest first, with its status on ``as_of``.

        Audit slots whose value is not a parseable date are skipped.
        """
        events: list[AuditEvent] = []
        for project in projects:
            for slot in project.audits:
                if slot.audit_date is None:
                    continue
                days_until = (slot.audit_date - as_of).days
                is_past = days_until < 0
                if is_past:
                    status = AuditStatus.COMPLETED
                elif days_until <= self._config.due_soon_days:
                    status = AuditStatus.DUE_SOON
                else:
                    status = AuditStatus.SCHEDULED
                events.append(
                    AuditEvent(
                        project_no=project.project_no,
                        project_title=project.project_title,
                        audit_type=slot.audit_type,
                        audit_number=slot.number,
                        audit_date=slot.audit_date,
                        status=status,
                        days_until=days_until,
                        is_past=is_past,
                    )
                )
        return sorted(events, key=lambda e: e.audit_date)

    def compliance_matrix(
        self,
        projects: Sequence[NormalizedProject],
    ) -> list[ComplianceCheck]:
        """Per-criterion share of compliant projects."""
        pass_pct = self._config.matrix_pass_pct
        criteria: list[tuple[str, Callable[[NormalizedProject], bool]]] = [
            ("Quality Plans", lambda p: p.quality_plan_status is not None),
            ("Audits Current", lambda p: p.audit_delay_days == 0),
            (
                "CARs Resolved",
                lambda p: compliance_rate(p.cars_closed, p.cars_open + p.cars_closed)
                >= pass_pct,
            ),
            ("KPI Achievement", lambda p: p.kpi_percent >= pass_pct),
        ]

        checks: list[ComplianceCheck] = []
        for name, passes in criteria:
            compliant = sum(1 for p in projects if passes(p))
            rate_pct = clamp(rate(compliant, len(projects)))
            checks.append(
                ComplianceCheck(
                    name=name,
                    compliant_count=compliant,
                    total_count=len(projects),
                    compliance_rate=round1(rate_pct),
                    status=self.compliance_status(rate_pct),
                )
            )
        return checks

    # ---------------------------------------------------------------
    # Report
    # ---------------------------------------------------------------

    def report(
        self,
        projects: Sequence[NormalizedProject],
        as_of: date,
        limit: int = 5,
    ) -> QualityReport:
        return QualityReport(
            summary=self.summarize(projects),
            needs_attention=self.needs_attention(projects, limit),
            nc_trend=self.nc_trend(projects),
            audit_timeline=self.audit_timeline(projects, as_of),
            compliance_matrix=self.compliance_matrix(projects),
        )
