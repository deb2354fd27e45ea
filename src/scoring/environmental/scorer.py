"""Environmental sustainability scoring engine.

Resource figures come from the declared estimation model in
:mod:`src.scoring.environmental.config`, never from measurements.

Deterministic -- no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from src.models.common import ComplianceStatus
from src.models.project import NormalizedProject
from src.scoring.arithmetic import (
    clamp,
    finite,
    mean,
    rate,
    round1,
    round_whole,
    total,
    weighted_sum,
)
from src.scoring.bands import Breakpoint, ScoreBand, classify, classify_breakpoint
from src.scoring.environmental.config import EnvironmentalScoringConfig
from src.scoring.environmental.models import (
    EnvironmentalMetricsSummary,
    EnvironmentalReport,
    ResourceEstimate,
    SustainabilityGoalProgress,
    WasteSlice,
)
from src.scoring.models import (
    AttentionEntry,
    ComplianceStandard,
    MonthlyProxyBucket,
    TrendBucket,
)
from src.scoring.ranking import rank_by_attention
from src.scoring.trends import bucket_by_completion, bucket_by_position

logger = logging.getLogger(__name__)


def recycling_rate(recycled_waste: float, total_waste: float) -> float:
    """Recycled share of waste; 0 when no waste was generated."""
    return rate(recycled_waste, total_waste, when_empty=0.0)


def renewable_percentage(renewable_energy: float, total_energy: float) -> float:
    """Renewable share of energy; 0 when no energy was used."""
    return rate(renewable_energy, total_energy, when_empty=0.0)


class EnvironmentalScorer:
    """Scores the environmental domain of a project collection."""

    def __init__(self, config: EnvironmentalScoringConfig | None = None) -> None:
        self._config = config or EnvironmentalScoringConfig()

    @property
    def config(self) -> EnvironmentalScoringConfig:
        return self._config

    # ---------------------------------------------------------------
    # Classification
    # ---------------------------------------------------------------

    def performance(self, score: float) -> ScoreBand:
        return classify(score, self._config.performance_bands)

    def carbon_category(self, carbon_kg: float) -> Breakpoint:
        return classify_breakpoint(carbon_kg, self._config.carbon_categories)

    def impact_level(self, impact_score: float) -> Breakpoint:
        return classify_breakpoint(impact_score, self._config.impact_levels)

    # ---------------------------------------------------------------
    # Estimation model
    # ---------------------------------------------------------------

    def renewable_share(self, kpi_percent: float) -> float:
        for above, share in self._config.renewable_share_tiers:
            if kpi_percent > above:
                return share
        return self._config.renewable_share_floor

    def estimate(self, project: NormalizedProject) -> ResourceEstimate:
        """Estimate carbon, waste, water and energy for one project.

        carbon = manhours * 50 * completion + open_issues * 500
        waste  = manhours * 5 * completion
        water  = manhours * 100 * completion
        energy = manhours * 15 * completion
        (completion as a fraction)
        """
        cfg = self._config
        scaled_hours = project.manhours_used * (project.completion_percent / 100.0)
        waste = finite(scaled_hours * cfg.waste_per_manhour)
        energy = finite(scaled_hours * cfg.energy_per_manhour)
        share = self.renewable_share(project.kpi_percent)
        return ResourceEstimate(
            carbon_emissions=finite(
                scaled_hours * cfg.carbon_per_manhour
                + project.open_issues * cfg.carbon_per_open_issue
            ),
            waste=waste,
            recycled_waste=waste * cfg.recycled_waste_share,
            water_usage=finite(scaled_hours * cfg.water_per_manhour),
            energy_usage=energy,
            renewable_energy=energy * share,
            renewable_share=share,
        )

    def project_environmental_score(self, project: NormalizedProject) -> float:
        """clamp(0.4 * kpi + 0.3 * completion - 2 * open_issues - 0.5 * delay)"""
        return clamp(
            weighted_sum(
                {
                    "kpi": project.kpi_percent,
                    "completion": project.completion_percent,
                    "open_issues": project.open_issues,
                    "audit_delay_days": project.audit_delay_days,
                },
                self._config.project_score_weights,
            )
        )

    def project_compliance(self, project: NormalizedProject) -> float:
        return clamp(
            project.kpi_percent
            - project.audit_delay_days * self._config.compliance_delay_penalty
        )

    # ---------------------------------------------------------------
    # Summary
    # ---------------------------------------------------------------

    def summarize(
        self,
        projects: Sequence[NormalizedProject],
    ) -> EnvironmentalMetricsSummary:
        """Aggregate estimated resources and the two composite scores.

        environmental = 0.3 * project_env + 0.25 * compliance
                        + 0.2 * recycling + 0.15 * renewable
                        + 0.1 * (100 - min(carbon_per_project / 1000, 100))
        sustainability = 0.3 * recycling + 0.3 * renewable
                         + 0.25 * compliance + 0.15 * project_env
        """
        if not projects:
            return EnvironmentalMetricsSummary()

        cfg = self._config
        count = len(projects)
        estimates = [self.estimate(p) for p in projects]

        carbon = total(e.carbon_emissions for e in estimates)
        waste = total(e.waste for e in estimates)
        recycled = total(e.recycled_waste for e in estimates)
        water = total(e.water_usage for e in estimates)
        energy = total(e.energy_usage for e in estimates)
        renewable = total(e.renewable_energy for e in estimates)

        avg_project_env = mean([self.project_environmental_score(p) for p in projects])
        compliance = mean([self.project_compliance(p) for p in projects])
        recycling = recycling_rate(recycled, waste)
        renewable_pct = renewable_percentage(renewable, energy)
        carbon_per_project = carbon / count
        carbon_component = clamp(
            100.0 - min(carbon_per_project / cfg.carbon_intensity_scale, 100.0)
        )

        components = {
            "project_environmental": avg_project_env,
            "compliance": compliance,
            "recycling": recycling,
            "renewable": renewable_pct,
            "carbon": carbon_component,
        }
        environmental_score = clamp(weighted_sum(components, cfg.score_weights))
        sustainability_score = clamp(
            weighted_sum(components, cfg.sustainability_weights)
        )
        logger.debug(
            "Environmental summary: %d projects, %.0f kg CO2e, score %.1f",
            count,
            carbon,
            environmental_score,
        )

        return EnvironmentalMetricsSummary(
            total_projects=count,
            high_impact_projects=sum(
                1 for e in estimates if e.carbon_emissions > cfg.high_impact_carbon
            ),
            compliant_projects=sum(
                1 for p in projects if p.kpi_percent >= cfg.compliant_kpi_pct
            ),
            environmental_score=round1(environmental_score),
            sustainability_score=round1(sustainability_score),
            avg_project_environmental_score=round1(avg_project_env),
            total_carbon_emissions=round_whole(carbon),
            carbon_per_project=round_whole(carbon_per_project),
            carbon_category=self.carbon_category(carbon_per_project),
            total_waste=round_whole(waste),
            recycled_waste=round_whole(recycled),
            recycling_rate=round1(recycling),
            total_water_usage=round_whole(water),
            water_per_project=round_whole(water / count),
            total_energy_usage=round_whole(energy),
            renewable_energy=round_whole(renewable),
            renewable_percentage=round1(renewable_pct),
            compliance_rate=round1(compliance),
            performance=self.performance(environmental_score),
        )

    # ---------------------------------------------------------------
    # Impact ranking
    # ---------------------------------------------------------------

    def _impact_signals(self, project: NormalizedProject) -> dict[str, float]:
        estimate = self.estimate(project)
        return {
            "carbon_emissions": estimate.carbon_emissions,
            "waste": estimate.waste,
            "water_usage": estimate.water_usage,
            "environmental_score": self.project_environmental_score(project),
        }

    def impact_score(self, project: NormalizedProject) -> float:
        """carbon / 1000 + waste / 100 + water / 10000 - environmental score"""
        return weighted_sum(self._impact_signals(project), self._config.impact_weights)

    def enrich(self, projects: Sequence[NormalizedProject]) -> list[AttentionEntry]:
        """Attach impact score and impact level to every project, in input order."""
        entries = []
        for p in projects:
            signals = self._impact_signals(p)
            score = weighted_sum(signals, self._config.impact_weights)
            entries.append(
                AttentionEntry(
                    project=p,
                    score=score,
                    signals=signals,
                    level=self.impact_level(score),
                )
            )
        return entries

    def high_impact_projects(
        self,
        projects: Sequence[NormalizedProject],
        limit: int = 5,
    ) -> list[AttentionEntry]:
        """Top ``limit`` projects by impact score; no significance filter."""
        return rank_by_attention(
            self.enrich(projects),
            limit,
            levels=self._config.impact_levels,
        )

    # ---------------------------------------------------------------
    # Compliance and goals
    # ---------------------------------------------------------------

    def compliance_standards(
        self,
        summary: EnvironmentalMetricsSummary,
    ) -> list[ComplianceStandard]:
        """Gap analysis of each configured standard against the summary."""
        results: list[ComplianceStandard] = []
        for standard in self._config.compliance_standards:
            current = mean([float(getattr(summary, f)) for f in standard.score_fields])
            status = (
                ComplianceStatus.COMPLIANT
                if current >= standard.threshold
                else ComplianceStatus.NON_COMPLIANT
            )
            results.append(
                ComplianceStandard(
                    key=standard.key,
                    label=standard.label,
                    description=standard.description,
                    threshold=standard.threshold,
                    current_score=round1(current),
                    status=status,
                    gap=round1(max(0.0, standard.threshold - current)),
                )
            )
        return results

    def sustainability_progress(
        self,
        summary: EnvironmentalMetricsSummary,
    ) -> list[SustainabilityGoalProgress]:
        carbon = summary.total_carbon_emissions
        measures: dict[str, tuple[float, str]] = {
            "SDG_7": (
                summary.renewable_percentage,
                f"{summary.renewable_percentage:.1f}% renewable energy usage",
            ),
            "SDG_12": (
                summary.recycling_rate,
                f"{summary.recycling_rate:.1f}% waste recycling rate",
            ),
            "SDG_13": (
                min((self._config.carbon_budget - carbon) / 1000, 100.0),
                f"{carbon:,.0f} kg CO2e total emissions",
            ),
            "SDG_6": (
                min(summary.compliance_rate, 100.0),
                f"{summary.compliance_rate:.1f}% environmental compliance",
            ),
        }

        progress: list[SustainabilityGoalProgress] = []
        for goal in self._config.sustainability_goals:
            if goal.key not in measures:
                logger.warning("No progress measure for sustainability goal %s", goal.key)
                continue
            value, description = measures[goal.key]
            progress.append(
                SustainabilityGoalProgress(
                    key=goal.key,
                    number=goal.number,
                    label=goal.label,
                    color=goal.color,
                    progress=round1(value),
                    target=goal.target,
                    description=description,
                )
            )
        return progress

    def waste_breakdown(self, projects: Sequence[NormalizedProject]) -> list[WasteSlice]:
        """Split total estimated waste across the configured categories."""
        total_waste = total(self.estimate(p).waste for p in projects)
        return [
            WasteSlice(
                key=category.key,
                label=category.label,
                amount=round_whole(total_waste * category.share),
                percentage=round(category.share * 100),
                recyclable=category.recyclable,
                color=category.color,
            )
            for category in self._config.waste_categories
        ]

    # ---------------------------------------------------------------
    # Trends
    # ---------------------------------------------------------------

    def _estimate_signal(self, field: str) -> Callable[[NormalizedProject], float]:
        return lambda p: getattr(self.estimate(p), field)

    def carbon_trend(self, projects: Sequence[NormalizedProject]) -> list[TrendBucket]:
        return bucket_by_completion(
            projects, {"carbon_emissions": self._estimate_signal("carbon_emissions")}
        )

    def resource_trend(self, projects: Sequence[NormalizedProject]) -> list[TrendBucket]:
        return bucket_by_completion(
            projects,
            {
                "water_usage": self._estimate_signal("water_usage"),
                "energy_usage": self._estimate_signal("energy_usage"),
                "renewable_energy": self._estimate_signal("renewable_energy"),
            },
        )

    def monthly_trend(
        self,
        projects: Sequence[NormalizedProject],
        through: int | None = None,
    ) -> list[MonthlyProxyBucket]:
        """Positional proxy trend (index % 12); not real monthly data."""
        return bucket_by_position(
            projects,
            {
                "carbon_emissions": self._estimate_signal("carbon_emissions"),
                "waste": self._estimate_signal("waste"),
                "recycled_waste": self._estimate_signal("recycled_waste"),
                "environmental_score": self.project_environmental_score,
            },
            through=through,
            empty_averages={"environmental_score": self._config.empty_month_env_score},
        )

    # ---------------------------------------------------------------
    # Report
    # ---------------------------------------------------------------

    def report(
        self,
        projects: Sequence[NormalizedProject],
        limit: int = 5,
        through: int | None = None,
    ) -> EnvironmentalReport:
        summary = self.summarize(projects)
        return EnvironmentalReport(
            summary=summary,
            high_impact_projects=self.high_impact_projects(projects, limit),
            carbon_trend=self.carbon_trend(projects),
            resource_trend=self.resource_trend(projects),
            waste_breakdown=self.waste_breakdown(projects),
            sustainability_progress=self.sustainability_progress(summary),
            compliance_standards=self.compliance_standards(summary),
            monthly_trend=self.monthly_trend(projects, through=through),
        )
