"""Tests for EnvironmentalScorer.

Covers: the resource estimation model, renewable-share tiers, composite
environmental and sustainability scores, carbon categories, impact
ranking, compliance-standard gap analysis, SDG progress, waste breakdown
and trends.
"""

import math

import pytest
from pydantic import ValidationError

from src.models.common import ComplianceStatus
from src.scoring.arithmetic import FLOAT_MAX
from src.scoring.environmental.config import EnvironmentalScoringConfig
from src.scoring.environmental.models import EnvironmentalMetricsSummary
from src.scoring.environmental.scorer import (
    EnvironmentalScorer,
    recycling_rate,
    renewable_percentage,
)
from src.scoring.normalizer import normalize_projects


@pytest.fixture
def scorer() -> EnvironmentalScorer:
    return EnvironmentalScorer()


@pytest.fixture
def projects(sample_records):
    return normalize_projects(sample_records)


@pytest.fixture
def half_done(make_project):
    """1,000 manhours at 50% completion, KPI 50%, no open issues."""
    return make_project(
        projectNo="E-1",
        manhoursUsed="1000",
        projectCompletionPercent="50%",
        projectKPIsAchievedPercent="50%",
    )


# ===================================================================
# Estimation model
# ===================================================================


class TestEstimate:
    """Resource estimates from manhours and completion."""

    def test_half_done_project(self, scorer: EnvironmentalScorer, half_done) -> None:
        estimate = scorer.estimate(half_done)

        assert estimate.carbon_emissions == pytest.approx(25_000)
        assert estimate.waste == pytest.approx(2_500)
        assert estimate.recycled_waste == pytest.approx(1_625)
        assert estimate.water_usage == pytest.approx(50_000)
        assert estimate.energy_usage == pytest.approx(7_500)
        assert estimate.renewable_energy == pytest.approx(1_125)
        assert estimate.renewable_share == pytest.approx(0.15)

    def test_open_issues_add_carbon(self, scorer: EnvironmentalScorer, make_project) -> None:
        project = make_project(carsOpen=2, obsOpen=1)
        estimate = scorer.estimate(project)
        assert estimate.carbon_emissions == pytest.approx(1_500)
        assert estimate.waste == 0.0

    def test_zero_manhours(self, scorer: EnvironmentalScorer, make_project) -> None:
        estimate = scorer.estimate(make_project(projectCompletionPercent="100%"))
        assert estimate.carbon_emissions == 0.0
        assert estimate.energy_usage == 0.0

    @pytest.mark.parametrize(
        ("kpi", "share"),
        [(100, 0.40), (85, 0.40), (80, 0.25), (61, 0.25), (60, 0.15), (0, 0.15)],
    )
    def test_renewable_share_tiers(self, scorer: EnvironmentalScorer, kpi, share) -> None:
        assert scorer.renewable_share(kpi) == share

    def test_custom_constants(self, half_done) -> None:
        config = EnvironmentalScoringConfig(carbon_per_manhour=10.0)
        estimate = EnvironmentalScorer(config).estimate(half_done)
        assert estimate.carbon_emissions == pytest.approx(5_000)


class TestProjectScores:
    """Per-project environmental and compliance scores."""

    def test_project_environmental_score(self, scorer: EnvironmentalScorer, make_project) -> None:
        project = make_project(
            projectKPIsAchievedPercent="90%",
            projectCompletionPercent="100%",
            carsOpen=2,
            delayInAuditsNoDays=4,
        )
        # 36 + 30 - 4 - 2
        assert scorer.project_environmental_score(project) == pytest.approx(60.0)

    def test_project_environmental_score_clamped(
        self, scorer: EnvironmentalScorer, make_project
    ) -> None:
        project = make_project(carsOpen=40)
        assert scorer.project_environmental_score(project) == 0.0

    def test_project_compliance(self, scorer: EnvironmentalScorer, make_project) -> None:
        project = make_project(projectKPIsAchievedPercent="90%", delayInAuditsNoDays=4)
        assert scorer.project_compliance(project) == pytest.approx(88.0)


# ===================================================================
# Summary
# ===================================================================


class TestRateHelpers:
    def test_zero_denominators(self) -> None:
        assert recycling_rate(0, 0) == 0.0
        assert renewable_percentage(0, 0) == 0.0

    def test_rates(self) -> None:
        assert recycling_rate(65, 100) == pytest.approx(65.0)
        assert renewable_percentage(15, 100) == pytest.approx(15.0)


class TestSummarize:
    """EnvironmentalScorer.summarize."""

    def test_half_done_project(self, scorer: EnvironmentalScorer, half_done) -> None:
        summary = scorer.summarize([half_done])

        assert summary.total_carbon_emissions == 25_000
        assert summary.carbon_per_project == 25_000
        assert summary.carbon_category.key == "MODERATE"
        assert summary.total_waste == 2_500
        assert summary.recycled_waste == 1_625
        assert summary.recycling_rate == pytest.approx(65.0)
        assert summary.total_water_usage == 50_000
        assert summary.total_energy_usage == 7_500
        assert summary.renewable_energy == 1_125
        assert summary.renewable_percentage == pytest.approx(15.0)
        assert summary.avg_project_environmental_score == pytest.approx(35.0)
        assert summary.compliance_rate == pytest.approx(50.0)
        # 0.3*35 + 0.25*50 + 0.2*65 + 0.15*15 + 0.1*75
        assert summary.environmental_score == pytest.approx(45.75, abs=0.1)
        # 0.3*65 + 0.3*15 + 0.25*50 + 0.15*35
        assert summary.sustainability_score == pytest.approx(41.75, abs=0.1)
        assert summary.performance.key == "POOR"
        assert summary.high_impact_projects == 0
        assert summary.compliant_projects == 0

    def test_sample_collection(self, scorer: EnvironmentalScorer, projects) -> None:
        summary = scorer.summarize(projects)

        assert summary.total_projects == 3
        assert summary.total_carbon_emissions == 73_500
        assert summary.carbon_per_project == 24_500
        assert summary.carbon_category.key == "MODERATE"
        assert summary.high_impact_projects == 1
        assert summary.compliant_projects == 1

    def test_category_uses_per_project_carbon(
        self, scorer: EnvironmentalScorer, make_project
    ) -> None:
        projects = [
            make_project(manhoursUsed=1000, projectCompletionPercent="100%")
            for _ in range(4)
        ]
        summary = scorer.summarize(projects)
        # 200,000 kg in total but 50,000 kg per project.
        assert summary.total_carbon_emissions == 200_000
        assert summary.carbon_category.key == "HIGH"

    def test_empty_collection(self, scorer: EnvironmentalScorer) -> None:
        summary = scorer.summarize([])
        assert summary == EnvironmentalMetricsSummary()
        assert summary.performance is None
        assert summary.carbon_category is None

    def test_carbon_category_boundaries(self, scorer: EnvironmentalScorer) -> None:
        assert scorer.carbon_category(60_000).key == "VERY_HIGH"
        assert scorer.carbon_category(59_999).key == "HIGH"
        assert scorer.carbon_category(5_000).key == "LOW"
        assert scorer.carbon_category(4_999).key == "VERY_LOW"


class TestHugeCounts:
    """Large but finite counts saturate instead of overflowing."""

    @pytest.fixture
    def huge(self, make_project):
        return make_project(manhoursUsed="1e307", projectCompletionPercent="100%")

    def test_estimate_is_finite(self, scorer: EnvironmentalScorer, huge) -> None:
        estimate = scorer.estimate(huge)
        assert estimate.carbon_emissions == FLOAT_MAX
        assert estimate.water_usage == FLOAT_MAX
        assert estimate.waste == pytest.approx(5e307)

    def test_summary_does_not_raise(self, scorer: EnvironmentalScorer, huge) -> None:
        summary = scorer.summarize([huge, huge, huge])

        assert summary.total_carbon_emissions == FLOAT_MAX
        assert summary.total_waste == pytest.approx(1.5e308)
        assert summary.recycling_rate == 65.0
        assert 0.0 <= summary.renewable_percentage <= 100.0
        assert summary.carbon_category.key == "VERY_HIGH"
        for value in summary.model_dump().values():
            if isinstance(value, float):
                assert math.isfinite(value)

    def test_waste_breakdown(self, scorer: EnvironmentalScorer, huge) -> None:
        slices = scorer.waste_breakdown([huge, huge, huge])
        assert all(math.isfinite(s.amount) for s in slices)
        assert slices[1].amount == pytest.approx(1.5e308 * 0.30)


# ===================================================================
# Impact ranking
# ===================================================================


class TestImpact:
    """Impact score, impact levels and ranking."""

    def test_impact_score(self, scorer: EnvironmentalScorer, half_done) -> None:
        # 25 + 25 + 5 - 35
        assert scorer.impact_score(half_done) == pytest.approx(20.0)
        assert scorer.impact_level(20.0).key == "LOW"

    def test_sample_ranking(self, scorer: EnvironmentalScorer, projects) -> None:
        ranked = scorer.high_impact_projects(projects)

        assert [e.project.project_no for e in ranked] == ["QP-002", "QP-001", "QP-003"]
        assert [e.score for e in ranked] == pytest.approx([55.9, 16.6, 0.3])
        assert [e.level.key for e in ranked] == ["HIGH", "LOW", "VERY_LOW"]

    def test_negative_impact_still_ranked(self, scorer: EnvironmentalScorer, make_project) -> None:
        project = make_project(projectKPIsAchievedPercent="100%", projectCompletionPercent="100%")
        ranked = scorer.high_impact_projects([project])
        assert len(ranked) == 1
        assert ranked[0].score < 0
        assert ranked[0].level.key == "VERY_LOW"

    def test_limit(self, scorer: EnvironmentalScorer, projects) -> None:
        assert len(scorer.high_impact_projects(projects, limit=1)) == 1


# ===================================================================
# Compliance, goals and waste
# ===================================================================


class TestComplianceStandards:
    """Gap analysis against the configured standards."""

    def test_gaps(self, scorer: EnvironmentalScorer) -> None:
        summary = EnvironmentalMetricsSummary(
            environmental_score=86,
            renewable_percentage=40,
            recycling_rate=65,
            compliance_rate=90,
        )
        rows = {s.key: s for s in scorer.compliance_standards(summary)}

        assert rows["ISO_14001"].status == ComplianceStatus.COMPLIANT
        assert rows["ISO_14001"].gap == 0.0
        assert rows["ISO_50001"].status == ComplianceStatus.NON_COMPLIANT
        assert rows["ISO_50001"].gap == pytest.approx(40.0)
        assert rows["LEED"].current_score == pytest.approx(52.5)
        assert rows["LEED"].gap == pytest.approx(22.5)
        assert rows["BREEAM"].current_score == pytest.approx(52.5)
        assert rows["LOCAL_REGULATIONS"].status == ComplianceStatus.NON_COMPLIANT
        assert rows["LOCAL_REGULATIONS"].gap == pytest.approx(5.0)

    def test_threshold_is_inclusive(self, scorer: EnvironmentalScorer) -> None:
        summary = EnvironmentalMetricsSummary(environmental_score=85)
        iso = scorer.compliance_standards(summary)[0]
        assert iso.key == "ISO_14001"
        assert iso.status == ComplianceStatus.COMPLIANT


class TestSustainabilityProgress:
    """SDG progress measures."""

    def test_progress(self, scorer: EnvironmentalScorer, half_done) -> None:
        summary = scorer.summarize([half_done])
        goals = {g.key: g for g in scorer.sustainability_progress(summary)}

        assert list(goals) == ["SDG_7", "SDG_12", "SDG_13", "SDG_6"]
        assert goals["SDG_7"].progress == pytest.approx(15.0)
        assert goals["SDG_12"].progress == pytest.approx(65.0)
        assert goals["SDG_13"].progress == pytest.approx(75.0)
        assert goals["SDG_6"].progress == pytest.approx(50.0)
        assert goals["SDG_13"].description == "25,000 kg CO2e total emissions"

    def test_no_emissions_caps_climate_progress(self, scorer: EnvironmentalScorer) -> None:
        goals = scorer.sustainability_progress(EnvironmentalMetricsSummary())
        sdg_13 = next(g for g in goals if g.key == "SDG_13")
        assert sdg_13.progress == 100.0


class TestWasteBreakdown:
    def test_breakdown(self, scorer: EnvironmentalScorer, half_done) -> None:
        slices = scorer.waste_breakdown([half_done])

        assert [s.amount for s in slices] == [625, 750, 125, 250, 375, 375]
        assert [s.percentage for s in slices] == [25, 30, 5, 10, 15, 15]
        assert [s.recyclable for s in slices] == [False, True, False, True, True, True]

    def test_empty(self, scorer: EnvironmentalScorer) -> None:
        slices = scorer.waste_breakdown([])
        assert len(slices) == 6
        assert all(s.amount == 0 for s in slices)


# ===================================================================
# Trends and report
# ===================================================================


class TestTrends:
    def test_carbon_trend(self, scorer: EnvironmentalScorer, projects) -> None:
        buckets = scorer.carbon_trend(projects)
        assert [(b.label, b.sums["carbon_emissions"]) for b in buckets] == [
            ("0-25%", pytest.approx(1_500)),
            ("25-50%", pytest.approx(28_500)),
            ("90-100%", pytest.approx(43_500)),
        ]

    def test_resource_trend_signals(self, scorer: EnvironmentalScorer, projects) -> None:
        buckets = scorer.resource_trend(projects)
        assert set(buckets[0].sums) == {"water_usage", "energy_usage", "renewable_energy"}

    def test_monthly_trend(self, scorer: EnvironmentalScorer, projects) -> None:
        buckets = scorer.monthly_trend(projects)
        assert len(buckets) == 12
        assert buckets[0].sums["carbon_emissions"] == pytest.approx(28_500)
        assert buckets[5].project_count == 0
        assert buckets[5].averages["environmental_score"] == 85.0

    def test_monthly_trend_through(self, scorer: EnvironmentalScorer, projects) -> None:
        assert len(scorer.monthly_trend(projects, through=2)) == 2


class TestConfig:
    def test_bad_sustainability_weights_rejected(self) -> None:
        with pytest.raises(ValidationError, match="sustainability_weights"):
            EnvironmentalScoringConfig(sustainability_weights={"recycling": 0.5})


class TestReport:
    def test_report(self, scorer: EnvironmentalScorer, projects) -> None:
        report = scorer.report(projects, limit=2, through=3)
        assert report.summary.total_projects == 3
        assert len(report.high_impact_projects) == 2
        assert len(report.waste_breakdown) == 6
        assert len(report.sustainability_progress) == 4
        assert len(report.compliance_standards) == 5
        assert len(report.monthly_trend) == 3

    def test_empty_report(self, scorer: EnvironmentalScorer) -> None:
        report = scorer.report([])
        assert report.summary.total_projects == 0
        assert report.high_impact_projects == []
        assert report.carbon_trend == []
