"""Property checks over seeded malformed payloads.

Every scorer must stay total and bounded whatever the REST collaborator
sends: percentages in [0, 100], no NaN anywhere, buckets partitioning
the collection and rankings ordered.
"""

import math
from datetime import date

import pytest

from src.config.settings import Settings
from src.scoring.environmental.scorer import EnvironmentalScorer
from src.scoring.normalizer import normalize_projects
from src.scoring.quality.scorer import QualityScorer
from src.scoring.safety.scorer import SafetyScorer
from src.scoring.service import QHSEMetricsService

AS_OF = date(2024, 6, 1)
SEEDS = range(12)


def _numbers(value):
    """Yield every number nested in a ``model_dump()`` payload."""
    if isinstance(value, bool):
        return
    if isinstance(value, (int, float)):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _numbers(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _numbers(item)


@pytest.fixture(params=SEEDS)
def messy_projects(request, messy_records):
    return normalize_projects(messy_records(request.param))


class TestBoundedScores:
    """Summary scores and rates stay in [0, 100]."""

    def test_quality(self, messy_projects) -> None:
        summary = QualityScorer().summarize(messy_projects)
        for value in (
            summary.quality_score,
            summary.compliance_rate,
            summary.audit_on_time_rate,
            summary.avg_kpi,
            summary.avg_completion,
        ):
            assert 0.0 <= value <= 100.0
        assert summary.performance is not None

    def test_safety(self, messy_projects) -> None:
        summary = SafetyScorer().summarize(messy_projects)
        assert 0.0 <= summary.safety_score <= 100.0
        assert 0.0 <= summary.avg_project_safety <= 100.0
        assert summary.total_work_hours > 0

    def test_environmental(self, messy_projects) -> None:
        summary = EnvironmentalScorer().summarize(messy_projects)
        assert 0.0 <= summary.environmental_score <= 100.0
        assert 0.0 <= summary.sustainability_score <= 100.0
        assert 0.0 <= summary.compliance_rate <= 100.0


class TestPartitions:
    """Completion buckets cover the whole collection exactly once."""

    def test_quality_nc_trend(self, messy_projects) -> None:
        buckets = QualityScorer().nc_trend(messy_projects)
        assert sum(b.project_count for b in buckets) == len(messy_projects)

    def test_safety_incident_trend(self, messy_projects) -> None:
        buckets = SafetyScorer().incident_trend(messy_projects)
        assert sum(b.project_count for b in buckets) == len(messy_projects)

    def test_kpi_distribution(self, messy_projects) -> None:
        slices = SafetyScorer().kpi_distribution(messy_projects)
        assert sum(s.count for s in slices) == len(messy_projects)

    def test_monthly_proxy(self, messy_projects) -> None:
        buckets = SafetyScorer().monthly_trend(messy_projects)
        assert sum(b.project_count for b in buckets) == len(messy_projects)


class TestRankings:
    """Rankings are ordered, limited and filtered."""

    def test_quality_attention_ordered(self, messy_projects) -> None:
        ranked = QualityScorer().needs_attention(messy_projects, limit=5)
        scores = [e.score for e in ranked]
        assert len(ranked) == 5
        assert scores == sorted(scores, reverse=True)

    def test_safety_high_risk_filtered(self, messy_projects) -> None:
        ranked = SafetyScorer().high_risk_projects(messy_projects, limit=5)
        assert all(e.score > 10 for e in ranked)
        assert all(e.level is not None for e in ranked)


class TestDashboardIsFinite:
    """No NaN or infinity anywhere in the full dashboard."""

    def test_all_numbers_finite(self, messy_projects) -> None:
        service = QHSEMetricsService(Settings())
        payload = service.build_dashboard(messy_projects, as_of=AS_OF).model_dump()
        for number in _numbers(payload):
            assert math.isfinite(number)
