"""QHSE dashboard orchestrator service.

Normalises the raw project collection once, hands the normalised records
to the three independent domain scorers, and bundles their reports into a
single ``QHSEDashboard`` for presentation and export collaborators.

Deterministic given ``as_of`` -- no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from pydantic import Field

from src.config.settings import Settings, get_settings
from src.models.common import QHSEFrozen
from src.models.project import NormalizedProject, ProjectRecord
from src.scoring.environmental.config import EnvironmentalScoringConfig
from src.scoring.environmental.models import EnvironmentalReport
from src.scoring.environmental.scorer import EnvironmentalScorer
from src.scoring.normalizer import RecordNormalizer
from src.scoring.quality.config import QualityScoringConfig
from src.scoring.quality.models import QualityReport
from src.scoring.quality.scorer import QualityScorer
from src.scoring.safety.config import SafetyScoringConfig
from src.scoring.safety.models import SafetyReport
from src.scoring.safety.scorer import SafetyScorer

logger = logging.getLogger(__name__)


class QHSEDashboard(QHSEFrozen):
    """All three domain reports computed from one project collection."""

    as_of: date
    total_projects: int = Field(ge=0)
    quality: QualityReport
    safety: SafetyReport
    environmental: EnvironmentalReport


class QHSEMetricsService:
    """Builds the full QHSE dashboard from raw project records.

    Holds no state between calls; every ``build_dashboard`` recomputes
    from its input.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        quality_config: QualityScoringConfig | None = None,
        safety_config: SafetyScoringConfig | None = None,
        environmental_config: EnvironmentalScoringConfig | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._normalizer = RecordNormalizer()
        self._quality = QualityScorer(config=quality_config)
        self._safety = SafetyScorer(config=safety_config)
        self._environmental = EnvironmentalScorer(config=environmental_config)

    def normalize(
        self,
        records: Iterable[ProjectRecord | Mapping[str, Any] | NormalizedProject] | None,
    ) -> list[NormalizedProject]:
        return self._normalizer.normalize_all(records)

    def build_dashboard(
        self,
        records: Iterable[ProjectRecord | Mapping[str, Any] | NormalizedProject] | None,
        as_of: date | None = None,
    ) -> QHSEDashboard:
        """Score every domain over ``records``.

        ``as_of`` pins the clock for audit statuses, the schedule checklist
        and how many positional months are emitted; it defaults to today.
        """
        as_of = as_of or date.today()
        projects = self.normalize(records)
        limit = self._settings.ATTENTION_LIMIT

        dashboard = QHSEDashboard(
            as_of=as_of,
            total_projects=len(projects),
            quality=self._quality.report(projects, as_of, limit),
            safety=self._safety.report(
                projects,
                as_of,
                limit,
                manager_limit=self._settings.MANAGER_RANKING_LIMIT,
            ),
            environmental=self._environmental.report(
                projects, limit, through=as_of.month
            ),
        )
        logger.info(
            "Built QHSE dashboard for %d projects as of %s "
            "(quality %.1f, safety %.1f, environmental %.1f)",
            len(projects),
            as_of.isoformat(),
            dashboard.quality.summary.quality_score,
            dashboard.safety.summary.safety_score,
            dashboard.environmental.summary.environmental_score,
        )
        return dashboard
