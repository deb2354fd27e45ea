"""Output models shared by every scoring domain.

All models are frozen and carry only plain data, so presentation and
export collaborators can consume ``model_dump()`` output directly.
"""

from __future__ import annotations

from pydantic import Field

from src.models.common import ComplianceStatus, QHSEFrozen
from src.models.project import NormalizedProject
from src.scoring.bands import Breakpoint


class AttentionEntry(QHSEFrozen):
    """A project with its domain attention / risk / impact score.

    ``score`` is an unbounded signed sum; ``signals`` records the inputs
    that produced it. ``level`` is attached by the ranker when the domain
    has a level table.
    """

    project: NormalizedProject
    score: float
    signals: dict[str, float] = Field(default_factory=dict)
    level: Breakpoint | None = None


class TrendBucket(QHSEFrozen):
    """Aggregate of the projects whose completion falls in one range."""

    label: str
    range_min: float
    range_max: float
    project_count: int = Field(ge=0)
    sums: dict[str, float] = Field(default_factory=dict)
    averages: dict[str, float] = Field(default_factory=dict)


class MonthlyProxyBucket(QHSEFrozen):
    """Positional proxy bucket: projects whose list index % 12 == position.

    Not time-series data. No project timestamp is involved; the month
    label only names the position.
    """

    label: str
    position: int = Field(ge=0)
    project_count: int = Field(ge=0)
    sums: dict[str, float] = Field(default_factory=dict)
    averages: dict[str, float] = Field(default_factory=dict)


class ComplianceStandard(QHSEFrozen):
    """Gap analysis of one named standard against a threshold."""

    key: str
    label: str
    description: str
    threshold: float
    current_score: float
    status: ComplianceStatus
    gap: float = Field(ge=0.0)


class ComplianceCheck(QHSEFrozen):
    """Share of projects passing one compliance / checklist criterion."""

    name: str
    compliant_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    compliance_rate: float = Field(ge=0.0, le=100.0)
    status: Breakpoint
    weight: float | None = None
