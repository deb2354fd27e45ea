"""TrendAggregator — partitions a project collection into chart buckets.

Two aggregations:

* :func:`bucket_by_completion` groups projects by completion-percentage
  range. Each project lands in exactly one range, so with exhaustive ranges
  the bucket counts add up to the input length.
* :func:`bucket_by_position` is a positional proxy: it groups projects by
  ``index % 12`` and labels the groups with month names. No project date is
  read, so its output must not be presented as real time-series data.

Signals are plain callables ``NormalizedProject -> float`` supplied by the
domain scorers.

Deterministic -- no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from src.models.common import QHSEFrozen
from src.models.project import NormalizedProject
from src.scoring.arithmetic import mean, total
from src.scoring.models import MonthlyProxyBucket, TrendBucket

Signal = Callable[[NormalizedProject], float]


class CompletionRange(QHSEFrozen):
    """A [min, max) completion range; ``inclusive_max`` closes the top."""

    label: str
    min: float
    max: float
    inclusive_max: bool = False

    def contains(self, completion: float) -> bool:
        if self.inclusive_max:
            return self.min <= completion <= self.max
        return self.min <= completion < self.max


DEFAULT_COMPLETION_RANGES: tuple[CompletionRange, ...] = (
    CompletionRange(label="0-25%", min=0, max=25),
    CompletionRange(label="25-50%", min=25, max=50),
    CompletionRange(label="50-75%", min=50, max=75),
    CompletionRange(label="75-90%", min=75, max=90),
    CompletionRange(label="90-100%", min=90, max=100, inclusive_max=True),
)

MONTH_LABELS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _aggregate(
    members: Sequence[NormalizedProject],
    signals: Mapping[str, Signal],
) -> tuple[dict[str, float], dict[str, float]]:
    sums: dict[str, float] = {}
    averages: dict[str, float] = {}
    for name, signal in signals.items():
        values = [signal(p) for p in members]
        sums[name] = total(values)
        averages[name] = mean(values)
    return sums, averages


def bucket_by_completion(
    projects: Sequence[NormalizedProject],
    signals: Mapping[str, Signal],
    ranges: Sequence[CompletionRange] = DEFAULT_COMPLETION_RANGES,
) -> list[TrendBucket]:
    """Sum and average ``signals`` per completion range.

    A project is assigned to the first range containing its completion.
    Ranges with no projects are dropped from the output.
    """
    members: list[list[NormalizedProject]] = [[] for _ in ranges]
    for project in projects:
        for idx, completion_range in enumerate(ranges):
            if completion_range.contains(project.completion_percent):
                members[idx].append(project)
                break

    buckets: list[TrendBucket] = []
    for completion_range, group in zip(ranges, members):
        if not group:
            continue
        sums, averages = _aggregate(group, signals)
        buckets.append(
            TrendBucket(
                label=completion_range.label,
                range_min=completion_range.min,
                range_max=completion_range.max,
                project_count=len(group),
                sums=sums,
                averages=averages,
            )
        )
    return buckets


def bucket_by_position(
    projects: Sequence[NormalizedProject],
    signals: Mapping[str, Signal],
    *,
    through: int | None = None,
    empty_averages: Mapping[str, float] | None = None,
    labels: Sequence[str] = MONTH_LABELS,
) -> list[MonthlyProxyBucket]:
    """Group projects by list position modulo ``len(labels)``.

    Emits the first ``through`` positions (all of them by default), empty
    ones included. Averages of empty positions take ``empty_averages`` or 0.
    No labels yields no buckets.
    """
    periods = len(labels)
    if periods == 0:
        return []
    count = periods if through is None else max(0, min(through, periods))
    empty_averages = empty_averages or {}

    members: list[list[NormalizedProject]] = [[] for _ in range(periods)]
    for index, project in enumerate(projects):
        members[index % periods].append(project)

    buckets: list[MonthlyProxyBucket] = []
    for position in range(count):
        group = members[position]
        sums, averages = _aggregate(group, signals)
        if not group:
            averages = {name: empty_averages.get(name, 0.0) for name in signals}
        buckets.append(
            MonthlyProxyBucket(
                label=labels[position],
                position=position,
                project_count=len(group),
                sums=sums,
                averages=averages,
            )
        )
    return buckets
