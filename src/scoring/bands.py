"""Band and breakpoint classifiers.

Two deliberately separate primitives:

* :func:`classify` maps a bounded score in [0, 100] onto a closed table of
  ``ScoreBand`` ranges (performance bands).
* :func:`classify_breakpoint` maps an unbounded score onto a table of
  descending thresholds (risk, impact, carbon and compliance tiers).

Neither validates its table at call time; :func:`check_band_table` is the
configuration-time check used by the domain configs.

Deterministic -- no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import Field

from src.models.common import QHSEFrozen
from src.scoring.arithmetic import SCORE_MAX, SCORE_MIN


class ScoreBand(QHSEFrozen):
    """A labelled [min, max) range of a bounded 0-100 score."""

    key: str
    label: str
    min: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    max: float = Field(ge=SCORE_MIN, le=SCORE_MAX)
    color: str
    icon: str | None = None
    description: str | None = None

    def contains(self, score: float, *, inclusive_max: bool = False) -> bool:
        if inclusive_max:
            return self.min <= score <= self.max
        return self.min <= score < self.max


class Breakpoint(QHSEFrozen):
    """A tier reached when a score is at or above ``threshold``."""

    key: str
    label: str
    threshold: float
    color: str
    priority: int | None = None
    action: str | None = None
    description: str | None = None


class RiskLevel(Breakpoint):
    """Breakpoint tier carrying a priority and a recommended action."""

    priority: int
    action: str


def _top_band(bands: Sequence[ScoreBand]) -> ScoreBand:
    return max(bands, key=lambda b: b.max)


def _floor_band(bands: Sequence[ScoreBand]) -> ScoreBand:
    return min(bands, key=lambda b: b.min)


def classify(score: float, bands: Sequence[ScoreBand]) -> ScoreBand:
    """Return the band containing ``score``.

    The first band with ``min <= score < max`` wins; the topmost band also
    includes its ``max`` so 100 is classified. Scores that match nothing
    (NaN, out of range, gaps in a bad table) fall back to the lowest band.
    """
    if not bands:
        raise ValueError("classify requires at least one band")
    if not math.isnan(score):
        top = _top_band(bands)
        for band in bands:
            if band.contains(score, inclusive_max=band is top):
                return band
    return _floor_band(bands)


def classify_breakpoint(score: float, table: Sequence[Breakpoint]) -> Breakpoint:
    """Return the first tier whose threshold ``score`` reaches.

    ``table`` is ordered by descending threshold; the last entry is the
    floor and is returned when no threshold is reached.
    """
    if not table:
        raise ValueError("classify_breakpoint requires at least one tier")
    if not math.isnan(score):
        for tier in table:
            if score >= tier.threshold:
                return tier
    return table[-1]


def check_band_table(bands: Sequence[ScoreBand]) -> list[str]:
    """Return the problems that stop ``bands`` from partitioning [0, 100].

    An empty list means the table is contiguous, non-overlapping and
    exhaustive.
    """
    if not bands:
        return ["band table is empty"]

    problems: list[str] = []
    ordered = sorted(bands, key=lambda b: b.min)

    keys = [b.key for b in bands]
    if len(set(keys)) != len(keys):
        problems.append("band keys are not unique")

    for band in ordered:
        if band.min >= band.max:
            problems.append(f"band {band.key} is empty ({band.min} >= {band.max})")

    if ordered[0].min != SCORE_MIN:
        problems.append(f"lowest band starts at {ordered[0].min}, not {SCORE_MIN}")
    if ordered[-1].max != SCORE_MAX:
        problems.append(f"highest band ends at {ordered[-1].max}, not {SCORE_MAX}")

    for lower, upper in zip(ordered, ordered[1:]):
        if lower.max < upper.min:
            problems.append(f"gap between {lower.key} and {upper.key}")
        elif lower.max > upper.min:
            problems.append(f"{lower.key} overlaps {upper.key}")

    return problems


def check_breakpoint_table(table: Sequence[Breakpoint]) -> list[str]:
    """Return the problems with a breakpoint table (order and uniqueness)."""
    if not table:
        return ["breakpoint table is empty"]
    problems: list[str] = []
    thresholds = [t.threshold for t in table]
    if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
        problems.append("thresholds are not strictly descending")
    keys = [t.key for t in table]
    if len(set(keys)) != len(keys):
        problems.append("tier keys are not unique")
    return problems
