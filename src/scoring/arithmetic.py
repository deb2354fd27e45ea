"""Small arithmetic helpers shared by the domain scorers.

Every zero-denominator case is defined explicitly so no scorer ever
returns NaN. Totals saturate at the largest finite float instead of
overflowing to infinity.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable

SCORE_MIN = 0.0
SCORE_MAX = 100.0
FLOAT_MAX = sys.float_info.max


def finite(value: float) -> float:
    """Map NaN to 0 and saturate infinities at +/- ``FLOAT_MAX``."""
    if math.isnan(value):
        return 0.0
    if math.isinf(value):
        return FLOAT_MAX if value > 0 else -FLOAT_MAX
    return value


def clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    """Clamp ``value`` into [low, high]; NaN collapses to ``low``."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def total(values: Iterable[float]) -> float:
    return finite(sum(values))


def rate(part: float, whole: float, *, when_empty: float = 0.0) -> float:
    """Return ``part / whole * 100``, or ``when_empty`` if ``whole`` is 0.

    A result that is not finite also yields ``when_empty``.
    """
    if whole == 0:
        return when_empty
    result = part / whole * 100.0
    if not math.isfinite(result):
        return when_empty
    return result


def mean(values: list[float], *, when_empty: float = 0.0) -> float:
    if not values:
        return when_empty
    summed = sum(values)
    if math.isfinite(summed):
        return summed / len(values)
    # Overflowing sum: scale before adding.
    return finite(sum(v / len(values) for v in values))


def weighted_sum(components: dict[str, float], weights: dict[str, float]) -> float:
    """Sum ``components[k] * weights[k]`` over the weight keys.

    Missing components count as 0.
    """
    return total(components.get(key, 0.0) * weight for key, weight in weights.items())


def round_whole(value: float) -> int:
    """Round to an integer; NaN rounds to 0, infinities saturate."""
    return round(finite(value))


def round1(value: float) -> float:
    """Round to one decimal place for presentation."""
    return round(finite(value), 1)


def round2(value: float) -> float:
    return round(finite(value), 2)
