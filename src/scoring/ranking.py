"""AttentionRanker — top-N ranking of enriched projects.

Domains compute their own attention / risk / impact score; this module
only orders, filters and labels. Significance filters stay per domain
(safety ranks only ``risk_score > 10``; quality and environmental rank
everything).
"""

from __future__ import annotations

from collections.abc import Sequence

from src.scoring.bands import Breakpoint, classify_breakpoint
from src.scoring.models import AttentionEntry


def rank_by_attention(
    entries: Sequence[AttentionEntry],
    limit: int,
    *,
    min_score: float | None = None,
    levels: Sequence[Breakpoint] | None = None,
) -> list[AttentionEntry]:
    """Return the ``limit`` highest-scoring entries, highest first.

    Ties keep their input order. When ``min_score`` is given only entries
    with ``score > min_score`` are eligible. When ``levels`` is given each
    returned entry carries its resolved level.
    """
    if limit <= 0:
        return []

    eligible = [
        e for e in entries if min_score is None or e.score > min_score
    ]
    # sorted() is stable, reverse=True included.
    ranked = sorted(eligible, key=lambda e: e.score, reverse=True)[:limit]

    if not levels:
        return ranked
    return [
        e.model_copy(update={"level": classify_breakpoint(e.score, levels)})
        for e in ranked
    ]
