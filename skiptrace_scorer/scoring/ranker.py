"""
Lead ranker: scores a batch of LeadRecords and orders them for follow-up.

Usage flow
----------
1. score_leads(leads, weights)
   -> list[ScoredLead]  (descending by aggregate score; ties keep source order)

2. top_n(scored, n=10)
   -> list[ScoredLead]

3. filter_by_priority(scored, "hot")
   -> list[ScoredLead]  (priority label contains the query, case-insensitive)

4. priority_counts(scored)
   -> {"HOT": 3, "WARM": 5, ...}
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from skiptrace_scorer.config import ScoringWeights
from skiptrace_scorer.models.lead import PRIORITY_TIERS, LeadRecord, ScoredLead
from skiptrace_scorer.scoring.scorer import score_lead

logger = logging.getLogger(__name__)


def score_leads(
    leads: list[LeadRecord],
    weights: Optional[ScoringWeights] = None,
    current_year: Optional[int] = None,
) -> list[ScoredLead]:
    """Score every lead and sort descending by aggregate score.

    The sort is stable, so leads with equal scores stay in sheet order.

    Args:
        leads:        Canonical lead records (any order).
        weights:      Scoring weights; defaults to ``ScoringWeights()``.
        current_year: Reference year for property age (defaults to today).

    Returns:
        New list of ``ScoredLead``; empty when ``leads`` is empty.
    """
    weights = weights or ScoringWeights()
    if not math.isclose(weights.total, 100.0):
        logger.warning(
            "Scoring weights sum to %.1f (not 100); aggregate scores are not "
            "re-normalized and may fall outside 0-100",
            weights.total,
        )

    scored = [score_lead(lead, weights, current_year) for lead in leads]
    scored.sort(key=lambda s: s.score, reverse=True)

    if scored:
        counts = priority_counts(scored)
        logger.info(
            "Scored %d leads | %s",
            len(scored),
            ", ".join(f"{tier}={n}" for tier, n in counts.items()),
        )
    return scored


def top_n(scored: list[ScoredLead], n: int = 10) -> list[ScoredLead]:
    """First ``n`` leads of an already-sorted list."""
    return scored[: max(n, 0)]


def filter_by_priority(scored: list[ScoredLead], priority: str) -> list[ScoredLead]:
    """Leads whose priority label contains ``priority`` (case-insensitive)."""
    query = priority.strip().upper()
    return [s for s in scored if query in s.priority.upper()]


def priority_counts(scored: list[ScoredLead]) -> dict[str, int]:
    """Number of leads per priority tier, in tier order (zeros included)."""
    counts = {tier: 0 for tier in PRIORITY_TIERS}
    for s in scored:
        counts[s.priority] = counts.get(s.priority, 0) + 1
    return counts
