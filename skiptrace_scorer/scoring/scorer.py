"""
Lead scoring: converts a LeadRecord into sub-scores, a weighted aggregate,
a priority tier, insights, recommended actions and an offer range.

Score formula (weighted average of 0–100 sub-scores)
-----------------------------------------------------
    total = Σ (sub_score / 100) * weight

With the default weights (30/20/10/15/10/10/5, summing to 100) the total is
in 0–100.  Custom weights are NOT re-normalized; a set summing to 150 can
produce totals up to 150, which all tier as "HOT".

Component explanations
----------------------
distress (0–100):
    25 per Foreclosure / Pre-Foreclosure / Tax Delinquent label,
    15 per Vacant / Absentee Owner / Has Liens / Stale Listing,
    10 per any other label; clamped to 100.  No labels → 20 (not 50).

equity (0–100):
    Equity / value %.  Underwater → 95; thin equity (<10%) → 85, rising
    again for high equity (≥70% → 100).  Unknown equity or value → 50.

property_age (0–100):
    Older is higher: ≥80y → 95 ... <10y → 30.  Unknown year → 50.

tax_delinquency (0–100):
    Delinquent: 85–100 by amount owed.  Current: 30.

ownership_type (0–100):
    50 + absentee 20 + out-of-state 15 + not owner-occupied 10 + vacant 20.

time_on_market (0–100):
    Not listed → 50.  Listed: 40 (<30d) ... 100 (≥365d).

contactability (0–100):
    Phone 1 → 40, phone 2 → 25, phone 3 → 15, email → 20.

Priority tiers (inclusive lower bounds)
---------------------------------------
    HOT ≥ 80 · WARM ≥ 65 · MEDIUM ≥ 50 · COLD ≥ 35 · ICE otherwise
"""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Sequence

from skiptrace_scorer.config import ScoringWeights
from skiptrace_scorer.ingestion.normalize import (
    ABSENTEE_OWNER,
    FORECLOSURE,
    HAS_LIENS,
    PRE_FORECLOSURE,
    STALE_LISTING,
    TAX_DELINQUENT,
    VACANT,
)
from skiptrace_scorer.models.lead import (
    LeadRecord,
    OfferRange,
    ScoreBreakdown,
    ScoredLead,
)

_MAJOR_DISTRESS = frozenset({FORECLOSURE, PRE_FORECLOSURE, TAX_DELINQUENT})
_MODERATE_DISTRESS = frozenset({VACANT, ABSENTEE_OWNER, HAS_LIENS, STALE_LISTING})

NO_DISTRESS_SCORE = 20.0
UNKNOWN_SCORE = 50.0

# (lower bound, label); first match wins
_PRIORITY_TIERS: tuple[tuple[float, str], ...] = (
    (80.0, "HOT"),
    (65.0, "WARM"),
    (50.0, "MEDIUM"),
    (35.0, "COLD"),
)

_ACTIONS_BY_BAND: tuple[tuple[float, tuple[str, ...]], ...] = (
    (80.0, (
        "IMMEDIATE CALL - Top priority lead",
        "Prepare cash offer or creative financing options",
        "Research comps and ARV before calling",
    )),
    (65.0, (
        "Call within 24-48 hours",
        "Build rapport and uncover pain points",
        "Follow up with value proposition email",
    )),
    (50.0, (
        "Add to regular calling rotation",
        "Send introductory letter or postcard",
        "Monitor for status changes",
    )),
    (float("-inf"), (
        "Add to long-term nurture campaign",
        "Check back quarterly for changes",
    )),
)

OFFER_CONSERVATIVE_PCT = 0.55
OFFER_MIDPOINT_PCT = 0.65
OFFER_AGGRESSIVE_PCT = 0.70


# ── Sub-scores ────────────────────────────────────────────────────────────────

def score_distress(indicators: Sequence[str]) -> float:
    """Sum per-label contributions; an empty list scores 20."""
    if not indicators:
        return NO_DISTRESS_SCORE
    total = 0.0
    for label in indicators:
        if label in _MAJOR_DISTRESS:
            total += 25
        elif label in _MODERATE_DISTRESS:
            total += 15
        else:
            total += 10
    return _clamp(total, 0.0, 100.0)


def equity_percent(lead: LeadRecord) -> Optional[float]:
    """Equity as a percentage of property value, or ``None`` if either is 0."""
    value = lead.property_value
    if not lead.estimated_equity or not value:
        return None
    return lead.estimated_equity / value * 100.0


def score_equity(lead: LeadRecord) -> float:
    pct = equity_percent(lead)
    if pct is None:
        return UNKNOWN_SCORE
    if pct < 0:
        return 95.0
    if pct < 10:
        return 85.0
    if pct < 20:
        return 70.0
    if pct < 30:
        return 60.0
    if pct < 50:
        return 50.0
    if pct < 70:
        return 70.0
    return 100.0


def property_age(lead: LeadRecord, current_year: int) -> Optional[int]:
    """Years since construction, or ``None`` when the year is unknown."""
    if not lead.year_built:
        return None
    return current_year - lead.year_built


def score_property_age(lead: LeadRecord, current_year: int) -> float:
    age = property_age(lead, current_year)
    if age is None:
        return UNKNOWN_SCORE
    if age >= 80:
        return 95.0
    if age >= 60:
        return 85.0
    if age >= 40:
        return 75.0
    if age >= 30:
        return 65.0
    if age >= 20:
        return 50.0
    if age >= 10:
        return 40.0
    return 30.0


def score_tax_delinquency(lead: LeadRecord) -> float:
    """Delinquent leads score 85–100 by amount owed (strict thresholds)."""
    if not lead.tax_delinquent:
        return 30.0
    if lead.tax_amount > 10_000:
        return 100.0
    if lead.tax_amount > 5_000:
        return 95.0
    if lead.tax_amount > 2_000:
        return 90.0
    return 85.0


def score_ownership(lead: LeadRecord) -> float:
    score = 50.0
    if lead.absentee_owner:
        score += 20
    if lead.out_of_state:
        score += 15
    if not lead.owner_occupied:
        score += 10
    if lead.vacant:
        score += 20
    return _clamp(score, 0.0, 100.0)


def score_time_on_market(lead: LeadRecord) -> float:
    if not lead.listed:
        return UNKNOWN_SCORE
    days = lead.days_on_market
    if days >= 365:
        return 100.0
    if days >= 270:
        return 95.0
    if days >= 180:
        return 85.0
    if days >= 90:
        return 70.0
    if days >= 60:
        return 60.0
    if days >= 30:
        return 50.0
    return 40.0


def score_contactability(lead: LeadRecord) -> float:
    score = 0.0
    if lead.phone_1:
        score += 40
    if lead.phone_2:
        score += 25
    if lead.phone_3:
        score += 15
    if lead.email:
        score += 20
    return _clamp(score, 0.0, 100.0)


def compute_breakdown(lead: LeadRecord, current_year: Optional[int] = None) -> ScoreBreakdown:
    """Compute all seven sub-scores for one lead.

    Args:
        lead:         Canonical lead record.
        current_year: Reference year for property age (defaults to today).

    Returns:
        ScoreBreakdown with every factor in 0–100.
    """
    year = current_year or date.today().year
    return ScoreBreakdown(
        distress=score_distress(lead.distress_indicators),
        equity=score_equity(lead),
        property_age=score_property_age(lead, year),
        tax_delinquency=score_tax_delinquency(lead),
        ownership_type=score_ownership(lead),
        time_on_market=score_time_on_market(lead),
        contactability=score_contactability(lead),
    )


# ── Aggregation + tiering ─────────────────────────────────────────────────────

def aggregate_score(breakdown: ScoreBreakdown, weights: ScoringWeights) -> float:
    """Weighted sum of ``sub_score / 100 * weight``. Unclamped, unrounded."""
    return (
        breakdown.distress / 100 * weights.distress
        + breakdown.equity / 100 * weights.equity
        + breakdown.property_age / 100 * weights.property_age
        + breakdown.tax_delinquency / 100 * weights.tax_delinquency
        + breakdown.ownership_type / 100 * weights.ownership_type
        + breakdown.time_on_market / 100 * weights.time_on_market
        + breakdown.contactability / 100 * weights.contactability
    )


def determine_priority(score: float) -> str:
    """Map an aggregate score to HOT / WARM / MEDIUM / COLD / ICE."""
    for lower, label in _PRIORITY_TIERS:
        if score >= lower:
            return label
    return "ICE"


def recommend_actions(score: float) -> list[str]:
    """Return the fixed action list for the score's band."""
    for lower, actions in _ACTIONS_BY_BAND:
        if score >= lower:
            return list(actions)
    return list(_ACTIONS_BY_BAND[-1][1])


# ── Insights ──────────────────────────────────────────────────────────────────

def build_insights(lead: LeadRecord, current_year: Optional[int] = None) -> list[str]:
    """Assemble human-readable observations about a lead.

    Every check is independent; all that match are emitted in this order:
    distress summary, foreclosure, tax delinquency, vacancy, equity
    (high or underwater), remote owner, stale listing, property age,
    contactability (multi-channel or missing).

    The equity check uses market value only. A lead priced from its
    assessed value alone gets no equity insight, even though
    ``score_equity`` still scores it.

    Returns:
        Possibly-empty list of insight strings.
    """
    year = current_year or date.today().year
    insights: list[str] = []

    indicators = lead.distress_indicators
    if indicators:
        insights.append(f"DISTRESS SIGNALS: {', '.join(indicators)}")

    if lead.foreclosure or lead.pre_foreclosure:
        insights.append("FORECLOSURE: This is a time-sensitive opportunity - act fast!")

    if lead.tax_delinquent:
        insights.append("TAX DELINQUENT: Owner may be motivated to avoid tax sale")

    if lead.vacant:
        insights.append("VACANT PROPERTY: No tenant income, owner may want out")

    pct = lead.estimated_equity / lead.market_value * 100 if lead.market_value else 0.0
    if pct >= 70:
        insights.append(
            f"HIGH EQUITY ({pct:.0f}%): Great for subject-to or seller financing"
        )
    elif pct < 0:
        insights.append("UNDERWATER: Owner may be desperate, consider short sale")

    if lead.absentee_owner or lead.out_of_state:
        insights.append("REMOTE OWNER: Likely tired of managing from distance")

    if lead.days_on_market > 180:
        insights.append(
            f"STALE LISTING ({lead.days_on_market:g} days): Seller getting desperate"
        )

    age = property_age(lead, year)
    if age is not None and age >= 50:
        insights.append(
            f"OLDER PROPERTY ({age} years): Likely needs updates - position as solution"
        )

    # Only the primary phone counts here.
    if lead.phone_1 and lead.email:
        insights.append("MULTI-CHANNEL: Use both phone and email for outreach")
    elif not lead.phone_1 and not lead.email:
        insights.append("LIMITED CONTACT INFO: May need additional skip tracing")

    return insights


# ── Offer range ───────────────────────────────────────────────────────────────

def compute_offer_range(lead: LeadRecord) -> OfferRange:
    """Estimate a cash-offer range at 55% / 65% / 70% of property value.

    Base value is market value, then assessed value.  A zero base yields an
    ``OfferRange`` with ``has_data == False``.
    """
    base = lead.property_value
    if not base:
        return OfferRange(base_value=0)
    return OfferRange(
        base_value=base,
        conservative=_round_half_up(base * OFFER_CONSERVATIVE_PCT),
        midpoint=_round_half_up(base * OFFER_MIDPOINT_PCT),
        aggressive=_round_half_up(base * OFFER_AGGRESSIVE_PCT),
    )


# ── Whole-lead scoring ────────────────────────────────────────────────────────

def score_lead(
    lead: LeadRecord,
    weights: ScoringWeights,
    current_year: Optional[int] = None,
) -> ScoredLead:
    """Score a single lead end to end."""
    breakdown = compute_breakdown(lead, current_year)
    total = aggregate_score(breakdown, weights)
    return ScoredLead(
        lead=lead,
        breakdown=breakdown,
        score=total,
        priority=determine_priority(total),
        insights=build_insights(lead, current_year),
        actions=recommend_actions(total),
        offer_range=compute_offer_range(lead),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
