"""
Tests for skiptrace_scorer/scoring/scorer.py.

What we test
------------
Sub-scores:
  - distress: 20 with no indicators (kept distinct from the 50 used for
    missing data elsewhere), per-label weights, clamp at 100.
  - equity, property_age, tax_delinquency, ownership, time_on_market,
    contactability: every tier boundary and the unknown-data default.

aggregate_score():
  - Uniform 50s with default weights → exactly 50.
  - Custom weights are not re-normalized (can exceed 100).

determine_priority():
  - Inclusive lower bounds (80 → HOT, 79.999 → WARM, ...).

recommend_actions(): one band per score, 2–3 actions each.

build_insights(): independent conditions in fixed order.

compute_offer_range(): 55/65/70% of market value, assessed fallback,
insufficient data at 0.
"""

from __future__ import annotations

import pytest

from skiptrace_scorer.config import ScoringWeights
from skiptrace_scorer.ingestion.normalize import (
    ABSENTEE_OWNER,
    FORECLOSURE,
    OLDER_PROPERTY,
    OUT_OF_STATE_OWNER,
    UNDERWATER,
    VACANT,
)
from skiptrace_scorer.models.lead import ScoreBreakdown
from skiptrace_scorer.scoring.scorer import (
    aggregate_score,
    build_insights,
    compute_breakdown,
    compute_offer_range,
    determine_priority,
    recommend_actions,
    score_contactability,
    score_distress,
    score_equity,
    score_lead,
    score_ownership,
    score_property_age,
    score_tax_delinquency,
    score_time_on_market,
)

YEAR = 2025


def _uniform(value: float) -> ScoreBreakdown:
    return ScoreBreakdown(
        distress=value, equity=value, property_age=value, tax_delinquency=value,
        ownership_type=value, time_on_market=value, contactability=value,
    )


# ── Distress ──────────────────────────────────────────────────────────────────

class TestDistressScore:
    def test_no_indicators_scores_20_not_50(self):
        # Deliberately lower than the 50 "unknown" default of other factors.
        assert score_distress([]) == 20.0

    def test_major_label(self):
        assert score_distress([FORECLOSURE]) == 25.0

    def test_moderate_label(self):
        assert score_distress([VACANT]) == 15.0

    def test_other_label(self):
        assert score_distress([OUT_OF_STATE_OWNER]) == 10.0
        assert score_distress([OLDER_PROPERTY, UNDERWATER]) == 20.0

    def test_sum_of_mixed_labels(self):
        assert score_distress([FORECLOSURE, VACANT, ABSENTEE_OWNER, UNDERWATER]) == 65.0

    def test_clamped_to_100(self):
        labels = ["Tax Delinquent", "Foreclosure", "Pre-Foreclosure", "Vacant",
                  "Absentee Owner", "Has Liens", "Stale Listing"]
        assert score_distress(labels) == 100.0


# ── Equity ────────────────────────────────────────────────────────────────────

class TestEquityScore:
    def test_unknown_equity_or_value(self, make_lead):
        assert score_equity(make_lead(market_value=100000)) == 50.0
        assert score_equity(make_lead(estimated_equity=50000)) == 50.0

    @pytest.mark.parametrize(
        "equity, expected",
        [
            (-10000, 95.0),
            (5000, 85.0),
            (10000, 70.0),
            (19999, 70.0),
            (20000, 60.0),
            (30000, 50.0),
            (49999, 50.0),
            (50000, 70.0),
            (69999, 70.0),
            (70000, 100.0),
            (100000, 100.0),
        ],
    )
    def test_tiers(self, make_lead, equity, expected):
        lead = make_lead(market_value=100000, estimated_equity=equity)
        assert score_equity(lead) == expected

    def test_assessed_value_fallback(self, make_lead):
        lead = make_lead(assessed_value=100000, estimated_equity=80000)
        assert score_equity(lead) == 100.0


# ── Property age ──────────────────────────────────────────────────────────────

class TestPropertyAgeScore:
    def test_unknown_year(self, make_lead):
        assert score_property_age(make_lead(), YEAR) == 50.0

    @pytest.mark.parametrize(
        "age, expected",
        [(80, 95.0), (79, 85.0), (60, 85.0), (40, 75.0), (30, 65.0),
         (20, 50.0), (10, 40.0), (9, 30.0), (0, 30.0)],
    )
    def test_tiers(self, make_lead, age, expected):
        assert score_property_age(make_lead(year_built=YEAR - age), YEAR) == expected


# ── Tax delinquency ───────────────────────────────────────────────────────────

class TestTaxDelinquencyScore:
    @pytest.mark.parametrize(
        "amount, expected",
        [(12000, 100.0), (10001, 100.0), (10000, 95.0), (6000, 95.0),
         (5000, 90.0), (2001, 90.0), (2000, 85.0), (0, 85.0)],
    )
    def test_delinquent_tiers(self, make_lead, amount, expected):
        lead = make_lead(tax_delinquent=True, tax_amount=amount)
        assert score_tax_delinquency(lead) == expected

    def test_not_delinquent(self, make_lead):
        assert score_tax_delinquency(make_lead(tax_amount=50000)) == 30.0


# ── Ownership ─────────────────────────────────────────────────────────────────

class TestOwnershipScore:
    def test_owner_occupied_baseline(self, make_lead):
        assert score_ownership(make_lead(owner_occupied=True)) == 50.0

    def test_not_owner_occupied_adds_10(self, make_lead):
        assert score_ownership(make_lead()) == 60.0

    def test_absentee_out_of_state(self, make_lead):
        lead = make_lead(absentee_owner=True, out_of_state=True)
        assert score_ownership(lead) == 95.0

    def test_clamped_to_100(self, make_lead):
        lead = make_lead(absentee_owner=True, out_of_state=True, vacant=True)
        assert score_ownership(lead) == 100.0


# ── Time on market ────────────────────────────────────────────────────────────

class TestTimeOnMarketScore:
    def test_not_listed(self, make_lead):
        assert score_time_on_market(make_lead(days_on_market=400)) == 50.0

    @pytest.mark.parametrize(
        "days, expected",
        [(365, 100.0), (364, 95.0), (270, 95.0), (180, 85.0), (90, 70.0),
         (60, 60.0), (30, 50.0), (29, 40.0), (0, 40.0)],
    )
    def test_tiers(self, make_lead, days, expected):
        assert score_time_on_market(make_lead(listed=True, days_on_market=days)) == expected


# ── Contactability ────────────────────────────────────────────────────────────

class TestContactabilityScore:
    def test_nothing(self, make_lead):
        assert score_contactability(make_lead()) == 0.0

    def test_first_phone_only(self, make_lead):
        assert score_contactability(make_lead(phone_1="555")) == 40.0

    def test_everything(self, make_lead):
        lead = make_lead(phone_1="1", phone_2="2", phone_3="3", email="a@b.c")
        assert score_contactability(lead) == 100.0

    def test_second_phone_without_first(self, make_lead):
        assert score_contactability(make_lead(phone_2="2", email="a@b.c")) == 45.0


# ── Aggregate + priority ──────────────────────────────────────────────────────

class TestAggregate:
    def test_uniform_fifty_gives_fifty(self):
        assert aggregate_score(_uniform(50), ScoringWeights()) == pytest.approx(50.0)

    def test_uniform_hundred_gives_weight_total(self):
        assert aggregate_score(_uniform(100), ScoringWeights()) == pytest.approx(100.0)

    def test_custom_weights_not_renormalized(self):
        weights = ScoringWeights(distress=60, equity=40, property_age=10,
                                 tax_delinquency=15, ownership_type=10,
                                 time_on_market=10, contactability=5)
        assert weights.total == 150
        total = aggregate_score(_uniform(100), weights)
        assert total == pytest.approx(150.0)
        assert determine_priority(total) == "HOT"

    def test_zero_weights(self):
        weights = ScoringWeights(distress=0, equity=0, property_age=0, tax_delinquency=0,
                                 ownership_type=0, time_on_market=0, contactability=0)
        assert aggregate_score(_uniform(100), weights) == 0.0

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            ScoringWeights(distress=-1)


class TestDeterminePriority:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (100.0, "HOT"), (80.0, "HOT"), (79.999, "WARM"),
            (65.0, "WARM"), (64.99, "MEDIUM"),
            (50.0, "MEDIUM"), (49.99, "COLD"),
            (35.0, "COLD"), (34.99, "ICE"), (0.0, "ICE"), (-5.0, "ICE"),
        ],
    )
    def test_boundaries(self, score, expected):
        assert determine_priority(score) == expected


class TestRecommendActions:
    @pytest.mark.parametrize("score", [95.0, 80.0, 70.0, 65.0, 55.0, 50.0, 10.0])
    def test_two_to_three_actions(self, score):
        assert 2 <= len(recommend_actions(score)) <= 3

    def test_bands_are_distinct(self):
        bands = [tuple(recommend_actions(s)) for s in (80.0, 65.0, 50.0, 49.9)]
        assert len(set(bands)) == 4

    def test_same_band_same_actions(self):
        assert recommend_actions(80.0) == recommend_actions(99.0)
        assert recommend_actions(0.0) == recommend_actions(49.9)

    @pytest.mark.parametrize(
        "score, expected",
        [
            (85.0, [
                "IMMEDIATE CALL - Top priority lead",
                "Prepare cash offer or creative financing options",
                "Research comps and ARV before calling",
            ]),
            (70.0, [
                "Call within 24-48 hours",
                "Build rapport and uncover pain points",
                "Follow up with value proposition email",
            ]),
            (55.0, [
                "Add to regular calling rotation",
                "Send introductory letter or postcard",
                "Monitor for status changes",
            ]),
            (20.0, [
                "Add to long-term nurture campaign",
                "Check back quarterly for changes",
            ]),
        ],
    )
    def test_band_action_lists(self, score, expected):
        assert recommend_actions(score) == expected


# ── Insights ──────────────────────────────────────────────────────────────────

class TestBuildInsights:
    def test_quiet_lead_with_no_contact_info(self, make_lead):
        insights = build_insights(make_lead(owner_occupied=True), YEAR)
        assert insights == ["LIMITED CONTACT INFO: May need additional skip tracing"]

    def test_multi_channel_contact(self, make_lead):
        insights = build_insights(make_lead(phone_1="555", email="a@b.c"), YEAR)
        assert insights == ["MULTI-CHANNEL: Use both phone and email for outreach"]

    def test_phone_only_emits_no_contact_insight(self, make_lead):
        assert build_insights(make_lead(phone_1="555"), YEAR) == []

    def test_secondary_phone_does_not_count_as_primary(self, make_lead):
        assert build_insights(make_lead(phone_2="555", email="a@b.c"), YEAR) == []

    def test_secondary_phone_alone_is_limited_contact(self, make_lead):
        insights = build_insights(make_lead(phone_2="555"), YEAR)
        assert insights == ["LIMITED CONTACT INFO: May need additional skip tracing"]

    def test_all_conditions_in_order(self, make_lead):
        lead = make_lead(
            foreclosure=True,
            tax_delinquent=True,
            tax_amount=4500,
            vacant=True,
            absentee_owner=True,
            days_on_market=200,
            year_built=1960,
            market_value=100000,
            estimated_equity=80000,
            phone_1="555",
            email="a@b.c",
        )
        insights = build_insights(lead, YEAR)
        assert insights == [
            "DISTRESS SIGNALS: Tax Delinquent, Foreclosure, Vacant, "
            "Absentee Owner, Stale Listing, Older Property",
            "FORECLOSURE: This is a time-sensitive opportunity - act fast!",
            "TAX DELINQUENT: Owner may be motivated to avoid tax sale",
            "VACANT PROPERTY: No tenant income, owner may want out",
            "HIGH EQUITY (80%): Great for subject-to or seller financing",
            "REMOTE OWNER: Likely tired of managing from distance",
            "STALE LISTING (200 days): Seller getting desperate",
            "OLDER PROPERTY (65 years): Likely needs updates - position as solution",
            "MULTI-CHANNEL: Use both phone and email for outreach",
        ]

    def test_underwater_message(self, make_lead):
        lead = make_lead(market_value=100000, estimated_equity=-20000, phone_1="1")
        insights = build_insights(lead, YEAR)
        assert "UNDERWATER: Owner may be desperate, consider short sale" in insights

    def test_mid_equity_has_no_equity_insight(self, make_lead):
        lead = make_lead(market_value=100000, estimated_equity=40000, phone_1="1")
        assert not any("equity" in i.lower() for i in build_insights(lead, YEAR))

    def test_equity_insight_ignores_assessed_value(self, make_lead):
        high = make_lead(assessed_value=100000, estimated_equity=80000, phone_1="1")
        under = make_lead(assessed_value=100000, estimated_equity=-5000, phone_1="1")
        assert build_insights(high, YEAR) == []
        assert not any("UNDERWATER" in i for i in build_insights(under, YEAR))
        # The sub-score still prices equity from the assessed value.
        assert score_equity(high) == 100.0

    def test_age_threshold(self, make_lead):
        young = build_insights(make_lead(year_built=YEAR - 49, phone_1="1"), YEAR)
        old = build_insights(make_lead(year_built=YEAR - 50, phone_1="1"), YEAR)
        assert not any("OLDER PROPERTY" in i for i in young)
        assert "OLDER PROPERTY (50 years): Likely needs updates - position as solution" in old


# ── Offer range ───────────────────────────────────────────────────────────────

class TestOfferRange:
    def test_market_value_200k(self, make_lead):
        offer = compute_offer_range(make_lead(market_value=200000))
        assert offer.conservative == 110000
        assert offer.midpoint == 130000
        assert offer.aggressive == 140000
        assert offer.formatted() == {
            "conservative": "$110,000",
            "midpoint": "$130,000",
            "aggressive": "$140,000",
            "base_value": "$200,000",
        }

    def test_assessed_value_fallback(self, make_lead):
        offer = compute_offer_range(make_lead(assessed_value=100000))
        assert offer.base_value == 100000
        assert offer.conservative == 55000

    def test_market_value_preferred_over_assessed(self, make_lead):
        offer = compute_offer_range(make_lead(market_value=200000, assessed_value=100000))
        assert offer.base_value == 200000

    def test_insufficient_data(self, make_lead):
        offer = compute_offer_range(make_lead())
        assert offer.has_data is False
        assert offer.formatted() == {"status": "Insufficient data"}

    def test_rounds_half_up(self, make_lead):
        # 0.55 * 1001 = 550.55 → 551
        assert compute_offer_range(make_lead(market_value=1001)).conservative == 551


# ── Whole-lead scoring ────────────────────────────────────────────────────────

class TestScoreLead:
    def test_breakdown_within_range(self, make_lead):
        lead = make_lead(
            foreclosure=True, tax_delinquent=True, tax_amount=12000, vacant=True,
            absentee_owner=True, out_of_state=True, year_built=1900, listed=True,
            days_on_market=400, market_value=100000, estimated_equity=-5000,
            phone_1="1", phone_2="2", phone_3="3", email="e",
        )
        b = compute_breakdown(lead, YEAR)
        for value in b.model_dump().values():
            assert 0.0 <= value <= 100.0

    def test_fully_distressed_lead_is_hot(self, make_lead):
        lead = make_lead(
            foreclosure=True, tax_delinquent=True, tax_amount=12000, vacant=True,
            absentee_owner=True, out_of_state=True, year_built=1900, listed=True,
            days_on_market=400, market_value=100000, estimated_equity=-5000,
            phone_1="1", phone_2="2", phone_3="3", email="e",
        )
        scored = score_lead(lead, ScoringWeights(), YEAR)
        assert scored.priority == "HOT"
        assert scored.score == pytest.approx(98.5)
        assert scored.lead == lead

    def test_quiet_owner_occupied_lead(self, make_lead):
        lead = make_lead(owner_occupied=True)
        scored = score_lead(lead, ScoringWeights(), YEAR)
        # 20*.3 + 50*.2 + 50*.1 + 30*.15 + 50*.1 + 50*.1 + 0*.05
        assert scored.score == pytest.approx(35.5)
        assert scored.priority == "COLD"
        assert scored.breakdown.distress == 20.0

    def test_scored_lead_is_frozen(self, make_lead):
        scored = score_lead(make_lead(), ScoringWeights(), YEAR)
        with pytest.raises(Exception):
            scored.score = 1.0  # type: ignore[misc]
