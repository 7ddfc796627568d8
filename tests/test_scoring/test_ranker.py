"""
Tests for skiptrace_scorer/scoring/ranker.py.

What we test
------------
score_leads():
  - Empty input → empty output, no exception.
  - Output sorted so score[i] >= score[i+1] for every adjacent pair.
  - Ties keep source order (stable sort).
  - Default weights used when none given.

top_n(), filter_by_priority(), priority_counts().
"""

from __future__ import annotations

import logging

import pytest

from skiptrace_scorer.config import ScoringWeights
from skiptrace_scorer.scoring.ranker import (
    filter_by_priority,
    priority_counts,
    score_leads,
    top_n,
)

YEAR = 2025


@pytest.fixture
def mixed_leads(make_lead):
    return [
        make_lead(id="quiet", row_number=2, owner_occupied=True),
        make_lead(
            id="hot", row_number=3, foreclosure=True, tax_delinquent=True,
            tax_amount=12000, vacant=True, absentee_owner=True, out_of_state=True,
            year_built=1900, listed=True, days_on_market=400,
            market_value=100000, estimated_equity=-5000,
            phone_1="1", phone_2="2", phone_3="3", email="e",
        ),
        make_lead(id="mid", row_number=4, vacant=True, phone_1="1", email="e"),
    ]


class TestScoreLeads:
    def test_empty_input(self):
        assert score_leads([]) == []

    def test_sorted_descending(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        scores = [s.score for s in scored]
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert scored[0].lead.id == "hot"
        assert scored[-1].lead.id == "quiet"

    def test_ties_keep_source_order(self, make_lead):
        leads = [make_lead(id=f"t{i}", row_number=i + 2) for i in range(5)]
        scored = score_leads(leads, ScoringWeights(), YEAR)
        assert [s.lead.id for s in scored] == ["t0", "t1", "t2", "t3", "t4"]

    def test_default_weights(self, mixed_leads):
        explicit = score_leads(mixed_leads, ScoringWeights(), YEAR)
        implicit = score_leads(mixed_leads, current_year=YEAR)
        assert [s.score for s in explicit] == [s.score for s in implicit]

    def test_input_not_mutated(self, mixed_leads):
        before = [lead.id for lead in mixed_leads]
        score_leads(mixed_leads, ScoringWeights(), YEAR)
        assert [lead.id for lead in mixed_leads] == before

    def test_warns_on_non_100_weights(self, mixed_leads, caplog):
        with caplog.at_level(logging.WARNING):
            score_leads(mixed_leads, ScoringWeights(distress=50), YEAR)
        assert "not re-normalized" in caplog.text


class TestSelection:
    def test_top_n(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        assert [s.lead.id for s in top_n(scored, 2)] == [s.lead.id for s in scored[:2]]
        assert top_n(scored, 0) == []
        assert len(top_n(scored, 10)) == 3

    def test_filter_by_priority_case_insensitive(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        hot = filter_by_priority(scored, "hot")
        assert [s.lead.id for s in hot] == ["hot"]

    def test_filter_by_priority_substring(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        # "O" appears in HOT, COLD
        matched = filter_by_priority(scored, "O")
        assert all("O" in s.priority for s in matched)
        assert len(matched) == sum(1 for s in scored if "O" in s.priority)

    def test_filter_no_match(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        assert filter_by_priority(scored, "LUKEWARM") == []

    def test_priority_counts(self, mixed_leads):
        scored = score_leads(mixed_leads, ScoringWeights(), YEAR)
        counts = priority_counts(scored)
        assert list(counts) == ["HOT", "WARM", "MEDIUM", "COLD", "ICE"]
        assert sum(counts.values()) == 3
        assert counts["HOT"] == 1
        assert counts["COLD"] == 2
