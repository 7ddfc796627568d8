"""
Lead scoring engine: converts canonical LeadRecords into ranked ScoredLeads
with sub-score breakdowns, insights, next actions and offer ranges.

Modules
-------
scorer : sub-score functions + aggregate_score() + determine_priority()
         + build_insights() + recommend_actions() + compute_offer_range()
         Pure functions, no I/O.
ranker : score_leads() + top_n() + filter_by_priority() + priority_counts().
"""
