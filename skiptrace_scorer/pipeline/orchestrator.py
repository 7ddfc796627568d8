"""
Lead pipeline orchestration.

``LeadPipeline`` runs the batch in a fixed sequence:

  Step 1 — Load:     ``SkipTraceConnector.fetch_leads()`` (``[]`` on source failure).
  Step 2 — Score:    ``score_leads()`` with ``config.scoring`` weights, sorted
                     descending.
  Step 3 — Analyze:  Optional narrative analysis of the top lead (or top N).
  Step 4 — Present:  Leaderboard / priority filter / CSV export read the held list.

The only state kept between calls is ``scored_leads``, the list produced
by the last ``load_and_score_leads()``.  No step raises on service failure:
an unavailable source yields an empty list, an unavailable analyzer yields
the fallback text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from skiptrace_scorer.analysis.analyzer import analyze_lead, analyze_leads
from skiptrace_scorer.analysis.completion_client import CompletionClient
from skiptrace_scorer.config import AppConfig
from skiptrace_scorer.ingestion.connector import SkipTraceConnector
from skiptrace_scorer.models.lead import ScoredLead
from skiptrace_scorer.reporting.export import (
    EXPORT_FIELDS,
    export_to_csv,
    export_to_json,
    flatten_scored_leads_for_export,
)
from skiptrace_scorer.scoring.ranker import (
    filter_by_priority,
    priority_counts,
    score_leads,
    top_n,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineRunResult:
    """Summary of one ``load_and_score_leads()`` pass.

    Attributes:
        started_at:      UTC start time.
        finished_at:     UTC finish time.
        leads_loaded:    Records returned by the connector.
        tier_counts:     Leads per priority tier.
    """

    started_at: datetime
    finished_at: Optional[datetime] = None
    leads_loaded: int = 0
    tier_counts: dict[str, int] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


class LeadPipeline:
    """Load, score and (optionally) analyze skip-trace leads.

    Usage::

        pipeline = LeadPipeline(config)
        pipeline.load_and_score_leads()
        for s in pipeline.top_leads(10):
            ...
        text = pipeline.analyze_top_lead()

    Attributes:
        config:        Application configuration.
        connector:     Data source adapter.
        completion:    Narrative-analysis client.
        scored_leads:  Sorted result of the last scoring pass.
        last_run:      Summary of the last scoring pass, or ``None``.
    """

    def __init__(
        self,
        config: AppConfig,
        connector: Optional[SkipTraceConnector] = None,
        completion: Optional[CompletionClient] = None,
    ) -> None:
        self.config = config
        self.connector = connector or SkipTraceConnector(config.sheets)
        self.completion = completion or CompletionClient(config.analysis)
        self.scored_leads: list[ScoredLead] = []
        self.last_run: Optional[PipelineRunResult] = None

    def load_and_score_leads(self, current_year: Optional[int] = None) -> list[ScoredLead]:
        """Fetch every lead, score it, and keep the sorted list.

        Args:
            current_year: Reference year for property age (defaults to today).

        Returns:
            Leads sorted descending by score (empty if the source is unavailable).
        """
        run = PipelineRunResult(started_at=datetime.now(timezone.utc))
        logger.info("Loading skip trace leads...")

        leads = self.connector.fetch_leads()
        run.leads_loaded = len(leads)

        self.scored_leads = score_leads(leads, self.config.scoring, current_year)
        run.tier_counts = priority_counts(self.scored_leads)
        run.finished_at = datetime.now(timezone.utc)
        self.last_run = run
        return self.scored_leads

    def top_leads(self, n: Optional[int] = None) -> list[ScoredLead]:
        """The ``n`` highest-scoring leads (default ``reporting.top_n``)."""
        return top_n(self.scored_leads, n if n is not None else self.config.reporting.top_n)

    def filter_by_priority(self, priority: str) -> list[ScoredLead]:
        """Held leads whose priority label contains ``priority``."""
        return filter_by_priority(self.scored_leads, priority)

    def analyze_top_lead(self) -> Optional[str]:
        """Narrative analysis for the top lead; ``None`` if nothing is scored."""
        if not self.scored_leads:
            logger.warning("No scored leads to analyze")
            return None
        top = self.scored_leads[0]
        logger.info("Analyzing top lead %s (score %.1f)", top.lead.id, top.score)
        return analyze_lead(top, self.completion)

    def analyze_top_leads(self, n: int) -> dict[int, str]:
        """Narrative analysis for the top ``n`` leads, keyed by sheet row number."""
        leads = self.top_leads(n)
        if not leads:
            logger.warning("No scored leads to analyze")
            return {}
        return analyze_leads(leads, self.completion)

    def export_csv(self, path: Path) -> Path:
        """Write the flat CSV of the held list and return the path."""
        written = export_to_csv(
            flatten_scored_leads_for_export(self.scored_leads), path, EXPORT_FIELDS
        )
        logger.info("Exported %d leads to %s", len(self.scored_leads), written)
        return written

    def export_json(self, path: Path) -> Path:
        """Write the full scored list (breakdown, insights, actions) as JSON."""
        written = export_to_json(
            [s.model_dump(exclude={"lead": {"raw"}}) for s in self.scored_leads], path
        )
        logger.info("Exported %d leads to %s", len(self.scored_leads), written)
        return written
