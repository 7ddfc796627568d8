"""
Narrative lead analysis via a text-generation service.

``analyze_lead()`` is the single-lead entry point used by the pipeline: one
request, no retry, and any failure degrades to ``ANALYSIS_FALLBACK``.

``analyze_leads()`` analyzes several leads concurrently.  Calls are
independent, share one ``httpx.AsyncClient``, and are bounded by an
``asyncio.Semaphore`` (``analysis.concurrency``) to respect upstream rate
limits.  Each lead falls back individually.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from skiptrace_scorer.analysis.completion_client import CompletionClient
from skiptrace_scorer.analysis.prompts import SYSTEM_PROMPT, build_lead_prompt
from skiptrace_scorer.errors import AnalysisUnavailable
from skiptrace_scorer.models.lead import ScoredLead

logger = logging.getLogger(__name__)

ANALYSIS_FALLBACK = "Error analyzing lead with AI."


def _log_failure(scored: ScoredLead, exc: AnalysisUnavailable) -> None:
    logger.error(
        "Error analyzing lead with AI: %s", exc,
        extra={
            "lead_id": scored.lead.id,
            "row_number": scored.lead.row_number,
            "status_code": exc.status_code,
        },
    )


def analyze_lead(
    scored: ScoredLead,
    client: CompletionClient,
) -> str:
    """Request a sales-strategy narrative for one scored lead.

    Args:
        scored: The lead to analyze (usually the top-ranked one).
        client: Completion client carrying the credential.

    Returns:
        The generated text verbatim, or ``ANALYSIS_FALLBACK`` on failure.
    """
    prompt = build_lead_prompt(scored)
    try:
        return client.complete(SYSTEM_PROMPT, prompt)
    except AnalysisUnavailable as exc:
        _log_failure(scored, exc)
        return ANALYSIS_FALLBACK


async def _analyze_one(
    http: httpx.AsyncClient,
    semaphore: asyncio.Semaphore,
    client: CompletionClient,
    scored: ScoredLead,
) -> tuple[int, str]:
    async with semaphore:
        try:
            text = await client.acomplete(SYSTEM_PROMPT, build_lead_prompt(scored), http)
        except AnalysisUnavailable as exc:
            _log_failure(scored, exc)
            text = ANALYSIS_FALLBACK
    return scored.lead.row_number, text


async def analyze_leads_async(
    leads: list[ScoredLead],
    client: CompletionClient,
    concurrency: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[int, str]:
    """Analyze several leads with bounded concurrency.

    Results are keyed by sheet ``row_number``, which is unique per lead;
    the ``id`` column is not (sheets can repeat it).

    Args:
        leads:       Scored leads to analyze.
        client:      Completion client (config + credential).
        concurrency: Max in-flight requests; defaults to ``client.config.concurrency``.
        transport:   Optional transport for the shared ``httpx.AsyncClient``
                     (tests pass ``httpx.MockTransport``).

    Returns:
        Mapping of row number → narrative (or ``ANALYSIS_FALLBACK``), in input order.
    """
    if not leads:
        return {}

    semaphore = asyncio.Semaphore(concurrency or client.config.concurrency)
    async with httpx.AsyncClient(transport=transport) as http:
        results = await asyncio.gather(
            *(_analyze_one(http, semaphore, client, s) for s in leads)
        )
    return dict(results)


def analyze_leads(
    leads: list[ScoredLead],
    client: CompletionClient,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict[int, str]:
    """Blocking wrapper around ``analyze_leads_async`` for CLI use."""
    return asyncio.run(analyze_leads_async(leads, client, transport=transport))
