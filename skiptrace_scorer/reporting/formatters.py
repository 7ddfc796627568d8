"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept scored leads and return plain multi-line strings
suitable for ``typer.echo()``.  They never re-score anything.

No third-party dependencies (no ``rich``, no ``colorama``).

Leaderboard layout::

  Rank  Score  Priority  Owner                 Address                    Phone
  -----------------------------------------------------------------------------
     1   86.5       HOT  Jane Smith            12 Oak St, Dallas, TX      555-0100
"""

from __future__ import annotations

from skiptrace_scorer.models.lead import PRIORITY_TIERS, ScoredLead, format_currency


# ── Leaderboard ───────────────────────────────────────────────────────────────


def format_leaderboard(scored: list[ScoredLead], title: str = "Top Leads") -> str:
    """Format already-ranked leads as a one-line-per-lead table.

    Args:
        scored: Leads in display order (usually ``top_n`` of the ranked list).
        title:  Heading text.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {title} ===")

    if not scored:
        lines.append("")
        lines.append("  (no leads available; check the spreadsheet id and API key)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Score':>5}  {'Priority':>8}  "
        f"{'Owner':<22}  {'Address':<32}  {'Phone':<14}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, s in enumerate(scored, start=1):
        lead = s.lead
        lines.append(
            f"  {rank:>4}  {s.score:>5.1f}  {s.priority:>8}  "
            f"{(lead.owner_name or '-')[:22]:<22}  "
            f"{(lead.full_address or '-')[:32]:<32}  "
            f"{(lead.phone_1 or '-')[:14]:<14}"
        )
    return "\n".join(lines)


# ── Single lead ───────────────────────────────────────────────────────────────


def format_lead_detail(scored: ScoredLead) -> str:
    """Full breakdown of one lead: contact, financials, scores, insights."""
    lead = scored.lead
    b = scored.breakdown
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {lead.owner_name or 'Unknown owner'} - {scored.priority} ({scored.score:.1f}) ===")
    lines.append(f"  Address:   {lead.full_address or '-'}")
    phones = ", ".join(p for p in (lead.phone_1, lead.phone_2, lead.phone_3) if p)
    lines.append(f"  Phones:    {phones or '-'}")
    lines.append(f"  Email:     {lead.email or '-'}")
    lines.append(f"  Value:     {format_currency(lead.property_value)}")
    lines.append(f"  Equity:    {format_currency(lead.estimated_equity)}")
    lines.append(f"  Distress:  {', '.join(lead.distress_indicators) or 'None'}")

    lines.append("")
    lines.append("  Score breakdown:")
    for label, value in (
        ("Distress",        b.distress),
        ("Equity",          b.equity),
        ("Property age",    b.property_age),
        ("Tax delinquency", b.tax_delinquency),
        ("Ownership type",  b.ownership_type),
        ("Time on market",  b.time_on_market),
        ("Contactability",  b.contactability),
    ):
        lines.append(f"    {label:<16} {value:>5.0f}")

    lines.append("")
    offer = scored.offer_range.formatted()
    if scored.offer_range.has_data:
        lines.append(
            f"  Offer range: {offer['conservative']} / {offer['midpoint']} / "
            f"{offer['aggressive']}  (base {offer['base_value']})"
        )
    else:
        lines.append(f"  Offer range: {offer['status']}")

    if scored.insights:
        lines.append("")
        lines.append("  Insights:")
        lines.extend(f"    - {i}" for i in scored.insights)

    lines.append("")
    lines.append("  Next actions:")
    lines.extend(f"    {n}. {a}" for n, a in enumerate(scored.actions, start=1))
    return "\n".join(lines)


# ── Tier summary ──────────────────────────────────────────────────────────────


def format_priority_summary(counts: dict[str, int]) -> str:
    """One line per tier, e.g. ``  HOT       3``."""
    total = sum(counts.values())
    lines = ["", "=== Priority Summary ==="]
    for tier in PRIORITY_TIERS:
        lines.append(f"  {tier:<8} {counts.get(tier, 0):>5}")
    lines.append(f"  {'TOTAL':<8} {total:>5}")
    return "\n".join(lines)
