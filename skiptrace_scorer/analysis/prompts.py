"""Prompt templates for narrative lead analysis."""

from __future__ import annotations

from datetime import date
from typing import Optional

from skiptrace_scorer.models.lead import ScoredLead, format_currency

SYSTEM_PROMPT = """You are an expert real estate wholesaler specializing in analyzing skip trace data, identifying motivated sellers, and structuring creative deals.
Provide actionable cold-calling scripts and negotiation strategies.
When relevant, discuss creative financing structures such as subject-to, seller financing and lease options.
Reference the numbers you are given; do not invent data. ARV (after-repair value) is not provided."""

LEAD_PROMPT = """Analyze this skip trace lead and provide a complete action plan:

PROPERTY & OWNER INFO:
- Owner: {owner_name}
- Property: {address}
- County: {county}
- Contact: {phones} | {email}

PROPERTY DETAILS:
- Type: {property_type}
- Year Built: {year_built} ({age} years old)
- Size: {bedrooms:g}bd/{bathrooms:g}ba, {square_feet:,.0f} sqft
- Lot: {lot_size:,.0f} sqft

FINANCIALS:
- Market Value: {market_value}
- Assessed Value: {assessed_value}
- Last Sale: {last_sale_price} on {last_sale_date}
- Estimated Equity: {estimated_equity}
- Mortgage: {estimated_mortgage}
- Tax Amount: {tax_amount}
- Liens: {lien_amount}

DISTRESS SIGNALS:
{distress}
- Tax Delinquent: {tax_delinquent}
- Foreclosure: {foreclosure}
- Pre-Foreclosure: {pre_foreclosure}
- Vacant: {vacant}
- Absentee Owner: {absentee_owner}
- Out of State: {out_of_state}
- Days on Market: {days_on_market}

LEAD SCORE: {score:.1f}/100 ({priority})

SCORE BREAKDOWN:
- Distress: {distress_score:.0f}
- Equity: {equity_score:.0f}
- Property Age: {age_score:.0f}
- Tax Delinquency: {tax_score:.0f}
- Ownership Type: {ownership_score:.0f}
- Time on Market: {market_score:.0f}
- Contactability: {contact_score:.0f}

ESTIMATED OFFER RANGE:
{offer_range}

Please provide:
1. **Opening Script** - First 30 seconds of the cold call
2. **Pain Point Questions** - What to ask to uncover motivation
3. **Deal Structure** - Best creative financing approach (subject-to, seller financing, lease option, etc.)
4. **Objection Handlers** - How to overcome common objections
5. **Offer Strategy** - Specific offer recommendation with reasoning
6. **Follow-up Plan** - If they don't bite immediately
7. **Red Flags** - Any concerns about this deal"""


def _yes_no(flag: bool) -> str:
    return "YES" if flag else "No"


def _money(value: float) -> str:
    return format_currency(value) if value else "N/A"


def build_lead_prompt(scored: ScoredLead, current_year: Optional[int] = None) -> str:
    """Render ``LEAD_PROMPT`` for one scored lead.

    Zero-valued money fields render as ``N/A``; ``Days on Market`` reads
    ``Not listed`` when the sheet has no value.
    """
    lead = scored.lead
    year = current_year or date.today().year
    phones = [p for p in (lead.phone_1, lead.phone_2, lead.phone_3) if p]
    offer = scored.offer_range
    if offer.has_data:
        fmt = offer.formatted()
        offer_text = (
            f"- Conservative (55%): {fmt['conservative']}\n"
            f"- Midpoint (65%): {fmt['midpoint']}\n"
            f"- Aggressive (70%): {fmt['aggressive']}\n"
            f"- Based on value: {fmt['base_value']}"
        )
    else:
        offer_text = "- Insufficient data (no market or assessed value)"

    b = scored.breakdown
    return LEAD_PROMPT.format(
        owner_name=lead.owner_name or "Unknown",
        address=lead.full_address or "Unknown",
        county=lead.county or "Unknown",
        phones=", ".join(phones) or "N/A",
        email=lead.email or "N/A",
        property_type=lead.property_type or "Unknown",
        year_built=lead.year_built or "Unknown",
        age=year - lead.year_built if lead.year_built else "N/A",
        bedrooms=lead.bedrooms,
        bathrooms=lead.bathrooms,
        square_feet=lead.square_feet,
        lot_size=lead.lot_size,
        market_value=_money(lead.market_value),
        assessed_value=_money(lead.assessed_value),
        last_sale_price=_money(lead.last_sale_price),
        last_sale_date=lead.last_sale_date or "N/A",
        estimated_equity=_money(lead.estimated_equity),
        estimated_mortgage=_money(lead.estimated_mortgage),
        tax_amount=_money(lead.tax_amount),
        lien_amount=_money(lead.lien_amount),
        distress=", ".join(lead.distress_indicators) or "None identified",
        tax_delinquent=_yes_no(lead.tax_delinquent),
        foreclosure=_yes_no(lead.foreclosure),
        pre_foreclosure=_yes_no(lead.pre_foreclosure),
        vacant=_yes_no(lead.vacant),
        absentee_owner=_yes_no(lead.absentee_owner),
        out_of_state=_yes_no(lead.out_of_state),
        days_on_market=f"{lead.days_on_market:g}" if lead.days_on_market else "Not listed",
        score=scored.score,
        priority=scored.priority,
        distress_score=b.distress,
        equity_score=b.equity,
        age_score=b.property_age,
        tax_score=b.tax_delinquency,
        ownership_score=b.ownership_type,
        market_score=b.time_on_market,
        contact_score=b.contactability,
        offer_range=offer_text,
    )
