"""
Lead models — canonical skip-trace record and its scored counterpart.

Two-stage design:
  1. ``LeadRecord``  — one spreadsheet row normalized into the canonical
                       schema; numeric fields default to 0, flags to False.
  2. ``ScoredLead``  — a ``LeadRecord`` plus sub-scores, weighted aggregate,
                       priority tier, insights, actions and offer range.

All models are frozen (immutable) after construction, so a scored list can
be handed to reporting and analysis without risk of mutation.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict

PRIORITY_TIERS: tuple[str, ...] = ("HOT", "WARM", "MEDIUM", "COLD", "ICE")


class LeadRecord(BaseModel):
    """A single owner/property pairing normalized from a spreadsheet row.

    Attributes:
        id:                  Source id column, or ``"lead-<row_number>"``.
        row_number:          1-based sheet row (header is row 1, so data starts at 2).
        owner_name:          Owner name, or first + last name when absent.
        phone_1/2/3:         Up to three phone numbers (empty string if absent).
        email:               Owner email (empty string if absent).
        address ... county:  Property address components.
        property_type:       Free-text property type ("Single Family", ...).
        bedrooms ... year_built: Physical attributes; 0 when absent/unparseable.
        assessed_value ... lien_amount: Financials in dollars; 0 when absent.
        tax_delinquent:      True for case-insensitive "yes" / "true".
        owner_occupied ... listed: Status flags; True only for "yes".
        days_on_market, listing_status, list_price: Market timing.
        distress_indicators: Ordered labels from ``derive_distress_indicators``.
        last_contact_date ... assigned_to: Tracking metadata.
        raw:                 The header-normalized source row, verbatim.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    id: str
    row_number: int

    # Contact
    owner_name: str = ""
    phone_1: str = ""
    phone_2: str = ""
    phone_3: str = ""
    email: str = ""

    # Property
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    county: str = ""
    property_type: str = ""
    bedrooms: float = 0
    bathrooms: float = 0
    square_feet: float = 0
    lot_size: float = 0
    year_built: int = 0

    # Financial
    assessed_value: float = 0
    market_value: float = 0
    last_sale_price: float = 0
    last_sale_date: str = ""
    estimated_mortgage: float = 0
    estimated_equity: float = 0
    lien_amount: float = 0
    tax_amount: float = 0
    tax_delinquent: bool = False

    # Status flags
    owner_occupied: bool = False
    absentee_owner: bool = False
    out_of_state: bool = False
    vacant: bool = False
    foreclosure: bool = False
    pre_foreclosure: bool = False
    listed: bool = False

    # Market timing
    days_on_market: float = 0
    listing_status: str = ""
    list_price: float = 0

    # Derived
    distress_indicators: tuple[str, ...] = ()

    # Tracking
    last_contact_date: str = ""
    contact_attempts: int = 0
    lead_status: str = "New"
    notes: str = ""
    assigned_to: str = ""

    raw: dict[str, str] = {}

    @property
    def property_value(self) -> float:
        """Market value, falling back to assessed value (0 if neither)."""
        return self.market_value or self.assessed_value

    @property
    def full_address(self) -> str:
        parts = [p for p in (self.address, self.city, self.state, self.zip_code) if p]
        return ", ".join(parts)


class ScoreBreakdown(BaseModel):
    """Per-factor sub-scores, each 0–100."""

    model_config = ConfigDict(frozen=True)

    distress: float
    equity: float
    property_age: float
    tax_delinquency: float
    ownership_type: float
    time_on_market: float
    contactability: float


class OfferRange(BaseModel):
    """Estimated cash-offer range derived from the property value.

    When ``base_value`` is 0 there is not enough data to price an offer and
    the three price points are ``None``.
    """

    model_config = ConfigDict(frozen=True)

    base_value: float
    conservative: Optional[int] = None
    midpoint: Optional[int] = None
    aggressive: Optional[int] = None

    @property
    def has_data(self) -> bool:
        return self.conservative is not None

    def formatted(self) -> dict[str, str]:
        """Currency strings for display, or an ``insufficient data`` marker."""
        if not self.has_data:
            return {"status": "Insufficient data"}
        return {
            "conservative": format_currency(self.conservative),
            "midpoint": format_currency(self.midpoint),
            "aggressive": format_currency(self.aggressive),
            "base_value": format_currency(self.base_value),
        }


class ScoredLead(BaseModel):
    """A lead plus everything the scoring pass derived from it.

    Attributes:
        lead:       The underlying canonical record.
        breakdown:  Seven 0–100 sub-scores.
        score:      Weighted aggregate (unrounded; 0–100 with default weights).
        priority:   One of ``PRIORITY_TIERS``.
        insights:   Human-readable observations, in fixed check order.
        actions:    Recommended next steps for the score band.
        offer_range: Estimated offer prices.
    """

    model_config = ConfigDict(frozen=True)

    lead: LeadRecord
    breakdown: ScoreBreakdown
    score: float
    priority: str
    insights: tuple[str, ...]
    actions: tuple[str, ...]
    offer_range: OfferRange


def format_currency(value: float | int | None) -> str:
    """Format a dollar amount as ``$1,234`` (no cents, halves round up)."""
    if value is None:
        return ""
    whole = int(math.floor(abs(value) + 0.5))
    sign = "-" if value < 0 and whole else ""
    return f"{sign}${whole:,}"
