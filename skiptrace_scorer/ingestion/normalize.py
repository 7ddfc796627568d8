"""
Row normalization — heterogeneous skip-trace columns → canonical ``LeadRecord``.

Processing steps (per data row):
  1. ``rows_from_grid()`` pairs each data row with the header row
     (headers stripped + lower-cased; missing cells → ``""``) and assigns
     ``row_number = data_index + 2``.
  2. ``normalize_row()`` resolves each canonical field by trying its alias
     list in order; the first non-empty cell wins.
  3. Numeric fields go through ``parse_number()`` (``$``/``,``/``%`` stripped,
     unparseable → 0). Flags go through ``parse_flag()`` (exact "yes").
  4. ``derive_distress_indicators()`` labels the record.

No step raises on bad cell content: malformed values coerce to 0 / False.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Sequence

from skiptrace_scorer.models.lead import LeadRecord

RawRow = dict[str, str]

# ── Header aliases ────────────────────────────────────────────────────────────
# Ordered: the first alias with a non-empty cell wins.

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id":                 ("id", "lead_id", "record_id"),
    "owner_name":         ("owner_name", "owner", "name", "owner name", "full_name"),
    "first_name":         ("first_name", "owner_first_name", "first name", "first"),
    "last_name":          ("last_name", "owner_last_name", "last name", "last"),
    "phone_1":            ("phone_1", "phone1", "phone", "phone_number", "mobile", "cell"),
    "phone_2":            ("phone_2", "phone2", "alt_phone", "secondary_phone"),
    "phone_3":            ("phone_3", "phone3", "other_phone"),
    "email":              ("email", "email_1", "email_address", "email1"),
    "address":            ("property_address", "address", "street", "street_address", "site_address"),
    "city":               ("property_city", "city"),
    "state":              ("property_state", "state"),
    "zip_code":           ("property_zip", "zip", "zip_code", "zipcode", "postal_code"),
    "county":             ("county", "property_county"),
    "property_type":      ("property_type", "type", "prop_type"),
    "bedrooms":           ("bedrooms", "beds", "br"),
    "bathrooms":          ("bathrooms", "baths", "ba"),
    "square_feet":        ("square_feet", "sqft", "sq_ft", "living_area", "building_sqft"),
    "lot_size":           ("lot_size", "lot_sqft", "lot_acres", "lot"),
    "year_built":         ("year_built", "yearbuilt", "built", "year built"),
    "assessed_value":     ("assessed_value", "assessed", "tax_assessed_value", "assessed value"),
    "market_value":       ("market_value", "estimated_value", "value", "avm", "market value"),
    "last_sale_price":    ("last_sale_price", "sale_price", "last_sold_price"),
    "last_sale_date":     ("last_sale_date", "sale_date", "last_sold_date"),
    "estimated_mortgage": ("estimated_mortgage", "mortgage_balance", "mortgage", "loan_balance"),
    "estimated_equity":   ("estimated_equity", "equity", "equity_amount"),
    "lien_amount":        ("lien_amount", "liens", "total_liens"),
    "tax_amount":         ("tax_amount", "taxes", "annual_tax", "tax_delinquent_amount"),
    "tax_delinquent":     ("tax_delinquent", "tax_default", "delinquent_taxes", "tax delinquent"),
    "owner_occupied":     ("owner_occupied", "owner occupied"),
    "absentee_owner":     ("absentee_owner", "absentee", "absentee owner"),
    "out_of_state":       ("out_of_state", "out_of_state_owner", "out of state"),
    "vacant":             ("vacant", "vacancy", "is_vacant"),
    "foreclosure":        ("foreclosure", "in_foreclosure"),
    "pre_foreclosure":    ("pre_foreclosure", "preforeclosure", "pre-foreclosure", "nod"),
    "listed":             ("listed", "is_listed", "on_market", "mls_listed"),
    "days_on_market":     ("days_on_market", "dom", "days on market"),
    "listing_status":     ("listing_status", "mls_status", "status"),
    "list_price":         ("list_price", "listing_price", "asking_price"),
    "last_contact_date":  ("last_contact_date", "last_contact", "last_contacted"),
    "contact_attempts":   ("contact_attempts", "attempts", "call_attempts"),
    "lead_status":        ("lead_status", "stage"),
    "notes":              ("notes", "comments"),
    "assigned_to":        ("assigned_to", "assignee", "agent"),
}

NUMERIC_FIELDS: frozenset[str] = frozenset({
    "bedrooms", "bathrooms", "square_feet", "lot_size",
    "assessed_value", "market_value", "last_sale_price", "estimated_mortgage",
    "estimated_equity", "lien_amount", "tax_amount", "days_on_market", "list_price",
})

INTEGER_FIELDS: frozenset[str] = frozenset({"year_built", "contact_attempts"})

FLAG_FIELDS: frozenset[str] = frozenset({
    "owner_occupied", "absentee_owner", "out_of_state", "vacant",
    "foreclosure", "pre_foreclosure", "listed",
})

TEXT_FIELDS: tuple[str, ...] = (
    "phone_1", "phone_2", "phone_3", "email",
    "address", "city", "state", "zip_code", "county", "property_type",
    "last_sale_date", "listing_status",
    "last_contact_date", "notes", "assigned_to",
)

# ── Distress labels ───────────────────────────────────────────────────────────

TAX_DELINQUENT = "Tax Delinquent"
FORECLOSURE = "Foreclosure"
PRE_FORECLOSURE = "Pre-Foreclosure"
VACANT = "Vacant"
ABSENTEE_OWNER = "Absentee Owner"
OUT_OF_STATE_OWNER = "Out of State Owner"
HAS_LIENS = "Has Liens"
STALE_LISTING = "Stale Listing"
OLDER_PROPERTY = "Older Property"
UNDERWATER = "Underwater"

STALE_LISTING_DAYS = 180
OLDER_PROPERTY_YEAR = 1980

_NUMERIC_JUNK = re.compile(r"[$,%\s]")


# ── Cell coercion ─────────────────────────────────────────────────────────────

def parse_number(value: str | None) -> float:
    """Parse a cell as a number; anything unparseable becomes ``0.0``.

    Currency symbols, thousands separators, percent signs and whitespace
    are stripped first, so ``"$250,000"`` → ``250000.0``.
    """
    if not value:
        return 0.0
    cleaned = _NUMERIC_JUNK.sub("", str(value))
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_int(value: str | None) -> int:
    """Integer variant of ``parse_number`` (truncates toward zero)."""
    return int(parse_number(value))


def parse_flag(value: str | None, truthy: Sequence[str] = ("yes",)) -> bool:
    """True only when the stripped, lower-cased cell equals a ``truthy`` token."""
    if not value:
        return False
    return value.strip().lower() in truthy


# ── Grid → raw rows ───────────────────────────────────────────────────────────

def rows_from_grid(grid: Sequence[Sequence[str]]) -> list[tuple[int, RawRow]]:
    """Split a fetched grid into ``(row_number, raw_row)`` pairs.

    The first grid row is the header. Data row ``i`` (0-based) gets
    ``row_number = i + 2``, its 1-based position in the sheet.

    Args:
        grid: Rows of cell strings as returned by ``SheetsClient.fetch_values``.

    Returns:
        One pair per data row; empty when the grid has no data rows.
    """
    if not grid:
        return []

    headers = [str(h).strip().lower() for h in grid[0]]
    rows: list[tuple[int, RawRow]] = []
    for index, cells in enumerate(grid[1:]):
        raw: RawRow = {}
        for col, header in enumerate(headers):
            if not header or header in raw:
                continue
            raw[header] = str(cells[col]) if col < len(cells) else ""
        rows.append((index + 2, raw))
    return rows


def first_match(raw: Mapping[str, str], aliases: Sequence[str]) -> str:
    """Return the first non-empty (stripped) cell among ``aliases``, else ``""``."""
    for alias in aliases:
        value = (raw.get(alias) or "").strip()
        if value:
            return value
    return ""


# ── Distress derivation ───────────────────────────────────────────────────────

def derive_distress_indicators(fields: Mapping[str, Any]) -> list[str]:
    """Label a record with every distress signal it carries.

    Rules are independent; the output order is the fixed check order below.

    Args:
        fields: Canonical field values (a ``LeadRecord.model_dump()`` or the
                partially built dict inside ``normalize_row``).

    Returns:
        Ordered list of distress labels (possibly empty).
    """
    labels: list[str] = []

    if fields.get("tax_delinquent"):
        labels.append(TAX_DELINQUENT)
    if fields.get("foreclosure"):
        labels.append(FORECLOSURE)
    if fields.get("pre_foreclosure"):
        labels.append(PRE_FORECLOSURE)
    if fields.get("vacant"):
        labels.append(VACANT)
    if fields.get("absentee_owner"):
        labels.append(ABSENTEE_OWNER)
    if fields.get("out_of_state"):
        labels.append(OUT_OF_STATE_OWNER)
    if (fields.get("lien_amount") or 0) > 0:
        labels.append(HAS_LIENS)
    if (fields.get("days_on_market") or 0) > STALE_LISTING_DAYS:
        labels.append(STALE_LISTING)

    year_built = fields.get("year_built") or 0
    if 0 < year_built < OLDER_PROPERTY_YEAR:
        labels.append(OLDER_PROPERTY)

    value = (fields.get("market_value") or 0) or (fields.get("assessed_value") or 0)
    if value > 0 and (fields.get("estimated_equity") or 0) < 0:
        labels.append(UNDERWATER)

    return labels


# ── Raw row → LeadRecord ──────────────────────────────────────────────────────

def normalize_row(raw: RawRow, row_number: int) -> LeadRecord:
    """Map one header-keyed raw row to a canonical ``LeadRecord``.

    Args:
        raw:        Header-normalized row from ``rows_from_grid``.
        row_number: 1-based sheet row number.

    Returns:
        Fully populated ``LeadRecord`` (never raises on bad cell values).
    """
    fields: dict[str, Any] = {}

    for name in TEXT_FIELDS:
        fields[name] = first_match(raw, FIELD_ALIASES[name])
    for name in NUMERIC_FIELDS:
        fields[name] = parse_number(first_match(raw, FIELD_ALIASES[name]))
    for name in INTEGER_FIELDS:
        fields[name] = parse_int(first_match(raw, FIELD_ALIASES[name]))
    for name in FLAG_FIELDS:
        fields[name] = parse_flag(first_match(raw, FIELD_ALIASES[name]))
    fields["tax_delinquent"] = parse_flag(
        first_match(raw, FIELD_ALIASES["tax_delinquent"]), truthy=("yes", "true")
    )

    owner_name = first_match(raw, FIELD_ALIASES["owner_name"])
    if not owner_name:
        first = first_match(raw, FIELD_ALIASES["first_name"])
        last = first_match(raw, FIELD_ALIASES["last_name"])
        owner_name = f"{first} {last}".strip()
    fields["owner_name"] = owner_name

    fields["id"] = first_match(raw, FIELD_ALIASES["id"]) or f"lead-{row_number}"
    fields["lead_status"] = first_match(raw, FIELD_ALIASES["lead_status"]) or "New"
    fields["distress_indicators"] = derive_distress_indicators(fields)

    return LeadRecord(row_number=row_number, raw=dict(raw), **fields)
