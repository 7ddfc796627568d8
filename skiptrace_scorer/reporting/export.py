"""
Export helpers for spreadsheet / CRM import.

All functions write to disk and return the written ``Path``.
``export_to_csv`` and ``export_to_json`` accept generic ``list[dict]`` data
to stay decoupled from specific report shapes.

CSV exports are flat (no nested dicts) so they load directly in Excel,
Google Sheets or a CRM importer without any pre-processing step.

``flatten_scored_leads_for_export()`` is the main adapter function: it
converts each ``ScoredLead`` into one row of key fields.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from skiptrace_scorer.models.lead import ScoredLead

EXPORT_FIELDS: list[str] = [
    "rank", "id", "row_number", "owner_name",
    "address", "city", "state", "zip",
    "phone_1", "email",
    "score", "priority", "distress_indicators",
    "market_value", "estimated_equity",
    "offer_conservative", "offer_midpoint", "offer_aggressive",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def flatten_scored_leads_for_export(scored: list[ScoredLead]) -> list[dict]:
    """Flatten scored leads into rows keyed by ``EXPORT_FIELDS``.

    ``rank`` is the 1-based position in ``scored`` (already sorted by the
    ranker); ``score`` is rounded to one decimal; missing offer prices are
    left blank.

    Args:
        scored: Sorted ``ScoredLead`` list.

    Returns:
        List of flat row dicts, in input order.
    """
    rows: list[dict] = []
    for rank, s in enumerate(scored, start=1):
        lead  = s.lead
        offer = s.offer_range
        rows.append(
            {
                "rank":                rank,
                "id":                  lead.id,
                "row_number":          lead.row_number,
                "owner_name":          lead.owner_name,
                "address":             lead.address,
                "city":                lead.city,
                "state":               lead.state,
                "zip":                 lead.zip_code,
                "phone_1":             lead.phone_1,
                "email":               lead.email,
                "score":               round(s.score, 1),
                "priority":            s.priority,
                "distress_indicators": "; ".join(lead.distress_indicators),
                "market_value":        lead.market_value,
                "estimated_equity":    lead.estimated_equity,
                "offer_conservative":  offer.conservative if offer.has_data else "",
                "offer_midpoint":      offer.midpoint if offer.has_data else "",
                "offer_aggressive":    offer.aggressive if offer.has_data else "",
            }
        )
    return rows
