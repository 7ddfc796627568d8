"""
SkipTraceConnector — the data source adapter.

Fetches the spreadsheet grid through ``SheetsClient`` and normalizes every
data row into a ``LeadRecord``.  Fetch or parse failures are logged and
turned into an empty list: callers cannot (and need not) distinguish an
unavailable source from a genuinely empty one.
"""

from __future__ import annotations

import logging
from typing import Optional

from skiptrace_scorer.config import SheetsConfig
from skiptrace_scorer.errors import SourceUnavailable
from skiptrace_scorer.ingestion.normalize import normalize_row, rows_from_grid
from skiptrace_scorer.ingestion.sheets_client import SheetsClient
from skiptrace_scorer.models.lead import LeadRecord

logger = logging.getLogger(__name__)


class SkipTraceConnector:
    """Loads canonical lead records from a skip-trace spreadsheet.

    Usage::

        connector = SkipTraceConnector(config.sheets)
        leads = connector.fetch_leads()      # [] on any source failure

    Attributes:
        config: Sheets section of ``AppConfig``.
        client: The underlying ``SheetsClient``.
    """

    def __init__(
        self,
        config: SheetsConfig,
        client: Optional[SheetsClient] = None,
    ) -> None:
        self.config = config
        self.client = client or SheetsClient(config)

    def fetch_leads(
        self,
        sheet_name: Optional[str] = None,
        cell_range: Optional[str] = None,
    ) -> list[LeadRecord]:
        """Fetch and normalize all lead rows.

        Args:
            sheet_name: Tab to read; defaults to ``config.sheet_name``.
            cell_range: A1 range; defaults to ``config.cell_range``.

        Returns:
            One ``LeadRecord`` per data row in sheet order; ``[]`` when the
            source is unavailable or holds only a header.
        """
        try:
            grid = self.client.fetch_values(sheet_name, cell_range)
        except SourceUnavailable as exc:
            logger.error(
                "Error fetching skip trace data: %s", exc,
                extra={"status_code": exc.status_code},
            )
            return []

        leads = [normalize_row(raw, row_number) for row_number, raw in rows_from_grid(grid)]
        logger.info("Loaded %d leads from skip trace data", len(leads))
        return leads
