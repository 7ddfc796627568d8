"""
Google Sheets values API client — the "fetch rows" capability.

API:   https://sheets.googleapis.com/v4/spreadsheets
Docs:  https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get

Credential setup (.env, gitignored):
  GOOGLE_SPREADSHEET_ID=your_sheet_id
  GOOGLE_SHEETS_API_KEY=your_api_key

Endpoint::

    GET {base_url}/{spreadsheet_id}/values/{sheet_name}!{cell_range}?key={api_key}
    → {"range": "...", "majorDimension": "ROWS", "values": [[...], [...]]}

The sheet must be shared "anyone with the link can view" for API-key access.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from skiptrace_scorer.config import SheetsConfig
from skiptrace_scorer.errors import SourceUnavailable

logger = logging.getLogger(__name__)


class SheetsClient:
    """Fetches a rectangular grid of cell strings from a Google Sheet.

    Usage::

        client = SheetsClient(config.sheets)
        grid = client.fetch_values()          # raises SourceUnavailable

    Attributes:
        config: Sheets section of ``AppConfig``.
    """

    def __init__(
        self,
        config: SheetsConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialise the client.

        Args:
            config:      Sheets settings (id, key, default tab and range).
            http_client: Optional pre-built ``httpx.Client`` (tests inject one
                         backed by ``httpx.MockTransport``).
        """
        self.config = config
        self._http_client = http_client

    def fetch_values(
        self,
        sheet_name: Optional[str] = None,
        cell_range: Optional[str] = None,
    ) -> list[list[str]]:
        """Fetch the cell grid for ``sheet_name!cell_range``.

        Args:
            sheet_name: Tab name; defaults to ``config.sheet_name``.
            cell_range: A1 range; defaults to ``config.cell_range``.

        Returns:
            List of rows, each a list of cell strings. Empty if the range
            holds no data.

        Raises:
            SourceUnavailable: Missing credentials, transport error, non-2xx
                status, or a body that is not the expected JSON shape.
        """
        if not self.config.spreadsheet_id or not self.config.api_key:
            raise SourceUnavailable(
                "GOOGLE_SPREADSHEET_ID and GOOGLE_SHEETS_API_KEY must be set in .env."
            )

        a1 = f"{sheet_name or self.config.sheet_name}!{cell_range or self.config.cell_range}"
        url = (
            f"{self.config.base_url.rstrip('/')}/{self.config.spreadsheet_id}"
            f"/values/{quote(a1, safe='!:')}"
        )

        try:
            resp = self._get(url, params={"key": self.config.api_key})
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"request failed: {exc}") from exc

        if not resp.is_success:
            raise SourceUnavailable(_error_message(resp), status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as exc:
            raise SourceUnavailable(f"response is not valid JSON: {exc}") from exc

        return _parse_values(data)

    def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(
                url, params=params, timeout=self.config.timeout_seconds
            )
        with httpx.Client() as client:
            return client.get(url, params=params, timeout=self.config.timeout_seconds)


# ── Response parsing ───────────────────────────────────────────────────────────

def _parse_values(data: object) -> list[list[str]]:
    """Validate the ``values`` payload and coerce every cell to ``str``."""
    if not isinstance(data, dict):
        raise SourceUnavailable("unexpected response shape (expected JSON object)")

    values = data.get("values", [])
    if not isinstance(values, list) or not all(isinstance(r, list) for r in values):
        raise SourceUnavailable("unexpected 'values' shape (expected list of rows)")

    grid = [["" if cell is None else str(cell) for cell in row] for row in values]
    logger.debug("SheetsClient: fetched %d rows (incl. header)", len(grid))
    return grid


def _error_message(resp: httpx.Response) -> str:
    """Extract Google's ``error.message`` if present, else the reason phrase."""
    try:
        body = resp.json()
        message = body.get("error", {}).get("message")
        if message:
            return str(message)
    except (ValueError, AttributeError):
        pass
    return resp.reason_phrase or "request failed"
