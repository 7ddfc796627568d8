"""
Shared pytest fixtures for the skip-trace lead scorer test suite.

Provides:
  - ``make_lead``: factory for ``LeadRecord`` objects with sensible defaults.
  - ``sample_grid``: a small spreadsheet grid (header + three data rows).
  - ``sheets_config`` / ``analysis_config``: configs with dummy credentials.
"""

from __future__ import annotations

from typing import Callable

import pytest

from skiptrace_scorer.config import AnalysisConfig, SheetsConfig
from skiptrace_scorer.ingestion.normalize import derive_distress_indicators
from skiptrace_scorer.models.lead import LeadRecord

CURRENT_YEAR = 2025


@pytest.fixture
def make_lead() -> Callable[..., LeadRecord]:
    """Return a factory building ``LeadRecord`` objects.

    Distress indicators are derived from the given fields unless passed
    explicitly, so the record is consistent with ``normalize_row`` output.
    """

    def _make(**overrides) -> LeadRecord:
        fields = {"id": "lead-2", "row_number": 2}
        fields.update(overrides)
        if "distress_indicators" not in overrides:
            fields["distress_indicators"] = derive_distress_indicators(fields)
        return LeadRecord(**fields)

    return _make


@pytest.fixture
def sample_grid() -> list[list[str]]:
    """Header row plus three leads with mixed header spellings and bad cells."""
    return [
        [" Owner_Name ", "Property_Address", "City", "State", "Zip",
         "Phone", "Email", "Market_Value", "Estimated_Equity",
         "Tax_Delinquent", "Tax_Amount", "Vacant", "Year_Built"],
        ["Jane Smith", "12 Oak St", "Dallas", "TX", "75201",
         "555-0100", "jane@example.com", "$200,000", "150000",
         "TRUE", "12000", "yes", "1950"],
        ["", "9 Elm Ave", "Plano", "TX", "75024",
         "", "", "not a number", "",
         "no", "", "Yes please", ""],
        ["Bob Jones", "3 Pine Rd", "Frisco"],
    ]


@pytest.fixture
def sheets_config() -> SheetsConfig:
    return SheetsConfig(
        spreadsheet_id="sheet-123",
        api_key="sheets-key",
        base_url="https://sheets.test/v4/spreadsheets",
    )


@pytest.fixture
def analysis_config() -> AnalysisConfig:
    return AnalysisConfig(api_key="sk-test", base_url="https://llm.test/v1")
