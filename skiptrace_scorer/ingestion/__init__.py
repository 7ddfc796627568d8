"""
skiptrace_scorer.ingestion — spreadsheet fetch and row normalization.

Modules:
  sheets_client — Google Sheets values API client (raises SourceUnavailable).
  normalize     — Header aliases, cell coercion, distress labels, normalize_row().
  connector     — SkipTraceConnector: fetch + normalize, [] on source failure.
"""
