"""
skiptrace_scorer.reporting — terminal formatting and flat-file export.

Consumes the scored lead list read-only; performs no scoring of its own.

Modules:
  formatters — ASCII leaderboard, lead detail and tier summary.
  export     — CSV/JSON flat-file export helpers.
"""
