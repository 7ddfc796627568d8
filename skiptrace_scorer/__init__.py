"""Skip-trace lead scorer: normalize spreadsheet leads, score likelihood to sell."""

__version__ = "0.1.0"
