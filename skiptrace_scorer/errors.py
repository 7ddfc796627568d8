"""
Failure signals raised by the two external-service clients.

Both are recovered locally by their callers (connector / analyzer) and
never escape the pipeline.
"""

from __future__ import annotations

from typing import Optional


class SourceUnavailable(RuntimeError):
    """Raised when the spreadsheet fetch fails or returns unparseable content.

    Attributes:
        status_code: HTTP status of the failed response, or ``None`` for
                     network / parse / credential errors.
        message:     Human-readable description of the failure.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        self.message = message
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"Lead source unavailable: {prefix}{message}")


class AnalysisUnavailable(RuntimeError):
    """Raised when the text-generation service request fails.

    Attributes:
        status_code: HTTP status of the failed response, or ``None``.
        message:     Human-readable description of the failure.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        self.message = message
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"Lead analysis unavailable: {prefix}{message}")
