"""
Logging setup for the skip-trace lead scorer.

``configure_logging(config, debug=...)`` is called once by the CLI before a
pipeline run. Library modules only use ``logging.getLogger(__name__)``.

Lead context
------------
The connector and analyzer attach ``status_code``, ``lead_id`` and
``row_number`` through ``extra=``. Both formatters surface them, so a
failed narrative request can be traced back to its sheet row::

    2026-02-24T15:00:00Z [ERROR] skiptrace_scorer.analysis.analyzer: Error analyzing lead with AI [row=7 lead=A-7 status=429]
    {"ts": "2026-02-24T15:00:00Z", "level": "ERROR", ..., "row_number": 7, "lead_id": "A-7", "status_code": 429}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from skiptrace_scorer.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# (record attribute, short label in text output)
LEAD_CONTEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("row_number", "row"),
    ("lead_id", "lead"),
    ("status_code", "status"),
)


def lead_context(record: logging.LogRecord) -> dict[str, Any]:
    """Lead context attached to ``record``, skipping absent or ``None`` values."""
    context: dict[str, Any] = {}
    for attr, _ in LEAD_CONTEXT_FIELDS:
        value = getattr(record, attr, None)
        if value is not None:
            context[attr] = value
    return context


class LeadContextFormatter(logging.Formatter):
    """Plain-text lines with a trailing ``[row=.. lead=.. status=..]`` tag."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = lead_context(record)
        if not context:
            return line
        tag = " ".join(
            f"{label}={context[attr]}" for attr, label in LEAD_CONTEXT_FIELDS if attr in context
        )
        first, sep, rest = line.partition("\n")
        return f"{first} [{tag}]{sep}{rest}"


class JsonLeadFormatter(logging.Formatter):
    """One JSON object per line: ``ts``, ``level``, ``logger``, ``msg`` + lead context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(lead_context(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Configure the root logger for a CLI run.

    Args:
        config: Logging section of ``AppConfig``.
        debug:  ``AppConfig.debug``; forces DEBUG regardless of ``config.level``.
    """
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)
    formatter = JsonLeadFormatter() if config.json_format else LeadContextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Request lines from the two API clients are only useful when debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
