"""
Skip-trace lead scorer — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Run the pipeline (fetch → score → optional analysis).
  4. Report result to stdout.

Install and run::

    pip install -e .
    skiptrace-scorer --help
    skiptrace-scorer validate-config
    skiptrace-scorer score --top 10
    skiptrace-scorer filter hot
    skiptrace-scorer export --output data/outputs/leads.csv
    skiptrace-scorer analyze --top 3
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="skiptrace-scorer",
    help="Score skip-trace leads by likelihood to sell.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from skiptrace_scorer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from skiptrace_scorer.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _build_pipeline(config):
    from skiptrace_scorer.pipeline.orchestrator import LeadPipeline
    return LeadPipeline(config)


def _config_option() -> Optional[str]:
    return typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _config_option(),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config (credentials masked).",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Spreadsheet id:   {config.sheets.spreadsheet_id or '(not set)'}")
    typer.echo(f"  Sheets API key:   {'set' if config.sheets.api_key else '(not set)'}")
    typer.echo(f"  Sheet / range:    {config.sheets.sheet_name}!{config.sheets.cell_range}")
    typer.echo(f"  Analysis model:   {config.analysis.model}")
    typer.echo(f"  OpenAI API key:   {'set' if config.analysis.api_key else '(not set)'}")
    typer.echo(f"  Weights total:    {config.scoring.total:g}")
    typer.echo(f"  Log level:        {config.logging.level}")

    if show_full:
        dump = config.model_dump()
        for section in ("sheets", "analysis"):
            if dump[section].get("api_key"):
                dump[section]["api_key"] = "***"
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(dump, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("score")
def score(
    top: Optional[int] = typer.Option(
        None, "--top", "-n", help="Number of leads to show (default: reporting.top_n)."
    ),
    detail: bool = typer.Option(
        False, "--detail", help="Print the full breakdown for each shown lead."
    ),
    config_path: Optional[str] = _config_option(),
) -> None:
    """Load leads from the spreadsheet, score them, and print the leaderboard."""
    from skiptrace_scorer.reporting.formatters import (
        format_lead_detail,
        format_leaderboard,
        format_priority_summary,
    )
    from skiptrace_scorer.scoring.ranker import priority_counts

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    pipeline = _build_pipeline(config)
    scored = pipeline.load_and_score_leads()
    shown = pipeline.top_leads(top)

    typer.echo(format_leaderboard(shown, title=f"Top {len(shown)} Leads"))
    if detail:
        for s in shown:
            typer.echo(format_lead_detail(s))
    typer.echo(format_priority_summary(priority_counts(scored)))


@app.command("filter")
def filter_leads(
    priority: str = typer.Argument(..., help="Priority label (or part of it), e.g. HOT."),
    config_path: Optional[str] = _config_option(),
) -> None:
    """Print scored leads whose priority label contains PRIORITY."""
    from skiptrace_scorer.reporting.formatters import format_leaderboard

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    pipeline = _build_pipeline(config)
    pipeline.load_and_score_leads()
    matches = pipeline.filter_by_priority(priority)
    typer.echo(format_leaderboard(matches, title=f"{priority.upper()} Leads ({len(matches)})"))


@app.command("export")
def export(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Destination file (default: <reporting.output_dir>/scored_leads.csv|.json).",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Write full JSON (breakdown, insights, actions) instead of CSV."
    ),
    config_path: Optional[str] = _config_option(),
) -> None:
    """Score all leads and write them to a flat CSV (or JSON) file."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    suffix = ".json" if as_json else ".csv"
    out_path = Path(output) if output else Path(config.reporting.output_dir) / f"scored_leads{suffix}"

    pipeline = _build_pipeline(config)
    scored = pipeline.load_and_score_leads()
    written = pipeline.export_json(out_path) if as_json else pipeline.export_csv(out_path)

    typer.echo(f"  Leads written: {len(scored)}")
    typer.echo(f"[OK] Exported to {written}")


@app.command("analyze")
def analyze(
    top: int = typer.Option(
        1, "--top", "-n", min=1, help="Analyze the top N leads (concurrently when N > 1)."
    ),
    config_path: Optional[str] = _config_option(),
) -> None:
    """Request a narrative sales strategy for the top-ranked lead(s)."""
    from skiptrace_scorer.reporting.formatters import format_lead_detail

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    pipeline = _build_pipeline(config)
    pipeline.load_and_score_leads()

    if not pipeline.scored_leads:
        typer.echo("[WARN] No leads available to analyze.", err=True)
        raise typer.Exit(code=1)

    if top == 1:
        top_row = pipeline.scored_leads[0].lead.row_number
        narratives = {top_row: pipeline.analyze_top_lead() or ""}
    else:
        narratives = pipeline.analyze_top_leads(top)

    by_row = {s.lead.row_number: s for s in pipeline.top_leads(top)}
    for row_number, text in narratives.items():
        typer.echo(format_lead_detail(by_row[row_number]))
        typer.echo("")
        typer.echo("  AI analysis:")
        typer.echo(text)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
