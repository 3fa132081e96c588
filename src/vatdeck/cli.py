from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from .assembler import build_summary
from .config import ParserConfig, load_config
from .errors import VatDeckError
from .models import ParseResult
from .parser import DeckParser, debug_slides, preview_reports, select_reports

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _setup_logging(log_level: str = "WARNING", verbose: bool = False) -> None:
    """Attach a console handler to the vatdeck logger."""
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.WARNING)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%H:%M:%S"))
    logger = logging.getLogger("vatdeck")
    logger.setLevel(level)
    logger.handlers = [handler]


def _cfg(config: str | None) -> ParserConfig:
    try:
        return load_config(config)
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Could not load config {config}: {e}") from e


def _read(file: Path) -> bytes:
    if not file.is_file():
        raise typer.BadParameter(f"Deck not found: {file}")
    return file.read_bytes()


def _emit(payload: object, out: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if out:
        Path(out).write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Wrote {out}")
    else:
        typer.echo(text)


def _parse(file: Path, config: str | None) -> ParseResult:
    data = _read(file)
    try:
        return DeckParser(_cfg(config)).parse(data)
    except VatDeckError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def init(out: str = typer.Option("config.toml", help="Write example config to this path")):
    """Write a starter config.toml."""
    outp = Path(out)
    outp.write_text("""[entities]
# Ordered [alias, canonical name] pairs; the first alias found in a title slide wins.
aliases = [
  ["DAFF", "DAFF"],
  ["SAU", "SAU"],
  ["VICGOV", "VICGov"],
  ["VIC GOV", "VICGov"],
  ["DISR", "DISR"],
  ["GROWTH", "Growth"],
  ["P&P", "P&P"],
  ["PLATFORMS AND PARTNERSHIPS", "P&P"],
  ["EMERGING", "Emerging"],
  ["EMERGING ACCOUNTS", "Emerging"],
]

[slides]
title_max_paragraphs = 2
title_max_bytes = 3000
deck_title_marker = "vat report"
deck_subtitle_marker = "sales committee"
status_update_marker = "planner status"

[narrative]
banner_scan_limit = 5
colon_window = 40
lead_paragraphs = 5

[register]
skip_descriptions = ["people process"]
""", encoding="utf-8")
    typer.echo(f"Wrote {outp}")


@app.command()
def parse(
    file: Path = typer.Argument(..., help="Deck (.pptx) to parse"),
    config: str = typer.Option(None, help="Config file (defaults built in)"),
    entity: list[str] = typer.Option(None, help="Only include these entities (repeatable)"),
    out: str = typer.Option(None, help="Write JSON here instead of stdout"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"),
):
    """Parse a deck and print its reports as JSON."""
    _setup_logging(log_level, verbose)
    result = _parse(file, config)
    reports = select_reports(result.reports, entity)
    payload = result.to_dict()
    payload["reports"] = [r.to_dict() for r in reports]
    payload["summary"] = build_summary(reports)
    _emit(payload, out)


@app.command()
def preview(
    file: Path = typer.Argument(..., help="Deck (.pptx) to preview"),
    config: str = typer.Option(None, help="Config file (defaults built in)"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
):
    """Show a condensed per-entity view of what a parse would import."""
    _setup_logging(log_level)
    _emit(preview_reports(_parse(file, config)), None)


@app.command()
def debug(
    file: Path = typer.Argument(..., help="Deck (.pptx) to dump"),
    out: str = typer.Option(None, help="Write JSON here instead of stdout"),
):
    """Dump raw slide paragraphs and tables, without classification."""
    data = _read(file)
    try:
        slides = debug_slides(data)
    except VatDeckError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    _emit({"slides": [s.to_dict() for s in slides]}, out)


if __name__ == "__main__":
    app()
