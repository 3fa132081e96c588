from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from .assembler import assemble_report, build_summary
from .classify.slides import classify_slide
from .config import ParserConfig
from .extractors.archive import read_slide_xml
from .extractors.slide import build_slide
from .grouping import group_slides
from .models import ParsedReport, ParseResult, Section, Slide

logger = logging.getLogger(__name__)

PREVIEW_SUMMARY_CHARS = 200


def debug_slides(data: bytes) -> list[Slide]:
    """Raw per-slide paragraphs and tables, without classification."""
    return [build_slide(p) for p in read_slide_xml(data)]


@dataclass
class DeckParser:
    cfg: ParserConfig = field(default_factory=ParserConfig)

    def parse(self, data: bytes, today: date | None = None) -> ParseResult:
        """Parse deck bytes into one report per entity.

        Only `ArchiveError` escapes; anything unrecognised inside the slides
        is skipped and the affected fields stay empty.
        """
        slides = debug_slides(data)

        classified = [classify_slide(s, self.cfg) for s in slides]
        groups, warnings = group_slides(classified)
        reports = [assemble_report(g, self.cfg, today) for g in groups]
        summary = build_summary(reports)

        logger.info(f"Parsed {len(slides)} slides into {len(reports)} reports")
        if not reports:
            logger.warning("No entity title slides found in the deck")
        return ParseResult(reports=reports, summary=summary, warnings=warnings)

    def parse_file(self, path: str | Path, today: date | None = None) -> ParseResult:
        return self.parse(Path(path).read_bytes(), today=today)


def parse_deck(data: bytes, cfg: ParserConfig | None = None, today: date | None = None) -> ParseResult:
    return DeckParser(cfg or ParserConfig()).parse(data, today=today)


def select_reports(reports: Iterable[ParsedReport], names: Iterable[str] | None) -> list[ParsedReport]:
    """Reports whose entity is in `names`; an empty selection keeps all."""
    wanted = set(names or ())
    return [r for r in reports if not wanted or r.entity_name in wanted]


def preview_report(report: ParsedReport) -> dict[str, Any]:
    return {
        "entity_name": report.entity_name,
        "report_date": report.report_date.isoformat(),
        "overall_status": report.overall_status,
        "status_summary_preview": report.narrative(Section.STATUS)[:PREVIEW_SUMMARY_CHARS],
        **{s.status_field: getattr(report, s.status_field) for s in Section if s.status_field},
        "risks_count": len(report.risks),
        "tasks_count": len(report.tasks),
        "has_open_opps": bool(report.narrative(Section.OPEN_OPPS)),
        "has_big_plays": bool(report.narrative(Section.BIG_PLAYS)),
        "has_approach": bool(report.narrative(Section.APPROACH)),
        "has_other_activities": bool(report.narrative(Section.OTHER)),
    }


def preview_reports(result: ParseResult) -> dict[str, Any]:
    return {
        "reports": [preview_report(r) for r in result.reports],
        "summary": result.summary,
        "warnings": list(result.warnings),
    }
