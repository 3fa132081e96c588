from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from .classify.narrative import classify_paragraphs
from .classify.tables import TASK_FIELDS, classify_table, parse_task_rows
from .config import ParserConfig
from .models import EntityGroup, ParsedReport, Risk, Section, Slide, Task
from .utils import find_date, find_status

logger = logging.getLogger(__name__)


@dataclass
class _ReportBuilder:
    """Mutable accumulator for one entity group; frozen by `build`."""

    entity_name: str
    report_date: date | None = None
    overall_status: str = ""
    statuses: dict[Section, str] = field(default_factory=dict)
    narrative: dict[Section, list[str]] = field(default_factory=lambda: {s: [] for s in Section})
    risks: list[Risk] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    def add_content_slide(self, slide: Slide, title: Slide, cfg: ParserConfig) -> None:
        if self.report_date is None:
            self.report_date = find_date([*slide.paragraphs[:cfg.lead_paragraphs], *title.paragraphs])

        table_lines: dict[Section, list[str]] = {}
        for table in slide.tables:
            ext = classify_table(table, cfg.skip_descriptions)
            if ext.overall_status and not self.overall_status:
                self.overall_status = ext.overall_status
            for section, status in ext.category_statuses.items():
                self.statuses.setdefault(section, status)
            if ext.summary_lines:
                table_lines.setdefault(Section.STATUS, []).extend(ext.summary_lines)
            self.risks.extend(ext.risks)
            self.tasks.extend(ext.tasks)

        # Paragraph text only fills sections this slide's tables left empty.
        paragraph_lines = classify_paragraphs(slide.paragraphs, cfg)
        for section in Section:
            self.narrative[section].extend(table_lines.get(section) or paragraph_lines[section])

    def add_status_update_slide(self, slide: Slide) -> None:
        for table in slide.tables:
            if table and len(table[0]) == len(TASK_FIELDS):
                self.tasks.extend(parse_task_rows(table))

    def build(self) -> ParsedReport:
        fields = {s.value: "\n".join(lines) for s, lines in self.narrative.items()}
        fields.update({s.status_field: status for s, status in self.statuses.items() if s.status_field})
        return ParsedReport(
            entity_name=self.entity_name,
            report_date=self.report_date or date.today(),
            overall_status=self.overall_status,
            risks=tuple(self.risks),
            tasks=tuple(self.tasks),
            **fields,
        )


def fallback_overall_status(slides: Iterable[Slide], lead: int = 5) -> str:
    """First status token among the leading paragraphs of the given slides."""
    for slide in slides:
        for p in slide.paragraphs[:lead]:
            status = find_status(p)
            if status:
                return status
    return ""


def assemble_report(group: EntityGroup, cfg: ParserConfig, today: date | None = None) -> ParsedReport:
    b = _ReportBuilder(entity_name=group.entity_name)
    for slide in group.content_slides:
        b.add_content_slide(slide, group.title_slide, cfg)
    for slide in group.status_update_slides:
        b.add_status_update_slide(slide)

    if not b.overall_status:
        b.overall_status = fallback_overall_status(group.content_slides, cfg.lead_paragraphs)
    if b.report_date is None:
        b.report_date = find_date(group.title_slide.paragraphs)
    if b.report_date is None:
        b.report_date = today or date.today()
        logger.debug(f"{group.entity_name}: no report date in slides, using {b.report_date.isoformat()}")

    report = b.build()
    logger.debug(
        f"{report.entity_name}: {len(group.content_slides)} content slides, "
        f"{len(group.status_update_slides)} status update slides"
    )
    return report


def build_summary(reports: Iterable[ParsedReport]) -> str:
    return "; ".join(
        f"{r.entity_name}: {len(r.risks)} risks, {len(r.tasks)} planner tasks, "
        f"status: {r.overall_status or 'not set'}"
        for r in reports
    )
