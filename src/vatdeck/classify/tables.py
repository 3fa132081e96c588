"""Recognize report tables by shape and pull typed records out of them.

Three table shapes are understood, chosen from the column count of the first
row and the header text:

- status grid: 3 columns, at least 5 rows. Overall status, summary lines
  and one status per category.
- register: 11 columns with a "Raised by" header. Risk or issue rows.
- tasks: 7 columns with a "Bucket" header. Planner task rows.

Tables of any other shape are ignored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from ..models import Accepted, Risk, RowOutcome, Section, Skipped, Table, Task
from ..utils import find_status

logger = logging.getLogger(__name__)

OVERALL_MARKERS = ("status overall", "overall status")
SUMMARY_MARKERS = ("status summary", "summary")
# Ordered: the first marker that prefixes the label wins.
CATEGORY_MARKERS: tuple[tuple[str, Section], ...] = (
    ("open opps", Section.OPEN_OPPS),
    ("big play", Section.BIG_PLAYS),
    ("account goals", Section.ACCOUNT_GOALS),
    ("relationships", Section.RELATIONSHIPS),
    ("research", Section.RESEARCH),
)

RISK_FIELDS = (
    "raised_by", "description", "impact", "date_becomes_issue", "status", "owner",
    "impact_rating", "likelihood", "mitigation", "comments", "rating_color",
)
TASK_FIELDS = ("bucket_name", "task_name", "progress", "due_date", "priority", "assigned_to", "labels")

STATUS_GRID_COLUMNS = 3
STATUS_GRID_MIN_ROWS = 5


class TableShape(Enum):
    STATUS_GRID = "status_grid"
    REGISTER = "register"
    TASKS = "tasks"
    UNKNOWN = "unknown"


@dataclass
class TableExtraction:
    """Partial report fields recovered from a single table."""

    shape: TableShape = TableShape.UNKNOWN
    overall_status: str = ""
    summary_lines: list[str] = field(default_factory=list)
    category_statuses: dict[Section, str] = field(default_factory=dict)
    risks: list[Risk] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)


def _cell(row: list[str], i: int) -> str:
    return row[i].strip() if i < len(row) else ""


def _blank(row: list[str]) -> bool:
    return all(not c.strip() for c in row)


def _header_has(table: Table, phrase: str) -> bool:
    return any(phrase in c.casefold() for c in table[0])


def _labelled(label: str, markers: tuple[str, ...]) -> bool:
    return any(label == m or label.startswith(m) for m in markers)


def detect_shape(table: Table) -> TableShape:
    if not table:
        return TableShape.UNKNOWN
    columns = len(table[0])
    if columns == STATUS_GRID_COLUMNS and len(table) >= STATUS_GRID_MIN_ROWS:
        return TableShape.STATUS_GRID
    if columns == len(RISK_FIELDS) and _header_has(table, "raised by"):
        return TableShape.REGISTER
    if columns == len(TASK_FIELDS) and _header_has(table, "bucket"):
        return TableShape.TASKS
    return TableShape.UNKNOWN


def parse_status_grid(table: Table) -> TableExtraction:
    out = TableExtraction(shape=TableShape.STATUS_GRID)
    if not table:
        return out
    out.overall_status = find_status(_cell(table[0], 0))

    for row in table[1:]:
        col0 = _cell(row, 0)
        label = _cell(row, 1).casefold()

        if _labelled(label, OVERALL_MARKERS) or col0.casefold().startswith("overall status"):
            continue

        if _labelled(label, SUMMARY_MARKERS):
            if col0 and not out.summary_lines:
                out.summary_lines.append(col0)
            continue

        section = next((s for marker, s in CATEGORY_MARKERS if label == marker or label.startswith(marker)), None)
        if section is not None:
            status = find_status(" ".join(_cell(row, i) for i in range(STATUS_GRID_COLUMNS)))
            if status:
                out.category_statuses[section] = status
            continue

        if col0:
            out.summary_lines.append(col0)
    return out


def _register_outcomes(table: Table, kind: str, skip_descriptions: tuple[str, ...]) -> Iterator[RowOutcome[Risk]]:
    for row in table[1:]:
        if _blank(row):
            yield Skipped("blank row", tuple(row))
            continue
        values = {name: _cell(row, i) for i, name in enumerate(RISK_FIELDS)}
        description = values["description"]
        if not description:
            yield Skipped("missing description", tuple(row))
            continue
        if description.casefold() in skip_descriptions:
            yield Skipped("placeholder description", tuple(row))
            continue
        yield Accepted(Risk(kind=kind, **values))


def parse_register_rows(table: Table, skip_descriptions: tuple[str, ...] = ("people process",)) -> list[Risk]:
    """Risk or issue rows of an 11-column register table.

    The kind comes from the header: a register with an "Issue Rating" column
    holds issues, any other register holds risks.
    """
    if len(table) < 2:
        return []
    kind = "issue" if _header_has(table, "issue rating") else "risk"
    return _accepted(_register_outcomes(table, kind, skip_descriptions), "register")


def _task_outcomes(table: Table) -> Iterator[RowOutcome[Task]]:
    bucket = ""
    for row in table[1:]:
        if _blank(row):
            yield Skipped("blank row", tuple(row))
            continue
        values = {name: _cell(row, i) for i, name in enumerate(TASK_FIELDS)}
        # Merged bucket cells are blank below their first row.
        bucket = values["bucket_name"] or bucket
        values["bucket_name"] = bucket
        if not values["task_name"]:
            yield Skipped("missing task name", tuple(row))
            continue
        yield Accepted(Task(**values))


def parse_task_rows(table: Table) -> list[Task]:
    if len(table) < 2:
        return []
    return _accepted(_task_outcomes(table), "task")


def _accepted(outcomes, label: str) -> list:
    records = []
    for o in outcomes:
        if isinstance(o, Accepted):
            records.append(o.record)
        else:
            logger.debug(f"Skipped {label} row ({o.reason}): {list(o.row)}")
    return records


def classify_table(table: Table, skip_descriptions: tuple[str, ...] = ("people process",)) -> TableExtraction:
    shape = detect_shape(table)
    if shape is TableShape.STATUS_GRID:
        return parse_status_grid(table)
    if shape is TableShape.REGISTER:
        return TableExtraction(shape=shape, risks=parse_register_rows(table, skip_descriptions))
    if shape is TableShape.TASKS:
        return TableExtraction(shape=shape, tasks=parse_task_rows(table))
    if table:
        logger.debug(f"Ignoring table with {len(table[0])} columns and {len(table)} rows")
    return TableExtraction()
