from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Generic, TypeVar, Union

Table = list[list[str]]

R = TypeVar("R")


@dataclass(frozen=True)
class Slide:
    """One parsed slide of a deck.

    `index` is the 1-based number from the `slideN.xml` entry name; `size` is
    the markup size in bytes and only feeds the title-slide heuristic.
    """
    index: int
    paragraphs: tuple[str, ...] = ()
    tables: tuple[Table, ...] = ()
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "paragraphs": list(self.paragraphs),
            "tables": [list(t) for t in self.tables],
            "size": self.size,
        }


class SlideKind(Enum):
    DECK_TITLE = "deck_title"
    EMPTY = "empty"
    TITLE = "title"
    STATUS_UPDATE = "status_update"
    CONTENT = "content"


@dataclass(frozen=True)
class ClassifiedSlide:
    slide: Slide
    kind: SlideKind
    entity_name: str | None = None


@dataclass
class EntityGroup:
    """Slides belonging to one entity while the deck is being scanned."""
    entity_name: str
    title_slide: Slide
    content_slides: list[Slide] = field(default_factory=list)
    status_update_slides: list[Slide] = field(default_factory=list)


class Section(Enum):
    """Narrative sections of a report, in report field order."""

    STATUS = "status_summary"
    OPEN_OPPS = "open_opps_summary"
    BIG_PLAYS = "big_plays"
    ACCOUNT_GOALS = "account_goals"
    RELATIONSHIPS = "relationships"
    RESEARCH = "research"
    APPROACH = "approach_to_shortfall"
    OTHER = "other_activities"

    @property
    def status_field(self) -> str | None:
        """Name of the category status field, for sections that carry one."""
        return _STATUS_FIELDS.get(self)


_STATUS_FIELDS: dict[Section, str] = {
    Section.OPEN_OPPS: "open_opps_status",
    Section.BIG_PLAYS: "big_plays_status",
    Section.ACCOUNT_GOALS: "account_goals_status",
    Section.RELATIONSHIPS: "relationships_status",
    Section.RESEARCH: "research_status",
}


@dataclass(frozen=True)
class Risk:
    raised_by: str
    description: str
    impact: str = ""
    date_becomes_issue: str = ""
    status: str = ""
    owner: str = ""
    impact_rating: str = ""
    likelihood: str = ""
    mitigation: str = ""
    comments: str = ""
    rating_color: str = ""
    kind: str = "risk"  # risk|issue


@dataclass(frozen=True)
class Task:
    bucket_name: str
    task_name: str
    progress: str = ""
    due_date: str = ""
    priority: str = ""
    assigned_to: str = ""
    labels: str = ""


@dataclass(frozen=True)
class Accepted(Generic[R]):
    record: R


@dataclass(frozen=True)
class Skipped:
    reason: str
    row: tuple[str, ...] = ()


RowOutcome = Union[Accepted[R], Skipped]


@dataclass(frozen=True)
class ParsedReport:
    """Normalized report for one entity. Empty strings mean "not extracted"."""

    entity_name: str
    report_date: date
    overall_status: str = ""

    status_summary: str = ""
    open_opps_summary: str = ""
    big_plays: str = ""
    account_goals: str = ""
    relationships: str = ""
    research: str = ""
    approach_to_shortfall: str = ""
    other_activities: str = ""

    open_opps_status: str = ""
    big_plays_status: str = ""
    account_goals_status: str = ""
    relationships_status: str = ""
    research_status: str = ""

    risks: tuple[Risk, ...] = ()
    tasks: tuple[Task, ...] = ()

    def narrative(self, section: Section) -> str:
        return getattr(self, section.value)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["report_date"] = self.report_date.isoformat()
        out["risks"] = [asdict(r) for r in self.risks]
        out["tasks"] = [asdict(t) for t in self.tasks]
        return out


@dataclass(frozen=True)
class ParseResult:
    reports: list[ParsedReport]
    summary: str
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reports": [r.to_dict() for r in self.reports],
            "summary": self.summary,
            "warnings": list(self.warnings),
        }
