"""Assign free-text slide paragraphs to report narrative sections.

A slide's paragraphs are read top to bottom. Lines go to the current section,
which starts as the status summary and moves whenever a section header
("Open Opps:", "Big Plays", "Approach to shortfall", ...) is seen. Status
tokens and table header labels are dropped since the table pass already
captured them.
"""
from __future__ import annotations

import re
from typing import Sequence

from ..config import ParserConfig
from ..models import Section
from ..utils import is_status_token

# Ordered (pattern, section) pairs; first match wins.
SECTION_HEADERS: tuple[tuple[re.Pattern[str], Section], ...] = (
    (re.compile(r"^approach to\b.*(?:shortfall|target)"), Section.APPROACH),
    (re.compile(r"^other vat\b|^other activities"), Section.OTHER),
    (re.compile(r"^open opp"), Section.OPEN_OPPS),
    (re.compile(r"^big play"), Section.BIG_PLAYS),
    (re.compile(r"^account goal"), Section.ACCOUNT_GOALS),
    (re.compile(r"^relationship"), Section.RELATIONSHIPS),
    (re.compile(r"^research"), Section.RESEARCH),
)

TABLE_HEADER_LABELS = frozenset({
    "status overall", "raised by", "description", "impact",
    "date risk becomes issue", "status", "owner", "impact rating",
    "likelihood", "mitigation", "comments", "risk rating",
    "issue rating", "risks", "issues", "risk", "issue",
    "people", "process", "people process", "week ending",
})

PAGE_NUMBER_RE = re.compile(r"^\d{1,2}\s")
YEAR_RE = re.compile(r"^\d{4}$")


def banner_length(paragraphs: Sequence[str], cfg: ParserConfig) -> int:
    """Number of leading paragraphs that form the slide banner."""
    skip = 0
    for i, p in enumerate(paragraphs[:cfg.banner_scan_limit]):
        folded = p.casefold()
        if (
            cfg.deck_title_marker in folded
            or "overall status" in folded
            or PAGE_NUMBER_RE.match(p)
            or YEAR_RE.match(p.strip())
        ):
            skip = i + 1
    return skip


def is_redundant(line: str, cfg: ParserConfig) -> bool:
    """True for status tokens, table header labels and banner leftovers."""
    folded = line.casefold()
    if is_status_token(line) or folded in TABLE_HEADER_LABELS:
        return True
    if folded.startswith("week ending"):
        return True
    return cfg.deck_title_marker in folded and len(line) < 30


def match_section(line: str) -> Section | None:
    folded = line.casefold()
    for pattern, section in SECTION_HEADERS:
        if pattern.search(folded):
            return section
    return None


def classify_paragraphs(paragraphs: Sequence[str], cfg: ParserConfig) -> dict[Section, list[str]]:
    sections: dict[Section, list[str]] = {s: [] for s in Section}
    current = Section.STATUS

    for raw in paragraphs[banner_length(paragraphs, cfg):]:
        line = raw.strip()
        if not line or is_redundant(line, cfg):
            continue

        header = match_section(line)
        if header is None:
            sections[current].append(line)
            continue

        current = header
        colon = line.find(":")
        if 0 <= colon < cfg.colon_window:
            rest = line[colon + 1:].strip()
            if rest:
                sections[current].append(rest)
        else:
            sections[current].append(line)

    return sections
