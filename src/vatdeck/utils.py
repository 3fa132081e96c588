from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable

ENTITY_RE = re.compile(r"&(?:(amp|lt|gt|apos|quot)|#(\d+)|#x([0-9A-Fa-f]+));")
STATUS_RE = re.compile(r"\b(GREEN|AMBER|RED|N/A)\b")
TEXT_DATE_RE = re.compile(r"\b(\d{1,2})\s+([A-Za-z]+),?\s+(\d{4})\b")
SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")

STATUS_TOKENS = ("GREEN", "AMBER", "RED", "N/A")

_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "apos": "'", "quot": '"'}
# Non-breaking hyphen becomes a plain hyphen; en and em dashes are kept.
_DASHES = str.maketrans({"\u2011": "-", "\u2013": "\u2013", "\u2014": "\u2014"})


def _entity(m: re.Match[str]) -> str:
    name, dec, hexa = m.groups()
    if name:
        return _NAMED_ENTITIES[name]
    try:
        return chr(int(dec) if dec else int(hexa, 16))
    except (ValueError, OverflowError):
        return m.group(0)


def normalize_dashes(text: str) -> str:
    return text.translate(_DASHES)


def decode_entities(text: str) -> str:
    """Decode XML entities in one pass and normalize typographic dashes."""
    return normalize_dashes(ENTITY_RE.sub(_entity, text))


def find_status(text: str) -> str:
    """Return the first status token in `text` (case-insensitive), or ""."""
    m = STATUS_RE.search(text.upper())
    return m.group(1) if m else ""


def is_status_token(text: str) -> bool:
    return text.strip().upper() in STATUS_TOKENS


def parse_text_date(text: str) -> date | None:
    """Parse the first "D Month[,] YYYY" date in `text`."""
    for m in TEXT_DATE_RE.finditer(text):
        day, month, year = m.groups()
        if month.lower() == "sept":
            month = "Sep"
        for fmt in ("%d %B %Y", "%d %b %Y"):
            try:
                return datetime.strptime(f"{day} {month} {year}", fmt).date()
            except ValueError:
                continue
    return None


def parse_slash_date(text: str) -> date | None:
    """Parse the first day-first "D/M/YYYY" date in `text`."""
    for m in SLASH_DATE_RE.finditer(text):
        day, month, year = (int(g) for g in m.groups())
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def find_date(paragraphs: Iterable[str]) -> date | None:
    for p in paragraphs:
        found = parse_text_date(p) or parse_slash_date(p)
        if found:
            return found
    return None
