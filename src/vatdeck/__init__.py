"""vatdeck — turn weekly VAT status decks into structured reports.

Reads an OOXML slide deck, groups its slides per VAT (entity), and extracts
status, narrative sections, risk registers and planner tasks for each.

Public API:
- ParserConfig
- DeckParser
- parse_deck
- debug_slides
"""

from .config import ParserConfig, load_config
from .errors import ArchiveError, VatDeckError
from .models import ParsedReport, ParseResult, Risk, Slide, Task
from .parser import DeckParser, debug_slides, parse_deck

__all__ = [
    "ParserConfig",
    "load_config",
    "DeckParser",
    "parse_deck",
    "debug_slides",
    "ParsedReport",
    "ParseResult",
    "Risk",
    "Task",
    "Slide",
    "ArchiveError",
    "VatDeckError",
]
