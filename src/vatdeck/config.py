from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import tomllib

DEFAULT_ENTITY_ALIASES: tuple[tuple[str, str], ...] = (
    ("DAFF", "DAFF"),
    ("SAU", "SAU"),
    ("VICGOV", "VICGov"),
    ("VIC GOV", "VICGov"),
    ("DISR", "DISR"),
    ("GROWTH", "Growth"),
    ("P&P", "P&P"),
    ("PLATFORMS AND PARTNERSHIPS", "P&P"),
    ("EMERGING", "Emerging"),
    ("EMERGING ACCOUNTS", "Emerging"),
)

def _expand(p: str) -> str:
    return os.path.expandvars(os.path.expanduser(p))

@dataclass(frozen=True)
class ParserConfig:
    """Tunables for deck parsing.

    Defaults match the weekly VAT sales-committee deck. The alias table is
    ordered: the first alias contained in a title wins.
    """

    entity_aliases: tuple[tuple[str, str], ...] = DEFAULT_ENTITY_ALIASES

    # Slide classification
    title_max_paragraphs: int = 2
    title_max_bytes: int = 3000
    deck_title_marker: str = "vat report"
    deck_subtitle_marker: str = "sales committee"
    status_update_marker: str = "planner status"

    # Narrative sections
    banner_scan_limit: int = 5
    colon_window: int = 40

    # Paragraphs scanned for dates and the fallback overall status
    lead_paragraphs: int = 5

    # Register rows
    skip_descriptions: tuple[str, ...] = ("people process",)

    def __post_init__(self):
        """Normalize list inputs to tuples so the config stays hashable."""
        if not isinstance(self.entity_aliases, tuple):
            object.__setattr__(self, 'entity_aliases', tuple((str(a), str(c)) for a, c in self.entity_aliases))
        if not isinstance(self.skip_descriptions, tuple):
            object.__setattr__(self, 'skip_descriptions', tuple(self.skip_descriptions))

    @staticmethod
    def from_toml(path: str | Path) -> "ParserConfig":
        data = tomllib.loads(Path(_expand(str(path))).read_text(encoding="utf-8"))
        entities = data.get("entities", {})
        slides = data.get("slides", {})
        narrative = data.get("narrative", {})
        register = data.get("register", {})

        # Validate alias table
        aliases = DEFAULT_ENTITY_ALIASES
        raw_aliases = entities.get("aliases")
        if raw_aliases is not None:
            parsed: list[tuple[str, str]] = []
            for pair in raw_aliases:
                if not isinstance(pair, list) or len(pair) != 2 or not all(isinstance(x, str) and x.strip() for x in pair):
                    raise ValueError(f"Invalid entity alias: {pair!r}. Expected [alias, canonical_name].")
                parsed.append((pair[0].strip(), pair[1].strip()))
            if not parsed:
                raise ValueError("Invalid entities.aliases: at least one alias is required.")
            aliases = tuple(parsed)

        title_max_paragraphs = int(slides.get("title_max_paragraphs", 2))
        title_max_bytes = int(slides.get("title_max_bytes", 3000))
        if title_max_paragraphs < 1 or title_max_paragraphs > 20:
            raise ValueError(f"Invalid title_max_paragraphs: {title_max_paragraphs}. Must be between 1 and 20.")
        if title_max_bytes < 100 or title_max_bytes > 1_000_000:
            raise ValueError(f"Invalid title_max_bytes: {title_max_bytes}. Must be between 100 and 1000000.")

        banner_scan_limit = int(narrative.get("banner_scan_limit", 5))
        colon_window = int(narrative.get("colon_window", 40))
        lead_paragraphs = int(narrative.get("lead_paragraphs", 5))
        if banner_scan_limit < 0 or banner_scan_limit > 50:
            raise ValueError(f"Invalid banner_scan_limit: {banner_scan_limit}. Must be between 0 and 50.")
        if colon_window < 1 or colon_window > 500:
            raise ValueError(f"Invalid colon_window: {colon_window}. Must be between 1 and 500.")
        if lead_paragraphs < 1 or lead_paragraphs > 50:
            raise ValueError(f"Invalid lead_paragraphs: {lead_paragraphs}. Must be between 1 and 50.")

        markers = {
            "deck_title_marker": slides.get("deck_title_marker", "vat report"),
            "deck_subtitle_marker": slides.get("deck_subtitle_marker", "sales committee"),
            "status_update_marker": slides.get("status_update_marker", "planner status"),
        }
        for key, value in markers.items():
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Invalid {key}: {value!r}. Must be a non-empty string.")

        return ParserConfig(
            entity_aliases=aliases,
            title_max_paragraphs=title_max_paragraphs,
            title_max_bytes=title_max_bytes,
            deck_title_marker=markers["deck_title_marker"].strip().casefold(),
            deck_subtitle_marker=markers["deck_subtitle_marker"].strip().casefold(),
            status_update_marker=markers["status_update_marker"].strip().casefold(),
            banner_scan_limit=banner_scan_limit,
            colon_window=colon_window,
            lead_paragraphs=lead_paragraphs,
            skip_descriptions=tuple(str(s).strip().casefold() for s in register.get("skip_descriptions", ["people process"])),
        )


def load_config(path: str | Path | None = None) -> ParserConfig:
    """Load a config file, or the defaults when no path is given."""
    if path is None:
        return ParserConfig()
    return ParserConfig.from_toml(path)
