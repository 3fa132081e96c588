from __future__ import annotations

import logging
import re

from ..config import ParserConfig
from ..models import ClassifiedSlide, Slide, SlideKind
from ..utils import decode_entities

logger = logging.getLogger(__name__)

VAT_WORD_RE = re.compile(r"\s*\bVAT\b\s*", re.IGNORECASE)


def resolve_entity_name(raw: str, aliases: tuple[tuple[str, str], ...]) -> str | None:
    """Map a title line such as "DAFF VAT" to its canonical entity name.

    The word "VAT" is dropped, then each alias is tried in order for an exact
    or substring match.
    """
    cleaned = VAT_WORD_RE.sub(" ", decode_entities(raw)).strip().casefold()
    if not cleaned:
        return None
    for alias, canonical in aliases:
        key = alias.casefold()
        if cleaned == key or key in cleaned:
            return canonical
    return None


def _first(slide: Slide) -> str:
    return slide.paragraphs[0] if slide.paragraphs else ""


def is_deck_title(slide: Slide, cfg: ParserConfig) -> bool:
    first = _first(slide).casefold()
    return slide.index == 1 and cfg.deck_title_marker in first and cfg.deck_subtitle_marker in first


def is_title_candidate(slide: Slide, cfg: ParserConfig) -> bool:
    return (
        len(slide.paragraphs) <= cfg.title_max_paragraphs
        and slide.size < cfg.title_max_bytes
        and not slide.tables
    )


def is_status_update(slide: Slide, cfg: ParserConfig) -> bool:
    return _first(slide).casefold().startswith(cfg.status_update_marker)


def classify_slide(slide: Slide, cfg: ParserConfig) -> ClassifiedSlide:
    if is_deck_title(slide, cfg):
        return ClassifiedSlide(slide, SlideKind.DECK_TITLE)
    if not slide.paragraphs and not slide.tables:
        return ClassifiedSlide(slide, SlideKind.EMPTY)

    if is_title_candidate(slide, cfg):
        name = resolve_entity_name(_first(slide), cfg.entity_aliases)
        if name:
            return ClassifiedSlide(slide, SlideKind.TITLE, name)
        logger.debug(f"Slide {slide.index}: title-like but no entity matches {_first(slide)!r}")

    if is_status_update(slide, cfg):
        if slide.tables:
            return ClassifiedSlide(slide, SlideKind.STATUS_UPDATE)
        logger.debug(f"Slide {slide.index}: status update without a table, treating as content")
    return ClassifiedSlide(slide, SlideKind.CONTENT)
