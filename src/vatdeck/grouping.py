from __future__ import annotations

import logging
from typing import Iterable

from .models import ClassifiedSlide, EntityGroup, SlideKind

logger = logging.getLogger(__name__)


def group_slides(classified: Iterable[ClassifiedSlide]) -> tuple[list[EntityGroup], list[str]]:
    """Split classified slides into per-entity groups, in document order.

    Each title slide opens a group that collects the following slides until
    the next title. Slides that arrive before any group is open are dropped
    and reported in the returned warnings.
    """
    groups: list[EntityGroup] = []
    warnings: list[str] = []
    current: EntityGroup | None = None

    for cs in classified:
        kind = cs.kind
        if kind in (SlideKind.DECK_TITLE, SlideKind.EMPTY):
            continue
        if kind is SlideKind.TITLE:
            current = EntityGroup(entity_name=cs.entity_name or "", title_slide=cs.slide)
            groups.append(current)
            continue
        if current is None:
            msg = f"Slide {cs.slide.index} dropped: no entity title slide before it"
            logger.warning(msg)
            warnings.append(msg)
            continue
        if kind is SlideKind.STATUS_UPDATE:
            current.status_update_slides.append(cs.slide)
        else:
            current.content_slides.append(cs.slide)

    return groups, warnings
