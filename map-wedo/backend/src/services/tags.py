from __future__ import annotations

from typing import Iterable, List

from models import Place

DEFAULT_TAG_LIMIT = 15


def extract_available_tags(places: Iterable[Place], category: str, limit: int = DEFAULT_TAG_LIMIT) -> List[str]:
    """Distinct tags of one category in first-seen order.

    Search text and the active tag are ignored so picking a tag never hides
    the other options.
    """
    seen: dict[str, None] = {}
    for place in places:
        if place.category != category:
            continue
        for tag in place.tags:
            seen.setdefault(tag, None)
    return list(seen)[: max(0, limit)]
