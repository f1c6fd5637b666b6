"""Browse state transitions and view computation.

Every transition returns a new ``BrowseState``; ``compute_view`` is a pure
function of the place list and the state.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from loguru import logger

from models import BrowseState, Coordinate, Place, RankedPlace, ViewList
from services.ranking import rank_places
from services.tags import DEFAULT_TAG_LIMIT, extract_available_tags

DEFAULT_PAGE_SIZE = 30


def select_category(state: BrowseState, category: str) -> BrowseState:
    return replace(state, category=category, tag="", page=1)


def set_search(state: BrowseState, term: Optional[str]) -> BrowseState:
    return replace(state, search=term or "", page=1)


def select_tag(state: BrowseState, tag: Optional[str]) -> BrowseState:
    return replace(state, tag=tag or "", page=1)


def load_more(state: BrowseState) -> BrowseState:
    return replace(state, page=state.page + 1)


def set_user_coordinate(state: BrowseState, coordinate: Optional[Coordinate]) -> BrowseState:
    return replace(state, user_coordinate=coordinate)


def paginate(ranked: Sequence[RankedPlace], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[RankedPlace]:
    if page < 1:
        raise ValueError("page must be >= 1")
    return list(ranked[: page_size * page])


def compute_view(
    places: Sequence[Place],
    state: BrowseState,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    tag_limit: int = DEFAULT_TAG_LIMIT,
) -> ViewList:
    ranked = rank_places(
        places,
        category=state.category,
        search=state.search,
        tag=state.tag,
        user=state.user_coordinate,
    )
    visible = paginate(ranked, state.page, page_size)
    logger.debug(
        "view category={} search={!r} tag={!r} page={} total={} visible={}",
        state.category,
        state.search,
        state.tag,
        state.page,
        len(ranked),
        len(visible),
    )
    return ViewList(
        items=visible,
        total=len(ranked),
        page=state.page,
        page_size=page_size,
        available_tags=extract_available_tags(places, state.category, tag_limit),
        category=state.category,
        search=state.search,
        tag=state.tag,
    )
