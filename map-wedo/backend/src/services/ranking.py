from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence

from models import ALL_CATEGORIES, Coordinate, Place, RankedPlace
from utils import haversine_km


def annotate_distances(places: Iterable[Place], user: Optional[Coordinate]) -> List[RankedPlace]:
    out: list[RankedPlace] = []
    for place in places:
        dist = None
        if user is not None and place.coordinate is not None:
            dist = haversine_km(user.lat, user.lng, place.coordinate.lat, place.coordinate.lng)
        out.append(RankedPlace(place=place, distance_km=dist))
    return out


def filter_by_category(ranked: Sequence[RankedPlace], category: str) -> List[RankedPlace]:
    if category == ALL_CATEGORIES:
        return list(ranked)
    return [r for r in ranked if r.place.category == category]


def _matches_search(place: Place, lower: str) -> bool:
    if lower in place.name.lower():
        return True
    return any(lower in t.lower() for t in place.tags)


def filter_by_search(ranked: Sequence[RankedPlace], search: Optional[str]) -> List[RankedPlace]:
    if not search or not search.strip():
        return list(ranked)
    lower = search.lower()
    return [r for r in ranked if _matches_search(r.place, lower)]


def filter_by_tag(ranked: Sequence[RankedPlace], tag: Optional[str]) -> List[RankedPlace]:
    if not tag:
        return list(ranked)
    return [r for r in ranked if tag in r.place.tags]


def _compare_distance(a: RankedPlace, b: RankedPlace) -> float:
    if a.distance_km is not None and b.distance_km is not None:
        return a.distance_km - b.distance_km
    # keep input order when either side has no distance
    return 0


def sort_by_distance(ranked: Sequence[RankedPlace]) -> List[RankedPlace]:
    return sorted(ranked, key=cmp_to_key(_compare_distance))


def rank_places(
    places: Sequence[Place],
    *,
    category: str = ALL_CATEGORIES,
    search: str = "",
    tag: str = "",
    user: Optional[Coordinate] = None,
) -> List[RankedPlace]:
    """Annotate, filter and order places for display (pagination not applied)."""
    result = annotate_distances(tuple(places), user)
    result = filter_by_category(result, category)
    result = filter_by_search(result, search)
    result = filter_by_tag(result, tag)
    return sort_by_distance(result)
