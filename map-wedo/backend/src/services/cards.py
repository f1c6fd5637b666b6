from __future__ import annotations

from typing import List, Optional

from models import CATEGORIES, Card, RankedPlace, ViewList
from services.links import DEFAULT_SEARCH_URL, map_link
from utils import clean_text

_LABELS = {c["id"]: c["label"] for c in CATEGORIES}


def _address_line(ranked: RankedPlace) -> Optional[str]:
    place = ranked.place
    if place.address:
        return place.address
    # pet rows carry their address inside the imported description
    if place.category == "pet" and place.metadata.original_description:
        return clean_text(place.metadata.original_description)
    return None


def build_card(ranked: RankedPlace, search_url: str = DEFAULT_SEARCH_URL) -> Card:
    place = ranked.place
    description = place.metadata.description
    return Card(
        id=place.id,
        name=place.name,
        category=place.category,
        category_label=_LABELS.get(place.category, place.category),
        map_url=map_link(place, search_url),
        distance_km=ranked.distance_km,
        # a zero distance is not labelled
        distance_label=f"{ranked.distance_km:.1f} km" if ranked.distance_km else None,
        address_line=_address_line(ranked),
        description=description if description and len(description) > 2 else None,
        tags=list(place.tags[:3]),
        rating=place.rating,
    )


def build_cards(view: ViewList, search_url: str = DEFAULT_SEARCH_URL) -> List[Card]:
    return [build_card(r, search_url) for r in view.items]
