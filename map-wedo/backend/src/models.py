"""Data models for the place directory backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


ALL_CATEGORIES = "all"

# Display order of the category tabs; food is the default tab.
CATEGORIES: list[dict[str, str]] = [
    {"id": "food", "label": "美食 Food"},
    {"id": "travel", "label": "旅遊 Travel"},
    {"id": "dive", "label": "潛水 Diving"},
    {"id": "pet", "label": "寵物 Pets"},
]

CATEGORY_IDS = frozenset(c["id"] for c in CATEGORIES)


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class PlaceMetadata:
    tags: tuple[str, ...] = ()
    description: Optional[str] = None
    original_description: Optional[str] = None
    notes: Optional[str] = None
    difficulty: Optional[str] = None
    address: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    category: str
    subcategory: Optional[str] = None
    location: Any = field(default=None, hash=False)
    coordinate: Optional[Coordinate] = None
    metadata: PlaceMetadata = field(default_factory=PlaceMetadata)
    address: Optional[str] = None
    rating: Optional[float] = None
    google_url: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags

    @property
    def known_category(self) -> bool:
        return self.category in CATEGORY_IDS


@dataclass(frozen=True)
class RankedPlace:
    place: Place
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class BrowseState:
    category: str = "food"
    search: str = ""
    tag: str = ""
    page: int = 1
    user_coordinate: Optional[Coordinate] = None


@dataclass
class ViewList:
    items: list[RankedPlace]
    total: int
    page: int
    page_size: int
    available_tags: list[str] = field(default_factory=list)
    category: str = "food"
    search: str = ""
    tag: str = ""

    @property
    def remaining(self) -> int:
        return self.total - len(self.items)

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total


@dataclass
class Card:
    id: str
    name: str
    category: str
    category_label: str
    map_url: str
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None
    address_line: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    rating: Optional[float] = None
