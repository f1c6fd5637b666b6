from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from loguru import logger

from models import Place, PlaceMetadata
from utils import finite_float, parse_location


_METADATA_FIELDS = ("description", "original_description", "notes", "difficulty", "address")


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def parse_metadata(raw: Any) -> PlaceMetadata:
    if not isinstance(raw, Mapping):
        return PlaceMetadata()
    tags_raw = raw.get("tags")
    tags: tuple[str, ...] = ()
    if isinstance(tags_raw, (list, tuple)):
        tags = tuple(t for t in tags_raw if isinstance(t, str))
    known = {k: _opt_str(raw.get(k)) for k in _METADATA_FIELDS}
    extra = {k: v for k, v in raw.items() if k != "tags" and k not in _METADATA_FIELDS}
    return PlaceMetadata(tags=tags, extra=extra, **known)


def place_from_record(row: Mapping[str, Any]) -> Place:
    """Build a Place from a raw store row, resolving its location once."""
    location = row.get("location")
    return Place(
        id=str(row.get("id", "")),
        name=_opt_str(row.get("name")) or "",
        category=_opt_str(row.get("category")) or "",
        subcategory=_opt_str(row.get("subcategory")),
        location=location,
        coordinate=parse_location(location),
        metadata=parse_metadata(row.get("metadata")),
        address=_opt_str(row.get("address")),
        rating=finite_float(row.get("rating")),
        google_url=_opt_str(row.get("google_url")),
        updated_at=_opt_str(row.get("updated_at")),
    )


def places_from_records(rows: Iterable[Any]) -> List[Place]:
    out: list[Place] = []
    skipped = 0
    for row in rows:
        if not isinstance(row, Mapping):
            skipped += 1
            continue
        out.append(place_from_record(row))
    if skipped:
        logger.warning("skipped {} malformed place records", skipped)
    unknown = sum(1 for p in out if not p.known_category)
    if unknown:
        logger.debug("{} places have an unrecognized category", unknown)
    return out
