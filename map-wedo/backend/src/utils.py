"""Utility helpers for the place directory backend."""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional

from models import Coordinate


EARTH_RADIUS_KM = 6371.0

_POINT_RE = re.compile(r"\(([^ ]+) ([^ ]+)\)")
_TAG_RE = re.compile(r"<[^>]*>?")


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def finite_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def _coordinate(lat: Any, lng: Any) -> Optional[Coordinate]:
    lat_f = finite_float(lat)
    lng_f = finite_float(lng)
    if lat_f is None or lng_f is None:
        return None
    return Coordinate(lat=lat_f, lng=lng_f)


def parse_location(loc: Any) -> Optional[Coordinate]:
    """Resolve a stored location value to a coordinate.

    Accepts well-known text ``POINT(<lon> <lat>)``, a mapping with ``lat`` and
    ``lng``/``lon`` keys, or a GeoJSON point. Anything else yields None.
    """
    if not loc:
        return None
    if isinstance(loc, str):
        if not loc.startswith("POINT"):
            return None
        # POINT(120.334 22.56) -> lon lat
        match = _POINT_RE.search(loc)
        if not match:
            return None
        return _coordinate(match.group(2), match.group(1))
    if isinstance(loc, Mapping):
        if "lat" in loc and ("lng" in loc or "lon" in loc):
            return _coordinate(loc["lat"], loc.get("lng", loc.get("lon")))
        if loc.get("type") == "Point":
            coords = loc.get("coordinates")
            if isinstance(coords, (list, tuple)) and len(coords) >= 2:
                return _coordinate(coords[1], coords[0])
    return None


def strip_markup(text: str) -> str:
    """Replace markup tags and ``&nbsp;`` escapes with spaces."""
    if not text:
        return ""
    return _TAG_RE.sub(" ", text).replace("&nbsp;", " ")


def clean_text(text: Optional[str], limit: int = 80) -> str:
    clean = strip_markup(text or "")
    return clean[:limit] + ("..." if len(clean) > limit else "")
