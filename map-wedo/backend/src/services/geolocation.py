from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from models import Coordinate
from utils import finite_float


def resolve_user_coordinate(lat: Any, lng: Any) -> Optional[Coordinate]:
    """Turn caller-reported coordinates into a user position.

    Missing values mean the caller has no position (unsupported or denied);
    invalid values are logged and treated the same way.
    """
    if lat is None and lng is None:
        return None
    lat_f = finite_float(lat)
    lng_f = finite_float(lng)
    if lat_f is None or lng_f is None:
        logger.warning("geolocation unavailable: lat={} lng={}", lat, lng)
        return None
    if not (-90.0 <= lat_f <= 90.0) or not (-180.0 <= lng_f <= 180.0):
        logger.warning("geolocation out of range: lat={} lng={}", lat_f, lng_f)
        return None
    return Coordinate(lat=lat_f, lng=lng_f)
