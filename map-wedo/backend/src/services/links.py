from __future__ import annotations

import urllib.parse

from models import Place

DEFAULT_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

# characters encodeURIComponent leaves as-is besides the ones quote() already keeps
_SAFE = "!*'()"


def map_link(place: Place, search_url: str = DEFAULT_SEARCH_URL) -> str:
    if place.google_url:
        return place.google_url
    return f"{search_url}{urllib.parse.quote(place.name, safe=_SAFE)}"
