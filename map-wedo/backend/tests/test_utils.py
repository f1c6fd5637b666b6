import math

import pytest

from models import Coordinate
from utils import clean_text, haversine_km, mask_secret, parse_location


def test_haversine_zero_for_same_point():
    assert haversine_km(22.56, 120.334, 22.56, 120.334) == pytest.approx(0.0, abs=1e-6)


def test_haversine_symmetric():
    a = (25.0330, 121.5654)  # Taipei
    b = (22.6273, 120.3014)  # Kaohsiung
    assert haversine_km(a[0], a[1], b[0], b[1]) == pytest.approx(haversine_km(b[0], b[1], a[0], a[1]), abs=1e-9)
    assert 290 < haversine_km(a[0], a[1], b[0], b[1]) < 310


def test_haversine_near_antipodal_is_half_circumference():
    d = haversine_km(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(math.pi * 6371.0, rel=1e-9)
    assert not math.isnan(haversine_km(10.0, 20.0, -10.0, -160.0))


def test_parse_point_text_swaps_token_order():
    coord = parse_location("POINT(120.334 22.56)")
    assert coord == Coordinate(lat=22.56, lng=120.334)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "POINT(120.334)",
        "POINT(abc def)",
        "LINESTRING(1 2, 3 4)",
        "0101000020E6100000A4703D0AD7135E40295C8FC2F5903640",
        {"x": 1, "y": 2},
        [120.3, 22.5],
        42,
        "POINT(nan 22.5)",
    ],
)
def test_parse_location_unrecognized_is_none(value):
    assert parse_location(value) is None


def test_parse_structured_and_geojson():
    assert parse_location({"lat": 22.5, "lng": 120.3}) == Coordinate(lat=22.5, lng=120.3)
    assert parse_location({"lat": "22.5", "lon": "120.3"}) == Coordinate(lat=22.5, lng=120.3)
    assert parse_location({"type": "Point", "coordinates": [120.3, 22.5]}) == Coordinate(lat=22.5, lng=120.3)


def test_clean_text_strips_markup_and_truncates():
    raw = "302新竹縣竹北市<br>+886 3 555 0000&nbsp;open"
    assert clean_text(raw) == "302新竹縣竹北市 +886 3 555 0000 open"

    long = "<p>" + "a" * 100 + "</p>"
    out = clean_text(long)
    assert out.endswith("...")
    assert len(out) == 83
    assert "<" not in out


def test_clean_text_none():
    assert clean_text(None) == ""


def test_mask_secret():
    assert mask_secret(None) == "unset"
    assert mask_secret("abcdefghijkl") == "abcd...ijkl"
