import unittest
from unittest.mock import MagicMock, patch

import requests

from config import Configuration
from services import place_store
from services.place_store import PlaceStoreClient, PlaceStoreError, load_places


def _resp(payload, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


def _cfg(**overrides):
    base = {"supabase_url": "https://demo.supabase.co", "supabase_key": "anon-key-123456"}
    base.update(overrides)
    return Configuration(**base)


ROWS = [
    {"id": 1, "name": "Dive Shop", "category": "dive", "location": "POINT(120.8 22.0)", "metadata": {"tags": ["reef"]}},
    {"id": 2, "name": "Noodles", "category": "food", "location": None, "metadata": None},
    "garbage",
]


class TestPlaceStore(unittest.TestCase):
    def test_fetch_all_pages_until_short_page(self):
        session = MagicMock()
        session.get.side_effect = [_resp(ROWS[:2]), _resp(ROWS[2:])]
        client = PlaceStoreClient(_cfg(store_batch_size=2), session=session)

        places = client.fetch_places()

        self.assertEqual([p.id for p in places], ["1", "2"])
        self.assertEqual(places[0].coordinate.lat, 22.0)
        self.assertIsNone(places[1].coordinate)
        first_params = session.get.call_args_list[0].kwargs["params"]
        second_params = session.get.call_args_list[1].kwargs["params"]
        self.assertEqual(first_params["offset"], 0)
        self.assertEqual(second_params["offset"], 2)
        url = session.get.call_args_list[0].args[0]
        self.assertEqual(url, "https://demo.supabase.co/rest/v1/places")
        headers = session.get.call_args_list[0].kwargs["headers"]
        self.assertEqual(headers["apikey"], "anon-key-123456")

    def test_capped_variant_orders_by_recency(self):
        session = MagicMock()
        session.get.return_value = _resp(ROWS[:2])
        client = PlaceStoreClient(_cfg(store_fetch_limit=200), session=session)

        client.fetch_places()

        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["order"], "updated_at.desc")
        self.assertEqual(params["limit"], 200)
        self.assertEqual(session.get.call_count, 1)

    def test_cached_until_refresh(self):
        session = MagicMock()
        session.get.return_value = _resp(ROWS[:1])
        client = PlaceStoreClient(_cfg(), session=session)

        client.fetch_places()
        client.fetch_places()
        self.assertEqual(session.get.call_count, 1)

        client.fetch_places(refresh=True)
        self.assertEqual(session.get.call_count, 2)

    @patch("services.place_store.time.sleep")
    def test_retries_then_raises(self, mock_sleep):
        session = MagicMock()
        session.get.return_value = _resp({"message": "busy"}, status=503)
        client = PlaceStoreClient(_cfg(), session=session)

        with self.assertRaises(PlaceStoreError):
            client.fetch_places()
        self.assertEqual(session.get.call_count, 4)

    def test_client_error_not_retried(self):
        session = MagicMock()
        session.get.return_value = _resp({"message": "denied"}, status=401)
        client = PlaceStoreClient(_cfg(), session=session)

        with self.assertRaises(PlaceStoreError):
            client.fetch_places()
        self.assertEqual(session.get.call_count, 1)

    @patch("services.place_store.time.sleep")
    def test_load_places_degrades_to_empty(self, mock_sleep):
        place_store.reset_client()
        try:
            with patch.object(place_store.requests.Session, "get", side_effect=requests.ConnectionError("down")):
                self.assertEqual(load_places(_cfg()), [])
        finally:
            place_store.reset_client()

    def test_cache_ttl_expiry_refetches(self):
        session = MagicMock()
        session.get.return_value = _resp(ROWS[:1])
        client = PlaceStoreClient(_cfg(store_cache_ttl=60), session=session)

        with patch("services.place_store.time.time", return_value=1000.0):
            client.fetch_places()
        with patch("services.place_store.time.time", return_value=1030.0):
            client.fetch_places()
        self.assertEqual(session.get.call_count, 1)
        with patch("services.place_store.time.time", return_value=1100.0):
            client.fetch_places()
        self.assertEqual(session.get.call_count, 2)

    def test_get_client_follows_config_changes(self):
        place_store.reset_client()
        try:
            first = place_store.get_client(_cfg())
            self.assertIs(place_store.get_client(_cfg()), first)

            changed = place_store.get_client(_cfg(supabase_table="places_v2"))
            self.assertIsNot(changed, first)
            self.assertEqual(changed.cfg.supabase_table, "places_v2")
        finally:
            place_store.reset_client()

    def test_load_places_without_credentials(self):
        self.assertEqual(load_places(Configuration()), [])
