from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests
from loguru import logger

from config import Configuration
from models import Place
from services.ingest import places_from_records


class PlaceStoreError(RuntimeError):
    pass


@dataclass
class _RetryPolicy:
    retries: int = 3
    base_delay: float = 0.5


class PlaceStoreClient:
    """Read-only client for the Supabase ``places`` table."""

    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.base = cfg.rest_base_url()
        self.session = session or requests.Session()
        self._cache: Optional[Tuple[float, Tuple[Place, ...]]] = None
        self._lock = threading.Lock()

    def _headers(self) -> Dict[str, str]:
        key = self.cfg.supabase_key or ""
        return {
            "Accept": "application/json",
            "apikey": key,
            "Authorization": f"Bearer {key}",
        }

    def _get(self, path: str, params: dict) -> Any:
        url = f"{self.base}{path}"
        policy = _RetryPolicy()
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.get(url, headers=self._headers(), params=params, timeout=self.cfg.store_timeout)
            except requests.RequestException as exc:  # network error
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise PlaceStoreError(f"request error: {exc}")

            if resp.status_code in (429, 500, 502, 503, 504):
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise PlaceStoreError(f"upstream {resp.status_code}: {resp.text[:300]}")

            if not resp.ok:
                raise PlaceStoreError(f"upstream {resp.status_code}: {resp.text[:300]}")

            try:
                return resp.json()
            except ValueError:
                raise PlaceStoreError("invalid json response")

    def _fetch_rows(self) -> List[Any]:
        path = f"/{self.cfg.supabase_table}"
        if self.cfg.store_fetch_limit:
            payload = self._get(
                path,
                {
                    "select": "*",
                    "order": f"{self.cfg.store_order_column}.desc",
                    "limit": self.cfg.store_fetch_limit,
                },
            )
            if not isinstance(payload, list):
                raise PlaceStoreError("unexpected payload shape")
            return payload

        batch = max(1, self.cfg.store_batch_size)
        rows: list[Any] = []
        offset = 0
        while True:
            payload = self._get(path, {"select": "*", "limit": batch, "offset": offset})
            if not isinstance(payload, list):
                raise PlaceStoreError("unexpected payload shape")
            rows.extend(payload)
            if len(payload) < batch:
                return rows
            offset += batch

    def _fresh_snapshot(self) -> Optional[Tuple[Place, ...]]:
        cached = self._cache
        if cached is None:
            return None
        fetched_at, places = cached
        ttl = self.cfg.store_cache_ttl
        if ttl > 0 and time.time() - fetched_at > ttl:
            return None
        return places

    def fetch_places(self, *, refresh: bool = False) -> List[Place]:
        """Return every place, reusing the in-memory list unless stale or refresh is set.

        Raises PlaceStoreError when the store cannot be read.
        """
        with self._lock:
            snapshot = None if refresh else self._fresh_snapshot()
            if snapshot is not None:
                return list(snapshot)
            rows = self._fetch_rows()
            places = tuple(places_from_records(rows))
            # swap in a new snapshot, never mutate the old one
            self._cache = (time.time(), places)
            logger.info("fetched {} places from store table={}", len(places), self.cfg.supabase_table)
            return list(places)


_client: Optional[PlaceStoreClient] = None
_client_lock = threading.Lock()


def get_client(cfg: Configuration) -> PlaceStoreClient:
    global _client
    with _client_lock:
        # a changed configuration starts over with a fresh client and snapshot
        if _client is None or _client.cfg != cfg:
            if _client is not None:
                logger.info("store configuration changed, rebuilding client")
            _client = PlaceStoreClient(cfg)
        return _client


def reset_client() -> None:
    global _client
    with _client_lock:
        _client = None


def load_places(cfg: Configuration, *, refresh: bool = False) -> List[Place]:
    """Fetch places, degrading to an empty list when the store is unavailable."""
    try:
        cfg.require_store()
        return get_client(cfg).fetch_places(refresh=refresh)
    except (ValueError, PlaceStoreError) as exc:
        logger.exception("place fetch failed: {}", exc)
        return []
