from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


class Configuration(BaseModel):
    # Supabase (PostgREST)
    supabase_url: Optional[str] = Field(default=None)
    supabase_key: Optional[str] = Field(default=None)
    supabase_table: str = Field(default="places")
    store_timeout: int = Field(default=15)
    store_batch_size: int = Field(default=1000)
    # capped variant: most recently updated N rows only
    store_fetch_limit: Optional[int] = Field(default=None)
    store_order_column: str = Field(default="updated_at")
    # 0 keeps the fetched list for the life of the process
    store_cache_ttl: int = Field(default=0)

    # Browsing
    page_size: int = Field(default=30)
    tag_limit: int = Field(default=15)
    default_category: str = Field(default="food")
    maps_search_url: str = Field(default="https://www.google.com/maps/search/?api=1&query=")

    session_ttl_sec: int = Field(default=3600)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "supabase_url": os.getenv("SUPABASE_URL"),
            "supabase_key": os.getenv("SUPABASE_KEY"),
            "supabase_table": os.getenv("SUPABASE_TABLE"),
            "store_timeout": os.getenv("STORE_TIMEOUT"),
            "store_batch_size": os.getenv("STORE_BATCH_SIZE"),
            "store_fetch_limit": os.getenv("STORE_FETCH_LIMIT"),
            "store_order_column": os.getenv("STORE_ORDER_COLUMN"),
            "store_cache_ttl": os.getenv("STORE_CACHE_TTL"),
            "page_size": os.getenv("PAGE_SIZE"),
            "tag_limit": os.getenv("TAG_LIMIT"),
            "default_category": os.getenv("DEFAULT_CATEGORY"),
            "maps_search_url": os.getenv("MAPS_SEARCH_URL"),
            "session_ttl_sec": os.getenv("SESSION_TTL_SEC"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def require_store(self) -> None:
        if not self.supabase_url:
            raise ValueError("SUPABASE_URL is required")
        if not self.supabase_key:
            raise ValueError("SUPABASE_KEY is required")

    def log_summary(self) -> str:
        return (
            "store=%s table=%s timeout=%s fetch_limit=%s page_size=%s tag_limit=%s key=%s"
            % (
                bool(self.supabase_url),
                self.supabase_table,
                self.store_timeout,
                self.store_fetch_limit or "all",
                self.page_size,
                self.tag_limit,
                mask_secret(self.supabase_key),
            )
        )

    def rest_base_url(self) -> str:
        base = (self.supabase_url or "").rstrip("/")
        if not base.endswith("/rest/v1"):
            base = f"{base}/rest/v1"
        return base
