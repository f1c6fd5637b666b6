from __future__ import annotations

from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import CATEGORIES, BrowseState, Card, ViewList
from services import session as session_store
from services.browse import compute_view
from services.cards import build_cards
from services.geolocation import resolve_user_coordinate
from services.place_store import load_places
from services.report import build_listing
from services.session_utils import BROWSE_ACTIONS, apply_action

load_dotenv()

app = FastAPI(title="Map WEDO Places")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico")
def favicon() -> Response:
    return Response(status_code=204)


class BrowseRequest(BaseModel):
    session_id: Optional[str] = Field(None, description="Session ID holding the browse state")
    action: str = Field("view", description="One of: " + ", ".join(BROWSE_ACTIONS))
    value: Optional[str] = Field(None, description="Category id, search text or tag, depending on action")
    user_lat: Optional[float] = Field(None, description="Optional user latitude")
    user_lng: Optional[float] = Field(None, description="Optional user longitude")
    refresh: bool = Field(False, description="Refetch places from the store first")


class CardPayload(BaseModel):
    id: str
    name: str
    category: str
    category_label: str
    map_url: str
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None
    address_line: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []
    rating: Optional[float] = None


class ViewResponse(BaseModel):
    session_id: Optional[str] = None
    cards: List[CardPayload]
    total: int
    page: int
    page_size: int
    remaining: int
    has_more: bool
    available_tags: List[str]
    category: str
    search: str
    tag: str
    listing_markdown: str


def _to_payload(card: Card) -> CardPayload:
    return CardPayload(
        id=card.id,
        name=card.name,
        category=card.category,
        category_label=card.category_label,
        map_url=card.map_url,
        distance_km=card.distance_km,
        distance_label=card.distance_label,
        address_line=card.address_line,
        description=card.description,
        tags=card.tags,
        rating=card.rating,
    )


def _render(cfg: Configuration, state: BrowseState, *, refresh: bool, session_id: Optional[str] = None) -> ViewResponse:
    places = load_places(cfg, refresh=refresh)
    view: ViewList = compute_view(places, state, page_size=cfg.page_size, tag_limit=cfg.tag_limit)
    cards = build_cards(view, cfg.maps_search_url)
    return ViewResponse(
        session_id=session_id,
        cards=[_to_payload(c) for c in cards],
        total=view.total,
        page=view.page,
        page_size=view.page_size,
        remaining=view.remaining,
        has_more=view.has_more,
        available_tags=view.available_tags,
        category=view.category,
        search=view.search,
        tag=view.tag,
        listing_markdown=build_listing(view, cards),
    )


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/health/store")
def health_store() -> dict:
    cfg = Configuration.from_env()
    places = load_places(cfg)
    return {"ok": bool(places), "count": len(places)}


@app.get("/categories")
def categories() -> List[Dict[str, Any]]:
    return [dict(c) for c in CATEGORIES]


@app.get("/places", response_model=ViewResponse)
def list_places(
    category: Optional[str] = Query(None, description="Category id or 'all'"),
    q: str = Query("", description="Free-text search over names and tags"),
    tag: str = Query("", description="Exact tag sub-filter"),
    page: int = Query(1, description="1-based page; page N shows N * page_size places"),
    user_lat: Optional[float] = Query(None),
    user_lng: Optional[float] = Query(None),
    refresh: bool = Query(False),
) -> ViewResponse:
    cfg = Configuration.from_env()
    if page < 1:
        raise HTTPException(status_code=400, detail="page must be >= 1")
    try:
        state = BrowseState(
            category=category or cfg.default_category,
            search=q,
            tag=tag,
            page=page,
            user_coordinate=resolve_user_coordinate(user_lat, user_lng),
        )
        return _render(cfg, state, refresh=refresh)
    except Exception as exc:
        logger.exception("listing failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")


@app.post("/browse", response_model=ViewResponse)
def browse_places(req: BrowseRequest) -> ViewResponse:
    cfg = Configuration.from_env()
    session_store.configure(ttl_sec=cfg.session_ttl_sec, default_category=cfg.default_category)
    try:
        coordinate = resolve_user_coordinate(req.user_lat, req.user_lng)
        state = apply_action(req.session_id, req.action, req.value, coordinate)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        return _render(cfg, state, refresh=req.refresh, session_id=req.session_id)
    except Exception as exc:
        logger.exception("browse failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")


@app.post("/places/refresh")
def refresh_places() -> dict:
    cfg = Configuration.from_env()
    places = load_places(cfg, refresh=True)
    return {"count": len(places)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
