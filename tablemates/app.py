from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException

from .catalog.store import catalog_get, get_cache_stats, refresh_catalog
from .invitations.outbox import get_invitations, send_invitation
from .recommendations.models import (
    AvailabilityRequest,
    AvailabilityResponse,
    CatalogRef,
    CatalogRefreshResponse,
    GroupRecommendationRequest,
    GroupRecommendationResponse,
    InvitationRequest,
    InvitationResponse,
    SingleRecommendationRequest,
    SingleRecommendationResponse,
    SlotRequest,
    SlotResponse,
)
from .recommendations.service import (
    VenueSourceUnavailable,
    compute_availability,
    find_meeting_slot,
    recommend_group,
    recommend_single,
)

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

app = FastAPI(title="Tablemates Outing Recommendation API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Availability & recommendations ───────────────────────────────────────


@app.post("/availability", response_model=AvailabilityResponse)
def availability(body: AvailabilityRequest) -> AvailabilityResponse:
    return compute_availability(body)


@app.post("/recommendations/single", response_model=SingleRecommendationResponse)
async def recommendations_single(body: SingleRecommendationRequest) -> SingleRecommendationResponse:
    try:
        return await recommend_single(body)
    except VenueSourceUnavailable as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.post("/slots", response_model=SlotResponse)
def slots(body: SlotRequest) -> SlotResponse:
    return find_meeting_slot(body)


@app.post("/recommendations/group", response_model=GroupRecommendationResponse)
async def recommendations_group(body: GroupRecommendationRequest) -> GroupRecommendationResponse:
    try:
        return await recommend_group(body)
    except VenueSourceUnavailable as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


# ── Venue catalog ────────────────────────────────────────────────────────


@app.post("/venues/refresh", response_model=CatalogRefreshResponse)
async def venues_refresh(body: CatalogRef) -> CatalogRefreshResponse:
    refresh = await refresh_catalog(body.location, body.term)
    snapshot = refresh.snapshot
    return CatalogRefreshResponse(
        status=refresh.status,
        venues=list(snapshot.venues) if snapshot else [],
        fetched_at=snapshot.fetched_at if snapshot else None,
        error=refresh.error,
    )


@app.get("/venues", response_model=CatalogRefreshResponse)
def venues(location: str, term: str = "restaurants") -> CatalogRefreshResponse:
    snapshot = catalog_get(location, term)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Catalog not loaded; refresh it first")
    return CatalogRefreshResponse(
        status="ok" if snapshot.is_fresh() else "stale",
        venues=list(snapshot.venues),
        fetched_at=snapshot.fetched_at,
    )


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()


# ── Invitations ──────────────────────────────────────────────────────────


@app.post("/invitations", response_model=InvitationResponse)
def invitations(body: InvitationRequest) -> InvitationResponse:
    send_invitation(
        body.venue_id,
        body.venue_name,
        body.start,
        body.end,
        body.participants,
    )
    return InvitationResponse(status="queued", total_invitations=len(get_invitations()))


@app.get("/invitations")
def list_invitations() -> list[dict]:
    return get_invitations()
