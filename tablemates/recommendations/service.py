from __future__ import annotations

import datetime as dt
import logging
import time

from ..catalog.models import Venue
from ..catalog.store import ensure_catalog
from ..engine.availability import generate_availability
from ..engine.config import DEFAULT_ENGINE_CONFIG
from ..engine.models import Participant
from ..engine.planner import plan_group_outing
from ..engine.single_user import recommend_outings
from ..engine.slots import SlotSearch, find_slot
from .models import (
    AvailabilityRequest,
    AvailabilityResponse,
    GroupRecommendationRequest,
    GroupRecommendationResponse,
    PersonIn,
    SingleRecommendationRequest,
    SingleRecommendationResponse,
    SlotRequest,
    SlotResponse,
    VenueSource,
)

logger = logging.getLogger(__name__)


class VenueSourceUnavailable(Exception):
    """A referenced catalog could not be fetched and none was cached."""


def build_participant(
    person: PersonIn,
    today: dt.date,
    days: int = DEFAULT_ENGINE_CONFIG.horizon_days,
) -> Participant:
    windows = generate_availability(person.busy, person.availability, today, days)
    return Participant(
        id=person.id,
        windows=tuple(windows),
        loved_cuisines=frozenset(person.loved_cuisines),
        want_to_try_cuisines=frozenset(person.want_to_try_cuisines),
    )


def resolve_threshold(request: SlotRequest) -> float:
    if request.threshold is not None:
        return request.threshold
    if len(request.participants) <= 2:
        return DEFAULT_ENGINE_CONFIG.pairwise_threshold
    return DEFAULT_ENGINE_CONFIG.discovery_threshold


def build_search(request: SlotRequest) -> SlotSearch:
    return SlotSearch(
        policy=request.policy,
        min_duration_minutes=request.min_duration_minutes,
        max_duration_minutes=request.max_duration_minutes,
        granularity_minutes=DEFAULT_ENGINE_CONFIG.granularity_minutes,
        threshold=resolve_threshold(request),
        rounding=request.rounding,
    )


async def resolve_venues(source: VenueSource) -> list[Venue]:
    """Inline venues win; otherwise use the referenced catalog, stale or not."""
    if source.venues is not None:
        return list(source.venues)
    if source.catalog is None:
        return []

    refresh = await ensure_catalog(source.catalog.location, source.catalog.term)
    if refresh.snapshot is None:
        raise VenueSourceUnavailable(refresh.error or "catalog unavailable")
    if refresh.status != "ok":
        logger.warning("Using %s catalog for %r", refresh.status, source.catalog.location)
    return list(refresh.snapshot.venues)


def compute_availability(request: AvailabilityRequest) -> AvailabilityResponse:
    today = request.today or dt.date.today()
    windows = generate_availability(request.busy, request.availability, today, request.days)
    return AvailabilityResponse(windows=windows)


async def recommend_single(request: SingleRecommendationRequest) -> SingleRecommendationResponse:
    start_time = time.time()

    venues = await resolve_venues(request)
    participant = build_participant(request.person, request.today or dt.date.today())
    outings = recommend_outings(participant, venues)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info("Single recommendation for %s took %.1f ms", participant.id, elapsed_ms)
    return SingleRecommendationResponse(
        outings=outings,
        total_windows=len(participant.windows),
        total_venues=len(venues),
    )


def find_meeting_slot(request: SlotRequest) -> SlotResponse:
    participants = [build_participant(p, request.date) for p in request.participants]
    slot = find_slot(participants, request.date, build_search(request))
    return SlotResponse(slot=slot, policy=request.policy)


async def recommend_group(request: GroupRecommendationRequest) -> GroupRecommendationResponse:
    start_time = time.time()

    venues = await resolve_venues(request)
    participants = [build_participant(p, request.date) for p in request.participants]
    plan = plan_group_outing(
        participants,
        venues,
        request.date,
        build_search(request),
        weights=DEFAULT_ENGINE_CONFIG.weights,
        limit=request.limit,
    )

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Group recommendation for %d participants over %d venues took %.1f ms",
        len(participants),
        len(venues),
        elapsed_ms,
    )
    return GroupRecommendationResponse(
        date=plan.date,
        slot=plan.slot,
        candidates=list(plan.candidates),
        total_candidates=len(venues) if plan.slot else 0,
    )
