from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, model_validator

from ..catalog.models import Venue
from ..engine.config import DEFAULT_ENGINE_CONFIG
from ..engine.intervals import RoundingMode
from ..engine.models import (
    AvailabilityWindow,
    DailyAvailabilityConfig,
    GroupCandidate,
    Interval,
    RecommendedOuting,
)
from ..engine.slots import SlotPolicy


class PersonIn(BaseModel):
    id: str = Field(..., min_length=1)
    busy: list[Interval] = Field(default_factory=list)
    availability: DailyAvailabilityConfig = Field(default_factory=DailyAvailabilityConfig)
    loved_cuisines: list[str] = Field(default_factory=list)
    want_to_try_cuisines: list[str] = Field(default_factory=list)


class CatalogRef(BaseModel):
    location: str = Field(..., min_length=1, description="City area or address to search around")
    term: str = Field(default="restaurants", min_length=1)


class VenueSource(BaseModel):
    """Venues given inline as provider records, or a catalog to look up."""

    venues: list[Venue] | None = None
    catalog: CatalogRef | None = None


class AvailabilityRequest(BaseModel):
    busy: list[Interval] = Field(default_factory=list)
    availability: DailyAvailabilityConfig = Field(default_factory=DailyAvailabilityConfig)
    today: dt.date | None = None
    days: int = Field(default=DEFAULT_ENGINE_CONFIG.horizon_days, ge=1, le=31)


class AvailabilityResponse(BaseModel):
    windows: list[AvailabilityWindow]


class SingleRecommendationRequest(VenueSource):
    person: PersonIn
    today: dt.date | None = None


class SingleRecommendationResponse(BaseModel):
    outings: list[RecommendedOuting]
    total_windows: int
    total_venues: int


class SlotRequest(BaseModel):
    participants: list[PersonIn] = Field(..., min_length=1)
    date: dt.date
    policy: SlotPolicy = SlotPolicy.discretized_threshold
    min_duration_minutes: int = Field(default=DEFAULT_ENGINE_CONFIG.min_duration_minutes, gt=0)
    max_duration_minutes: int = Field(default=DEFAULT_ENGINE_CONFIG.max_duration_minutes, gt=0)
    threshold: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Participation threshold; defaults to 0.75 for two people, 0.5 otherwise",
    )
    rounding: RoundingMode = DEFAULT_ENGINE_CONFIG.rounding

    @model_validator(mode="after")
    def _durations_ordered(self) -> SlotRequest:
        if self.max_duration_minutes < self.min_duration_minutes:
            raise ValueError("max_duration_minutes must not be below min_duration_minutes")
        return self


class SlotResponse(BaseModel):
    slot: Interval | None
    policy: SlotPolicy


class GroupRecommendationRequest(SlotRequest, VenueSource):
    limit: int = Field(default=DEFAULT_ENGINE_CONFIG.top_n, ge=1, le=50)


class GroupRecommendationResponse(BaseModel):
    date: dt.date
    slot: Interval | None
    candidates: list[GroupCandidate]
    total_candidates: int


class CatalogRefreshResponse(BaseModel):
    status: str
    venues: list[Venue]
    fetched_at: float | None = None
    error: str | None = None


class InvitationRequest(BaseModel):
    venue_id: str = Field(..., min_length=1)
    venue_name: str = ""
    start: dt.datetime
    end: dt.datetime
    participants: list[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _end_after_start(self) -> InvitationRequest:
        if self.end <= self.start:
            raise ValueError("invitation end must be after its start")
        return self


class InvitationResponse(BaseModel):
    status: str
    total_invitations: int
