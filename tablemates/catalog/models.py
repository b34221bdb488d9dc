from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..engine.intervals import TimeOfDay


class VenueLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    address1: str | None = None
    city: str = ""
    display_address: tuple[str, ...] = ()


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    alias: str | None = None


class OpenPeriod(BaseModel):
    """One ``open`` entry of the provider's ``business_hours``; ``day`` is 0=Monday."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    day: int = Field(..., ge=0, le=6)
    is_overnight: bool = False


class BusinessHours(BaseModel):
    model_config = ConfigDict(frozen=True)

    open: tuple[OpenPeriod, ...] = ()
    hours_type: str | None = None
    is_open_now: bool | None = None


class VenueOpenSpan(BaseModel):
    """Opening hours of a venue on one weekday (0=Sunday)."""

    model_config = ConfigDict(frozen=True)

    weekday: int = Field(..., ge=0, le=6)
    start: str
    end: str
    overnight: bool = False

    @property
    def start_time(self) -> TimeOfDay:
        return TimeOfDay.parse(self.start)

    @property
    def end_time(self) -> TimeOfDay:
        return TimeOfDay.parse(self.end)


class Venue(BaseModel):
    """A venue record as returned by the search provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    location: VenueLocation = Field(default_factory=VenueLocation)
    image_url: str = ""
    review_count: int = 0
    price: str | None = None
    categories: tuple[Category, ...] = ()
    phone: str = ""
    url: str = ""
    is_closed: bool = False
    business_hours: tuple[BusinessHours, ...] | None = None

    @property
    def price_tier(self) -> int | None:
        """1..4 from ``"$"``..``"$$$$"``; ``None`` when absent or unrecognised."""
        if self.price and set(self.price) == {"$"} and len(self.price) <= 4:
            return len(self.price)
        return None

    @property
    def category_titles(self) -> frozenset[str]:
        return frozenset(c.title for c in self.categories)

    @property
    def open_spans(self) -> tuple[VenueOpenSpan, ...]:
        # Only the first hours entry is used; venues without hours never match.
        if not self.business_hours:
            return ()
        return tuple(
            VenueOpenSpan(
                weekday=(period.day + 1) % 7,
                start=period.start,
                end=period.end,
                overnight=period.is_overnight,
            )
            for period in self.business_hours[0].open
        )


class SearchResponse(BaseModel):
    businesses: list[Venue] = Field(default_factory=list)
    total: int | None = None
