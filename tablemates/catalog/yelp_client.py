from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import SearchResponse, Venue

logger = logging.getLogger(__name__)


class CatalogFetchError(Exception):
    """The venue search could not be performed or its response not decoded."""


async def search_venues(
    location: str,
    term: str,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Venue]:
    """
    Search the provider for venues matching ``term`` around ``location``.

    Venues without ``price`` or ``business_hours`` are kept; they are listable
    but never match an availability window. Any transport, HTTP or decoding
    problem raises :class:`CatalogFetchError`.
    """
    if not config.api_key:
        raise CatalogFetchError("YELP_API_KEY is not configured")

    headers = {"Authorization": f"Bearer {config.api_key}"}
    params = {"location": location, "term": term, "limit": config.limit}

    try:
        async with httpx.AsyncClient(
            base_url=config.base_url,
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        ) as client:
            response = await client.get("/businesses/search", params=params)
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Venue search for %r in %r failed: %s", term, location, exc)
        raise CatalogFetchError(f"Venue search failed: {exc}") from exc

    try:
        decoded = SearchResponse.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Venue search for %r in %r returned undecodable records", term, location)
        raise CatalogFetchError(f"Could not decode venue records: {exc.error_count()} errors") from exc

    logger.info("Fetched %d venues for %r in %r", len(decoded.businesses), term, location)
    return decoded.businesses
