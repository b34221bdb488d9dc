from __future__ import annotations

import hashlib
import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ..engine.recompute import CancellationToken, RecomputeCoordinator
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Venue
from .yelp_client import CatalogFetchError, search_venues

logger = logging.getLogger(__name__)

CatalogFetcher = Callable[[str, str], Awaitable[list[Venue]]]


class CatalogSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    term: str
    venues: tuple[Venue, ...] = ()
    fetched_at: float
    generation: int

    def is_fresh(self, ttl: float = DEFAULT_CATALOG_CONFIG.cache_ttl) -> bool:
        return time.time() - self.fetched_at < ttl


class CatalogRefresh(BaseModel):
    """Outcome of a refresh; ``snapshot`` is the catalog callers should use."""

    status: Literal["ok", "stale", "failed", "superseded"]
    snapshot: CatalogSnapshot | None = None
    error: str | None = None


_catalogs: dict[str, CatalogSnapshot] = {}
_coordinators: dict[str, RecomputeCoordinator[list[Venue]]] = {}
_hits: int = 0
_misses: int = 0


def _make_key(location: str, term: str) -> str:
    normalized = json.dumps(
        {"location": location.strip().lower(), "term": term.strip().lower()}, sort_keys=True
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def catalog_get(location: str, term: str) -> CatalogSnapshot | None:
    """Last successfully fetched catalog for the query, however old."""
    global _hits, _misses
    snapshot = _catalogs.get(_make_key(location, term))
    if snapshot is None:
        _misses += 1
        return None
    _hits += 1
    return snapshot


async def refresh_catalog(
    location: str,
    term: str,
    fetcher: CatalogFetcher | None = None,
) -> CatalogRefresh:
    """
    Fetch a new catalog for ``(location, term)``.

    Overlapping refreshes of the same query are coordinated so only the most
    recently triggered one is stored. A failed fetch leaves the previous
    catalog in place and reports it as ``stale``.
    """
    fetch = fetcher or search_venues
    key = _make_key(location, term)
    coordinator = _coordinators.setdefault(key, RecomputeCoordinator(name=f"catalog:{key}"))

    async def work(token: CancellationToken) -> list[Venue]:
        venues = await fetch(location, term)
        token.raise_if_cancelled()
        return venues

    try:
        outcome = await coordinator.trigger(work)
    except CatalogFetchError as exc:
        previous = _catalogs.get(key)
        logger.warning(
            "Keeping %s catalog for %r in %r after failed refresh",
            "previous" if previous else "no",
            term,
            location,
        )
        return CatalogRefresh(
            status="stale" if previous else "failed", snapshot=previous, error=str(exc)
        )

    if outcome.superseded:
        return CatalogRefresh(status="superseded", snapshot=_catalogs.get(key))

    snapshot = CatalogSnapshot(
        location=location,
        term=term,
        venues=tuple(outcome.value or ()),
        fetched_at=time.time(),
        generation=outcome.generation,
    )
    _catalogs[key] = snapshot
    return CatalogRefresh(status="ok", snapshot=snapshot)


async def ensure_catalog(
    location: str,
    term: str,
    fetcher: CatalogFetcher | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> CatalogRefresh:
    """Serve a fresh cached catalog, refreshing it once it has expired."""
    cached = catalog_get(location, term)
    if cached is not None and cached.is_fresh(config.cache_ttl):
        return CatalogRefresh(status="ok", snapshot=cached)
    return await refresh_catalog(location, term, fetcher)


def get_cache_stats(ttl: float = DEFAULT_CATALOG_CONFIG.cache_ttl) -> dict[str, Any]:
    total = _hits + _misses
    return {
        "size": len(_catalogs),
        "stale": sum(1 for snapshot in _catalogs.values() if not snapshot.is_fresh(ttl)),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_catalogs() -> None:
    global _hits, _misses
    _catalogs.clear()
    _coordinators.clear()
    _hits = 0
    _misses = 0
