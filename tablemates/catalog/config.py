from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class CatalogConfig:
    api_key: str = ""
    base_url: str = "https://api.yelp.com/v3"
    timeout: float = 10.0
    limit: int = 50
    cache_ttl: float = 600.0  # seconds before a catalog counts as stale

    @classmethod
    def from_env(cls) -> CatalogConfig:
        """Build a config from ``YELP_*`` variables; unset ones keep the defaults."""
        defaults = cls()
        return cls(
            api_key=os.getenv("YELP_API_KEY", defaults.api_key),
            base_url=os.getenv("YELP_BASE_URL", defaults.base_url).rstrip("/"),
            timeout=float(os.getenv("YELP_TIMEOUT", defaults.timeout)),
            # the provider caps business search at 50 results per page
            limit=min(int(os.getenv("YELP_SEARCH_LIMIT", defaults.limit)), 50),
            cache_ttl=float(os.getenv("YELP_CACHE_TTL", defaults.cache_ttl)),
        )


DEFAULT_CATALOG_CONFIG = CatalogConfig.from_env()
