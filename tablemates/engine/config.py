from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .intervals import RoundingMode


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables for slot search and group ranking.
    """

    horizon_days: int = 7
    granularity_minutes: int = 5
    # 0.75 for pairwise invites, 0.5 for broad multi-user discovery
    pairwise_threshold: float = 0.75
    discovery_threshold: float = 0.5
    min_duration_minutes: int = 60
    max_duration_minutes: int = 120
    top_n: int = 20
    rounding: RoundingMode = RoundingMode.half_hour
    # read-only; shared by every caller of DEFAULT_ENGINE_CONFIG
    weights: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(
            {
                "availability": 0.35,
                "preference": 0.30,
                "rating": 0.20,
                "price": 0.15,
            }
        )
    )


DEFAULT_ENGINE_CONFIG = EngineConfig()
