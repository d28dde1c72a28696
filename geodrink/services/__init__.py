"""Service layer package.

Exports high-level services consumed by orchestration / presentation layers.
"""

from .water_service import (
    QueryState,
    SearchOutcome,
    WaterPointService,
    WaterServiceConfig,
    current_position_on_route,
    find_water_points,
)
from .search_session import RequestToken, SearchSession

__all__ = [
    "QueryState",
    "SearchOutcome",
    "WaterPointService",
    "WaterServiceConfig",
    "current_position_on_route",
    "find_water_points",
    "RequestToken",
    "SearchSession",
]
