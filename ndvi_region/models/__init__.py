"""Data models and schemas.

- Coordinate, BoundingBox, OutputDimensions, DateRange: request geometry
- PreparedRegion: locally computed geometry handed to the orchestrator
- RegionQueryResult: the result returned to the caller
- VisualizationParams, RegionQuery, ServiceConfig: imagery service inputs
"""

from ndvi_region.models.imagery import (
    ModelValidationError,
    RegionQuery,
    ServiceConfig,
    VisualizationParams,
)
from ndvi_region.models.region import (
    BoundingBox,
    Coordinate,
    DateRange,
    OutputDimensions,
    PreparedRegion,
    RegionQueryResult,
)

__all__ = [
    "BoundingBox",
    "Coordinate",
    "DateRange",
    "ModelValidationError",
    "OutputDimensions",
    "PreparedRegion",
    "RegionQuery",
    "RegionQueryResult",
    "ServiceConfig",
    "VisualizationParams",
]
