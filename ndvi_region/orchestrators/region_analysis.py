"""Region analysis orchestrator.

Turns a prepared region and a date range into a ``RegionQueryResult``:

1. Build a ``RegionQuery`` (centroid point, closed ring, date filter,
   visualisation parameters from the configured palette).
2. Select the least-cloudy scene: collection → date filter → ascending
   sort by the cloud metric → first image.
3. Visualise the scene and clip it to the region polygon.
4. Read the three scene metadata properties (start, end, index).
5. Request a thumbnail URL at the prepared dimensions.
6. Assemble the result, ``bounds`` as ``(max_corner, min_corner)``.

The synchronous part of the query (steps 2-4) runs in a worker thread so
that a blocking service client does not stall the event loop; only the
thumbnail request is awaited directly.

Any collaborator failure that is not already a ``RegionAnalysisError``
is surfaced as ``ExternalServiceError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ndvi_region.activities.prepare_region import prepare_region
from ndvi_region.core.config import AnalysisConfig
from ndvi_region.core.constants import PROPERTY_INDEX, PROPERTY_TIME_END, PROPERTY_TIME_START
from ndvi_region.core.exceptions import PermanentError, RegionAnalysisError
from ndvi_region.models.imagery import RegionQuery, VisualizationParams
from ndvi_region.models.region import RegionQueryResult
from ndvi_region.services.base import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ndvi_region.models.region import DateRange, PreparedRegion
    from ndvi_region.services.base import GeometryHandle, ImageHandle, ImageryService

logger = logging.getLogger("ndvi_region.orchestrators.region_analysis")


class NoImageFoundError(PermanentError):
    """Raised when the date-filtered collection contains no image.

    Attributes:
        date_range: The acquisition window that matched nothing.
        collection: The collection that was queried.
    """

    default_stage = "query_imagery"
    default_code = "NO_IMAGE_FOUND"

    def __init__(self, date_range: DateRange, collection: str) -> None:
        self.date_range = date_range
        self.collection = collection
        super().__init__(
            f"No image found in {collection!r} for date range "
            f"{date_range.start.isoformat()} .. {date_range.end.isoformat()}"
        )


def build_region_query(
    region: PreparedRegion,
    date_range: DateRange,
    config: AnalysisConfig,
) -> RegionQuery:
    """Assemble the service request for a prepared region."""
    return RegionQuery(
        point=region.centroid,
        ring=region.ring,
        date_range=date_range,
        collection=config.image_collection,
        cloud_metric=config.cloud_metric,
        visualization=VisualizationParams.from_config(config),
        dimensions=region.dimensions,
    )


async def query_region(
    service: ImageryService,
    region: PreparedRegion,
    date_range: DateRange,
    config: AnalysisConfig | None = None,
) -> RegionQueryResult:
    """Run the imagery query for an already-prepared region.

    *service* must already be authenticated.

    Raises:
        NoImageFoundError: If no scene falls within *date_range*.
        ExternalServiceError: On any other collaborator failure.
    """
    config = config or AnalysisConfig()
    query = build_region_query(region, date_range, config)

    try:
        rendered, polygon, metadata = await asyncio.to_thread(_select_and_render, service, query)
        image_url = await rendered.thumbnail_url(
            query.dimensions.width,
            query.dimensions.height,
            polygon,
        )
        if not image_url:
            msg = "Thumbnail URL request returned an empty URL"
            raise ExternalServiceError(service.name, msg, retryable=False)
    except RegionAnalysisError:
        raise
    except Exception as exc:
        msg = f"Imagery query failed: {exc}"
        raise ExternalServiceError(service.name, msg) from exc

    time_start, time_end, index = metadata
    result = RegionQueryResult(
        width=query.dimensions.width,
        height=query.dimensions.height,
        centroid=region.centroid,
        bounds=(region.bounds.max_corner, region.bounds.min_corner),
        time_start=time_start,
        time_end=time_end,
        index=index,
        image_url=image_url,
    )

    logger.info(
        "Region analysis complete | index=%s | dimensions=%dx%d | service=%s",
        index,
        result.width,
        result.height,
        service.name,
    )
    return result


async def run_region_analysis(
    service: ImageryService,
    polygon: Sequence[object],
    width: float,
    date_range: DateRange,
    config: AnalysisConfig | None = None,
) -> RegionQueryResult:
    """Prepare *polygon* and query it with an already-authenticated *service*."""
    config = config or AnalysisConfig()
    region = prepare_region(polygon, width, area_warning_ha=config.area_warning_ha)
    return await query_region(service, region, date_range, config)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _select_and_render(
    service: ImageryService,
    query: RegionQuery,
) -> tuple[ImageHandle, GeometryHandle, tuple[object, object, object]]:
    """Select the clearest scene, render and clip it, and read its metadata."""
    # Centre point of the request; scenes are selected by date, not by it.
    service.point_geometry(query.point)
    polygon = service.polygon_geometry(query.ring)

    image = (
        service.image_collection(query.collection)
        .filter_date(query.date_range.start, query.date_range.end)
        .sort_by(query.cloud_metric)
        .first()
    )
    if image is None:
        error = NoImageFoundError(query.date_range, query.collection)
        logger.warning(error.message)
        raise error

    rendered = image.visualize(query.visualization).clip(polygon)

    metadata = (
        image.metadata(PROPERTY_TIME_START),
        image.metadata(PROPERTY_TIME_END),
        image.metadata(PROPERTY_INDEX),
    )
    logger.info(
        "Scene selected | collection=%s | index=%s | metric=%s",
        query.collection,
        metadata[2],
        query.cloud_metric,
    )
    return rendered, polygon, metadata
