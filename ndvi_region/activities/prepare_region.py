"""Region preparation — centroid, bounding box and output dimensions.

Pure, synchronous geometry computed before any imagery request is made,
so that degenerate input fails without incurring network cost.

- ``compute_centroid``: area-weighted polygon centroid (shoelace method,
  anchored at the first vertex to limit floating-point cancellation).
- ``compute_bounds`` / ``compute_dimensions``: coordinate-wise extrema
  and a thumbnail size that keeps the bbox aspect ratio for a given
  target width.
- ``prepare_region``: runs all of the above on an internal copy of the
  caller's polygon and returns a ``PreparedRegion``.

Longitude/latitude are used as planar x/y. This matches the reference
workflow's output and is only accurate for small regions; large regions
are logged with a warning rather than corrected.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ndvi_region.core.constants import (
    DEFAULT_AREA_WARNING_HA,
    MIN_POLYGON_VERTICES,
    SQ_METRES_PER_HECTARE,
)
from ndvi_region.core.exceptions import InvalidRequestError, ValidationError
from ndvi_region.models.region import (
    BoundingBox,
    Coordinate,
    OutputDimensions,
    PreparedRegion,
    to_polygon,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("ndvi_region.activities.prepare_region")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DegenerateGeometryError(ValidationError):
    """Raised when a polygon has no usable extent or enclosed area."""

    default_stage = "prepare_region"
    default_code = "DEGENERATE_GEOMETRY"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def prepare_region(
    polygon: Sequence[object],
    width: float,
    *,
    area_warning_ha: float = DEFAULT_AREA_WARNING_HA,
) -> PreparedRegion:
    """Compute everything the imagery query needs from a polygon.

    Args:
        polygon: Vertices as ``Coordinate``, ``{"lng", "lat"}`` mappings or
            ``(lng, lat)`` pairs. Not modified.
        width: Target thumbnail width in pixels (rounded half-up).
        area_warning_ha: Geodesic area above which the planar centroid
            approximation is logged as a warning.

    Returns:
        A ``PreparedRegion`` with the closed ring, centroid, bounds and
        output dimensions.

    Raises:
        DegenerateGeometryError: If the polygon has fewer than three
            vertices, zero extent on either axis, or zero enclosed area.
        InvalidRequestError: If *width* is not a positive finite number.
        ModelValidationError: If a vertex cannot be read as a coordinate.
    """
    points = to_polygon(polygon)
    _validate_vertices(points)

    bounds = compute_bounds(points)
    dimensions = compute_dimensions(bounds, width)
    ring = close_ring(points)
    centroid = compute_centroid(ring)
    area_ha = compute_geodesic_area_ha(ring)

    if area_ha > area_warning_ha:
        logger.warning(
            "Region area %.1f ha exceeds %.0f ha | planar centroid is an approximation",
            area_ha,
            area_warning_ha,
        )

    logger.info(
        "Region prepared | vertices=%d | area=%.2f ha | centroid=(%.6f, %.6f) | "
        "bbox=[%.6f, %.6f, %.6f, %.6f] | dimensions=%dx%d",
        len(points),
        area_ha,
        centroid.lng,
        centroid.lat,
        bounds.min_lng,
        bounds.min_lat,
        bounds.max_lng,
        bounds.max_lat,
        dimensions.width,
        dimensions.height,
    )

    return PreparedRegion(
        ring=tuple(ring),
        centroid=centroid,
        bounds=bounds,
        dimensions=dimensions,
        area_ha=area_ha,
    )


# ---------------------------------------------------------------------------
# Closure
# ---------------------------------------------------------------------------


def close_ring(points: Sequence[Coordinate]) -> list[Coordinate]:
    """Return a copy of *points* whose last vertex equals the first.

    The first vertex is appended only when it differs (exactly, on either
    axis) from the last one, so an already-closed ring is returned as is.
    """
    ring = list(points)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
        logger.debug("Closed ring by repeating first vertex (%d vertices)", len(ring))
    return ring


# ---------------------------------------------------------------------------
# Centroid
# ---------------------------------------------------------------------------


def compute_centroid(points: Sequence[Coordinate]) -> Coordinate:
    """Compute the area-weighted centroid of a polygon.

    Each vertex is paired with its *previous* vertex around the closed
    ring, and all terms are taken relative to the first vertex.

    Args:
        points: Polygon vertices, closed or not. Not modified.

    Returns:
        The centroid as a ``Coordinate``.

    Raises:
        DegenerateGeometryError: If there are fewer than three vertices or
            the polygon encloses zero area.
    """
    _validate_vertices(points)
    ring = close_ring(points)
    first = ring[0]

    area = 0.0
    lng_sum = 0.0
    lat_sum = 0.0
    for i in range(len(ring)):
        p1 = ring[i]
        p2 = ring[i - 1]
        f = (p1.lat - first.lat) * (p2.lng - first.lng) - (p2.lat - first.lat) * (
            p1.lng - first.lng
        )
        area += f
        lng_sum += (p1.lng + p2.lng - 2 * first.lng) * f
        lat_sum += (p1.lat + p2.lat - 2 * first.lat) * f

    denom = area * 3
    if denom == 0:
        msg = "Cannot compute centroid: polygon encloses zero area"
        raise DegenerateGeometryError(msg)

    lng = lng_sum / denom + first.lng
    lat = lat_sum / denom + first.lat
    if not (math.isfinite(lng) and math.isfinite(lat)):
        msg = f"Cannot compute centroid: result ({lng}, {lat}) is not finite"
        raise DegenerateGeometryError(msg)
    return Coordinate(lng=lng, lat=lat)


# ---------------------------------------------------------------------------
# Bounds & dimensions
# ---------------------------------------------------------------------------


def compute_bounds(points: Sequence[Coordinate]) -> BoundingBox:
    """Return the coordinate-wise extrema of *points*.

    Closure does not matter here: a repeated closing vertex cannot change
    an extremum.
    """
    _validate_vertices(points)
    lngs = [p.lng for p in points]
    lats = [p.lat for p in points]
    return BoundingBox(
        max_lng=max(lngs),
        min_lng=min(lngs),
        max_lat=max(lats),
        min_lat=min(lats),
    )


def compute_dimensions(bounds: BoundingBox, width: float) -> OutputDimensions:
    """Scale *width* to a ``width x height`` pair with the bbox aspect ratio.

    ``height = round(width * delta_lat / delta_lng)``, rounding half-up.

    Raises:
        InvalidRequestError: If *width* is not a positive finite number or
            the scaled height overflows.
        DegenerateGeometryError: If the bbox has zero extent on either axis,
            its aspect ratio overflows, or the scaled height is below one
            pixel.
    """
    if isinstance(width, bool) or not isinstance(width, int | float) or not math.isfinite(width):
        msg = f"Width must be a finite number, got {width!r}"
        raise InvalidRequestError(msg)

    dimension_lng = round_half_up(width)
    if dimension_lng < 1:
        msg = f"Width must round to at least 1 pixel, got {width!r}"
        raise InvalidRequestError(msg)

    if bounds.delta_lng == 0:
        msg = f"Degenerate polygon: zero longitude extent (lng={bounds.min_lng})"
        raise DegenerateGeometryError(msg)
    if bounds.delta_lat == 0:
        msg = f"Degenerate polygon: zero latitude extent (lat={bounds.min_lat})"
        raise DegenerateGeometryError(msg)

    ratio = bounds.delta_lat / bounds.delta_lng
    if not math.isfinite(ratio):
        msg = (
            f"Degenerate polygon: aspect ratio overflows "
            f"(dlat={bounds.delta_lat}, dlng={bounds.delta_lng})"
        )
        raise DegenerateGeometryError(msg)

    scaled_height = width * ratio
    if not math.isfinite(scaled_height):
        msg = f"Width {width!r} is too large: scaled height overflows"
        raise InvalidRequestError(msg)

    dimension_lat = round_half_up(scaled_height)
    if dimension_lat < 1:
        msg = (
            f"Polygon is too narrow to render at width {dimension_lng}: "
            f"height rounds to {dimension_lat} px"
        )
        raise DegenerateGeometryError(msg)

    return OutputDimensions(width=dimension_lng, height=dimension_lat)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going towards +infinity."""
    return math.floor(value + 0.5)


# ---------------------------------------------------------------------------
# Geodesic area
# ---------------------------------------------------------------------------


def compute_geodesic_area_ha(points: Sequence[Coordinate]) -> float:
    """Compute the geodesic area of a ring in hectares (WGS 84).

    Winding-order agnostic. Used only to flag regions where the planar
    centroid is a poor approximation.
    """
    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    area_m2, _perimeter = geod.polygon_area_perimeter(
        [p.lng for p in points],
        [p.lat for p in points],
    )
    return abs(area_m2) / SQ_METRES_PER_HECTARE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validate_vertices(points: Sequence[Coordinate]) -> None:
    """Raise ``DegenerateGeometryError`` if there are too few vertices."""
    if len(points) < MIN_POLYGON_VERTICES:
        msg = (
            f"Insufficient vertices for a polygon: "
            f"need at least {MIN_POLYGON_VERTICES}, got {len(points)}"
        )
        raise DegenerateGeometryError(msg)
