"""Data models for a region request and its result.

Coordinates are ``(lng, lat)`` in degrees exactly as supplied by the
caller; no CRS conversion is applied. Longitude and latitude are treated
as planar x/y by the geometry code, which is only a fair approximation
for small regions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from ndvi_region.models.imagery import (
    ModelValidationError,
    check_finite,
    check_non_empty,
)


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A ``(lng, lat)`` pair in degrees."""

    lng: float
    lat: float

    def __post_init__(self) -> None:
        check_finite("Coordinate", "lng", self.lng)
        check_finite("Coordinate", "lat", self.lat)

    @classmethod
    def from_value(cls, value: object) -> Coordinate:
        """Build a coordinate from a ``{"lng", "lat"}`` mapping or a pair.

        Raises:
            ModelValidationError: If *value* has neither shape or holds
                non-numeric or non-finite values.
        """
        if isinstance(value, Coordinate):
            return value
        try:
            if isinstance(value, Mapping):
                return cls(lng=float(value["lng"]), lat=float(value["lat"]))
            if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
                return cls(lng=float(value[0]), lat=float(value[1]))
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise ModelValidationError("Coordinate", "value", value, str(exc)) from exc
        raise ModelValidationError(
            "Coordinate", "value", value, "expected {'lng', 'lat'} mapping or (lng, lat) pair"
        )

    def to_dict(self) -> dict[str, float]:
        return {"lng": self.lng, "lat": self.lat}

    def as_pair(self) -> list[float]:
        """Return ``[lng, lat]`` (GeoJSON position order)."""
        return [self.lng, self.lat]


def to_polygon(points: Sequence[object]) -> list[Coordinate]:
    """Convert caller-supplied points to a new list of ``Coordinate``.

    The caller's sequence is never modified.
    """
    return [Coordinate.from_value(p) for p in points]


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Coordinate-wise extrema of a polygon."""

    max_lng: float
    min_lng: float
    max_lat: float
    min_lat: float

    @property
    def delta_lng(self) -> float:
        return self.max_lng - self.min_lng

    @property
    def delta_lat(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def max_corner(self) -> Coordinate:
        """North-east-most corner."""
        return Coordinate(lng=self.max_lng, lat=self.max_lat)

    @property
    def min_corner(self) -> Coordinate:
        """South-west-most corner."""
        return Coordinate(lng=self.min_lng, lat=self.min_lat)


@dataclass(frozen=True, slots=True)
class OutputDimensions:
    """Thumbnail size in whole pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        for name, value in (("width", self.width), ("height", self.height)):
            if value < 1:
                raise ModelValidationError("OutputDimensions", name, value, "must be >= 1")


@dataclass(frozen=True, slots=True)
class DateRange:
    """Acquisition window ``[start, end]``.

    ``start <= end`` is a precondition for a meaningful query but is not
    enforced here.
    """

    start: datetime
    end: datetime

    @classmethod
    def from_values(cls, start: object, end: object) -> DateRange:
        """Build a range from epoch milliseconds, ISO-8601 strings or datetimes."""
        return cls(start=to_datetime(start, "start"), end=to_datetime(end, "end"))

    def to_millis(self) -> tuple[int, int]:
        """Return ``(start, end)`` as epoch milliseconds."""
        return (_millis(self.start), _millis(self.end))


def to_datetime(value: object, field_name: str = "value") -> datetime:
    """Coerce *value* to a timezone-aware ``datetime``.

    Numbers are epoch milliseconds. Naive datetimes and ISO strings
    without an offset are taken to be UTC.

    Raises:
        ModelValidationError: If *value* cannot be interpreted.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, bool):
        raise ModelValidationError("DateRange", field_name, value, "must be a timestamp")
    elif isinstance(value, int | float):
        try:
            result = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise ModelValidationError("DateRange", field_name, value, str(exc)) from exc
    elif isinstance(value, str):
        try:
            result = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ModelValidationError("DateRange", field_name, value, str(exc)) from exc
    else:
        raise ModelValidationError(
            "DateRange", field_name, value, "must be epoch ms, ISO-8601 string or datetime"
        )
    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result


def _millis(value: datetime) -> int:
    return round(value.timestamp() * 1000)


@dataclass(frozen=True, slots=True)
class PreparedRegion:
    """Locally computed geometry for a region, ready for the imagery query.

    Attributes:
        ring: Closed exterior ring (first vertex repeated at the end).
        centroid: Area-weighted centroid of the ring.
        bounds: Coordinate-wise extrema.
        dimensions: Thumbnail size preserving the bbox aspect ratio.
        area_ha: Geodesic area in hectares (WGS 84), informational.
    """

    ring: tuple[Coordinate, ...]
    centroid: Coordinate
    bounds: BoundingBox
    dimensions: OutputDimensions
    area_ha: float = 0.0


@dataclass(frozen=True, slots=True)
class RegionQueryResult:
    """The externally observable result of ``analyze_region``.

    ``bounds`` is always ``(max_corner, min_corner)``. ``time_start``,
    ``time_end`` and ``index`` are the scene metadata values passed
    through verbatim from the imagery service.
    """

    width: int
    height: int
    centroid: Coordinate
    bounds: tuple[Coordinate, Coordinate]
    time_start: object
    time_end: object
    index: object
    image_url: str

    def __post_init__(self) -> None:
        check_non_empty("RegionQueryResult", "image_url", self.image_url)
        for name, value in (("width", self.width), ("height", self.height)):
            if value < 1:
                raise ModelValidationError("RegionQueryResult", name, value, "must be >= 1")

    def to_dict(self) -> dict[str, object]:
        """Serialise using the wire keys of the reference workflow."""
        return {
            "width": self.width,
            "height": self.height,
            "centroid": self.centroid.to_dict(),
            "bounds": [corner.to_dict() for corner in self.bounds],
            "time_start": self.time_start,
            "time_end": self.time_end,
            "index": self.index,
            "img_url": self.image_url,
        }
