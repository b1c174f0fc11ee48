"""Tests for the region data models.

Covers coordinate parsing, timestamp coercion, dimension invariants and
the wire format of ``RegionQueryResult``.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from ndvi_region.models.imagery import ModelValidationError, VisualizationParams
from ndvi_region.models.region import (
    BoundingBox,
    Coordinate,
    DateRange,
    OutputDimensions,
    RegionQueryResult,
    to_polygon,
)


class TestCoordinate:
    def test_from_mapping(self) -> None:
        assert Coordinate.from_value({"lng": -47.0, "lat": -15.0}) == Coordinate(-47.0, -15.0)

    def test_from_pair(self) -> None:
        assert Coordinate.from_value([-47, -15]) == Coordinate(-47.0, -15.0)

    def test_from_coordinate_is_identity(self) -> None:
        c = Coordinate(1.0, 2.0)
        assert Coordinate.from_value(c) is c

    def test_numeric_strings_are_coerced(self) -> None:
        assert Coordinate.from_value({"lng": "1.5", "lat": "2"}) == Coordinate(1.5, 2.0)

    @pytest.mark.parametrize(
        "value",
        [{"lng": 1.0}, {"lat": 1.0, "lng": "east"}, [1.0], "1,2", None, [1.0, 2.0, 3.0]],
    )
    def test_bad_values_raise(self, value: object) -> None:
        with pytest.raises(ModelValidationError):
            Coordinate.from_value(value)

    def test_integer_too_large_for_float_rejected(self) -> None:
        with pytest.raises(ModelValidationError):
            Coordinate.from_value([10**400, 0])

    def test_infinite_rejected(self) -> None:
        with pytest.raises(ModelValidationError, match="finite"):
            Coordinate(float("inf"), 0.0)

    def test_to_dict_and_pair(self) -> None:
        c = Coordinate(-47.0, -15.0)
        assert c.to_dict() == {"lng": -47.0, "lat": -15.0}
        assert c.as_pair() == [-47.0, -15.0]

    def test_to_polygon_copies(self) -> None:
        source = [{"lng": 0, "lat": 0}, {"lng": 1, "lat": 0}, {"lng": 1, "lat": 1}]
        polygon = to_polygon(source)
        polygon.append(polygon[0])
        assert len(source) == 3


class TestDateRange:
    def test_from_epoch_millis(self) -> None:
        dr = DateRange.from_values(1_577_836_800_000, 1_583_020_800_000)
        assert dr.start == datetime(2020, 1, 1, tzinfo=UTC)
        assert dr.end == datetime(2020, 3, 1, tzinfo=UTC)

    def test_from_iso_strings(self) -> None:
        dr = DateRange.from_values("2020-01-01", "2020-03-01T00:00:00Z")
        assert dr.start == datetime(2020, 1, 1, tzinfo=UTC)
        assert dr.end == datetime(2020, 3, 1, tzinfo=UTC)

    def test_naive_datetime_is_utc(self) -> None:
        dr = DateRange.from_values(datetime(2020, 1, 1), datetime(2020, 1, 2))
        assert dr.start.tzinfo is UTC

    def test_aware_datetime_kept(self) -> None:
        tz = timezone(timedelta(hours=-3))
        start = datetime(2020, 1, 1, tzinfo=tz)
        assert DateRange.from_values(start, start).start == start

    def test_to_millis(self) -> None:
        dr = DateRange.from_values(1_577_836_800_000, 1_583_020_800_000)
        assert dr.to_millis() == (1_577_836_800_000, 1_583_020_800_000)

    def test_start_after_end_is_not_checked(self) -> None:
        dr = DateRange.from_values("2020-03-01", "2020-01-01")
        assert dr.start > dr.end

    @pytest.mark.parametrize("value", ["yesterday", None, True, [2020, 1, 1]])
    def test_bad_values_raise(self, value: object) -> None:
        with pytest.raises(ModelValidationError):
            DateRange.from_values(value, "2020-01-01")


class TestOutputDimensions:
    def test_positive(self) -> None:
        assert OutputDimensions(256, 128).height == 128

    @pytest.mark.parametrize(("width", "height"), [(0, 10), (10, 0), (-1, 5)])
    def test_non_positive_rejected(self, width: int, height: int) -> None:
        with pytest.raises(ModelValidationError):
            OutputDimensions(width, height)


class TestBoundingBox:
    def test_deltas(self) -> None:
        bounds = BoundingBox(max_lng=-46.0, min_lng=-47.0, max_lat=-14.0, min_lat=-15.0)
        assert bounds.delta_lng == pytest.approx(1.0)
        assert bounds.delta_lat == pytest.approx(1.0)


class TestVisualizationParams:
    def test_min_must_be_below_max(self) -> None:
        with pytest.raises(ModelValidationError):
            VisualizationParams(band="NDVI", min=0.8, max=-0.2, opacity=1.0, palette=("fff",))

    def test_opacity_range(self) -> None:
        with pytest.raises(ModelValidationError):
            VisualizationParams(band="NDVI", min=-0.2, max=0.8, opacity=1.5, palette=("fff",))

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(ModelValidationError):
            VisualizationParams(band="NDVI", min=-0.2, max=0.8, opacity=1.0, palette=())


class TestRegionQueryResult:
    def _make(self, **overrides: object) -> RegionQueryResult:
        fields: dict[str, object] = {
            "width": 256,
            "height": 256,
            "centroid": Coordinate(-46.5, -14.5),
            "bounds": (Coordinate(-46.0, -14.0), Coordinate(-47.0, -15.0)),
            "time_start": 1_580_515_200_000,
            "time_end": 1_583_280_000_000,
            "index": "20200201",
            "image_url": "https://example.test/thumb",
        }
        fields.update(overrides)
        return RegionQueryResult(**fields)  # type: ignore[arg-type]

    def test_to_dict_wire_keys(self) -> None:
        d = self._make().to_dict()
        assert d == {
            "width": 256,
            "height": 256,
            "centroid": {"lng": -46.5, "lat": -14.5},
            "bounds": [{"lng": -46.0, "lat": -14.0}, {"lng": -47.0, "lat": -15.0}],
            "time_start": 1_580_515_200_000,
            "time_end": 1_583_280_000_000,
            "index": "20200201",
            "img_url": "https://example.test/thumb",
        }

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ModelValidationError):
            self._make(image_url="")

    def test_zero_height_rejected(self) -> None:
        with pytest.raises(ModelValidationError):
            self._make(height=0)
