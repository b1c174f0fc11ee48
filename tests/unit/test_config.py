"""Tests for analysis configuration and the palette table.

Covers:
- Default values match the reference NDVI workflow
- Loading from environment variables with type coercion
- Fail-fast range validation
- Palette lookup and immutability
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from ndvi_region.core.config import AnalysisConfig, ConfigValidationError
from ndvi_region.core.palettes import PALETTES, UnknownPaletteError, get_palette, list_palettes
from ndvi_region.models.imagery import VisualizationParams


class TestAnalysisConfigDefaults:
    def test_defaults(self) -> None:
        cfg = AnalysisConfig()
        assert cfg.imagery_service == "earth_engine"
        assert cfg.image_collection == "LANDSAT/LC08/C01/T1_32DAY_NDVI"
        assert cfg.band == "NDVI"
        assert cfg.cloud_metric == "CLOUD_COVER"
        assert cfg.palette == "ndviAgro"
        assert cfg.vis_min == -0.2
        assert cfg.vis_max == 0.8
        assert cfg.vis_opacity == 1.0
        assert cfg.area_warning_ha == 10_000.0
        assert cfg.project == ""

    def test_frozen(self) -> None:
        cfg = AnalysisConfig()
        with pytest.raises(AttributeError):
            cfg.palette = "green"  # type: ignore[misc]


class TestAnalysisConfigFromEnv:
    def test_loads_from_environment(self) -> None:
        env = {
            "NDVI_IMAGERY_SERVICE": "custom",
            "NDVI_IMAGE_COLLECTION": "MODIS/061/MOD13Q1",
            "NDVI_BAND": "NDVI_B",
            "NDVI_CLOUD_METRIC": "CLOUDY_PIXEL_PERCENTAGE",
            "NDVI_PALETTE": "green",
            "NDVI_VIS_MIN": "0.5",
            "NDVI_VIS_MAX": "1",
            "NDVI_VIS_OPACITY": "0.7",
            "NDVI_AREA_WARNING_HA": "500",
            "EE_PROJECT": "my-project",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = AnalysisConfig.from_env()

        assert cfg.imagery_service == "custom"
        assert cfg.image_collection == "MODIS/061/MOD13Q1"
        assert cfg.band == "NDVI_B"
        assert cfg.cloud_metric == "CLOUDY_PIXEL_PERCENTAGE"
        assert cfg.palette == "green"
        assert cfg.vis_min == 0.5
        assert cfg.vis_max == 1.0
        assert cfg.vis_opacity == 0.7
        assert cfg.area_warning_ha == 500.0
        assert cfg.project == "my-project"

    def test_defaults_when_env_missing(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = AnalysisConfig.from_env()
        assert cfg == AnalysisConfig()

    def test_palette_argument_takes_precedence(self) -> None:
        with patch.dict(os.environ, {"NDVI_PALETTE": "rainbow"}, clear=True):
            cfg = AnalysisConfig.from_env(palette="green")
        assert cfg.palette == "green"

    def test_unparseable_number_raises_value_error(self) -> None:
        with (
            patch.dict(os.environ, {"NDVI_VIS_MIN": "abc"}, clear=True),
            pytest.raises(ValueError, match="abc"),
        ):
            AnalysisConfig.from_env()


class TestAnalysisConfigValidation:
    @pytest.mark.parametrize(
        ("env", "key"),
        [
            ({"NDVI_PALETTE": "rainbow"}, "NDVI_PALETTE"),
            ({"NDVI_VIS_MIN": "0.9"}, "NDVI_VIS_MIN"),
            ({"NDVI_VIS_OPACITY": "1.5"}, "NDVI_VIS_OPACITY"),
            ({"NDVI_VIS_OPACITY": "-0.1"}, "NDVI_VIS_OPACITY"),
            ({"NDVI_AREA_WARNING_HA": "0"}, "NDVI_AREA_WARNING_HA"),
            ({"NDVI_IMAGE_COLLECTION": ""}, "NDVI_IMAGE_COLLECTION"),
            ({"NDVI_BAND": ""}, "NDVI_BAND"),
        ],
    )
    def test_invalid_values_rejected(self, env: dict[str, str], key: str) -> None:
        with patch.dict(os.environ, env, clear=True), pytest.raises(ConfigValidationError) as ctx:
            AnalysisConfig.from_env()
        assert ctx.value.key == key
        assert ctx.value.code == "CONFIG_VALIDATION_FAILED"
        assert key in str(ctx.value)


class TestPalettes:
    def test_all_reference_palettes_present(self) -> None:
        assert list_palettes() == sorted(
            ["default", "ndvi", "ndvi1", "ndvi2", "ndviAgro", "green", "redToGreen", "mosaic"]
        )

    def test_ndvi_agro_ramp(self) -> None:
        ramp = get_palette("ndviAgro")
        assert len(ramp) == 20
        assert ramp[0] == "d7d7d7"
        assert ramp[-1] == "006400"

    def test_unknown_palette(self) -> None:
        with pytest.raises(UnknownPaletteError, match="rainbow"):
            get_palette("rainbow")

    def test_unknown_palette_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            get_palette("rainbow")

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            PALETTES["ndvi"] = ("000000",)  # type: ignore[index]

    def test_palettes_are_tuples(self) -> None:
        assert all(isinstance(ramp, tuple) for ramp in PALETTES.values())

    def test_visualization_from_config(self) -> None:
        params = VisualizationParams.from_config(AnalysisConfig(palette="redToGreen"))
        assert params.band == "NDVI"
        assert params.min == -0.2
        assert params.max == 0.8
        assert params.opacity == 1.0
        assert params.palette == ("ff0000", "ffff00", "00ff00")
