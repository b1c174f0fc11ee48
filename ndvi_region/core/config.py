"""Analysis configuration loaded from environment variables.

All configuration values default to the behaviour of the reference
NDVI workflow (Landsat 8 32-day NDVI composite, ``ndviAgro`` palette,
range -0.2..0.8).

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration is caught before any
    imagery request is made.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from ndvi_region.core.constants import (
    DEFAULT_AREA_WARNING_HA,
    DEFAULT_BAND,
    DEFAULT_CLOUD_METRIC,
    DEFAULT_IMAGE_COLLECTION,
    DEFAULT_PALETTE,
    DEFAULT_VIS_MAX,
    DEFAULT_VIS_MIN,
    DEFAULT_VIS_OPACITY,
    EARTH_ENGINE,
)
from ndvi_region.core.exceptions import RegionAnalysisError
from ndvi_region.core.palettes import PALETTES


class ConfigValidationError(RegionAnalysisError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Immutable analysis configuration.

    Attributes:
        imagery_service: Registered imagery service name (``earth_engine``).
        image_collection: Collection identifier queried for scenes.
        band: Band rendered by the visualisation step.
        cloud_metric: Image property used to sort scenes (ascending).
        palette: Name of the colour ramp in ``core.palettes.PALETTES``.
        vis_min: Value mapped to the first palette colour.
        vis_max: Value mapped to the last palette colour.
        vis_opacity: Layer opacity (0.0 transparent, 1.0 opaque).
        area_warning_ha: Geodesic area (ha) above which the planar
            centroid approximation is logged as a warning.
        project: Cloud project passed to the imagery service (may be empty).
    """

    imagery_service: str = EARTH_ENGINE
    image_collection: str = DEFAULT_IMAGE_COLLECTION
    band: str = DEFAULT_BAND
    cloud_metric: str = DEFAULT_CLOUD_METRIC
    palette: str = DEFAULT_PALETTE
    vis_min: float = DEFAULT_VIS_MIN
    vis_max: float = DEFAULT_VIS_MAX
    vis_opacity: float = DEFAULT_VIS_OPACITY
    area_warning_ha: float = DEFAULT_AREA_WARNING_HA
    project: str = ""

    @classmethod
    def from_env(cls, *, palette: str | None = None) -> AnalysisConfig:
        """Load and validate configuration from environment variables.

        Args:
            palette: Palette name that takes precedence over ``NDVI_PALETTE``.

        Raises:
            ConfigValidationError: If a value is out of range, a required
                string is empty, or the palette name is unknown.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``NDVI_VIS_MIN=abc``).
        """
        config = cls(
            imagery_service=os.getenv("NDVI_IMAGERY_SERVICE", EARTH_ENGINE),
            image_collection=os.getenv("NDVI_IMAGE_COLLECTION", DEFAULT_IMAGE_COLLECTION),
            band=os.getenv("NDVI_BAND", DEFAULT_BAND),
            cloud_metric=os.getenv("NDVI_CLOUD_METRIC", DEFAULT_CLOUD_METRIC),
            palette=palette or os.getenv("NDVI_PALETTE", DEFAULT_PALETTE),
            vis_min=float(os.getenv("NDVI_VIS_MIN", str(DEFAULT_VIS_MIN))),
            vis_max=float(os.getenv("NDVI_VIS_MAX", str(DEFAULT_VIS_MAX))),
            vis_opacity=float(os.getenv("NDVI_VIS_OPACITY", str(DEFAULT_VIS_OPACITY))),
            area_warning_ha=float(os.getenv("NDVI_AREA_WARNING_HA", str(DEFAULT_AREA_WARNING_HA))),
            project=os.getenv("EE_PROJECT", ""),
        )
        validate_config(config)
        return config


def validate_config(config: AnalysisConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    for key, value in (
        ("NDVI_IMAGERY_SERVICE", config.imagery_service),
        ("NDVI_IMAGE_COLLECTION", config.image_collection),
        ("NDVI_BAND", config.band),
        ("NDVI_CLOUD_METRIC", config.cloud_metric),
    ):
        if not value:
            raise ConfigValidationError(key, value, "must not be empty")

    if config.palette not in PALETTES:
        raise ConfigValidationError(
            "NDVI_PALETTE",
            config.palette,
            f"must be one of {', '.join(sorted(PALETTES))}",
        )

    if config.vis_min >= config.vis_max:
        raise ConfigValidationError(
            "NDVI_VIS_MIN",
            config.vis_min,
            f"must be < NDVI_VIS_MAX ({config.vis_max})",
        )

    if not 0.0 <= config.vis_opacity <= 1.0:
        raise ConfigValidationError(
            "NDVI_VIS_OPACITY",
            config.vis_opacity,
            "must be between 0 and 1",
        )

    if config.area_warning_ha <= 0:
        raise ConfigValidationError(
            "NDVI_AREA_WARNING_HA",
            config.area_warning_ha,
            "must be > 0 (hectares)",
        )
