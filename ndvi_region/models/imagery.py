"""Typed models exchanged between the orchestrator and imagery services.

- ``VisualizationParams``: How the selected scene is rendered
- ``RegionQuery``: Everything the orchestrator asks the service for
- ``ServiceConfig``: Configuration for a specific imagery service

All models are frozen dataclasses; a fresh set is built per invocation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ndvi_region.core.exceptions import RegionAnalysisError
from ndvi_region.core.palettes import get_palette

if TYPE_CHECKING:
    from ndvi_region.core.config import AnalysisConfig
    from ndvi_region.models.region import Coordinate, DateRange, OutputDimensions


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ModelValidationError(ValueError, RegionAnalysisError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        RegionAnalysisError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Visualisation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VisualizationParams:
    """Rendering parameters for a single-band NDVI scene.

    Attributes:
        band: Band name to render.
        min: Value mapped to the first palette colour.
        max: Value mapped to the last palette colour.
        opacity: Layer opacity (0.0 transparent, 1.0 opaque).
        palette: Colour ramp as hex strings or CSS colour names.
    """

    band: str
    min: float
    max: float
    opacity: float
    palette: tuple[str, ...]

    def __post_init__(self) -> None:
        check_non_empty("VisualizationParams", "band", self.band)
        if self.min >= self.max:
            raise ModelValidationError(
                "VisualizationParams", "min", self.min, f"must be < max ({self.max})"
            )
        check_range("VisualizationParams", "opacity", self.opacity, 0, 1)
        if not self.palette:
            raise ModelValidationError(
                "VisualizationParams", "palette", self.palette, "must not be empty"
            )

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> VisualizationParams:
        """Build rendering parameters from the configured palette and range."""
        return cls(
            band=config.band,
            min=config.vis_min,
            max=config.vis_max,
            opacity=config.vis_opacity,
            palette=get_palette(config.palette),
        )


# ---------------------------------------------------------------------------
# Region query
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegionQuery:
    """A fully-specified request for a clipped, visualised scene.

    Attributes:
        point: Centroid of the region (service point geometry).
        ring: Closed exterior ring of the region (service polygon geometry).
        date_range: Acquisition window passed to the date filter.
        collection: Image collection identifier.
        cloud_metric: Property the filtered collection is sorted by.
        visualization: Rendering parameters.
        dimensions: Thumbnail pixel dimensions.
    """

    point: Coordinate
    ring: tuple[Coordinate, ...]
    date_range: DateRange
    collection: str
    cloud_metric: str
    visualization: VisualizationParams
    dimensions: OutputDimensions


# ---------------------------------------------------------------------------
# Service configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Configuration for a specific imagery service.

    Attributes:
        name: Service identifier (must match the factory registry key).
        project: Cloud project to bill requests to (empty for key default).
    """

    name: str
    project: str = ""

    def __post_init__(self) -> None:
        check_non_empty("ServiceConfig", "name", self.name)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def check_range(model: str, field_name: str, value: float, lo: float, hi: float) -> None:
    """Raise `ModelValidationError` if *value* falls outside [lo, hi]."""
    if value < lo or value > hi:
        raise ModelValidationError(model, field_name, value, f"must be between {lo} and {hi}")


def check_finite(model: str, field_name: str, value: float) -> None:
    """Raise `ModelValidationError` if *value* is NaN or infinite."""
    if not math.isfinite(value):
        raise ModelValidationError(model, field_name, value, "must be a finite number")


def check_non_empty(model: str, field_name: str, value: str) -> None:
    """Raise `ModelValidationError` if *value* is empty or blank."""
    if not value or not value.strip():
        raise ModelValidationError(model, field_name, value, "must not be empty")
