"""Shared constants — single source of truth.

Centralises the imagery collection, band, metadata property names and
service identifiers used by the adapters, the orchestrator and the
configuration layer.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Imagery selection
# ---------------------------------------------------------------------------

DEFAULT_IMAGE_COLLECTION: str = "LANDSAT/LC08/C01/T1_32DAY_NDVI"
"""Landsat 8 32-day NDVI composite collection."""

DEFAULT_BAND: str = "NDVI"
"""Band rendered by the visualisation step."""

DEFAULT_CLOUD_METRIC: str = "CLOUD_COVER"
"""Image property the collection is sorted by (ascending, clearest first)."""

# ---------------------------------------------------------------------------
# Visualisation defaults (min/max depend on the palette in use)
# ---------------------------------------------------------------------------

DEFAULT_VIS_MIN: float = -0.2
DEFAULT_VIS_MAX: float = 0.8
DEFAULT_VIS_OPACITY: float = 1.0
DEFAULT_PALETTE: str = "ndviAgro"

# ---------------------------------------------------------------------------
# Image metadata properties read from the selected scene
# ---------------------------------------------------------------------------

PROPERTY_TIME_START: str = "system:time_start"
"""Nominal composite start period for temporal composites (epoch ms)."""

PROPERTY_TIME_END: str = "system:time_end"
"""Nominal acquisition end time (epoch ms)."""

PROPERTY_INDEX: str = "system:index"
"""Scene index assigned by the satellite system."""

# ---------------------------------------------------------------------------
# Service names
# ---------------------------------------------------------------------------

EARTH_ENGINE: str = "earth_engine"

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

MIN_POLYGON_VERTICES: int = 3
DEFAULT_AREA_WARNING_HA: float = 10_000.0
SQ_METRES_PER_HECTARE: float = 10_000.0
