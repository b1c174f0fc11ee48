"""Google Earth Engine adapter.

Concrete ``ImageryService`` implementation over the ``earthengine-api``
client. Authentication uses a service-account private key (the JSON key
file contents, as a mapping or a JSON string).

The Earth Engine client is synchronous; the two network round-trips the
orchestrator awaits (``authenticate`` and ``thumbnail_url``) run in a
worker thread via ``asyncio.to_thread``. ``first()`` fetches the
selected image's info once so that ``metadata()`` reads are local.

References:
    Earth Engine Python API:
        https://developers.google.com/earth-engine/apidocs
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import ee

from ndvi_region.services.base import (
    AuthenticationError,
    CollectionHandle,
    ExternalServiceError,
    GeometryHandle,
    ImageHandle,
    ImageryService,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from ndvi_region.models.imagery import VisualizationParams
    from ndvi_region.models.region import Coordinate

logger = logging.getLogger(__name__)

_THUMBNAIL_FORMAT = "png"


class EarthEngineGeometry(GeometryHandle):
    """Wraps an ``ee.Geometry``."""

    def __init__(self, geometry: ee.Geometry) -> None:
        self.geometry = geometry


class EarthEngineImage(ImageHandle):
    """Wraps an ``ee.Image`` plus its fetched properties (if any)."""

    def __init__(
        self,
        service: str,
        image: ee.Image,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        self._service = service
        self._image = image
        self._properties = dict(properties) if properties is not None else None

    def visualize(self, params: VisualizationParams) -> EarthEngineImage:
        rendered = self._image.visualize(
            bands=[params.band],
            min=params.min,
            max=params.max,
            opacity=params.opacity,
            palette=list(params.palette),
        )
        return EarthEngineImage(self._service, rendered, self._properties)

    def clip(self, geometry: GeometryHandle) -> EarthEngineImage:
        clipped = self._image.clip(_unwrap(geometry))
        return EarthEngineImage(self._service, clipped, self._properties)

    def metadata(self, property_name: str) -> Any:
        if self._properties is None:
            try:
                info = self._image.getInfo()
            except ee.EEException as exc:
                msg = f"Failed to read image info: {exc}"
                raise ExternalServiceError(self._service, msg) from exc
            self._properties = dict((info or {}).get("properties", {}))

        if property_name not in self._properties:
            msg = f"Image metadata has no property {property_name!r}"
            raise ExternalServiceError(self._service, msg, retryable=False)
        return self._properties[property_name]

    async def thumbnail_url(self, width: int, height: int, region: GeometryHandle) -> str:
        params = {
            "dimensions": f"{width}x{height}",
            "region": _unwrap(region),
            "format": _THUMBNAIL_FORMAT,
        }
        try:
            url = await asyncio.to_thread(self._image.getThumbURL, params)
        except ee.EEException as exc:
            msg = f"Thumbnail URL request failed: {exc}"
            raise ExternalServiceError(self._service, msg) from exc

        if not url:
            msg = "Thumbnail URL request returned an empty URL"
            raise ExternalServiceError(self._service, msg, retryable=False)
        return str(url)


class EarthEngineCollection(CollectionHandle):
    """Wraps an ``ee.ImageCollection``."""

    def __init__(self, service: str, collection: ee.ImageCollection) -> None:
        self._service = service
        self._collection = collection

    def filter_date(self, start: datetime, end: datetime) -> EarthEngineCollection:
        filtered = self._collection.filterDate(ee.Date(start), ee.Date(end))
        return EarthEngineCollection(self._service, filtered)

    def sort_by(self, metric: str) -> EarthEngineCollection:
        return EarthEngineCollection(self._service, self._collection.sort(metric))

    def first(self) -> EarthEngineImage | None:
        image = ee.Image(self._collection.first())
        try:
            info = image.getInfo()
        except ee.EEException as exc:
            msg = f"Image collection query failed: {exc}"
            raise ExternalServiceError(self._service, msg) from exc

        if not info:
            return None
        return EarthEngineImage(self._service, image, info.get("properties", {}))


class EarthEngineService(ImageryService):
    """Earth Engine adapter.

    ``ServiceConfig.project`` overrides the ``project_id`` from the key.
    """

    async def authenticate(self, credentials: Any) -> None:
        key = _parse_private_key(self.name, credentials)
        project = self.config.project or str(key.get("project_id", "")) or None

        try:
            await asyncio.to_thread(self._initialize, key, project)
        except Exception as exc:
            msg = f"Authentication error: {exc}"
            raise AuthenticationError(self.name, msg) from exc

        logger.info(
            "Earth Engine session initialised | account=%s | project=%s",
            key["client_email"],
            project or "",
        )

    def point_geometry(self, coordinate: Coordinate) -> EarthEngineGeometry:
        return EarthEngineGeometry(ee.Geometry.Point(coordinate.as_pair()))

    def polygon_geometry(self, ring: Sequence[Coordinate]) -> EarthEngineGeometry:
        return EarthEngineGeometry(ee.Geometry.Polygon([[c.as_pair() for c in ring]]))

    def image_collection(self, name: str) -> EarthEngineCollection:
        return EarthEngineCollection(self.name, ee.ImageCollection(name))

    @staticmethod
    def _initialize(key: Mapping[str, Any], project: str | None) -> None:
        credentials = ee.ServiceAccountCredentials(
            key["client_email"],
            key_data=json.dumps(dict(key)),
        )
        ee.Initialize(credentials, project=project)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _parse_private_key(service: str, credentials: Any) -> Mapping[str, Any]:
    """Return the service-account key as a mapping.

    Raises:
        AuthenticationError: If the key is not JSON or lacks ``client_email``.
    """
    key = credentials
    if isinstance(credentials, str | bytes):
        try:
            key = json.loads(credentials)
        except ValueError as exc:
            msg = f"Authentication error: private key is not valid JSON ({exc})"
            raise AuthenticationError(service, msg) from exc

    if not isinstance(key, Mapping) or not key.get("client_email"):
        msg = "Authentication error: private key must be a JSON object with 'client_email'"
        raise AuthenticationError(service, msg)
    return key


def _unwrap(geometry: GeometryHandle) -> ee.Geometry:
    if not isinstance(geometry, EarthEngineGeometry):
        msg = f"Expected an Earth Engine geometry, got {type(geometry).__name__}"
        raise TypeError(msg)
    return geometry.geometry
