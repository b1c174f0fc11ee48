"""ImageryService abstract base classes.

Defines the contract that every imagery service adapter must implement.
The orchestrator interacts exclusively with these interfaces; it never
knows which concrete service is behind them.

Lifecycle:
    1. ``await authenticate(credentials)`` — one-shot session set-up.
    2. ``point_geometry`` / ``polygon_geometry`` — build geometry handles.
    3. ``image_collection(name).filter_date(...).sort_by(...).first()``
       — select the clearest scene, or ``None`` when nothing matches.
    4. ``image.visualize(...).clip(...)`` — render and clip the scene.
    5. ``image.metadata(name)`` — read scene properties.
    6. ``await image.thumbnail_url(width, height, region)`` — rendered URL.

Adapters report collaborator failures as ``ExternalServiceError`` and
credential failures as ``AuthenticationError``.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from ndvi_region.core.exceptions import RegionAnalysisError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from ndvi_region.models.imagery import ServiceConfig, VisualizationParams
    from ndvi_region.models.region import Coordinate


class GeometryHandle(abc.ABC):  # noqa: B024
    """Opaque service-side geometry (point or polygon)."""


class ImageHandle(abc.ABC):
    """A single service-side image."""

    @abc.abstractmethod
    def visualize(self, params: VisualizationParams) -> ImageHandle:
        """Render the image to RGB with the given band, range and palette."""

    @abc.abstractmethod
    def clip(self, geometry: GeometryHandle) -> ImageHandle:
        """Mask the image to *geometry*."""

    @abc.abstractmethod
    def metadata(self, property_name: str) -> Any:
        """Return the value of a named image property, verbatim.

        Raises:
            ExternalServiceError: If the property is missing or unreadable.
        """

    @abc.abstractmethod
    async def thumbnail_url(self, width: int, height: int, region: GeometryHandle) -> str:
        """Request a URL for a ``width x height`` PNG of the image over *region*.

        Raises:
            ExternalServiceError: If the service cannot produce a URL.
        """


class CollectionHandle(abc.ABC):
    """A service-side image collection."""

    @abc.abstractmethod
    def filter_date(self, start: datetime, end: datetime) -> CollectionHandle:
        """Restrict the collection to images acquired within ``[start, end]``."""

    @abc.abstractmethod
    def sort_by(self, metric: str) -> CollectionHandle:
        """Sort the collection ascending by image property *metric*."""

    @abc.abstractmethod
    def first(self) -> ImageHandle | None:
        """Return the first image, or ``None`` if the collection is empty.

        Raises:
            ExternalServiceError: On service errors.
        """


class ImageryService(abc.ABC):
    """Abstract base class for imagery service adapters.

    Concrete implementations receive a ``ServiceConfig`` and must override
    every abstract method.

    Example usage::

        service = get_service("earth_engine")
        await service.authenticate(private_key)
        image = service.image_collection(name).filter_date(s, e).sort_by(m).first()
    """

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config

    @property
    def name(self) -> str:
        """Return the service name from configuration."""
        return self._config.name

    @property
    def config(self) -> ServiceConfig:
        """Return the service configuration (read-only)."""
        return self._config

    @abc.abstractmethod
    async def authenticate(self, credentials: Any) -> None:
        """Establish a verified session using opaque *credentials*.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """

    @abc.abstractmethod
    def point_geometry(self, coordinate: Coordinate) -> GeometryHandle:
        """Build a point geometry at *coordinate*."""

    @abc.abstractmethod
    def polygon_geometry(self, ring: Sequence[Coordinate]) -> GeometryHandle:
        """Build a polygon geometry from a closed coordinate ring."""

    @abc.abstractmethod
    def image_collection(self, name: str) -> CollectionHandle:
        """Open the image collection called *name*."""


# ---------------------------------------------------------------------------
# Service exceptions
# ---------------------------------------------------------------------------


class ServiceError(RegionAnalysisError):
    """Base exception for imagery service errors.

    Attributes:
        service: Name of the service that raised the error.
        message: Human-readable error description.
        retryable: Whether the caller could retry the operation.
    """

    default_stage = "imagery_service"
    default_code = "SERVICE_ERROR"

    def __init__(
        self,
        service: str,
        message: str,
        *,
        retryable: bool = False,
    ) -> None:
        self.service = service
        super().__init__(
            message,
            retryable=retryable,
            code=self.default_code,
            stage=self.default_stage,
        )

    def __str__(self) -> str:
        return f"[{self.service}] {self.message}"


class AuthenticationError(ServiceError):
    """The service rejected the credentials. Not retryable."""

    default_stage = "authenticate"
    default_code = "AUTHENTICATION_FAILED"

    def __init__(self, service: str, message: str) -> None:
        super().__init__(service, message, retryable=False)


class ExternalServiceError(ServiceError):
    """Network failure or malformed response from the service."""

    default_code = "EXTERNAL_SERVICE_FAILED"

    def __init__(self, service: str, message: str, *, retryable: bool = True) -> None:
        super().__init__(service, message, retryable=retryable)
