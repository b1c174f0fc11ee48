"""Imagery service adapters.

Provider-agnostic adapter pattern:
- ImageryService: Abstract base class (with CollectionHandle, ImageHandle)
- EarthEngineService: Google Earth Engine

The active service is selected by name through configuration.
"""

from ndvi_region.services.base import (
    AuthenticationError,
    CollectionHandle,
    ExternalServiceError,
    GeometryHandle,
    ImageHandle,
    ImageryService,
    ServiceError,
)
from ndvi_region.services.factory import (
    get_service,
    list_services,
    register_service,
)

__all__ = [
    "AuthenticationError",
    "CollectionHandle",
    "ExternalServiceError",
    "GeometryHandle",
    "ImageHandle",
    "ImageryService",
    "ServiceError",
    "get_service",
    "list_services",
    "register_service",
]
