"""Service factory — selects the imagery service adapter by name.

The factory maintains a registry of known adapters. Built-in adapters
are registered lazily so that the ``earthengine-api`` client is only
imported when that adapter is selected.

Usage::

    from ndvi_region.services.factory import get_service

    service = get_service("earth_engine")

The service name is read from ``AnalysisConfig.imagery_service``
(``NDVI_IMAGERY_SERVICE``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ndvi_region.core.constants import EARTH_ENGINE
from ndvi_region.models.imagery import ServiceConfig
from ndvi_region.services.base import ImageryService, ServiceError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

# Each entry maps a service name to a callable that returns the adapter *class*.
_ADAPTER_REGISTRY: dict[str, Callable[[], type[ImageryService]]] = {}


def _register_builtin_adapters() -> None:
    def _earth_engine() -> type[ImageryService]:
        from ndvi_region.services.earth_engine import EarthEngineService

        return EarthEngineService

    _ADAPTER_REGISTRY[EARTH_ENGINE] = _earth_engine


def _ensure_registry() -> None:
    """Initialise the adapter registry once (idempotent)."""
    if not _ADAPTER_REGISTRY:
        _register_builtin_adapters()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_service(
    name: str,
    loader: Callable[[], type[ImageryService]],
) -> None:
    """Register a custom service adapter.

    Args:
        name: Service name (e.g. ``"my_imagery_service"``).
        loader: A zero-argument callable that returns the adapter class.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Service name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _ADAPTER_REGISTRY[name] = loader
    logger.debug("Registered imagery service adapter: %s", name)


def get_service(
    name: str,
    config: ServiceConfig | None = None,
) -> ImageryService:
    """Create and return a fresh imagery service instance.

    Args:
        name: Service identifier (e.g. ``"earth_engine"``).
        config: Optional ``ServiceConfig``. If ``None``, a default config
                with just the service name is used.

    Raises:
        ServiceError: If the named service is not registered or the
            config names a different service.
    """
    _ensure_registry()

    loader = _ADAPTER_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_ADAPTER_REGISTRY))
        msg = f"Unknown imagery service: {name!r}. Available: {available}"
        raise ServiceError(service=name, message=msg)

    adapter_cls = loader()

    if config is None:
        config = ServiceConfig(name=name)
    elif config.name != name:
        msg = f"ServiceConfig.name {config.name!r} does not match requested service {name!r}"
        raise ServiceError(service=name, message=msg)

    logger.info("Creating imagery service: %s", name)
    return adapter_cls(config)


def list_services() -> list[str]:
    """Return the names of all registered service adapters."""
    _ensure_registry()
    return sorted(_ADAPTER_REGISTRY)
