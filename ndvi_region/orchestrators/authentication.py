"""Authentication gate and the public ``analyze_region`` operation.

The gate performs exactly one credential verification against the
imagery service and, only if it succeeds, runs the wrapped operation
exactly once:

    UNAUTHENTICATED → AUTHENTICATING → AUTHENTICATED → COMPLETED
                                     ↘ FAILED        ↘ FAILED

There are no retries. A gate instance serves a single invocation.
"""

from __future__ import annotations

import enum
import logging
import uuid
from typing import TYPE_CHECKING, Any, TypeVar

from ndvi_region.activities.prepare_region import prepare_region
from ndvi_region.core.config import AnalysisConfig
from ndvi_region.core.exceptions import RegionAnalysisError
from ndvi_region.models.imagery import ServiceConfig
from ndvi_region.models.region import DateRange
from ndvi_region.orchestrators.region_analysis import query_region
from ndvi_region.services.base import AuthenticationError
from ndvi_region.services.factory import get_service

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ndvi_region.models.region import RegionQueryResult
    from ndvi_region.services.base import ImageryService

logger = logging.getLogger("ndvi_region.orchestrators.authentication")

T = TypeVar("T")


class AuthState(enum.Enum):
    """Lifecycle state of an ``AuthenticationGate``."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    COMPLETED = "completed"
    FAILED = "failed"


class AuthenticationGate:
    """Runs an operation behind a single credential verification."""

    def __init__(self, service: ImageryService) -> None:
        self._service = service
        self._state = AuthState.UNAUTHENTICATED

    @property
    def state(self) -> AuthState:
        return self._state

    async def run(self, credentials: Any, operation: Callable[[], Awaitable[T]]) -> T:
        """Authenticate with *credentials*, then await ``operation()`` once.

        Raises:
            AuthenticationError: If verification fails; *operation* is
                never called.
            RuntimeError: If the gate has already been used.
            Any error raised by *operation* propagates unchanged.
        """
        if self._state is not AuthState.UNAUTHENTICATED:
            msg = f"AuthenticationGate is single-use (state={self._state.value})"
            raise RuntimeError(msg)

        self._state = AuthState.AUTHENTICATING
        try:
            await self._service.authenticate(credentials)
        except AuthenticationError:
            self._state = AuthState.FAILED
            raise
        except Exception as exc:
            self._state = AuthState.FAILED
            msg = f"Authentication error: {exc}"
            raise AuthenticationError(self._service.name, msg) from exc

        self._state = AuthState.AUTHENTICATED
        logger.info("Authenticated | service=%s", self._service.name)

        try:
            result = await operation()
        except Exception:
            self._state = AuthState.FAILED
            raise

        self._state = AuthState.COMPLETED
        return result


async def analyze_region(
    credentials: Any,
    polygon: Sequence[object],
    width: float,
    date_start: object,
    date_end: object,
    *,
    config: AnalysisConfig | None = None,
    service: ImageryService | None = None,
    correlation_id: str = "",
) -> RegionQueryResult:
    """Retrieve the least-cloudy NDVI scene for *polygon* within a date range.

    Args:
        credentials: Opaque credential material for the imagery service
            (for Earth Engine, the service-account private key JSON).
        polygon: At least three vertices as ``{"lng", "lat"}`` mappings,
            ``(lng, lat)`` pairs or ``Coordinate``. Not modified.
        width: Target thumbnail width in pixels.
        date_start: Start of the acquisition window (epoch ms, ISO-8601
            string or ``datetime``).
        date_end: End of the acquisition window.
        config: Analysis configuration; loaded from the environment when
            ``None``.
        service: Imagery service to use; created from
            ``config.imagery_service`` when ``None``.
        correlation_id: Identifier attached to any raised error; a random
            one is generated when empty.

    Returns:
        The ``RegionQueryResult``.

    Raises:
        DegenerateGeometryError: Before any network call, if the polygon
            has no usable extent or area.
        InvalidRequestError: If *width* is unusable.
        ModelValidationError: If a vertex or timestamp cannot be read.
        AuthenticationError: If the credentials are rejected.
        NoImageFoundError: If no scene matches the date range.
        ExternalServiceError: On any other service failure.
    """
    correlation_id = correlation_id or uuid.uuid4().hex
    try:
        config = config or AnalysisConfig.from_env()
        date_range = DateRange.from_values(date_start, date_end)
        region = prepare_region(polygon, width, area_warning_ha=config.area_warning_ha)

        if service is None:
            service = get_service(
                config.imagery_service,
                ServiceConfig(name=config.imagery_service, project=config.project),
            )

        gate = AuthenticationGate(service)
        return await gate.run(
            credentials,
            lambda: query_region(service, region, date_range, config),
        )
    except RegionAnalysisError as exc:
        if not exc.correlation_id:
            exc.correlation_id = correlation_id
        logger.error("Region analysis failed | %s", exc.to_error_dict())
        raise
