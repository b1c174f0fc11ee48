"""Unified exception taxonomy.

Every domain exception inherits from ``RegionAnalysisError`` and carries
structured context fields so that callers get one typed failure per
``analyze_region`` invocation, never a partial result.

Taxonomy categories
-------------------
- ``ValidationError``   — input violations detected locally, before any
  network call.
- ``TransientError``    — temporary failures (network, throttle).
- ``PermanentError``    — unrecoverable domain failures.

Nothing in this package retries. ``retryable`` is informational for the
caller, who owns any retry or timeout policy.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and the command-line wrapper.
"""

from __future__ import annotations


class RegionAnalysisError(Exception):
    """Base exception for all region-analysis errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"prepare_region"``, ``"authenticate"``).
        code: Machine-readable error code (e.g. ``"DEGENERATE_GEOMETRY"``).
        retryable: Whether a retry by the caller could succeed.
        correlation_id: Request correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(RegionAnalysisError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(RegionAnalysisError):
    """Temporary failure that may succeed if the caller tries again."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(RegionAnalysisError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------


class InvalidRequestError(ValidationError):
    """The caller supplied an unusable argument (e.g. a non-positive width)."""

    default_stage = "request"
    default_code = "INVALID_REQUEST"
