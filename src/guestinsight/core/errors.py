"""Error taxonomy and the explicit analysis result type."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class GuestInsightError(Exception):
    """Base class for all GuestInsight errors."""


class FailureKind(str, Enum):
    """Why an external analysis call did not produce a usable result."""

    TRANSPORT = "transport"
    UPSTREAM_ERROR = "upstream-error"
    RATE_LIMITED = "rate-limited"
    MALFORMED_RESPONSE = "malformed-response"


class AnalysisFailure(GuestInsightError):
    """An external analysis call failed.

    Args:
        kind: Failure category
        message: Human readable description
        status_code: HTTP status of the upstream response, when there was one
    """

    def __init__(self, kind: FailureKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind in (FailureKind.TRANSPORT, FailureKind.RATE_LIMITED)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.kind.value}] {self.message} (status {self.status_code})"
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class AnalysisResult(Generic[T]):
    """Outcome of an analysis that may have gone through the external service.

    ``value`` is set on success and when a local fallback replaced a failed
    remote call; ``error`` keeps the failure in the latter case so callers can
    still report it.
    """

    value: Optional[T] = None
    error: Optional[AnalysisFailure] = None
    source: str = "local"
    fallback_used: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, source: str) -> "AnalysisResult[T]":
        return cls(value=value, source=source)

    @classmethod
    def failure(cls, error: AnalysisFailure) -> "AnalysisResult[T]":
        return cls(error=error, source="remote")

    @classmethod
    def fallback(cls, value: T, error: AnalysisFailure) -> "AnalysisResult[T]":
        return cls(value=value, error=error, source="local", fallback_used=True)

    def unwrap(self) -> T:
        """Return the value or raise the failure when there is none."""
        if self.value is None:
            raise self.error
        return self.value
