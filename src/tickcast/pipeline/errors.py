"""Error classifier — the single translation point for user-facing messages.

Extractors and transformers raise typed errors and the orchestrator lets
them through untouched. Whatever reaches the presentation boundary is
passed to :func:`classify`, which decides the message once.

Kinds:
    Network     transport failure, timeout
    Provider    provider answered with an error or an unusable payload
    Validation  bad query, or too little data to analyse
    Unknown     anything else
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from tickcast.exceptions import (
    CacheError,
    InsufficientDataError,
    NetworkError,
    ProviderError,
    QueryValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


class ErrorKind(str, Enum):
    NETWORK = "Network"
    PROVIDER = "Provider"
    VALIDATION = "Validation"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ClassifiedError:
    """Displayable error shape."""

    message: str
    kind: ErrorKind

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind.value}


def _provider_message(error: ProviderError) -> str:
    status = error.status_code
    if status in (401, 403):
        return "Invalid API key. Check the key configured for this provider."
    if status == 404:
        return "No data found for the requested city or symbol."
    if status == 429:
        return "Provider rate limit reached. Wait a moment and try again."
    detail = str(error).strip()
    return f"Provider error: {detail}" if detail else "The data provider returned an error."


def _classify(error: BaseException) -> ClassifiedError:
    if isinstance(error, ProviderError):
        return ClassifiedError(_provider_message(error), ErrorKind.PROVIDER)
    if isinstance(error, (NetworkError, httpx.TransportError, asyncio.TimeoutError)):
        return ClassifiedError(
            "Network error. Check your connection and try again.", ErrorKind.NETWORK
        )
    if isinstance(error, QueryValidationError):
        return ClassifiedError(str(error) or "Invalid query.", ErrorKind.VALIDATION)
    if isinstance(error, InsufficientDataError):
        return ClassifiedError(
            f"Not enough data to analyse: {error}" if str(error) else "Not enough data to analyse.",
            ErrorKind.VALIDATION,
        )
    if isinstance(error, CacheError):
        return ClassifiedError(f"Cache error: {error}", ErrorKind.UNKNOWN)
    return ClassifiedError(GENERIC_MESSAGE, ErrorKind.UNKNOWN)


def classify(error: BaseException) -> ClassifiedError:
    """Map any failure into a ClassifiedError. Never raises.

    Example:
        >>> classify(ProviderError("bad key", status_code=401)).kind
        <ErrorKind.PROVIDER: 'Provider'>
    """
    try:
        classified = _classify(error)
    except Exception:
        logger.exception("Failed to classify %r", error)
        return ClassifiedError(GENERIC_MESSAGE, ErrorKind.UNKNOWN)
    logger.debug("Classified %s as %s", type(error).__name__, classified.kind.value)
    return classified
