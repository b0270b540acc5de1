"""Pipeline exception hierarchy.

All pipeline failures derive from :class:`PipelineError` so the presentation
boundary can catch them uniformly and hand them to
:func:`tickcast.pipeline.errors.classify`.
"""


class PipelineError(Exception):
    """Base class for extraction, transformation and cache failures."""


class QueryValidationError(PipelineError):
    """Raised when a query is empty or malformed (blank symbol, bad interval).

    Named QueryValidationError to avoid conflict with pydantic's ValidationError.
    """


class NetworkError(PipelineError):
    """Raised when a provider request cannot be completed (timeout, DNS, reset)."""


class ProviderError(PipelineError):
    """Raised when a provider answers with an error or an unusable payload.

    Args:
        message: Human-readable description
        status_code: HTTP status, or the closest equivalent for providers
            that report errors inside a 200 response
        response_body: First 500 characters of the response body
        provider: Provider name ("openweathermap", "alphavantage")
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.provider = provider


class InsufficientDataError(PipelineError):
    """Raised when a transformer receives too few points to derive analytics."""


class CacheError(PipelineError, ValueError):
    """Raised when a cache store cannot serve or accept an entry (e.g. a non-positive TTL)."""


__all__ = [
    "PipelineError",
    "QueryValidationError",
    "NetworkError",
    "ProviderError",
    "InsufficientDataError",
    "CacheError",
]
