from .cache import TTLCache
from .errors import (
    FetchResult,
    MissingCredentialError,
    NetworkError,
    RateLimitError,
    ResolutionError,
    UpstreamError,
    UpstreamHttpError,
)
from .http_client import ProviderHttpClient
from .limiter import ConcurrencyLimiter
from .retry import BackoffPolicy, backoff_sleep, retry_call

__all__ = [
    "BackoffPolicy",
    "ConcurrencyLimiter",
    "FetchResult",
    "MissingCredentialError",
    "NetworkError",
    "ProviderHttpClient",
    "RateLimitError",
    "ResolutionError",
    "TTLCache",
    "UpstreamError",
    "UpstreamHttpError",
    "backoff_sleep",
    "retry_call",
]
