"""Azure DevOps API client module."""

from .alerts import EnabledCounter, RepositoryAlertsLoader
from .client import DevOpsClient, FetchError, HttpError, NetworkError, build_headers
from .projects import ProjectAggregator, parse_refs
from .rate_limiter import RateLimitInfo, RateLimitTracker

__all__ = [
    "DevOpsClient",
    "EnabledCounter",
    "FetchError",
    "HttpError",
    "NetworkError",
    "ProjectAggregator",
    "RateLimitInfo",
    "RateLimitTracker",
    "RepositoryAlertsLoader",
    "build_headers",
    "parse_refs",
]
