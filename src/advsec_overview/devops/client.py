"""
Azure DevOps API client.

Provides the single-request fetch used by every stage of the pipeline
and the URL builders for the three endpoints it talks to. Each call is
one best-effort attempt: there is no retry and no backoff.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..core.config import AzureDevOpsSettings
from .rate_limiter import RateLimitTracker

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base exception for a failed API call."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class HttpError(FetchError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"API returned status {status_code}", url)
        self.status_code = status_code


class NetworkError(FetchError):
    """Raised when the call cannot complete or the body is not JSON."""
    pass


def build_headers(token: str) -> dict[str, str]:
    """Headers attached to every outbound request."""
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


class DevOpsClient:
    """
    Async Azure DevOps API client.

    Usage:
        async with DevOpsClient(settings, token) as client:
            data = await client.fetch(client.projects_url())

    Not thread-safe. Create one instance per event loop.
    """

    def __init__(
        self,
        settings: AzureDevOpsSettings,
        token: Optional[str] = None,
        alerts_page_size: int = 10000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Azure DevOps configuration
            token: Bearer token; falls back to ``settings.token``
            alerts_page_size: ``top`` value sent to the alerts endpoint
            transport: Optional httpx transport (used to simulate the API)
        """
        token = token if token is not None else settings.token
        if not token:
            raise ValueError("Azure DevOps token is required")
        if not settings.organization:
            raise ValueError("Azure DevOps organization is required")

        self.settings = settings
        self.alerts_page_size = alerts_page_size
        self.rate_limiter = RateLimitTracker()
        self._headers = build_headers(token)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DevOpsClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        kwargs: dict[str, Any] = {
            "headers": self._headers,
            "follow_redirects": True,
        }
        if self.settings.timeout is not None:
            kwargs["timeout"] = self.settings.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport

        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not connected."""
        if not self._client:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")
        return self._client

    async def fetch(self, url: str) -> Any:
        """
        Perform one GET request and decode the JSON body.

        Args:
            url: Absolute URL including the query string

        Returns:
            Decoded JSON value

        Raises:
            HttpError: If the response status is not 2xx
            NetworkError: If the request fails or the body is not JSON
        """
        logger.debug(f"GET {url}")
        try:
            response = await self.client.get(url)
        except httpx.TransportError as e:
            raise NetworkError(f"Request failed: {e}", url) from e

        self.rate_limiter.update_from_headers(response.headers)

        if not response.is_success:
            logger.debug(f"GET {url} -> {response.status_code}")
            raise HttpError(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON response: {e}", url) from e

    # Endpoints

    def projects_url(self) -> str:
        """URL listing every project of the organization."""
        return (
            f"{self.settings.organization_url}/_apis/projects"
            f"?api-version={self.settings.api_version}"
        )

    def repositories_url(self, project_id: str) -> str:
        """URL listing the Git repositories of a project."""
        return (
            f"{self.settings.organization_url}/{_segment(project_id)}/_apis/git/repositories"
            f"?api-version={self.settings.api_version}"
        )

    def alerts_url(self, project_name: str, repository_id: str) -> str:
        """URL listing active default-branch alerts of a repository."""
        return (
            f"{self.settings.advsec_organization_url}/{_segment(project_name)}"
            f"/_apis/alert/repositories/{_segment(repository_id)}/alerts"
            f"?top={self.alerts_page_size}"
            "&criteria.states=active"
            "&criteria.onlyDefaultBranchAlerts=true"
            f"&api-version={self.settings.api_version}"
        )


def _segment(value: str) -> str:
    return quote(value, safe="")
