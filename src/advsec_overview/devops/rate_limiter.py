"""
Rate limit tracking for Azure DevOps API requests.

Azure DevOps reports its throttling budget in response headers. The
tracker records them and warns when the budget runs low; it never
delays or retries a request.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimitInfo:
    """Information about current rate limit status."""

    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset_time: Optional[datetime] = None
    retry_after: Optional[float] = None


class RateLimitTracker:
    """
    Tracks throttling headers returned by Azure DevOps.

    Headers are only present once a caller starts being throttled, so
    every field stays ``None`` until the first throttled response.
    """

    def __init__(self, min_remaining: int = 100):
        """
        Initialize tracker.

        Args:
            min_remaining: Remaining budget below which a warning is logged
        """
        self.min_remaining = min_remaining
        self._rate_limit = RateLimitInfo()
        self._throttled_responses = 0

    @property
    def rate_limit(self) -> RateLimitInfo:
        """Get current rate limit info."""
        return self._rate_limit

    @property
    def throttled_responses(self) -> int:
        """Number of responses that carried a Retry-After header."""
        return self._throttled_responses

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """
        Update rate limit info from response headers.

        Args:
            headers: Response headers (case-insensitive mapping)
        """
        try:
            if headers.get("x-ratelimit-limit"):
                self._rate_limit.limit = int(float(headers["x-ratelimit-limit"]))
            if headers.get("x-ratelimit-remaining"):
                self._rate_limit.remaining = int(float(headers["x-ratelimit-remaining"]))

            reset_timestamp = headers.get("x-ratelimit-reset")
            if reset_timestamp:
                self._rate_limit.reset_time = datetime.fromtimestamp(int(float(reset_timestamp)))
        except (ValueError, TypeError, OverflowError, OSError):
            pass  # Keep existing values if parsing fails

        retry_after = self.get_retry_after(headers)
        if retry_after is not None:
            self._rate_limit.retry_after = retry_after
            self._throttled_responses += 1

        remaining = self._rate_limit.remaining
        if remaining is not None and remaining < self.min_remaining:
            logger.warning(
                f"Azure DevOps rate limit low: {remaining} remaining. "
                f"Resets at {self._rate_limit.reset_time}"
            )

    @staticmethod
    def get_retry_after(headers: Mapping[str, str]) -> Optional[float]:
        """
        Get retry-after value from headers.

        Args:
            headers: Response headers

        Returns:
            Seconds the server asked to wait, or None if not specified
        """
        retry_after = headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass
        return None
