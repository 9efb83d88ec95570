"""Custom error classes for upstream provider access."""

from typing import Optional


class UpstreamError(Exception):
    """Base exception for upstream ranking-service errors with status code tracking."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        """
        Initialize UpstreamError.

        Args:
            message: Error message
            status_code: HTTP status code of the failing response, if any
            url: Requested URL
        """
        super().__init__(message)
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.url: Optional[str] = url

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code:
            return f"Upstream Error {self.status_code}: {self.message}"
        return f"Upstream Error: {self.message}"


class UpstreamHTTPError(UpstreamError):
    """Non-retryable upstream status."""

    pass


class UpstreamRetryExhaustedError(UpstreamError):
    """Rate limiting, server errors or network failures persisted through every retry."""

    pass


class MissingCredentialsError(UpstreamError):
    """Provider credentials are not configured outside mock mode."""

    pass
