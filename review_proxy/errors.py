"""
Error taxonomy shared by the service and web layers.

The web layer maps each class to an HTTP status; everything else just raises.
"""

from typing import Any, List, Optional


class ReviewProxyError(Exception):
    """Base exception for review proxy errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReviewProxyError):
    """Missing or malformed request fields."""

    status_code = 400


class AuthError(ReviewProxyError):
    """Bad credentials (401) or a missing/invalid token (401/403)."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(ReviewProxyError):
    """A third-party API call failed."""

    status_code = 502

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.detail = detail


class UpstreamFetchError(UpstreamError):
    """Fetching reviews from Judge.me failed."""


class UpstreamSubmitError(UpstreamError):
    """Judge.me rejected a submitted review."""

    def __init__(self, message: str, detail: Any = None, uploaded_urls: Optional[List[str]] = None):
        super().__init__(message, detail)
        self.uploaded_urls = uploaded_urls or []
