"""Exception types shared by the Forge clients.

WHY: Callers need to tell apart three very different failures: the
remote call failed, the credentials were refused, or the request was
never valid in the first place. One small hierarchy keeps that explicit.

RULES:
- Nothing in this package retries or swallows these errors
- ActivityValidationError is raised before any network call
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base class for every error raised by forge_client."""


class TransportError(ForgeError):
    """Raised when an HTTP request fails or returns a non-2xx status.

    HOW: Wraps the status code, the response body (or a summary of the
    network failure) and the requested URL. status_code is None when no
    response was received at all.
    """

    def __init__(self, status_code: int | None, message: str, url: str = "") -> None:
        self.status_code = status_code
        self.message = message
        self.url = url
        if status_code is None:
            super().__init__(f"Request to {url} failed: {message}")
        else:
            super().__init__(f"Forge API error {status_code} for {url}: {message}")


class AuthenticationError(ForgeError):
    """Raised when a token request is rejected or its response is unusable."""


class ActivityValidationError(ForgeError, ValueError):
    """Raised when an activity or work item cannot be built.

    RULES:
    - Covers unknown engines, too many inputs, duplicate parameter names
    - Message names the offending engine or parameter
    """
