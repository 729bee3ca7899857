"""
Exception types shared across NutriCart.

Connectors raise FetchError subclasses when a paged query cannot be served:
- NetworkError: no response was received (connection refused, DNS, timeout)
- UpstreamError: the nutrition API answered with a non-2xx status

The pagination controller never lets these escape; it turns them into an
"error" outcome so the caller keeps showing the previous page.
"""

from typing import Any, Optional


class NutriCartError(Exception):
    """Base class for all NutriCart errors."""
    pass


class ConfigError(NutriCartError, RuntimeError):
    """
    Raised when a connector is missing required configuration.

    Subclasses RuntimeError so callers that already treat connector
    initialization failures as RuntimeError keep working.
    """
    pass


class FetchError(NutriCartError):
    """Base class for failures of a paged-query fetch."""

    kind = "fetch_error"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": str(self)}


class NetworkError(FetchError):
    """The request never produced a response."""

    kind = "network_error"


class UpstreamError(FetchError):
    """
    The upstream API answered with an error status.

    Attributes:
        status: HTTP status code
        status_text: HTTP reason phrase (e.g. "Too Many Requests")
        body: Parsed JSON body when available, otherwise the raw text
    """

    kind = "upstream_error"

    def __init__(self, status: int, status_text: str = "", body: Optional[Any] = None) -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(f"{status} - {status_text}" if status_text else str(status))

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "status": self.status,
            "status_text": self.status_text,
            "body": self.body,
        })
        return data


class ProfileNotFound(NutriCartError, KeyError):
    """Raised when a user profile does not exist in the profile store."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(user_id)

    def __str__(self) -> str:
        return f"No profile for user '{self.user_id}'"
