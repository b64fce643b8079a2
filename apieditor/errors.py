"""
Error taxonomy for remote program operations.

Every failure of a list/get/save call surfaces as one of:

- ``TransportError``: the request never produced an HTTP response
  (DNS, refused connection, timeout, broken stream).
- ``ProtocolError``: the server answered 2xx but the body was not the
  expected JSON envelope.
- ``ApiError``: the server answered with a status outside [200, 300).

Guidance text is looked up by status code or exception category, never by
matching message text.
"""

from typing import Optional

import requests

_STATUS_GUIDANCE = {
    401: "Authentication failed. Check the username and password for this endpoint.",
    403: "Access forbidden. This account does not have permission for the resource.",
    404: "Resource not found. The program or endpoint path does not exist.",
}
_SERVER_ERROR_GUIDANCE = "Server error. Try again later or contact the API administrator."

_TRANSPORT_HINTS = {
    "timeout": "The connection timed out. The server might be slow or overloaded.",
    "connection": (
        "The server could not be reached. Check that the URL is correct, "
        "the server is running, and your network allows the connection."
    ),
    "other": "The request failed before a response was received. Check your connectivity.",
}


class ApiEditorError(Exception):
    """Base class for all remote program errors."""

    def __init__(self, message: str, endpoint_id: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.endpoint_id = endpoint_id
        self.url = url


class TransportError(ApiEditorError):
    """No HTTP response was received."""

    def __init__(
        self,
        endpoint_id: Optional[str],
        url: str,
        cause: str,
        category: str = "other",
    ):
        super().__init__(
            f"Connection error with endpoint {endpoint_id} ({url}): {cause}",
            endpoint_id=endpoint_id,
            url=url,
        )
        self.cause = cause
        self.category = category

    @classmethod
    def from_exception(cls, endpoint_id: Optional[str], url: str, exc: Exception) -> "TransportError":
        return cls(endpoint_id, url, str(exc) or type(exc).__name__, transport_category(exc))

    @property
    def hint(self) -> str:
        return _TRANSPORT_HINTS.get(self.category, _TRANSPORT_HINTS["other"])


class ProtocolError(ApiEditorError):
    """The response body did not have the expected shape."""


class ApiError(ApiEditorError):
    """The server rejected the request."""

    def __init__(
        self,
        status_code: int,
        server_message: str = "",
        endpoint_id: Optional[str] = None,
        url: Optional[str] = None,
    ):
        message = f"API request failed with status {status_code}"
        if server_message:
            message += f". Server message: {server_message}"
        super().__init__(message, endpoint_id=endpoint_id, url=url)
        self.status_code = status_code
        self.server_message = server_message

    @property
    def guidance(self) -> Optional[str]:
        return status_guidance(self.status_code)


def status_guidance(status_code: int) -> Optional[str]:
    """Human guidance for an HTTP status, or None when there is nothing specific to say."""
    if status_code >= 500:
        return _SERVER_ERROR_GUIDANCE
    return _STATUS_GUIDANCE.get(status_code)


def transport_category(exc: Exception) -> str:
    """Classify a transport exception by type: 'timeout', 'connection' or 'other'."""
    # ConnectTimeout subclasses both, so check timeouts first
    if isinstance(exc, requests.Timeout):
        return "timeout"
    if isinstance(exc, requests.ConnectionError):
        return "connection"
    return "other"
