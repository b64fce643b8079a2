"""
Response helpers for MCP tools.
"""

import json
from typing import Any, Dict, List, Optional

from apieditor.errors import ApiEditorError, ApiError, ProtocolError, TransportError
from apieditor.models import Endpoint, RemoteProgram


class ModelEncoder(json.JSONEncoder):
    """JSON encoder for programs and endpoints. Passwords are never part of either."""

    def default(self, obj):
        if isinstance(obj, (RemoteProgram, Endpoint)):
            return obj.to_json()
        return super().default(obj)


def make_response(data: Dict[str, Any], hint: str, compact: bool = False) -> str:
    """Create a JSON response with a hint for the model."""
    if not compact:
        data["_hint"] = hint
    return json.dumps(data, indent=2, cls=ModelEncoder)


def make_error(
    error_type: str,
    message: str,
    suggestion: str,
    did_you_mean: Optional[List[str]] = None,
    compact: bool = False,
    **details: Any,
) -> str:
    """Create an educational error response."""
    error_body: Dict[str, Any] = {"type": error_type, "message": message}
    error_body.update({k: v for k, v in details.items() if v is not None})
    if not compact:
        error_body["suggestion"] = suggestion
        if did_you_mean:
            error_body["did_you_mean"] = did_you_mean
    error: Dict[str, Any] = {"_error": error_body}
    return json.dumps(error, indent=2, cls=ModelEncoder)


def error_from_exception(exc: ApiEditorError, compact: bool = False) -> str:
    """Render a typed API failure, choosing the suggestion by error kind and status."""
    if isinstance(exc, ApiError):
        return make_error(
            error_type="api_error",
            message=str(exc),
            suggestion=exc.guidance or "The server rejected the request.",
            compact=compact,
            status=exc.status_code,
            url=exc.url,
        )
    if isinstance(exc, TransportError):
        return make_error(
            error_type="transport_error",
            message=str(exc),
            suggestion=exc.hint,
            compact=compact,
            url=exc.url,
        )
    if isinstance(exc, ProtocolError):
        return make_error(
            error_type="protocol_error",
            message=str(exc),
            suggestion=(
                "The server's response did not match the expected format. "
                "The server and client versions may not match."
            ),
            compact=compact,
            url=exc.url,
        )
    return make_error(
        error_type="error",
        message=str(exc),
        suggestion="Check the endpoint configuration with api_status().",
        compact=compact,
    )
