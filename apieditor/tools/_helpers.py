"""
Shared helpers and re-exports for MCP tool modules.

Tool modules access commonly-patched names through this module
(e.g., ``_helpers.get_session()``) so that a single
``unittest.mock.patch`` target works for all tools.
"""

import os
from typing import Optional, Tuple

from mcp.types import ToolAnnotations

# --- Re-exports (commonly patched in tests) ---

from apieditor.api import get_session  # noqa: F401
from apieditor.errors import ApiEditorError  # noqa: F401
from apieditor.lookup import find_program, similar_endpoints, similar_programs
from apieditor.models import Endpoint, RemoteProgram
from apieditor.responses import error_from_exception, make_error, make_response  # noqa: F401
from apieditor.session import ApiEditorSession


def is_compact(compact_output: bool = False) -> bool:
    """Compact when requested per call or via APIEDITOR_COMPACT."""
    if compact_output:
        return True
    return os.environ.get("APIEDITOR_COMPACT", "").strip().lower() in ("1", "true", "yes")


def resolve_endpoint(
    session: ApiEditorSession, ref: str, compact: bool = False
) -> Tuple[Optional[Endpoint], Optional[str]]:
    """Find an endpoint by id or name.

    Returns:
        Tuple of (endpoint, None) if found, or (None, error_json_str) if not found.
    """
    endpoint = session.registry.find(ref)
    if endpoint is not None:
        return endpoint, None

    endpoints = session.endpoints()
    if not endpoints:
        suggestion = "No endpoints are configured. Add one with: api-editor --add-endpoint NAME URL"
    else:
        suggestion = "Use api_endpoints() to see the configured endpoints."
    return None, make_error(
        error_type="endpoint_not_found",
        message=f"Endpoint not found: '{ref}'",
        suggestion=suggestion,
        did_you_mean=similar_endpoints(ref, endpoints) or None,
        compact=compact,
    )


def resolve_program(
    session: ApiEditorSession, endpoint: Endpoint, ref: str, compact: bool = False
) -> Tuple[Optional[RemoteProgram], Optional[str]]:
    """Find a program by id, full name or name.

    Uses the cached listing first and re-lists the endpoint only on a miss.
    Blocks on the network in that case, so call it from a worker thread.
    """
    program = find_program(ref, session.cache.programs(endpoint.id))
    if program is not None:
        return program, None

    programs = session.list_programs(endpoint)
    program = find_program(ref, programs)
    if program is not None:
        return program, None

    return None, make_error(
        error_type="program_not_found",
        message=f"Program not found on '{endpoint.name}': '{ref}'",
        suggestion=f"Use api_list_programs('{endpoint.name}') to see available programs.",
        did_you_mean=similar_programs(ref, programs) or None,
        compact=compact,
    )


def program_summary(program: RemoteProgram) -> dict:
    return {
        "id": program.id,
        "name": program.full_name,
        "last_modified": program.last_modified,
    }


# --- Tool annotations ---

# Base annotations for read-only operations
_BASE_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,  # Configured private servers, not open world
}

STATUS_ANNOTATIONS = ToolAnnotations(
    title="Check API Editor Status",
    **_BASE_ANNOTATIONS,
)

ENDPOINTS_ANNOTATIONS = ToolAnnotations(
    title="List API Endpoints",
    **_BASE_ANNOTATIONS,
)

LIST_ANNOTATIONS = ToolAnnotations(
    title="List Remote Programs",
    **_BASE_ANNOTATIONS,
)

READ_ANNOTATIONS = ToolAnnotations(
    title="Read Remote Program",
    **_BASE_ANNOTATIONS,
)

WRITE_ANNOTATIONS = ToolAnnotations(
    title="Save Remote Program",
    readOnlyHint=False,
    destructiveHint=True,  # Overwrites the stored content
    idempotentHint=True,
    openWorldHint=False,
)
