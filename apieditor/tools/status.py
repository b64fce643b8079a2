"""api_status tool: configured endpoints, cache state and configuration."""

from apieditor.server import mcp
from apieditor.tools import _helpers


@mcp.tool(annotations=_helpers.STATUS_ANNOTATIONS)
def api_status(compact_output: bool = False) -> str:
    """
    <usecase>Check the API editor configuration and cache state.</usecase>
    <instructions>
    Returns the configured endpoints, how many programs are cached for each,
    and the active configuration. Makes no network requests.
    Use this first when a tool reports that an endpoint cannot be found.
    </instructions>
    <examples>
    - api_status()
    - api_status(compact_output=True)  # Omit hints
    </examples>
    """
    compact = _helpers.is_compact(compact_output)

    try:
        session = _helpers.get_session()
    except Exception as e:
        result = {"configured": False, "error": str(e)}
        hint = "Check the endpoint configuration file, or re-create it with: api-editor --add-endpoint"
        return _helpers.make_response(result, hint, compact=compact)

    from apieditor import api

    endpoints = session.endpoints()
    result = {
        "configured": bool(endpoints),
        "endpoint_count": len(endpoints),
        "endpoints": [
            {
                "name": e.name,
                "url": e.url,
                "cached_programs": len(session.cache.programs(e.id)),
            }
            for e in endpoints
        ],
        "cached_programs": len(session.cache),
        "config": {
            "config_file": str(session.registry.path),
            "timeout_seconds": session.timeout,
            "credential_backend": api.CREDENTIAL_BACKEND,
            "compact_mode": _helpers.is_compact(),
        },
    }

    if endpoints:
        hint = (
            f"{len(endpoints)} endpoint(s) configured. "
            f"Use api_list_programs('{endpoints[0].name}') to see its programs."
        )
    else:
        hint = "No endpoints configured. Add one with: api-editor --add-endpoint NAME URL --username USER"

    return _helpers.make_response(result, hint, compact=compact)
