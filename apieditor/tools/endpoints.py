"""api_endpoints tool: list configured endpoints."""

from apieditor.server import mcp
from apieditor.tools import _helpers


@mcp.tool(annotations=_helpers.ENDPOINTS_ANNOTATIONS)
def api_endpoints(compact_output: bool = False) -> str:
    """
    <usecase>List the remote program servers this editor is configured for.</usecase>
    <instructions>
    Returns each endpoint's name, id, URL and username. Passwords are never returned.
    Use an endpoint's name (or id) as the `endpoint` argument of the other tools.
    </instructions>
    <examples>
    - api_endpoints()
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    session = _helpers.get_session()
    endpoints = session.endpoints()

    result = {"count": len(endpoints), "endpoints": [e.to_json() for e in endpoints]}

    if endpoints:
        hint = f"To browse one: api_list_programs('{endpoints[0].name}')."
    else:
        hint = "No endpoints configured. Add one with: api-editor --add-endpoint NAME URL"
    return _helpers.make_response(result, hint, compact=compact)
