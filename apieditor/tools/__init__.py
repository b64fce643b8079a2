"""
MCP tools for remote program access.

Listing and reading are read-only; api_write_program saves to the server.
"""

# Import tool modules to trigger registration with the MCP server
from apieditor.tools import (  # noqa: F401
    endpoints,
    programs,
    status,
)
