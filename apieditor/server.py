"""
API Editor MCP Server initialization.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import quote, unquote

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


class ApiEditorMCP(FastMCP):
    """FastMCP server that normalizes incoming program resource URIs.

    Some clients append ``?version=...`` for cache busting, and endpoint or
    program names may arrive with spaces or already URL-encoded.
    """

    async def read_resource(self, uri):
        uri_str = str(uri)

        # Strip query parameters (e.g., ?version=1764625282944)
        if "?" in uri_str:
            uri_str = uri_str.split("?")[0]
            logger.debug("Stripped query params from resource URI")

        if "://" in uri_str:
            scheme_end = uri_str.index("://") + 3
            scheme = uri_str[:scheme_end]
            path = uri_str[scheme_end:]
            # Decode first so "my%20api" and "my api" normalize the same way
            encoded_path = quote(unquote(path), safe="/:")
            uri_str = scheme + encoded_path
            logger.debug(f"Normalized resource URI path: {path} -> {encoded_path}")

        return await super().read_resource(uri_str)


def _build_instructions() -> str:
    """Build server instructions."""
    return """# API Editor MCP Server

Browse, read and edit programs hosted on remote program APIs.

## Available Tools

- `api_status()` - Show configured endpoints, cache state and configuration
- `api_endpoints()` - List configured endpoints
- `api_list_programs(endpoint)` - List programs on an endpoint
- `api_read_program(endpoint, program)` - Fetch a program's content
- `api_write_program(endpoint, program, content)` - Replace a program's content and save it

## Recommended Workflow

1. `api_endpoints()` to see which servers are configured
2. `api_list_programs("My API")` to see what is on one of them
3. `api_read_program("My API", "hello.py")` to get the current content
4. `api_write_program("My API", "hello.py", "print(2)")` to save a new version

Endpoints are referenced by name or id; programs by id, full name (`hello.py`) or name.
Endpoints are managed with the `api-editor` command line (`api-editor --add-endpoint`).

## MCP Resources

- `apieditor://{endpoint}/{program}` - Program content (served from cache when available)
"""


@asynccontextmanager
async def lifespan(app: FastMCP) -> AsyncIterator[None]:
    """Lifespan context manager for the MCP server."""
    from apieditor.api import close_session, get_session

    session = get_session()
    if not session.endpoints():
        logger.warning("No endpoints configured. Add one with: api-editor --add-endpoint")

    try:
        yield
    finally:
        close_session()


# Initialize FastMCP server with lifespan and instructions
mcp = ApiEditorMCP("api-editor", instructions=_build_instructions(), lifespan=lifespan)

# Import tools and resources to register them
from apieditor import (  # noqa: E402
    resources,  # noqa: F401
    tools,  # noqa: F401
)


def run():
    """Run the MCP server."""
    mcp.run()
