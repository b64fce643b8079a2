"""
MCP resources for remote programs.

Provides:
- apieditor://{endpoint}/{program} - program content

Content comes from the cache when it already holds the program's text;
otherwise the program is fetched (and cached) first. Network calls run in
a worker thread.
"""

import asyncio
import logging
from urllib.parse import unquote

from apieditor.server import mcp

logger = logging.getLogger(__name__)


@mcp.resource(
    "apieditor://{endpoint}/{program}",
    name="Remote program",
    description="Content of a program on a configured endpoint",
    mime_type="text/plain",
)
async def program_resource(endpoint: str, program: str) -> str:
    from apieditor.lookup import find_program
    from apieditor.tools import _helpers

    session = _helpers.get_session()
    endpoint_ref = unquote(endpoint)
    program_ref = unquote(program)

    target = session.resolve_endpoint(endpoint_ref)
    found = find_program(program_ref, session.cache.programs(target.id))
    if found is None:
        programs = await asyncio.to_thread(session.list_programs, target)
        found = find_program(program_ref, programs)
    if found is None:
        raise ValueError(f"Program not found on '{target.name}': '{program_ref}'")

    cached = session.lookup(target.id, found.id)
    if cached is not None and cached.content is not None:
        logger.debug("Serving %s from cache", cached.full_name)
        return cached.content

    fetched = await asyncio.to_thread(session.fetch_program, target, found.id)
    return fetched.content or ""
