"""Program tools: list, read and write programs on an endpoint.

Network calls run in a worker thread so the server's event loop never
blocks on I/O.
"""

import asyncio

from apieditor.server import mcp
from apieditor.tools import _helpers


@mcp.tool(annotations=_helpers.LIST_ANNOTATIONS)
async def api_list_programs(endpoint: str, compact_output: bool = False) -> str:
    """
    <usecase>List the programs stored on a remote endpoint.</usecase>
    <instructions>
    Fetches the current program list from the server and refreshes the local cache.
    Results include each program's id, full name and last-modified timestamp.
    </instructions>
    <parameters>
    - endpoint: Endpoint name or id (see api_endpoints())
    </parameters>
    <examples>
    - api_list_programs("Production")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    session = _helpers.get_session()

    target, error = _helpers.resolve_endpoint(session, endpoint, compact=compact)
    if error:
        return error

    try:
        programs = await asyncio.to_thread(session.list_programs, target)
    except _helpers.ApiEditorError as e:
        return _helpers.error_from_exception(e, compact=compact)

    items = sorted((_helpers.program_summary(p) for p in programs), key=lambda x: x["name"])
    result = {"endpoint": target.name, "count": len(items), "programs": items}

    if items:
        hint = (
            f"Found {len(items)} programs. "
            f"To read one: api_read_program('{target.name}', '{items[0]['name']}')."
        )
    else:
        hint = f"No programs on '{target.name}'."
    return _helpers.make_response(result, hint, compact=compact)


@mcp.tool(annotations=_helpers.READ_ANNOTATIONS)
async def api_read_program(endpoint: str, program: str, compact_output: bool = False) -> str:
    """
    <usecase>Read the current content of a remote program.</usecase>
    <instructions>
    Fetches the program from the server, records it in the cache and opens it
    as a document. Returns the full text content. If an earlier save failed,
    the unsaved edit is returned and `unsaved_changes` is true.
    </instructions>
    <parameters>
    - endpoint: Endpoint name or id
    - program: Program id, full name ("hello.py") or name ("hello")
    </parameters>
    <examples>
    - api_read_program("Production", "hello.py")
    - api_read_program("Production", "42")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    session = _helpers.get_session()

    target, error = _helpers.resolve_endpoint(session, endpoint, compact=compact)
    if error:
        return error

    try:
        found, error = await asyncio.to_thread(
            _helpers.resolve_program, session, target, program, compact
        )
        if error:
            return error
        document = await asyncio.to_thread(session.open_program, target, found.id)
    except _helpers.ApiEditorError as e:
        return _helpers.error_from_exception(e, compact=compact)

    current = document.program
    result = {
        "endpoint": target.name,
        "document": document.display_name,
        "path": document.path,
        **_helpers.program_summary(current),
        "content": document.text,
        "unsaved_changes": document.is_dirty,
    }
    if document.is_dirty:
        hint = (
            "This content has unsaved edits from a failed save. To retry: "
            f"api_write_program('{target.name}', '{current.full_name}', content='...')."
        )
    else:
        hint = (
            "To save changes: "
            f"api_write_program('{target.name}', '{current.full_name}', content='...')."
        )
    return _helpers.make_response(result, hint, compact=compact)


@mcp.tool(annotations=_helpers.WRITE_ANNOTATIONS)
async def api_write_program(
    endpoint: str, program: str, content: str, compact_output: bool = False
) -> str:
    """
    <usecase>Replace a remote program's content and save it to the server.</usecase>
    <instructions>
    Writes `content` into the program's document and saves it. On success the
    server's copy (with its new last-modified timestamp) replaces the cached one.
    If the save fails, the edit is kept in the open document and the error is
    returned; calling this tool again retries the save.
    </instructions>
    <parameters>
    - endpoint: Endpoint name or id
    - program: Program id, full name or name
    - content: The complete new text of the program
    </parameters>
    <examples>
    - api_write_program("Production", "hello.py", "print(2)")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    session = _helpers.get_session()

    target, error = _helpers.resolve_endpoint(session, endpoint, compact=compact)
    if error:
        return error

    try:
        found, error = await asyncio.to_thread(
            _helpers.resolve_program, session, target, program, compact
        )
        if error:
            return error

        document = session.document(target.id, found.id)
        if document is None:
            document = await asyncio.to_thread(session.open_program, target, found.id)

        document.write(content.encode("utf-8"))
        saved = await asyncio.to_thread(session.save_document, document)
    except _helpers.ApiEditorError as e:
        return _helpers.error_from_exception(e, compact=compact)

    result = {
        "endpoint": target.name,
        "saved": True,
        **_helpers.program_summary(saved),
        "size": document.length,
    }
    hint = f"Saved {saved.full_name} to {target.name}."
    return _helpers.make_response(result, hint, compact=compact)
