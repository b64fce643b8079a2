#!/usr/bin/env python3
"""
CLI entry point for the API editor.

Usage:
    # Add an endpoint (prompts for the password)
    api-editor --add-endpoint "My API" https://api.example.com --username bob

    # As MCP server (default)
    api-editor

    # Inspect a server from the shell
    api-editor --list-programs "My API"
    api-editor --show "My API" hello.py
"""

import argparse
import getpass
import logging
import os
import sys
from importlib.metadata import version as pkg_version
from typing import Optional

from apieditor._style import error, header, success, table

try:
    _VERSION = pkg_version("api-editor-mcp")
except Exception:
    _VERSION = "dev"


def _configure_logging(level: str) -> None:
    # stdout carries the MCP transport, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _prompt_password(label: str) -> Optional[str]:
    """Prompt for a password. Empty input means 'no password'."""
    try:
        password = getpass.getpass(f"  Password for {label} (leave empty for none): ")
    except (EOFError, KeyboardInterrupt):
        print("\nCancelled.")
        sys.exit(0)
    return password or None


def _fail(message: str) -> None:
    print(error(message), file=sys.stderr)
    sys.exit(1)


def _handle_add(session, args) -> None:
    from apieditor.models import Endpoint

    name, url = args.add_endpoint
    endpoint = Endpoint(name=name, url=url, username=args.username)
    try:
        session.registry.add(endpoint)
    except ValueError as e:
        _fail(str(e))

    if endpoint.username:
        password = _prompt_password(endpoint.name)
        if password is not None:
            session.credentials.set_password(endpoint.id, password)
    print(success(f"Added endpoint '{endpoint.name}' ({endpoint.url}) id={endpoint.id}"))


def _handle_update(session, args) -> None:
    from dataclasses import replace

    endpoint = session.registry.find(args.update_endpoint)
    if endpoint is None:
        _fail(f"Endpoint not found: '{args.update_endpoint}'")

    changes = {}
    if args.name:
        changes["name"] = args.name
    if args.url:
        changes["url"] = args.url
    if args.username is not None:
        changes["username"] = args.username or None
    try:
        updated = session.registry.update(replace(endpoint, **changes))
    except ValueError as e:
        _fail(str(e))
    print(success(f"Updated endpoint '{updated.name}'"))


def _handle_remove(session, ref: str) -> None:
    from apieditor.session import EndpointNotFoundError

    try:
        endpoint = session.remove_endpoint(ref)
    except EndpointNotFoundError as e:
        _fail(str(e))
    print(success(f"Removed endpoint '{endpoint.name}' and its stored password"))


def _handle_set_password(session, ref: str) -> None:
    endpoint = session.registry.find(ref)
    if endpoint is None:
        _fail(f"Endpoint not found: '{ref}'")
    password = _prompt_password(endpoint.name)
    if password is None:
        session.credentials.clear_password(endpoint.id)
        print(success(f"Cleared password for '{endpoint.name}'"))
    else:
        session.credentials.set_password(endpoint.id, password)
        print(success(f"Stored password for '{endpoint.name}'"))


def _handle_list_endpoints(session) -> None:
    endpoints = session.endpoints()
    if not endpoints:
        print("  No endpoints configured. Add one with: api-editor --add-endpoint NAME URL")
        return
    rows = [[e.name, e.url, e.username or "", e.id] for e in endpoints]
    print(table(rows, ["NAME", "URL", "USERNAME", "ID"]))


def _handle_list_programs(session, ref: str) -> None:
    from apieditor.errors import ApiEditorError
    from apieditor.session import EndpointNotFoundError

    try:
        programs = session.submit(session.list_programs, ref).result()
    except (ApiEditorError, EndpointNotFoundError) as e:
        _fail(_describe(e))
    rows = [[p.id or "", p.full_name, str(p.last_modified)] for p in programs]
    rows.sort(key=lambda r: r[1])
    print(table(rows, ["ID", "NAME", "LAST MODIFIED"]))


def _handle_show(session, ref: str, program_ref: str) -> None:
    from apieditor.errors import ApiEditorError
    from apieditor.lookup import find_program
    from apieditor.session import EndpointNotFoundError

    try:
        programs = session.submit(session.list_programs, ref).result()
        found = find_program(program_ref, programs)
        if found is None:
            _fail(f"Program not found: '{program_ref}'")
        document = session.submit(session.open_program, ref, found.id).result()
    except (ApiEditorError, EndpointNotFoundError) as e:
        _fail(_describe(e))
    sys.stdout.write(document.text)
    if document.text and not document.text.endswith("\n"):
        sys.stdout.write("\n")


def _describe(exc: Exception) -> str:
    from apieditor.errors import ApiError, TransportError

    message = str(exc)
    if isinstance(exc, ApiError) and exc.guidance:
        message += f"\n    {exc.guidance}"
    elif isinstance(exc, TransportError):
        message += f"\n    {exc.hint}"
    return message


def main():
    """Main entry point - handle CLI args or run MCP server."""
    parser = argparse.ArgumentParser(
        description="Browse and edit programs hosted on remote program APIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add an endpoint (prompts for the password)
  api-editor --add-endpoint "My API" https://api.example.com --username bob

  # List configured endpoints
  api-editor --list-endpoints

  # List programs on an endpoint
  api-editor --list-programs "My API"

  # Print a program
  api-editor --show "My API" hello.py

  # Run as MCP server
  api-editor
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument(
        "--add-endpoint",
        nargs=2,
        metavar=("NAME", "URL"),
        help="Add an endpoint; prompts for a password when --username is given",
    )
    parser.add_argument(
        "--update-endpoint",
        metavar="ENDPOINT",
        help="Update an endpoint's --name, --url or --username",
    )
    parser.add_argument("--name", help="With --update-endpoint: new display name")
    parser.add_argument("--url", help="With --update-endpoint: new base URL")
    parser.add_argument("--username", help="Username for HTTP Basic authentication")
    parser.add_argument(
        "--remove-endpoint",
        metavar="ENDPOINT",
        help="Remove an endpoint and its stored password",
    )
    parser.add_argument(
        "--set-password",
        metavar="ENDPOINT",
        help="Store (or clear, with empty input) the password for an endpoint",
    )
    parser.add_argument("--list-endpoints", action="store_true", help="List configured endpoints")
    parser.add_argument("--list-programs", metavar="ENDPOINT", help="List programs on an endpoint")
    parser.add_argument(
        "--show",
        nargs=2,
        metavar=("ENDPOINT", "PROGRAM"),
        help="Print a program's content",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("APIEDITOR_LOG_LEVEL", "WARNING"),
        help="Logging level for stderr output (default: WARNING)",
    )

    args = parser.parse_args()
    _configure_logging(args.log_level)

    management = (
        args.add_endpoint
        or args.update_endpoint
        or args.remove_endpoint
        or args.set_password
        or args.list_endpoints
        or args.list_programs
        or args.show
    )
    if not management:
        # MCP server mode - only now import the full server
        from apieditor.server import run

        run()
        return

    from apieditor.api import close_session, get_session

    if sys.stdout.isatty():
        print(header(_VERSION))
        print()

    try:
        session = get_session()
    except RuntimeError as e:
        _fail(str(e))

    try:
        if args.add_endpoint:
            _handle_add(session, args)
        elif args.update_endpoint:
            _handle_update(session, args)
        elif args.remove_endpoint:
            _handle_remove(session, args.remove_endpoint)
        elif args.set_password:
            _handle_set_password(session, args.set_password)
        elif args.list_endpoints:
            _handle_list_endpoints(session)
        elif args.list_programs:
            _handle_list_programs(session, args.list_programs)
        elif args.show:
            _handle_show(session, *args.show)
    finally:
        close_session()


if __name__ == "__main__":
    main()
