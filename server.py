#!/usr/bin/env python3
"""
API Editor MCP Server

An MCP server for browsing and editing programs hosted on remote program APIs.

Usage:
    # As MCP server (default)
    python server.py

    # Add an endpoint
    python server.py --add-endpoint "My API" https://api.example.com --username bob

This is a convenience entry point. The actual CLI is in apieditor/cli.py.
"""

from apieditor.cli import main

if __name__ == "__main__":
    main()
