"""
Remote program API transport backends.

Provides the HTTP (REST/JSON) client implementation.
"""

from apieditor.clients.http import (  # noqa: F401
    DEFAULT_TIMEOUT,
    HttpApiClient,
    basic_auth_header,
    make_http_session,
)
