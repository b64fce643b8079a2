"""
API Editor

Browse, open, edit and save programs hosted on remote REST/JSON APIs,
as a library, a command line tool and an MCP server.
"""

from apieditor.cache import ProgramCache
from apieditor.clients.http import HttpApiClient
from apieditor.document import ProgramDocument
from apieditor.endpoints import EndpointRegistry
from apieditor.errors import ApiEditorError, ApiError, ProtocolError, TransportError
from apieditor.models import Endpoint, RemoteProgram
from apieditor.session import ApiEditorSession, EndpointNotFoundError

__version__ = "0.1.0"


def get_mcp():
    """Get the MCP server instance. Only imports when called."""
    from apieditor.server import mcp

    return mcp


__all__ = [
    "get_mcp",
    "__version__",
    "ApiEditorSession",
    "EndpointNotFoundError",
    "EndpointRegistry",
    "HttpApiClient",
    "ProgramCache",
    "ProgramDocument",
    # Models
    "Endpoint",
    "RemoteProgram",
    # Errors
    "ApiEditorError",
    "ApiError",
    "ProtocolError",
    "TransportError",
]
