"""
Configuration and the process-wide session used by the CLI and MCP server.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from apieditor.clients.http import DEFAULT_TIMEOUT
from apieditor.credentials import create_credential_store
from apieditor.endpoints import ENDPOINTS_FILENAME, EndpointRegistry
from apieditor.session import ApiEditorSession

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Invalid %s value %r, using default of %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, using default of %s", name, default)
        return default
    return value


# Configuration - env vars first, then defaults
APIEDITOR_CONFIG_DIR = Path(
    os.environ.get("APIEDITOR_CONFIG_DIR") or Path.home() / ".apieditor"
).expanduser()
ENDPOINTS_FILE = APIEDITOR_CONFIG_DIR / ENDPOINTS_FILENAME
REQUEST_TIMEOUT = _env_number("APIEDITOR_TIMEOUT", DEFAULT_TIMEOUT, float)
WORKERS = _env_number("APIEDITOR_WORKERS", 4, int)
CREDENTIAL_BACKEND = os.environ.get("APIEDITOR_CREDENTIALS", "keyring").strip().lower()

# --- Singleton session ---
_session_singleton: Optional[ApiEditorSession] = None


def create_session(config_dir: Optional[Path] = None) -> ApiEditorSession:
    """Build a session from the environment configuration."""
    credentials = create_credential_store(CREDENTIAL_BACKEND)
    path = (Path(config_dir) / ENDPOINTS_FILENAME) if config_dir else ENDPOINTS_FILE
    registry = EndpointRegistry(path, credentials=credentials)
    return ApiEditorSession(
        registry,
        credentials=credentials,
        timeout=REQUEST_TIMEOUT,
        max_workers=WORKERS,
    )


def get_session() -> ApiEditorSession:
    """
    Get or initialize the process-wide session.

    Uses a singleton so the registry, cache and open documents are shared by
    every tool call in this process.
    """
    global _session_singleton

    if _session_singleton is None:
        _session_singleton = create_session()
        logger.info(
            "Session initialized with %d endpoints from %s",
            len(_session_singleton.registry),
            _session_singleton.registry.path,
        )
    return _session_singleton


def close_session() -> None:
    global _session_singleton

    if _session_singleton is not None:
        _session_singleton.close()
        _session_singleton = None
