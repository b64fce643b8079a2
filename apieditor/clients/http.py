"""
HTTP client for a remote program API.

One client talks to one endpoint. The wire protocol is plain REST/JSON:

    GET  <base>/       -> {"programs": [...]}
    GET  <base>/<id>   -> {"program": {...}}
    PUT  <base>/<id>   {"content": "..."} -> {"program": {...}}

Each call makes exactly one attempt; failures are raised as the typed
errors from ``apieditor.errors``.
"""

import base64
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from apieditor.errors import ApiError, ProtocolError, TransportError
from apieditor.models import CredentialStoreProtocol, Endpoint, RemoteProgram

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

PROGRAMS_PATH = "/"
PROGRAM_PATH = "/{}"


def make_http_session() -> requests.Session:
    """Create a requests session that never retries on its own."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class HttpApiClient:
    """Client for one endpoint's program API."""

    def __init__(
        self,
        endpoint: Endpoint,
        credentials: Optional[CredentialStoreProtocol] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.credentials = credentials
        self.timeout = timeout
        self._session = session if session is not None else make_http_session()

    def list_programs(self) -> List[RemoteProgram]:
        """Fetch program metadata for every program on the endpoint."""
        url, data = self._request("GET", PROGRAMS_PATH)

        if "programs" not in data:
            raise ProtocolError(
                "Invalid response format: 'programs' field not found",
                endpoint_id=self.endpoint.id,
                url=url,
            )
        programs = data["programs"]
        if not isinstance(programs, list):
            raise ProtocolError(
                "Invalid response format: 'programs' is not an array",
                endpoint_id=self.endpoint.id,
                url=url,
            )

        result = []
        for item in programs:
            if not isinstance(item, dict):
                raise ProtocolError(
                    f"Invalid program record: {str(item)[:100]}",
                    endpoint_id=self.endpoint.id,
                    url=url,
                )
            result.append(RemoteProgram.from_json(item))
        return result

    def get_program(self, program_id: str) -> RemoteProgram:
        """Fetch one program with its content."""
        url, data = self._request("GET", PROGRAM_PATH.format(quote(str(program_id), safe="")))
        return self._unwrap_program(url, data)

    def save_program(self, program: RemoteProgram) -> RemoteProgram:
        """Store a program's content and return the server's canonical copy."""
        if not program.id:
            raise ValueError("Cannot save a program without an id")
        url, data = self._request(
            "PUT",
            PROGRAM_PATH.format(quote(program.id, safe="")),
            body={"content": program.content},
        )
        return self._unwrap_program(url, data)

    def _unwrap_program(self, url: str, data: Dict[str, Any]) -> RemoteProgram:
        if "program" not in data:
            raise ProtocolError(
                "Invalid response format: 'program' field not found",
                endpoint_id=self.endpoint.id,
                url=url,
            )
        if not isinstance(data["program"], dict):
            raise ProtocolError(
                "Invalid response format: 'program' is not an object",
                endpoint_id=self.endpoint.id,
                url=url,
            )
        return RemoteProgram.from_json(data["program"])

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        username = self.endpoint.username
        password = self.credentials.get_password(self.endpoint.id) if self.credentials else None
        if username and password is not None:
            headers["Authorization"] = basic_auth_header(username, password)
            logger.debug("Added authentication header for user: %s", username)
        else:
            # Send anyway; the server decides whether anonymous access is allowed
            logger.warning("Missing credentials for endpoint: %s", self.endpoint.name)
        return headers

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None):
        """Send one request and return ``(url, parsed JSON object)``."""
        url = self.endpoint.base_url + path
        logger.info("Sending %s request to %s", method, url)

        payload = None
        if body is not None:
            payload = json.dumps(body)
            logger.debug("Request body: %s", payload)

        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(),
                data=payload.encode("utf-8") if payload is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            error = TransportError.from_exception(self.endpoint.id, url, e)
            logger.error("%s", error)
            raise error from e

        logger.info("Received response code: %d from %s", response.status_code, url)

        if not 200 <= response.status_code < 300:
            try:
                server_message = (response.text or "").strip()
            except (requests.RequestException, ValueError):
                server_message = ""
            error = ApiError(
                response.status_code,
                server_message,
                endpoint_id=self.endpoint.id,
                url=url,
            )
            logger.error("%s", error)
            raise error

        if not response.text or not response.text.strip():
            raise ProtocolError(
                "Empty response from API", endpoint_id=self.endpoint.id, url=url
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Invalid JSON from API: {e}\nResponse was: {response.text[:200]}",
                endpoint_id=self.endpoint.id,
                url=url,
            ) from e

        if not isinstance(data, dict):
            raise ProtocolError(
                f"Unexpected API response format: {str(data)[:200]}",
                endpoint_id=self.endpoint.id,
                url=url,
            )

        logger.debug("Received response: %s", response.text[:500])
        return url, data

    def close(self) -> None:
        self._session.close()
