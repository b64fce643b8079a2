"""
Shared data models for the API editor.

Contains the Endpoint and RemoteProgram dataclasses and the protocols for
API clients and credential stores.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from urllib.parse import urlparse


@runtime_checkable
class ApiClientProtocol(Protocol):
    """Protocol defining the interface for remote program API clients."""

    def list_programs(self) -> List["RemoteProgram"]: ...
    def get_program(self, program_id: str) -> "RemoteProgram": ...
    def save_program(self, program: "RemoteProgram") -> "RemoteProgram": ...


@runtime_checkable
class CredentialStoreProtocol(Protocol):
    """Protocol for password storage keyed by endpoint id."""

    def get_password(self, endpoint_id: str) -> Optional[str]: ...
    def set_password(self, endpoint_id: str, password: str) -> None: ...
    def clear_password(self, endpoint_id: str) -> None: ...


@dataclass
class Endpoint:
    """A configured remote server hosting programs.

    The password is never a field; it lives in a credential store keyed by ``id``.
    """

    name: str
    url: str
    username: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.name

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    def validate(self) -> None:
        """Raise ValueError unless name is set and url is an absolute http(s) URL."""
        if not self.id:
            raise ValueError("Endpoint id must not be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Endpoint name must not be empty")
        parsed = urlparse(self.url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Endpoint URL must be an absolute http(s) URL: {self.url!r}")

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "url": self.url, "username": self.username}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Endpoint":
        kwargs = {
            "name": data.get("name", ""),
            "url": data.get("url", ""),
            "username": data.get("username"),
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)


@dataclass
class RemoteProgram:
    """A program stored on the remote API.

    ``content`` is None until the program has been fetched. ``last_modified``
    is the server-assigned timestamp, passed through as received.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    extension: Optional[str] = None
    content: Optional[str] = field(default=None, compare=False)
    last_modified: int = 0

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.extension, self.last_modified))

    @property
    def full_name(self) -> str:
        """Name joined with the extension, normalizing a leading dot."""
        name = self.name or ""
        if self.extension:
            if self.extension.startswith("."):
                return name + self.extension
            return f"{name}.{self.extension}"
        return name

    def path_for(self, endpoint: Endpoint) -> str:
        return f"/api/{endpoint.name}/{self.full_name}"

    def copy(self) -> "RemoteProgram":
        return replace(self)

    def with_content(self, content: Optional[str]) -> "RemoteProgram":
        return replace(self, content=content)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RemoteProgram":
        """Build a program from a wire record. Unknown keys are ignored."""
        last_modified = data.get("lastModified")
        try:
            last_modified = int(last_modified) if last_modified is not None else 0
        except (TypeError, ValueError):
            last_modified = 0
        program_id = data.get("id")
        return cls(
            id=str(program_id) if program_id is not None else None,
            name=data.get("name"),
            extension=data.get("extension"),
            content=data.get("content"),
            last_modified=last_modified,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "extension": self.extension,
            "content": self.content,
            "lastModified": self.last_modified,
        }
