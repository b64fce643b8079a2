"""
Endpoint registry persisted as JSON.

Every add/update/remove is written to disk before the call returns.
Removing an endpoint also clears its stored password.
"""

import json
import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from apieditor.models import CredentialStoreProtocol, Endpoint

logger = logging.getLogger(__name__)

ENDPOINTS_FILENAME = "endpoints.json"


class EndpointRegistry:
    """The set of configured endpoints, backed by a JSON file.

    Lookups return copies; changes only take effect through ``update``.
    """

    def __init__(self, path: Path, credentials: Optional[CredentialStoreProtocol] = None):
        self.path = Path(path)
        self.credentials = credentials
        self._lock = threading.RLock()
        self._endpoints: List[Endpoint] = self._load()

    def _load(self) -> List[Endpoint]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid endpoint configuration in {self.path}: {e}") from e

        items = data.get("endpoints", []) if isinstance(data, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise RuntimeError(
                f"Invalid endpoint configuration in {self.path}: expected {{\"endpoints\": [...]}}"
            )

        endpoints = [Endpoint.from_json(item) for item in items]
        for endpoint in endpoints:
            try:
                endpoint.validate()
            except ValueError as e:
                raise RuntimeError(f"Invalid endpoint configuration in {self.path}: {e}") from e
        logger.info("Loaded %d endpoints from %s", len(endpoints), self.path)
        return endpoints

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"endpoints": [e.to_json() for e in self._endpoints]}, indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        fd = os.open(str(tmp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, payload.encode("utf-8"))
        finally:
            os.close(fd)
        os.replace(tmp_path, self.path)
        logger.debug("Saved %d endpoints to %s", len(self._endpoints), self.path)

    def list(self) -> List[Endpoint]:
        with self._lock:
            return [replace(e) for e in self._endpoints]

    def _get(self, endpoint_id: str) -> Optional[Endpoint]:
        return next((e for e in self._endpoints if e.id == endpoint_id), None)

    def get(self, endpoint_id: str) -> Optional[Endpoint]:
        with self._lock:
            endpoint = self._get(endpoint_id)
            return replace(endpoint) if endpoint is not None else None

    def find(self, ref: str) -> Optional[Endpoint]:
        """Find an endpoint by id, or by name (case-insensitive)."""
        with self._lock:
            endpoint = self._get(ref)
            if endpoint is None:
                ref_lower = ref.strip().lower()
                endpoint = next((e for e in self._endpoints if e.name.lower() == ref_lower), None)
            return replace(endpoint) if endpoint is not None else None

    def add(self, endpoint: Endpoint) -> Endpoint:
        endpoint.validate()
        with self._lock:
            if self._get(endpoint.id) is not None:
                raise ValueError(f"Endpoint already exists: {endpoint.id}")
            logger.info("Adding endpoint: %s (ID: %s)", endpoint.name, endpoint.id)
            self._endpoints.append(replace(endpoint))
            self._save()
        return endpoint

    def update(self, endpoint: Endpoint) -> Endpoint:
        endpoint.validate()
        with self._lock:
            for i, existing in enumerate(self._endpoints):
                if existing.id == endpoint.id:
                    logger.info("Updating endpoint: %s (ID: %s)", endpoint.name, endpoint.id)
                    self._endpoints[i] = replace(endpoint)
                    self._save()
                    return endpoint
        raise KeyError(f"Endpoint not found: {endpoint.id}")

    def remove(self, endpoint: Union[Endpoint, str]) -> Endpoint:
        endpoint_id = endpoint.id if isinstance(endpoint, Endpoint) else endpoint
        with self._lock:
            existing = self._get(endpoint_id)
            if existing is None:
                raise KeyError(f"Endpoint not found: {endpoint_id}")
            logger.info("Removing endpoint: %s (ID: %s)", existing.name, existing.id)
            self._endpoints = [e for e in self._endpoints if e.id != endpoint_id]
            self._save()
        if self.credentials is not None:
            self.credentials.clear_password(endpoint_id)
        return existing

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)
