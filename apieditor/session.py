"""
Session wiring the endpoint registry, credentials, API clients, cache and
open documents together.

A session is constructed explicitly and passed to whoever needs it; the
interactive layers keep one per process (see ``apieditor.api``).
Network calls are synchronous here. Callers on an interactive thread hand
them to ``submit`` so they run on the session's worker pool.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Tuple, Union

import requests

from apieditor.cache import ProgramCache
from apieditor.clients.http import DEFAULT_TIMEOUT, HttpApiClient, make_http_session
from apieditor.document import ProgramDocument
from apieditor.endpoints import EndpointRegistry
from apieditor.models import ApiClientProtocol, CredentialStoreProtocol, Endpoint, RemoteProgram

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Endpoint], ApiClientProtocol]
EndpointRef = Union[Endpoint, str]


class EndpointNotFoundError(LookupError):
    """No configured endpoint matches the given id or name."""

    def __init__(self, ref: str):
        super().__init__(f"Endpoint not found: '{ref}'")
        self.ref = ref


class ApiEditorSession:
    """Lists, opens and saves remote programs and keeps the cache current."""

    def __init__(
        self,
        registry: EndpointRegistry,
        credentials: Optional[CredentialStoreProtocol] = None,
        cache: Optional[ProgramCache] = None,
        client_factory: Optional[ClientFactory] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = 4,
    ):
        self.registry = registry
        self.credentials = credentials if credentials is not None else registry.credentials
        self.cache = cache if cache is not None else ProgramCache()
        self.timeout = timeout
        self._http: Optional[requests.Session] = (
            make_http_session() if client_factory is None else None
        )
        self._client_factory = client_factory or self._default_client
        self._documents: Dict[Tuple[str, str], ProgramDocument] = {}
        self._documents_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="apieditor")

    def _default_client(self, endpoint: Endpoint) -> ApiClientProtocol:
        return HttpApiClient(
            endpoint, credentials=self.credentials, timeout=self.timeout, session=self._http
        )

    # --- Endpoints ---

    def endpoints(self) -> List[Endpoint]:
        return self.registry.list()

    def resolve_endpoint(self, ref: EndpointRef) -> Endpoint:
        if isinstance(ref, Endpoint):
            return ref
        endpoint = self.registry.find(ref)
        if endpoint is None:
            raise EndpointNotFoundError(ref)
        return endpoint

    def remove_endpoint(self, ref: EndpointRef) -> Endpoint:
        """Remove an endpoint, its password, cache entries and open documents."""
        endpoint = self.resolve_endpoint(ref)
        self.registry.remove(endpoint)
        self.cache.forget(endpoint.id)
        with self._documents_lock:
            for key in [k for k in self._documents if k[0] == endpoint.id]:
                self._documents.pop(key).close()
        return endpoint

    # --- Programs ---

    def list_programs(self, ref: EndpointRef) -> List[RemoteProgram]:
        """Fetch program metadata and replace the endpoint's cached set."""
        endpoint = self.resolve_endpoint(ref)
        programs = self._client_factory(endpoint).list_programs()
        self.cache.record_list(endpoint.id, programs)
        logger.info("Listed %d programs from endpoint %s", len(programs), endpoint.name)
        return programs

    def fetch_program(self, ref: EndpointRef, program_id: str) -> RemoteProgram:
        endpoint = self.resolve_endpoint(ref)
        program = self._client_factory(endpoint).get_program(program_id)
        self.cache.record_fetch(endpoint.id, program)
        return program

    def open_program(self, ref: EndpointRef, program_id: str) -> ProgramDocument:
        """Fetch a program and return its document, reusing one already open.

        A reused document with unsaved edits keeps its buffer; only the
        server metadata is refreshed.
        """
        endpoint = self.resolve_endpoint(ref)
        program = self.fetch_program(endpoint, program_id)
        key = (endpoint.id, program.id or program_id)
        with self._documents_lock:
            document = self._documents.get(key)
            if document is None or document.closed:
                document = ProgramDocument(endpoint, program, self.save_program)
                self._documents[key] = document
            elif document.is_dirty:
                logger.warning("Keeping unsaved changes in %s", document.display_name)
                document.refresh_metadata(program)
            else:
                document.update_program(program)
        return document

    def save_program(self, ref: EndpointRef, program: RemoteProgram) -> RemoteProgram:
        """Persist ``program`` and record the server's canonical copy."""
        endpoint = self.resolve_endpoint(ref)
        saved = self._client_factory(endpoint).save_program(program)
        if saved.content is None:
            # Server echoed metadata only; what it stored is what we sent
            saved = saved.with_content(program.content)
        self.cache.record_save(endpoint.id, saved)
        logger.info("Saved program %s to endpoint %s", saved.full_name, endpoint.name)
        return saved

    def save_document(self, document: ProgramDocument) -> RemoteProgram:
        return document.flush()

    def lookup(self, endpoint_id: str, program_id: str) -> Optional[RemoteProgram]:
        return self.cache.lookup(endpoint_id, program_id)

    def document(self, endpoint_id: str, program_id: str) -> Optional[ProgramDocument]:
        with self._documents_lock:
            return self._documents.get((endpoint_id, program_id))

    def close_document(self, document: ProgramDocument) -> None:
        """Close a document. A save already in flight still completes."""
        document.close()
        with self._documents_lock:
            key = (document.endpoint.id, document.program.id)
            if self._documents.get(key) is document:
                del self._documents[key]

    # --- Background work ---

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """Run ``fn`` on the worker pool and return its Future."""
        return self._executor.submit(fn, *args, **kwargs)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "ApiEditorSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
