"""
Editable document bound to one remote program.

A ProgramDocument is what an editing surface works with: it exposes the
program content as bytes, accepts replacement content, and persists it on
flush through the saver it was constructed with. Reading and writing never
touch the network; only ``flush`` does.
"""

import logging
import threading
from typing import Callable

from apieditor.models import Endpoint, RemoteProgram

logger = logging.getLogger(__name__)

ENCODING = "utf-8"

# (endpoint, program with edited content) -> canonical program from the server
Saver = Callable[[Endpoint, RemoteProgram], RemoteProgram]


def _encode(program: RemoteProgram) -> bytes:
    return program.content.encode(ENCODING) if program.content is not None else b""


class ProgramDocument:
    """Readable/writable byte buffer over a cached RemoteProgram."""

    def __init__(self, endpoint: Endpoint, program: RemoteProgram, saver: Saver):
        self.endpoint = endpoint
        self._saver = saver
        self._lock = threading.RLock()
        self._program = program.copy()
        self._content = _encode(program)
        self._modification_stamp = 0
        self._dirty = False
        self._closed = False

    @property
    def program(self) -> RemoteProgram:
        with self._lock:
            return self._program.copy()

    @property
    def display_name(self) -> str:
        return f"{self._program.full_name} @ {self.endpoint.name}"

    @property
    def path(self) -> str:
        return self._program.path_for(self.endpoint)

    @property
    def modification_stamp(self) -> int:
        return self._modification_stamp

    @property
    def timestamp(self) -> int:
        return self._program.last_modified

    @property
    def length(self) -> int:
        return len(self._content)

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def text(self) -> str:
        return self.read().decode(ENCODING, errors="replace")

    def read(self) -> bytes:
        with self._lock:
            return self._content

    def write(self, data: bytes, flush: bool = False) -> None:
        """Replace the buffer. With ``flush=True`` the new content is saved too."""
        if isinstance(data, str):
            raise TypeError("write() expects bytes, not str")
        with self._lock:
            if self._closed:
                raise ValueError(f"Document is closed: {self.display_name}")
            self._content = bytes(data)
            self._program = self._program.with_content(
                self._content.decode(ENCODING, errors="replace")
            )
            self._modification_stamp += 1
            self._dirty = True
        if flush:
            self.flush()

    def flush(self) -> RemoteProgram:
        """Save the current content and adopt the server's canonical copy.

        If the save raises, the buffer keeps the unsaved edit so it can be retried.
        If the buffer was written again while the save was running, only the
        saved metadata is adopted and the newer edit stays dirty.
        """
        with self._lock:
            pending = self._program.copy()
            stamp = self._modification_stamp
        logger.debug("Flushing %s", self.display_name)
        saved = self._saver(self.endpoint, pending)
        with self._lock:
            if self._modification_stamp == stamp:
                self.update_program(saved)
            else:
                logger.info("%s was edited during save; keeping the newer edit", self.display_name)
                self.refresh_metadata(saved)
        return saved

    def update_program(self, program: RemoteProgram) -> None:
        """Replace the bound program and its content, e.g. after a fetch or save."""
        with self._lock:
            self._program = program.copy()
            self._content = _encode(program)
            self._modification_stamp += 1
            self._dirty = False

    def refresh_metadata(self, program: RemoteProgram) -> None:
        """Adopt the server's name and timestamp without touching the buffer."""
        with self._lock:
            self._program = program.with_content(self._program.content)

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"ProgramDocument({self.display_name!r}, stamp={self._modification_stamp})"
