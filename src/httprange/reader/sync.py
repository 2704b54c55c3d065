"""Blocking buffered reader over HTTP range requests."""

from __future__ import annotations

import io
import logging
from typing import Optional

from ..core.model import (
    HttpRangeError,
    HttpStatusError,
    LengthUnknownError,
    UnexpectedEOFError,
    is_range_not_satisfiable,
)
from ..core.window import DEFAULT_MIN_FETCH_SIZE
from ..io.base import RangeFetcher
from .base import BaseRangeReader

logger = logging.getLogger(__name__)


class BufferedRangeReader(BaseRangeReader):
    """File-like reader over a remote resource, buffered for sequential reads.

    Every miss is turned into a single ``Range`` request of at least
    ``min_fetch_size`` bytes; reads that fall inside the cached window are
    served without network access.

    Usage::

        reader = BufferedRangeReader(RequestsRangeFetcher(), url, min_fetch_size=256)
        magic = reader.get_range(0, 3)
        version = reader.get_bytes(1)

    The reader implements ``read``/``readinto``/``seek``/``tell`` so it can
    be handed to libraries that expect a binary file object.
    """

    def __init__(self, fetcher: RangeFetcher, url: str, *, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE):
        super().__init__(fetcher, url, min_fetch_size=min_fetch_size)

    def get_range(self, begin: int, length: int) -> bytes:
        """Return `length` bytes at absolute offset `begin`.

        Fewer bytes are returned when the resource ends first. Errors from
        the fetcher propagate unchanged.
        """
        self._check_request(begin, length)
        if length == 0:
            self._window.cursor = begin
            return b""

        planned = self._plan(begin, length)
        if planned is None:
            return self._serve_resident(begin, length)
        fetch_begin, range_spec = planned
        try:
            data = self._fetcher.get_range(self.url, range_spec)
        except HttpStatusError as e:
            if not self._is_end_of_window(e, begin, fetch_begin):
                raise
            data = b""
        return self._complete(begin, length, fetch_begin, data)

    def get_bytes(self, length: int) -> bytes:
        """Return `length` bytes from the current position."""
        return self.get_range(self._window.cursor, length)

    def length(self) -> Optional[int]:
        """Return the resource length from `content-length`, probing at most once."""
        self._check_closed()
        if not self._length_probed:
            value = self._fetcher.head_response_header(self.url, "content-length")
            self._store_length(value)
        return self._length

    # --- file-like interface ---
    def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to `size` bytes; ``b""`` at end of resource."""
        if size is None or size < 0:
            return self.readall()
        try:
            return self.get_bytes(size)
        except HttpRangeError as e:
            if is_range_not_satisfiable(e):
                return b""
            raise OSError(str(e)) from e

    def readall(self) -> bytes:
        """Read from the current position to the end of the resource."""
        self._check_closed()
        try:
            total = self.length()
        except HttpRangeError as e:
            # HEAD may be refused where ranged GETs are allowed
            logger.debug("length probe failed (%s), reading in chunks", e)
            total = None
        if total is not None:
            return self.read(max(total - self._window.cursor, 0))

        chunks = []
        chunk_size = max(self.min_fetch_size, DEFAULT_MIN_FETCH_SIZE)
        while chunk := self.read(chunk_size):
            chunks.append(chunk)
        return b"".join(chunks)

    def readinto(self, buffer) -> int:
        """Read into a writable buffer and return the number of bytes written."""
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[:len(data)] = data
        return len(data)

    def read_exact(self, size: int) -> bytes:
        """Read exactly `size` bytes or raise UnexpectedEOFError."""
        parts = bytearray()
        while len(parts) < size:
            chunk = self.read(size - len(parts))
            if not chunk:
                raise UnexpectedEOFError(
                    f"unexpected end of file: wanted {size} bytes, got {len(parts)}"
                )
            parts += chunk
        return bytes(parts)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor; returns the new absolute position.

        Seeking never fetches data. Seeking relative to the end issues one
        HEAD request for the content length the first time it is needed.
        """
        self._check_closed()
        length = None
        if whence == io.SEEK_END:
            length = self.length()
            if length is None:
                raise LengthUnknownError()
        return self._resolve_seek(offset, whence, length)

    def fill_buf(self) -> bytes:
        """Return the buffered bytes from the cursor, refilling if needed.

        An empty result means the end of the resource was reached. The
        cursor is not moved; use :meth:`consume` to advance it.
        """
        self._check_closed()
        cursor = self._window.cursor
        if not self._window.contains(cursor):
            try:
                self.get_bytes(max(self.min_fetch_size, 1))
            except HttpRangeError as e:
                if is_range_not_satisfiable(e):
                    return b""
                raise OSError(str(e)) from e
            finally:
                self._window.cursor = cursor
        return self._window.view_from(cursor)

    def peek(self, size: int = 0) -> bytes:
        return self.fill_buf()

    def consume(self, amt: int) -> None:
        """Advance the cursor by `amt` bytes without touching the buffer."""
        self._check_closed()
        self._window.cursor += amt

    # --- format library shims ---
    def clone_at(self, offset: int) -> BufferedRangeReader:
        """Return an independent reader over the same fetcher, positioned at `offset`."""
        self._check_closed()
        clone = type(self)(self._fetcher, self.url, min_fetch_size=self.min_fetch_size)
        self._copy_config_to(clone)
        clone.seek(offset)
        return clone

    def get_bytes_at(self, start: int, length: int) -> bytes:
        """Return `length` bytes at `start` without disturbing this reader's window."""
        clone = self.clone_at(start)
        data = clone.get_bytes(length)
        self.stats.requests_made += clone.stats.requests_made
        self.stats.bytes_requested += clone.stats.bytes_requested
        self.stats.bytes_fetched += clone.stats.bytes_fetched
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
