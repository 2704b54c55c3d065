"""Asyncio buffered reader over HTTP range requests."""

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
from ..io.base import AsyncRangeFetcher
from .base import BaseRangeReader

logger = logging.getLogger(__name__)


class AsyncBufferedRangeReader(BaseRangeReader):
    """Asyncio counterpart of :class:`~httprange.reader.sync.BufferedRangeReader`.

    The only suspension point of :meth:`get_range` is the fetch itself.
    Fetched bytes are only appended once that fetch returns, so cancelling
    the awaiting task leaves a consistent (possibly smaller) window behind.
    """

    def __init__(self, fetcher: AsyncRangeFetcher, url: str, *, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE):
        super().__init__(fetcher, url, min_fetch_size=min_fetch_size)

    async def get_range(self, begin: int, length: int) -> bytes:
        """Return `length` bytes at absolute offset `begin` (fewer at end of resource)."""
        self._check_request(begin, length)
        if length == 0:
            self._window.cursor = begin
            return b""

        planned = self._plan(begin, length)
        if planned is None:
            return self._serve_resident(begin, length)
        fetch_begin, range_spec = planned
        try:
            data = await self._fetcher.get_range(self.url, range_spec)
        except HttpStatusError as e:
            if not self._is_end_of_window(e, begin, fetch_begin):
                raise
            data = b""
        return self._complete(begin, length, fetch_begin, data)

    async def get_bytes(self, length: int) -> bytes:
        """Return `length` bytes from the current position."""
        return await self.get_range(self._window.cursor, length)

    async def length(self) -> Optional[int]:
        """Return the resource length from `content-length`, probing at most once."""
        self._check_closed()
        if not self._length_probed:
            value = await self._fetcher.head_response_header(self.url, "content-length")
            self._store_length(value)
        return self._length

    async def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to `size` bytes; ``b""`` at end of resource."""
        if size is None or size < 0:
            return await self.readall()
        try:
            return await self.get_bytes(size)
        except HttpRangeError as e:
            if is_range_not_satisfiable(e):
                return b""
            raise OSError(str(e)) from e

    async def readall(self) -> bytes:
        """Read from the current position to the end of the resource."""
        self._check_closed()
        try:
            total = await self.length()
        except HttpRangeError as e:
            # HEAD may be refused where ranged GETs are allowed
            logger.debug("length probe failed (%s), reading in chunks", e)
            total = None
        if total is not None:
            return await self.read(max(total - self._window.cursor, 0))

        chunks = []
        chunk_size = max(self.min_fetch_size, DEFAULT_MIN_FETCH_SIZE)
        while chunk := await self.read(chunk_size):
            chunks.append(chunk)
        return b"".join(chunks)

    async def read_exact(self, size: int) -> bytes:
        """Read exactly `size` bytes or raise UnexpectedEOFError."""
        parts = bytearray()
        while len(parts) < size:
            chunk = await self.read(size - len(parts))
            if not chunk:
                raise UnexpectedEOFError(
                    f"unexpected end of file: wanted {size} bytes, got {len(parts)}"
                )
            parts += chunk
        return bytes(parts)

    async def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor; only suspends to probe the length for SEEK_END."""
        self._check_closed()
        length = None
        if whence == io.SEEK_END:
            length = await self.length()
            if length is None:
                raise LengthUnknownError()
        return self._resolve_seek(offset, whence, length)

    async def clone_at(self, offset: int) -> AsyncBufferedRangeReader:
        """Return an independent reader over the same fetcher, positioned at `offset`."""
        self._check_closed()
        clone = type(self)(self._fetcher, self.url, min_fetch_size=self.min_fetch_size)
        self._copy_config_to(clone)
        await clone.seek(offset)
        return clone

    async def aclose(self) -> None:
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
