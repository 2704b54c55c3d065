"""Local range fetchers using mmap.

These serve byte ranges of a local file or an in-memory buffer with the
same semantics an HTTP server gives a Range request: short reads near
the end, status 416 once the start is past the end, and a
``content-length`` header. The URL argument is ignored.
"""

import asyncio
import io
import mmap
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..core.model import HttpStatusError, RANGE_NOT_SATISFIABLE
from ..core.util import parse_range_header

Source = Union[bytes, bytearray, Path, str, BinaryIO]


class LocalRangeFetcher:
    """Blocking range fetcher over a local file, binary stream or bytes."""

    def __init__(self, source: Source):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._file = None
        self._mmap = None
        self._data = None  # For in-memory sources
        self._should_close_file = False

        if isinstance(source, (bytes, bytearray)):
            self._data = bytes(source)
        elif hasattr(source, 'read'):
            # BinaryIO object, mapped on first access when it has a fileno
            self._file = source
            if isinstance(source, io.BytesIO):
                self._data = source.getvalue()
        else:
            # Path or str
            self._file = open(source, 'rb')
            self._should_close_file = True

    def _ensure_mmap(self):
        """Create mmap on first access."""
        if self._mmap is None and self._data is None:
            current_pos = self._file.tell()
            try:
                if self._file.seek(0, 2) == 0:
                    # Empty files cannot be mapped
                    self._data = b""
                    return
                try:
                    self._mmap = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
                except (io.UnsupportedOperation, OSError):
                    self._file.seek(0)
                    self._data = self._file.read()
            finally:
                self._file.seek(current_pos)

    def _source(self):
        self._ensure_mmap()
        return self._mmap if self._mmap is not None else self._data

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        return len(self._source())

    def get_range(self, url: str, range_spec: str) -> bytes:
        self.requests_made += 1
        start, end = parse_range_header(range_spec)
        source = self._source()
        if start >= len(source):
            raise HttpStatusError(RANGE_NOT_SATISFIABLE)

        data = bytes(source[start:end + 1])
        self.bytes_fetched += len(data)
        return data

    def head_response_header(self, url: str, header: str) -> Optional[str]:
        self.requests_made += 1
        if header.lower() == 'content-length':
            return str(self.size)
        return None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close mmap and file if we opened it."""
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
        if self._should_close_file and self._file is not None:
            self._file.close()
            self._file = None


class AsyncLocalRangeFetcher:
    """Asynchronous local range fetcher - thin wrapper around sync fetcher."""

    def __init__(self, source: Source):
        self._sync_fetcher = LocalRangeFetcher(source)

    @property
    def size(self) -> int:
        return self._sync_fetcher.size

    @property
    def bytes_fetched(self) -> int:
        return self._sync_fetcher.bytes_fetched

    @property
    def requests_made(self) -> int:
        return self._sync_fetcher.requests_made

    async def get_range(self, url: str, range_spec: str) -> bytes:
        return await asyncio.to_thread(self._sync_fetcher.get_range, url, range_spec)

    async def head_response_header(self, url: str, header: str) -> Optional[str]:
        return await asyncio.to_thread(self._sync_fetcher.head_response_header, url, header)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying sync fetcher."""
        await asyncio.to_thread(self._sync_fetcher.close)
