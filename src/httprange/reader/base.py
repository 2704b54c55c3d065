"""State and bookkeeping shared by the blocking and asyncio readers."""

from __future__ import annotations

import io
import logging
from typing import Any, Optional

from ..core.model import RequestStats, is_range_not_satisfiable
from ..core.util import log_get_range, parse_content_length, range_header
from ..core.window import DEFAULT_MIN_FETCH_SIZE, RangeBuffer

logger = logging.getLogger(__name__)


class BaseRangeReader:
    """Cursor, window and statistics for one remote resource.

    Subclasses only decide how the fetcher is called (blocking or awaited);
    every decision about what to fetch and what to return lives here and in
    :class:`~httprange.core.window.RangeBuffer`.
    """

    def __init__(self, fetcher: Any, url: str, *, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE):
        self._fetcher = fetcher
        self.url = url
        self._window = RangeBuffer(min_fetch_size)
        self.stats = RequestStats()
        self._length: Optional[int] = None
        self._length_probed = False
        self._closed = False

    # --- configuration ---
    @property
    def fetcher(self) -> Any:
        return self._fetcher

    @property
    def min_fetch_size(self) -> int:
        return self._window.min_fetch_size

    def set_min_fetch_size(self, size: int) -> None:
        if size < 0:
            raise ValueError("min_fetch_size cannot be negative")
        self._window.min_fetch_size = size

    def with_min_fetch_size(self, size: int):
        """Set the minimal request size and return the reader for chaining."""
        self.set_min_fetch_size(size)
        return self

    # --- statistics ---
    @property
    def bytes_fetched(self) -> int:
        return self.stats.bytes_fetched

    @property
    def requests_made(self) -> int:
        return self.stats.requests_made

    # --- position ---
    def tell(self) -> int:
        self._check_closed()
        return self._window.cursor

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def close(self) -> None:
        """Release the window. The fetcher is left open, clones may share it."""
        self._window.clear()
        self._closed = True

    # --- helpers for subclasses ---
    def _check_closed(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed reader.")

    def _check_request(self, begin: int, length: int) -> None:
        self._check_closed()
        if begin < 0:
            raise ValueError(f"Start offset cannot be negative: {begin}")
        if length < 0:
            raise ValueError(f"Length cannot be negative: {length}")

    def _plan(self, begin: int, length: int) -> tuple[int, str] | None:
        """Return (fetch_begin, range_spec) for a miss, None for a hit."""
        planned = self._window.plan_fetch(begin, length)
        if planned is None:
            return None
        fetch_begin, fetch_length = planned
        range_spec = range_header(fetch_begin, fetch_length)
        log_get_range(self.stats, fetch_length, range_spec)
        return fetch_begin, range_spec

    def _serve_resident(self, begin: int, length: int) -> bytes:
        self._window.cursor = begin + length
        return self._window.slice(begin, length)

    def _is_end_of_window(self, error: Exception, begin: int, fetch_begin: int) -> bool:
        """True when a 416 only says nothing exists past bytes already resident."""
        # the resident prefix is a valid short read, like a 206 ending at the resource end
        return is_range_not_satisfiable(error) and fetch_begin > begin

    def _complete(self, begin: int, length: int, fetch_begin: int, data: bytes) -> bytes:
        """Absorb a finished fetch and return the (possibly short) answer."""
        self._window.absorb(data)
        self.stats.bytes_fetched += len(data)
        slice_len = min(length, fetch_begin - begin + len(data))
        if slice_len < length:
            logger.debug("short read at %d: %d of %d bytes", begin, slice_len, length)
        self._window.cursor = begin + slice_len
        return self._window.slice(begin, slice_len)

    def _store_length(self, value: str | None) -> Optional[int]:
        # Unknown lengths are cached too so a missing header is probed once
        self._length = parse_content_length(value)
        self._length_probed = True
        return self._length

    def _resolve_seek(self, offset: int, whence: int, length: Optional[int] = None) -> int:
        if whence == io.SEEK_SET:
            if offset < 0:
                raise ValueError(f"negative seek position {offset}")
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._window.cursor + offset
        elif whence == io.SEEK_END:
            position = length + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")
        # relative seeks saturate instead of going negative
        self._window.cursor = max(position, 0)
        return self._window.cursor

    def _copy_config_to(self, other: BaseRangeReader) -> None:
        other._length = self._length
        other._length_probed = self._length_probed
