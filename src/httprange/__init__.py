"""httprange - read remote files through buffered HTTP range requests."""

from .core.model import (                                              # re-export
    HttpRangeError, HttpStatusError, TransportError,
    ContentLengthError, LengthUnknownError, UnexpectedEOFError, RequestStats,
)
from .core.window import RangeBuffer, DEFAULT_MIN_FETCH_SIZE
from .io import open_fetcher, open_fetcher_async
from .reader import BufferedRangeReader, AsyncBufferedRangeReader

__version__ = "0.1.0"


def _source_url(source) -> str:
    if isinstance(source, (bytes, bytearray)) or hasattr(source, 'read'):
        return ""
    return str(source)


def open_reader(source, *, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE, fetcher=None) -> BufferedRangeReader:
    """Open a blocking reader over a URL, a local path, a binary file or bytes."""
    if fetcher is None:
        fetcher = open_fetcher(source)
    return BufferedRangeReader(fetcher, _source_url(source), min_fetch_size=min_fetch_size)


async def open_reader_async(source, *, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE, fetcher=None) -> AsyncBufferedRangeReader:
    """Open an asyncio reader over a URL, a local path, a binary file or bytes."""
    if fetcher is None:
        fetcher = open_fetcher_async(source)
    return AsyncBufferedRangeReader(fetcher, _source_url(source), min_fetch_size=min_fetch_size)


__all__ = [
    "open_reader", "open_reader_async",
    "BufferedRangeReader", "AsyncBufferedRangeReader", "RangeBuffer",
    "HttpRangeError", "HttpStatusError", "TransportError",
    "ContentLengthError", "LengthUnknownError", "UnexpectedEOFError",
    "RequestStats", "DEFAULT_MIN_FETCH_SIZE",
]
