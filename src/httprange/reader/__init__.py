"""Buffered readers: blocking and asyncio flavours of the same window logic."""

from .sync import BufferedRangeReader
from .nonblocking import AsyncBufferedRangeReader

__all__ = ["BufferedRangeReader", "AsyncBufferedRangeReader"]
