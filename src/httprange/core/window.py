"""Single contiguous read window over a remote byte stream."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_MIN_FETCH_SIZE = 1024


class RangeBuffer:
    """Cached window ``[head, tail)`` of a remote resource.

    ``buffer[i]`` always holds stream offset ``head + i``. There is never
    more than one resident range: a read outside the window either keeps
    the still-useful suffix of the window or drops it entirely.

    The buffer performs no I/O. Callers ask :meth:`plan_fetch` what to
    download, hand the downloaded bytes to :meth:`absorb`, and then cut
    the answer out with :meth:`slice`.
    """

    def __init__(self, min_fetch_size: int = DEFAULT_MIN_FETCH_SIZE):
        if min_fetch_size < 0:
            raise ValueError("min_fetch_size cannot be negative")
        self.buffer = bytearray()
        self.head = 0
        self.min_fetch_size = min_fetch_size
        self.cursor = 0

    @property
    def tail(self) -> int:
        """Absolute offset just past the cached window."""
        return self.head + len(self.buffer)

    def __len__(self) -> int:
        return len(self.buffer)

    def contains(self, offset: int) -> bool:
        return self.head <= offset < self.tail

    def plan_fetch(self, begin: int, length: int) -> tuple[int, int] | None:
        """Return ``(fetch_begin, fetch_length)`` or None if already resident.

        When a fetch is needed the window is first reconciled with
        ``begin``: a prefix before ``begin`` is dropped when ``begin`` falls
        inside the window, otherwise the whole window is discarded and
        restarted at ``begin``. The fetch then starts at the (new) tail so
        retained bytes are never downloaded twice, and is amplified up to
        ``min_fetch_size``.
        """
        #
        #            head  begin    tail
        #       +------+-----+---+---+------------+
        # File  |      |     |   |   |            |
        #       +------+-----+---+---+------------+
        # buf          |     |   |   |
        #              +-----+---+---+
        # Request            |   |
        #                    +---+
        #                    length
        #
        logger.debug("read begin: %d, length: %d", begin, length)
        if begin >= self.head and begin + length <= self.tail:
            return None

        if self.head < begin < self.tail:
            del self.buffer[: begin - self.head]
            self.head = begin
        elif begin >= self.tail or begin < self.head:
            self.buffer.clear()
            self.head = begin
        # begin == head: the whole window is still useful, only extend it

        fetch_begin = max(begin, self.tail)
        fetch_length = max(begin + length - fetch_begin, self.min_fetch_size)
        return fetch_begin, fetch_length

    def absorb(self, data: bytes) -> None:
        """Append bytes fetched from ``tail`` onwards."""
        self.buffer += data

    def slice(self, begin: int, length: int) -> bytes:
        """Return resident bytes ``[begin, begin + length)``.

        The result is shorter than ``length`` when the window ends early,
        e.g. after a short read at the end of the resource.
        """
        if begin < self.head:
            raise ValueError(f"offset {begin} is before the window start {self.head}")
        lower = begin - self.head
        return bytes(self.buffer[lower:lower + length])

    def view_from(self, offset: int) -> bytes:
        """Return all resident bytes from ``offset`` up to ``tail``."""
        if not self.contains(offset):
            return b""
        return bytes(self.buffer[offset - self.head:])

    def clear(self) -> None:
        self.buffer.clear()
        self.head = 0
