from __future__ import annotations
import re
import logging
from typing import Any, Dict

from .model import ContentLengthError, HttpStatusError, RANGE_NOT_SATISFIABLE, RequestStats

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r"^bytes=(\d+)-(\d+)$")


def range_header(begin: int, length: int) -> str:
    """Return the ``Range`` header value for ``length`` bytes at ``begin`` (inclusive end)."""
    if begin < 0:
        raise ValueError("begin cannot be negative")
    if length <= 0:
        raise ValueError("length must be positive")
    return f"bytes={begin}-{begin + length - 1}"


def parse_range_header(range_spec: str) -> tuple[int, int]:
    """Return (start, inclusive_end) for a `bytes=start-end` spec."""
    match = _RANGE_RE.match(range_spec.strip())
    if match is None:
        raise ValueError(f"Unsupported range specifier: {range_spec!r}")
    start, end = int(match.group(1)), int(match.group(2))
    if end < start:
        raise ValueError(f"Range end before start: {range_spec!r}")
    return start, end


def body_for_range(status_code: int, content: bytes, range_spec: str) -> bytes:
    """Return the bytes `range_spec` asked for from a successful GET.

    A 206 body is the range itself. Any other 2xx means the server ignored
    ``Range`` and sent the whole resource, so the range is cut out of it.
    """
    if status_code == 206:
        return content
    start, end = parse_range_header(range_spec)
    logger.debug("server ignored Range (status %d, %d bytes), slicing %s", status_code, len(content), range_spec)
    if start >= len(content):
        raise HttpStatusError(RANGE_NOT_SATISFIABLE)
    return content[start:end + 1]


def log_get_range(stats: RequestStats, length: int, range_spec: str) -> None:
    stats.requests_made += 1
    stats.bytes_requested += length
    logger.debug(
        "request: #%d, bytes: (this_request: %d, ever: %d), Range: %s",
        stats.requests_made, length, stats.bytes_requested, range_spec,
    )


def parse_content_length(value: str | None) -> int | None:
    """Parse a content-length header value; None stays None."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ContentLengthError(value)
    return int(value)


def stats_asdict(stats: RequestStats) -> Dict[str, Any]:
    return {
        "requests_made": stats.requests_made,
        "bytes_requested": stats.bytes_requested,
        "bytes_fetched": stats.bytes_fetched,
    }
