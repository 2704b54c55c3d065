"""Base protocols and shared constants for range fetchers."""

from typing import Optional, Protocol, runtime_checkable


DEFAULT_TIMEOUT = 30.0  # seconds


@runtime_checkable
class RangeFetcher(Protocol):
    """Protocol for blocking range fetchers."""

    def get_range(self, url: str, range_spec: str) -> bytes:
        """Return the body of a GET for `url` with `Range: range_spec`.
        Non-2xx → raise HttpStatusError; transport failure → raise TransportError.
        """
        ...

    def head_response_header(self, url: str, header: str) -> Optional[str]:
        """Return response header `header` of a HEAD request for `url`, or None."""
        ...


@runtime_checkable
class AsyncRangeFetcher(Protocol):
    """Protocol for asyncio range fetchers."""

    async def get_range(self, url: str, range_spec: str) -> bytes:
        """Return the body of a GET for `url` with `Range: range_spec`.
        Non-2xx → raise HttpStatusError; transport failure → raise TransportError.
        """
        ...

    async def head_response_header(self, url: str, header: str) -> Optional[str]:
        """Return response header `header` of a HEAD request for `url`, or None."""
        ...
