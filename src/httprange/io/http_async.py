"""Asynchronous HTTP range fetcher using httpx."""

import httpx
from typing import Optional
from contextlib import asynccontextmanager

from ..core.model import HttpStatusError, TransportError
from ..core.util import body_for_range
from .base import DEFAULT_TIMEOUT


# Global async client
_client: Optional[httpx.AsyncClient] = None


@asynccontextmanager
async def _get_client():
    """Get or create the global httpx AsyncClient."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, follow_redirects=True)

    try:
        yield _client
    finally:
        # Don't close the client here - it's shared
        pass


class AsyncHttpxRangeFetcher:
    """Asyncio range fetcher backed by an httpx AsyncClient.

    Without an explicit client the module-level shared client is used;
    close it at shutdown with :func:`close_global_client`.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    @asynccontextmanager
    async def _use_client(self):
        if self._client is not None:
            yield self._client
        else:
            async with _get_client() as client:
                yield client

    async def get_range(self, url: str, range_spec: str) -> bytes:
        async with self._use_client() as client:
            try:
                response = await client.get(url, headers={'Range': range_spec})
            except httpx.RequestError as e:
                raise TransportError(str(e)) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return body_for_range(response.status_code, response.content, range_spec)

    async def head_response_header(self, url: str, header: str) -> Optional[str]:
        async with self._use_client() as client:
            try:
                response = await client.head(url)
            except httpx.RequestError as e:
                raise TransportError(str(e)) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return response.headers.get(header)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Client may be shared, don't close it here
        pass


async def close_global_client():
    """Close the global httpx client. Call this at application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
