"""Blocking HTTP range fetchers using requests and httpx."""

import httpx
import requests
from typing import Optional

from ..core.model import HttpStatusError, TransportError
from ..core.util import body_for_range
from .base import DEFAULT_TIMEOUT


# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class RequestsRangeFetcher:
    """Blocking range fetcher backed by a requests Session."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self._session = session if session is not None else _get_session()
        self.timeout = timeout

    def get_range(self, url: str, range_spec: str) -> bytes:
        try:
            response = self._session.get(url, headers={'Range': range_spec}, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if not _is_success(response.status_code):
            raise HttpStatusError(response.status_code)
        return body_for_range(response.status_code, response.content, range_spec)

    def head_response_header(self, url: str, header: str) -> Optional[str]:
        try:
            response = self._session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if not _is_success(response.status_code):
            raise HttpStatusError(response.status_code)
        return response.headers.get(header)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Session may be shared, don't close it here
        pass


class HttpxRangeFetcher:
    """Blocking range fetcher backed by an httpx Client."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = DEFAULT_TIMEOUT):
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout, follow_redirects=True)

    def get_range(self, url: str, range_spec: str) -> bytes:
        try:
            response = self._client.get(url, headers={'Range': range_spec})
        except httpx.RequestError as e:
            raise TransportError(str(e)) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return body_for_range(response.status_code, response.content, range_spec)

    def head_response_header(self, url: str, header: str) -> Optional[str]:
        try:
            response = self._client.head(url)
        except httpx.RequestError as e:
            raise TransportError(str(e)) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return response.headers.get(header)

    def close(self):
        """Close the client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
