"""Range fetchers - deliver raw `Range` responses to the buffered readers."""

# Re-export these for import convenience
from .base import RangeFetcher, AsyncRangeFetcher, DEFAULT_TIMEOUT
from .local import LocalRangeFetcher, AsyncLocalRangeFetcher
from .http_sync import RequestsRangeFetcher, HttpxRangeFetcher
from .http_async import AsyncHttpxRangeFetcher, close_global_client


def _is_url(source) -> bool:
    return str(source).startswith(('http://', 'https://'))


def open_fetcher(source):
    """Factory function to create appropriate RangeFetcher based on source type."""
    if not isinstance(source, (bytes, bytearray)) and not hasattr(source, 'read') and _is_url(source):
        return RequestsRangeFetcher()
    return LocalRangeFetcher(source)


def open_fetcher_async(source):
    """Factory function to create appropriate AsyncRangeFetcher based on source type."""
    if not isinstance(source, (bytes, bytearray)) and not hasattr(source, 'read') and _is_url(source):
        return AsyncHttpxRangeFetcher()
    return AsyncLocalRangeFetcher(source)
