"""Shared fixtures: a FlatGeobuf-like resource and fetchers that record requests."""

import pytest

from httprange.io.local import LocalRangeFetcher, AsyncLocalRangeFetcher

FGB_LENGTH = 205680
FGB_TAIL = bytes([78, 192, 205, 204, 204, 204, 204, 236, 73, 192])


def make_fgb_data() -> bytes:
    """Magic bytes, deterministic filler, and a known 10-byte tail."""
    head = b"fgb\x03fgb\x00"
    filler_len = FGB_LENGTH - len(head) - len(FGB_TAIL)
    filler = bytes(i % 251 for i in range(filler_len))
    return head + filler + FGB_TAIL


class RecordingFetcher(LocalRangeFetcher):
    """Local fetcher that remembers every Range spec it served."""

    def __init__(self, source):
        super().__init__(source)
        self.ranges = []
        self.heads = []

    def get_range(self, url, range_spec):
        self.ranges.append(range_spec)
        return super().get_range(url, range_spec)

    def head_response_header(self, url, header):
        self.heads.append(header)
        return super().head_response_header(url, header)


class AsyncRecordingFetcher:
    """Async fetcher recording requests; answers without threads."""

    def __init__(self, source):
        self._sync = RecordingFetcher(source)

    @property
    def ranges(self):
        return self._sync.ranges

    @property
    def heads(self):
        return self._sync.heads

    async def get_range(self, url, range_spec):
        return self._sync.get_range(url, range_spec)

    async def head_response_header(self, url, header):
        return self._sync.head_response_header(url, header)


class NoLengthFetcher(RecordingFetcher):
    """Server that never sends content-length."""

    def head_response_header(self, url, header):
        self.heads.append(header)
        return None


@pytest.fixture(scope="session")
def fgb_data():
    return make_fgb_data()


@pytest.fixture
def fetcher(fgb_data):
    f = RecordingFetcher(fgb_data)
    yield f
    f.close()


@pytest.fixture
def async_fetcher(fgb_data):
    return AsyncRecordingFetcher(fgb_data)


@pytest.fixture
def local_async_fetcher(fgb_data):
    return AsyncLocalRangeFetcher(fgb_data)


@pytest.fixture
def fgb_tail():
    return FGB_TAIL


@pytest.fixture
def no_length_fetcher(fgb_data):
    f = NoLengthFetcher(fgb_data)
    yield f
    f.close()
