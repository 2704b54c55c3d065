"""Tests for local range fetchers."""

import io
import tempfile
from pathlib import Path

import pytest

from httprange.core.model import HttpStatusError
from httprange.io import RangeFetcher, AsyncRangeFetcher
from httprange.io.local import LocalRangeFetcher, AsyncLocalRangeFetcher


class TestLocalRangeFetcher:
    """Test synchronous local range fetcher."""

    def test_bytes_source(self):
        fetcher = LocalRangeFetcher(b"0123456789")
        assert isinstance(fetcher, RangeFetcher)

        assert fetcher.get_range("", "bytes=0-4") == b"01234"
        assert fetcher.get_range("", "bytes=5-9") == b"56789"
        assert fetcher.get_range("", "bytes=2-4") == b"234"

        assert fetcher.bytes_fetched == 13  # 5 + 5 + 3
        assert fetcher.requests_made == 3

    def test_path_source(self):
        test_data = b"0123456789"

        with tempfile.NamedTemporaryFile(delete=False) as f:
            f.write(test_data)
            f.flush()
            temp_path = Path(f.name)

        try:
            with LocalRangeFetcher(temp_path) as fetcher:
                assert fetcher.get_range("", "bytes=3-5") == b"345"
                assert fetcher.size == 10
        finally:
            temp_path.unlink()

    def test_str_path_source(self):
        with tempfile.NamedTemporaryFile() as f:
            f.write(b"abcdef")
            f.flush()

            fetcher = LocalRangeFetcher(f.name)
            assert fetcher.get_range("", "bytes=0-1") == b"ab"
            fetcher.close()

    def test_binary_io_source(self):
        bio = io.BytesIO(b"0123456789")
        bio.seek(4)

        fetcher = LocalRangeFetcher(bio)
        assert fetcher.get_range("", "bytes=0-2") == b"012"
        # the caller's position is preserved
        assert bio.tell() == 4

    def test_open_file_source_is_mapped(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"0123456789")

        with open(path, "rb") as f:
            f.seek(7)
            fetcher = LocalRangeFetcher(f)
            assert fetcher.get_range("", "bytes=2-4") == b"234"
            assert fetcher._mmap is not None
            assert fetcher._data is None
            assert f.tell() == 7
            fetcher.close()
            # the caller owns the file object
            assert not f.closed

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile() as f:
            fetcher = LocalRangeFetcher(f.name)
            assert fetcher.size == 0
            with pytest.raises(HttpStatusError):
                fetcher.get_range("", "bytes=0-3")
            fetcher.close()

    def test_short_read_near_end(self):
        fetcher = LocalRangeFetcher(b"0123456789")
        assert fetcher.get_range("", "bytes=8-100") == b"89"

    def test_past_end_is_416(self):
        fetcher = LocalRangeFetcher(b"0123456789")
        with pytest.raises(HttpStatusError) as exc_info:
            fetcher.get_range("", "bytes=10-20")
        assert exc_info.value.status == 416

    @pytest.mark.parametrize("spec", ["bytes=5", "bytes=-5", "items=0-1", "bytes=5-2", "bytes=0-1,4-5"])
    def test_unsupported_spec(self, spec):
        fetcher = LocalRangeFetcher(b"0123456789")
        with pytest.raises(ValueError):
            fetcher.get_range("", spec)

    def test_head_response_header(self):
        fetcher = LocalRangeFetcher(b"0123456789")
        assert fetcher.head_response_header("", "Content-Length") == "10"
        assert fetcher.head_response_header("", "etag") is None


class TestAsyncLocalRangeFetcher:
    """Test asynchronous local range fetcher."""

    @pytest.mark.asyncio
    async def test_basic_fetch(self):
        async with AsyncLocalRangeFetcher(b"0123456789") as fetcher:
            assert isinstance(fetcher, AsyncRangeFetcher)
            assert await fetcher.get_range("", "bytes=0-4") == b"01234"
            assert await fetcher.head_response_header("", "content-length") == "10"
            assert fetcher.size == 10
            assert fetcher.bytes_fetched == 5
            assert fetcher.requests_made == 2

    @pytest.mark.asyncio
    async def test_past_end(self):
        fetcher = AsyncLocalRangeFetcher(b"0123456789")
        with pytest.raises(HttpStatusError):
            await fetcher.get_range("", "bytes=12-13")
        await fetcher.close()
