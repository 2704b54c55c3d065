from __future__ import annotations
from dataclasses import dataclass


@dataclass(slots=True)
class RequestStats:
    requests_made: int = 0
    bytes_requested: int = 0   # sum of Range lengths asked for
    bytes_fetched: int = 0     # sum of bytes actually received


class HttpRangeError(RuntimeError):
    """Base class for all errors raised by httprange."""
    pass


class HttpStatusError(HttpRangeError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status: int):
        super().__init__(f"http status {status}")
        self.status = status


class TransportError(HttpRangeError):
    """Raised on connection, timeout or protocol failures."""

    def __init__(self, message: str):
        super().__init__(f"http error `{message}`")
        self.message = message


class ContentLengthError(HttpRangeError):
    """Raised when a content-length header is not an unsigned integer."""

    def __init__(self, value: str):
        super().__init__(f"invalid content-length: {value!r}")
        self.value = value


class LengthUnknownError(HttpRangeError):
    """Raised when seeking from the end of a resource of unknown length."""

    def __init__(self):
        super().__init__("length unknown")


class UnexpectedEOFError(EOFError):
    """Raised by read_exact when the resource ends before enough bytes arrive."""
    pass


RANGE_NOT_SATISFIABLE = 416


def is_range_not_satisfiable(exc: BaseException) -> bool:
    return isinstance(exc, HttpStatusError) and exc.status == RANGE_NOT_SATISFIABLE
