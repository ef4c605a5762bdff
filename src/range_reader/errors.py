r"""Exceptions raised by a :class:`~range_reader.reader.RangeReader`.

Every error is raised to the immediate caller: nothing is retried. The one
exception is a failed prefetch during construction, which is logged as a
warning and leaves the reader with an empty prefetch buffer.

Transport-level failures (connection refused, DNS, TLS, timeouts) are not
wrapped: they propagate as the ``httpx.TransportError`` raised by the client,
re-exported here as :class:`TransportError` for convenience.
"""
from __future__ import annotations

from httpx import TransportError

__all__ = [
    "RangeReaderError",
    "MetadataError",
    "UnsupportedModeError",
    "EndOfStreamError",
    "RemoteFetchError",
    "TransportError",
]


class RangeReaderError(Exception):
    """
    Base class for the errors raised by :mod:`range_reader`.
    """


class MetadataError(RangeReaderError):
    """
    The HEAD request sent on initialisation could not establish the total size
    of the resource (the request failed, or its ``content-length`` header was
    missing or not a non-negative integer).
    """


class UnsupportedModeError(RangeReaderError, ValueError):
    """
    :meth:`~range_reader.reader.RangeReader.seek` was passed a ``whence`` other
    than :data:`io.SEEK_SET`, :data:`io.SEEK_CUR` or :data:`io.SEEK_END`.
    """

    def __init__(self, whence):
        super().__init__(f"Mode not implemented: {whence!r}")
        self.whence = whence


class EndOfStreamError(RangeReaderError, EOFError):
    """
    A read was requested at or past the end of the resource, or into an empty
    buffer.
    """


class RemoteFetchError(RangeReaderError):
    """
    The response to a range request had a status code outside the 2xx range.
    The status code is kept on :attr:`status_code`, and the request and response
    are kept for inspection.
    """

    def __init__(self, *, request, response):
        super().__init__(f"Bad status code: {response.status_code}")
        self.request = request
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code
