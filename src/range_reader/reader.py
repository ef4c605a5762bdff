r""":mod:`range_reader.reader` exposes a class
:class:`~range_reader.reader.RangeReader`, a seekable binary stream over a file
on a server with support for HTTP range requests.

Reads are translated into a single partial content GET request for exactly the
bytes asked for, apart from reads served by the optional prefetch buffer (the
leading bytes of the file, fetched once on initialisation).
"""

from __future__ import annotations

from io import SEEK_CUR, SEEK_END, SEEK_SET
from pathlib import Path
from urllib.parse import urlparse

import httpx
from ranges import Range

from .errors import (
    EndOfStreamError,
    MetadataError,
    RangeReaderError,
    RemoteFetchError,
    UnsupportedModeError,
)
from .http_utils import check_client, detect_header_value, range_header
from .log_utils import log
from .range_utils import covered_by_prefix, interval_range

__all__ = ["RangeReader", "open_reader"]


class RangeReader:
    """
    A file on a remote server, opened for reading at arbitrary positions by HTTP
    range requests.

    When the class is initialised a HEAD request is sent to determine the total
    size of the file, and if ``prefetch`` is positive the first ``prefetch`` bytes
    are requested and kept in memory, so that repeated reads of a file header
    do not each go over the network.

    The reader keeps a cursor (:meth:`~range_reader.reader.RangeReader.tell`),
    which is advanced by :meth:`~range_reader.reader.RangeReader.readinto` and
    :meth:`~range_reader.reader.RangeReader.read` and set by
    :meth:`~range_reader.reader.RangeReader.seek`. The positional methods
    :meth:`~range_reader.reader.RangeReader.readinto_at` and
    :meth:`~range_reader.reader.RangeReader.read_at` neither use nor move it.

    A reader is not thread-safe: the cursor is unsynchronised, so calls which
    use it must not be made concurrently on the same reader. Use one reader per
    thread instead (they may share a client).

    The client is not closed by the reader (you must handle this yourself, or
    call :func:`~range_reader.http_utils.close_default_client` if none was given).
    """

    _length: int
    _head: bytes = b""
    _position: int = 0
    _closed: bool = False

    def __init__(self, url: str, prefetch: int = 0, client=None):
        """
        Set up a reader for the file at ``url``, sending a HEAD request to set the
        total size of the file on the
        :attr:`~range_reader.reader.RangeReader.total_bytes` property.

        By default (if ``client`` is left as ``None``) a :class:`httpx.Client`
        shared between all readers is used.

        Args:
          url      : (:class:`str`) The URL of the file to be read
          prefetch : (:class:`int`) The number of leading bytes of the file to
                     fetch on initialisation and keep in memory (default: ``0``).
                     A failure to prefetch is logged but not raised.
          client   : (:class:`httpx.Client` | ``None``) The HTTPX client
                     to use for HTTP requests
        """
        if prefetch < 0:
            raise ValueError(f"{prefetch=} must not be negative")
        self.url = url
        self.client = check_client(client)
        self.send_head_request()
        if prefetch > 0:
            self.prefetch(length=prefetch)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__} ⠶ {self._position}/{self.total_bytes} @ "
            f"'{self.name}' from {self.domain}"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def total_bytes(self) -> int:
        """
        The total number of bytes (i.e. the length) of the file being read.
        """
        return self._length

    @property
    def prefetched(self) -> bytes:
        """
        The leading bytes of the file held in memory (empty if prefetching was not
        requested or failed).
        """
        return self._head

    @property
    def name(self) -> str:
        return Path(urlparse(self.url).path).name

    @property
    def domain(self) -> str:
        return urlparse(self.url).netloc

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Mark the reader closed. The client is left open, as it may be shared.
        """
        self._closed = True

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def check_not_closed(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed reader")

    def send_head_request(self) -> None:
        """
        Send a 'plain' HEAD request without range headers, to check the total content
        length. Any failure to do so is raised as a
        :class:`~range_reader.errors.MetadataError`.
        """
        try:
            req = self.client.build_request(method="HEAD", url=self.url)
            log.debug(f"HEAD {req.url}")
            resp = self.client.send(request=req)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise MetadataError(f"HEAD request failed: {exc}") from exc
        if not resp.is_success:
            raise MetadataError(f"HEAD request failed with status {resp.status_code}")
        total_length = self.check_response_length(headers=resp.headers, req=req.method)
        self._length = total_length

    def check_response_length(self, headers, req: str) -> int:
        """
        Return the length of the response from its ``content-length`` header as an
        integer, raising :class:`~range_reader.errors.MetadataError` if it is
        missing or is not made of decimal digits only.

        Args:
          headers : The response headers
          req     : The request method (to be reported in any error raised)
        """
        try:
            value = detect_header_value(
                headers=headers, key="content-length", source=f"{req} request response"
            )
            if not (value.isascii() and value.isdigit()):
                raise ValueError(f"Invalid content-length {value!r}")
        except (KeyError, ValueError) as exc:
            raise MetadataError(f"Could not determine the file size: {exc}") from exc
        return int(value)

    def prefetch(self, length: int) -> None:
        """
        Read the first ``length`` bytes of the file into the prefetch buffer. Only
        the bytes actually returned are kept, and on failure the buffer is left
        empty and a warning logged.

        Args:
          length : The number of leading bytes to fetch.
        """
        head = bytearray(length)
        try:
            total = self.readinto_at(head, 0)
        except (RangeReaderError, httpx.HTTPError) as exc:
            log.warning(f"Error prefetching head of {self.url}: {exc!r}")
            self._head = b""
        else:
            self._head = bytes(head[:total])

    def fetch_range(self, byte_range: Range) -> bytes:
        """
        Send a partial content GET request for ``byte_range`` and return the
        entire response body. Transport errors from the client are not caught.

        Args:
          byte_range : The non-empty :class:`~ranges.Range` to request.
        """
        req = self.client.build_request(
            method="GET", url=self.url, headers=range_header(byte_range)
        )
        log.debug(f"GET {req.url} {req.headers['range']}")
        resp = self.client.send(request=req)
        if not resp.is_success:
            raise RemoteFetchError(request=req, response=resp)
        return resp.content

    def _read_into(self, buffer, offset: int) -> int:
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("Cannot read into a read-only buffer")
        if not view.c_contiguous:
            raise ValueError("Cannot read into a non-contiguous buffer")
        view = view.cast("B")
        rng = interval_range(offset=offset, length=len(view))
        if covered_by_prefix(rng, prefix_length=len(self._head)):
            log.debug(f"Prefetch hit for {rng}")
            view[:] = self._head[rng.start : rng.end]
            return len(view)
        if rng.start >= self._length:
            # Requesting past the end of the file
            raise EndOfStreamError(f"{offset=} is not before the end ({self._length})")
        if rng.isempty():
            raise EndOfStreamError("Cannot read into an empty buffer")
        body = self.fetch_range(byte_range=rng)
        n = min(len(body), len(view))
        view[:n] = body[:n]
        return n

    def readinto(self, buffer) -> int:
        """
        Read up to ``len(buffer)`` bytes at the cursor into ``buffer``, advancing
        the cursor by the number of bytes read (which is returned). If an error is
        raised, the cursor is not moved.

        Args:
          buffer : A writable, contiguous bytes-like object, e.g. a :class:`bytearray`
        """
        self.check_not_closed()
        n = self._read_into(buffer, offset=self._position)
        self._position += n
        return n

    def readinto_at(self, buffer, offset: int) -> int:
        """
        Read up to ``len(buffer)`` bytes at ``offset`` into ``buffer``, returning
        the number of bytes read. The cursor is neither used nor moved.

        Args:
          buffer : A writable, contiguous bytes-like object, e.g. a :class:`bytearray`
          offset : The position in the file of the first byte to read
        """
        self.check_not_closed()
        return self._read_into(buffer, offset=offset)

    def read(self, size: int | None = None) -> bytes:
        """
        Read up to ``size`` bytes at the cursor (by default, the rest of the file),
        advancing the cursor past them.
        """
        if size is None or size < 0:
            size = max(self._length - self._position, 0)
        buffer = bytearray(size)
        n = self.readinto(buffer)
        return bytes(buffer[:n])

    def read_at(self, offset: int, size: int) -> bytes:
        """
        Read up to ``size`` bytes at ``offset`` without using or moving the cursor.
        """
        buffer = bytearray(size)
        n = self.readinto_at(buffer, offset=offset)
        return bytes(buffer[:n])

    def tell(self) -> int:
        return self._position

    def seek(self, position: int, whence: int = SEEK_SET) -> int:
        """
        Move the cursor, returning its new position. The position is not checked
        against the file bounds: reading from a position past the end raises
        :class:`~range_reader.errors.EndOfStreamError`, and from a negative one
        raises :class:`ValueError`.

        Note that for :data:`io.SEEK_END` the ``position`` is subtracted from the
        total size, i.e. ``seek(1, SEEK_END)`` moves to the last byte.

        Args:
          position : The offset to apply
          whence   : :data:`io.SEEK_SET` (from the start of the file),
                     :data:`io.SEEK_CUR` (from the cursor) or
                     :data:`io.SEEK_END` (back from the end of the file)
        """
        self.check_not_closed()
        if whence == SEEK_SET:
            self._position = position
        elif whence == SEEK_CUR:
            self._position += position
        elif whence == SEEK_END:
            self._position = self._length - position
        else:
            raise UnsupportedModeError(whence)
        return self._position


def open_reader(url: str, prefetch: int = 0, client=None) -> RangeReader:
    """Create a :class:`~range_reader.reader.RangeReader` for ``url``."""
    return RangeReader(url=url, prefetch=prefetch, client=client)
