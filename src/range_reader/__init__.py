r"""
:mod:`range_reader` provides random access to a file on a web server through
an API familiar to users of the standard library :mod:`io` module, without
downloading the file in full. It uses :class:`~ranges.Range` (from the externally
maintained `python-ranges <https://python-ranges.readthedocs.io/en/latest/>`_
library) to represent the byte interval of each read.

Servers with support for `HTTP range requests
<https://developer.mozilla.org/en-US/docs/Web/HTTP/Range_requests>`_
can provide partial content requests, so that a format parser can jump between
known offsets in a large remote file (e.g. the central directory at the end of a
zip) while only the bytes it reads are transferred.

A :class:`~range_reader.reader.RangeReader` is initialised by providing:

- a URL (the file to be read)
- (optionally) a number of bytes to prefetch from the start of the file
  (the 'head' of the file, kept in memory to serve repeated header reads)
- (optionally) a client (:class:`httpx.Client`), or else a single default
  client shared by all readers is used

A HTTP HEAD request is sent on initialisation to check the total length of the
file (:attr:`~range_reader.reader.RangeReader.total_bytes`).

    >>> from io import SEEK_END
    >>> from range_reader import RangeReader, _EXAMPLE_URL
    >>> r = RangeReader(url=_EXAMPLE_URL, prefetch=4) # doctest: +SKIP
    >>> r # doctest: +SKIP
    RangeReader ⠶ 0/11 @ 'example_text_file.txt' from raw.githubusercontent.com
    >>> len(r.prefetched) # doctest: +SKIP
    4

Reads at the cursor work as on any binary file, while
:meth:`~range_reader.reader.RangeReader.read_at` and
:meth:`~range_reader.reader.RangeReader.readinto_at` read at a given position
without moving the cursor:

    >>> r.read(1) # doctest: +SKIP
    b'P'
    >>> r.seek(2, SEEK_END) # doctest: +SKIP
    9
    >>> r.read_at(0, 1) # doctest: +SKIP
    b'P'
    >>> r.tell() # doctest: +SKIP
    9

- Note that :meth:`~range_reader.reader.RangeReader.seek` with ``whence`` of
  :data:`io.SEEK_END` subtracts the offset from the total size, so the offset to
  pass is positive.

Reading at or past the end of the file raises
:class:`~range_reader.errors.EndOfStreamError`, and a range request answered with
a status code outside the 2xx range raises
:class:`~range_reader.errors.RemoteFetchError`.
"""

# Get classes into package namespace but exclude from __all__ so Sphinx can access types

from . import errors, http_utils, range_utils
from .errors import (
    EndOfStreamError,
    MetadataError,
    RangeReaderError,
    RemoteFetchError,
    TransportError,
    UnsupportedModeError,
)
from .http_utils import close_default_client
from .log_utils import set_up_logging
from .reader import RangeReader, open_reader

__all__ = [
    "reader",
    "errors",
    "http_utils",
    "range_utils",
    "log_utils",
]

__version__ = "0.1.0"
__author__ = "Louis Maddox"
__license__ = "MIT"
__description__ = "Seekable random access to remote files via HTTP range requests."
__url__ = "https://github.com/lmmx/range-reader"
__uri__ = __url__
__email__ = "louismmx@gmail.com"

_EXAMPLE_DATA_URL = "https://raw.githubusercontent.com/lmmx/range-streams/master/data/"
_EXAMPLE_URL = f"{_EXAMPLE_DATA_URL}example_text_file.txt"
