r"""When preparing a HTTP GET request, the HTTP `range request
<https://developer.mozilla.org/en-US/docs/Web/HTTP/Range_requests>`_
header must be provided as a :class:`dict`, for example:

.. code-block:: python

    {"range": "bytes=0-1"}

would request the two bytes at positions ``0`` and ``1`` (i.e. the inclusive
interval ``[0,1]``).

The total size of the file is instead read from the ``content-length`` header
of the response to a 'plain' HEAD request.

Unless a client is passed to a :class:`~range_reader.reader.RangeReader`, all
readers share a single :class:`httpx.Client` (created on first use, closed by
:func:`close_default_client`).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ranges import Range

import httpx

from .range_utils import range_termini

__all__ = [
    "DEFAULT_TIMEOUT_S",
    "byte_range_from_range_obj",
    "range_header",
    "detect_header_value",
    "check_client",
    "build_client",
    "default_client",
    "close_default_client",
]

DEFAULT_TIMEOUT_S = 30.0

_default_client: httpx.Client | None = None


def byte_range_from_range_obj(rng: Range) -> str:
    """Prepare the byte range substring for a HTTP `range request
    <https://developer.mozilla.org/en-US/docs/Web/HTTP/Range_requests>`_.

    For example:

      >>> from range_reader.http_utils import byte_range_from_range_obj
      >>> byte_range_from_range_obj(Range(0,2))
      '0-1'

    Args:
      rng : range of the bytes to be requested (0-based), which must not be empty

    Returns:
      A hyphen-separated string of the inclusive start and end positions.
    """
    start_byte, end_byte = range_termini(rng)
    return f"{start_byte}-{end_byte}"


def range_header(rng: Range) -> dict[str, str]:
    """
    Prepare a :class:`dict` to pass as a ``httpx`` request header
    with a single key ``range`` whose value is the byte range.

    For example:

      >>> from range_reader.http_utils import range_header
      >>> range_header(Range(900,950))
      {'range': 'bytes=900-949'}

    Args:
      rng : range of the bytes to be requested (0-based)

    Returns:
      :class:`dict` suitable to be passed to ``httpx.Client.build_request``
    """
    byte_range = byte_range_from_range_obj(rng)
    return {"range": f"bytes={byte_range}"}


def detect_header_value(headers: dict, key: str, source: str = "Response"):
    """
    Detect a title case, lower case, or capitalised version of the given string.
    """
    variants = key.title(), key.lower(), key.capitalize()
    try:
        return next(headers.get(k) for k in variants if k in headers)
    except StopIteration:
        raise KeyError(f"{source} was missing '{key}' header")


def check_client(client) -> httpx.Client:
    """
    Type check the client explicitly: only a synchronous :class:`httpx.Client` can
    serve the blocking reads of a :class:`~range_reader.reader.RangeReader`. If
    ``client`` is ``None``, the shared default client is returned instead.

    Args:
      client : (:class:`httpx.Client` | ``None``) The client to check
    """
    if client is None:
        return default_client()
    if isinstance(client, httpx.AsyncClient):
        raise TypeError(f"{client=} is async (use a synchronous `httpx.Client`)")
    if not isinstance(client, httpx.Client):
        raise TypeError(f"{client=} is not a HTTPX client")
    return client


def build_client(transport=None) -> httpx.Client:
    """Create a :class:`httpx.Client` with the settings of the default client: the
    default timeout, following redirects (e.g. from a download link to a CDN).

    Args:
      transport : (:class:`httpx.BaseTransport` | ``None``) The transport to send
                  requests with, or ``None`` for the usual HTTP transport
    """
    return httpx.Client(
        timeout=httpx.Timeout(DEFAULT_TIMEOUT_S),
        follow_redirects=True,
        transport=transport,
    )


def default_client() -> httpx.Client:
    """Get or create the process-wide :class:`httpx.Client` shared by readers
    which were not given a client of their own."""
    global _default_client
    if _default_client is None or _default_client.is_closed:
        _default_client = build_client()
    return _default_client


def close_default_client() -> None:
    """Close the shared default client. Call this at application shutdown."""
    global _default_client
    if _default_client is not None:
        _default_client.close()
        _default_client = None
