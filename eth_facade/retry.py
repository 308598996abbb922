"""Transport error classification for retries.

JSON-RPC service providers are unreliable: they throttle, drop connections
and return random 5xx errors. Read-only calls can be retried after a sleep.

- See :py:class:`eth_facade.provider.http.HTTPProvider`
"""

import logging
from http.client import RemoteDisconnected
from typing import Collection, Tuple

from requests.exceptions import (
    ChunkedEncodingError,
    ConnectionError,
    ContentDecodingError,
    HTTPError,
    Timeout,
    TooManyRedirects,
)

logger = logging.getLogger(__name__)


#: List of exceptions we know we should retry after some timeout
#:
DEFAULT_RETRYABLE_EXCEPTIONS: Tuple[type[BaseException], ...] = (
    ConnectionError,
    Timeout,
    TooManyRedirects,
    # requests.exceptions.ChunkedEncodingError: ("Connection broken: InvalidChunkLength(got length b'', 0 bytes read)", InvalidChunkLength(got length b'', 0 bytes read))
    ChunkedEncodingError,
    # urllib3.exceptions.ProtocolError: ('Connection aborted.', RemoteDisconnected('Remote end closed connection without response'))
    RemoteDisconnected,
    # requests.exceptions.ContentDecodingError: ('Received response with content-encoding: zstd, but failed to decode it.', ...)
    ContentDecodingError,
)

#: List of HTTP status codes we know we might want to retry after a timeout
#:
#: Taken from https://stackoverflow.com/a/72302017/315168
DEFAULT_RETRYABLE_HTTP_STATUS_CODES = (
    429,
    500,
    502,
    503,
    504,
    520,  # CloudFlare: Unknown error
    525,  # SSL handshake failed
)


def is_retryable_http_exception(
    exc: Exception,
    retryable_exceptions: Tuple[type[BaseException], ...] = DEFAULT_RETRYABLE_EXCEPTIONS,
    retryable_status_codes: Collection[int] = DEFAULT_RETRYABLE_HTTP_STATUS_CODES,
) -> bool:
    """Helper to check retryable errors from JSON-RPC transport.

    Retryable reasons are connection timeouts, API throttling and such.

    :param exc:
        Exception raised by :py:mod:`requests`

    :param retryable_exceptions:
        Exception classes we can retry.

    :param retryable_status_codes:
        HTTP status codes we can retry. E.g. 429 Too Many requests.
    """

    if isinstance(exc, HTTPError):
        if exc.response is None:
            return False
        return exc.response.status_code in retryable_status_codes

    return isinstance(exc, retryable_exceptions)
