"""JSON-RPC over HTTP(S).

- Uses :py:mod:`requests` with a keep-alive session

- Uses :py:mod:`ujson` for encoding and decoding, as JSON-RPC replies can be large

- Retries read-only calls on throttling and connection errors with sleep and backoff
"""

import logging
import threading
import time
from typing import Any, Collection, Tuple
from urllib.parse import urlparse

import requests
import ujson
from requests import Session

from eth_facade.exceptions import ConfigurationError, TransportError
from eth_facade.provider.base import BaseProvider
from eth_facade.retry import DEFAULT_RETRYABLE_EXCEPTIONS, DEFAULT_RETRYABLE_HTTP_STATUS_CODES, is_retryable_http_exception
from eth_facade.utils import get_url_domain

logger = logging.getLogger(__name__)


last_headers_storage = threading.local()


def get_last_headers() -> dict:
    """Get HTTP reply headers of the last failed JSON-RPC call in this thread.

    Gives insight to routing of proxy providers.

    :return:
        Headers, HTTP status code and redacted endpoint domain
    """
    return getattr(last_headers_storage, "headers", {})


def is_http_url(url: str) -> bool:
    """Check the URL uses ``http://`` or ``https://`` and has a host."""
    if not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class HTTPProvider(BaseProvider):
    """JSON-RPC provider talking to a node over HTTP.

    Example:

    .. code-block:: python

        from eth_facade.provider.http import HTTPProvider

        provider = HTTPProvider("https://ethereum-rpc.publicnode.com", timeout=10)

    """

    def __init__(
        self,
        endpoint_uri: str,
        session: Session | None = None,
        timeout: float = 30.0,
        retries: int = 3,
        sleep: float = 1.0,
        backoff: float = 1.6,
        retryable_exceptions: Tuple[type[BaseException], ...] = DEFAULT_RETRYABLE_EXCEPTIONS,
        retryable_status_codes: Collection[int] = DEFAULT_RETRYABLE_HTTP_STATUS_CODES,
    ):
        """
        :param endpoint_uri:
            ``http://`` or ``https://`` node URL.

        :param session:
            Pass your own :py:class:`requests.Session` to share a connection pool.

        :param timeout:
            Seconds to wait for a reply.

        :param retries:
            How many times we retry read-only calls before giving up.

        :param sleep:
            Seconds between retries.

        :param backoff:
            Multiplier to increase sleep.

        :raise ConfigurationError:
            The URL is not HTTP(S)
        """
        super().__init__()

        if not is_http_url(endpoint_uri):
            raise ConfigurationError(f"Not a http:// or https:// URL: {endpoint_uri!r}")

        self._endpoint_uri = endpoint_uri
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retries = retries
        self.sleep = sleep
        self.backoff = backoff
        self.retryable_exceptions = retryable_exceptions
        self.retryable_status_codes = retryable_status_codes

        #: How many retries we have done in total
        self.retry_count = 0

    def __repr__(self):
        return f"<HTTPProvider {get_url_domain(self.endpoint_uri)}>"

    @property
    def endpoint_uri(self) -> str:
        return self._endpoint_uri

    def make_request(self, payload: dict | list[dict], retryable: bool = False) -> Any:
        """POST a JSON-RPC payload.

        :raise TransportError:
            After retries, if any, have been exhausted
        """
        data = ujson.dumps(payload)
        attempts = self.retries + 1 if retryable else 1
        current_sleep = self.sleep

        for i in range(attempts):
            try:
                return self._post(data)
            except requests.exceptions.RequestException as e:
                if i < attempts - 1 and is_retryable_http_exception(
                    e,
                    retryable_exceptions=self.retryable_exceptions,
                    retryable_status_codes=self.retryable_status_codes,
                ):
                    logger.warning(
                        "Encountered JSON-RPC retryable error %s at %s, retrying in %f seconds, retry #%d / %d",
                        e,
                        get_url_domain(self.endpoint_uri),
                        current_sleep,
                        i + 1,
                        self.retries,
                    )
                    time.sleep(current_sleep)
                    current_sleep *= self.backoff
                    self.retry_count += 1
                    continue

                raise TransportError(f"JSON-RPC request to {get_url_domain(self.endpoint_uri)} failed: {e}") from e

        raise AssertionError("Should never be reached")

    def _post(self, data: str) -> Any:
        last_headers_storage.headers = {}

        response = self.session.post(
            self.endpoint_uri,
            data=data,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

        if response.status_code >= 300:
            # Only record headers in the case of problems
            last_headers_storage.headers = dict(response.headers.items())
            last_headers_storage.headers["endpoint_uri"] = get_url_domain(self.endpoint_uri)
            last_headers_storage.headers["status_code"] = response.status_code

        response.raise_for_status()

        try:
            return ujson.loads(response.content)
        except ValueError as e:
            raise TransportError(f"Could not decode JSON-RPC reply from {get_url_domain(self.endpoint_uri)}: {response.content[:200]!r}") from e
