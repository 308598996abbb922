"""JSON-RPC client facade.

Example:

.. code-block:: python

    from eth_facade.client import Client

    client = Client("https://ethereum-rpc.publicnode.com")
    print(client.client_version())
    print(client.eth.block_number())

    # Queue calls and send them in one round trip
    client.batch(True)
    version = client.net.version()
    chain_id = client.eth.chain_id()
    client.execute()
    print(version.result(), chain_id.result())

"""

import logging
from functools import cached_property
from typing import Iterable

from eth_facade.config import create_provider_from_env
from eth_facade.exceptions import ConfigurationError
from eth_facade.namespaces.eth import Eth
from eth_facade.namespaces.net import Net
from eth_facade.namespaces.personal import Personal
from eth_facade.namespaces.shh import Shh
from eth_facade.namespaces.web3 import Web3
from eth_facade.provider.base import BaseProvider, Callback, PendingCall
from eth_facade.provider.http import HTTPProvider
from eth_facade.utils import Utils

logger = logging.getLogger(__name__)


class Client:
    """Entry point for JSON-RPC calls.

    - ``web3_`` methods are available directly on the client

    - Other namespaces are constructed lazily on the first access
      and share the client's provider
    """

    def __init__(self, provider: BaseProvider | str | None = None, allowed_methods: Iterable[str] | None = None):
        """
        :param provider:
            ``http://`` or ``https://`` URL or a provider instance.

        :param allowed_methods:
            Full RPC method names the client may call, e.g. ``{"eth_blockNumber", "net_version"}``.
            Each namespace uses its own default allow-list if not given.

        :raise ConfigurationError:
            URL is not HTTP(S)
        """
        self.allowed_methods = frozenset(allowed_methods) if allowed_methods is not None else None
        self._provider = self._create_provider(provider)
        self._web3 = Web3(self._provider, self.allowed_methods)

    def __repr__(self):
        return f"<Client {self._provider!r}>"

    @classmethod
    def from_env(cls, chain_id: int | None = None, allowed_methods: Iterable[str] | None = None) -> "Client":
        """Create a client using :py:mod:`eth_facade.config` environment variables."""
        return cls(create_provider_from_env(chain_id), allowed_methods)

    @staticmethod
    def _create_provider(provider: BaseProvider | str | None) -> BaseProvider | None:
        if provider is None or isinstance(provider, BaseProvider):
            return provider
        if isinstance(provider, str):
            return HTTPProvider(provider)
        raise ConfigurationError(f"Provider must be a URL or BaseProvider, got {provider!r}")

    @property
    def provider(self) -> BaseProvider | None:
        return self._provider

    @provider.setter
    def provider(self, provider: BaseProvider | str):
        """Swap the provider.

        Namespaces already constructed are updated to use the new provider.

        :raise ConfigurationError:
            The current provider still has queued batch calls.
            Call :py:meth:`execute` first.
        """
        if self._provider is not None and self._provider.batch_queue:
            raise ConfigurationError(f"Cannot swap provider with {len(self._provider.batch_queue)} queued batch calls, execute them first")
        self._provider = self._create_provider(provider)
        self._web3.provider = self._provider
        for name in ("eth", "net", "personal", "shh"):
            namespace = self.__dict__.get(name)
            if namespace is not None:
                namespace.provider = self._provider

    @cached_property
    def eth(self) -> Eth:
        return Eth(self._provider, self.allowed_methods)

    @cached_property
    def net(self) -> Net:
        return Net(self._provider, self.allowed_methods)

    @cached_property
    def personal(self) -> Personal:
        return Personal(self._provider, self.allowed_methods)

    @cached_property
    def shh(self) -> Shh:
        return Shh(self._provider, self.allowed_methods)

    @cached_property
    def utils(self) -> Utils:
        return Utils()

    def client_version(self, callback: Callback | None = None):
        """Call ``web3_clientVersion``."""
        return self._web3.client_version(callback=callback)

    def sha3(self, data: str | bytes, callback: Callback | None = None):
        """Call ``web3_sha3``."""
        return self._web3.sha3(data, callback=callback)

    def batch(self, status: bool):
        """Toggle batch mode on the shared provider.

        :raise ConfigurationError:
            No provider set
        """
        self._require_provider().batch(status)

    def execute(self) -> list[PendingCall]:
        """Send queued batch calls.

        See :py:meth:`eth_facade.provider.base.BaseProvider.execute`.
        """
        return self._require_provider().execute()

    def _require_provider(self) -> BaseProvider:
        if self._provider is None:
            raise ConfigurationError("Please set provider first.")
        return self._provider
