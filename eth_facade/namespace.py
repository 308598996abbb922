"""JSON-RPC namespace dispatcher.

A namespace groups JSON-RPC methods sharing a prefix, like ``eth_`` or ``net_``.
Each namespace class lists its operations explicitly with :py:func:`rpc_method`:

.. code-block:: python

    class Net(Namespace):
        namespace = "net"
        method_table = NET_METHODS

        version = rpc_method("version")
        peer_count = rpc_method("peerCount")

    net = Net(provider)
    print(net.peer_count())

A call goes through :py:meth:`Namespace.call`:

1. Check we have a provider
2. Check the RPC method is in the allow-list
3. Get the cached :py:class:`eth_facade.method.MethodDescriptor`
4. Validate and format arguments
5. Hand over to :py:meth:`eth_facade.provider.base.BaseProvider.send`
"""

import logging
import re
import threading
from typing import Any, Callable, ClassVar, Iterable, Mapping

from eth_facade.exceptions import AllowListError, ArgumentError, ConfigurationError
from eth_facade.method import MethodDescriptor
from eth_facade.provider.base import BaseProvider, Callback

logger = logging.getLogger(__name__)

#: RPC method name -> descriptor factory
MethodTable = Mapping[str, Callable[[], MethodDescriptor]]

_METHOD_NAME = re.compile(r"^[a-zA-Z0-9]+$")


class Namespace:
    """Base class for JSON-RPC namespaces.

    - Holds a reference to the shared provider, does not own it

    - Caches one :py:class:`MethodDescriptor` per RPC method for its lifetime
    """

    #: Lowercase JSON-RPC prefix, e.g. ``eth``
    namespace: ClassVar[str] = ""

    #: Every method this namespace knows how to call
    method_table: ClassVar[MethodTable] = {}

    #: Allow-list used when the caller does not give one.
    #: ``None`` allows every method in :py:attr:`method_table`.
    default_allowed_methods: ClassVar[frozenset[str] | None] = None

    def __init__(self, provider: BaseProvider | None, allowed_methods: Iterable[str] | None = None):
        """
        :param provider:
            Shared JSON-RPC provider

        :param allowed_methods:
            Full RPC method names, e.g. ``eth_getBalance``, this namespace may call.
            Names belonging to other namespaces are ignored.
        """
        self.provider = provider

        if allowed_methods is None:
            if self.default_allowed_methods is not None:
                allowed = self.default_allowed_methods
            else:
                allowed = self.method_table.keys()
        else:
            prefix = f"{self.namespace}_"
            allowed = [m for m in allowed_methods if m.startswith(prefix)]

        self.allowed_methods = frozenset(allowed)
        self._descriptors: dict[str, MethodDescriptor] = {}
        self._lock = threading.Lock()

    def __repr__(self):
        return f"<{self.__class__.__name__} namespace, {len(self.allowed_methods)} allowed methods>"

    def get_rpc_method_name(self, name: str) -> str:
        """Map a method name like ``getBalance`` to ``eth_getBalance``."""
        if not isinstance(name, str) or not _METHOD_NAME.match(name):
            raise AllowListError(f"{self.namespace}_{name}")
        return f"{self.namespace}_{name}"

    def get_descriptor(self, rpc_method: str) -> MethodDescriptor:
        """Get the cached descriptor, or build it from the method table."""
        with self._lock:
            descriptor = self._descriptors.get(rpc_method)
            if descriptor is None:
                factory = self.method_table.get(rpc_method)
                if factory is None:
                    raise AllowListError(rpc_method)
                descriptor = factory()
                assert descriptor.name == rpc_method, f"Method table entry {rpc_method} built {descriptor.name}"
                self._descriptors[rpc_method] = descriptor
                logger.debug("Created descriptor %s", descriptor)
            return descriptor

    def call(self, name: str, *args: Any, callback: Callback | None = None) -> Any:
        """Call a JSON-RPC method of this namespace.

        :param name:
            Method name without the namespace prefix, e.g. ``getBalance``.

        :param args:
            Method params before formatting.

        :param callback:
            Optional ``callback(error, value)``, called exactly once.

        :return:
            See :py:meth:`eth_facade.provider.base.BaseProvider.send`

        :raise ConfigurationError:
            No provider set

        :raise AllowListError:
            Method is not allowed or not known

        :raise ArgumentError:
            Bad arguments or callback
        """
        if self.provider is None:
            raise ConfigurationError("Please set provider first.")

        rpc_method = self.get_rpc_method_name(name)

        if rpc_method not in self.allowed_methods:
            raise AllowListError(rpc_method)

        if callback is not None and not callable(callback):
            raise ArgumentError(f"Callback for {rpc_method} must be callable, got {callback!r}")

        descriptor = self.get_descriptor(rpc_method)
        params = descriptor.prepare(args)
        return self.provider.send(descriptor, params, callback)


class _RPCMethod:
    """Class attribute exposing one RPC method as a bound Python method."""

    def __init__(self, name: str):
        self.name = name
        self.attr_name = name

    def __set_name__(self, owner, attr_name):
        self.attr_name = attr_name

    def __get__(self, instance: Namespace | None, owner=None):
        if instance is None:
            return self

        name = self.name

        def method(*args, callback: Callback | None = None):
            return instance.call(name, *args, callback=callback)

        method.__name__ = self.attr_name
        method.__doc__ = f"Call ``{instance.namespace}_{name}``."
        return method


def rpc_method(name: str) -> Any:
    """Declare a namespace operation.

    :param name:
        JSON-RPC method name without the namespace prefix
    """
    return _RPCMethod(name)
