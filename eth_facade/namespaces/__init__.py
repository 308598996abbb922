"""JSON-RPC namespaces.

Each module holds the method table of one namespace and its
:py:class:`eth_facade.namespace.Namespace` subclass.
"""
