"""JSON-RPC providers.

- :py:class:`eth_facade.provider.base.BaseProvider` runs the immediate and batch mode state machine

- :py:class:`eth_facade.provider.http.HTTPProvider` talks to a node over HTTP(S)
"""
