"""Exception classes raised by the JSON-RPC facade.

Every error the facade produces is a subclass of :py:class:`FacadeError`.

- Errors raised before anything is sent over the wire:
  :py:class:`ConfigurationError`, :py:class:`AllowListError`,
  :py:class:`ArgumentError`, :py:class:`ValidationError` and
  input side :py:class:`FormatError`

- Errors delivered after a round trip:
  :py:class:`TransportError`, :py:class:`ProtocolError`,
  :py:class:`RPCError` and output side :py:class:`FormatError`
"""

from typing import Any


class FacadeError(Exception):
    """Base class for all facade errors."""


class ConfigurationError(FacadeError):
    """Provider is missing or cannot be constructed."""


class AllowListError(FacadeError):
    """RPC method is not in the allow-list of the namespace."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unallowed rpc method: {method}")


class ArgumentError(FacadeError):
    """Wrong number of arguments or a bad callback."""


class ValidationError(ArgumentError):
    """A positional validator rejected an argument."""

    def __init__(self, method: str, position: int, value: Any):
        self.method = method
        self.position = position
        self.value = value
        super().__init__(f"Invalid argument #{position} for {method}: {value!r}")


class FormatError(FacadeError):
    """A formatter could not convert a value.

    :py:attr:`position` is filled in when the formatter was applied
    as a part of a positional formatter list.
    """

    def __init__(self, message: str, value: Any = None, position: int | None = None):
        self.value = value
        self.position = position
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.position is not None:
            return f"{msg} (position #{self.position}, value {self.value!r})"
        return msg


class TransportError(FacadeError):
    """Network level failure: connection refused, timeout, bad HTTP status, undecodable body."""


class ProtocolError(FacadeError):
    """JSON-RPC response does not have the expected shape."""


class RPCError(FacadeError):
    """JSON-RPC node replied with an error object.

    E.g. ``{'code': -32000, 'message': 'nonce too low'}``.
    """

    def __init__(self, method: str, error: dict):
        self.method = method
        self.code = error.get("code")
        self.message = error.get("message", "")
        self.data = error.get("data")
        super().__init__(f"{method} failed with code {self.code}: {self.message}")


class CallNotReadyError(FacadeError):
    """Result of a batch call was asked before the batch was executed, or after it was cancelled."""
