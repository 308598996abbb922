"""Static descriptions of JSON-RPC methods.

Each JSON-RPC method the facade can call is described by a :py:class:`MethodDescriptor`:
its name, how many arguments it takes, how the arguments are validated and formatted
and how the result is formatted.

Example:

.. code-block:: python

    from eth_facade.formatters import format_address, format_block_identifier, to_int
    from eth_facade.method import MethodDescriptor
    from eth_facade.validators import is_address_value, is_block_identifier

    get_balance = MethodDescriptor(
        name="eth_getBalance",
        arg_count=2,
        validators=(is_address_value, is_block_identifier),
        input_formatters=(format_address, format_block_identifier),
        output_formatters=(to_int,),
        defaults={1: "latest"},
    )

    params = get_balance.prepare(["0x6B175474E89094C44Da98b954EedeAC495271d0F"])
    assert params == ["0x6b175474e89094c44da98b954eedeac495271d0f", "latest"]

"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from eth_facade.exceptions import ArgumentError, ValidationError
from eth_facade.formatters import Formatter, apply_formatters
from eth_facade.validators import Validator


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """Shape, validation and formatting rules of one JSON-RPC method.

    - Immutable

    - Created lazily by :py:class:`eth_facade.namespace.Namespace`
      and cached for the lifetime of the namespace object
    """

    #: JSON-RPC method name, e.g. ``eth_getBalance``
    name: str

    #: How many positional params the method takes
    arg_count: int = 0

    #: Positional predicates, ``None`` accepts any value
    validators: tuple[Validator | None, ...] = ()

    #: Positional input formatters, ``None`` passes the value through
    input_formatters: tuple[Formatter | None, ...] = ()

    #: Output formatters. Position 0 formats the result.
    output_formatters: tuple[Formatter | None, ...] = ()

    #: Position -> default value for trailing params the caller may leave out
    defaults: Mapping[int, Any] = field(default_factory=dict)

    #: The method only reads node state and can be retried on transport errors
    retryable: bool = False

    def __post_init__(self):
        assert self.arg_count >= 0, f"Bad arg count {self.arg_count}"
        assert len(self.validators) <= self.arg_count, f"{self.name}: more validators than arguments"
        assert all(0 <= pos < self.arg_count for pos in self.defaults), f"{self.name}: default out of range"
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))

    def __repr__(self):
        return f"<MethodDescriptor {self.name}/{self.arg_count}>"

    @property
    def min_arg_count(self) -> int:
        """Number of params that must be given, trailing defaults excluded."""
        count = self.arg_count
        while count > 0 and (count - 1) in self.defaults:
            count -= 1
        return count

    def fill_defaults(self, args: Sequence[Any]) -> list[Any]:
        """Append default values for omitted trailing params."""
        filled = list(args)
        for position in range(len(filled), self.arg_count):
            if position not in self.defaults:
                break
            filled.append(self.defaults[position])
        return filled

    def validate(self, args: Sequence[Any]) -> bool:
        """Check the argument count and run positional validators.

        :raise ArgumentError:
            Wrong number of arguments

        :raise ValidationError:
            A validator rejected an argument

        :return:
            Always ``True``
        """
        if len(args) != self.arg_count:
            if self.min_arg_count != self.arg_count:
                expected = f"{self.min_arg_count} - {self.arg_count}"
            else:
                expected = str(self.arg_count)
            raise ArgumentError(f"{self.name} takes {expected} arguments, got {len(args)}")

        for position, (validator, value) in enumerate(zip(self.validators, args)):
            if validator is not None and not validator(value):
                raise ValidationError(self.name, position, value)

        return True

    def transform(self, args: Sequence[Any], formatters: Sequence[Formatter | None]) -> list[Any]:
        """Apply formatters positionally to a copy of the arguments."""
        return apply_formatters(args, formatters)

    def prepare(self, args: Sequence[Any]) -> list[Any]:
        """Fill defaults, validate and format arguments to JSON-RPC params."""
        filled = self.fill_defaults(args)
        self.validate(filled)
        return self.transform(filled, self.input_formatters)

    def format_output(self, result: Any) -> Any:
        """Run the JSON-RPC result through the output formatters."""
        if not self.output_formatters:
            return result
        return apply_formatters([result], self.output_formatters)[0]
