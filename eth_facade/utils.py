"""Bunch of random utilities.

- :py:class:`Utils` unit conversion and hex helpers, exposed as ``client.utils``

- Logging set up
"""

import logging
import os
from decimal import Decimal
from pathlib import Path
from urllib.parse import urlparse

from eth_typing import ChecksumAddress, HexStr
from eth_utils import is_checksum_address, is_hex
from hexbytes import HexBytes
from web3 import Web3

from eth_facade.exceptions import ConfigurationError
from eth_facade.formatters import is_valid_address

logger = logging.getLogger(__name__)


def get_url_domain(url: str) -> str:
    """Redact URL so that only domain is displayed.

    Some services e.g. infura use path as an API key.
    """
    parsed = urlparse(url)
    if parsed.port in (80, 443, None):
        return parsed.hostname
    else:
        return f"{parsed.hostname}:{parsed.port}"


class Utils:
    """Conversion helpers that do not need a JSON-RPC connection.

    Example:

    .. code-block:: python

        client = Client("https://ethereum-rpc.publicnode.com")
        assert client.utils.to_wei("1", "ether") == 10**18
        assert client.utils.to_hex(255) == "0xff"

    """

    @staticmethod
    def to_hex(value: int | str | bytes | bool) -> HexStr:
        """Encode a number, text or bytes as ``0x`` hex.

        Hex strings are returned as is.
        """
        if isinstance(value, str):
            if is_zero_prefixed(value) and is_hex(value):
                return HexStr(value)
            return Web3.to_hex(text=value)
        return Web3.to_hex(value)

    @staticmethod
    def hex_to_int(value: str) -> int:
        return int(value, 16)

    @staticmethod
    def is_zero_prefixed(value: str) -> bool:
        return is_zero_prefixed(value)

    @staticmethod
    def strip_zero(value: str) -> str:
        """Remove ``0x`` prefix."""
        if is_zero_prefixed(value):
            return value[2:]
        return value

    @staticmethod
    def is_negative(value: str) -> bool:
        return value.startswith("-")

    @staticmethod
    def is_address(value: str) -> bool:
        """Address with a valid checksum, if mixed case."""
        return is_valid_address(value)

    @staticmethod
    def is_address_checksum(value: str) -> bool:
        return isinstance(value, str) and is_checksum_address(value)

    @staticmethod
    def to_checksum_address(value: str) -> ChecksumAddress:
        return Web3.to_checksum_address(value)

    @staticmethod
    def is_hex(value: str) -> bool:
        return isinstance(value, str) and is_hex(value)

    @staticmethod
    def sha3(value: str | bytes) -> HexBytes:
        """Keccak-256 of text, or of raw bytes for ``0x`` hex strings and ``bytes``."""
        if isinstance(value, str):
            if is_zero_prefixed(value) and is_hex(value):
                return Web3.keccak(hexstr=value)
            return Web3.keccak(text=value)
        return Web3.keccak(value)

    @staticmethod
    def to_wei(amount: int | str | Decimal, unit: str) -> int:
        return Web3.to_wei(Decimal(amount), unit)

    @staticmethod
    def from_wei(amount: int, unit: str) -> Decimal:
        return Decimal(Web3.from_wei(amount, unit))

    @staticmethod
    def to_ether(amount: int | str | Decimal, unit: str) -> Decimal:
        """Convert an amount in any unit to ether."""
        return Decimal(Web3.from_wei(Utils.to_wei(amount, unit), "ether"))


def is_zero_prefixed(value: str) -> bool:
    return isinstance(value, str) and value.startswith(("0x", "0X"))


def setup_console_logging(
    default_log_level: str = "warning",
    facade_log_level: str | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Set up coloured log output for scripts using the client.

    - ``LOG_LEVEL`` environment variable overrides ``default_log_level``

    - ``facade_log_level="debug"`` shows every queued, sent and decoded call
      without turning on debug output of other libraries

    - ``urllib3`` connection pool chatter is muted

    :param default_log_level:
        Root log level if ``LOG_LEVEL`` environment variable is not set.

    :param facade_log_level:
        Level for ``eth_facade`` loggers. Same as root if not given.

    :param log_file:
        Also write log output to this file, truncated on start.

    :raise ConfigurationError:
        Unknown log level name

    :return:
        Root logger
    """
    level = _parse_log_level(os.environ.get("LOG_LEVEL", default_log_level))

    fmt = "%(asctime)s %(name)-36s %(levelname)-8s %(message)s"
    date_fmt = "%H:%M:%S"

    try:
        # Optional dev dependency
        import coloredlogs

        coloredlogs.install(level=level, fmt=fmt, datefmt=date_fmt)
    except ImportError:
        # non-ANSI e.g. Docker
        logging.basicConfig(level=level, format=fmt, datefmt=date_fmt)

    root = logging.getLogger()
    root.setLevel(level)

    if facade_log_level:
        logging.getLogger("eth_facade").setLevel(_parse_log_level(facade_log_level))

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(min(logging.INFO, level))
        file_handler.setFormatter(logging.Formatter(fmt, date_fmt))
        root.addHandler(file_handler)

    # Mute noise
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
    return root


def _parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"No such log level: {name}")
    return level
